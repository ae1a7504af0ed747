"""
Common schemas used across multiple endpoints.
"""
from pydantic import BaseModel


class SuccessResponse(BaseModel):
    """Simple success flag response."""
    success: bool = True


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = "healthy"
    service: str = "lead-desk-backend"
    version: str = "1.0.0"
