"""
Lead schemas.
"""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator


class LeadCreate(BaseModel):
    """Create a new lead."""
    name: str
    company: str
    email: Optional[str] = None
    value: Optional[int] = None
    source: Optional[str] = None
    address: Optional[str] = None
    phone: Optional[str] = None
    owner_name: Optional[str] = None
    created_at: Optional[datetime] = None
    
    @field_validator("name", "company")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value
    
    class Config:
        json_schema_extra = {
            "example": {
                "name": "Sarah Thompson",
                "company": "Thompson Logistics",
                "email": "sarah@thompsonlogistics.co.uk",
                "value": 12000,
                "source": "Referral"
            }
        }


class LeadResponse(BaseModel):
    """Lead response."""
    id: uuid.UUID
    name: str
    company: str
    email: Optional[str]
    value: Optional[int]
    source: Optional[str]
    address: Optional[str]
    phone: Optional[str]
    owner_name: str
    created_at: datetime
    
    class Config:
        from_attributes = True
