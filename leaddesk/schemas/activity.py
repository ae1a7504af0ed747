"""
Deal activity schemas.
"""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator


class ActivityCreate(BaseModel):
    """Log an activity against a deal."""
    type: str
    note: str
    created_at: Optional[datetime] = None
    
    @field_validator("type", "note")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ActivityResponse(BaseModel):
    """Deal activity response."""
    id: uuid.UUID
    deal_id: uuid.UUID
    type: str
    note: str
    created_at: datetime
    
    class Config:
        from_attributes = True
