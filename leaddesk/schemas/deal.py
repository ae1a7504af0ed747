"""
Deal schemas.
"""
import uuid
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, field_validator


class DealCreate(BaseModel):
    """Create a new deal for an existing lead."""
    lead_id: uuid.UUID
    title: str
    stage: str = "New"
    value: int = 0
    next_action: Optional[str] = None
    next_action_date: Optional[datetime] = None
    reminder_channel: Optional[str] = None
    ai_auto_reminder_enabled: bool = False
    owner_name: Optional[str] = None
    
    @field_validator("title", "stage")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value
    
    class Config:
        json_schema_extra = {
            "example": {
                "lead_id": "550e8400-e29b-41d4-a716-446655440000",
                "title": "AI dispatch optimisation",
                "stage": "Qualified",
                "value": 12000,
                "next_action": "Schedule technical scoping call"
            }
        }


class DealDetailsUpdate(BaseModel):
    """Update a deal's value and next action."""
    value: Optional[int] = None
    next_action: Optional[str] = None
    next_action_date: Optional[datetime] = None


class DealStageUpdate(BaseModel):
    """Move a deal to another pipeline stage."""
    stage: str
    
    @field_validator("stage")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class DealResponse(BaseModel):
    """Deal response."""
    id: uuid.UUID
    lead_id: uuid.UUID
    title: str
    stage: str
    value: int
    next_action: Optional[str]
    next_action_date: Optional[datetime]
    reminder_channel: Optional[str]
    ai_auto_reminder_enabled: bool
    owner_name: str
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True
