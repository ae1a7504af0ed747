"""
Outreach plan schemas.
"""
import uuid
from typing import Optional, List, Any
from datetime import datetime
from pydantic import BaseModel

from leaddesk.models.outreach import StepStatus


class PlanCandidate(BaseModel):
    """A validated, normalized step proposal, not yet scheduled."""
    offset_days: int
    channel: str
    intent: str
    goal: Optional[str] = None


class PlanDealContext(BaseModel):
    """Read-only view of a deal used to plan its outreach."""
    deal_id: uuid.UUID
    title: Optional[str] = None
    stage: Optional[str] = None
    value: Optional[int] = None
    lead_name: Optional[str] = None
    company: Optional[str] = None
    last_contact_type: Optional[str] = None
    last_contact_date: Optional[datetime] = None
    recent_activities: List[dict] = []
    
    @property
    def has_prior_contact(self) -> bool:
        return self.last_contact_date is not None or len(self.recent_activities) > 0


class OutreachPlanRequest(BaseModel):
    """Generate an outreach plan for a deal."""
    deal_id: uuid.UUID
    horizon_days: Optional[Any] = None  # Falls back to the default unless a positive whole number
    
    class Config:
        json_schema_extra = {
            "example": {
                "deal_id": "550e8400-e29b-41d4-a716-446655440000",
                "horizon_days": 14
            }
        }


class OutreachStepResponse(BaseModel):
    """Outreach step response."""
    id: uuid.UUID
    deal_id: uuid.UUID
    due_date: datetime
    channel: str
    intent: str
    goal: Optional[str]
    status: str
    created_at: datetime
    completed_at: Optional[datetime]
    
    class Config:
        from_attributes = True


class OutreachPlanResponse(BaseModel):
    """Steps persisted by one plan generation."""
    deal_id: uuid.UUID
    steps: List[OutreachStepResponse]


class StepStatusUpdate(BaseModel):
    """Change an outreach step's status."""
    status: StepStatus


class StepStatusResponse(BaseModel):
    ok: bool = True
    status: StepStatus
