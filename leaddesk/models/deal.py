"""
Deal model - a sales opportunity moving through the pipeline.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class Deal(SQLModel, table=True):
    """
    Deal entity - a pipeline opportunity for a lead.
    The stage drives outreach intent normalization.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    lead_id: uuid.UUID = Field(foreign_key="lead.id", index=True)
    
    title: str
    stage: str = Field(default="New", index=True)  # New, Qualified, Proposal Sent, Won, Lost
    value: int = Field(default=0)  # GBP
    
    # Next action
    next_action: Optional[str] = None
    next_action_date: Optional[datetime] = None
    
    # Reminders
    reminder_channel: Optional[str] = None  # WhatsApp, SMS, Email
    ai_auto_reminder_enabled: bool = Field(default=False)
    
    owner_name: str = Field(default="Unassigned")
    
    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)


# Stage constants for consistency
class Stages:
    NEW = "New"
    QUALIFIED = "Qualified"
    PROPOSAL_SENT = "Proposal Sent"
    WON = "Won"
    LOST = "Lost"
