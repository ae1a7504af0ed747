"""
Deal activity model - free-text log of calls, emails, notes and stage changes.
Recent activities feed the outreach planner's contact history.
"""
import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field


class DealActivity(SQLModel, table=True):
    """
    A single logged touchpoint or event on a deal.
    """
    __tablename__ = "deal_activity"
    
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    deal_id: uuid.UUID = Field(foreign_key="deal.id", index=True)
    
    type: str = Field(index=True)  # call, email, meeting, note, status_change
    note: str
    
    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow, index=True)


# Activity type constants for consistency
class ActivityTypes:
    CALL = "call"
    EMAIL = "email"
    MEETING = "meeting"
    NOTE = "note"
    STATUS_CHANGE = "status_change"
