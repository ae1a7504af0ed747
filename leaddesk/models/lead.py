"""
Lead model - the contact or company a deal is being worked with.
"""
import uuid
from datetime import datetime
from typing import Optional

from sqlmodel import SQLModel, Field


class Lead(SQLModel, table=True):
    """
    Lead entity - represents a potential customer/contact.
    Owns zero or more deals.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    
    # Basic info
    name: str = Field(index=True)
    company: str = Field(index=True)
    
    # Contact info
    email: Optional[str] = Field(default=None, index=True)
    phone: Optional[str] = None
    address: Optional[str] = None
    
    # Qualification
    value: Optional[int] = None  # Estimated value in GBP
    source: Optional[str] = None  # Referral, LinkedIn, Website, Manual
    owner_name: str = Field(default="Unassigned")
    
    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
