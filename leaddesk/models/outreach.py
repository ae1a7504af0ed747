"""
Outreach step model - one scheduled touchpoint of a deal's outreach plan.

A step's status is a tagged variant (pending / done at / skipped at). The
``status`` and ``completed_at`` columns are only written together through
``OutreachStep.apply_state``, so ``completed_at`` is set exactly when the
step is no longer pending.
"""
import uuid
from datetime import datetime
from typing import Optional, Union, Literal

from pydantic import BaseModel
from sqlmodel import SQLModel, Field


class Channels:
    EMAIL = "email"
    WHATSAPP = "whatsapp"
    SMS = "sms"
    CALL_SCRIPT = "call_script"

    ALL = frozenset({EMAIL, WHATSAPP, SMS, CALL_SCRIPT})


class Intents:
    FIRST_CONTACT = "first_contact"
    POST_CALL_SUMMARY = "post_call_summary"
    PROPOSAL_FOLLOWUP = "proposal_followup"
    NURTURE_CHECKIN = "nurture_checkin"
    DEAL_RECOVERY = "deal_recovery"
    MEETING_CONFIRMATION = "meeting_confirmation"
    MEETING_REMINDER = "meeting_reminder"
    INVOICE_GENTLE = "invoice_gentle"
    INVOICE_FIRM = "invoice_firm"
    INVOICE_FINAL = "invoice_final"

    ALL = frozenset({
        FIRST_CONTACT, POST_CALL_SUMMARY, PROPOSAL_FOLLOWUP, NURTURE_CHECKIN,
        DEAL_RECOVERY, MEETING_CONFIRMATION, MEETING_REMINDER,
        INVOICE_GENTLE, INVOICE_FIRM, INVOICE_FINAL,
    })


class StepStatuses:
    PENDING = "pending"
    DONE = "done"
    SKIPPED = "skipped"

    ALL = frozenset({PENDING, DONE, SKIPPED})


StepStatus = Literal["pending", "done", "skipped"]


class PendingState(BaseModel):
    kind: Literal["pending"] = "pending"


class DoneState(BaseModel):
    kind: Literal["done"] = "done"
    at: datetime


class SkippedState(BaseModel):
    kind: Literal["skipped"] = "skipped"
    at: datetime


StepState = Union[PendingState, DoneState, SkippedState]


def state_for(status: str, at: datetime) -> StepState:
    """Build the state variant for a status name, stamped with ``at`` when completed."""
    if status == StepStatuses.PENDING:
        return PendingState()
    if status == StepStatuses.DONE:
        return DoneState(at=at)
    if status == StepStatuses.SKIPPED:
        return SkippedState(at=at)
    raise ValueError(f"Unknown outreach step status '{status}'")


class OutreachStep(SQLModel, table=True):
    """
    A planned outreach touchpoint for a deal.
    Created only as part of a plan batch; afterwards only its status changes.
    """
    __tablename__ = "outreach_step"
    
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)
    deal_id: uuid.UUID = Field(foreign_key="deal.id", index=True)
    
    # Schedule
    due_date: datetime = Field(index=True)
    channel: str  # email, whatsapp, sms, call_script
    intent: str  # see Intents
    goal: Optional[str] = None
    
    # Status - written only via apply_state()
    status: str = Field(default=StepStatuses.PENDING, index=True)
    completed_at: Optional[datetime] = None
    
    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    
    @property
    def state(self) -> StepState:
        if self.status == StepStatuses.PENDING:
            return PendingState()
        return state_for(self.status, self.completed_at)
    
    def apply_state(self, state: StepState) -> None:
        self.status = state.kind
        self.completed_at = None if isinstance(state, PendingState) else state.at
