"""
Turns relative step offsets into absolute due dates.
"""
import uuid
from datetime import datetime, timedelta

from leaddesk.models.outreach import OutreachStep, PendingState
from leaddesk.schemas.outreach import PlanCandidate

SEND_HOUR = 9


def due_date_for(offset_days: int, anchor: datetime) -> datetime:
    """The anchor's day at 09:00, shifted by whole days."""
    start = anchor.replace(hour=SEND_HOUR, minute=0, second=0, microsecond=0)
    return start + timedelta(days=offset_days)


def schedule_step(candidate: PlanCandidate, deal_id: uuid.UUID, anchor: datetime) -> OutreachStep:
    """Build a new, pending, unsaved step for a validated candidate."""
    step = OutreachStep(
        id=uuid.uuid4(),
        deal_id=deal_id,
        due_date=due_date_for(candidate.offset_days, anchor),
        channel=candidate.channel,
        intent=candidate.intent,
        goal=candidate.goal
    )
    step.apply_state(PendingState())
    return step
