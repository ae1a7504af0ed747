"""
Validation of untrusted outreach step candidates.
"""
import logging
import math
from typing import Optional, List, Any
from collections.abc import Mapping

from leaddesk.models.outreach import Channels, Intents
from leaddesk.schemas.outreach import PlanCandidate
from leaddesk.services.intent_normalizer import normalize_intent

logger = logging.getLogger(__name__)


def _offset_number(value: Any) -> Optional[float]:
    # bool is an int subclass but never a valid offset
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


def validate_candidate(
    raw: Any,
    horizon_days: int,
    stage: Optional[str],
    has_prior_contact: bool
) -> Optional[PlanCandidate]:
    """Return the normalized candidate, or None if it is out of bounds."""
    if not isinstance(raw, Mapping):
        return None
    
    offset = _offset_number(raw.get("offsetDays"))
    if offset is None or offset < 0 or offset > horizon_days:
        return None
    # fractional offsets count whole days only
    offset_days = int(offset)
    
    channel = raw.get("channel")
    if not isinstance(channel, str) or channel not in Channels.ALL:
        return None
    
    intent = normalize_intent(stage, raw.get("intent"), has_prior_contact)
    if intent not in Intents.ALL:
        return None
    
    goal = raw.get("goal")
    goal = goal.strip() if isinstance(goal, str) and goal.strip() else None
    
    return PlanCandidate(offset_days=offset_days, channel=channel, intent=intent, goal=goal)


def validate_candidates(
    candidates: Any,
    horizon_days: int,
    stage: Optional[str],
    has_prior_contact: bool
) -> List[PlanCandidate]:
    """
    Keep the candidates whose offset, channel and intent are within bounds.
    Invalid candidates are dropped without error.
    """
    if not isinstance(candidates, (list, tuple)):
        return []
    
    accepted = []
    for raw in candidates:
        candidate = validate_candidate(raw, horizon_days, stage, has_prior_contact)
        if candidate is None:
            logger.debug(f"Dropped outreach step candidate: {raw!r}")
            continue
        accepted.append(candidate)
    return accepted
