"""
Intent normalization - maps a requested outreach intent onto the canonical
intent that fits the deal's current pipeline stage.
"""
from typing import Optional, Any

from leaddesk.models.outreach import Intents

DEFAULT_INTENT = Intents.NURTURE_CHECKIN

# (normalized stage, requested intent) -> canonical intent.
# Pairs not listed here pass through when the intent is known.
STAGE_INTENT_OVERRIDES = {
    ("new", Intents.FIRST_CONTACT): Intents.FIRST_CONTACT,
    ("qualified", Intents.FIRST_CONTACT): Intents.NURTURE_CHECKIN,
    ("proposal sent", Intents.FIRST_CONTACT): Intents.PROPOSAL_FOLLOWUP,
    ("won", Intents.FIRST_CONTACT): Intents.POST_CALL_SUMMARY,
    ("lost", Intents.FIRST_CONTACT): Intents.DEAL_RECOVERY,
}


def normalize_stage(stage: Optional[str]) -> str:
    """'Proposal_Sent ' -> 'proposal sent'"""
    if not stage:
        return ""
    return " ".join(str(stage).replace("_", " ").lower().split())


def normalize_intent(stage: Optional[str], requested_intent: Any, has_prior_contact: bool) -> str:
    """
    Return the canonical intent for a step on a deal in ``stage``.
    
    A first-contact request on a deal that has already moved on is rewritten
    to the message that fits its stage; unknown intents become a check-in.
    The result is always one of Intents.ALL.
    """
    if not requested_intent:
        return DEFAULT_INTENT
    
    intent = str(requested_intent).strip().lower()
    
    override = STAGE_INTENT_OVERRIDES.get((normalize_stage(stage), intent))
    if override:
        return override
    
    if intent == Intents.FIRST_CONTACT and has_prior_contact:
        return Intents.NURTURE_CHECKIN
    
    if intent in Intents.ALL:
        return intent
    
    return DEFAULT_INTENT
