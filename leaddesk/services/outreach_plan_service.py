"""
Outreach plan service - builds, validates, schedules and stores a deal's
outreach plan.

Flow: content generator (or the built-in fallback sequence) -> candidate
validation with intent normalization -> scheduling -> one atomic batch write.
Generator problems never reach the caller; only a failed write does.
"""
import asyncio
import logging
import uuid
from contextlib import asynccontextmanager
from typing import Optional, List, Callable, Dict, Any, Protocol
from datetime import datetime

from leaddesk.config import settings
from leaddesk.core.exceptions import NotFoundError
from leaddesk.models.outreach import OutreachStep, Channels, Intents
from leaddesk.repositories.deal_repo import DealRepository
from leaddesk.repositories.outreach_repo import OutreachStepRepository
from leaddesk.schemas.outreach import PlanCandidate, PlanDealContext
from leaddesk.services.step_validator import validate_candidates
from leaddesk.services.step_scheduler import schedule_step

logger = logging.getLogger(__name__)


FALLBACK_PLAN = [
    {
        "offsetDays": 0,
        "channel": Channels.EMAIL,
        "intent": Intents.FIRST_CONTACT,
        "goal": "Send a concise intro email with value props and propose a short call."
    },
    {
        "offsetDays": 3,
        "channel": Channels.WHATSAPP,
        "intent": Intents.NURTURE_CHECKIN,
        "goal": "Lightly check in to see if they had a chance to review."
    },
    {
        "offsetDays": 7,
        "channel": Channels.CALL_SCRIPT,
        "intent": Intents.POST_CALL_SUMMARY,
        "goal": "Call to recap fit, address questions, and agree next steps."
    },
]


class ContentGenerator(Protocol):
    def generate_candidates(self, payload: dict) -> list: ...


class DealLockRegistry:
    """One asyncio.Lock per deal so plan generation for a deal runs one at a time."""
    
    def __init__(self):
        self._locks: Dict[uuid.UUID, asyncio.Lock] = {}
        self._holders: Dict[uuid.UUID, int] = {}
    
    @asynccontextmanager
    async def hold(self, deal_id: uuid.UUID):
        """Hold the deal's lock; the entry is dropped once nobody holds or awaits it."""
        lock = self._locks.get(deal_id)
        if lock is None:
            lock = self._locks[deal_id] = asyncio.Lock()
        self._holders[deal_id] = self._holders.get(deal_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._holders[deal_id] -= 1
            if not self._holders[deal_id]:
                del self._holders[deal_id]
                del self._locks[deal_id]
    
    def __len__(self) -> int:
        return len(self._locks)


plan_locks = DealLockRegistry()


def resolve_horizon(value: Any, default: int = None) -> int:
    """Use value when it is a positive whole number, otherwise the default horizon."""
    if default is None:
        default = settings.OUTREACH_DEFAULT_HORIZON_DAYS
    if isinstance(value, bool):
        return default
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return default


class OutreachPlanService:
    """Service for outreach plan generation."""
    
    def __init__(
        self,
        store: OutreachStepRepository,
        deal_repo: Optional[DealRepository] = None,
        generator: Optional[ContentGenerator] = None,
        clock: Callable[[], datetime] = datetime.now,
        timeout_seconds: Optional[float] = None,
        locks: Optional[DealLockRegistry] = None
    ):
        self.store = store
        self.deal_repo = deal_repo
        self.generator = generator
        self.clock = clock
        if timeout_seconds is None:
            timeout_seconds = settings.OUTREACH_PLAN_TIMEOUT_SECONDS
        self.timeout_seconds = timeout_seconds
        self.locks = locks if locks is not None else plan_locks
    
    async def generate_plan_for_deal(
        self,
        deal_id: uuid.UUID,
        horizon_days: Any = None
    ) -> List[OutreachStep]:
        """Look up the deal and generate its plan. Raises NotFoundError for unknown deals."""
        context = await self.deal_repo.get_plan_context(
            deal_id, settings.OUTREACH_RECENT_ACTIVITY_LIMIT
        )
        if not context:
            raise NotFoundError("Deal", str(deal_id))
        return await self.generate_plan(context, resolve_horizon(horizon_days))
    
    async def generate_plan(self, context: PlanDealContext, horizon_days: int) -> List[OutreachStep]:
        """
        Generate and persist an outreach plan for the deal described by context.
        
        Returns the persisted steps, or an empty list when nothing survives
        validation. Raises PersistenceError if the batch write fails.
        """
        async with self.locks.hold(context.deal_id):
            anchor = self.clock()
            generated = await self._generated_candidates(context, horizon_days)
            steps = self._schedule(generated, context.deal_id, anchor)
            
            if not steps:
                logger.warning(f"Using fallback outreach plan for deal {context.deal_id}")
                fallback = self._validate(FALLBACK_PLAN, context, horizon_days)
                steps = self._schedule(fallback, context.deal_id, anchor)
            
            if not steps:
                logger.info(f"Outreach plan for deal {context.deal_id} is empty")
                return []
            
            persisted = await self.store.insert_batch(steps)
            logger.info(f"Stored {len(persisted)} outreach steps for deal {context.deal_id}")
            return persisted
    
    async def _generated_candidates(
        self,
        context: PlanDealContext,
        horizon_days: int
    ) -> List[PlanCandidate]:
        """Candidates from the content generator, or [] if it is missing or fails."""
        if self.generator is None:
            return []
        
        payload = self.build_payload(context, horizon_days)
        try:
            raw = await asyncio.wait_for(
                asyncio.to_thread(self.generator.generate_candidates, payload),
                timeout=self.timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"Outreach planner timed out after {self.timeout_seconds}s for deal {context.deal_id}"
            )
            return []
        except Exception as e:
            logger.warning(f"Outreach planner failed for deal {context.deal_id}: {e}")
            return []
        
        accepted = self._validate(raw, context, horizon_days)
        if not accepted:
            logger.warning(f"No usable outreach steps from planner for deal {context.deal_id}")
        return accepted
    
    def _validate(self, raw: Any, context: PlanDealContext, horizon_days: int) -> List[PlanCandidate]:
        return validate_candidates(raw, horizon_days, context.stage, context.has_prior_contact)
    
    @staticmethod
    def _schedule(
        candidates: List[PlanCandidate],
        deal_id: uuid.UUID,
        anchor: datetime
    ) -> List[OutreachStep]:
        steps = []
        for candidate in candidates:
            try:
                steps.append(schedule_step(candidate, deal_id, anchor))
            except OverflowError:
                logger.debug(f"Dropped outreach step {candidate.offset_days} days out: date out of range")
        return steps
    
    @staticmethod
    def build_payload(context: PlanDealContext, horizon_days: int) -> dict:
        return {
            "dealSummary": {
                "id": str(context.deal_id),
                "name": context.title,
                "stage": context.stage,
                "valueGBP": context.value,
                "leadName": context.lead_name,
                "company": context.company,
                "lastContactType": context.last_contact_type,
                "lastContactDate": context.last_contact_date.isoformat() if context.last_contact_date else None
            },
            "stageHistory": context.recent_activities,
            "horizonDays": horizon_days
        }
    
    async def list_steps(self, deal_id: uuid.UUID) -> List[OutreachStep]:
        """Get a deal's steps in due order."""
        return await self.store.list_for_deal(deal_id)
    
    async def update_step_status(self, step_id: uuid.UUID, status: str) -> Optional[OutreachStep]:
        """Change a step's status. Returns None when the step does not exist."""
        return await self.store.set_status(step_id, status)
