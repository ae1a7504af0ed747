"""Tests for outreach plan generation: generator, fallback, validation and storage."""
import asyncio
import threading
import time
import uuid
from datetime import datetime

import pytest

from leaddesk.config import settings
from leaddesk.core.exceptions import NotFoundError, PersistenceError
from leaddesk.repositories.deal_repo import DealRepository
from leaddesk.repositories.outreach_repo import OutreachStepRepository
from leaddesk.schemas.outreach import PlanDealContext
from leaddesk.services.outreach_plan_service import (
    OutreachPlanService, DealLockRegistry, resolve_horizon
)
from conftest import StubPlanner, assert_step_invariant


class SlowPlanner(StubPlanner):
    def generate_candidates(self, payload):
        time.sleep(0.3)
        return super().generate_candidates(payload)


class RecordingStore:
    def __init__(self, error=None):
        self.batches = []
        self.error = error

    async def insert_batch(self, steps):
        self.batches.append(steps)
        if self.error:
            raise self.error
        return steps


def make_service(session, generator=None, clock=None, **kwargs):
    kwargs.setdefault("store", OutreachStepRepository(session))
    return OutreachPlanService(
        deal_repo=DealRepository(session),
        generator=generator,
        clock=clock or (lambda: datetime(2026, 3, 10, 15, 42)),
        locks=DealLockRegistry(),
        **kwargs
    )


def offsets(steps, anchor_day=10):
    return [step.due_date.day - anchor_day for step in steps]


@pytest.mark.asyncio
async def test_unavailable_generator_falls_back_to_builtin_plan(session, make_deal):
    deal = await make_deal(stage="New")
    service = make_service(session, generator=None)

    steps = await service.generate_plan_for_deal(deal.id, 14)

    assert offsets(steps) == [0, 3, 7]
    assert [s.intent for s in steps] == ["first_contact", "nurture_checkin", "post_call_summary"]
    assert [s.channel for s in steps] == ["email", "whatsapp", "call_script"]
    assert all(s.status == "pending" for s in steps)
    assert all(s.due_date.hour == 9 and s.due_date.minute == 0 for s in steps)
    stored = await service.list_steps(deal.id)
    assert len(stored) == 3
    for step in stored:
        assert_step_invariant(step)


@pytest.mark.asyncio
async def test_generator_error_falls_back(session, make_deal):
    deal = await make_deal(stage="New")
    planner = StubPlanner(error=RuntimeError("boom"))
    service = make_service(session, generator=planner)

    steps = await service.generate_plan_for_deal(deal.id, 14)

    assert len(planner.payloads) == 1
    assert [s.intent for s in steps] == ["first_contact", "nurture_checkin", "post_call_summary"]


@pytest.mark.asyncio
async def test_generator_timeout_falls_back(session, make_deal):
    deal = await make_deal(stage="New")
    service = make_service(session, generator=SlowPlanner(steps=[]), timeout_seconds=0.05)

    steps = await service.generate_plan_for_deal(deal.id, 14)

    assert offsets(steps) == [0, 3, 7]


@pytest.mark.asyncio
async def test_generator_with_no_usable_steps_falls_back(session, make_deal):
    deal = await make_deal(stage="New")
    planner = StubPlanner(steps=[{"offsetDays": 30, "channel": "email", "intent": "first_contact"}])
    service = make_service(session, generator=planner)

    steps = await service.generate_plan_for_deal(deal.id, 14)

    assert offsets(steps) == [0, 3, 7]


@pytest.mark.asyncio
async def test_lost_deal_keeps_only_valid_generated_steps(session, make_deal):
    deal = await make_deal(stage="Lost", activities=[("call", "Client went with a competitor")])
    planner = StubPlanner(steps=[
        {"offsetDays": 2, "channel": "email", "intent": "first_contact", "goal": "Reopen the conversation"},
        {"offsetDays": -1, "channel": "sms", "intent": "nurture_checkin", "goal": "Too early"},
    ])
    service = make_service(session, generator=planner)

    steps = await service.generate_plan_for_deal(deal.id, 14)

    assert len(steps) == 1
    assert steps[0].intent == "deal_recovery"
    assert steps[0].goal == "Reopen the conversation"
    assert steps[0].due_date == datetime(2026, 3, 12, 9, 0)
    assert len(await service.list_steps(deal.id)) == 1


@pytest.mark.asyncio
async def test_fallback_is_normalized_for_stage(session, make_deal):
    deal = await make_deal(stage="Proposal Sent")
    service = make_service(session)

    steps = await service.generate_plan_for_deal(deal.id, 14)

    assert steps[0].intent == "proposal_followup"


@pytest.mark.asyncio
async def test_short_horizon_trims_fallback(session, make_deal):
    deal = await make_deal(stage="New")
    service = make_service(session)

    steps = await service.generate_plan_for_deal(deal.id, 5)

    assert offsets(steps) == [0, 3]


@pytest.mark.asyncio
async def test_empty_plan_is_returned_without_writing(session, make_deal):
    deal = await make_deal(stage="New")
    store = RecordingStore()
    service = make_service(session, store=store)
    context = await DealRepository(session).get_plan_context(deal.id)

    steps = await service.generate_plan(context, -1)

    assert steps == []
    assert store.batches == []


@pytest.mark.asyncio
async def test_persistence_failure_is_raised(session, make_deal):
    deal = await make_deal(stage="New")
    store = RecordingStore(error=PersistenceError("Outreach plan write", "disk full"))
    service = make_service(session, store=store)

    with pytest.raises(PersistenceError):
        await service.generate_plan_for_deal(deal.id, 14)
    assert len(store.batches) == 1
    assert len(store.batches[0]) == 3


@pytest.mark.asyncio
async def test_unknown_deal_raises_not_found(session):
    service = make_service(session)
    with pytest.raises(NotFoundError):
        await service.generate_plan_for_deal(uuid.uuid4(), 14)


@pytest.mark.asyncio
async def test_generator_receives_deal_summary_and_history(session, make_deal):
    deal = await make_deal(stage="Qualified", activities=[("email", "Sent case studies")])
    planner = StubPlanner(steps=[{"offsetDays": 1, "channel": "sms", "intent": "meeting_confirmation"}])
    service = make_service(session, generator=planner)

    await service.generate_plan_for_deal(deal.id, 10)

    payload = planner.payloads[0]
    assert payload["horizonDays"] == 10
    assert payload["dealSummary"]["stage"] == "Qualified"
    assert payload["dealSummary"]["company"] == "Carter Retail Group"
    assert payload["dealSummary"]["lastContactType"] == "email"
    assert payload["stageHistory"][0]["note"] == "Sent case studies"


@pytest.mark.asyncio
async def test_prior_contact_turns_first_contact_into_checkin(session, make_deal):
    deal = await make_deal(stage="Negotiation", activities=[("call", "Intro call")])
    planner = StubPlanner(steps=[{"offsetDays": 0, "channel": "email", "intent": "first_contact"}])
    service = make_service(session, generator=planner)

    steps = await service.generate_plan_for_deal(deal.id, 14)

    assert [s.intent for s in steps] == ["nurture_checkin"]


def test_plan_context_prior_contact_flag():
    deal_id = uuid.uuid4()
    assert not PlanDealContext(deal_id=deal_id).has_prior_contact
    assert PlanDealContext(deal_id=deal_id, last_contact_date=datetime(2026, 1, 1)).has_prior_contact
    assert PlanDealContext(deal_id=deal_id, recent_activities=[{"type": "note"}]).has_prior_contact


@pytest.mark.parametrize("value, expected", [
    (None, 14), (0, 14), (-3, 14), (2.5, 14), ("7", 14), (True, 14),
    (1, 1), (7, 7), (21.0, 21),
])
def test_resolve_horizon(value, expected):
    assert resolve_horizon(value, default=14) == expected


@pytest.mark.asyncio
async def test_offset_past_calendar_end_is_dropped(session, make_deal):
    deal = await make_deal(stage="New")
    planner = StubPlanner(steps=[
        {"offsetDays": 3000000, "channel": "email", "intent": "first_contact"},
        {"offsetDays": 1, "channel": "sms", "intent": "first_contact"},
    ])
    service = make_service(session, generator=planner)

    steps = await service.generate_plan_for_deal(deal.id, 10**7)

    assert offsets(steps) == [1]
    assert [s.channel for s in steps] == ["sms"]


@pytest.mark.asyncio
async def test_only_unschedulable_steps_fall_back(session, make_deal):
    deal = await make_deal(stage="New")
    planner = StubPlanner(steps=[{"offsetDays": 3000000, "channel": "email", "intent": "first_contact"}])
    service = make_service(session, generator=planner)

    steps = await service.generate_plan_for_deal(deal.id, 10**7)

    assert offsets(steps) == [0, 3, 7]
    assert len(await service.list_steps(deal.id)) == 3


class OverlapPlanner(StubPlanner):
    """Records how many generator calls run at the same time."""

    def __init__(self, steps=None):
        super().__init__(steps=steps)
        self.active = 0
        self.max_active = 0
        self._guard = threading.Lock()

    def generate_candidates(self, payload):
        with self._guard:
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        time.sleep(0.1)
        with self._guard:
            self.active -= 1
        return super().generate_candidates(payload)


@pytest.mark.asyncio
async def test_plans_for_one_deal_run_one_after_another():
    locks = DealLockRegistry()
    planner = OverlapPlanner(steps=[{"offsetDays": 1, "channel": "email", "intent": "first_contact"}])
    store = RecordingStore()
    service = OutreachPlanService(store=store, generator=planner, locks=locks, timeout_seconds=5)
    context = PlanDealContext(deal_id=uuid.uuid4(), stage="New")

    first, second = await asyncio.gather(
        service.generate_plan(context, 14),
        service.generate_plan(context, 14),
    )

    assert planner.max_active == 1
    assert len(first) == len(second) == 1
    assert len(store.batches) == 2
    assert len(locks) == 0


@pytest.mark.asyncio
async def test_plans_for_different_deals_overlap():
    planner = OverlapPlanner(steps=[{"offsetDays": 1, "channel": "email", "intent": "first_contact"}])
    service = OutreachPlanService(
        store=RecordingStore(), generator=planner, locks=DealLockRegistry(), timeout_seconds=5
    )

    await asyncio.gather(
        service.generate_plan(PlanDealContext(deal_id=uuid.uuid4(), stage="New"), 14),
        service.generate_plan(PlanDealContext(deal_id=uuid.uuid4(), stage="New"), 14),
    )

    assert planner.max_active == 2


@pytest.mark.asyncio
async def test_deal_locks_are_released_after_planning(session, make_deal):
    locks = DealLockRegistry()
    service = OutreachPlanService(
        store=OutreachStepRepository(session), deal_repo=DealRepository(session), locks=locks
    )
    for _ in range(5):
        deal = await make_deal(stage="New")
        await service.generate_plan_for_deal(deal.id, 14)

    assert len(locks) == 0


@pytest.mark.asyncio
async def test_deal_lock_is_released_when_write_fails():
    locks = DealLockRegistry()
    store = RecordingStore(error=PersistenceError("Outreach plan write", "disk full"))
    service = OutreachPlanService(store=store, locks=locks)

    with pytest.raises(PersistenceError):
        await service.generate_plan(PlanDealContext(deal_id=uuid.uuid4(), stage="New"), 14)
    assert len(locks) == 0


def test_explicit_zero_timeout_is_kept():
    service = OutreachPlanService(store=RecordingStore(), timeout_seconds=0)
    assert service.timeout_seconds == 0
    default = OutreachPlanService(store=RecordingStore())
    assert default.timeout_seconds == settings.OUTREACH_PLAN_TIMEOUT_SECONDS
