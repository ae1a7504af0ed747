"""Shared fixtures: in-memory SQLite database, stub planner and HTTP client."""
import os

# Keep real AI providers out of the test run.
os.environ["OPENAI_API_KEY"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["SEED_DEMO_DATA"] = "false"

from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk import models  # noqa: F401
from leaddesk.main import app
from leaddesk.database import get_session
from leaddesk.api.deps import get_content_generator
from leaddesk.core.exceptions import ExternalServiceError
from leaddesk.models.lead import Lead
from leaddesk.models.deal import Deal
from leaddesk.models.activity import DealActivity


class StubPlanner:
    """Content generator double. Raises `error` if set, otherwise returns `steps`."""

    def __init__(self, steps=None, error=None):
        self.steps = steps if steps is not None else []
        self.error = error
        self.payloads = []

    def generate_candidates(self, payload: dict) -> list:
        self.payloads.append(payload)
        if self.error:
            raise self.error
        return self.steps


def assert_step_invariant(step):
    status = step["status"] if isinstance(step, dict) else step.status
    completed_at = step["completed_at"] if isinstance(step, dict) else step.completed_at
    assert (status == "pending") == (completed_at is None)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def make_deal(session):
    """Create a lead with one deal, optionally with logged activities."""

    async def _make_deal(stage="New", activities=(), title="Retail analytics revamp"):
        lead = Lead(name="Emily Carter", company="Carter Retail Group", value=25000)
        session.add(lead)
        await session.flush()
        deal = Deal(lead_id=lead.id, title=title, stage=stage, value=25000)
        session.add(deal)
        await session.flush()
        for activity_type, note in activities:
            session.add(DealActivity(deal_id=deal.id, type=activity_type, note=note))
        await session.commit()
        return deal

    return _make_deal


@pytest.fixture
def planner():
    return StubPlanner(error=ExternalServiceError("AI planner", "not configured"))


@pytest.fixture
def fixed_now():
    return datetime(2026, 3, 10, 15, 42, 17)


@pytest_asyncio.fixture
async def client(session_factory, planner):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_content_generator] = lambda: planner
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
