"""
API dependencies - shared across routes.
"""
from fastapi import Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk.database import get_session
from leaddesk.repositories.deal_repo import DealRepository
from leaddesk.repositories.outreach_repo import OutreachStepRepository
from leaddesk.services.ai_planner_service import ai_planner_service
from leaddesk.services.outreach_plan_service import OutreachPlanService, ContentGenerator


def get_content_generator() -> ContentGenerator:
    """The outreach planner, or None when no AI provider is configured."""
    return ai_planner_service if ai_planner_service.is_configured else None


def get_outreach_plan_service(
    session: AsyncSession = Depends(get_session),
    generator: ContentGenerator = Depends(get_content_generator)
) -> OutreachPlanService:
    return OutreachPlanService(
        store=OutreachStepRepository(session),
        deal_repo=DealRepository(session),
        generator=generator
    )
