"""
Deals API routes - deals, activity log and outreach steps per deal.
"""
import uuid
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk.database import get_session
from leaddesk.services.deal_service import DealService
from leaddesk.services.outreach_plan_service import OutreachPlanService
from leaddesk.schemas.deal import DealCreate, DealDetailsUpdate, DealStageUpdate, DealResponse
from leaddesk.schemas.activity import ActivityCreate, ActivityResponse
from leaddesk.schemas.outreach import OutreachStepResponse
from leaddesk.api.deps import get_outreach_plan_service

router = APIRouter(prefix="/deals", tags=["deals"])


@router.get("/", response_model=List[DealResponse])
async def list_deals(session: AsyncSession = Depends(get_session)):
    """List all deals."""
    deal_service = DealService(session)
    return await deal_service.list()


@router.post("/", response_model=DealResponse, status_code=201)
async def create_deal(
    deal_data: DealCreate,
    session: AsyncSession = Depends(get_session)
):
    """Create a deal for an existing lead."""
    deal_service = DealService(session)
    return await deal_service.create(deal_data)


@router.get("/{deal_id}", response_model=DealResponse)
async def get_deal(
    deal_id: uuid.UUID,
    session: AsyncSession = Depends(get_session)
):
    """Get a deal by ID."""
    deal_service = DealService(session)
    return await deal_service.get(deal_id)


@router.patch("/{deal_id}", response_model=DealResponse)
async def update_deal_details(
    deal_id: uuid.UUID,
    details: DealDetailsUpdate,
    session: AsyncSession = Depends(get_session)
):
    """Update a deal's value and next action."""
    deal_service = DealService(session)
    return await deal_service.update_details(deal_id, details)


@router.post("/{deal_id}/stage", response_model=DealResponse)
async def update_deal_stage(
    deal_id: uuid.UUID,
    stage_data: DealStageUpdate,
    session: AsyncSession = Depends(get_session)
):
    """Move a deal to another stage."""
    deal_service = DealService(session)
    return await deal_service.update_stage(deal_id, stage_data.stage)


@router.get("/{deal_id}/activities", response_model=List[ActivityResponse])
async def list_activities(
    deal_id: uuid.UUID,
    session: AsyncSession = Depends(get_session)
):
    """Get a deal's activity log."""
    deal_service = DealService(session)
    return await deal_service.list_activities(deal_id)


@router.post("/{deal_id}/activities", response_model=ActivityResponse, status_code=201)
async def create_activity(
    deal_id: uuid.UUID,
    activity_data: ActivityCreate,
    session: AsyncSession = Depends(get_session)
):
    """Log an activity against a deal."""
    deal_service = DealService(session)
    return await deal_service.log_activity(deal_id, activity_data)


@router.get("/{deal_id}/outreach-steps", response_model=List[OutreachStepResponse])
async def list_outreach_steps(
    deal_id: uuid.UUID,
    plan_service: OutreachPlanService = Depends(get_outreach_plan_service)
):
    """Get a deal's outreach steps in due order."""
    return await plan_service.list_steps(deal_id)
