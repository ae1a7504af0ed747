"""
Outreach API routes - plan generation and step status.
"""
import uuid
import logging
from fastapi import APIRouter, Depends

from leaddesk.core.exceptions import (
    NotFoundError, PersistenceError, raise_not_found, raise_server_error
)
from leaddesk.services.outreach_plan_service import OutreachPlanService
from leaddesk.schemas.outreach import (
    OutreachPlanRequest, OutreachPlanResponse, StepStatusUpdate, StepStatusResponse
)
from leaddesk.api.deps import get_outreach_plan_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/outreach", tags=["outreach"])


@router.post("/plan", response_model=OutreachPlanResponse)
async def generate_outreach_plan(
    plan_request: OutreachPlanRequest,
    plan_service: OutreachPlanService = Depends(get_outreach_plan_service)
):
    """Generate and store an outreach plan for a deal."""
    try:
        steps = await plan_service.generate_plan_for_deal(
            plan_request.deal_id,
            plan_request.horizon_days
        )
    except NotFoundError:
        raise_not_found("Deal", str(plan_request.deal_id))
    except PersistenceError as e:
        logger.error(f"Failed to store outreach plan: {e.message}")
        raise_server_error("Failed to generate outreach plan")
    
    return {"deal_id": plan_request.deal_id, "steps": steps}


@router.patch("/steps/{step_id}/status", response_model=StepStatusResponse)
async def update_step_status(
    step_id: uuid.UUID,
    status_data: StepStatusUpdate,
    plan_service: OutreachPlanService = Depends(get_outreach_plan_service)
):
    """Mark an outreach step pending, done or skipped."""
    step = await plan_service.update_step_status(step_id, status_data.status)
    if step is None:
        raise_not_found("Outreach step", str(step_id))
    return {"ok": True, "status": step.status}
