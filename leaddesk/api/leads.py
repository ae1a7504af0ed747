"""
Leads API routes.
"""
import uuid
from typing import List
from fastapi import APIRouter, Depends
from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk.database import get_session
from leaddesk.services.lead_service import LeadService
from leaddesk.schemas.lead import LeadCreate, LeadResponse
from leaddesk.schemas.common import SuccessResponse

router = APIRouter(prefix="/leads", tags=["leads"])


@router.get("/", response_model=List[LeadResponse])
async def list_leads(session: AsyncSession = Depends(get_session)):
    """List all leads."""
    lead_service = LeadService(session)
    return await lead_service.list()


@router.post("/", response_model=LeadResponse, status_code=201)
async def create_lead(
    lead_data: LeadCreate,
    session: AsyncSession = Depends(get_session)
):
    """Create a new lead."""
    lead_service = LeadService(session)
    return await lead_service.create(lead_data)


@router.get("/{lead_id}", response_model=LeadResponse)
async def get_lead(
    lead_id: uuid.UUID,
    session: AsyncSession = Depends(get_session)
):
    """Get a lead by ID."""
    lead_service = LeadService(session)
    return await lead_service.get(lead_id)


@router.delete("/{lead_id}", response_model=SuccessResponse)
async def delete_lead(
    lead_id: uuid.UUID,
    session: AsyncSession = Depends(get_session)
):
    """Delete a lead with its deals, activities and outreach steps."""
    lead_service = LeadService(session)
    await lead_service.delete(lead_id)
    return {"success": True}
