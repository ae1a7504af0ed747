"""
Deal service - pipeline deals and their activity log.
"""
import uuid
import logging
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk.core.exceptions import raise_not_found, raise_validation_error
from leaddesk.repositories.deal_repo import DealRepository
from leaddesk.repositories.lead_repo import LeadRepository
from leaddesk.repositories.activity_repo import DealActivityRepository
from leaddesk.models.deal import Deal
from leaddesk.models.activity import DealActivity, ActivityTypes
from leaddesk.schemas.deal import DealCreate, DealDetailsUpdate
from leaddesk.schemas.activity import ActivityCreate

logger = logging.getLogger(__name__)


class DealService:
    """Service for deal operations."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.deal_repo = DealRepository(session)
        self.lead_repo = LeadRepository(session)
        self.activity_repo = DealActivityRepository(session)
    
    async def create(self, deal_data: DealCreate) -> Deal:
        """Create a deal for an existing lead."""
        lead = await self.lead_repo.get(deal_data.lead_id)
        if not lead:
            raise_not_found("Lead", str(deal_data.lead_id))
        
        data = deal_data.model_dump()
        data["owner_name"] = deal_data.owner_name or "Unassigned"
        
        deal = await self.deal_repo.create(data)
        logger.info(f"Deal '{deal.title}' created for lead '{lead.name}'")
        return deal
    
    async def list(self) -> List[Deal]:
        """List all deals, newest first."""
        return await self.deal_repo.list()
    
    async def get(self, deal_id: uuid.UUID) -> Deal:
        """Get a deal by ID."""
        deal = await self.deal_repo.get(deal_id)
        if not deal:
            raise_not_found("Deal", str(deal_id))
        return deal
    
    async def update_details(self, deal_id: uuid.UUID, details: DealDetailsUpdate) -> Deal:
        """Update value and next action. Only fields sent by the client are touched."""
        update_data = details.model_dump(exclude_unset=True)
        # value is not nullable
        if update_data.get("value", 0) is None:
            update_data.pop("value")
        if not update_data:
            raise_validation_error("At least one of value, next_action, or next_action_date is required")
        if isinstance(update_data.get("next_action"), str):
            update_data["next_action"] = update_data["next_action"].strip()
        
        deal = await self.deal_repo.update(deal_id, update_data)
        if not deal:
            raise_not_found("Deal", str(deal_id))
        return deal
    
    async def update_stage(self, deal_id: uuid.UUID, stage: str) -> Deal:
        """Move a deal to a new stage and record the change in its activity log."""
        deal = await self.deal_repo.update_stage(deal_id, stage)
        if not deal:
            raise_not_found("Deal", str(deal_id))
        
        await self.activity_repo.log(
            deal_id=deal.id,
            type=ActivityTypes.STATUS_CHANGE,
            note=f"Status updated to {deal.stage}"
        )
        return deal
    
    async def list_activities(self, deal_id: uuid.UUID) -> List[DealActivity]:
        """Get a deal's activity, newest first."""
        await self.get(deal_id)
        return await self.activity_repo.get_by_deal(deal_id)
    
    async def log_activity(self, deal_id: uuid.UUID, activity_data: ActivityCreate) -> DealActivity:
        """Log a free-text activity against a deal."""
        await self.get(deal_id)
        return await self.activity_repo.log(
            deal_id=deal_id,
            type=activity_data.type,
            note=activity_data.note,
            created_at=activity_data.created_at
        )
