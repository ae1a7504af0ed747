"""
Deal repository, including the read-only lookup used by outreach planning.
"""
import uuid
from typing import Optional
from datetime import datetime

from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk.models.deal import Deal
from leaddesk.models.lead import Lead
from leaddesk.repositories.base import BaseRepository
from leaddesk.repositories.activity_repo import DealActivityRepository
from leaddesk.schemas.outreach import PlanDealContext


class DealRepository(BaseRepository[Deal]):
    """Repository for Deal operations."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(Deal, session)
        self.activity_repo = DealActivityRepository(session)
    
    async def update_stage(self, deal_id: uuid.UUID, stage: str) -> Optional[Deal]:
        """Update deal stage."""
        deal = await self.get(deal_id)
        if not deal:
            return None
        deal.stage = stage
        deal.updated_at = datetime.utcnow()
        self.session.add(deal)
        await self.session.commit()
        await self.session.refresh(deal)
        return deal
    
    async def get_plan_context(
        self,
        deal_id: uuid.UUID,
        activity_limit: int = 5
    ) -> Optional[PlanDealContext]:
        """Load the deal, its lead and recent activity for outreach planning."""
        deal = await self.get(deal_id)
        if not deal:
            return None
        
        lead = await self.session.get(Lead, deal.lead_id)
        activities = await self.activity_repo.get_recent_for_deal(deal_id, activity_limit)
        last = activities[0] if activities else None
        
        return PlanDealContext(
            deal_id=deal.id,
            title=deal.title,
            stage=deal.stage,
            value=deal.value,
            lead_name=lead.name if lead else None,
            company=lead.company if lead else None,
            last_contact_type=last.type if last else None,
            last_contact_date=last.created_at if last else None,
            recent_activities=[
                {"type": a.type, "created_at": a.created_at.isoformat(), "note": a.note}
                for a in activities
            ]
        )
