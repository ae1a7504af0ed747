"""
Lead repository with cascading delete.
"""
import uuid

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk.models.lead import Lead
from leaddesk.models.deal import Deal
from leaddesk.models.activity import DealActivity
from leaddesk.models.outreach import OutreachStep
from leaddesk.repositories.base import BaseRepository


class LeadRepository(BaseRepository[Lead]):
    """Repository for Lead operations."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(Lead, session)
    
    async def delete_with_related(self, lead_id: uuid.UUID) -> bool:
        """
        Delete a lead together with its deals, their activities and outreach steps.
        Everything is removed in a single commit.
        """
        lead = await self.get(lead_id)
        if not lead:
            return False
        
        result = await self.session.exec(select(Deal).where(Deal.lead_id == lead_id))
        deals = result.all()
        deal_ids = [deal.id for deal in deals]
        
        if deal_ids:
            steps = await self.session.exec(
                select(OutreachStep).where(OutreachStep.deal_id.in_(deal_ids))
            )
            activities = await self.session.exec(
                select(DealActivity).where(DealActivity.deal_id.in_(deal_ids))
            )
            for obj in [*steps.all(), *activities.all()]:
                await self.session.delete(obj)
            # Children must be gone before their deals
            await self.session.flush()
            for deal in deals:
                await self.session.delete(deal)
            await self.session.flush()
        
        await self.session.delete(lead)
        await self.session.commit()
        return True
