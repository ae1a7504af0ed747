"""
Deal activity repository.
"""
import uuid
from typing import Optional, List
from datetime import datetime

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk.models.activity import DealActivity
from leaddesk.repositories.base import BaseRepository


class DealActivityRepository(BaseRepository[DealActivity]):
    """Repository for DealActivity operations."""
    
    def __init__(self, session: AsyncSession):
        super().__init__(DealActivity, session)
    
    async def log(
        self,
        deal_id: uuid.UUID,
        type: str,
        note: str,
        created_at: Optional[datetime] = None
    ) -> DealActivity:
        """Create an activity entry."""
        activity = DealActivity(
            deal_id=deal_id,
            type=type,
            note=note,
            created_at=created_at or datetime.utcnow()
        )
        self.session.add(activity)
        await self.session.commit()
        await self.session.refresh(activity)
        return activity
    
    async def get_by_deal(self, deal_id: uuid.UUID) -> List[DealActivity]:
        """Get all activity for a deal, newest first."""
        query = select(DealActivity).where(
            DealActivity.deal_id == deal_id
        ).order_by(DealActivity.created_at.desc())
        result = await self.session.exec(query)
        return result.all()
    
    async def get_recent_for_deal(self, deal_id: uuid.UUID, limit: int = 5) -> List[DealActivity]:
        """Get the most recent activity for a deal."""
        query = select(DealActivity).where(
            DealActivity.deal_id == deal_id
        ).order_by(DealActivity.created_at.desc()).limit(limit)
        result = await self.session.exec(query)
        return result.all()
