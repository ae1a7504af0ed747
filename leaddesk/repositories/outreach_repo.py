"""
Outreach step repository - atomic plan writes and step status transitions.
"""
import uuid
import logging
from typing import Optional, List, Callable
from datetime import datetime

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from leaddesk.core.exceptions import PersistenceError
from leaddesk.models.outreach import OutreachStep, state_for
from leaddesk.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class OutreachStepRepository(BaseRepository[OutreachStep]):
    """Repository for OutreachStep operations."""
    
    def __init__(self, session: AsyncSession, clock: Callable[[], datetime] = datetime.utcnow):
        super().__init__(OutreachStep, session)
        self.clock = clock
    
    async def insert_batch(self, steps: List[OutreachStep]) -> List[OutreachStep]:
        """
        Insert all steps of a plan as one unit of work.
        
        Either every step is committed or none is: any database error rolls
        the whole batch back and is raised as PersistenceError.
        """
        created_at = self.clock()
        for step in steps:
            step.created_at = created_at
        
        try:
            self.session.add_all(steps)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Outreach step batch of {len(steps)} rolled back: {e}")
            raise PersistenceError("Outreach plan write", str(e)) from e
        
        for step in steps:
            await self.session.refresh(step)
        return steps
    
    async def set_status(self, step_id: uuid.UUID, status: str) -> Optional[OutreachStep]:
        """
        Move a step to a new status. Returns None when the step does not exist.
        
        Repeating the current status keeps the original completion time.
        """
        step = await self.get(step_id)
        if not step:
            return None
        
        if step.status == status:
            return step
        
        step.apply_state(state_for(status, self.clock()))
        self.session.add(step)
        await self.session.commit()
        await self.session.refresh(step)
        return step
    
    async def list_for_deal(self, deal_id: uuid.UUID) -> List[OutreachStep]:
        """Get a deal's steps ordered by due date, then creation time."""
        query = select(OutreachStep).where(
            OutreachStep.deal_id == deal_id
        ).order_by(OutreachStep.due_date, OutreachStep.created_at)
        result = await self.session.exec(query)
        return result.all()
    
