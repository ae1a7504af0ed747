"""
Lead service - lead management.
"""
import uuid
import logging
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk.core.exceptions import raise_not_found
from leaddesk.repositories.lead_repo import LeadRepository
from leaddesk.models.lead import Lead
from leaddesk.schemas.lead import LeadCreate

logger = logging.getLogger(__name__)


class LeadService:
    """Service for lead operations."""
    
    def __init__(self, session: AsyncSession):
        self.session = session
        self.lead_repo = LeadRepository(session)
    
    async def create(self, lead_data: LeadCreate) -> Lead:
        """Create a new lead."""
        data = lead_data.model_dump(exclude_none=True)
        data["owner_name"] = lead_data.owner_name or "Unassigned"
        
        lead = await self.lead_repo.create(data)
        logger.info(f"Lead '{lead.name}' created ({lead.id})")
        return lead
    
    async def list(self) -> List[Lead]:
        """List leads, newest first."""
        return await self.lead_repo.list()
    
    async def get(self, lead_id: uuid.UUID) -> Lead:
        """Get a lead by ID."""
        lead = await self.lead_repo.get(lead_id)
        if not lead:
            raise_not_found("Lead", str(lead_id))
        return lead
    
    async def delete(self, lead_id: uuid.UUID) -> bool:
        """Delete a lead and everything attached to its deals."""
        deleted = await self.lead_repo.delete_with_related(lead_id)
        if not deleted:
            raise_not_found("Lead", str(lead_id))
        logger.info(f"Lead {lead_id} deleted with related deals")
        return True
