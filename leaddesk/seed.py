"""
Demo data for a fresh database.
"""
import logging
from datetime import datetime

from sqlmodel.ext.asyncio.session import AsyncSession

from leaddesk.models.lead import Lead
from leaddesk.models.deal import Deal, Stages
from leaddesk.repositories.lead_repo import LeadRepository

logger = logging.getLogger(__name__)

DEMO_PIPELINE = [
    {
        "lead": {
            "name": "Sarah Thompson",
            "company": "Thompson Logistics",
            "email": "sarah@thompsonlogistics.co.uk",
            "value": 12000,
            "source": "Referral",
            "created_at": datetime(2025, 11, 20, 9, 15),
            "address": "Unit 4, Riverside Park, Leeds",
            "phone": "+44 113 555 0123"
        },
        "deal": {
            "title": "AI dispatch optimisation",
            "stage": Stages.QUALIFIED,
            "value": 12000,
            "next_action": "Schedule technical scoping call",
            "next_action_date": datetime(2025, 12, 3, 10, 0),
            "reminder_channel": "WhatsApp",
            "ai_auto_reminder_enabled": True
        }
    },
    {
        "lead": {
            "name": "James Patel",
            "company": "Patel & Co Accountants",
            "email": "james@patelco.co.uk",
            "value": 8000,
            "source": "LinkedIn",
            "created_at": datetime(2025, 11, 18, 13, 45),
            "address": "Suite 12, City Gate, Manchester",
            "phone": "+44 161 555 0456"
        },
        "deal": {
            "title": "Automation for monthly reporting",
            "stage": Stages.NEW,
            "value": 8000,
            "next_action": "Send follow-up with case studies",
            "next_action_date": datetime(2025, 12, 2, 9, 30),
            "reminder_channel": "SMS",
            "ai_auto_reminder_enabled": False
        }
    },
    {
        "lead": {
            "name": "Emily Carter",
            "company": "Carter Retail Group",
            "email": "emily.carter@carterretail.com",
            "value": 25000,
            "source": "Website",
            "created_at": datetime(2025, 11, 10, 10, 30),
            "address": "High Street 22, Birmingham",
            "phone": "+44 121 555 0789"
        },
        "deal": {
            "title": "Retail analytics revamp",
            "stage": Stages.PROPOSAL_SENT,
            "value": 25000,
            "next_action": "Review proposal with CFO",
            "next_action_date": datetime(2025, 12, 5, 15, 0),
            "reminder_channel": "WhatsApp",
            "ai_auto_reminder_enabled": True
        }
    },
    {
        "lead": {
            "name": "Michael Chen",
            "company": "Chen Manufacturing",
            "email": "michael.chen@chenmfg.com",
            "value": 18000,
            "source": "Manual",
            "created_at": datetime(2025, 11, 5, 16, 20),
            "address": "Industrial Estate Road 5, Sheffield",
            "phone": "+44 114 555 0110"
        },
        "deal": {
            "title": "Factory workflow automation",
            "stage": Stages.QUALIFIED,
            "value": 18000,
            "next_action": "Prepare pilot scope deck",
            "next_action_date": datetime(2025, 12, 4, 11, 0),
            "reminder_channel": "SMS",
            "ai_auto_reminder_enabled": False
        }
    },
]


async def seed_demo_data(session: AsyncSession) -> int:
    """Insert the demo pipeline if there are no leads yet. Returns the number of leads added."""
    if await LeadRepository(session).count() > 0:
        return 0
    
    logger.info("Seeding demo leads/deals...")
    leads = [Lead(**entry["lead"]) for entry in DEMO_PIPELINE]
    session.add_all(leads)
    await session.flush()
    for lead, entry in zip(leads, DEMO_PIPELINE):
        session.add(Deal(lead_id=lead.id, **entry["deal"]))
    await session.commit()
    return len(DEMO_PIPELINE)
