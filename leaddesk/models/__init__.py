# Models package - normalized database models
from leaddesk.models.lead import Lead
from leaddesk.models.deal import Deal
from leaddesk.models.activity import DealActivity
from leaddesk.models.outreach import OutreachStep
