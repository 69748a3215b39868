# Models package - ledger tables
from editorial_ledger.models.campaign import Campaign, CampaignStatus
from editorial_ledger.models.event import CampaignEvent, EventTypes
from editorial_ledger.models.metric import CampaignMetric
from editorial_ledger.models.pattern import LearnedPattern
from editorial_ledger.models.asset import CampaignAsset
from editorial_ledger.models.execution import ExternalExecution
