"""
Report service - read-only aggregates for VP reporting.
"""
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Dict

from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.core.identifiers import utcnow
from editorial_ledger.core.params import Param, ParamSchema, as_datetime
from editorial_ledger.models.base import to_record
from editorial_ledger.models.campaign import CampaignStatus
from editorial_ledger.repositories.base import store_operation
from editorial_ledger.repositories.campaign_repo import CampaignRepository
from editorial_ledger.repositories.metric_repo import CampaignMetricRepository
from editorial_ledger.repositories.pattern_repo import LearnedPatternRepository

DEFAULT_REPORT_DAYS = 30
WEEKLY_REPORT_DAYS = 7

GENERATE_REPORT_DATA = ParamSchema(
    "generate_report_data",
    Param("start_date", ("start_date", "startDate"), coerce=as_datetime),
    Param("end_date", ("end_date", "endDate"), coerce=as_datetime),
)


class ReportService:
    """Service for report aggregates."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.campaign_repo = CampaignRepository(session)
        self.metric_repo = CampaignMetricRepository(session)
        self.pattern_repo = LearnedPatternRepository(session)

    async def generate_report_data(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Report over [start_date, end_date]; defaults to the last 30 days."""
        fields = GENERATE_REPORT_DATA.resolve(params)
        now = utcnow()
        end = fields["end_date"] or now
        start = fields["start_date"] or now - timedelta(days=DEFAULT_REPORT_DAYS)
        return await self.build_report(start, end)

    async def get_weekly_summary(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """The same report over a fixed 7-day window ending now; params are ignored."""
        now = utcnow()
        return await self.build_report(now - timedelta(days=WEEKLY_REPORT_DAYS), now)

    async def build_report(self, start: datetime, end: datetime) -> Dict[str, Any]:
        async with store_operation(self.session, "generate report data"):
            campaigns = await self.campaign_repo.created_between(start, end)
            metrics = await self.metric_repo.for_campaigns(c.ledger_id for c in campaigns)
            # Counted from the range start with no upper bound
            patterns = await self.pattern_repo.learned_since(start)

        metrics_by_campaign = defaultdict(list)
        values_by_type = defaultdict(list)
        for metric in metrics:
            metrics_by_campaign[metric.ledger_id].append(to_record(metric))
            values_by_type[metric.metric_type].append(metric.value)

        campaign_records = []
        for campaign in campaigns:
            record = to_record(campaign)
            record["campaign_metrics"] = metrics_by_campaign.get(campaign.ledger_id, [])
            campaign_records.append(record)

        metric_averages = {
            metric_type: {"avg": round(sum(values) / len(values), 4), "count": len(values)}
            for metric_type, values in values_by_type.items()
        }

        return {
            "date_range": {"start": start, "end": end},
            "campaigns_created": len(campaigns),
            "campaigns_completed": sum(1 for c in campaigns if c.status == CampaignStatus.COMPLETE),
            "total_metrics": len(metrics),
            "patterns_learned": len(patterns),
            "metric_averages": metric_averages,
            "campaigns": campaign_records,
            "learned_patterns": [to_record(pattern) for pattern in patterns],
        }
