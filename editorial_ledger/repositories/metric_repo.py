"""
Campaign metric repository.
"""
from typing import Optional, List, Iterable

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.models.metric import CampaignMetric
from editorial_ledger.repositories.base import BaseRepository


class CampaignMetricRepository(BaseRepository[CampaignMetric]):
    """Repository for CampaignMetric operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(CampaignMetric, session)

    async def for_campaign(self, ledger_id: str, metric_type: Optional[str] = None) -> List[CampaignMetric]:
        """Metrics of one campaign, newest first."""
        return await self.list(
            filters={"ledger_id": ledger_id, "metric_type": metric_type},
            order_by="tracked_at",
            order_desc=True
        )

    async def history(self, metric_type: str, limit: int) -> List[CampaignMetric]:
        """Latest samples of a metric type across all campaigns."""
        return await self.list(
            filters={"metric_type": metric_type},
            order_by="tracked_at",
            order_desc=True,
            limit=limit
        )

    async def for_campaigns(self, ledger_ids: Iterable[str]) -> List[CampaignMetric]:
        ids = list(set(ledger_ids))
        if not ids:
            return []
        query = select(CampaignMetric).where(
            CampaignMetric.ledger_id.in_(ids)
        ).order_by(CampaignMetric.tracked_at.desc())
        result = await self.session.exec(query)
        return list(result.all())
