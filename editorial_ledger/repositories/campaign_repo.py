"""
Campaign repository.
"""
from datetime import datetime
from typing import Optional, List, Iterable

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.models.campaign import Campaign
from editorial_ledger.repositories.base import BaseRepository


class CampaignRepository(BaseRepository[Campaign]):
    """Repository for Campaign operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(Campaign, session)

    async def list_recent(self, status: Optional[str] = None, limit: Optional[int] = None) -> List[Campaign]:
        """Newest campaigns first, optionally filtered by status."""
        return await self.list(
            filters={"status": status},
            order_by="created_at",
            order_desc=True,
            limit=limit
        )

    async def created_between(self, start: datetime, end: datetime) -> List[Campaign]:
        query = select(Campaign).where(
            Campaign.created_at >= start,
            Campaign.created_at <= end
        ).order_by(Campaign.created_at.desc())
        result = await self.session.exec(query)
        return list(result.all())

    async def get_many(self, ledger_ids: Iterable[str]) -> List[Campaign]:
        ids = list(set(ledger_ids))
        if not ids:
            return []
        query = select(Campaign).where(Campaign.ledger_id.in_(ids))
        result = await self.session.exec(query)
        return list(result.all())
