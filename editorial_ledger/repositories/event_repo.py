"""
Campaign event repository.
"""
from typing import Any, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.models.event import CampaignEvent
from editorial_ledger.repositories.base import BaseRepository


class CampaignEventRepository(BaseRepository[CampaignEvent]):
    """Repository for CampaignEvent operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(CampaignEvent, session)

    async def log(self, ledger_id: str, event_type: str, actor: str, payload: Any = None) -> CampaignEvent:
        """Append an event to a campaign's timeline."""
        return await self.create({
            "ledger_id": ledger_id,
            "event_type": event_type,
            "actor": actor,
            "payload": payload if payload is not None else {},
        })

    async def timeline(self, ledger_id: str) -> List[CampaignEvent]:
        """Events for a campaign, oldest first."""
        query = select(CampaignEvent).where(
            CampaignEvent.ledger_id == ledger_id
        ).order_by(CampaignEvent.created_at)
        result = await self.session.exec(query)
        return list(result.all())
