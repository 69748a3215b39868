"""
Campaign asset repository.
"""
from typing import List

from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.models.asset import CampaignAsset
from editorial_ledger.repositories.base import BaseRepository


class CampaignAssetRepository(BaseRepository[CampaignAsset]):
    """Repository for CampaignAsset operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(CampaignAsset, session)

    async def for_campaign(self, ledger_id: str) -> List[CampaignAsset]:
        """Assets of one campaign, most recently attached first."""
        return await self.list(
            filters={"ledger_id": ledger_id},
            order_by="attached_at",
            order_desc=True
        )
