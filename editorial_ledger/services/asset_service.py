"""
Asset service - DAM attachments.
"""
from typing import Any, Dict, List

from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.core.identifiers import utcnow
from editorial_ledger.core.params import (
    CHANNELS, LEDGER_ID, METADATA, Param, ParamSchema, as_text,
)
from editorial_ledger.models.base import to_record
from editorial_ledger.models.event import EventTypes
from editorial_ledger.repositories.asset_repo import CampaignAssetRepository
from editorial_ledger.repositories.base import store_operation
from editorial_ledger.services.audit_service import AuditTrail

ATTACH_ASSET = ParamSchema(
    "attach_asset",
    LEDGER_ID,
    Param("asset_id", ("asset_id", "assetId", "id"), required=True, coerce=as_text),
    Param("asset_url", ("asset_url", "assetUrl", "url"), coerce=as_text),
    Param("asset_type", ("asset_type", "assetType", "type"), coerce=as_text),
    CHANNELS,
    Param("attached_by", ("attached_by", "attachedBy", "agent", "agent_name"), default="dam-agent", coerce=as_text),
    METADATA,
)

LIST_ASSETS = ParamSchema("list_assets", LEDGER_ID)


class AssetService:
    """Service for campaign assets."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.asset_repo = CampaignAssetRepository(session)
        self.audit = AuditTrail(session)

    async def attach_asset(self, params: Dict[str, Any]) -> Dict[str, bool]:
        fields = ATTACH_ASSET.resolve(params)
        asset = {
            "ledger_id": fields["ledger_id"],
            "asset_id": fields["asset_id"],
            "asset_url": fields["asset_url"],
            "asset_type": fields["asset_type"],
            "channels": fields["channels"],
            "attached_at": utcnow(),
            "attached_by": fields["attached_by"],
            "meta_data": fields["metadata"],
        }

        async with store_operation(self.session, "attach asset"):
            created = await self.asset_repo.create(asset)

        await self.audit.record(created.ledger_id, EventTypes.ASSET_ATTACHED, created.attached_by, to_record(created))

        return {"attached": True}

    async def list_assets(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        ledger_id = LIST_ASSETS.resolve(params)["ledger_id"]

        async with store_operation(self.session, "list assets"):
            assets = await self.asset_repo.for_campaign(ledger_id)

        return [to_record(asset) for asset in assets]
