"""
Campaign service - campaign lifecycle actions.
"""
from typing import Any, Dict, List

from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.core.exceptions import RecordNotFoundError
from editorial_ledger.core.identifiers import new_ledger_id, utcnow
from editorial_ledger.core.params import (
    AGENT_KEYS, CHANNELS, LEDGER_ID, LIMIT_KEYS, METADATA, STATUS_KEYS,
    Param, ParamSchema, as_limit, as_status, as_text, strict_status,
)
from editorial_ledger.models.base import to_record
from editorial_ledger.models.campaign import CampaignStatus
from editorial_ledger.models.event import EventTypes
from editorial_ledger.repositories.asset_repo import CampaignAssetRepository
from editorial_ledger.repositories.base import store_operation
from editorial_ledger.repositories.campaign_repo import CampaignRepository
from editorial_ledger.repositories.event_repo import CampaignEventRepository
from editorial_ledger.repositories.metric_repo import CampaignMetricRepository
from editorial_ledger.services.audit_service import AuditTrail


CREATE_CAMPAIGN = ParamSchema(
    "create_campaign",
    Param(
        "project_name",
        ("project_name", "projectName", "campaign_name", "campaignName", "name", "title"),
        required=True,
        coerce=as_text,
    ),
    Param("brief_id", ("brief_id", "briefId"), coerce=as_text),
    Param("status", STATUS_KEYS, default=CampaignStatus.INTAKE, coerce=as_status(CampaignStatus.INTAKE)),
    Param("owner_name", ("owner_name", "ownerName"), coerce=as_text),
    Param("owner_email", ("owner_email", "ownerEmail"), coerce=as_text),
    CHANNELS,
    METADATA,
)

GET_CAMPAIGN = ParamSchema("get_campaign", LEDGER_ID)

LIST_CAMPAIGNS = ParamSchema(
    "list_campaigns",
    Param("status", STATUS_KEYS, coerce=as_status()),
    Param("limit", LIMIT_KEYS, coerce=as_limit(None)),
)

UPDATE_STATUS = ParamSchema(
    "update_status",
    LEDGER_ID,
    Param(
        "status",
        ("status", "next_status", "nextStatus", "new_status", "newStatus",
         "campaign_status", "campaignStatus"),
        required=True,
        coerce=strict_status,
    ),
    Param("previous_status", ("previous_status", "previousStatus")),
    Param("agent", AGENT_KEYS, default="system", coerce=as_text),
    Param("reason", ("reason", "status_reason", "statusReason")),
    METADATA,
)

DELETE_CAMPAIGN = ParamSchema("delete_campaign", LEDGER_ID)


class CampaignService:
    """Service for campaign operations."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.campaign_repo = CampaignRepository(session)
        self.event_repo = CampaignEventRepository(session)
        self.metric_repo = CampaignMetricRepository(session)
        self.asset_repo = CampaignAssetRepository(session)
        self.audit = AuditTrail(session)

    async def create_campaign(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Create a campaign with a fresh ledger id and log campaign_created."""
        fields = CREATE_CAMPAIGN.resolve(params)
        now = utcnow()
        data = {
            "ledger_id": new_ledger_id(),
            "project_name": fields["project_name"],
            "brief_id": fields["brief_id"],
            "status": fields["status"],
            "owner_name": fields["owner_name"],
            "owner_email": fields["owner_email"],
            "channels": fields["channels"],
            "meta_data": fields["metadata"],
            "created_at": now,
            "updated_at": now,
        }

        async with store_operation(self.session, "create campaign"):
            campaign = await self.campaign_repo.create(data)
        record = to_record(campaign)

        # Log creation event for timeline
        await self.audit.record(record["ledger_id"], EventTypes.CAMPAIGN_CREATED, "orchestrator", {
            "project_name": record["project_name"],
            "channels": record["channels"],
        })

        return record

    async def get_campaign(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Campaign with its events, metrics and assets."""
        ledger_id = GET_CAMPAIGN.resolve(params)["ledger_id"]

        async with store_operation(self.session, "get campaign"):
            campaign = await self.campaign_repo.get(ledger_id)
            if not campaign:
                raise RecordNotFoundError("Campaign", ledger_id)
            events = await self.event_repo.timeline(ledger_id)
            metrics = await self.metric_repo.for_campaign(ledger_id)
            assets = await self.asset_repo.for_campaign(ledger_id)

        record = to_record(campaign)
        record["campaign_events"] = [to_record(event) for event in events]
        record["campaign_metrics"] = [to_record(metric) for metric in metrics]
        record["campaign_assets"] = [to_record(asset) for asset in assets]
        return record

    async def list_campaigns(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Newest first; an unrecognized status filter is ignored."""
        fields = LIST_CAMPAIGNS.resolve(params)

        async with store_operation(self.session, "list campaigns"):
            campaigns = await self.campaign_repo.list_recent(fields["status"], fields["limit"])

        return [to_record(campaign) for campaign in campaigns]

    async def update_status(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Move a campaign to a new status. A non-empty metadata map replaces the
        stored one entirely; it is not merged.
        """
        fields = UPDATE_STATUS.resolve(params)
        ledger_id = fields["ledger_id"]

        async with store_operation(self.session, "update status"):
            campaign = await self.campaign_repo.update(ledger_id, {
                "status": fields["status"],
                "updated_at": utcnow(),
                "meta_data": fields["metadata"] or None,
            })
        if not campaign:
            raise RecordNotFoundError("Campaign", ledger_id)
        record = to_record(campaign)

        # Log status change event
        await self.audit.record(ledger_id, EventTypes.STATUS_CHANGED, fields["agent"], {
            "from": fields["previous_status"],
            "to": fields["status"],
            "reason": fields["reason"],
        })

        return record

    async def delete_campaign(self, params: Dict[str, Any]) -> Dict[str, bool]:
        """Delete the row; dependent rows go with it through ON DELETE CASCADE."""
        ledger_id = DELETE_CAMPAIGN.resolve(params)["ledger_id"]

        async with store_operation(self.session, "delete campaign"):
            await self.campaign_repo.delete(ledger_id)

        return {"deleted": True}
