"""
Timeline service - agent action logging and execution progress.
"""
from typing import Any, Dict, List

from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.core.identifiers import utcnow
from editorial_ledger.core.params import (
    AGENT_KEYS, LEDGER_ID, Param, ParamSchema, as_text, is_mapping,
)
from editorial_ledger.models.base import to_record
from editorial_ledger.models.event import EventTypes
from editorial_ledger.repositories.base import store_operation
from editorial_ledger.repositories.campaign_repo import CampaignRepository
from editorial_ledger.repositories.event_repo import CampaignEventRepository
from editorial_ledger.services.audit_service import AuditTrail


LOG_AGENT_ACTION = ParamSchema(
    "log_agent_action",
    LEDGER_ID,
    Param("action_type", ("action_type", "actionType", "event_type", "eventType"), required=True, coerce=as_text),
    Param("agent_name", ("agent_name", "agentName", "agent", "actor"), required=True, coerce=as_text),
    Param("action_data", ("action_data", "actionData", "payload"), default=dict),
)

GET_CAMPAIGN_TIMELINE = ParamSchema("get_campaign_timeline", LEDGER_ID)

UPDATE_EXECUTION_PROGRESS = ParamSchema(
    "update_execution_progress",
    LEDGER_ID,
    Param("progress_data", ("progress_data", "progressData", "metadata")),
    Param("agent", AGENT_KEYS, default="system", coerce=as_text),
)


class TimelineService:
    """Service for the campaign event timeline."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.campaign_repo = CampaignRepository(session)
        self.event_repo = CampaignEventRepository(session)
        self.audit = AuditTrail(session)

    async def log_agent_action(self, params: Dict[str, Any]) -> Dict[str, bool]:
        """Pure audit append; a failed event write is logged, not raised."""
        fields = LOG_AGENT_ACTION.resolve(params)

        await self.audit.record(
            fields["ledger_id"],
            fields["action_type"],
            fields["agent_name"],
            fields["action_data"]
        )
        return {"logged": True}

    async def get_campaign_timeline(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Events of a campaign, oldest first."""
        ledger_id = GET_CAMPAIGN_TIMELINE.resolve(params)["ledger_id"]

        async with store_operation(self.session, "get timeline"):
            events = await self.event_repo.timeline(ledger_id)

        return [to_record(event) for event in events]

    async def update_execution_progress(self, params: Dict[str, Any]) -> Dict[str, bool]:
        """
        Overwrite the campaign's whole metadata map with the progress data.
        Callers must resend the complete metadata every time; nothing is merged.
        A scalar progress value is stored as {"value": <v>}.
        """
        fields = UPDATE_EXECUTION_PROGRESS.resolve(params)
        ledger_id = fields["ledger_id"]
        raw = fields["progress_data"]
        if is_mapping(raw):
            progress_data = raw
        elif raw:
            progress_data = {"value": raw}
        else:
            progress_data = {}

        async with store_operation(self.session, "update progress"):
            await self.campaign_repo.update(ledger_id, {
                "meta_data": progress_data,
                "updated_at": utcnow(),
            })

        # Log progress event
        await self.audit.record(ledger_id, EventTypes.PROGRESS_UPDATE, fields["agent"], progress_data)

        return {"updated": True}
