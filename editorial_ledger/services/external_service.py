"""
External tool integration - execution logging and status sync.
"""
from typing import Any, Dict

from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.core.identifiers import utcnow
from editorial_ledger.core.params import (
    LEDGER_ID, TOOL_KEYS, Param, ParamSchema, as_mapping, as_text,
)
from editorial_ledger.models.event import EventTypes
from editorial_ledger.repositories.base import store_operation
from editorial_ledger.repositories.campaign_repo import CampaignRepository
from editorial_ledger.services.audit_service import AuditTrail

DEFAULT_TOOL = "external-tool"

TOOL = Param("tool_name", TOOL_KEYS, default=DEFAULT_TOOL, coerce=as_text)

LOG_EXTERNAL_EXECUTION = ParamSchema(
    "log_external_execution",
    LEDGER_ID,
    TOOL,
    Param("external_id", ("external_id", "externalId")),
    Param("external_url", ("external_url", "externalUrl", "url")),
    Param("execution_status", ("status", "execution_status", "executionStatus")),
    Param("execution_data", ("execution_data", "executionData", "payload")),
)

SYNC_EXTERNAL_STATUS = ParamSchema(
    "sync_external_status",
    LEDGER_ID,
    Param("current_metadata", ("current_metadata", "currentMetadata", "metadata"), default=dict, coerce=as_mapping),
    Param("external_status", ("external_status", "externalStatus", "status"), required=True),
    TOOL,
)


class ExternalService:
    """Service for external tool executions."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.campaign_repo = CampaignRepository(session)
        self.audit = AuditTrail(session)

    async def log_external_execution(self, params: Dict[str, Any]) -> Dict[str, bool]:
        """Recorded as an external_execution event on the campaign timeline."""
        fields = LOG_EXTERNAL_EXECUTION.resolve(params)

        await self.audit.record(fields["ledger_id"], EventTypes.EXTERNAL_EXECUTION, fields["tool_name"], {
            "external_id": fields["external_id"],
            "external_url": fields["external_url"],
            "execution_status": fields["execution_status"],
            "execution_data": fields["execution_data"],
        })
        return {"logged": True}

    async def sync_external_status(self, params: Dict[str, Any]) -> Dict[str, bool]:
        """
        Write the caller's metadata snapshot back with external_status and
        last_sync set. The merge is shallow and last-write-wins: changes made
        to the stored metadata since the caller read it are lost.
        """
        fields = SYNC_EXTERNAL_STATUS.resolve(params)
        ledger_id = fields["ledger_id"]
        metadata = {
            **fields["current_metadata"],
            "external_status": fields["external_status"],
            "last_sync": utcnow().isoformat(),
        }

        # Update campaign with external tool status
        async with store_operation(self.session, "sync external status"):
            await self.campaign_repo.update(ledger_id, {"meta_data": metadata})

        await self.audit.record(ledger_id, EventTypes.EXTERNAL_SYNC, fields["tool_name"], fields["external_status"])

        return {"synced": True}
