"""
Audit trail - best-effort campaign event logging.

The primary write of an action is never rolled back or failed because its
audit event could not be written. The outcome is still reported back to the
calling service as an AuditResult so it shows up in the logs.
"""
import logging
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.core.exceptions import StoreError
from editorial_ledger.repositories.base import store_operation
from editorial_ledger.repositories.event_repo import CampaignEventRepository

logger = logging.getLogger(__name__)


class AuditResult:
    """Whether the secondary audit write went through."""

    def __init__(self, recorded: bool, event_id: Optional[str] = None, error: Optional[str] = None):
        self.recorded = recorded
        self.event_id = event_id
        self.error = error

    def __bool__(self) -> bool:
        return self.recorded

    def __repr__(self) -> str:
        if self.recorded:
            return f"AuditResult(recorded=True, event_id={self.event_id!r})"
        return f"AuditResult(recorded=False, error={self.error!r})"


class AuditTrail:
    """Writes campaign events and swallows store failures."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.event_repo = CampaignEventRepository(session)

    async def record(self, ledger_id: str, event_type: str, actor: str, payload: Any = None) -> AuditResult:
        try:
            async with store_operation(self.session, "log campaign event"):
                event = await self.event_repo.log(
                    ledger_id,
                    event_type,
                    actor,
                    jsonable_encoder(payload)
                )
        except StoreError as e:
            logger.error(f"Failed to log campaign event {event_type} for {ledger_id}: {e.cause}")
            return AuditResult(recorded=False, error=str(e))
        return AuditResult(recorded=True, event_id=event.event_id)
