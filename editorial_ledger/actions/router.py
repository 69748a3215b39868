"""
Action router - executes one MCP request and builds the response envelope.
"""
import logging
import time
from typing import Any, Dict, Optional, Tuple

from fastapi import status
from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.actions.registry import ActionRegistry, Handler
from editorial_ledger.config import Settings, settings as default_settings
from editorial_ledger.core.exceptions import InvalidRequest, LedgerError, UnknownAction
from editorial_ledger.core.identifiers import utcnow
from editorial_ledger.schemas.mcp import McpRequest, McpResponse, ServiceDescription

logger = logging.getLogger(__name__)


class ActionRouter:
    """Routes an action name to its handler and wraps the outcome."""

    def __init__(self, registry: ActionRegistry, settings: Optional[Settings] = None):
        self.registry = registry
        self.settings = settings or default_settings

    def resolve(self, action: str) -> Handler:
        if not action:
            raise InvalidRequest()
        handler = self.registry.get(action)
        if handler is None:
            raise UnknownAction(action, self.registry.names)
        return handler

    async def dispatch(self, body: Any, session: AsyncSession) -> Tuple[int, Dict[str, Any]]:
        """
        Run the request to completion and return (HTTP status, envelope).
        Timing is logged only.
        """
        start_time = time.perf_counter()
        request = McpRequest.from_body(body)
        action = request.action

        try:
            handler = self.resolve(action)
            logger.info(f"Ledger MCP: {action}")
            logger.debug(f"Ledger MCP params for {action}: {request.params}")

            result = await handler(session, request.params)

        except LedgerError as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.warning(f"Ledger MCP {action or '<none>'} failed ({duration:.0f}ms): {e.message}")
            return e.status_code, McpResponse.fail(e.message)

        except Exception as e:
            duration = (time.perf_counter() - start_time) * 1000
            logger.exception(f"Ledger MCP error in {action} ({duration:.0f}ms)")
            return status.HTTP_500_INTERNAL_SERVER_ERROR, McpResponse.fail(str(e) or "Internal server error")

        duration = (time.perf_counter() - start_time) * 1000
        logger.info(f"Ledger MCP: {action} completed in {duration:.0f}ms")
        return status.HTTP_200_OK, McpResponse.ok(result)

    def describe(self) -> Dict[str, Any]:
        """Static service metadata; no side effects."""
        return ServiceDescription(
            service=self.settings.SERVICE_NAME,
            version=self.settings.SERVICE_VERSION,
            mcp_protocol_version=self.settings.MCP_PROTOCOL_VERSION,
            core_actions=self.registry.core_actions,
            extended_actions=self.registry.extended_actions,
            timestamp=utcnow(),
        ).model_dump()
