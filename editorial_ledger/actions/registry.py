"""
Action registry - maps MCP action names to handlers.

The core table is static. Deployment-specific actions are handed to the
registry when it is built, either directly or loaded from
``module:attribute`` references listed in EXTENSION_MODULES.
"""
import importlib
import logging
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional

from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.services.asset_service import AssetService
from editorial_ledger.services.campaign_service import CampaignService
from editorial_ledger.services.external_service import ExternalService
from editorial_ledger.services.metrics_service import MetricsService
from editorial_ledger.services.pattern_service import PatternService
from editorial_ledger.services.report_service import ReportService
from editorial_ledger.services.timeline_service import TimelineService

logger = logging.getLogger(__name__)

Handler = Callable[[AsyncSession, Dict[str, Any]], Awaitable[Any]]


def service_action(service_cls: type, method_name: str) -> Handler:
    """Handler that builds the service on the request's session and calls one method."""
    async def handler(session: AsyncSession, params: Dict[str, Any]) -> Any:
        service = service_cls(session)
        return await getattr(service, method_name)(params)

    handler.__name__ = method_name
    handler.__qualname__ = f"{service_cls.__name__}.{method_name}"
    return handler


CORE_ACTIONS: Dict[str, Handler] = {
    # Campaign lifecycle
    "create_campaign": service_action(CampaignService, "create_campaign"),
    "get_campaign": service_action(CampaignService, "get_campaign"),
    "list_campaigns": service_action(CampaignService, "list_campaigns"),
    "update_status": service_action(CampaignService, "update_status"),
    "delete_campaign": service_action(CampaignService, "delete_campaign"),

    # Agent execution tracking
    "log_agent_action": service_action(TimelineService, "log_agent_action"),
    "get_campaign_timeline": service_action(TimelineService, "get_campaign_timeline"),
    "update_execution_progress": service_action(TimelineService, "update_execution_progress"),

    # Performance metrics
    "store_metrics": service_action(MetricsService, "store_metrics"),
    "get_metrics": service_action(MetricsService, "get_metrics"),
    "get_performance_history": service_action(MetricsService, "get_performance_history"),

    # Learned patterns
    "get_learned_patterns": service_action(PatternService, "get_learned_patterns"),
    "store_learned_pattern": service_action(PatternService, "store_learned_pattern"),
    "update_pattern_confidence": service_action(PatternService, "update_pattern_confidence"),

    # Reporting
    "generate_report_data": service_action(ReportService, "generate_report_data"),
    "get_weekly_summary": service_action(ReportService, "get_weekly_summary"),

    # Asset management
    "attach_asset": service_action(AssetService, "attach_asset"),
    "list_assets": service_action(AssetService, "list_assets"),

    # External tool integration
    "log_external_execution": service_action(ExternalService, "log_external_execution"),
    "sync_external_status": service_action(ExternalService, "sync_external_status"),
}


class ActionRegistry:
    """Immutable set of core and extended actions for one router."""

    def __init__(
        self,
        extended: Optional[Mapping[str, Handler]] = None,
        core: Optional[Mapping[str, Handler]] = None
    ):
        self._core = dict(CORE_ACTIONS if core is None else core)
        self._extended = dict(extended or {})

        clashes = sorted(set(self._core) & set(self._extended))
        if clashes:
            raise ValueError(f"Extended actions may not replace core actions: {', '.join(clashes)}")
        for name, handler in self._extended.items():
            if not callable(handler):
                raise ValueError(f"Handler for extended action '{name}' is not callable")

    def get(self, action: str) -> Optional[Handler]:
        return self._core.get(action) or self._extended.get(action)

    def __contains__(self, action: str) -> bool:
        return action in self._core or action in self._extended

    @property
    def core_actions(self) -> List[str]:
        return list(self._core)

    @property
    def extended_actions(self) -> List[str]:
        return list(self._extended)

    @property
    def names(self) -> List[str]:
        return self.core_actions + self.extended_actions


def load_extensions(refs: Iterable[str]) -> Dict[str, Handler]:
    """
    Import ``module:attribute`` references (attribute defaults to ACTIONS),
    each naming a mapping of action name to handler.
    """
    actions: Dict[str, Handler] = {}
    for ref in refs:
        module_name, _, attribute = ref.partition(":")
        module = importlib.import_module(module_name)
        table = getattr(module, attribute or "ACTIONS")
        if not isinstance(table, Mapping):
            raise ValueError(f"Extension '{ref}' is not a mapping of actions")

        duplicates = sorted(set(actions) & set(table))
        if duplicates:
            raise ValueError(f"Extension '{ref}' redefines actions: {', '.join(duplicates)}")

        actions.update(table)
        logger.info(f"Loaded {len(table)} extended actions from {ref}")
    return actions
