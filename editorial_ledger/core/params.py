"""
Parameter normalization for MCP actions.

Callers send a loose parameter bag and older clients use different spellings
for the same field (``campaignId`` vs ``ledger_id``). Every field therefore
has an ordered alias list; the first alias whose value is present and not
empty wins. Handlers declare their fields once as a ``ParamSchema`` and get
back a plain dict of canonical values, or a ``MissingParameter`` /
``ValidationError`` before anything touches the database.
"""
import logging
import math
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from editorial_ledger.core.exceptions import MissingParameter, ValidationError
from editorial_ledger.models.campaign import STATUS_ALIASES, VALID_STATUSES

logger = logging.getLogger(__name__)


# Alias lists, highest priority first
LEDGER_ID_KEYS = ("ledger_id", "ledgerId", "campaign_id", "campaignId", "id")
METADATA_KEYS = ("metadata", "meta")
STATUS_KEYS = ("status", "campaign_status", "campaignStatus")
CHANNEL_KEYS = ("channels", "channel", "channel_list", "channelList")
LIMIT_KEYS = ("limit", "page_size", "pageSize")
AGENT_KEYS = ("agent", "agent_name", "agentName", "actor")
AGENT_NAME_KEYS = ("agent_name", "agentName", "agent")
METRIC_TYPE_KEYS = ("metric_type", "metricType", "type")
METRIC_VALUE_KEYS = ("value", "metric_value", "metricValue")
SOURCE_KEYS = ("source", "metric_source", "metricSource")
CAMPAIGN_DATE_KEYS = ("campaign_date", "campaignDate")
PATTERN_TYPE_KEYS = ("pattern_type", "patternType", "type")
CONFIDENCE_KEYS = ("confidence_level", "confidenceLevel", "confidence")
SAMPLE_SIZE_KEYS = ("sample_size", "sampleSize", "samples")
TOOL_KEYS = ("tool_name", "toolName", "tool")


def is_mapping(value: Any) -> bool:
    return isinstance(value, dict)


def pick_param(params: Dict[str, Any], keys: Sequence[str]) -> Any:
    """Return the first value among ``keys`` that is not None or "", else None."""
    for key in keys:
        value = params.get(key)
        if value is not None and not (isinstance(value, str) and value == ""):
            return value
    return None


def normalize_channels(value: Any) -> List[str]:
    """Accept a list or a comma-separated string; anything else is []."""
    if not value:
        return []
    if isinstance(value, (list, tuple)):
        items = [str(channel) for channel in value if channel is not None]
    elif isinstance(value, str):
        items = value.split(",")
    else:
        return []
    return [item.strip() for item in items if item.strip()]


def normalize_status(value: Any, default: Optional[str] = None) -> Optional[str]:
    if value is None or value == "":
        return default

    raw = str(value).strip().lower()
    if raw in STATUS_ALIASES:
        return STATUS_ALIASES[raw]
    if raw in VALID_STATUSES:
        return raw

    logger.warning(f'Unknown campaign status "{value}", defaulting to {default}')
    return default


def normalize_ledger_id(params: Dict[str, Any]) -> Optional[str]:
    return pick_param(params, LEDGER_ID_KEYS)


def normalize_metadata(params: Dict[str, Any]) -> Dict[str, Any]:
    metadata = pick_param(params, METADATA_KEYS)
    return metadata if is_mapping(metadata) else {}


def require_param(value: Any, label: str, action: str) -> Any:
    if value is None or (isinstance(value, str) and value == ""):
        raise MissingParameter(label, action)
    return value


def to_number(value: Any) -> Optional[float]:
    """Finite float from a number or numeric string, else None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def to_datetime(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 date or datetime into naive UTC."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


# Coercers: called with (value, field, action) only when a value was found.

Coercer = Callable[[Any, str, str], Any]


def as_status(default: Optional[str] = None) -> Coercer:
    return lambda value, field, action: normalize_status(value, default)


def strict_status(value: Any, field: str, action: str) -> str:
    status = normalize_status(value)
    if status is None:
        raise ValidationError(f'"{value}" is not a valid campaign status', field, action)
    return status


def as_text(value: Any, field: str, action: str) -> str:
    return value if isinstance(value, str) else str(value)


def as_channels(value: Any, field: str, action: str) -> List[str]:
    return normalize_channels(value)


def as_mapping(value: Any, field: str, action: str) -> Dict[str, Any]:
    return value if is_mapping(value) else {}


def as_number(value: Any, field: str, action: str) -> float:
    number = to_number(value)
    if number is None:
        raise ValidationError(f"{field} must be a number", field, action)
    return number


def as_optional_number(value: Any, field: str, action: str) -> Optional[float]:
    return to_number(value)


def as_limit(default: Optional[int]) -> Coercer:
    def coerce(value: Any, field: str, action: str) -> Optional[int]:
        number = to_number(value)
        if number is None or number < 1:
            return default
        return int(number)
    return coerce


def as_confidence(value: Any, field: str, action: str) -> float:
    number = to_number(value)
    if number is None or number < 0 or number > 1:
        raise ValidationError(f"{field} must be a number between 0 and 1", field, action)
    return number


def as_sample_size(value: Any, field: str, action: str) -> int:
    number = to_number(value)
    if number is None or number <= 0:
        raise ValidationError(f"{field} must be a positive number", field, action)
    if not number.is_integer():
        raise ValidationError(f"{field} must be a whole number", field, action)
    return int(number)


def as_datetime(value: Any, field: str, action: str) -> datetime:
    parsed = to_datetime(value)
    if parsed is None:
        raise ValidationError(f"{field} must be an ISO-8601 date", field, action)
    return parsed


class Param:
    """One logical field: its aliases, whether it is required, how to coerce it."""

    def __init__(
        self,
        name: str,
        aliases: Optional[Sequence[str]] = None,
        required: bool = False,
        default: Any = None,
        coerce: Optional[Coercer] = None,
    ):
        self.name = name
        self.aliases = tuple(aliases or (name,))
        self.required = required
        self.default = default
        self.coerce = coerce

    def resolve(self, params: Dict[str, Any], action: str) -> Any:
        value = pick_param(params, self.aliases)
        if value is None:
            if self.required:
                raise MissingParameter(self.name, action)
            return self.default() if callable(self.default) else self.default
        if self.coerce is not None:
            value = self.coerce(value, self.name, action)
        if self.required:
            require_param(value, self.name, action)
        return value


class ParamSchema:
    """Ordered set of params for one action, evaluated in declaration order."""

    def __init__(self, action: str, *params: Param):
        self.action = action
        self.params = params

    def resolve(self, params: Any) -> Dict[str, Any]:
        bag = params if is_mapping(params) else {}
        return {param.name: param.resolve(bag, self.action) for param in self.params}


# Shared field declarations
LEDGER_ID = Param("ledger_id", LEDGER_ID_KEYS, required=True, coerce=as_text)
METADATA = Param("metadata", METADATA_KEYS, default=dict, coerce=as_mapping)
CHANNELS = Param("channels", CHANNEL_KEYS, default=list, coerce=as_channels)
