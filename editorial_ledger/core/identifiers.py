"""
Identifier and timestamp helpers.
Ids are a millisecond timestamp prefix plus a short random base36 suffix;
collisions are not checked.
"""
import secrets
import string
import time
from datetime import datetime, timezone

_BASE36 = string.digits + string.ascii_lowercase


def utcnow() -> datetime:
    """Naive UTC now, the form every timestamp column stores."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _token(length: int) -> str:
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def _time_ordered(prefix: str, suffix_length: int) -> str:
    return f"{prefix}-{int(time.time() * 1000)}-{_token(suffix_length)}"


def new_ledger_id() -> str:
    return _time_ordered("LED", 6)


def new_event_id() -> str:
    return _time_ordered("EVT", 4)


def new_pattern_id() -> str:
    return _time_ordered("PAT", 4)
