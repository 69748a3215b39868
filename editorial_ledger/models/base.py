"""
Shared column helpers for the ledger tables.
"""
from typing import Any, Dict, Optional

from sqlmodel import Field, SQLModel
from sqlalchemy import JSON, Column, DateTime
from sqlalchemy.dialects.postgresql import JSONB

from editorial_ledger.core.identifiers import utcnow

# JSONB on PostgreSQL, plain JSON elsewhere (tests run on SQLite)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def json_column(name: Optional[str] = None, **kwargs) -> Column:
    """
    Build a JSON column. ``name`` sets the database column name when the
    attribute has to differ from it (``metadata`` is reserved by SQLAlchemy).
    """
    if name:
        return Column(name, JSONType, **kwargs)
    return Column(JSONType, **kwargs)


def timestamp_field(**kwargs) -> Any:
    """
    Naive UTC timestamp column, defaulting to now. The column type is pinned
    to a plain DateTime so newer SQLModel releases do not map it to a
    timezone-aware type that rejects naive values.
    """
    return Field(default_factory=utcnow, sa_type=DateTime(timezone=False), **kwargs)


def to_record(obj: SQLModel) -> Dict[str, Any]:
    """Row as the plain dict returned to MCP callers."""
    data = obj.model_dump()
    if "meta_data" in data:
        data["metadata"] = data.pop("meta_data")
    return data
