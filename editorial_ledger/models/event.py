"""
Campaign event model - append-only audit trail.
Written as a side effect of most mutating actions, never updated.
"""
from datetime import datetime
from typing import Any

from sqlmodel import SQLModel, Field

from editorial_ledger.core.identifiers import new_event_id
from editorial_ledger.models.base import json_column, timestamp_field


class CampaignEvent(SQLModel, table=True):
    __tablename__ = "campaign_events"

    event_id: str = Field(default_factory=new_event_id, primary_key=True)
    ledger_id: str = Field(foreign_key="campaigns.ledger_id", ondelete="CASCADE", index=True)

    event_type: str = Field(index=True)
    actor: str  # 'brief-specialist', 'newsletter-agent', 'orchestrator', etc.

    # Any JSON value; usually a map
    payload: Any = Field(default_factory=dict, sa_column=json_column())

    created_at: datetime = timestamp_field(index=True)


# Event types written by the core actions
class EventTypes:
    CAMPAIGN_CREATED = "campaign_created"
    STATUS_CHANGED = "status_changed"
    PROGRESS_UPDATE = "progress_update"
    METRICS_STORED = "metrics_stored"
    ASSET_ATTACHED = "asset_attached"
    EXTERNAL_EXECUTION = "external_execution"
    EXTERNAL_SYNC = "external_sync"
