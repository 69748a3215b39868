"""
Campaign model - the aggregate root of the ledger.
Events, metrics and assets reference it by ledger_id.
"""
from datetime import datetime
from typing import Optional, Dict, Any, List

from sqlmodel import SQLModel, Field

from editorial_ledger.models.base import json_column, timestamp_field


class CampaignStatus:
    INTAKE = "intake"                # Brief created, campaign started
    ASSETS_READY = "assets_ready"    # Assets found and approved
    CONTENT_DRAFT = "content_draft"  # Content created but not scheduled
    SCHEDULED = "scheduled"          # Content scheduled in external tools
    EXECUTING = "executing"          # Campaign is live/sending
    TRACKING = "tracking"            # Waiting for performance data
    ANALYZING = "analyzing"          # Performance analysis in progress
    COMPLETE = "complete"            # Campaign complete with learnings
    PAUSED = "paused"                # Campaign paused by user
    FAILED = "failed"                # Campaign encountered errors


VALID_STATUSES = (
    CampaignStatus.INTAKE,
    CampaignStatus.ASSETS_READY,
    CampaignStatus.CONTENT_DRAFT,
    CampaignStatus.SCHEDULED,
    CampaignStatus.EXECUTING,
    CampaignStatus.TRACKING,
    CampaignStatus.ANALYZING,
    CampaignStatus.COMPLETE,
    CampaignStatus.PAUSED,
    CampaignStatus.FAILED,
)

STATUS_ALIASES = {
    "draft": CampaignStatus.CONTENT_DRAFT,
    "ready": CampaignStatus.ASSETS_READY,
    "assets": CampaignStatus.ASSETS_READY,
    "live": CampaignStatus.EXECUTING,
    "analysis": CampaignStatus.ANALYZING,
    "completed": CampaignStatus.COMPLETE,
}


class Campaign(SQLModel, table=True):
    """
    Campaign entity - one editorial campaign tracked by the ledger.
    ledger_id is generated at creation and never changes.
    """
    __tablename__ = "campaigns"

    ledger_id: str = Field(primary_key=True)

    # Basic info
    project_name: str
    brief_id: Optional[str] = None
    status: str = Field(default=CampaignStatus.INTAKE, index=True)

    # Owner
    owner_name: Optional[str] = None
    owner_email: Optional[str] = Field(default=None, index=True)

    # Ordered list of channel names, e.g. ["email", "social"]
    channels: List[str] = Field(default_factory=list, sa_column=json_column())

    # Timestamps
    created_at: datetime = timestamp_field(index=True)
    updated_at: datetime = timestamp_field()

    # Free-form metadata (column is named "metadata")
    meta_data: Dict[str, Any] = Field(default_factory=dict, sa_column=json_column("metadata"))
