"""
Campaign asset model - links a campaign to an asset in the DAM.
"""
from datetime import datetime
from typing import Optional, Dict, Any, List

from sqlmodel import SQLModel, Field

from editorial_ledger.models.base import json_column, timestamp_field


class CampaignAsset(SQLModel, table=True):
    __tablename__ = "campaign_assets"

    id: Optional[int] = Field(default=None, primary_key=True)
    ledger_id: str = Field(foreign_key="campaigns.ledger_id", ondelete="CASCADE", index=True)

    asset_id: str  # id in the DAM system
    asset_url: Optional[str] = None
    asset_type: Optional[str] = Field(default=None, index=True)  # 'image', 'video', 'document'

    channels: List[str] = Field(default_factory=list, sa_column=json_column())

    attached_at: datetime = timestamp_field()
    attached_by: str  # 'dam-agent', 'user', ...

    meta_data: Dict[str, Any] = Field(default_factory=dict, sa_column=json_column("metadata"))
