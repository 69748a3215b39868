"""
Campaign metric model - one numeric performance sample.
"""
from datetime import datetime
from typing import Optional, Dict, Any

from sqlmodel import SQLModel, Field

from editorial_ledger.models.base import json_column, timestamp_field


class CampaignMetric(SQLModel, table=True):
    __tablename__ = "campaign_metrics"

    id: Optional[int] = Field(default=None, primary_key=True)
    ledger_id: str = Field(foreign_key="campaigns.ledger_id", ondelete="CASCADE", index=True)

    metric_type: str = Field(index=True)  # 'email_open_rate', 'social_engagement', ...
    value: float
    source: str = Field(index=True)  # 'beehiiv', 'buffer', 'instagram', ...

    tracked_at: datetime = timestamp_field(index=True)
    campaign_date: Optional[str] = None  # when the campaign actually ran, as sent

    meta_data: Dict[str, Any] = Field(default_factory=dict, sa_column=json_column("metadata"))
