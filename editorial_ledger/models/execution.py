"""
External execution model.
The table is part of the ledger schema; actions record external executions
as campaign events, so nothing in the router writes here directly.
"""
from datetime import datetime
from typing import Optional, Dict, Any

from sqlmodel import SQLModel, Field

from editorial_ledger.models.base import json_column, timestamp_field


class ExternalExecution(SQLModel, table=True):
    __tablename__ = "external_executions"

    id: Optional[int] = Field(default=None, primary_key=True)
    ledger_id: str = Field(foreign_key="campaigns.ledger_id", ondelete="CASCADE", index=True)

    tool_name: str = Field(index=True)  # 'beehiiv', 'buffer', 'slack', 'notion'
    external_id: Optional[str] = None
    external_url: Optional[str] = None
    execution_type: str  # 'newsletter_scheduled', 'social_posted', 'task_created'
    status: str = Field(index=True)  # 'scheduled', 'sent', 'failed', 'draft'

    executed_at: datetime = timestamp_field()
    agent_name: str

    meta_data: Dict[str, Any] = Field(default_factory=dict, sa_column=json_column("metadata"))
