"""
Learned pattern model - a heuristic rule with a confidence score.
Independent of any single campaign.
"""
from datetime import datetime
from typing import Dict, Any

from sqlmodel import SQLModel, Field

from editorial_ledger.core.identifiers import new_pattern_id
from editorial_ledger.models.base import json_column, timestamp_field


class LearnedPattern(SQLModel, table=True):
    __tablename__ = "learned_patterns"

    pattern_id: str = Field(default_factory=new_pattern_id, primary_key=True)
    agent_name: str = Field(index=True)  # 'newsletter-agent', 'social-engine', ...
    pattern_type: str = Field(index=True)  # 'subject_line', 'posting_time', ...
    pattern_rule: str  # 'Question subjects: +23% open rate'

    confidence_level: float = Field(index=True)  # 0.0 to 1.0
    sample_size: int

    learned_at: datetime = timestamp_field()
    is_active: bool = Field(default=True, index=True)

    meta_data: Dict[str, Any] = Field(default_factory=dict, sa_column=json_column("metadata"))
