"""
Learned pattern repository.
"""
from datetime import datetime
from typing import Optional, List

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.models.pattern import LearnedPattern
from editorial_ledger.repositories.base import BaseRepository


class LearnedPatternRepository(BaseRepository[LearnedPattern]):
    """Repository for LearnedPattern operations."""

    def __init__(self, session: AsyncSession):
        super().__init__(LearnedPattern, session)

    async def active(
        self,
        agent_name: Optional[str] = None,
        pattern_type: Optional[str] = None,
        min_confidence: Optional[float] = None
    ) -> List[LearnedPattern]:
        """Active patterns, highest confidence first."""
        query = select(LearnedPattern).where(LearnedPattern.is_active == True)  # noqa: E712

        if agent_name:
            query = query.where(LearnedPattern.agent_name == agent_name)
        if pattern_type:
            query = query.where(LearnedPattern.pattern_type == pattern_type)
        if min_confidence is not None:
            query = query.where(LearnedPattern.confidence_level >= min_confidence)

        query = query.order_by(LearnedPattern.confidence_level.desc())
        result = await self.session.exec(query)
        return list(result.all())

    async def learned_since(self, start: datetime) -> List[LearnedPattern]:
        query = select(LearnedPattern).where(
            LearnedPattern.is_active == True,  # noqa: E712
            LearnedPattern.learned_at >= start
        ).order_by(LearnedPattern.learned_at.desc())
        result = await self.session.exec(query)
        return list(result.all())
