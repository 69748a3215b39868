"""
Pattern service - learned patterns and their confidence.
"""
from typing import Any, Dict, List

from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.core.exceptions import RecordNotFoundError
from editorial_ledger.core.identifiers import new_pattern_id, utcnow
from editorial_ledger.core.params import (
    AGENT_NAME_KEYS, CONFIDENCE_KEYS, METADATA, PATTERN_TYPE_KEYS, SAMPLE_SIZE_KEYS,
    Param, ParamSchema, as_confidence, as_optional_number, as_sample_size, as_text,
)
from editorial_ledger.models.base import to_record
from editorial_ledger.repositories.base import store_operation
from editorial_ledger.repositories.pattern_repo import LearnedPatternRepository

CONFIDENCE = Param("confidence_level", CONFIDENCE_KEYS, required=True, coerce=as_confidence)
SAMPLE_SIZE = Param("sample_size", SAMPLE_SIZE_KEYS, required=True, coerce=as_sample_size)

GET_LEARNED_PATTERNS = ParamSchema(
    "get_learned_patterns",
    Param("agent_name", AGENT_NAME_KEYS, coerce=as_text),
    Param("pattern_type", PATTERN_TYPE_KEYS, coerce=as_text),
    Param("min_confidence", ("min_confidence", "minConfidence"), coerce=as_optional_number),
)

STORE_LEARNED_PATTERN = ParamSchema(
    "store_learned_pattern",
    Param("agent_name", AGENT_NAME_KEYS, required=True, coerce=as_text),
    Param("pattern_type", PATTERN_TYPE_KEYS, required=True, coerce=as_text),
    Param("pattern_rule", ("pattern_rule", "patternRule", "rule"), required=True, coerce=as_text),
    CONFIDENCE,
    SAMPLE_SIZE,
    METADATA,
)

UPDATE_PATTERN_CONFIDENCE = ParamSchema(
    "update_pattern_confidence",
    Param("pattern_id", ("pattern_id", "patternId", "id"), required=True, coerce=as_text),
    CONFIDENCE,
    SAMPLE_SIZE,
)


class PatternService:
    """Service for learned patterns."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.pattern_repo = LearnedPatternRepository(session)

    async def get_learned_patterns(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        """Active patterns, highest confidence first."""
        fields = GET_LEARNED_PATTERNS.resolve(params)

        async with store_operation(self.session, "get learned patterns"):
            patterns = await self.pattern_repo.active(
                agent_name=fields["agent_name"],
                pattern_type=fields["pattern_type"],
                min_confidence=fields["min_confidence"]
            )

        return [to_record(pattern) for pattern in patterns]

    async def store_learned_pattern(self, params: Dict[str, Any]) -> Dict[str, Any]:
        fields = STORE_LEARNED_PATTERN.resolve(params)

        async with store_operation(self.session, "store learned pattern"):
            pattern = await self.pattern_repo.create({
                "pattern_id": new_pattern_id(),
                "agent_name": fields["agent_name"],
                "pattern_type": fields["pattern_type"],
                "pattern_rule": fields["pattern_rule"],
                "confidence_level": fields["confidence_level"],
                "sample_size": fields["sample_size"],
                "learned_at": utcnow(),
                "is_active": True,
                "meta_data": fields["metadata"],
            })

        return to_record(pattern)

    async def update_pattern_confidence(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """Revise confidence and sample size; id and learned_at never change."""
        fields = UPDATE_PATTERN_CONFIDENCE.resolve(params)

        async with store_operation(self.session, "update pattern confidence"):
            pattern = await self.pattern_repo.update(fields["pattern_id"], {
                "confidence_level": fields["confidence_level"],
                "sample_size": fields["sample_size"],
            })
        if not pattern:
            raise RecordNotFoundError("Learned pattern", fields["pattern_id"])

        return to_record(pattern)
