"""
Tests for learned patterns.
"""
import re

import pytest

from editorial_ledger.core.exceptions import MissingParameter, RecordNotFoundError, ValidationError
from editorial_ledger.repositories.pattern_repo import LearnedPatternRepository
from editorial_ledger.services.pattern_service import PatternService


@pytest.fixture
def pattern_service(session):
    return PatternService(session)


def pattern_params(**overrides):
    params = {
        "agent_name": "newsletter-agent",
        "pattern_type": "subject_line",
        "pattern_rule": "Questions in the subject line lift opens",
        "confidence_level": 0.7,
        "sample_size": 12,
    }
    params.update(overrides)
    return params


class TestStoreLearnedPattern:

    async def test_store(self, pattern_service):
        record = await pattern_service.store_learned_pattern(pattern_params(metadata={"segment": "eu"}))

        assert re.match(r"^PAT-\d+-[0-9a-z]{4}$", record["pattern_id"])
        assert record["confidence_level"] == 0.7
        assert record["sample_size"] == 12
        assert record["is_active"] is True
        assert record["metadata"] == {"segment": "eu"}

    async def test_confidence_out_of_range_stores_nothing(self, pattern_service, session):
        with pytest.raises(ValidationError) as exc:
            await pattern_service.store_learned_pattern(pattern_params(confidence_level=1.5))
        assert exc.value.field == "confidence_level"
        assert await LearnedPatternRepository(session).count() == 0

    async def test_sample_size_must_be_positive(self, pattern_service):
        with pytest.raises(ValidationError):
            await pattern_service.store_learned_pattern(pattern_params(sample_size=0))

    async def test_missing_rule(self, pattern_service):
        params = pattern_params()
        del params["pattern_rule"]
        with pytest.raises(MissingParameter) as exc:
            await pattern_service.store_learned_pattern(params)
        assert exc.value.field == "pattern_rule"


class TestGetLearnedPatterns:

    async def test_filters_and_order(self, pattern_service):
        await pattern_service.store_learned_pattern(pattern_params(confidence_level=0.5))
        await pattern_service.store_learned_pattern(pattern_params(confidence_level=0.9))
        await pattern_service.store_learned_pattern(pattern_params(agent_name="social-agent", confidence_level=0.8))

        records = await pattern_service.get_learned_patterns({"agentName": "newsletter-agent"})
        assert [record["confidence_level"] for record in records] == [0.9, 0.5]

        records = await pattern_service.get_learned_patterns({"min_confidence": 0.75})
        assert sorted(record["agent_name"] for record in records) == ["newsletter-agent", "social-agent"]
        assert all(record["confidence_level"] >= 0.75 for record in records)

    async def test_inactive_patterns_are_hidden(self, pattern_service, session):
        record = await pattern_service.store_learned_pattern(pattern_params())
        await LearnedPatternRepository(session).update(record["pattern_id"], {"is_active": False})

        assert await pattern_service.get_learned_patterns({}) == []


class TestUpdatePatternConfidence:

    async def test_update(self, pattern_service):
        record = await pattern_service.store_learned_pattern(pattern_params())

        updated = await pattern_service.update_pattern_confidence({
            "patternId": record["pattern_id"],
            "confidence": "0.85",
            "sampleSize": 30,
        })
        assert updated["pattern_id"] == record["pattern_id"]
        assert updated["confidence_level"] == 0.85
        assert updated["sample_size"] == 30
        assert updated["learned_at"] == record["learned_at"]

    async def test_unknown_pattern(self, pattern_service):
        with pytest.raises(RecordNotFoundError):
            await pattern_service.update_pattern_confidence({
                "pattern_id": "PAT-0-none",
                "confidence_level": 0.5,
                "sample_size": 3,
            })

    async def test_invalid_confidence(self, pattern_service):
        record = await pattern_service.store_learned_pattern(pattern_params())
        with pytest.raises(ValidationError):
            await pattern_service.update_pattern_confidence({
                "pattern_id": record["pattern_id"],
                "confidence_level": -0.2,
                "sample_size": 3,
            })
