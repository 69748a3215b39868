"""
Tests for the campaign lifecycle actions.
"""
import re

import pytest
from sqlalchemy.exc import SQLAlchemyError

from editorial_ledger.core.exceptions import (
    MissingParameter, RecordNotFoundError, ValidationError,
)
from editorial_ledger.repositories.event_repo import CampaignEventRepository
from editorial_ledger.services.timeline_service import TimelineService

LEDGER_ID_PATTERN = re.compile(r"^LED-\d+-[0-9a-z]{6}$")


class TestCreateCampaign:

    async def test_minimal_campaign_gets_defaults(self, campaign_service):
        record = await campaign_service.create_campaign({"name": "Spring Newsletter"})

        assert LEDGER_ID_PATTERN.match(record["ledger_id"])
        assert record["project_name"] == "Spring Newsletter"
        assert record["status"] == "intake"
        assert record["channels"] == []
        assert record["metadata"] == {}
        assert record["created_at"] == record["updated_at"]

    async def test_ledger_ids_are_unique(self, campaign_service):
        ids = set()
        for index in range(10):
            record = await campaign_service.create_campaign({"project_name": f"Campaign {index}"})
            ids.add(record["ledger_id"])
        assert len(ids) == 10

    async def test_aliases_and_normalization(self, campaign_service):
        record = await campaign_service.create_campaign({
            "campaignName": "Roaming Bundles",
            "briefId": "BRF-12",
            "campaignStatus": "Draft",
            "ownerEmail": "owner@example.com",
            "channel": "email, social",
            "meta": {"budget": 1200},
        })

        assert record["brief_id"] == "BRF-12"
        assert record["status"] == "content_draft"
        assert record["owner_email"] == "owner@example.com"
        assert record["channels"] == ["email", "social"]
        assert record["metadata"] == {"budget": 1200}

    async def test_unknown_status_falls_back_to_intake(self, campaign_service):
        record = await campaign_service.create_campaign({"project_name": "X", "status": "paused"})
        assert record["status"] == "intake"

    async def test_missing_project_name(self, campaign_service):
        with pytest.raises(MissingParameter) as exc:
            await campaign_service.create_campaign({"channels": ["email"]})
        assert str(exc.value) == 'Missing required "project_name" for create_campaign.'

    async def test_writes_campaign_created_event(self, campaign, session):
        events = await CampaignEventRepository(session).timeline(campaign["ledger_id"])

        assert [event.event_type for event in events] == ["campaign_created"]
        assert events[0].actor == "orchestrator"
        assert events[0].payload == {
            "project_name": "Europe eSIM Launch",
            "channels": ["email", "social"],
        }

    async def test_event_failure_does_not_fail_create(self, campaign_service, monkeypatch):
        async def broken_log(*args, **kwargs):
            raise SQLAlchemyError("event table unavailable")

        monkeypatch.setattr(CampaignEventRepository, "log", broken_log)

        record = await campaign_service.create_campaign({"project_name": "Resilient"})
        stored = await campaign_service.campaign_repo.get(record["ledger_id"])
        assert stored is not None
        assert stored.project_name == "Resilient"


class TestGetCampaign:

    async def test_includes_related_rows(self, campaign_service, campaign):
        record = await campaign_service.get_campaign({"campaignId": campaign["ledger_id"]})

        assert record["ledger_id"] == campaign["ledger_id"]
        assert [event["event_type"] for event in record["campaign_events"]] == ["campaign_created"]
        assert record["campaign_metrics"] == []
        assert record["campaign_assets"] == []

    async def test_unknown_ledger_id(self, campaign_service):
        with pytest.raises(RecordNotFoundError) as exc:
            await campaign_service.get_campaign({"ledger_id": "LED-0-missing"})
        assert "LED-0-missing" in str(exc.value)

    async def test_missing_ledger_id(self, campaign_service):
        with pytest.raises(MissingParameter):
            await campaign_service.get_campaign({})


class TestListCampaigns:

    async def test_newest_first_with_limit(self, campaign_service):
        for name in ("first", "second", "third"):
            await campaign_service.create_campaign({"project_name": name})

        records = await campaign_service.list_campaigns({"limit": 2})
        assert [record["project_name"] for record in records] == ["third", "second"]

    async def test_status_filter_accepts_alias(self, campaign_service):
        await campaign_service.create_campaign({"project_name": "draft one", "status": "draft"})
        await campaign_service.create_campaign({"project_name": "intake one"})

        records = await campaign_service.list_campaigns({"status": "DRAFT"})
        assert [record["project_name"] for record in records] == ["draft one"]

    async def test_unknown_status_filter_is_ignored(self, campaign_service):
        await campaign_service.create_campaign({"project_name": "a"})
        await campaign_service.create_campaign({"project_name": "b"})

        records = await campaign_service.list_campaigns({"status": "nonsense"})
        assert len(records) == 2


class TestUpdateStatus:

    async def test_moves_status_and_logs_event(self, campaign_service, campaign, session):
        record = await campaign_service.update_status({
            "ledgerId": campaign["ledger_id"],
            "nextStatus": "live",
            "previousStatus": "scheduled",
            "agent": "scheduler",
            "reason": "send window opened",
        })

        assert record["status"] == "executing"
        assert record["metadata"] == {"region": "eu"}

        events = await CampaignEventRepository(session).timeline(campaign["ledger_id"])
        changed = events[-1]
        assert changed.event_type == "status_changed"
        assert changed.actor == "scheduler"
        assert changed.payload == {"from": "scheduled", "to": "executing", "reason": "send window opened"}

    async def test_non_empty_metadata_replaces_stored(self, campaign_service, campaign):
        record = await campaign_service.update_status({
            "ledger_id": campaign["ledger_id"],
            "status": "analyzing",
            "metadata": {"analyst": "reporting-agent"},
        })
        assert record["metadata"] == {"analyst": "reporting-agent"}

    async def test_empty_metadata_keeps_stored(self, campaign_service, campaign):
        record = await campaign_service.update_status({
            "ledger_id": campaign["ledger_id"],
            "status": "complete",
            "metadata": {},
        })
        assert record["metadata"] == {"region": "eu"}

    async def test_invalid_status_writes_nothing(self, campaign_service, campaign, session):
        with pytest.raises(ValidationError):
            await campaign_service.update_status({"ledger_id": campaign["ledger_id"], "status": "bogus"})

        stored = await campaign_service.get_campaign({"ledger_id": campaign["ledger_id"]})
        assert stored["status"] == "intake"
        assert stored["updated_at"] == campaign["updated_at"]
        assert [event["event_type"] for event in stored["campaign_events"]] == ["campaign_created"]

    async def test_missing_status_writes_nothing(self, campaign_service, campaign):
        with pytest.raises(MissingParameter) as exc:
            await campaign_service.update_status({"ledger_id": campaign["ledger_id"], "metadata": {"x": 1}})
        assert exc.value.field == "status"

        stored = await campaign_service.get_campaign({"ledger_id": campaign["ledger_id"]})
        assert stored["status"] == "intake"
        assert stored["metadata"] == {"region": "eu"}
        assert stored["updated_at"] == campaign["updated_at"]
        assert "status_changed" not in [event["event_type"] for event in stored["campaign_events"]]

    async def test_unknown_campaign(self, campaign_service):
        with pytest.raises(RecordNotFoundError):
            await campaign_service.update_status({"ledger_id": "LED-0-nope", "status": "complete"})


class TestDeleteCampaign:

    async def test_delete(self, campaign_service, campaign):
        assert await campaign_service.delete_campaign({"id": campaign["ledger_id"]}) == {"deleted": True}

        with pytest.raises(RecordNotFoundError):
            await campaign_service.get_campaign({"ledger_id": campaign["ledger_id"]})

    async def test_delete_unknown_is_not_an_error(self, campaign_service):
        assert await campaign_service.delete_campaign({"ledger_id": "LED-0-gone"}) == {"deleted": True}


class TestTimeline:

    async def test_log_agent_action_and_timeline_order(self, session, campaign):
        timeline = TimelineService(session)
        await timeline.log_agent_action({
            "ledger_id": campaign["ledger_id"],
            "actionType": "brief_written",
            "agentName": "brief-specialist",
            "payload": {"words": 420},
        })
        await timeline.log_agent_action({
            "ledger_id": campaign["ledger_id"],
            "action_type": "draft_reviewed",
            "agent": "editor-agent",
        })

        events = await timeline.get_campaign_timeline({"ledger_id": campaign["ledger_id"]})
        assert [event["event_type"] for event in events] == [
            "campaign_created", "brief_written", "draft_reviewed",
        ]
        assert events[1]["actor"] == "brief-specialist"
        assert events[1]["payload"] == {"words": 420}
        assert events[2]["payload"] == {}

    async def test_log_agent_action_requires_agent(self, session, campaign):
        with pytest.raises(MissingParameter) as exc:
            await TimelineService(session).log_agent_action({
                "ledger_id": campaign["ledger_id"],
                "action_type": "noop",
            })
        assert exc.value.field == "agent_name"

    async def test_progress_replaces_metadata(self, session, campaign, campaign_service):
        timeline = TimelineService(session)
        result = await timeline.update_execution_progress({
            "ledger_id": campaign["ledger_id"],
            "progress_data": {"sent": 1200},
            "agent": "newsletter-agent",
        })
        assert result == {"updated": True}

        stored = await campaign_service.get_campaign({"ledger_id": campaign["ledger_id"]})
        assert stored["metadata"] == {"sent": 1200}
        last_event = stored["campaign_events"][-1]
        assert last_event["event_type"] == "progress_update"
        assert last_event["actor"] == "newsletter-agent"
        assert last_event["payload"] == {"sent": 1200}

    async def test_scalar_progress_is_wrapped(self, session, campaign, campaign_service):
        await TimelineService(session).update_execution_progress({
            "ledger_id": campaign["ledger_id"],
            "progressData": 75,
        })

        stored = await campaign_service.get_campaign({"ledger_id": campaign["ledger_id"]})
        assert stored["metadata"] == {"value": 75}
