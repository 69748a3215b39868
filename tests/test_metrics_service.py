"""
Tests for metrics storage and performance history.
"""
import pytest

from editorial_ledger.core.exceptions import MissingParameter, ValidationError
from editorial_ledger.repositories.event_repo import CampaignEventRepository
from editorial_ledger.repositories.metric_repo import CampaignMetricRepository
from editorial_ledger.services.metrics_service import MetricsService


@pytest.fixture
def metrics_service(session):
    return MetricsService(session)


class TestStoreMetrics:

    async def test_batch_uses_shared_values(self, metrics_service, campaign, session):
        result = await metrics_service.store_metrics({
            "ledger_id": campaign["ledger_id"],
            "source": "ga4",
            "campaignDate": "2024-05-01",
            "metrics": [
                {"metric_type": "open_rate", "value": 0.42},
                {"metricType": "click_rate", "metricValue": "0.08"},
                {"type": "open_rate", "value": 0.44, "source": "mailchimp"},
            ],
        })
        assert result == {"stored": True}

        stored = await CampaignMetricRepository(session).for_campaign(campaign["ledger_id"])
        assert len(stored) == 3
        assert sorted(metric.value for metric in stored) == [0.08, 0.42, 0.44]
        assert {metric.source for metric in stored} == {"ga4", "mailchimp"}
        assert all(metric.campaign_date == "2024-05-01" for metric in stored)

    async def test_logs_metrics_stored_event(self, metrics_service, campaign, session):
        await metrics_service.store_metrics({
            "ledger_id": campaign["ledger_id"],
            "metrics": [
                {"metric_type": "open_rate", "value": 0.4, "source": "ga4"},
                {"metric_type": "click_rate", "value": 0.1, "source": "ga4"},
                {"metric_type": "open_rate", "value": 0.5, "source": "ga4"},
            ],
        })

        events = await CampaignEventRepository(session).timeline(campaign["ledger_id"])
        stored_event = events[-1]
        assert stored_event.event_type == "metrics_stored"
        assert stored_event.actor == "ga4"
        assert stored_event.payload == {"metrics_count": 3, "metric_types": ["open_rate", "click_rate"]}

    async def test_single_metric_without_list(self, metrics_service, campaign):
        await metrics_service.store_metrics({
            "campaignId": campaign["ledger_id"],
            "metric_type": "conversions",
            "value": 17,
            "source": "shopify",
        })

        metrics = await metrics_service.get_metrics({"ledger_id": campaign["ledger_id"]})
        assert len(metrics) == 1
        assert metrics[0]["value"] == 17.0
        assert metrics[0]["metadata"] == {}

    async def test_one_bad_value_stores_nothing(self, metrics_service, campaign, session):
        with pytest.raises(ValidationError) as exc:
            await metrics_service.store_metrics({
                "ledger_id": campaign["ledger_id"],
                "source": "ga4",
                "metrics": [
                    {"metric_type": "open_rate", "value": 0.4},
                    {"metric_type": "click_rate", "value": "lots"},
                ],
            })
        assert exc.value.field == "value"

        assert await CampaignMetricRepository(session).count() == 0
        events = await CampaignEventRepository(session).timeline(campaign["ledger_id"])
        assert "metrics_stored" not in [event.event_type for event in events]

    async def test_missing_source(self, metrics_service, campaign):
        with pytest.raises(MissingParameter) as exc:
            await metrics_service.store_metrics({
                "ledger_id": campaign["ledger_id"],
                "metrics": [{"metric_type": "open_rate", "value": 0.4}],
            })
        assert exc.value.field == "source"

    async def test_missing_ledger_id_reported_before_bad_value(self, metrics_service):
        with pytest.raises(MissingParameter) as exc:
            await metrics_service.store_metrics({
                "source": "ga4",
                "metrics": [{"metric_type": "open_rate", "value": "lots"}],
            })
        assert exc.value.field == "ledger_id"

    async def test_bad_value_reported_before_missing_source(self, metrics_service, campaign):
        with pytest.raises(ValidationError) as exc:
            await metrics_service.store_metrics({
                "ledger_id": campaign["ledger_id"],
                "metrics": [{"metric_type": "open_rate"}],
            })
        assert exc.value.field == "value"


class TestGetMetrics:

    async def test_filter_by_type(self, metrics_service, campaign):
        await metrics_service.store_metrics({
            "ledger_id": campaign["ledger_id"],
            "source": "ga4",
            "metrics": [
                {"metric_type": "open_rate", "value": 0.4},
                {"metric_type": "click_rate", "value": 0.1},
            ],
        })

        metrics = await metrics_service.get_metrics({
            "ledger_id": campaign["ledger_id"],
            "metricType": "click_rate",
        })
        assert [metric["metric_type"] for metric in metrics] == ["click_rate"]


class TestPerformanceHistory:

    async def _store(self, metrics_service, ledger_id, count, metric_type="open_rate"):
        await metrics_service.store_metrics({
            "ledger_id": ledger_id,
            "source": "ga4",
            "metrics": [{"metric_type": metric_type, "value": index} for index in range(count)],
        })

    async def test_default_limit_is_fifty(self, metrics_service, campaign):
        await self._store(metrics_service, campaign["ledger_id"], 55)

        history = await metrics_service.get_performance_history({"metric_type": "open_rate"})
        assert history["sample_size"] == 50
        assert len(history["metrics"]) == 50

    @pytest.mark.parametrize("limit", ["abc", -3, 0, 0.5, "0.25"])
    async def test_unusable_limit_falls_back(self, metrics_service, campaign, limit):
        await self._store(metrics_service, campaign["ledger_id"], 55)

        history = await metrics_service.get_performance_history({"metric_type": "open_rate", "limit": limit})
        assert history["sample_size"] == 50

    async def test_average_over_returned_page(self, metrics_service, campaign):
        await metrics_service.store_metrics({
            "ledger_id": campaign["ledger_id"],
            "source": "ga4",
            "metrics": [
                {"metric_type": "open_rate", "value": 0.2},
                {"metric_type": "open_rate", "value": 0.4},
                {"metric_type": "click_rate", "value": 9},
            ],
        })

        history = await metrics_service.get_performance_history({"type": "open_rate"})
        assert history["sample_size"] == 2
        assert history["average"] == pytest.approx(0.3)
        assert history["date_range"]["from"] <= history["date_range"]["to"]

        campaign_info = history["metrics"][0]["campaigns"]
        assert campaign_info == {
            "project_name": "Europe eSIM Launch",
            "channels": ["email", "social"],
            "status": "intake",
        }

    async def test_empty_history(self, metrics_service):
        history = await metrics_service.get_performance_history({"metric_type": "open_rate", "limit": 5})
        assert history == {
            "metrics": [],
            "average": 0,
            "sample_size": 0,
            "date_range": {"from": None, "to": None},
        }

    async def test_metric_type_required(self, metrics_service):
        with pytest.raises(MissingParameter):
            await metrics_service.get_performance_history({})
