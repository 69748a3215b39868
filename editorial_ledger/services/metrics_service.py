"""
Metrics service - performance samples and history.
"""
from typing import Any, Dict, List

from sqlmodel.ext.asyncio.session import AsyncSession

from editorial_ledger.core.identifiers import utcnow
from editorial_ledger.core.params import (
    CAMPAIGN_DATE_KEYS, LEDGER_ID, LEDGER_ID_KEYS, LIMIT_KEYS, METADATA,
    METRIC_TYPE_KEYS, METRIC_VALUE_KEYS, SOURCE_KEYS,
    Param, ParamSchema, as_limit, as_number, as_text, is_mapping, require_param,
)
from editorial_ledger.models.base import to_record
from editorial_ledger.models.event import EventTypes
from editorial_ledger.repositories.base import store_operation
from editorial_ledger.repositories.campaign_repo import CampaignRepository
from editorial_ledger.repositories.metric_repo import CampaignMetricRepository
from editorial_ledger.services.audit_service import AuditTrail

DEFAULT_HISTORY_LIMIT = 50

STORE_METRICS = "store_metrics"

# Batch-level values, used when a metric does not carry its own
METRICS_BATCH = ParamSchema(
    STORE_METRICS,
    Param("ledger_id", LEDGER_ID_KEYS, coerce=as_text),
    Param("metric_type", METRIC_TYPE_KEYS, coerce=as_text),
    Param("source", SOURCE_KEYS, coerce=as_text),
    Param("campaign_date", CAMPAIGN_DATE_KEYS, coerce=as_text),
)

METRIC = ParamSchema(
    STORE_METRICS,
    Param("ledger_id", LEDGER_ID_KEYS, coerce=as_text),
    Param("metric_type", METRIC_TYPE_KEYS, coerce=as_text),
    Param("value", METRIC_VALUE_KEYS),
    Param("source", SOURCE_KEYS, coerce=as_text),
    Param("campaign_date", CAMPAIGN_DATE_KEYS, coerce=as_text),
    METADATA,
)

GET_METRICS = ParamSchema(
    "get_metrics",
    LEDGER_ID,
    Param("metric_type", METRIC_TYPE_KEYS, coerce=as_text),
)

GET_PERFORMANCE_HISTORY = ParamSchema(
    "get_performance_history",
    Param("metric_type", METRIC_TYPE_KEYS, required=True, coerce=as_text),
    Param("limit", LIMIT_KEYS, default=DEFAULT_HISTORY_LIMIT, coerce=as_limit(DEFAULT_HISTORY_LIMIT)),
)


def _metric_inputs(params: Dict[str, Any]) -> List[Dict[str, Any]]:
    """`metrics` may be a list, a single metric, or absent (params is the metric)."""
    raw = params.get("metrics")
    if isinstance(raw, list):
        items = raw
    elif raw not in (None, "", 0, False):
        items = [raw]
    else:
        items = [params]
    return [item if is_mapping(item) else {} for item in items]


class MetricsService:
    """Service for campaign metrics."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.campaign_repo = CampaignRepository(session)
        self.metric_repo = CampaignMetricRepository(session)
        self.audit = AuditTrail(session)

    def _resolve_metric(self, metric: Dict[str, Any], batch: Dict[str, Any]) -> Dict[str, Any]:
        fields = METRIC.resolve(metric)
        ledger_id = require_param(fields["ledger_id"] or batch["ledger_id"], "ledger_id", STORE_METRICS)
        metric_type = require_param(fields["metric_type"] or batch["metric_type"], "metric_type", STORE_METRICS)
        value = as_number(fields["value"], "value", STORE_METRICS)
        source = require_param(fields["source"] or batch["source"], "source", STORE_METRICS)

        return {
            "ledger_id": ledger_id,
            "metric_type": metric_type,
            "value": value,
            "source": source,
            "tracked_at": utcnow(),
            "campaign_date": fields["campaign_date"] or batch["campaign_date"],
            "meta_data": fields["metadata"],
        }

    async def store_metrics(self, params: Dict[str, Any]) -> Dict[str, bool]:
        """
        Validate every metric first, then insert the whole batch in one write.
        One bad metric fails the call and nothing from the batch is stored.
        """
        bag = params if is_mapping(params) else {}
        batch = METRICS_BATCH.resolve(bag)
        rows = [self._resolve_metric(metric, batch) for metric in _metric_inputs(bag)]

        async with store_operation(self.session, "store metrics"):
            await self.metric_repo.create_many(rows)

        # Log metrics stored event
        primary_ledger_id = batch["ledger_id"] or (rows[0]["ledger_id"] if rows else None)
        if primary_ledger_id:
            metric_types = list(dict.fromkeys(row["metric_type"] for row in rows))
            await self.audit.record(
                primary_ledger_id,
                EventTypes.METRICS_STORED,
                rows[0]["source"] if rows else "metrics",
                {"metrics_count": len(rows), "metric_types": metric_types}
            )

        return {"stored": True}

    async def get_metrics(self, params: Dict[str, Any]) -> List[Dict[str, Any]]:
        fields = GET_METRICS.resolve(params)

        async with store_operation(self.session, "get metrics"):
            metrics = await self.metric_repo.for_campaign(fields["ledger_id"], fields["metric_type"])

        return [to_record(metric) for metric in metrics]

    async def get_performance_history(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """
        Latest samples of one metric type, newest first.
        The average covers the returned page only, so it changes with the limit.
        """
        fields = GET_PERFORMANCE_HISTORY.resolve(params)

        async with store_operation(self.session, "get performance history"):
            metrics = await self.metric_repo.history(fields["metric_type"], fields["limit"])
            campaigns = await self.campaign_repo.get_many(metric.ledger_id for metric in metrics)

        by_id = {campaign.ledger_id: campaign for campaign in campaigns}
        records = []
        for metric in metrics:
            record = to_record(metric)
            campaign = by_id.get(metric.ledger_id)
            record["campaigns"] = {
                "project_name": campaign.project_name,
                "channels": campaign.channels,
                "status": campaign.status,
            } if campaign else None
            records.append(record)

        average = sum(metric.value for metric in metrics) / len(metrics) if metrics else 0

        return {
            "metrics": records,
            "average": average,
            "sample_size": len(metrics),
            "date_range": {
                "from": metrics[-1].tracked_at if metrics else None,
                "to": metrics[0].tracked_at if metrics else None,
            },
        }
