from __future__ import annotations

import time
from datetime import datetime
from typing import Any, Callable, Dict, List

from flask import current_app, has_app_context

from bid_analytics.analytics import (
    DEFAULT_TUNING,
    AnalyticsTuning,
    analytics_summary,
    bucket_time_series,
    completion_by_status,
    completion_trends,
    generate_forecast,
    identify_bottlenecks,
    monthly_trending,
    response_time_distribution,
    status_distribution,
    status_gantt,
    vendor_performance_scores,
    vendor_response_chart,
)
from bid_analytics.analytics.periods import utc_now
from bid_analytics.domain.contracts import AnalyticsDatasets, AnalyticsRequestInput
from bid_analytics.errors import NotFoundError
from bid_analytics.infrastructure.repositories.analytics_repository import AnalyticsRecordRepository
from bid_analytics.observability import observe_analytics_computation
from bid_analytics.ui_strings import panel_label


PANELS = (
    "summary",
    "completion_by_status",
    "vendor_response",
    "time_series",
    "gantt",
    "completion_trends",
    "vendor_scores",
    "bottlenecks",
    "forecast",
    "status_distribution",
    "response_time_distribution",
    "monthly_trending",
)

_PERIODIC_PANELS = {"completion_trends", "monthly_trending", "forecast"}


def normalize_panel_key(panel: str | None) -> str:
    key = str(panel or "").strip().lower().replace("-", "_")
    if key not in PANELS:
        raise NotFoundError(code="unknown_panel", details=f"unknown panel {panel!r}", payload={"panel": panel})
    return key


def _serialize(items: List[Any]) -> List[Dict[str, Any]]:
    return [item.to_dict() for item in items]


class AnalyticsService:
    def __init__(
        self,
        repository_factory: Callable[[], AnalyticsRecordRepository] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._repository_factory = repository_factory or AnalyticsRecordRepository
        self._clock = clock or utc_now

    @staticmethod
    def _tuning() -> AnalyticsTuning:
        if has_app_context():
            return AnalyticsTuning.from_mapping(current_app.config)
        return DEFAULT_TUNING

    def list_panels(self) -> List[Dict[str, str]]:
        return [{"key": key, "label": panel_label(key)} for key in PANELS]

    def load_datasets(self, db, request_input: AnalyticsRequestInput) -> AnalyticsDatasets:
        repo = self._repository_factory()
        window = {"start_date": request_input.start_date, "end_date": request_input.end_date}
        return AnalyticsDatasets(
            completions=tuple(repo.load_completions(db, **window)),
            responses=tuple(repo.load_responses(db, **window)),
            status_history=tuple(repo.load_status_history(db, **window)),
        )

    def compute_panel(
        self,
        panel: str,
        datasets: AnalyticsDatasets,
        *,
        periods: int | None = None,
        bucket: str | None = None,
        now: datetime | None = None,
    ) -> Dict[str, Any]:
        key = normalize_panel_key(panel)
        tuning = self._tuning()
        started = time.perf_counter()
        try:
            data = self._compute(key, datasets, tuning, periods=periods, bucket=bucket, now=now or self._clock())
        except Exception:
            observe_analytics_computation(key, (time.perf_counter() - started) * 1000.0, failed=True)
            raise

        duration_ms = (time.perf_counter() - started) * 1000.0
        observe_analytics_computation(key, duration_ms)
        if has_app_context():
            current_app.logger.info(
                "analytics_panel_computed",
                extra={
                    "panel": key,
                    "duration_ms": round(duration_ms, 3),
                    **datasets.record_counts(),
                },
            )
        return {"panel": key, "label": panel_label(key), "data": data}

    def build_panel_payload(self, db, request_input: AnalyticsRequestInput) -> Dict[str, Any]:
        key = normalize_panel_key(request_input.panel)
        datasets = self.load_datasets(db, request_input)
        return self.compute_panel(
            key,
            datasets,
            periods=request_input.periods,
            bucket=request_input.bucket,
        )

    def build_dashboard_payload(self, db, request_input: AnalyticsRequestInput) -> Dict[str, Any]:
        datasets = self.load_datasets(db, request_input)
        now = self._clock()
        panels: Dict[str, Any] = {}
        for key in PANELS:
            # forecast keeps its configured horizon
            periods = None if key == "forecast" else request_input.periods
            panels[key] = self.compute_panel(
                key,
                datasets,
                periods=periods,
                bucket=request_input.bucket,
                now=now,
            )
        return {
            "generated_at": now.isoformat().replace("+00:00", "Z"),
            "start_date": request_input.start_date.isoformat() if request_input.start_date else None,
            "end_date": request_input.end_date.isoformat() if request_input.end_date else None,
            "record_counts": datasets.record_counts(),
            "panels": panels,
        }

    def _compute(
        self,
        key: str,
        datasets: AnalyticsDatasets,
        tuning: AnalyticsTuning,
        *,
        periods: int | None,
        bucket: str | None,
        now: datetime,
    ):
        bucket_name = bucket or tuning.time_bucket
        if key in _PERIODIC_PANELS and not periods:
            periods = tuning.forecast_periods if key == "forecast" else tuning.trend_periods

        if key == "summary":
            return analytics_summary(datasets.completions, datasets.responses).to_dict()
        if key == "completion_by_status":
            return _serialize(completion_by_status(datasets.completions))
        if key == "vendor_response":
            return _serialize(vendor_response_chart(datasets.responses, tuning.vendor_min_requests))
        if key == "time_series":
            return _serialize(self._completion_series(datasets, bucket_name))
        if key == "gantt":
            return _serialize(status_gantt(datasets.status_history))
        if key == "completion_trends":
            return _serialize(completion_trends(datasets.completions, periods, now))
        if key == "vendor_scores":
            return _serialize(vendor_performance_scores(datasets.responses, tuning))
        if key == "bottlenecks":
            return _serialize(identify_bottlenecks(datasets.status_history, tuning))
        if key == "forecast":
            series = list(datasets.series) or self._completion_series(datasets, "month")
            return _serialize(generate_forecast(series, periods))
        if key == "status_distribution":
            return _serialize(status_distribution(datasets.completions))
        if key == "response_time_distribution":
            return _serialize(response_time_distribution(datasets.responses))
        return _serialize(monthly_trending(datasets.completions, datasets.responses, periods, now))

    @staticmethod
    def _completion_series(datasets: AnalyticsDatasets, bucket: str):
        return bucket_time_series(datasets.completions, "created_at", "completion_hours", bucket)
