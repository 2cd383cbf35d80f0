from __future__ import annotations

import contextvars
import json
import logging
import threading
import time
import uuid
from datetime import datetime, timezone
from typing import Dict, Tuple

from flask import g, has_request_context, request


HTTP_BUCKETS_MS: Tuple[float, ...] = (5.0, 25.0, 100.0, 250.0, 1000.0)
COMPUTE_BUCKETS_MS: Tuple[float, ...] = (0.5, 1.0, 2.5, 5.0, 10.0, 25.0, 50.0, 100.0, 250.0, 500.0, 1000.0)

# Last request id seen on this context; used for records logged outside a request.
_LOG_REQUEST_ID: contextvars.ContextVar[str] = contextvars.ContextVar("log_request_id", default="")

_RESERVED_RECORD_KEYS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}


def set_log_request_id(request_id: str | None) -> None:
    _LOG_REQUEST_ID.set(str(request_id or "").strip())


def current_request_id(default: str = "n/a") -> str:
    if has_request_context():
        request_id = str(getattr(g, "request_id", "") or "").strip()
        if request_id:
            return request_id
    return _LOG_REQUEST_ID.get() or default


def ensure_request_id() -> str:
    request_id = str(getattr(g, "request_id", "") or "").strip()
    if not request_id:
        request_id = str(request.headers.get("X-Request-Id") or "").strip() or str(uuid.uuid4())
        g.request_id = request_id
    set_log_request_id(request_id)
    return request_id


class JsonLogFormatter(logging.Formatter):
    """One JSON object per line, request fields included when inside a request."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, object] = {
            "ts": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
            "request_id": str(getattr(record, "request_id", "") or "").strip() or current_request_id(),
        }
        if has_request_context():
            payload["path"] = request.path
            payload["method"] = request.method
            if request.url_rule is not None:
                payload["route"] = request.url_rule.rule

        for key, value in vars(record).items():
            if key in _RESERVED_RECORD_KEYS or key.startswith("_") or key in payload:
                continue
            payload[key] = value

        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=True, separators=(",", ":"), default=str)


def configure_json_logging(app) -> None:
    if not bool(app.config.get("LOG_JSON", True)):
        return
    level_name = str(app.config.get("LOG_LEVEL", "INFO")).strip().upper()

    handler = logging.StreamHandler()
    handler.setFormatter(JsonLogFormatter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, level_name, logging.INFO))
    app.logger.handlers = []
    app.logger.propagate = True


class _Histogram:
    def __init__(self, limits: Tuple[float, ...]) -> None:
        self.limits = limits
        self.count = 0
        self.total = 0.0
        self.peak = 0.0
        self.buckets = [0] * len(limits)

    def observe(self, value: float) -> None:
        value = max(0.0, float(value))
        self.count += 1
        self.total += value
        self.peak = max(self.peak, value)
        for index, limit in enumerate(self.limits):
            if value <= limit:
                self.buckets[index] += 1

    def average(self, digits: int) -> float:
        return round(self.total / self.count, digits) if self.count else 0.0

    def cumulative(self) -> Dict[str, int]:
        labels = {f"{limit:g}": hits for limit, hits in zip(self.limits, self.buckets)}
        labels["+Inf"] = self.count
        return labels


class MetricsRegistry:
    """In-process counters for HTTP traffic and panel computations."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.reset()

    def reset(self) -> None:
        with self._lock:
            self._routes: Dict[str, _Histogram] = {}
            self._route_errors: Dict[str, int] = {}
            self._statuses: Dict[str, int] = {}
            self._panels: Dict[str, _Histogram] = {}
            self._panel_failures: Dict[str, int] = {}

    def observe_http(self, method: str, route: str, status_code: int, duration_ms: float) -> None:
        key = f"{str(method or 'GET').upper()} {route or 'unknown'}"
        status = str(int(status_code))
        with self._lock:
            self._routes.setdefault(key, _Histogram(HTTP_BUCKETS_MS)).observe(duration_ms)
            self._statuses[status] = self._statuses.get(status, 0) + 1
            if int(status_code) >= 400:
                self._route_errors[key] = self._route_errors.get(key, 0) + 1

    def observe_analytics_computation(self, panel: str, duration_ms: float, *, failed: bool = False) -> None:
        key = str(panel or "").strip() or "unknown"
        with self._lock:
            if failed:
                self._panel_failures[key] = self._panel_failures.get(key, 0) + 1
                return
            self._panels.setdefault(key, _Histogram(COMPUTE_BUCKETS_MS)).observe(duration_ms)

    def snapshot(self) -> dict:
        with self._lock:
            routes = [
                {
                    "route": key,
                    "requests": histogram.count,
                    "errors": self._route_errors.get(key, 0),
                    "avg_latency_ms": histogram.average(2),
                    "max_latency_ms": round(histogram.peak, 2),
                    "latency_buckets_ms": histogram.cumulative(),
                }
                for key, histogram in self._routes.items()
            ]
            routes.sort(key=lambda item: item["requests"], reverse=True)
            panels = {
                key: {
                    "computed": histogram.count,
                    "avg_duration_ms": histogram.average(3),
                    "duration_buckets_ms": histogram.cumulative(),
                }
                for key, histogram in sorted(self._panels.items())
            }
            return {
                "http": {
                    "requests_total": sum(item["requests"] for item in routes),
                    "errors_total": sum(self._route_errors.values()),
                    "by_route": routes,
                    "by_status": dict(sorted(self._statuses.items())),
                },
                "analytics": {
                    "computed_total": sum(item["computed"] for item in panels.values()),
                    "failed_total": sum(self._panel_failures.values()),
                    "by_panel": panels,
                },
            }


_METRICS = MetricsRegistry()


def mark_request_start() -> None:
    g._request_started_at = time.perf_counter()


def observe_response(response):
    started = getattr(g, "_request_started_at", None)
    elapsed_ms = (time.perf_counter() - started) * 1000.0 if started is not None else 0.0
    route = request.url_rule.rule if request.url_rule is not None else request.path
    _METRICS.observe_http(request.method, route, response.status_code, elapsed_ms)
    response.headers["X-Response-Time-Ms"] = f"{elapsed_ms:.2f}"
    return response


def observe_analytics_computation(panel: str, duration_ms: float, *, failed: bool = False) -> None:
    _METRICS.observe_analytics_computation(panel, duration_ms, failed=failed)


def metrics_snapshot() -> dict:
    return _METRICS.snapshot()


def reset_metrics_for_tests() -> None:
    _METRICS.reset()
    set_log_request_id(None)
