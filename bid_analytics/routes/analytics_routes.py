from __future__ import annotations

from datetime import date
from typing import Any, Dict

from flask import Blueprint, jsonify, request

from bid_analytics.analytics.tuning import TIME_BUCKETS
from bid_analytics.application.analytics_service import AnalyticsService, normalize_panel_key
from bid_analytics.db import get_read_db
from bid_analytics.domain.contracts import AnalyticsDatasets, AnalyticsRequestInput
from bid_analytics.errors import RecordParseError, ValidationError


analytics_bp = Blueprint("analytics", __name__)

MAX_PERIODS = 120

_ANALYTICS_SERVICE = AnalyticsService()


def _parse_periods(value: Any) -> int | None:
    if value in (None, ""):
        return None
    if isinstance(value, bool):
        raise ValidationError(message_key="periods_invalid", details=f"periods={value!r}")
    try:
        parsed = int(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(message_key="periods_invalid", details=f"periods={value!r}") from exc
    if parsed < 1 or parsed > MAX_PERIODS:
        raise ValidationError(message_key="periods_invalid", details=f"periods={value!r}")
    return parsed


def _parse_bucket(value: Any) -> str | None:
    if value in (None, ""):
        return None
    bucket = str(value).strip().lower()
    if bucket not in TIME_BUCKETS:
        raise ValidationError(message_key="bucket_invalid", details=f"bucket={value!r}")
    return bucket


def _parse_date(value: str | None, field_name: str) -> date | None:
    raw = (value or "").strip()
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError as exc:
        raise ValidationError(
            message_key="date_range_invalid",
            details=f"{field_name}={raw!r}",
            payload={"field": field_name},
        ) from exc


def _request_input_from_args(panel: str) -> AnalyticsRequestInput:
    return AnalyticsRequestInput(
        panel=panel,
        periods=_parse_periods(request.args.get("periods")),
        bucket=_parse_bucket(request.args.get("bucket")),
        start_date=_parse_date(request.args.get("start_date"), "start_date"),
        end_date=_parse_date(request.args.get("end_date"), "end_date"),
    )


def _json_body() -> Dict[str, Any]:
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        raise RecordParseError(message_key="payload_invalid", details="request body is not a JSON object")
    return payload


@analytics_bp.route("/api/analytics/panels", methods=["GET"])
def analytics_panels():
    return jsonify({"items": _ANALYTICS_SERVICE.list_panels()})


@analytics_bp.route("/api/analytics/dashboard", methods=["GET"])
def analytics_dashboard():
    request_input = _request_input_from_args("dashboard")
    payload = _ANALYTICS_SERVICE.build_dashboard_payload(get_read_db(), request_input)
    return jsonify(payload)


@analytics_bp.route("/api/analytics/<string:panel>", methods=["GET"])
def analytics_panel(panel: str):
    panel_key = normalize_panel_key(panel)
    request_input = _request_input_from_args(panel_key)
    payload = _ANALYTICS_SERVICE.build_panel_payload(get_read_db(), request_input)
    return jsonify(payload)


@analytics_bp.route("/api/analytics/<string:panel>", methods=["POST"])
def analytics_panel_from_records(panel: str):
    panel_key = normalize_panel_key(panel)
    body = _json_body()
    payload = _ANALYTICS_SERVICE.compute_panel(
        panel_key,
        AnalyticsDatasets.from_payload(body),
        periods=_parse_periods(body.get("periods")),
        bucket=_parse_bucket(body.get("bucket")),
    )
    return jsonify(payload)
