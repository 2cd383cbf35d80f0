from __future__ import annotations

from typing import Dict


UI_TEXTS: Dict[str, str] = {
    "panel.summary": "Summary",
    "panel.completion_by_status": "Average completion time by status",
    "panel.vendor_response": "Vendor response time",
    "panel.time_series": "Completion time trend",
    "panel.gantt": "Bid status timeline",
    "panel.completion_trends": "Completion rate trend",
    "panel.vendor_scores": "Vendor performance",
    "panel.bottlenecks": "Process bottlenecks",
    "panel.forecast": "Completion time forecast",
    "panel.status_distribution": "Bids by status",
    "panel.response_time_distribution": "Response time distribution",
    "panel.monthly_trending": "Month over month",
}


MESSAGES: Dict[str, Dict[str, str]] = {
    "error": {
        "action_invalid": "Invalid action for this operation.",
        "bucket_invalid": "Time bucket must be 'week' or 'month'.",
        "date_range_invalid": "Dates must use the YYYY-MM-DD format.",
        "invalid_record": "One or more records could not be read. Check timestamps and numeric fields.",
        "payload_invalid": "Request body must be a JSON object.",
        "periods_invalid": "Periods must be a positive whole number.",
        "record_source_unavailable": "Analytics data is unavailable right now. Try again shortly.",
        "unexpected_error": "The operation could not be completed. Try again shortly.",
        "unknown_panel": "Unknown analytics panel.",
        "validation_error": "The request contains invalid values.",
    },
}


def get_ui_text(key: str, default: str | None = None) -> str:
    if key in UI_TEXTS:
        return UI_TEXTS[key]
    if default is not None:
        return default
    return key


def get_message(category: str, key: str, default: str | None = None) -> str:
    message = MESSAGES.get(category, {}).get(key)
    if message:
        return message
    if default is not None:
        return default
    return key


def error_message(key: str, default: str | None = None) -> str:
    return get_message("error", key, default)


def panel_label(panel_key: str) -> str:
    return get_ui_text(f"panel.{panel_key}", panel_key)
