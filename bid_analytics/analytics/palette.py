from __future__ import annotations

from enum import Enum


class StatusColor(str, Enum):
    SUCCESS = "#28a745"
    DANGER = "#dc3545"
    PRIMARY = "#007bff"
    WARNING = "#ffc107"
    INFO = "#17a2b8"
    DEFAULT = "#B6A6CA"


RESPONSE_TIME_COLOR = "#3B82F6"

STATUS_COLORS = {
    "won bid": StatusColor.SUCCESS,
    "won": StatusColor.SUCCESS,
    "lost bid": StatusColor.DANGER,
    "lost": StatusColor.DANGER,
    "gathering costs": StatusColor.PRIMARY,
    "drafting bid": StatusColor.WARNING,
    "bidding": StatusColor.WARNING,
    "bid sent": StatusColor.INFO,
}


def color_for(status: str | None) -> str:
    normalized = str(status or "").strip().lower()
    color = STATUS_COLORS.get(normalized)
    if color is None:
        return StatusColor.DEFAULT.value
    return color.value
