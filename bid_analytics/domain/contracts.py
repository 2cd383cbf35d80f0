from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Dict, List, Tuple

from bid_analytics.analytics import (
    BidCompletionRecord,
    StatusDurationRecord,
    TimeSeriesDataPoint,
    VendorResponseRecord,
)
from bid_analytics.errors import RecordParseError


@dataclass(frozen=True)
class AnalyticsRequestInput:
    panel: str
    periods: int | None = None
    bucket: str | None = None
    start_date: date | None = None
    end_date: date | None = None


@dataclass(frozen=True)
class AnalyticsDatasets:
    completions: Tuple[BidCompletionRecord, ...] = ()
    responses: Tuple[VendorResponseRecord, ...] = ()
    status_history: Tuple[StatusDurationRecord, ...] = ()
    series: Tuple[TimeSeriesDataPoint, ...] = ()

    def record_counts(self) -> Dict[str, int]:
        return {
            "completions": len(self.completions),
            "responses": len(self.responses),
            "status_history": len(self.status_history),
            "series": len(self.series),
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AnalyticsDatasets":
        return cls(
            completions=tuple(BidCompletionRecord.from_dict(item) for item in _records(payload, "completions")),
            responses=tuple(VendorResponseRecord.from_dict(item) for item in _records(payload, "responses")),
            status_history=tuple(
                StatusDurationRecord.from_dict(item) for item in _records(payload, "status_history")
            ),
            series=tuple(TimeSeriesDataPoint.from_dict(item) for item in _records(payload, "series")),
        )


def _records(payload: Dict[str, Any], key: str) -> List[Dict[str, Any]]:
    raw = payload.get(key)
    if raw is None:
        return []
    if not isinstance(raw, list) or not all(isinstance(item, dict) for item in raw):
        raise RecordParseError(details=f"{key} must be a list of objects", payload={"field": key})
    return raw
