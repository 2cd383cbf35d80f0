from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Union

from bid_analytics.analytics.statistics import SummaryStatistics
from bid_analytics.errors import RecordParseError


RESPONDED = "Responded"
ON_TIME = "On Time"
OVERDUE = "Overdue"


def parse_timestamp(raw_value: Any, *, field_name: str = "timestamp") -> datetime:
    if isinstance(raw_value, datetime):
        parsed = raw_value
    else:
        value = str(raw_value or "").strip()
        if not value:
            raise RecordParseError(details=f"{field_name} is required", payload={"field": field_name})
        if value.endswith("Z"):
            value = value[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(value)
        except ValueError as exc:
            raise RecordParseError(
                details=f"{field_name} is not ISO-8601: {raw_value!r}",
                payload={"field": field_name},
            ) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def optional_timestamp(raw_value: Any, *, field_name: str = "timestamp") -> datetime | None:
    if raw_value in (None, ""):
        return None
    return parse_timestamp(raw_value, field_name=field_name)


def optional_float(raw_value: Any, *, field_name: str = "value") -> float | None:
    if raw_value in (None, ""):
        return None
    try:
        return float(raw_value)
    except (TypeError, ValueError) as exc:
        raise RecordParseError(details=f"{field_name} is not numeric: {raw_value!r}", payload={"field": field_name}) from exc


def _required_int(raw_value: Any, *, field_name: str) -> int:
    try:
        return int(raw_value)
    except (TypeError, ValueError) as exc:
        raise RecordParseError(details=f"{field_name} must be an integer", payload={"field": field_name}) from exc


def _optional_str(raw_value: Any) -> str | None:
    if raw_value is None:
        return None
    value = str(raw_value).strip()
    return value or None


def _utc(value: datetime | None) -> datetime | None:
    if value is None or not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _iso(value: datetime) -> str:
    return value.isoformat().replace("+00:00", "Z")


@dataclass(frozen=True)
class BidCompletionRecord:
    status: str
    created_at: datetime
    completed_at: datetime | None = None
    completion_hours: float | None = None
    completion_status: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "created_at", _utc(self.created_at))
        object.__setattr__(self, "completed_at", _utc(self.completed_at))

    @staticmethod
    def from_dict(payload: Mapping[str, Any]) -> "BidCompletionRecord":
        data = dict(payload or {})
        return BidCompletionRecord(
            status=str(data.get("status") or ""),
            created_at=parse_timestamp(data.get("created_at"), field_name="created_at"),
            completed_at=optional_timestamp(data.get("completed_at"), field_name="completed_at"),
            completion_hours=optional_float(data.get("completion_hours"), field_name="completion_hours"),
            completion_status=_optional_str(data.get("completion_status")),
        )


@dataclass(frozen=True)
class VendorResponseRecord:
    vendor_id: int
    company_name: str
    email_sent_date: datetime
    response_status: str
    response_hours: float | None = None
    target_response_hours: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "email_sent_date", _utc(self.email_sent_date))

    @property
    def responded(self) -> bool:
        return self.response_status == RESPONDED and self.response_hours is not None

    @staticmethod
    def from_dict(payload: Mapping[str, Any]) -> "VendorResponseRecord":
        data = dict(payload or {})
        return VendorResponseRecord(
            vendor_id=_required_int(data.get("vendor_id"), field_name="vendor_id"),
            company_name=str(data.get("company_name") or ""),
            email_sent_date=parse_timestamp(data.get("email_sent_date"), field_name="email_sent_date"),
            response_status=str(data.get("response_status") or ""),
            response_hours=optional_float(data.get("response_hours"), field_name="response_hours"),
            target_response_hours=optional_float(
                data.get("target_response_hours"),
                field_name="target_response_hours",
            ),
        )


@dataclass(frozen=True)
class StatusDurationRecord:
    bid_id: int
    status_sequence: int
    new_status: str
    changed_at: datetime
    bid_title: str | None = None
    duration_hours: float | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "changed_at", _utc(self.changed_at))

    @staticmethod
    def from_dict(payload: Mapping[str, Any]) -> "StatusDurationRecord":
        data = dict(payload or {})
        return StatusDurationRecord(
            bid_id=_required_int(data.get("bid_id"), field_name="bid_id"),
            status_sequence=_required_int(data.get("status_sequence"), field_name="status_sequence"),
            new_status=str(data.get("new_status") or ""),
            changed_at=parse_timestamp(data.get("changed_at"), field_name="changed_at"),
            bid_title=_optional_str(data.get("bid_title")),
            duration_hours=optional_float(data.get("duration_hours"), field_name="duration_hours"),
        )


@dataclass(frozen=True)
class CompletionMetadata:
    count: int
    total_hours: float

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "totalHours": self.total_hours}


@dataclass(frozen=True)
class ResponseMetadata:
    response_rate: float
    total_requests: int
    responses: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "responseRate": self.response_rate,
            "totalRequests": self.total_requests,
            "responses": self.responses,
        }


@dataclass(frozen=True)
class ShareMetadata:
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "percentage": self.percentage}


@dataclass(frozen=True)
class SeriesMetadata:
    count: int
    min: float
    max: float

    def to_dict(self) -> Dict[str, Any]:
        return {"count": self.count, "min": self.min, "max": self.max}


@dataclass(frozen=True)
class ForecastMetadata:
    confidence: float
    is_forecast: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {"isForecast": self.is_forecast, "confidence": self.confidence}


ChartMetadata = Union[CompletionMetadata, ResponseMetadata, ShareMetadata]
PointMetadata = Union[SeriesMetadata, ForecastMetadata]


@dataclass(frozen=True)
class ChartDataPoint:
    label: str
    value: float
    category: str
    color: str
    metadata: ChartMetadata | None = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "value": self.value,
            "category": self.category,
            "color": self.color,
            "metadata": self.metadata.to_dict() if self.metadata is not None else {},
        }


@dataclass(frozen=True)
class TimeSeriesDataPoint:
    date: datetime
    value: float
    metadata: PointMetadata | None = None
    category: str | None = None

    @property
    def is_forecast(self) -> bool:
        return isinstance(self.metadata, ForecastMetadata)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "date": _iso(self.date),
            "value": self.value,
            "metadata": self.metadata.to_dict() if self.metadata is not None else {},
        }
        if self.category:
            payload["category"] = self.category
        return payload

    @staticmethod
    def from_dict(payload: Mapping[str, Any]) -> "TimeSeriesDataPoint":
        data = dict(payload or {})
        value = optional_float(data.get("value"), field_name="value")
        if value is None:
            raise RecordParseError(details="value is required", payload={"field": "value"})
        return TimeSeriesDataPoint(date=parse_timestamp(data.get("date"), field_name="date"), value=value)


@dataclass(frozen=True)
class GanttSegment:
    id: str
    name: str
    start_date: datetime
    end_date: datetime
    duration_hours: float
    category: str
    color: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "startDate": _iso(self.start_date),
            "endDate": _iso(self.end_date),
            "duration": self.duration_hours,
            "category": self.category,
            "color": self.color,
        }


@dataclass(frozen=True)
class CompletionTrend:
    period: str
    date: datetime
    total_bids: int
    completed_bids: int
    on_time_bids: int
    completion_rate: float
    on_time_rate: float
    avg_completion_time: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "period": self.period,
            "date": _iso(self.date),
            "totalBids": self.total_bids,
            "completedBids": self.completed_bids,
            "onTimeBids": self.on_time_bids,
            "completionRate": self.completion_rate,
            "onTimeRate": self.on_time_rate,
            "avgCompletionTime": self.avg_completion_time,
        }


@dataclass(frozen=True)
class MonthlyTrend:
    month: str
    date: datetime
    avg_completion_time: float
    avg_response_time: float
    completed_bids: int
    vendor_responses: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "month": self.month,
            "date": _iso(self.date),
            "avgCompletionTime": self.avg_completion_time,
            "avgResponseTime": self.avg_response_time,
            "completedBids": self.completed_bids,
            "vendorResponses": self.vendor_responses,
        }


@dataclass(frozen=True)
class VendorScore:
    vendor_id: int
    company_name: str
    response_rate: float
    avg_response_time: float
    on_time_rate: float
    performance_score: float
    total_requests: int
    total_responses: int
    grade: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "vendorId": self.vendor_id,
            "companyName": self.company_name,
            "responseRate": self.response_rate,
            "avgResponseTime": self.avg_response_time,
            "onTimeRate": self.on_time_rate,
            "performanceScore": self.performance_score,
            "totalRequests": self.total_requests,
            "totalResponses": self.total_responses,
            "grade": self.grade,
        }


@dataclass(frozen=True)
class Bottleneck:
    status: str
    stats: SummaryStatistics
    is_bottleneck: bool
    severity: str

    @property
    def mean(self) -> float:
        return self.stats.mean

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"status": self.status}
        payload.update(self.stats.to_dict())
        payload["isBottleneck"] = self.is_bottleneck
        payload["severity"] = self.severity
        return payload


@dataclass(frozen=True)
class AnalyticsSummary:
    total_bids: int
    completed_bids: int
    avg_completion_time: float
    on_time_rate: float
    overdue_bids: int
    total_vendor_requests: int
    vendor_response_rate: float
    avg_response_time: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalBids": self.total_bids,
            "completedBids": self.completed_bids,
            "avgCompletionTime": self.avg_completion_time,
            "onTimeRate": self.on_time_rate,
            "overdueBids": self.overdue_bids,
            "totalVendorRequests": self.total_vendor_requests,
            "vendorResponseRate": self.vendor_response_rate,
            "avgResponseTime": self.avg_response_time,
        }
