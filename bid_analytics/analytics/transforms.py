from __future__ import annotations

import math
from typing import Any, Callable, Dict, Iterable, List, Sequence, TypeVar

from bid_analytics.analytics.palette import RESPONSE_TIME_COLOR, color_for
from bid_analytics.analytics.periods import month_start, week_start
from bid_analytics.analytics.records import (
    BidCompletionRecord,
    ChartDataPoint,
    CompletionMetadata,
    GanttSegment,
    ResponseMetadata,
    SeriesMetadata,
    ShareMetadata,
    StatusDurationRecord,
    TimeSeriesDataPoint,
    VendorResponseRecord,
)
from bid_analytics.analytics.statistics import rate, round1


T = TypeVar("T")
K = TypeVar("K")

_BUCKET_STARTS = {
    "week": week_start,
    "month": month_start,
}

RESPONSE_TIME_RANGES = ("Same Day", "1-3 Days", "4-7 Days", "1-2 Weeks", "2+ Weeks")


def group_by(records: Iterable[T], key_fn: Callable[[T], K]) -> Dict[K, List[T]]:
    """Group preserving first-seen key order and record order inside each group."""
    groups: Dict[K, List[T]] = {}
    for record in records:
        groups.setdefault(key_fn(record), []).append(record)
    return groups


def completion_by_status(records: Sequence[BidCompletionRecord]) -> List[ChartDataPoint]:
    timed = [record for record in records if record.completion_hours is not None]
    points: List[ChartDataPoint] = []
    for status, group in group_by(timed, lambda record: record.status).items():
        total_hours = sum(float(record.completion_hours) for record in group)
        points.append(
            ChartDataPoint(
                label=status,
                value=round1(total_hours / len(group)),
                category="completion_time",
                color=color_for(status),
                metadata=CompletionMetadata(count=len(group), total_hours=total_hours),
            )
        )
    return points


def vendor_response_chart(records: Sequence[VendorResponseRecord], min_requests: int = 2) -> List[ChartDataPoint]:
    points: List[ChartDataPoint] = []
    for company_name, group in group_by(records, lambda record: record.company_name).items():
        total_requests = len(group)
        if total_requests < min_requests:
            continue
        responders = [record for record in group if record.responded]
        total_response_time = sum(float(record.response_hours) for record in responders)
        average = total_response_time / len(responders) if responders else 0.0
        points.append(
            ChartDataPoint(
                label=company_name,
                value=round1(average),
                category="response_time",
                color=RESPONSE_TIME_COLOR,
                metadata=ResponseMetadata(
                    response_rate=float(round(rate(len(responders), total_requests))),
                    total_requests=total_requests,
                    responses=len(responders),
                ),
            )
        )
    return sorted(points, key=lambda point: point.value)


def bucket_time_series(
    records: Sequence[Any],
    date_field: str,
    value_field: str,
    bucket: str = "week",
) -> List[TimeSeriesDataPoint]:
    bucket_start = _BUCKET_STARTS.get(str(bucket or "").strip().lower())
    if bucket_start is None:
        raise ValueError(f"unsupported time bucket: {bucket!r}")

    buckets: Dict[Any, List[float]] = {}
    for record in records:
        moment = getattr(record, date_field)
        value = getattr(record, value_field)
        if moment is None or value is None:
            continue
        buckets.setdefault(bucket_start(moment), []).append(float(value))

    series = [
        TimeSeriesDataPoint(
            date=start,
            value=round1(sum(values) / len(values)),
            metadata=SeriesMetadata(count=len(values), min=min(values), max=max(values)),
        )
        for start, values in buckets.items()
    ]
    return sorted(series, key=lambda point: point.date)


def status_gantt(records: Sequence[StatusDurationRecord]) -> List[GanttSegment]:
    segments: List[GanttSegment] = []
    for bid_id, group in group_by(records, lambda record: record.bid_id).items():
        history = sorted(group, key=lambda record: record.status_sequence)
        previous: StatusDurationRecord | None = None
        for record in history:
            start = previous.changed_at if previous is not None else record.changed_at
            title = record.bid_title or f"Bid {bid_id}"
            segments.append(
                GanttSegment(
                    id=f"{bid_id}-{record.status_sequence}",
                    name=f"{title} - {record.new_status}",
                    start_date=start,
                    end_date=record.changed_at,
                    duration_hours=float(record.duration_hours or 0.0),
                    category=record.new_status,
                    color=color_for(record.new_status),
                )
            )
            previous = record
    return sorted(segments, key=lambda segment: segment.start_date)


def status_distribution(records: Sequence[BidCompletionRecord]) -> List[ChartDataPoint]:
    total = len(records)
    return [
        ChartDataPoint(
            label=status,
            value=float(len(group)),
            category="status_share",
            color=color_for(status),
            metadata=ShareMetadata(count=len(group), percentage=float(round(rate(len(group), total)))),
        )
        for status, group in group_by(records, lambda record: record.status).items()
    ]


def _response_range(hours: float) -> str:
    days = math.floor(max(0.0, float(hours)) / 24.0)
    if days == 0:
        return RESPONSE_TIME_RANGES[0]
    if days <= 3:
        return RESPONSE_TIME_RANGES[1]
    if days <= 7:
        return RESPONSE_TIME_RANGES[2]
    if days <= 14:
        return RESPONSE_TIME_RANGES[3]
    return RESPONSE_TIME_RANGES[4]


def response_time_distribution(records: Sequence[VendorResponseRecord]) -> List[ChartDataPoint]:
    counts = {label: 0 for label in RESPONSE_TIME_RANGES}
    for record in records:
        if record.responded:
            counts[_response_range(record.response_hours)] += 1

    total = sum(counts.values())
    return [
        ChartDataPoint(
            label=label,
            value=float(count),
            category="response_time_distribution",
            color=RESPONSE_TIME_COLOR,
            metadata=ShareMetadata(count=count, percentage=float(round(rate(count, total)))),
        )
        for label, count in counts.items()
    ]
