from __future__ import annotations

from datetime import datetime
from typing import List, Sequence

from bid_analytics.analytics.periods import month_label, trailing_months
from bid_analytics.analytics.records import (
    ON_TIME,
    OVERDUE,
    RESPONDED,
    AnalyticsSummary,
    BidCompletionRecord,
    Bottleneck,
    CompletionTrend,
    MonthlyTrend,
    StatusDurationRecord,
    VendorResponseRecord,
    VendorScore,
)
from bid_analytics.analytics.statistics import rate, round1, summary_statistics
from bid_analytics.analytics.transforms import group_by
from bid_analytics.analytics.tuning import DEFAULT_TUNING, AnalyticsTuning


GRADE_THRESHOLDS = ((90.0, "A"), (80.0, "B"), (70.0, "C"), (60.0, "D"))


def _mean_hours(values: Sequence[float | None]) -> float:
    if not values:
        return 0.0
    return sum(float(value or 0.0) for value in values) / len(values)


def completion_trends(
    records: Sequence[BidCompletionRecord],
    periods: int = 6,
    now: datetime | None = None,
) -> List[CompletionTrend]:
    trends: List[CompletionTrend] = []
    for start, end in trailing_months(periods, now):
        in_period = [record for record in records if start <= record.created_at < end]
        completed = [record for record in in_period if record.completed_at is not None]
        on_time = [record for record in completed if record.completion_status == ON_TIME]
        trends.append(
            CompletionTrend(
                period=month_label(start),
                date=start,
                total_bids=len(in_period),
                completed_bids=len(completed),
                on_time_bids=len(on_time),
                completion_rate=round1(rate(len(completed), len(in_period))),
                on_time_rate=round1(rate(len(on_time), len(completed))),
                avg_completion_time=round1(_mean_hours([record.completion_hours for record in completed])),
            )
        )
    return trends


def grade_for(score: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if score >= threshold:
            return grade
    return "F"


def vendor_performance_scores(
    records: Sequence[VendorResponseRecord],
    tuning: AnalyticsTuning = DEFAULT_TUNING,
) -> List[VendorScore]:
    scores: List[VendorScore] = []
    groups = group_by(records, lambda record: (record.vendor_id, record.company_name))
    for (vendor_id, company_name), group in groups.items():
        total_requests = len(group)
        if total_requests < tuning.vendor_min_requests:
            continue

        responders = [record for record in group if record.responded]
        on_time = [
            record
            for record in responders
            if record.target_response_hours is not None and record.response_hours <= record.target_response_hours
        ]
        response_rate = rate(len(responders), total_requests)
        avg_response_time = _mean_hours([record.response_hours for record in responders])
        on_time_rate = rate(len(on_time), len(responders))

        response_score = min(response_rate * 1.2, 100.0)
        # No responders means no evidence of speed.
        speed_score = max(0.0, 100.0 - (avg_response_time / 24.0) * 20.0) if responders else 0.0
        performance_score = round1(
            response_score * tuning.response_weight
            + speed_score * tuning.speed_weight
            + on_time_rate * tuning.reliability_weight
        )

        scores.append(
            VendorScore(
                vendor_id=int(vendor_id),
                company_name=company_name,
                response_rate=round1(response_rate),
                avg_response_time=round1(avg_response_time),
                on_time_rate=round1(on_time_rate),
                performance_score=performance_score,
                total_requests=total_requests,
                total_responses=len(responders),
                grade=grade_for(performance_score),
            )
        )
    return sorted(scores, key=lambda score: score.performance_score, reverse=True)


def severity_for(mean: float, median: float, tuning: AnalyticsTuning = DEFAULT_TUNING) -> str:
    if mean > median * tuning.high_severity_ratio:
        return "high"
    if mean >= median * tuning.bottleneck_ratio:
        return "medium"
    return "low"


def identify_bottlenecks(
    records: Sequence[StatusDurationRecord],
    tuning: AnalyticsTuning = DEFAULT_TUNING,
) -> List[Bottleneck]:
    timed = [record for record in records if record.duration_hours is not None]
    bottlenecks: List[Bottleneck] = []
    for status, group in group_by(timed, lambda record: record.new_status).items():
        stats = summary_statistics([float(record.duration_hours) for record in group])
        bottlenecks.append(
            Bottleneck(
                status=status,
                stats=stats,
                is_bottleneck=stats.mean >= stats.median * tuning.bottleneck_ratio,
                severity=severity_for(stats.mean, stats.median, tuning),
            )
        )
    return sorted(bottlenecks, key=lambda item: item.mean, reverse=True)


def analytics_summary(
    completions: Sequence[BidCompletionRecord],
    responses: Sequence[VendorResponseRecord],
) -> AnalyticsSummary:
    completed = [record for record in completions if record.completed_at is not None]
    on_time = [record for record in completed if record.completion_status == ON_TIME]
    overdue = [record for record in completions if record.completion_status == OVERDUE]
    responded = [record for record in responses if record.response_status == RESPONDED]

    return AnalyticsSummary(
        total_bids=len(completions),
        completed_bids=len(completed),
        avg_completion_time=round1(_mean_hours([record.completion_hours for record in completed])),
        on_time_rate=float(round(rate(len(on_time), len(completed)))),
        overdue_bids=len(overdue),
        total_vendor_requests=len(responses),
        vendor_response_rate=float(round(rate(len(responded), len(responses)))),
        avg_response_time=round1(_mean_hours([record.response_hours for record in responded])),
    )


def monthly_trending(
    completions: Sequence[BidCompletionRecord],
    responses: Sequence[VendorResponseRecord],
    months: int = 6,
    now: datetime | None = None,
) -> List[MonthlyTrend]:
    trends: List[MonthlyTrend] = []
    for start, end in trailing_months(months, now):
        completed = [
            record
            for record in completions
            if start <= record.created_at < end and record.completed_at is not None
        ]
        responded = [
            record
            for record in responses
            if start <= record.email_sent_date < end and record.response_status == RESPONDED
        ]
        trends.append(
            MonthlyTrend(
                month=month_label(start),
                date=start,
                avg_completion_time=round1(_mean_hours([record.completion_hours for record in completed])),
                avg_response_time=round1(_mean_hours([record.response_hours for record in responded])),
                completed_bids=len(completed),
                vendor_responses=len(responded),
            )
        )
    return trends
