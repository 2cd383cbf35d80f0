import unittest
from datetime import datetime, timezone

from bid_analytics.analytics import (
    AnalyticsTuning,
    BidCompletionRecord,
    StatusDurationRecord,
    VendorResponseRecord,
    analytics_summary,
    completion_trends,
    identify_bottlenecks,
    monthly_trending,
    vendor_performance_scores,
)
from bid_analytics.analytics.derivations import grade_for


NOW = datetime(2026, 3, 15, 12, 0, tzinfo=timezone.utc)


def _at(month: int, day: int) -> datetime:
    return datetime(2026, month, day, 9, 0, tzinfo=timezone.utc)


def _bid(created: datetime, *, completed: bool, hours: float | None = None, outcome: str | None = None):
    return BidCompletionRecord(
        status="Won",
        created_at=created,
        completed_at=created if completed else None,
        completion_hours=hours,
        completion_status=outcome,
    )


def _request(vendor_id, company, status, hours=None, target=None, sent=None) -> VendorResponseRecord:
    return VendorResponseRecord(
        vendor_id=vendor_id,
        company_name=company,
        email_sent_date=sent or _at(2, 10),
        response_status=status,
        response_hours=hours,
        target_response_hours=target,
    )


def _durations(status: str, values):
    return [
        StatusDurationRecord(
            bid_id=index + 1,
            status_sequence=2,
            new_status=status,
            changed_at=_at(1, index + 1),
            duration_hours=value,
        )
        for index, value in enumerate(values)
    ]


class CompletionTrendsTest(unittest.TestCase):
    def test_months_oldest_first_with_rates(self) -> None:
        records = [
            _bid(_at(1, 10), completed=True, hours=10.0, outcome="On Time"),
            _bid(_at(1, 20), completed=True, hours=30.0, outcome="Overdue"),
            _bid(_at(1, 25), completed=False),
            _bid(_at(3, 2), completed=True, hours=None, outcome="On Time"),
        ]

        trends = completion_trends(records, periods=3, now=NOW)

        self.assertEqual([trend.period for trend in trends], ["Jan 2026", "Feb 2026", "Mar 2026"])
        january, february, march = trends
        self.assertEqual(january.total_bids, 3)
        self.assertEqual(january.completed_bids, 2)
        self.assertEqual(january.on_time_bids, 1)
        self.assertEqual(january.completion_rate, 66.7)
        self.assertEqual(january.on_time_rate, 50.0)
        self.assertEqual(january.avg_completion_time, 20.0)

        self.assertEqual(february.total_bids, 0)
        self.assertEqual(february.completion_rate, 0.0)
        self.assertEqual(february.on_time_rate, 0.0)
        self.assertEqual(february.avg_completion_time, 0.0)

        self.assertEqual(march.completion_rate, 100.0)
        self.assertEqual(march.avg_completion_time, 0.0)

    def test_window_is_half_open(self) -> None:
        boundary = datetime(2026, 3, 1, tzinfo=timezone.utc)
        trends = completion_trends([_bid(boundary, completed=False)], periods=2, now=NOW)

        self.assertEqual([trend.total_bids for trend in trends], [0, 1])
        self.assertEqual(trends[1].to_dict()["date"], "2026-03-01T00:00:00Z")

    def test_naive_timestamps_are_read_as_utc(self) -> None:
        record = _bid(datetime(2026, 3, 2, 8, 0), completed=True, hours=5.0, outcome="On Time")
        response = _request(1, "Acme", "Responded", 3.0, sent=datetime(2026, 3, 3))

        trends = completion_trends([record], periods=1, now=NOW)
        march = monthly_trending([record], [response], months=1, now=NOW)[0]

        self.assertEqual(record.created_at.tzinfo, timezone.utc)
        self.assertEqual(trends[0].completed_bids, 1)
        self.assertEqual(trends[0].on_time_rate, 100.0)
        self.assertEqual(march.vendor_responses, 1)
        self.assertEqual(march.avg_response_time, 3.0)


class VendorPerformanceScoresTest(unittest.TestCase):
    def test_scores_grades_and_floor(self) -> None:
        records = [
            _request(1, "Acme", "Responded", 12.0, 24.0),
            _request(1, "Acme", "Responded", 24.0, 24.0),
            _request(2, "Beta", "Responded", 48.0, 24.0),
            _request(2, "Beta", "Pending"),
            _request(3, "Gamma", "Responded", 1.0, 24.0),
        ]

        scores = vendor_performance_scores(records)

        self.assertEqual([score.company_name for score in scores], ["Acme", "Beta"])
        acme, beta = scores
        self.assertEqual(acme.response_rate, 100.0)
        self.assertEqual(acme.avg_response_time, 18.0)
        self.assertEqual(acme.on_time_rate, 100.0)
        self.assertEqual(acme.performance_score, 95.5)
        self.assertEqual(acme.grade, "A")

        self.assertEqual(beta.response_rate, 50.0)
        self.assertEqual(beta.on_time_rate, 0.0)
        self.assertEqual(beta.performance_score, 42.0)
        self.assertEqual(beta.grade, "F")
        self.assertEqual(beta.total_requests, 2)
        self.assertEqual(beta.total_responses, 1)

    def test_vendor_without_responders_scores_zero(self) -> None:
        records = [_request(5, "Silent", "Pending"), _request(5, "Silent", "Pending")]

        score = vendor_performance_scores(records)[0]

        self.assertEqual(score.performance_score, 0.0)
        self.assertEqual(score.avg_response_time, 0.0)
        self.assertEqual(score.grade, "F")

    def test_ties_keep_first_seen_order(self) -> None:
        records = [
            _request(4, "Delta", "Responded", 24.0, 48.0),
            _request(5, "Echo", "Responded", 24.0, 48.0),
            _request(4, "Delta", "Responded", 24.0, 48.0),
            _request(5, "Echo", "Responded", 24.0, 48.0),
        ]

        scores = vendor_performance_scores(records)

        self.assertEqual([score.company_name for score in scores], ["Delta", "Echo"])
        self.assertEqual(scores[0].performance_score, scores[1].performance_score)

    def test_missing_target_is_not_on_time(self) -> None:
        records = [_request(6, "Zeta", "Responded", 2.0), _request(6, "Zeta", "Responded", 2.0)]

        self.assertEqual(vendor_performance_scores(records)[0].on_time_rate, 0.0)

    def test_custom_weights(self) -> None:
        records = [_request(1, "Acme", "Responded", 12.0, 24.0), _request(1, "Acme", "Responded", 24.0, 24.0)]
        tuning = AnalyticsTuning(response_weight=1.0, speed_weight=0.0, reliability_weight=0.0)

        self.assertEqual(vendor_performance_scores(records, tuning)[0].performance_score, 100.0)

    def test_grade_thresholds(self) -> None:
        self.assertEqual(grade_for(90.0), "A")
        self.assertEqual(grade_for(89.9), "B")
        self.assertEqual(grade_for(80.0), "B")
        self.assertEqual(grade_for(70.0), "C")
        self.assertEqual(grade_for(60.0), "D")
        self.assertEqual(grade_for(59.9), "F")


class IdentifyBottlenecksTest(unittest.TestCase):
    def test_severity_and_order(self) -> None:
        records = (
            _durations("Drafting", [10.0, 10.0, 10.0])
            + _durations("Review", [100.0, 100.0, 280.0])
            + _durations("Approval", [100.0, 100.0, 430.0])
            + _durations("Approval", [None])
        )

        bottlenecks = identify_bottlenecks(records)

        self.assertEqual([item.status for item in bottlenecks], ["Approval", "Review", "Drafting"])
        approval, review, drafting = bottlenecks
        self.assertEqual(approval.mean, 210.0)
        self.assertEqual(approval.stats.median, 100.0)
        self.assertEqual(approval.stats.count, 3)
        self.assertEqual(approval.severity, "high")
        self.assertTrue(approval.is_bottleneck)
        self.assertEqual(review.mean, 160.0)
        self.assertEqual(review.severity, "medium")
        self.assertTrue(review.is_bottleneck)
        self.assertEqual(drafting.severity, "low")
        self.assertFalse(drafting.is_bottleneck)

    def test_ratio_boundary_counts_as_bottleneck(self) -> None:
        bottleneck = identify_bottlenecks(_durations("Review", [100.0, 100.0, 250.0]))[0]

        self.assertEqual(bottleneck.mean, 150.0)
        self.assertEqual(bottleneck.stats.median, 100.0)
        self.assertTrue(bottleneck.is_bottleneck)
        self.assertEqual(bottleneck.severity, "medium")

    def test_high_severity_needs_more_than_double(self) -> None:
        bottleneck = identify_bottlenecks(_durations("Review", [100.0, 100.0, 400.0]))[0]

        self.assertEqual(bottleneck.mean, 200.0)
        self.assertEqual(bottleneck.severity, "medium")

    def test_configured_ratio(self) -> None:
        tuning = AnalyticsTuning(bottleneck_ratio=1.2, high_severity_ratio=3.0)
        bottleneck = identify_bottlenecks(_durations("Review", [100.0, 100.0, 250.0]), tuning)[0]

        self.assertTrue(bottleneck.is_bottleneck)
        self.assertEqual(bottleneck.severity, "medium")

    def test_to_dict_merges_statistics(self) -> None:
        payload = identify_bottlenecks(_durations("Review", [2.0, 4.0]))[0].to_dict()

        self.assertEqual(payload["status"], "Review")
        self.assertEqual(payload["mean"], 3.0)
        self.assertIn("stdDev", payload)
        self.assertEqual(payload["severity"], "low")


class SummaryAndMonthlyTest(unittest.TestCase):
    def test_analytics_summary(self) -> None:
        completions = [
            _bid(_at(1, 10), completed=True, hours=10.0, outcome="On Time"),
            _bid(_at(1, 11), completed=True, hours=30.0, outcome="Overdue"),
            _bid(_at(1, 12), completed=False),
        ]
        responses = [
            _request(1, "Acme", "Responded", 2.0),
            _request(1, "Acme", "Responded", 4.0),
            _request(2, "Beta", "Responded", 6.0),
            _request(2, "Beta", "Pending"),
        ]

        summary = analytics_summary(completions, responses).to_dict()

        self.assertEqual(
            summary,
            {
                "totalBids": 3,
                "completedBids": 2,
                "avgCompletionTime": 20.0,
                "onTimeRate": 50.0,
                "overdueBids": 1,
                "totalVendorRequests": 4,
                "vendorResponseRate": 75.0,
                "avgResponseTime": 4.0,
            },
        )

    def test_empty_summary(self) -> None:
        summary = analytics_summary([], [])

        self.assertEqual(summary.total_bids, 0)
        self.assertEqual(summary.on_time_rate, 0.0)
        self.assertEqual(summary.vendor_response_rate, 0.0)

    def test_monthly_trending(self) -> None:
        completions = [
            _bid(_at(2, 3), completed=True, hours=10.0),
            _bid(_at(2, 20), completed=True, hours=20.0),
            _bid(_at(3, 1), completed=False),
        ]
        responses = [
            _request(1, "Acme", "Responded", 8.0, sent=_at(2, 10)),
            _request(1, "Acme", "Responded", 4.0, sent=_at(3, 5)),
            _request(2, "Beta", "Pending", sent=_at(3, 6)),
        ]

        february, march = monthly_trending(completions, responses, months=2, now=NOW)

        self.assertEqual(february.month, "Feb 2026")
        self.assertEqual(february.avg_completion_time, 15.0)
        self.assertEqual(february.avg_response_time, 8.0)
        self.assertEqual(february.completed_bids, 2)
        self.assertEqual(february.vendor_responses, 1)
        self.assertEqual(march.avg_completion_time, 0.0)
        self.assertEqual(march.avg_response_time, 4.0)
        self.assertEqual(march.completed_bids, 0)
        self.assertEqual(march.vendor_responses, 1)


if __name__ == "__main__":
    unittest.main()
