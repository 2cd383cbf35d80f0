import unittest
from datetime import datetime, timezone

from bid_analytics.analytics import BidCompletionRecord, VendorResponseRecord
from bid_analytics.application.analytics_service import PANELS, AnalyticsService, normalize_panel_key
from bid_analytics.domain.contracts import AnalyticsDatasets, AnalyticsRequestInput
from bid_analytics.errors import NotFoundError
from bid_analytics.observability import metrics_snapshot, reset_metrics_for_tests


NOW = datetime(2026, 2, 15, tzinfo=timezone.utc)


class _FakeRepository:
    def __init__(self) -> None:
        self.windows = []

    def load_completions(self, db, *, start_date=None, end_date=None):
        self.windows.append((start_date, end_date))
        return [
            BidCompletionRecord(
                status="Won",
                created_at=datetime(2026, 1, 10, tzinfo=timezone.utc),
                completed_at=datetime(2026, 1, 11, tzinfo=timezone.utc),
                completion_hours=24.0,
                completion_status="On Time",
            ),
            BidCompletionRecord(
                status="Won",
                created_at=datetime(2026, 2, 3, tzinfo=timezone.utc),
                completed_at=datetime(2026, 2, 4, tzinfo=timezone.utc),
                completion_hours=12.0,
                completion_status="On Time",
            ),
        ]

    def load_responses(self, db, *, start_date=None, end_date=None):
        return [
            VendorResponseRecord(
                vendor_id=1,
                company_name="Acme",
                email_sent_date=datetime(2026, 2, 1, tzinfo=timezone.utc),
                response_status="Responded",
                response_hours=6.0,
                target_response_hours=12.0,
            )
        ]

    def load_status_history(self, db, *, start_date=None, end_date=None):
        return []


class AnalyticsServiceTest(unittest.TestCase):
    def setUp(self) -> None:
        self.repository = _FakeRepository()
        self.service = AnalyticsService(repository_factory=lambda: self.repository, clock=lambda: NOW)
        reset_metrics_for_tests()

    def tearDown(self) -> None:
        reset_metrics_for_tests()

    def test_panel_keys_are_normalized(self) -> None:
        self.assertEqual(normalize_panel_key(" Vendor-Scores "), "vendor_scores")
        with self.assertRaises(NotFoundError):
            normalize_panel_key("pie")

    def test_dashboard_uses_clock_and_every_panel(self) -> None:
        payload = self.service.build_dashboard_payload(None, AnalyticsRequestInput(panel="dashboard", periods=2))

        self.assertEqual(payload["generated_at"], "2026-02-15T00:00:00Z")
        self.assertEqual(list(payload["panels"]), list(PANELS))
        trends = payload["panels"]["completion_trends"]["data"]
        self.assertEqual([item["period"] for item in trends], ["Jan 2026", "Feb 2026"])
        self.assertEqual(trends[1]["completedBids"], 1)
        self.assertEqual(len(payload["panels"]["forecast"]["data"]), 3)
        self.assertEqual(payload["panels"]["vendor_scores"]["data"], [])

    def test_window_reaches_repository(self) -> None:
        window = AnalyticsRequestInput(
            panel="summary",
            start_date=datetime(2026, 1, 1).date(),
            end_date=datetime(2026, 1, 31).date(),
        )

        self.service.build_panel_payload(None, window)

        self.assertEqual(self.repository.windows, [(window.start_date, window.end_date)])

    def test_forecast_from_completion_history(self) -> None:
        datasets = self.service.load_datasets(None, AnalyticsRequestInput(panel="forecast"))

        data = self.service.compute_panel("forecast", datasets, periods=1)["data"]

        self.assertEqual(data[0]["date"], "2026-03-01T00:00:00Z")
        self.assertEqual(data[0]["value"], 0.0)

    def test_time_series_buckets_by_creation(self) -> None:
        datasets = AnalyticsDatasets(
            completions=(
                BidCompletionRecord(
                    status="Won",
                    created_at=datetime(2026, 1, 30, tzinfo=timezone.utc),
                    completed_at=datetime(2026, 2, 2, tzinfo=timezone.utc),
                    completion_hours=72.0,
                ),
            )
        )

        data = self.service.compute_panel("time_series", datasets, bucket="month")["data"]

        self.assertEqual([point["date"] for point in data], ["2026-01-01T00:00:00Z"])
        self.assertEqual(data[0]["value"], 72.0)

    def test_computations_are_counted(self) -> None:
        datasets = AnalyticsDatasets()
        self.service.compute_panel("summary", datasets)
        self.service.compute_panel("gantt", datasets)

        analytics = metrics_snapshot()["analytics"]

        self.assertEqual(analytics["computed_total"], 2)
        self.assertEqual(set(analytics["by_panel"]), {"summary", "gantt"})

    def test_failed_computation_is_counted(self) -> None:
        with self.assertRaises(ValueError):
            self.service.compute_panel("time_series", AnalyticsDatasets(), bucket="fortnight")

        self.assertEqual(metrics_snapshot()["analytics"]["failed_total"], 1)


if __name__ == "__main__":
    unittest.main()
