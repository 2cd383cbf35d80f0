from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Any, Dict, List

from bid_analytics.analytics import (
    BidCompletionRecord,
    StatusDurationRecord,
    VendorResponseRecord,
    interval_to_hours,
)
from bid_analytics.db import DB_ERRORS
from bid_analytics.errors import RecordSourceError
from bid_analytics.infrastructure.repositories.base import BaseRepository


logger = logging.getLogger(__name__)


def _duration_hours(raw_value: Any) -> float | None:
    if raw_value is None:
        return None
    if isinstance(raw_value, timedelta):
        return raw_value.total_seconds() / 3600.0
    return interval_to_hours(raw_value)


class AnalyticsRecordRepository(BaseRepository):
    """Read-only access to the three analytics views the dashboards are built from."""

    def _fetch(self, db, table_name: str, sql: str, params: tuple) -> List[Dict[str, Any]]:
        try:
            rows = db.execute(sql, params).fetchall()
        except DB_ERRORS as exc:
            logger.error(
                "analytics_record_source_failed",
                extra={"table": table_name, "error": str(exc)},
            )
            raise RecordSourceError(details=f"{table_name}: {exc}") from exc
        return self.rows_to_dicts(rows)

    def load_completions(
        self,
        db,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> List[BidCompletionRecord]:
        where_clause, params = self.build_window_clause("created_at", start_date=start_date, end_date=end_date)
        rows = self._fetch(
            db,
            "bid_completion_analytics",
            f"""
            SELECT status, created_at, completed_at, completion_hours, completion_status
            FROM bid_completion_analytics
            {where_clause}
            ORDER BY created_at ASC
            """,
            params,
        )
        return [BidCompletionRecord.from_dict(row) for row in rows]

    def load_responses(
        self,
        db,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> List[VendorResponseRecord]:
        where_clause, params = self.build_window_clause("email_sent_date", start_date=start_date, end_date=end_date)
        rows = self._fetch(
            db,
            "vendor_response_analytics",
            f"""
            SELECT vendor_id, company_name, email_sent_date, response_status,
                   response_hours, target_response_hours
            FROM vendor_response_analytics
            {where_clause}
            ORDER BY email_sent_date ASC
            """,
            params,
        )
        return [VendorResponseRecord.from_dict(row) for row in rows]

    def load_status_history(
        self,
        db,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> List[StatusDurationRecord]:
        where_clause, params = self.build_window_clause("changed_at", start_date=start_date, end_date=end_date)
        rows = self._fetch(
            db,
            "bid_status_duration_analytics",
            f"""
            SELECT bid_id, bid_title, status_sequence, new_status, changed_at, duration_hours
            FROM bid_status_duration_analytics
            {where_clause}
            ORDER BY bid_id ASC, status_sequence ASC
            """,
            params,
        )
        records = []
        for row in rows:
            row["duration_hours"] = _duration_hours(row.get("duration_hours"))
            records.append(StatusDurationRecord.from_dict(row))
        return records
