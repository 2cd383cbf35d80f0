from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List


class BaseRepository:
    def build_window_clause(
        self,
        column_name: str,
        *,
        start_date: date | None = None,
        end_date: date | None = None,
    ) -> tuple[str, tuple[Any, ...]]:
        """Inclusive calendar-day window over ``column_name``.

        The upper bound is the start of the day after ``end_date`` so that
        timestamps stored as text or as native timestamps compare the same way.
        """
        if start_date and end_date and start_date > end_date:
            start_date, end_date = end_date, start_date

        clauses: List[str] = []
        params: List[Any] = []
        if start_date:
            clauses.append(f"{column_name} >= ?")
            params.append(start_date.isoformat())
        if end_date:
            clauses.append(f"{column_name} < ?")
            params.append((end_date + timedelta(days=1)).isoformat())
        if not clauses:
            return "", ()
        return "WHERE " + " AND ".join(clauses), tuple(params)

    @staticmethod
    def rows_to_dicts(rows: Iterable[Any]) -> List[Dict[str, Any]]:
        return [dict(row) for row in rows]
