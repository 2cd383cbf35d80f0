from __future__ import annotations

from typing import List, Sequence, Tuple

from bid_analytics.analytics.periods import add_months
from bid_analytics.analytics.records import ForecastMetadata, TimeSeriesDataPoint
from bid_analytics.analytics.statistics import round1


MIN_POINTS = 2
MIN_CONFIDENCE = 0.5
CONFIDENCE_DECAY = 0.1


def fit_line(values: Sequence[float]) -> Tuple[float, float]:
    """Least-squares ``(slope, intercept)`` of ``values`` against their indices."""
    n = len(values)
    sum_x = sum(range(n))
    sum_y = sum(float(value) for value in values)
    sum_xy = sum(index * float(value) for index, value in enumerate(values))
    sum_x2 = sum(index * index for index in range(n))

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_x2 - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    return slope, intercept


def forecast_confidence(step: int) -> float:
    return max(MIN_CONFIDENCE, round(1.0 - step * CONFIDENCE_DECAY, 10))


def generate_forecast(series: Sequence[TimeSeriesDataPoint], periods: int = 3) -> List[TimeSeriesDataPoint]:
    if len(series) < MIN_POINTS:
        return []

    n = len(series)
    slope, intercept = fit_line([point.value for point in series])
    last_date = series[-1].date

    forecast: List[TimeSeriesDataPoint] = []
    for step in range(1, max(0, int(periods)) + 1):
        projected = slope * (n + step - 1) + intercept
        forecast.append(
            TimeSeriesDataPoint(
                date=add_months(last_date, step),
                value=max(0.0, round1(projected)),
                metadata=ForecastMetadata(confidence=forecast_confidence(step)),
                category="forecast",
            )
        )
    return forecast
