from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Tuple


TIME_BUCKETS = ("week", "month")


@dataclass(frozen=True)
class AnalyticsTuning:
    """Business heuristics used by the derivations.

    Defaults are the thresholds and weights the dashboards have always shown.
    """

    vendor_min_requests: int = 2
    bottleneck_ratio: float = 1.5
    high_severity_ratio: float = 2.0
    response_weight: float = 0.4
    speed_weight: float = 0.3
    reliability_weight: float = 0.3
    trend_periods: int = 6
    forecast_periods: int = 3
    time_bucket: str = "week"

    @classmethod
    def from_mapping(cls, config: Mapping[str, Any] | None) -> "AnalyticsTuning":
        source = dict(config or {})
        defaults = cls()
        response_weight, speed_weight, reliability_weight = _parse_weights(
            source.get("ANALYTICS_SCORE_WEIGHTS"),
            (defaults.response_weight, defaults.speed_weight, defaults.reliability_weight),
        )
        bucket = str(source.get("ANALYTICS_TIME_BUCKET") or defaults.time_bucket).strip().lower()
        if bucket not in TIME_BUCKETS:
            bucket = defaults.time_bucket
        return cls(
            vendor_min_requests=_positive_int(source.get("ANALYTICS_VENDOR_MIN_REQUESTS"), defaults.vendor_min_requests),
            bottleneck_ratio=_positive_float(source.get("ANALYTICS_BOTTLENECK_RATIO"), defaults.bottleneck_ratio),
            high_severity_ratio=_positive_float(
                source.get("ANALYTICS_HIGH_SEVERITY_RATIO"),
                defaults.high_severity_ratio,
            ),
            response_weight=response_weight,
            speed_weight=speed_weight,
            reliability_weight=reliability_weight,
            trend_periods=_positive_int(source.get("ANALYTICS_TREND_PERIODS"), defaults.trend_periods),
            forecast_periods=_positive_int(source.get("ANALYTICS_FORECAST_PERIODS"), defaults.forecast_periods),
            time_bucket=bucket,
        )


DEFAULT_TUNING = AnalyticsTuning()


def _positive_int(value: Any, default: int) -> int:
    if value in (None, ""):
        return default
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _positive_float(value: Any, default: float) -> float:
    if value in (None, ""):
        return default
    try:
        parsed = float(value)
    except (TypeError, ValueError):
        return default
    return parsed if parsed > 0 else default


def _parse_weights(value: Any, default: Tuple[float, float, float]) -> Tuple[float, float, float]:
    if value in (None, ""):
        return default
    if isinstance(value, (list, tuple)):
        chunks = list(value)
    else:
        chunks = [chunk.strip() for chunk in str(value).split(",") if chunk.strip()]
    if len(chunks) != 3:
        return default
    try:
        weights = tuple(float(chunk) for chunk in chunks)
    except (TypeError, ValueError):
        return default
    if any(weight < 0 for weight in weights):
        return default
    return weights  # type: ignore[return-value]
