from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Dict, Sequence


@dataclass(frozen=True)
class SummaryStatistics:
    count: int = 0
    min: float = 0.0
    max: float = 0.0
    mean: float = 0.0
    median: float = 0.0
    p25: float = 0.0
    p75: float = 0.0
    p90: float = 0.0
    std_dev: float = 0.0

    def to_dict(self) -> Dict[str, float]:
        payload = asdict(self)
        payload["stdDev"] = payload.pop("std_dev")
        return payload


def round1(value: float) -> float:
    return round(float(value), 1)


def rate(part: int | float, total: int | float) -> float:
    if not total:
        return 0.0
    return float(part) / float(total) * 100.0


def percentile(values: Sequence[float], p: float) -> float:
    if not values:
        return 0.0

    ordered = sorted(float(value) for value in values)
    index = (float(p) / 100.0) * (len(ordered) - 1)
    lower_index = math.floor(index)
    if index == lower_index:
        return ordered[int(index)]

    lower = ordered[lower_index]
    upper = ordered[math.ceil(index)]
    return lower + (index - lower_index) * (upper - lower)


def summary_statistics(values: Sequence[float]) -> SummaryStatistics:
    if not values:
        return SummaryStatistics()

    samples = [float(value) for value in values]
    count = len(samples)
    mean = sum(samples) / count
    # population variance, divides by n
    variance = sum((value - mean) ** 2 for value in samples) / count

    return SummaryStatistics(
        count=count,
        min=min(samples),
        max=max(samples),
        mean=round(mean, 2),
        median=percentile(samples, 50),
        p25=percentile(samples, 25),
        p75=percentile(samples, 75),
        p90=percentile(samples, 90),
        std_dev=round(math.sqrt(variance), 2),
    )
