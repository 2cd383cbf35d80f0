from .derivations import (
    analytics_summary,
    completion_trends,
    identify_bottlenecks,
    monthly_trending,
    vendor_performance_scores,
)
from .forecast import generate_forecast
from .intervals import interval_to_hours
from .palette import color_for
from .records import (
    BidCompletionRecord,
    ChartDataPoint,
    GanttSegment,
    StatusDurationRecord,
    TimeSeriesDataPoint,
    VendorResponseRecord,
    parse_timestamp,
)
from .statistics import SummaryStatistics, percentile, summary_statistics
from .transforms import (
    bucket_time_series,
    completion_by_status,
    response_time_distribution,
    status_distribution,
    status_gantt,
    vendor_response_chart,
)
from .tuning import DEFAULT_TUNING, AnalyticsTuning

__all__ = [
    "AnalyticsTuning",
    "BidCompletionRecord",
    "ChartDataPoint",
    "DEFAULT_TUNING",
    "GanttSegment",
    "StatusDurationRecord",
    "SummaryStatistics",
    "TimeSeriesDataPoint",
    "VendorResponseRecord",
    "analytics_summary",
    "bucket_time_series",
    "color_for",
    "completion_by_status",
    "completion_trends",
    "generate_forecast",
    "identify_bottlenecks",
    "interval_to_hours",
    "monthly_trending",
    "parse_timestamp",
    "percentile",
    "response_time_distribution",
    "status_distribution",
    "status_gantt",
    "summary_statistics",
    "vendor_performance_scores",
    "vendor_response_chart",
]
