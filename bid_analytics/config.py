import os


def _bool_env(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _int_env(name: str, default: int) -> int:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


class Config:
    BASE_DIR = os.path.dirname(os.path.dirname(__file__))
    DATABASE_URL = os.environ.get("DATABASE_URL")
    DATABASE_READ_URL = os.environ.get("DATABASE_READ_URL")
    DB_PATH = DATABASE_URL or os.path.join(BASE_DIR, "database", "bid_analytics.db")

    LOG_JSON = _bool_env("LOG_JSON", True)
    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    ANALYTICS_TREND_PERIODS = _int_env("ANALYTICS_TREND_PERIODS", 6)
    ANALYTICS_FORECAST_PERIODS = _int_env("ANALYTICS_FORECAST_PERIODS", 3)
    ANALYTICS_TIME_BUCKET = os.environ.get("ANALYTICS_TIME_BUCKET", "week")
    ANALYTICS_VENDOR_MIN_REQUESTS = _int_env("ANALYTICS_VENDOR_MIN_REQUESTS", 2)
    ANALYTICS_BOTTLENECK_RATIO = _float_env("ANALYTICS_BOTTLENECK_RATIO", 1.5)
    ANALYTICS_HIGH_SEVERITY_RATIO = _float_env("ANALYTICS_HIGH_SEVERITY_RATIO", 2.0)
    ANALYTICS_SCORE_WEIGHTS = os.environ.get("ANALYTICS_SCORE_WEIGHTS", "0.4,0.3,0.3")

    def __init__(self):
        env = os.environ.get("FLASK_ENV", "development").lower()
        if env == "production" and not self.DATABASE_URL:
            raise RuntimeError("DATABASE_URL must be set in production.")
