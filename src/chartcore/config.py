"""Configuration for the charting core."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class ScaleKind(Enum):
    """Scale variants."""
    LINEAR = "linear"
    TIME = "time"
    LOG = "log"


class CurveMode(Enum):
    """Interpolation modes for curve building."""
    LINEAR = "linear"
    STEP = "step"
    CARDINAL = "cardinal"
    MONOTONE = "monotone"


class SegmentKind(Enum):
    """Drawable segment types."""
    MOVE = "move"
    LINE = "line"
    CUBIC = "cubic"
    CLOSE = "close"


class IndicatorType(Enum):
    """Supported technical indicators."""
    SMA = "sma"
    EMA = "ema"
    BOLLINGER = "bollinger"
    RSI = "rsi"
    MACD = "macd"


class TimeInterval(Enum):
    """Calendar granularities for time ticks."""
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class ErrorCode(str, Enum):
    """Machine-readable error codes."""
    INVALID_DOMAIN = "INVALID_DOMAIN"
    INVALID_PARAMETER = "INVALID_PARAMETER"
    INSUFFICIENT_DATA = "INSUFFICIENT_DATA"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# Time unit lengths in milliseconds
MS_PER_SECOND = 1000
MS_PER_MINUTE = 60 * MS_PER_SECOND
MS_PER_HOUR = 60 * MS_PER_MINUTE
MS_PER_DAY = 24 * MS_PER_HOUR
MS_PER_WEEK = 7 * MS_PER_DAY
MS_PER_MONTH = 30 * MS_PER_DAY  # nominal, only used to size the step
MS_PER_YEAR = 365 * MS_PER_DAY  # nominal, only used to size the step

# Upper bound (exclusive) of the domain range for each granularity
TIME_INTERVAL_THRESHOLDS: list[tuple[int, TimeInterval]] = [
    (MS_PER_HOUR, TimeInterval.MINUTE),
    (MS_PER_DAY, TimeInterval.HOUR),
    (MS_PER_WEEK, TimeInterval.DAY),
    (MS_PER_MONTH, TimeInterval.WEEK),
    (MS_PER_YEAR, TimeInterval.MONTH),
]

TIME_INTERVAL_MS: dict[TimeInterval, int] = {
    TimeInterval.MINUTE: MS_PER_MINUTE,
    TimeInterval.HOUR: MS_PER_HOUR,
    TimeInterval.DAY: MS_PER_DAY,
    TimeInterval.WEEK: MS_PER_WEEK,
    TimeInterval.MONTH: MS_PER_MONTH,
    TimeInterval.YEAR: MS_PER_YEAR,
}

TIME_TICK_FORMATS: dict[TimeInterval, str] = {
    TimeInterval.MINUTE: "%H:%M",
    TimeInterval.HOUR: "%H:%M",
    TimeInterval.DAY: "%b %d",
    TimeInterval.WEEK: "%b %d",
    TimeInterval.MONTH: "%b %Y",
    TimeInterval.YEAR: "%Y",
}


@dataclass
class ScaleConfig:
    """Scale configuration."""

    kind: ScaleKind = ScaleKind.LINEAR
    domain: Optional[tuple] = None  # (0, 1), or (1, 10) for log scales
    range: tuple = (0.0, 1.0)
    base: float = 10.0  # log scales only


@dataclass
class TickConfig:
    """Axis tick configuration."""

    count: int = 5
    max_fraction_digits: int = 2
    week_start: int = 6  # datetime.weekday() numbering, 6 = Sunday
    time_formats: dict = field(default_factory=lambda: dict(TIME_TICK_FORMATS))


@dataclass
class CurveConfig:
    """Curve interpolation configuration."""

    mode: CurveMode = CurveMode.LINEAR
    tension: float = 0.5
    samples_per_segment: int = 16


@dataclass
class IndicatorConfig:
    """A single indicator request."""

    indicator: IndicatorType = IndicatorType.SMA
    params: dict = field(default_factory=dict)
    value_field: Optional[str] = None  # defaults to the series' y field
    x_field: Optional[str] = None


@dataclass
class StackConfig:
    """Stacked-series configuration."""

    enabled: bool = True
    missing_value: float = 0.0


@dataclass
class DomainConfig:
    """Domain padding rules."""

    padding: float = 0.1
    ohlc_padding: float = 0.05
    log_floor: float = 0.01
    empty_domain: tuple = (0.0, 1.0)
    empty_log_domain: tuple = (0.1, 1.0)


@dataclass
class ChartCoreConfig:
    """Top-level configuration."""

    x_scale: ScaleConfig = field(default_factory=ScaleConfig)
    y_scale: ScaleConfig = field(default_factory=ScaleConfig)
    ticks: TickConfig = field(default_factory=TickConfig)
    curve: CurveConfig = field(default_factory=CurveConfig)
    stack: StackConfig = field(default_factory=StackConfig)
    domain: DomainConfig = field(default_factory=DomainConfig)
    indicators: list[IndicatorConfig] = field(default_factory=list)
    x_field: str = "x"
    y_field: str = "y"
    ohlc_fields: Optional[dict] = None  # set for candlestick/OHLC data
    stacked: bool = False
    include_zero: bool = False  # bar charts


DEFAULT_SCALE_CONFIG = ScaleConfig()
DEFAULT_TICK_CONFIG = TickConfig()
DEFAULT_CURVE_CONFIG = CurveConfig()
DEFAULT_STACK_CONFIG = StackConfig()
DEFAULT_DOMAIN_CONFIG = DomainConfig()
DEFAULT_CONFIG = ChartCoreConfig()

DEFAULT_OHLC_FIELDS = {
    "open": "open",
    "high": "high",
    "low": "low",
    "close": "close",
}


# Indicator definitions
INDICATOR_DEFINITIONS: dict[IndicatorType, dict] = {
    IndicatorType.SMA: {
        "name": "Simple Moving Average",
        "params": {"period": 14},
        "fields": ["y"],
        "overlay": True,
    },
    IndicatorType.EMA: {
        "name": "Exponential Moving Average",
        "params": {"period": 14},
        "fields": ["y"],
        "overlay": True,
    },
    IndicatorType.BOLLINGER: {
        "name": "Bollinger Bands",
        "params": {"period": 20, "deviations": 2.0},
        "fields": ["middle", "upper", "lower"],
        "overlay": True,
    },
    IndicatorType.RSI: {
        "name": "Relative Strength Index",
        "params": {"period": 14},
        "fields": ["rsi"],
        "overlay": False,
    },
    IndicatorType.MACD: {
        "name": "MACD",
        "params": {"fast_period": 12, "slow_period": 26, "signal_period": 9},
        "fields": ["macd", "signal", "histogram"],
        "overlay": False,
    },
}
