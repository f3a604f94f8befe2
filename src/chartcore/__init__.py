"""Charting Core.

Numerical core for financial charts: scales mapping data to output
coordinates, axis tick planning, curve interpolation into drawable
segments, technical indicators and stacked-series accumulation. Drawing
is left to the caller's renderer.

Example:
    from src.chartcore import Series, LinearScale, CurveBuilder, CurveMode, IndicatorEngine

    series = Series("close", [{"x": 0, "y": 10}, {"x": 1, "y": 12}, {"x": 2, "y": 9}])
    sma = IndicatorEngine().calculate("sma", series, {"period": 2})

    x = LinearScale(domain=(0, 2), range=(0, 600))
    y = LinearScale(domain=(8, 13), range=(400, 0))
    pts = [(x.scale(p["x"]), y.scale(p["y"])) for p in series.points]
    segments = CurveBuilder().build(pts, CurveMode.MONOTONE)
"""

from src.chartcore.config import (
    ScaleKind,
    CurveMode,
    SegmentKind,
    IndicatorType,
    TimeInterval,
    ErrorCode,
    ScaleConfig,
    TickConfig,
    CurveConfig,
    IndicatorConfig,
    StackConfig,
    DomainConfig,
    ChartCoreConfig,
    DEFAULT_SCALE_CONFIG,
    DEFAULT_TICK_CONFIG,
    DEFAULT_CURVE_CONFIG,
    DEFAULT_STACK_CONFIG,
    DEFAULT_DOMAIN_CONFIG,
    DEFAULT_CONFIG,
    INDICATOR_DEFINITIONS,
)

from src.chartcore.errors import (
    ChartCoreError,
    InvalidDomainError,
    InvalidParameterError,
    InsufficientDataError,
    require_min_points,
)

from src.chartcore.models import (
    Series,
    Tick,
    CurveSegment,
    IndicatorResult,
    StackedPoint,
    StackedSeries,
    Domain,
    ChartFrame,
)

from src.chartcore.scales import Scale, LinearScale, TimeScale, LogScale, create_scale
from src.chartcore.ticks import TickPlanner, create_nice_domain
from src.chartcore.curves import CurveBuilder
from src.chartcore.indicators import IndicatorEngine, sma, ema, bollinger, rsi, macd
from src.chartcore.stacking import SeriesStacker
from src.chartcore.domains import DomainCalculator
from src.chartcore.pipeline import ChartPipeline

__all__ = [
    # Config
    "ScaleKind",
    "CurveMode",
    "SegmentKind",
    "IndicatorType",
    "TimeInterval",
    "ErrorCode",
    "ScaleConfig",
    "TickConfig",
    "CurveConfig",
    "IndicatorConfig",
    "StackConfig",
    "DomainConfig",
    "ChartCoreConfig",
    "DEFAULT_SCALE_CONFIG",
    "DEFAULT_TICK_CONFIG",
    "DEFAULT_CURVE_CONFIG",
    "DEFAULT_STACK_CONFIG",
    "DEFAULT_DOMAIN_CONFIG",
    "DEFAULT_CONFIG",
    "INDICATOR_DEFINITIONS",
    # Errors
    "ChartCoreError",
    "InvalidDomainError",
    "InvalidParameterError",
    "InsufficientDataError",
    "require_min_points",
    # Models
    "Series",
    "Tick",
    "CurveSegment",
    "IndicatorResult",
    "StackedPoint",
    "StackedSeries",
    "Domain",
    "ChartFrame",
    # Components
    "Scale",
    "LinearScale",
    "TimeScale",
    "LogScale",
    "create_scale",
    "TickPlanner",
    "create_nice_domain",
    "CurveBuilder",
    "IndicatorEngine",
    "sma",
    "ema",
    "bollinger",
    "rsi",
    "macd",
    "SeriesStacker",
    "DomainCalculator",
    "ChartPipeline",
]
