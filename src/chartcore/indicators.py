"""Technical indicators for charting.

Each indicator is a pure function over a list of data points that
returns newly allocated derived points. Warm-up indices produce no
output (the result is shorter than the input), as do windows that
contain a missing or non-numeric value.
"""

import logging
import math
from numbers import Real
from typing import Any, Callable, Mapping, Optional, Sequence, Union

import numpy as np

from src.chartcore.config import IndicatorType, INDICATOR_DEFINITIONS
from src.chartcore.errors import InvalidParameterError
from src.chartcore.models import IndicatorResult, Series
from src.logging_config.performance import log_performance

logger = logging.getLogger(__name__)

Points = Sequence[Mapping[str, Any]]


# ---------------------------------------------------------------------------
# Validation and extraction helpers
# ---------------------------------------------------------------------------

def _check_period(value: Any, name: str = "period") -> int:
    if isinstance(value, bool):
        raise InvalidParameterError(f"{name} must be a positive integer", field=name, value=value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if not isinstance(value, (int, np.integer)) or value <= 0:
        raise InvalidParameterError(f"{name} must be a positive integer", field=name, value=value)
    return int(value)


def _check_deviations(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, Real) or not math.isfinite(value) or value <= 0:
        raise InvalidParameterError("deviations must be positive", field="deviations", value=value)
    return float(value)


def _value(point: Mapping[str, Any], field: str) -> Optional[float]:
    raw = point.get(field)
    if isinstance(raw, bool) or not isinstance(raw, Real):
        return None
    value = float(raw)
    return value if math.isfinite(value) else None


def _values(points: Points, field: str) -> list[Optional[float]]:
    return [_value(p, field) for p in points]


def _as_array(values: list[Optional[float]]) -> np.ndarray:
    return np.array([np.nan if v is None else v for v in values], dtype=float)


def _rolling_moments(values: list[Optional[float]], period: int) -> tuple[np.ndarray, np.ndarray]:
    """Trailing-window mean and population variance from prefix sums.

    Both arrays have one entry per full window (index ``i`` ends at
    ``i + period - 1``) and are NaN where the window contains a gap.
    """
    arr = _as_array(values)
    gaps = np.isnan(arr)
    filled = np.where(gaps, 0.0, arr)

    def window_sums(a: np.ndarray) -> np.ndarray:
        prefix = np.concatenate(([0.0], np.cumsum(a)))
        return prefix[period:] - prefix[:-period]

    means = window_sums(filled) / period
    variances = np.maximum(window_sums(filled * filled) / period - means ** 2, 0.0)
    has_gap = window_sums(gaps.astype(float)) > 0
    means[has_gap] = np.nan
    variances[has_gap] = np.nan
    return means, variances


def _ema_values(values: list[Optional[float]], period: int) -> list[Optional[float]]:
    """EMA aligned to ``values``; None until seeded.

    Seeded with the SMA of the first ``period`` consecutive values,
    re-seeded the same way after a missing value.
    """
    k = 2 / (period + 1)
    out: list[Optional[float]] = [None] * len(values)
    ema: Optional[float] = None
    run = 0
    for i, v in enumerate(values):
        if v is None:
            ema = None
            run = 0
            continue
        run += 1
        if ema is None:
            if run >= period:
                ema = sum(values[i - period + 1:i + 1]) / period
        else:
            ema = (v - ema) * k + ema
        out[i] = ema
    return out


# ---------------------------------------------------------------------------
# Indicators
# ---------------------------------------------------------------------------

def sma(points: Points, period: int = 14, value_field: str = "y", x_field: str = "x") -> list[dict]:
    """Simple moving average of the trailing ``period`` values."""
    period = _check_period(period)
    if len(points) < period:
        return []
    values = _values(points, value_field)
    means, _ = _rolling_moments(values, period)

    result = []
    for offset, mean in enumerate(means):
        if np.isnan(mean):
            continue
        i = offset + period - 1
        result.append({
            x_field: points[i].get(x_field),
            value_field: float(mean),
            "original": values[i],
        })
    return result


def ema(points: Points, period: int = 14, value_field: str = "y", x_field: str = "x") -> list[dict]:
    """Exponential moving average, k = 2 / (period + 1), seeded with the SMA."""
    period = _check_period(period)
    values = _values(points, value_field)
    return [
        {x_field: points[i].get(x_field), value_field: e, "original": values[i]}
        for i, e in enumerate(_ema_values(values, period))
        if e is not None
    ]


def bollinger(
    points: Points,
    period: int = 20,
    deviations: float = 2.0,
    value_field: str = "y",
    x_field: str = "x",
) -> list[dict]:
    """Bollinger Bands: SMA middle band +/- population stddev multiples."""
    period = _check_period(period)
    deviations = _check_deviations(deviations)
    if len(points) < period:
        return []
    values = _values(points, value_field)
    means, variances = _rolling_moments(values, period)
    stds = np.sqrt(variances)

    result = []
    for offset, (mean, std) in enumerate(zip(means, stds)):
        if np.isnan(mean):
            continue
        i = offset + period - 1
        mean, std = float(mean), float(std)
        result.append({
            x_field: points[i].get(x_field),
            "middle": mean,
            "upper": mean + deviations * std,
            "lower": mean - deviations * std,
            "original": values[i],
        })
    return result


def _rsi_from(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    return 100 - 100 / (1 + avg_gain / avg_loss)


def rsi(points: Points, period: int = 14, value_field: str = "y", x_field: str = "x") -> list[dict]:
    """Relative Strength Index with Wilder smoothing."""
    period = _check_period(period)
    values = _values(points, value_field)

    result = []
    gains = losses = 0.0
    seeded = 0
    avg_gain: Optional[float] = None
    avg_loss: Optional[float] = None

    for i in range(1, len(values)):
        current, previous = values[i], values[i - 1]
        if current is None or previous is None:
            # gap: start a fresh seeding window
            gains = losses = 0.0
            seeded = 0
            avg_gain = avg_loss = None
            continue

        change = current - previous
        gain = change if change >= 0 else 0.0
        loss = -change if change < 0 else 0.0

        if avg_gain is None:
            gains += gain
            losses += loss
            seeded += 1
            if seeded < period:
                continue
            avg_gain = gains / period
            avg_loss = losses / period
        else:
            avg_gain = (avg_gain * (period - 1) + gain) / period
            avg_loss = (avg_loss * (period - 1) + loss) / period

        result.append({
            x_field: points[i].get(x_field),
            "rsi": _rsi_from(avg_gain, avg_loss),
            "avg_gain": avg_gain,
            "avg_loss": avg_loss,
            "original": current,
        })
    return result


def macd(
    points: Points,
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
    value_field: str = "y",
    x_field: str = "x",
) -> list[dict]:
    """MACD line, signal line and histogram."""
    fast_period = _check_period(fast_period, "fast_period")
    slow_period = _check_period(slow_period, "slow_period")
    signal_period = _check_period(signal_period, "signal_period")

    values = _values(points, value_field)
    fast = _ema_values(values, fast_period)
    slow = _ema_values(values, slow_period)
    macd_line = [
        f - s if f is not None and s is not None else None
        for f, s in zip(fast, slow)
    ]
    signal_line = _ema_values(macd_line, signal_period)

    result = []
    for i, (m, s) in enumerate(zip(macd_line, signal_line)):
        if m is None or s is None:
            continue
        result.append({
            x_field: points[i].get(x_field),
            "macd": m,
            "signal": s,
            "histogram": m - s,
            "original": values[i],
        })
    return result


INDICATOR_FUNCTIONS: dict[IndicatorType, Callable[..., list[dict]]] = {
    IndicatorType.SMA: sma,
    IndicatorType.EMA: ema,
    IndicatorType.BOLLINGER: bollinger,
    IndicatorType.RSI: rsi,
    IndicatorType.MACD: macd,
}

_ALIASES = {
    "bb": IndicatorType.BOLLINGER,
    "bbands": IndicatorType.BOLLINGER,
}


def resolve_indicator(indicator: Union[IndicatorType, str]) -> IndicatorType:
    if isinstance(indicator, IndicatorType):
        return indicator
    name = str(indicator).strip().lower()
    if name in _ALIASES:
        return _ALIASES[name]
    try:
        return IndicatorType(name)
    except ValueError:
        raise InvalidParameterError(f"Unknown indicator: {indicator}", field="indicator", value=indicator)


class IndicatorEngine:
    """Calculates technical indicators."""

    def __init__(self):
        self._indicators = dict(INDICATOR_DEFINITIONS)

    def get_available_indicators(self) -> list[dict]:
        """Get list of available indicators."""
        return [
            {
                "id": key.value,
                "name": val["name"],
                "params": dict(val["params"]),
                "fields": list(val["fields"]),
                "overlay": val["overlay"],
            }
            for key, val in self._indicators.items()
        ]

    @log_performance(threshold_ms=250)
    def calculate(
        self,
        indicator: Union[IndicatorType, str],
        data: Union[Series, Points],
        params: Optional[dict] = None,
        value_field: Optional[str] = None,
        x_field: Optional[str] = None,
    ) -> IndicatorResult:
        """Calculate an indicator.

        Args:
            indicator: Indicator type or its name ("sma", "bollinger", ...).
            data: A Series or a plain list of points.
            params: Overrides for the definition's default parameters.
            value_field: Field to window over. Defaults to the series'
                y field, or "y" for plain point lists.
            x_field: Field copied onto each output point.

        Returns:
            IndicatorResult wrapping the derived points.
        """
        kind = resolve_indicator(indicator)
        definition = self._indicators[kind]

        if isinstance(data, Series):
            points = data.points
            value_field = value_field or data.y_field
            x_field = x_field or data.x_field
        else:
            points = data
        value_field = value_field or "y"
        x_field = x_field or "x"

        merged_params = {**definition["params"], **(params or {})}
        unknown = set(merged_params) - set(definition["params"])
        if unknown:
            raise InvalidParameterError(
                f"Unknown parameter(s) for {kind.value}: {', '.join(sorted(unknown))}",
                field=sorted(unknown)[0],
            )

        derived = INDICATOR_FUNCTIONS[kind](
            points, value_field=value_field, x_field=x_field, **merged_params
        )
        fields = [value_field] if kind in (IndicatorType.SMA, IndicatorType.EMA) else list(definition["fields"])

        logger.debug(
            "Computed %s over %d points -> %d points", kind.value, len(points), len(derived),
        )
        return IndicatorResult(
            name=definition["name"],
            indicator=kind,
            points=derived,
            fields=fields,
            params=merged_params,
            is_overlay=definition["overlay"],
            x_field=x_field,
        )
