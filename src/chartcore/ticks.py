"""Tick Planning.

Chooses axis tick positions: "nice" numeric domains snapped to the
{1, 2, 5} x 10^k ladder, calendar-aligned time ticks, and powers of the
base for log axes. None of the planners raise; degenerate domains still
yield at least one tick.
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Optional

from dateutil.relativedelta import relativedelta

from src.chartcore.config import (
    ScaleKind,
    TickConfig,
    TimeInterval,
    TIME_INTERVAL_MS,
    TIME_INTERVAL_THRESHOLDS,
    DEFAULT_TICK_CONFIG,
)
from src.chartcore.models import Tick
from src.chartcore.timeutils import from_millis, to_millis

logger = logging.getLogger(__name__)


def _step_decimals(step: float) -> int:
    if step <= 0 or not math.isfinite(step):
        return 0
    return max(0, -int(math.floor(math.log10(step))))


def create_nice_domain(min_value: float, max_value: float, count: int = 5) -> tuple[float, float]:
    """Widen [min, max] to boundaries on the {1, 2, 5} x 10^k ladder."""
    if min_value == max_value:
        return (min_value - 1, max_value + 1)
    if not (math.isfinite(min_value) and math.isfinite(max_value)):
        return (min_value, max_value)
    lo, hi = min(min_value, max_value), max(min_value, max_value)
    count = max(1, int(count))

    span = hi - lo
    unit = span / count
    # spans past float max (or below the smallest positive) have no ladder
    if not math.isfinite(span) or unit <= 0:
        return (lo, hi)
    step = 10.0 ** math.floor(math.log10(unit))
    if step <= 0:
        return (lo, hi)
    ratio = span / (count * step)
    if ratio >= 5:
        step *= 5
    elif ratio >= 2:
        step *= 2

    digits = _step_decimals(step)
    nice_min = round(math.floor(lo / step) * step, digits)
    nice_max = round(math.ceil(hi / step) * step, digits)
    if not (math.isfinite(nice_min) and math.isfinite(nice_max)):
        return (lo, hi)
    return (nice_min, nice_max)


class TickPlanner:
    """Plans axis ticks for numeric, time and log domains."""

    def __init__(self, config: Optional[TickConfig] = None) -> None:
        self.config = config or DEFAULT_TICK_CONFIG

    # ------------------------------------------------------------------
    # Numeric
    # ------------------------------------------------------------------

    def nice_domain(self, min_value: float, max_value: float, count: Optional[int] = None) -> tuple[float, float]:
        return create_nice_domain(min_value, max_value, count or self.config.count)

    def numeric_ticks(
        self,
        min_value: float,
        max_value: float,
        count: Optional[int] = None,
    ) -> list[Tick]:
        """Evenly spaced ticks over the nice domain, count + 1 of them."""
        count = max(1, int(count or self.config.count))
        nice_min, nice_max = create_nice_domain(min_value, max_value, count)
        # interpolated: nice_max - nice_min may overflow near float max
        step = nice_max / count - nice_min / count
        digits = _step_decimals(step) + 1

        ticks = []
        for i in range(count + 1):
            frac = i / count
            value = nice_min * (1 - frac) + nice_max * frac
            if math.isfinite(value):
                value = round(value, digits)
            ticks.append(Tick(value=value, label=self.format_number(value)))
        return ticks

    def format_number(self, value: float) -> str:
        if not math.isfinite(value):
            return str(value)
        text = f"{value:,.{self.config.max_fraction_digits}f}"
        if "." in text:
            text = text.rstrip("0").rstrip(".")
        if text in ("-0", ""):
            text = "0"
        return text

    # ------------------------------------------------------------------
    # Time
    # ------------------------------------------------------------------

    @staticmethod
    def choose_interval(range_ms: float) -> TimeInterval:
        for threshold, interval in TIME_INTERVAL_THRESHOLDS:
            if range_ms < threshold:
                return interval
        return TimeInterval.YEAR

    def align(self, instant: datetime, interval: TimeInterval) -> datetime:
        """Snap an instant down to the natural boundary of its granularity."""
        if interval == TimeInterval.MINUTE:
            return instant.replace(second=0, microsecond=0)
        if interval == TimeInterval.HOUR:
            return instant.replace(minute=0, second=0, microsecond=0)

        midnight = instant.replace(hour=0, minute=0, second=0, microsecond=0)
        if interval == TimeInterval.DAY:
            return midnight
        if interval == TimeInterval.WEEK:
            back = (midnight.weekday() - self.config.week_start) % 7
            return midnight - timedelta(days=back)
        if interval == TimeInterval.MONTH:
            return midnight.replace(day=1)
        return midnight.replace(month=1, day=1)

    @staticmethod
    def _offset(interval: TimeInterval, units: int):
        if interval == TimeInterval.MINUTE:
            return timedelta(minutes=units)
        if interval == TimeInterval.HOUR:
            return timedelta(hours=units)
        if interval == TimeInterval.DAY:
            return relativedelta(days=units)
        if interval == TimeInterval.WEEK:
            return relativedelta(weeks=units)
        if interval == TimeInterval.MONTH:
            return relativedelta(months=units)
        return relativedelta(years=units)

    def time_ticks(self, min_value: Any, max_value: Any, count: Optional[int] = None) -> list[Tick]:
        """Calendar-aligned ticks between two instants (or epoch millis).

        The first tick sits on the boundary at or before the minimum;
        ticks advance by whole calendar units until they pass the maximum.
        """
        count = max(1, int(count or self.config.count))
        lo, hi = to_millis(min_value), to_millis(max_value)
        if hi < lo:
            lo, hi = hi, lo
        span = hi - lo

        interval = self.choose_interval(span)
        # half-up rounding, not banker's
        step = max(1, int(math.floor(span / (count * TIME_INTERVAL_MS[interval]) + 0.5)))
        start = self.align(from_millis(lo), interval)
        end = from_millis(hi)
        fmt = self.config.time_formats.get(interval, "%Y-%m-%d %H:%M")

        ticks = []
        i = 0
        current = start
        while current <= end:
            ticks.append(Tick(value=current, label=current.strftime(fmt), interval=interval))
            i += 1
            # offset from the aligned start each time so month ends never drift
            current = start + self._offset(interval, step * i)

        logger.debug(
            "Planned %d %s ticks (step=%d)", len(ticks), interval.value, step,
        )
        return ticks

    # ------------------------------------------------------------------
    # Log
    # ------------------------------------------------------------------

    def log_ticks(self, min_value: float, max_value: float, base: float = 10.0) -> list[Tick]:
        """Powers of ``base`` inside the domain; falls back to the bounds."""
        lo, hi = min(min_value, max_value), max(min_value, max_value)
        if lo <= 0 or base <= 0 or base == 1:
            return self.numeric_ticks(lo, hi)

        log_base = math.log(base)
        first = math.floor(math.log(lo) / log_base)
        last = math.ceil(math.log(hi) / log_base)
        ticks = []
        for exponent in range(first, last + 1):
            value = float(base ** exponent)
            if lo * (1 - 1e-12) <= value <= hi * (1 + 1e-12):
                ticks.append(Tick(value=value, label=self.format_number(value)))
        if not ticks:
            ticks.append(Tick(value=lo, label=self.format_number(lo)))
        return ticks

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def ticks_for_scale(self, scale, count: Optional[int] = None) -> list[Tick]:
        """Pick the planner matching the scale kind."""
        d0, d1 = scale.domain
        if scale.kind == ScaleKind.TIME:
            return self.time_ticks(d0, d1, count)
        if scale.kind == ScaleKind.LOG:
            ticks = self.log_ticks(d0, d1, getattr(scale, "base", 10.0))
            if len(ticks) >= 2:
                return ticks
        return self.numeric_ticks(d0, d1, count)
