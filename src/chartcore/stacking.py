"""Series Stacking.

Accumulates several series sharing an x domain into cumulative layers,
so each layer's top edge is the running sum of all layers beneath it.
"""

import logging
import math
from numbers import Real
from typing import Any, Optional, Sequence

from src.chartcore.config import StackConfig, DEFAULT_STACK_CONFIG
from src.chartcore.models import Series, StackedPoint, StackedSeries
from src.chartcore.timeutils import x_key
from src.logging_config.performance import PerformanceTimer

logger = logging.getLogger(__name__)


def _own_value(point, field: str) -> Optional[float]:
    raw = point.get(field)
    if isinstance(raw, bool) or not isinstance(raw, Real):
        return None
    value = float(raw)
    return value if math.isfinite(value) else None


def _ordered_keys(lookups: list[dict]) -> list:
    """Union of x keys; numeric keys sorted, anything else in first-seen order."""
    seen: dict = {}
    for lookup in lookups:
        for key in lookup:
            seen.setdefault(key, None)
    keys = list(seen)
    if all(isinstance(k, Real) and not isinstance(k, bool) for k in keys):
        keys.sort()
    return keys


class SeriesStacker:
    """Computes stacked (cumulative) values across series."""

    def __init__(self, config: Optional[StackConfig] = None) -> None:
        self.config = config or DEFAULT_STACK_CONFIG

    def _lookup(self, series: Series) -> dict:
        lookup: dict = {}
        for point in series.points:
            x = point.get(series.x_field)
            if x is None:
                continue
            value = _own_value(point, series.y_field)
            lookup[x_key(x)] = self.config.missing_value if value is None else value
        return lookup

    def stack(self, series_list: Sequence[Series]) -> list[StackedSeries]:
        """Stack series in the given order; the first one is the base.

        Missing values at an x key count as ``missing_value`` (0), so
        every layer above the base is defined on the union of keys.

        Returns:
            One StackedSeries per input series, in input order.
        """
        if not series_list:
            return []

        with PerformanceTimer("stack", logger_name=__name__):
            lookups = [self._lookup(s) for s in series_list]

            if not self.config.enabled:
                return [
                    StackedSeries(
                        key=s.key,
                        points=[StackedPoint(k, v, v, 0.0) for k, v in lookup.items()],
                    )
                    for s, lookup in zip(series_list, lookups)
                ]

            base = series_list[0]
            layers = [
                StackedSeries(
                    key=base.key,
                    points=[StackedPoint(k, v, v, 0.0) for k, v in lookups[0].items()],
                )
            ]

            keys = _ordered_keys(lookups)
            missing = self.config.missing_value
            running = {k: lookups[0].get(k, missing) for k in keys}

            for series, lookup in zip(series_list[1:], lookups[1:]):
                points = []
                for k in keys:
                    own = lookup.get(k, missing)
                    below = running[k]
                    running[k] = below + own
                    points.append(StackedPoint(k, running[k], own, below))
                layers.append(StackedSeries(key=series.key, points=points))

        logger.debug("Stacked %d series over %d x keys", len(series_list), len(keys))
        return layers

    def stacked_extent(self, series_list: Sequence[Series]) -> Optional[tuple[float, float]]:
        """(min, max) over every layer's cumulative values, or None if empty."""
        values: list[Any] = []
        for layer in self.stack(series_list):
            values.extend(layer.cumulative_values())
        if not values:
            return None
        return (min(values), max(values))
