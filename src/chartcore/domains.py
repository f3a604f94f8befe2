"""Domain Calculation.

Derives x/y scale domains from every series in play, with the padding
rules charts apply before handing the domain to a scale: proportional
y padding, zero inclusion for bars, a positive floor for log axes and
high/low extents for OHLC data.
"""

import logging
from numbers import Real
from typing import Optional, Sequence

from src.chartcore.config import DomainConfig, DEFAULT_DOMAIN_CONFIG, DEFAULT_OHLC_FIELDS
from src.chartcore.models import Domain, Series
from src.chartcore.stacking import SeriesStacker
from src.chartcore.timeutils import is_temporal, to_millis

logger = logging.getLogger(__name__)


def _numeric(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and value == value


class DomainCalculator:
    """Computes padded domains for a set of series."""

    def __init__(self, config: Optional[DomainConfig] = None) -> None:
        self.config = config or DEFAULT_DOMAIN_CONFIG

    def categories(self, series_list: Sequence[Series]) -> Optional[list]:
        """Distinct x values in first-seen order when the x axis is categorical.

        Returns None when every x value is an instant or a number.
        """
        raw = [x for s in series_list for x in s.x_values() if x is not None]
        if not raw or all(is_temporal(x) or _numeric(x) for x in raw):
            return None
        return list(dict.fromkeys(raw))

    def x_extent(self, series_list: Sequence[Series]) -> Optional[tuple]:
        """Min/max x over all series.

        Instants come back as epoch milliseconds. Non-numeric (category)
        x values span ``(-0.5, n - 0.5)`` so bands centre on integers.
        """
        categories = self.categories(series_list)
        if categories is not None:
            return (-0.5, len(categories) - 0.5)
        raw = [x for s in series_list for x in s.x_values() if x is not None]
        if not raw:
            return None
        millis = [to_millis(x) for x in raw]
        return (min(millis), max(millis))

    def y_values(
        self,
        series_list: Sequence[Series],
        stacked: bool = False,
        ohlc: bool = False,
        ohlc_fields: Optional[dict] = None,
    ) -> list[float]:
        if stacked and len(series_list) > 1:
            layers = SeriesStacker().stack(series_list)
            return [v for layer in layers for v in layer.cumulative_values()]
        if ohlc:
            fields = {**DEFAULT_OHLC_FIELDS, **(ohlc_fields or {})}
            return [
                float(p[f])
                for s in series_list
                for p in s.points
                for f in (fields["low"], fields["high"])
                if _numeric(p.get(f))
            ]
        return [float(v) for s in series_list for v in s.y_values() if _numeric(v)]

    def compute(
        self,
        series_list: Sequence[Series],
        include_zero: bool = False,
        log: bool = False,
        stacked: bool = False,
        ohlc: bool = False,
        ohlc_fields: Optional[dict] = None,
    ) -> Domain:
        """Padded x/y domains for all series.

        Args:
            series_list: Every series drawn on the shared axes.
            include_zero: Pull the y minimum down to 0 (bar charts).
            log: Keep the y domain strictly positive for a log scale.
            stacked: Use stacked cumulative values for the y extent.
            ohlc: Use low/high fields for the y extent.
            ohlc_fields: Field-name overrides for OHLC data.

        Returns:
            Domain with x and y pairs.
        """
        cfg = self.config
        x = self.x_extent(series_list) or cfg.empty_domain
        ys = self.y_values(series_list, stacked=stacked, ohlc=ohlc, ohlc_fields=ohlc_fields)

        if not ys:
            y = cfg.empty_log_domain if log else cfg.empty_domain
            return Domain(x=tuple(x), y=tuple(y))

        y_min, y_max = min(ys), max(ys)
        if include_zero:
            y_min = min(0.0, y_min)

        padding = (y_max - y_min) * (cfg.ohlc_padding if ohlc else cfg.padding)

        if log:
            y_min = max(y_min, cfg.log_floor)
            y = (y_min, max(y_max + padding, y_min))
        else:
            y = (y_min - padding, y_max + padding)

        logger.debug("Computed domain x=%s y=%s over %d series", x, y, len(series_list))
        return Domain(x=tuple(x), y=y)
