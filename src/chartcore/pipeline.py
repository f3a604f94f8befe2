"""Chart Pipeline.

Runs one computation pass in data-flow order: indicators and stacking
derive series, the domain is taken over every series in play, scales
and ticks follow from the domain, and each series is mapped through the
scales into curve segments.

Example:
    config = ChartCoreConfig(
        x_scale=ScaleConfig(kind=ScaleKind.TIME),
        curve=CurveConfig(mode=CurveMode.MONOTONE),
        indicators=[IndicatorConfig(IndicatorType.SMA, {"period": 20})],
    )
    frame = ChartPipeline(config).compute([series], width=800, height=400)
    frame.curves["close"]   # segments for the renderer
"""

import logging
from dataclasses import replace
from numbers import Real
from typing import Optional, Sequence

from src.chartcore.config import ChartCoreConfig, ScaleKind, DEFAULT_CONFIG
from src.chartcore.curves import CurveBuilder
from src.chartcore.domains import DomainCalculator
from src.chartcore.indicators import IndicatorEngine
from src.chartcore.models import ChartFrame, Point, Series
from src.chartcore.scales import Scale, create_scale
from src.chartcore.stacking import SeriesStacker
from src.chartcore.ticks import TickPlanner
from src.chartcore.timeutils import is_temporal

logger = logging.getLogger(__name__)


def _plottable(value) -> bool:
    if is_temporal(value):
        return True
    return isinstance(value, Real) and not isinstance(value, bool) and value == value


def _y_or_axis(y_scale: Scale, value: float) -> float:
    """Scaled y, or the axis bottom for values a log axis cannot show."""
    if y_scale.kind == ScaleKind.LOG and value <= 0:
        return y_scale.range[0]
    return y_scale.scale(value)


class ChartPipeline:
    """Computes scales, ticks, curves and derived series for one chart."""

    def __init__(self, config: Optional[ChartCoreConfig] = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self.indicators = IndicatorEngine()
        self.stacker = SeriesStacker(self.config.stack)
        self.domains = DomainCalculator(self.config.domain)
        self.ticks = TickPlanner(self.config.ticks)
        self.curves = CurveBuilder(self.config.curve)

    def _as_series(self, data) -> list[Series]:
        if isinstance(data, dict):
            return [
                Series(key=key, points=points, x_field=self.config.x_field, y_field=self.config.y_field)
                for key, points in data.items()
            ]
        return list(data)

    def project(
        self,
        series: Series,
        x_scale: Scale,
        y_scale: Scale,
        positions: Optional[dict] = None,
    ) -> list[Point]:
        """Map a series through the scales, skipping unplottable points.

        ``positions`` maps category x values to their band index. Points
        with y <= 0 are omitted on a log y axis.
        """
        log = y_scale.kind == ScaleKind.LOG
        points = []
        for p in series.points:
            x, y = p.get(series.x_field), p.get(series.y_field)
            if positions is not None:
                x = positions.get(x)
            if not (_plottable(x) and _plottable(y)):
                continue
            if log and isinstance(y, Real) and y <= 0:
                continue
            points.append((x_scale.scale(x), y_scale.scale(y)))
        return points

    def compute(self, data, width: float, height: float) -> ChartFrame:
        """Run a full pass.

        Args:
            data: Series list, or a mapping of key -> point list using the
                configured x/y fields. The first series is the primary one
                (indicator input and stack base).
            width: Output width; the x range is (0, width).
            height: Output height; the y range is (height, 0).

        Returns:
            ChartFrame for the renderer.
        """
        cfg = self.config
        series_list = self._as_series(data)

        results = []
        if series_list:
            primary = series_list[0]
            for ind in cfg.indicators:
                results.append(
                    self.indicators.calculate(
                        ind.indicator, primary, ind.params,
                        value_field=ind.value_field, x_field=ind.x_field,
                    )
                )

        stacked = []
        drawn = list(series_list)
        if cfg.stacked and len(series_list) > 1:
            stacked = self.stacker.stack(series_list)
            drawn = [
                layer.to_series(s.x_field, s.y_field)
                for layer, s in zip(stacked, series_list)
            ]

        for result in results:
            if result.is_overlay:
                drawn.extend(result.as_series(f) for f in result.fields)

        log = cfg.y_scale.kind == ScaleKind.LOG
        domain = self.domains.compute(
            drawn,
            include_zero=cfg.include_zero,
            log=log,
            ohlc=cfg.ohlc_fields is not None,
            ohlc_fields=cfg.ohlc_fields,
        )

        x_scale = create_scale(replace(cfg.x_scale, domain=domain.x, range=(0.0, float(width))))
        y_scale = create_scale(replace(cfg.y_scale, domain=domain.y, range=(float(height), 0.0)))

        frame = ChartFrame(
            domain=domain,
            x_scale=x_scale,
            y_scale=y_scale,
            x_ticks=self.ticks.ticks_for_scale(x_scale),
            y_ticks=self.ticks.ticks_for_scale(y_scale),
            series=drawn,
            indicators=results,
            stacked=stacked,
        )

        categories = self.domains.categories(drawn)
        positions = {c: i for i, c in enumerate(categories)} if categories is not None else None

        for series in drawn:
            frame.curves[series.key] = self.curves.build(self.project(series, x_scale, y_scale, positions))

        for layer in stacked:
            top = []
            baseline = []
            for p in layer.points:
                x = positions.get(p.x_key) if positions is not None else p.x_key
                if x is None:
                    continue
                px = x_scale.scale(x)
                top.append((px, _y_or_axis(y_scale, p.cumulative_value)))
                baseline.append((px, _y_or_axis(y_scale, p.baseline_value)))
            frame.areas[layer.key] = self.curves.build_area(top, baseline)

        logger.debug(
            "Computed frame: %d series, %d indicators, %d stacked layers",
            len(drawn), len(results), len(stacked),
        )
        return frame
