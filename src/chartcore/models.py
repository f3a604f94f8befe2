"""Data models for the charting core."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional

import pandas as pd

from src.chartcore.config import IndicatorType, SegmentKind, TimeInterval

Point = tuple[float, float]


def _iso(value: Any) -> Any:
    return value.isoformat() if isinstance(value, datetime) else value


def _param_text(value: Any) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass
class Series:
    """An ordered sequence of data points with designated x/y fields.

    Points are caller-owned mappings and are never mutated. Order is
    trusted as given.
    """

    key: str
    points: list[Mapping[str, Any]] = field(default_factory=list)
    x_field: str = "x"
    y_field: str = "y"

    def __len__(self) -> int:
        return len(self.points)

    def x_values(self) -> list:
        return [p.get(self.x_field) for p in self.points]

    def y_values(self) -> list:
        return [p.get(self.y_field) for p in self.points]

    @classmethod
    def from_frame(
        cls,
        df: pd.DataFrame,
        key: str,
        x_field: str = "x",
        y_field: str = "y",
    ) -> "Series":
        """Build a series from a DataFrame.

        When ``x_field`` is not a column, the index supplies the x values
        (the usual layout for OHLCV frames indexed by timestamp).
        """
        frame = df
        if x_field not in frame.columns:
            frame = frame.rename_axis(x_field).reset_index()
        points = []
        for record in frame.to_dict("records"):
            points.append({
                k: (v.to_pydatetime() if isinstance(v, pd.Timestamp) else v)
                for k, v in record.items()
            })
        return cls(key=key, points=points, x_field=x_field, y_field=y_field)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame([dict(p) for p in self.points])

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "x_field": self.x_field,
            "y_field": self.y_field,
            "points": [{k: _iso(v) for k, v in p.items()} for p in self.points],
        }


@dataclass
class Tick:
    """A chosen axis position with its label."""

    value: Any
    label: str
    interval: Optional[TimeInterval] = None

    def to_dict(self) -> dict:
        return {
            "value": _iso(self.value),
            "label": self.label,
            "interval": self.interval.value if self.interval else None,
        }


@dataclass
class CurveSegment:
    """One drawable path command in output-range coordinates."""

    kind: SegmentKind
    end: Optional[Point] = None
    cp1: Optional[Point] = None
    cp2: Optional[Point] = None

    @classmethod
    def move(cls, point: Point) -> "CurveSegment":
        return cls(SegmentKind.MOVE, end=point)

    @classmethod
    def line(cls, point: Point) -> "CurveSegment":
        return cls(SegmentKind.LINE, end=point)

    @classmethod
    def cubic(cls, cp1: Point, cp2: Point, end: Point) -> "CurveSegment":
        return cls(SegmentKind.CUBIC, end=end, cp1=cp1, cp2=cp2)

    @classmethod
    def close(cls) -> "CurveSegment":
        return cls(SegmentKind.CLOSE)

    def to_dict(self) -> dict:
        out: dict = {"kind": self.kind.value}
        if self.end is not None:
            out["end"] = list(self.end)
        if self.kind == SegmentKind.CUBIC:
            out["cp1"] = list(self.cp1)
            out["cp2"] = list(self.cp2)
        return out


@dataclass
class IndicatorResult:
    """Result from indicator calculation."""

    name: str
    indicator: IndicatorType
    points: list[dict]
    fields: list[str]
    params: dict = field(default_factory=dict)
    is_overlay: bool = True
    x_field: str = "x"

    def __len__(self) -> int:
        return len(self.points)

    def values(self, field_name: str) -> list[float]:
        return [p[field_name] for p in self.points]

    @property
    def label(self) -> str:
        """Short id with parameters, e.g. ``sma(20)`` or ``macd(12,26,9)``."""
        args = ",".join(_param_text(v) for v in self.params.values())
        return f"{self.indicator.value}({args})"

    def as_series(self, field_name: Optional[str] = None) -> Series:
        """Expose one indicator field as a regular series."""
        y_field = field_name or self.fields[0]
        return Series(
            key=f"{self.label}:{y_field}",
            points=self.points,
            x_field=self.x_field,
            y_field=y_field,
        )

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "indicator": self.indicator.value,
            "label": self.label,
            "fields": self.fields,
            "params": self.params,
            "is_overlay": self.is_overlay,
            "points": [{k: _iso(v) for k, v in p.items()} for p in self.points],
        }


@dataclass
class StackedPoint:
    """Running total of one layer at one x key."""

    x_key: Any
    cumulative_value: float
    own_value: float
    baseline_value: float = 0.0

    def to_dict(self) -> dict:
        return {
            "x_key": self.x_key,
            "cumulative_value": self.cumulative_value,
            "own_value": self.own_value,
            "baseline_value": self.baseline_value,
        }


@dataclass
class StackedSeries:
    """One layer of a stack."""

    key: str
    points: list[StackedPoint] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def cumulative_values(self) -> list[float]:
        return [p.cumulative_value for p in self.points]

    def to_series(self, x_field: str = "x", y_field: str = "y") -> Series:
        """Express the layer's top edge as a regular series."""
        return Series(
            key=self.key,
            points=[
                {
                    x_field: p.x_key,
                    y_field: p.cumulative_value,
                    "original_value": p.own_value,
                    "baseline": p.baseline_value,
                }
                for p in self.points
            ],
            x_field=x_field,
            y_field=y_field,
        )

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "points": [p.to_dict() for p in self.points],
        }


@dataclass
class Domain:
    """Computed x/y extents for a set of series."""

    x: tuple
    y: tuple

    def to_dict(self) -> dict:
        return {"x": list(self.x), "y": list(self.y)}


@dataclass
class ChartFrame:
    """Everything a renderer needs for one computation pass."""

    domain: Domain
    x_scale: Any
    y_scale: Any
    x_ticks: list[Tick] = field(default_factory=list)
    y_ticks: list[Tick] = field(default_factory=list)
    series: list[Series] = field(default_factory=list)
    curves: dict[str, list[CurveSegment]] = field(default_factory=dict)
    areas: dict[str, list[CurveSegment]] = field(default_factory=dict)
    indicators: list[IndicatorResult] = field(default_factory=list)
    stacked: list[StackedSeries] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "domain": self.domain.to_dict(),
            "x_ticks": [t.to_dict() for t in self.x_ticks],
            "y_ticks": [t.to_dict() for t in self.y_ticks],
            "curves": {k: [s.to_dict() for s in v] for k, v in self.curves.items()},
            "areas": {k: [s.to_dict() for s in v] for k, v in self.areas.items()},
            "indicators": [r.to_dict() for r in self.indicators],
            "stacked": [s.to_dict() for s in self.stacked],
        }
