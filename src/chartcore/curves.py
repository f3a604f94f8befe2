"""Curve Building.

Turns already-scaled (px, py) points into drawable path segments using
linear, step, cardinal-spline or monotone-cubic interpolation. Purely
geometric: the builder knows nothing about what the points mean.

Example:
    builder = CurveBuilder()
    segments = builder.build([(0, 10), (10, 4), (20, 8)], CurveMode.MONOTONE)
    # [MOVE (0, 10), CUBIC ..., CUBIC ...]
"""

import logging
import math
from typing import Optional, Sequence, Union

import numpy as np

from src.chartcore.config import CurveConfig, CurveMode, SegmentKind, DEFAULT_CURVE_CONFIG
from src.chartcore.errors import InvalidParameterError
from src.chartcore.models import CurveSegment, Point

logger = logging.getLogger(__name__)


def _as_points(points: Sequence) -> list[Point]:
    return [(float(p[0]), float(p[1])) for p in points]


class CurveBuilder:
    """Builds path segments from scaled points."""

    def __init__(self, config: Optional[CurveConfig] = None) -> None:
        self.config = config or DEFAULT_CURVE_CONFIG

    def build(
        self,
        points: Sequence,
        mode: Union[CurveMode, str, None] = None,
        tension: Optional[float] = None,
    ) -> list[CurveSegment]:
        """Build the segment list for ``points`` in the given mode.

        Args:
            points: Ordered (px, py) pairs in output-range coordinates.
            mode: Interpolation mode. Defaults to the configured mode.
            tension: Cardinal spline tension. Defaults to the configured one.

        Returns:
            A MOVE to the first point followed by LINE or CUBIC segments.
        """
        mode = CurveMode(mode) if mode is not None else self.config.mode
        pts = _as_points(points)

        if mode == CurveMode.STEP:
            return self.step(pts)
        if mode == CurveMode.CARDINAL:
            return self.cardinal(pts, self.config.tension if tension is None else tension)
        if mode == CurveMode.MONOTONE:
            return self.monotone(pts)
        return self.linear(pts)

    def linear(self, points: Sequence) -> list[CurveSegment]:
        pts = _as_points(points)
        if not pts:
            return []
        segments = [CurveSegment.move(pts[0])]
        segments.extend(CurveSegment.line(p) for p in pts[1:])
        return segments

    def step(self, points: Sequence) -> list[CurveSegment]:
        """Staircase: horizontal at the previous y, then vertical."""
        pts = _as_points(points)
        if not pts:
            return []
        segments = [CurveSegment.move(pts[0])]
        for (_, prev_y), (x, y) in zip(pts, pts[1:]):
            segments.append(CurveSegment.line((x, prev_y)))
            segments.append(CurveSegment.line((x, y)))
        return segments

    def cardinal(self, points: Sequence, tension: float = 0.5) -> list[CurveSegment]:
        """Cardinal spline.

        Each point gets an incoming and an outgoing control point along
        the chord of its neighbours: ``p1 -/+ t * (p2 - p0)``. The first
        point is its own predecessor and the last its own successor.
        """
        if not (isinstance(tension, (int, float)) and math.isfinite(tension) and tension >= 0):
            raise InvalidParameterError("Tension must be a non-negative number", field="tension", value=tension)

        pts = _as_points(points)
        if len(pts) < 3:
            logger.debug("Cardinal spline needs 3 points, got %d; drawing straight lines", len(pts))
            return self.linear(pts)

        n = len(pts)
        incoming: list[Point] = []
        outgoing: list[Point] = []
        for i in range(n):
            p0 = pts[i - 1] if i > 0 else pts[i]
            p1 = pts[i]
            p2 = pts[i + 1] if i < n - 1 else pts[i]
            dx = tension * (p2[0] - p0[0])
            dy = tension * (p2[1] - p0[1])
            incoming.append((p1[0] - dx, p1[1] - dy))
            outgoing.append((p1[0] + dx, p1[1] + dy))

        segments = [CurveSegment.move(pts[0])]
        for i in range(n - 1):
            segments.append(CurveSegment.cubic(outgoing[i], incoming[i + 1], pts[i + 1]))
        return segments

    def monotone(self, points: Sequence) -> list[CurveSegment]:
        """Monotone cubic interpolation (Fritsch-Carlson).

        Tangents are the harmonic mean of the neighbouring secants, or 0
        where the secants change sign, so the curve never overshoots
        monotone data.
        """
        pts = _as_points(points)
        if len(pts) < 3:
            logger.debug("Monotone cubic needs 3 points, got %d; drawing straight lines", len(pts))
            return self.linear(pts)

        n = len(pts)
        secants = []
        for (x0, y0), (x1, y1) in zip(pts, pts[1:]):
            dx = x1 - x0
            secants.append((y1 - y0) / dx if dx != 0 else 0.0)

        tangents = [0.0] * n
        tangents[0] = secants[0]
        tangents[-1] = secants[-1]
        for i in range(1, n - 1):
            a, b = secants[i - 1], secants[i]
            if a * b <= 0:
                tangents[i] = 0.0
            else:
                tangents[i] = 2 * a * b / (a + b)

        segments = [CurveSegment.move(pts[0])]
        for i in range(n - 1):
            (x0, y0), (x1, y1) = pts[i], pts[i + 1]
            third = (x1 - x0) / 3
            cp1 = (x0 + third, y0 + third * tangents[i])
            cp2 = (x1 - third, y1 - third * tangents[i + 1])
            segments.append(CurveSegment.cubic(cp1, cp2, (x1, y1)))
        return segments

    def build_area(
        self,
        top: Sequence,
        baseline: Sequence,
        mode: Union[CurveMode, str, None] = None,
        tension: Optional[float] = None,
    ) -> list[CurveSegment]:
        """Closed band between a top edge and a baseline.

        The top edge is interpolated in ``mode``; the baseline is walked
        back in reverse with straight lines and the shape is closed.
        """
        segments = self.build(top, mode, tension)
        if not segments:
            return []
        for point in reversed(_as_points(baseline)):
            segments.append(CurveSegment.line(point))
        segments.append(CurveSegment.close())
        return segments

    def sample(self, segments: Sequence[CurveSegment], steps: Optional[int] = None) -> list[Point]:
        """Flatten segments into a polyline.

        Cubic segments are evaluated at ``steps`` evenly spaced parameter
        values; lines contribute their end point.
        """
        steps = max(1, int(steps or self.config.samples_per_segment))
        t = np.linspace(0.0, 1.0, steps + 1)[1:]
        out: list[Point] = []
        current: Optional[Point] = None
        start: Optional[Point] = None

        for seg in segments:
            if seg.kind == SegmentKind.MOVE:
                current = start = seg.end
                out.append(current)
            elif seg.kind == SegmentKind.LINE:
                current = seg.end
                out.append(current)
            elif seg.kind == SegmentKind.CUBIC:
                p0 = np.array(current)
                c1, c2, p3 = np.array(seg.cp1), np.array(seg.cp2), np.array(seg.end)
                u = 1.0 - t
                curve = (
                    np.outer(u ** 3, p0)
                    + np.outer(3 * u ** 2 * t, c1)
                    + np.outer(3 * u * t ** 2, c2)
                    + np.outer(t ** 3, p3)
                )
                out.extend((float(x), float(y)) for x, y in curve)
                current = seg.end
            elif seg.kind == SegmentKind.CLOSE and start is not None:
                out.append(start)
                current = start
        return out
