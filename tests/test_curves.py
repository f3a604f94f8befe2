"""Tests for curve building: linear, step, cardinal and monotone cubic."""

import numpy as np
import pytest

from src.chartcore.config import CurveConfig, CurveMode, SegmentKind
from src.chartcore.curves import CurveBuilder
from src.chartcore.errors import InvalidParameterError
from src.chartcore.models import CurveSegment


POINTS = [(0.0, 10.0), (10.0, 4.0), (20.0, 8.0), (30.0, 2.0)]


def _kinds(segments):
    return [s.kind for s in segments]


class TestLinearAndStep:
    """Test straight-line modes."""

    def test_empty_input(self):
        assert CurveBuilder().build([], CurveMode.LINEAR) == []
        assert CurveBuilder().build([], CurveMode.MONOTONE) == []

    def test_single_point_is_just_a_move(self):
        segments = CurveBuilder().build([(1, 2)], CurveMode.CARDINAL)
        assert segments == [CurveSegment.move((1.0, 2.0))]

    def test_linear(self):
        segments = CurveBuilder().build(POINTS, CurveMode.LINEAR)
        assert _kinds(segments) == [SegmentKind.MOVE] + [SegmentKind.LINE] * 3
        assert [s.end for s in segments] == POINTS

    def test_step_staircase(self):
        segments = CurveBuilder().build([(0, 0), (5, 3), (9, 1)], CurveMode.STEP)
        assert [s.end for s in segments] == [
            (0.0, 0.0),
            (5.0, 0.0), (5.0, 3.0),
            (9.0, 3.0), (9.0, 1.0),
        ]
        assert all(s.kind == SegmentKind.LINE for s in segments[1:])

    def test_mode_accepts_string(self):
        segments = CurveBuilder().build(POINTS, "step")
        assert len(segments) == 1 + 2 * 3

    def test_default_mode_from_config(self):
        builder = CurveBuilder(CurveConfig(mode=CurveMode.STEP))
        assert len(builder.build(POINTS)) == 7


class TestCardinal:
    """Test cardinal spline control points."""

    def test_falls_back_to_linear_below_three_points(self):
        two = [(0, 0), (10, 10)]
        assert CurveBuilder().build(two, CurveMode.CARDINAL) == CurveBuilder().linear(two)

    def test_segment_per_pair(self):
        segments = CurveBuilder().build(POINTS, CurveMode.CARDINAL)
        assert _kinds(segments) == [SegmentKind.MOVE] + [SegmentKind.CUBIC] * 3
        assert [s.end for s in segments[1:]] == POINTS[1:]

    def test_control_points(self):
        pts = [(0.0, 0.0), (10.0, 10.0), (20.0, 0.0)]
        segments = CurveBuilder().cardinal(pts, tension=0.5)
        first, second = segments[1], segments[2]
        # first point is its own predecessor: out = p0 + t * (p1 - p0)
        assert first.cp1 == pytest.approx((5.0, 5.0))
        # interior point: in = p1 - t * (p2 - p0)
        assert first.cp2 == pytest.approx((0.0, 10.0))
        assert second.cp1 == pytest.approx((20.0, 10.0))
        # last point is its own successor: in = p2 - t * (p2 - p1)
        assert second.cp2 == pytest.approx((15.0, 5.0))

    def test_zero_tension_is_straight(self):
        pts = [(0.0, 0.0), (10.0, 10.0), (20.0, 0.0)]
        segments = CurveBuilder().build(pts, CurveMode.CARDINAL, tension=0)
        assert segments[1].cp1 == (0.0, 0.0)
        assert segments[1].cp2 == (10.0, 10.0)

    def test_invalid_tension(self):
        with pytest.raises(InvalidParameterError):
            CurveBuilder().build(POINTS, CurveMode.CARDINAL, tension=-0.1)
        with pytest.raises(InvalidParameterError):
            CurveBuilder().build(POINTS, CurveMode.CARDINAL, tension=float("nan"))


class TestMonotone:
    """Test Fritsch-Carlson monotone cubic interpolation."""

    def test_falls_back_to_linear_below_three_points(self):
        two = [(0, 0), (10, 10)]
        assert CurveBuilder().build(two, CurveMode.MONOTONE) == CurveBuilder().linear(two)

    def test_controls_at_thirds(self):
        pts = [(0.0, 0.0), (3.0, 3.0), (6.0, 6.0)]
        segments = CurveBuilder().monotone(pts)
        assert segments[1].cp1 == pytest.approx((1.0, 1.0))
        assert segments[1].cp2 == pytest.approx((2.0, 2.0))
        assert segments[2].cp1 == pytest.approx((4.0, 4.0))

    def test_extremum_gets_flat_tangent(self):
        pts = [(0.0, 0.0), (10.0, 10.0), (20.0, 0.0)]
        segments = CurveBuilder().monotone(pts)
        # tangent at the peak is zero, so both adjacent controls sit at y=10
        assert segments[1].cp2[1] == pytest.approx(10.0)
        assert segments[2].cp1[1] == pytest.approx(10.0)

    def test_flat_secant_forces_zero_tangent(self):
        pts = [(0.0, 0.0), (10.0, 5.0), (20.0, 5.0), (30.0, 9.0)]
        segments = CurveBuilder().monotone(pts)
        assert segments[1].cp2[1] == pytest.approx(5.0)
        assert segments[3].cp1[1] == pytest.approx(5.0)

    def test_harmonic_mean_tangent(self):
        # secants 1 and 3 -> tangent 2*1*3/(1+3) = 1.5
        pts = [(0.0, 0.0), (1.0, 1.0), (2.0, 4.0)]
        segments = CurveBuilder().monotone(pts)
        assert segments[1].cp2[1] == pytest.approx(1.0 - 1.5 / 3)

    def test_no_overshoot_on_increasing_data(self):
        rng = np.random.RandomState(3)
        xs = np.cumsum(rng.uniform(0.5, 20.0, 40))
        ys = np.cumsum(rng.exponential(5.0, 40) * (rng.uniform(size=40) > 0.3))
        builder = CurveBuilder()
        sampled = builder.sample(builder.build(list(zip(xs, ys)), CurveMode.MONOTONE), steps=50)
        sampled_y = [y for _, y in sampled]
        sampled_x = [x for x, _ in sampled]
        assert all(b >= a - 1e-9 for a, b in zip(sampled_y, sampled_y[1:]))
        assert all(b >= a - 1e-9 for a, b in zip(sampled_x, sampled_x[1:]))
        assert min(sampled_y) >= ys[0] - 1e-9
        assert max(sampled_y) <= ys[-1] + 1e-9

    def test_duplicate_x_does_not_raise(self):
        segments = CurveBuilder().monotone([(0, 0), (0, 5), (10, 8)])
        assert len(segments) == 3


class TestAreaAndSampling:
    """Test closed area bands and segment sampling."""

    def test_area_band(self):
        top = [(0, 5), (10, 3), (20, 4)]
        base = [(0, 10), (10, 10), (20, 10)]
        segments = CurveBuilder().build_area(top, base, CurveMode.LINEAR)
        assert _kinds(segments) == (
            [SegmentKind.MOVE] + [SegmentKind.LINE] * 2
            + [SegmentKind.LINE] * 3 + [SegmentKind.CLOSE]
        )
        assert [s.end for s in segments[3:6]] == [(20.0, 10.0), (10.0, 10.0), (0.0, 10.0)]

    def test_area_of_nothing(self):
        assert CurveBuilder().build_area([], []) == []

    def test_sample_line_and_close(self):
        builder = CurveBuilder()
        segments = builder.build_area([(0, 0), (1, 1)], [(0, 2), (1, 2)])
        assert builder.sample(segments) == [
            (0.0, 0.0), (1.0, 1.0), (1.0, 2.0), (0.0, 2.0), (0.0, 0.0),
        ]

    def test_sample_cubic_hits_endpoints(self):
        builder = CurveBuilder()
        segments = builder.build(POINTS, CurveMode.CARDINAL)
        sampled = builder.sample(segments, steps=10)
        assert len(sampled) == 1 + 3 * 10
        assert sampled[0] == POINTS[0]
        assert sampled[10] == pytest.approx(POINTS[1])
        assert sampled[-1] == pytest.approx(POINTS[-1])

    def test_segment_to_dict(self):
        seg = CurveSegment.cubic((1, 2), (3, 4), (5, 6))
        assert seg.to_dict() == {"kind": "cubic", "end": [5, 6], "cp1": [1, 2], "cp2": [3, 4]}
