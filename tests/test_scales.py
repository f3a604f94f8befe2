"""Tests for scales: linear, time and log mapping."""

from datetime import date, datetime, timezone

import numpy as np
import pandas as pd
import pytest

from src.chartcore.config import ScaleConfig, ScaleKind
from src.chartcore.errors import InvalidDomainError, InvalidParameterError, ChartCoreError
from src.chartcore.scales import LinearScale, LogScale, Scale, TimeScale, create_scale
from src.chartcore.timeutils import from_millis, to_millis, x_key


class TestLinearScale:
    """Test linear domain <-> range mapping."""

    def test_endpoints_map_to_range(self):
        scale = LinearScale(domain=(10, 20), range=(0, 500))
        assert scale.scale(10) == 0
        assert scale.scale(20) == 500

    def test_midpoint(self):
        scale = LinearScale(domain=(0, 100), range=(400, 0))
        assert scale.scale(50) == pytest.approx(200)
        assert scale.scale(25) == pytest.approx(300)

    def test_invert_roundtrip(self):
        scale = LinearScale(domain=(-3.5, 12.25), range=(17, 613))
        for v in np.linspace(-3.5, 12.25, 25):
            assert scale.invert(scale.scale(v)) == pytest.approx(v)

    def test_degenerate_domain_collapses_to_r0(self):
        scale = LinearScale(domain=(5, 5), range=(10, 90))
        assert scale.scale(5) == 10
        assert scale.scale(1000) == 10

    def test_degenerate_range_inverts_to_d0(self):
        scale = LinearScale(domain=(3, 9), range=(42, 42))
        assert scale.invert(42) == 3
        assert scale.invert(-1) == 3

    def test_extrapolates_outside_domain(self):
        scale = LinearScale(domain=(0, 10), range=(0, 100))
        assert scale.scale(15) == pytest.approx(150)

    def test_rebinding_returns_self(self):
        scale = LinearScale()
        assert scale.set_domain((0, 2)).set_range((0, 4)) is scale
        assert scale.scale(1) == pytest.approx(2)

    def test_domain_must_be_pair(self):
        scale = LinearScale()
        with pytest.raises(InvalidParameterError):
            scale.set_domain((1, 2, 3))
        with pytest.raises(InvalidParameterError):
            scale.set_range(5)

    def test_kind(self):
        assert LinearScale().kind == ScaleKind.LINEAR

    def test_base_is_abstract(self):
        with pytest.raises(TypeError):
            Scale()
        assert isinstance(LinearScale(), Scale)


class TestTimeScale:
    """Test time scale normalization to epoch milliseconds."""

    def test_accepts_datetimes_and_millis(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2024, 1, 11, tzinfo=timezone.utc)
        scale = TimeScale(domain=(start, end), range=(0, 1000))
        mid = datetime(2024, 1, 6, tzinfo=timezone.utc)
        assert scale.scale(mid) == pytest.approx(500)
        assert scale.scale(to_millis(mid)) == pytest.approx(500)

    def test_domain_stored_as_millis(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        scale = TimeScale(domain=(start, start), range=(0, 10))
        assert scale.domain == (1704067200000.0, 1704067200000.0)

    def test_invert_returns_utc_datetime(self):
        start = datetime(2024, 3, 1, tzinfo=timezone.utc)
        end = datetime(2024, 3, 2, tzinfo=timezone.utc)
        scale = TimeScale(domain=(start, end), range=(0, 24))
        result = scale.invert(12)
        assert isinstance(result, datetime)
        assert result == datetime(2024, 3, 1, 12, tzinfo=timezone.utc)

    def test_naive_datetimes_read_as_utc(self):
        assert to_millis(datetime(1970, 1, 1, 0, 0, 1)) == 1000.0

    def test_pandas_and_numpy_instants(self):
        ts = pd.Timestamp("2024-01-01 00:00:00")
        assert to_millis(ts) == 1704067200000.0
        assert to_millis(np.datetime64("2024-01-01T00:00:00")) == 1704067200000.0
        assert to_millis(date(2024, 1, 1)) == 1704067200000.0

    def test_from_millis(self):
        assert from_millis(0) == datetime(1970, 1, 1, tzinfo=timezone.utc)

    def test_x_key(self):
        assert x_key(datetime(1970, 1, 1, tzinfo=timezone.utc)) == 0.0
        assert x_key(7) == 7
        assert x_key("AAPL") == "AAPL"

    def test_domain_instants(self):
        start = datetime(2024, 1, 1, tzinfo=timezone.utc)
        end = datetime(2024, 2, 1, tzinfo=timezone.utc)
        assert TimeScale((start, end), (0, 1)).domain_instants() == (start, end)


class TestLogScale:
    """Test logarithmic mapping."""

    def test_base10_known_values(self):
        scale = LogScale(domain=(1, 100), range=(0, 100))
        assert scale.scale(10) == 50
        assert scale.scale(1) == 0
        assert scale.scale(100) == 100

    def test_zero_raises(self):
        scale = LogScale(domain=(1, 100), range=(0, 100))
        with pytest.raises(InvalidDomainError):
            scale.scale(0)
        with pytest.raises(InvalidDomainError):
            scale.scale(-5)

    def test_error_is_in_hierarchy(self):
        scale = LogScale(domain=(1, 100), range=(0, 100))
        with pytest.raises(ChartCoreError) as exc_info:
            scale.scale(0)
        assert exc_info.value.error_code.value == "INVALID_DOMAIN"

    def test_non_positive_domain_bound_raises(self):
        with pytest.raises(InvalidDomainError):
            LogScale(domain=(0, 100), range=(0, 1))
        scale = LogScale(domain=(1, 10), range=(0, 1))
        with pytest.raises(InvalidDomainError):
            scale.set_domain((-1, 10))

    def test_invert_roundtrip(self):
        scale = LogScale(domain=(0.5, 5000), range=(300, 0))
        for v in (0.5, 1, 3.3, 47, 999, 5000):
            assert scale.invert(scale.scale(v)) == pytest.approx(v)

    def test_base_two(self):
        scale = LogScale(domain=(1, 8), range=(0, 3), base=2)
        assert scale.scale(2) == pytest.approx(1)
        assert scale.scale(4) == pytest.approx(2)
        assert scale.invert(1) == pytest.approx(2)

    def test_degenerate_domain(self):
        scale = LogScale(domain=(10, 10), range=(7, 70))
        assert scale.scale(123) == 7

    def test_degenerate_range(self):
        scale = LogScale(domain=(2, 20), range=(5, 5))
        assert scale.invert(5) == 2

    def test_invalid_base(self):
        with pytest.raises(InvalidParameterError):
            LogScale(domain=(1, 10), base=1)
        with pytest.raises(InvalidParameterError):
            LogScale(domain=(1, 10), base=-2)


class TestCreateScale:
    """Test scale construction from config."""

    def test_dispatch(self):
        assert isinstance(create_scale(ScaleConfig(kind=ScaleKind.LINEAR)), LinearScale)
        assert isinstance(create_scale(ScaleConfig(kind=ScaleKind.TIME)), TimeScale)
        assert isinstance(create_scale(ScaleConfig(kind=ScaleKind.LOG)), LogScale)

    def test_log_default_domain_is_positive(self):
        scale = create_scale(ScaleConfig(kind=ScaleKind.LOG))
        assert scale.domain == (1.0, 10.0)

    def test_config_values_applied(self):
        scale = create_scale(ScaleConfig(kind=ScaleKind.LOG, domain=(1, 1000), range=(0, 30), base=10))
        assert scale.scale(100) == pytest.approx(20)

    def test_scale_ticks_delegate(self):
        ticks = LinearScale(domain=(0, 10)).ticks(5)
        assert [t.value for t in ticks] == [0, 2, 4, 6, 8, 10]
