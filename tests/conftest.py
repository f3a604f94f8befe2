"""Pytest configuration and shared fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


@pytest.fixture
def price_points():
    """Random-walk closing prices as x/y points."""
    rng = np.random.RandomState(42)
    closes = 100 + np.cumsum(rng.normal(0, 1.0, 120))
    return [{"x": i, "y": float(c)} for i, c in enumerate(closes)]


@pytest.fixture
def daily_points():
    """Sixty daily bars with datetime x values."""
    start = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return [
        {"x": start + timedelta(days=i), "y": 100.0 + i}
        for i in range(60)
    ]


@pytest.fixture(autouse=True)
def quiet_core_logger():
    """Keep handlers installed by configure_logging from leaking between tests."""
    import logging

    core = logging.getLogger("src.chartcore")
    saved_handlers, saved_level = list(core.handlers), core.level
    yield
    core.handlers[:] = saved_handlers
    core.setLevel(saved_level)
