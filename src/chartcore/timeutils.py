"""Instant <-> epoch-millisecond conversion shared by scales, ticks and stacking."""

from datetime import date, datetime, time, timezone
from typing import Any

import numpy as np
import pandas as pd


def is_temporal(value: Any) -> bool:
    return isinstance(value, (datetime, date, np.datetime64))


def to_millis(value: Any) -> float:
    """Normalize an instant or a raw millisecond number to epoch milliseconds.

    Naive datetimes are read as UTC.
    """
    if isinstance(value, np.datetime64):
        value = pd.Timestamp(value).to_pydatetime()
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.timestamp() * 1000.0
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=timezone.utc).timestamp() * 1000.0
    if isinstance(value, bool):
        raise TypeError(f"Not an instant: {value!r}")
    return float(value)


def from_millis(ms: float) -> datetime:
    """Epoch milliseconds -> timezone-aware UTC datetime."""
    return datetime.fromtimestamp(ms / 1000.0, tz=timezone.utc)


def x_key(value: Any) -> Any:
    """Comparable lookup key for an x value; instants become epoch millis."""
    if is_temporal(value):
        return to_millis(value)
    return value
