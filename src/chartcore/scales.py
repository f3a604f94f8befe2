"""Scales.

Map data values (domain) to output coordinates (range) and back.
Three variants share one interface: linear, time (linear over epoch
milliseconds) and logarithmic.

Example:
    scale = LogScale(domain=(1, 100), range=(0, 100))
    scale.scale(10)    # 50.0
    scale.invert(50)   # 10.0
"""

import logging
import math
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

from src.chartcore.config import ScaleConfig, ScaleKind, DEFAULT_SCALE_CONFIG
from src.chartcore.errors import InvalidDomainError, InvalidParameterError
from src.chartcore.models import Tick
from src.chartcore.ticks import TickPlanner
from src.chartcore.timeutils import from_millis, to_millis

logger = logging.getLogger(__name__)


def _pair(value: Sequence, name: str) -> tuple:
    try:
        items = tuple(value)
    except TypeError:
        raise InvalidParameterError(f"{name} must be a [min, max] pair", field=name, value=value)
    if len(items) != 2:
        raise InvalidParameterError(f"{name} must be a [min, max] pair", field=name, value=value)
    return items


class Scale(ABC):
    """Base scale holding the current domain and range."""

    kind: ScaleKind = ScaleKind.LINEAR

    def __init__(self, domain: Sequence = (0.0, 1.0), range: Sequence = (0.0, 1.0)) -> None:
        self.domain: tuple = (0.0, 1.0)
        self.range: tuple = (0.0, 1.0)
        self.set_domain(domain)
        self.set_range(range)

    def set_domain(self, domain: Sequence) -> "Scale":
        self.domain = _pair(domain, "domain")
        return self

    def set_range(self, range: Sequence) -> "Scale":
        self.range = tuple(float(r) for r in _pair(range, "range"))
        return self

    @abstractmethod
    def scale(self, value: Any) -> float:
        """Map a domain value to the output range."""

    @abstractmethod
    def invert(self, coordinate: float) -> Any:
        """Map an output coordinate back to the domain."""

    def ticks(self, count: int = 5, planner: Optional[TickPlanner] = None) -> list[Tick]:
        """Axis ticks for the current domain."""
        return (planner or TickPlanner()).ticks_for_scale(self, count)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(domain={self.domain}, range={self.range})"


class LinearScale(Scale):
    """Linear scale for continuous data."""

    kind = ScaleKind.LINEAR

    def set_domain(self, domain: Sequence) -> "LinearScale":
        d0, d1 = _pair(domain, "domain")
        self.domain = (float(d0), float(d1))
        return self

    def scale(self, value: Any) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d0 == d1:
            return r0
        return r0 + (float(value) - d0) * (r1 - r0) / (d1 - d0)

    def invert(self, coordinate: float) -> Any:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return d0
        return d0 + (float(coordinate) - r0) * (d1 - d0) / (r1 - r0)


class TimeScale(LinearScale):
    """Linear scale over epoch milliseconds.

    Accepts datetimes, dates, pandas/numpy timestamps or raw millisecond
    numbers; ``invert`` returns a UTC datetime.
    """

    kind = ScaleKind.TIME

    def set_domain(self, domain: Sequence) -> "TimeScale":
        d0, d1 = _pair(domain, "domain")
        self.domain = (to_millis(d0), to_millis(d1))
        return self

    def scale(self, value: Any) -> float:
        return super().scale(to_millis(value))

    def invert(self, coordinate: float) -> Any:
        return from_millis(super().invert(coordinate))

    def domain_instants(self) -> tuple:
        return (from_millis(self.domain[0]), from_millis(self.domain[1]))


class LogScale(Scale):
    """Logarithmic scale; domain values must be strictly positive."""

    kind = ScaleKind.LOG

    def __init__(
        self,
        domain: Sequence = (1.0, 10.0),
        range: Sequence = (0.0, 1.0),
        base: float = 10.0,
    ) -> None:
        if not (isinstance(base, (int, float)) and base > 0 and base != 1 and math.isfinite(base)):
            raise InvalidParameterError("Log base must be positive and not 1", field="base", value=base)
        self.base = float(base)
        super().__init__(domain, range)

    def _log(self, value: float) -> float:
        if self.base == 10.0:
            return math.log10(value)
        return math.log(value) / math.log(self.base)

    def set_domain(self, domain: Sequence) -> "LogScale":
        d0, d1 = (float(d) for d in _pair(domain, "domain"))
        for bound in (d0, d1):
            if bound <= 0:
                raise InvalidDomainError("Log scale domain bounds must be positive", value=bound)
        self.domain = (d0, d1)
        return self

    def scale(self, value: Any) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        value = float(value)
        if value <= 0:
            raise InvalidDomainError(value=value)
        if d0 == d1:
            return r0
        log_d0 = self._log(d0)
        return r0 + (self._log(value) - log_d0) * (r1 - r0) / (self._log(d1) - log_d0)

    def invert(self, coordinate: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r0 == r1:
            return d0
        log_d0 = self._log(d0)
        exponent = log_d0 + (float(coordinate) - r0) * (self._log(d1) - log_d0) / (r1 - r0)
        return self.base ** exponent

    def __repr__(self) -> str:
        return f"LogScale(domain={self.domain}, range={self.range}, base={self.base})"


def create_scale(config: Optional[ScaleConfig] = None) -> Scale:
    """Build a scale from its configuration."""
    config = config or DEFAULT_SCALE_CONFIG
    if config.kind == ScaleKind.LOG:
        return LogScale(config.domain or (1.0, 10.0), config.range, base=config.base)
    domain = config.domain or (0.0, 1.0)
    if config.kind == ScaleKind.TIME:
        return TimeScale(domain, config.range)
    if config.kind == ScaleKind.LINEAR:
        return LinearScale(domain, config.range)
    raise InvalidParameterError(f"Unknown scale kind: {config.kind}", field="kind", value=config.kind)
