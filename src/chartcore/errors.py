"""Exception Hierarchy.

Typed errors raised by the charting core. Hard validation failures
(bad parameters, non-positive log domain) raise immediately; data
shortfalls are handled by omission and never raise from the core
operations themselves.
"""

from typing import Any, Dict, List, Optional

from src.chartcore.config import ErrorCode


class ChartCoreError(Exception):
    """Base exception for all charting core errors.

    Callers can catch this to handle the whole hierarchy.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or []

    def to_dict(self) -> dict:
        return {
            "error": self.error_code.value,
            "message": self.message,
            "details": self.details,
        }


class InvalidDomainError(ChartCoreError):
    """Raised when a log scale sees a non-positive domain value."""

    def __init__(
        self,
        message: str = "Log scale domain must be positive",
        value: Any = None,
    ):
        details = [{"value": value}] if value is not None else None
        super().__init__(message, ErrorCode.INVALID_DOMAIN, details)
        self.value = value


class InvalidParameterError(ChartCoreError):
    """Raised when a period, deviation multiplier or tension is out of range."""

    def __init__(
        self,
        message: str = "Invalid parameter",
        field: Optional[str] = None,
        value: Any = None,
    ):
        details = None
        if field:
            details = [{"field": field, "value": value, "issue": message}]
        super().__init__(message, ErrorCode.INVALID_PARAMETER, details)
        self.field = field
        self.value = value


class InsufficientDataError(ChartCoreError):
    """Fewer points than an operation needs.

    The core operations omit output instead of raising this; it is
    available to callers that want a strict check via require_min_points.
    """

    def __init__(
        self,
        message: str = "Not enough data points",
        required: int = 0,
        available: int = 0,
    ):
        super().__init__(
            message,
            ErrorCode.INSUFFICIENT_DATA,
            [{"required": required, "available": available}],
        )
        self.required = required
        self.available = available


def require_min_points(points, required: int, what: str = "operation") -> None:
    """Raise InsufficientDataError if fewer than `required` points are given."""
    available = len(points)
    if available < required:
        raise InsufficientDataError(
            f"{what} needs at least {required} points, got {available}",
            required=required,
            available=available,
        )
