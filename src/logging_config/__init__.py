"""Logging setup and timing helpers for the charting core.

The core modules only ever call ``logging.getLogger(__name__)``; hosts
that want output call ``configure_logging`` once at startup.
"""

from src.logging_config.config import LogFormat, LoggingConfig, LogLevel
from src.logging_config.performance import PerformanceTimer, log_performance
from src.logging_config.setup import configure_logging, get_logger

__all__ = [
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "PerformanceTimer",
    "configure_logging",
    "get_logger",
    "log_performance",
]
