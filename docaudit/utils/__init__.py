"""
Utility modules for the consistency checker.

Provides logging utilities.
"""

from docaudit.utils.logger import (
    LogContext,
    TraceObserver,
    get_logger,
    logging_observer,
    setup_logging,
)

__all__ = [
    "get_logger",
    "setup_logging",
    "LogContext",
    "TraceObserver",
    "logging_observer",
]
