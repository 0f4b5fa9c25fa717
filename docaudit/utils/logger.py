"""
Structured Logging with Rich.

Console logging for the extraction engine, the API and the CLI.
"""

import logging
from collections.abc import Callable
from functools import lru_cache
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(level: str = "INFO") -> None:
    """
    Configure root logger with Rich handler.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    console = Console(stderr=True)

    logging.basicConfig(
        level=level,
        format="%(name)s | %(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                tracebacks_show_locals=False,
                show_time=True,
                show_path=False,
            )
        ],
        force=True,
    )

    # Uvicorn access lines drown out the per-document summaries
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)


@lru_cache(maxsize=128)
def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance
    """
    return logging.getLogger(name)


class LogContext:
    """
    Context manager that stamps extra fields on every log record.

    Usage:
        with LogContext(logger, document_name="q3_report.csv"):
            logger.info("Extracting facts")
    """

    def __init__(self, logger: logging.Logger, **context: str | int | float) -> None:
        self.logger = logger
        self.context = context
        self._old_factory: logging.LogRecordFactory | None = None

    def __enter__(self) -> "LogContext":
        self._old_factory = logging.getLogRecordFactory()
        old_factory = self._old_factory
        context = self.context

        def factory(*args, **kwargs) -> logging.LogRecord:  # type: ignore[no-untyped-def]
            record = old_factory(*args, **kwargs)
            for key, value in context.items():
                setattr(record, key, value)
            return record

        logging.setLogRecordFactory(factory)
        return self

    def __exit__(self, *args: object) -> None:
        if self._old_factory:
            logging.setLogRecordFactory(self._old_factory)


TraceObserver = Callable[[str, dict[str, Any]], None]
"""Callback receiving ``(event, payload)`` diagnostics from the engine."""


def logging_observer(logger: logging.Logger, level: int = logging.DEBUG) -> TraceObserver:
    """
    Build a TraceObserver that forwards events to a logger.

    Args:
        logger: Destination logger
        level: Level to emit events at

    Returns:
        Observer callable
    """

    def observe(event: str, payload: dict[str, Any]) -> None:
        if logger.isEnabledFor(level):
            details = ", ".join(f"{key}={value!r}" for key, value in payload.items())
            logger.log(level, f"{event}: {details}")

    return observe
