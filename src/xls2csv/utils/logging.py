"""Structured logging utilities for xls2csv.

This module provides:
- Request and sheet tracking using contextvars for log correlation
- Structured logging with consistent format and metadata
- Performance metrics logging helpers for conversions

Usage:
    from xls2csv.utils.logging import get_logger, LogContext

    logger = get_logger(__name__)

    with LogContext(request_id="abc-123", sheet="Sheet1"):
        logger.info("Converting sheet", rows=120)

    with timed_operation(logger, "convert_sheet") as metrics:
        metrics.rows_written = 120
"""

import logging
from collections.abc import Generator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

# Context variables for request tracking
_request_id_var: ContextVar[str | None] = ContextVar("request_id", default=None)
_sheet_var: ContextVar[str | None] = ContextVar("sheet", default=None)
_extra_context_var: ContextVar[dict[str, Any] | None] = ContextVar(
    "extra_context", default=None
)


def get_request_id() -> str | None:
    """Get the current request ID from context."""
    return _request_id_var.get()


def set_request_id(request_id: str | None) -> None:
    """Set the request ID in context.

    Args:
        request_id: The request ID to set, or None to clear.
    """
    _request_id_var.set(request_id)


def get_sheet() -> str | None:
    """Get the name of the sheet currently being converted."""
    return _sheet_var.get()


def set_sheet(sheet: str | None) -> None:
    """Set the sheet currently being converted, or None to clear."""
    _sheet_var.set(sheet)


def get_extra_context() -> dict[str, Any]:
    """Get additional context from context vars.

    Returns:
        Dictionary of extra context values.
    """
    ctx = _extra_context_var.get()
    return ctx if ctx is not None else {}


def set_extra_context(context: dict[str, Any]) -> None:
    """Set additional context in context vars."""
    _extra_context_var.set(context)


def clear_context() -> None:
    """Clear all context variables."""
    _request_id_var.set(None)
    _sheet_var.set(None)
    _extra_context_var.set(None)


@dataclass
class PerformanceMetrics:
    """Container for performance metrics of a conversion step.

    Attributes:
        operation: Name of the operation being measured.
        start_time: When the operation started.
        end_time: When the operation ended.
        duration_seconds: Duration in seconds.
        sheets_processed: Number of sheets converted.
        sheets_failed: Number of sheets recorded as failures.
        rows_written: Number of CSV records written.
        bytes_written: Number of output bytes produced.
        custom_metrics: Additional custom metrics.
    """

    operation: str
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None
    duration_seconds: float = 0.0
    sheets_processed: int = 0
    sheets_failed: int = 0
    rows_written: int = 0
    bytes_written: int = 0
    custom_metrics: dict[str, Any] = field(default_factory=dict)

    def finish(self) -> None:
        """Mark the operation as complete and calculate duration."""
        self.end_time = datetime.now(UTC)
        self.duration_seconds = (self.end_time - self.start_time).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging, omitting zero counters."""
        result: dict[str, Any] = {
            "operation": self.operation,
            "duration_seconds": self.duration_seconds,
        }
        if self.sheets_processed > 0:
            result["sheets_processed"] = self.sheets_processed
        if self.sheets_failed > 0:
            result["sheets_failed"] = self.sheets_failed
        if self.rows_written > 0:
            result["rows_written"] = self.rows_written
        if self.bytes_written > 0:
            result["bytes_written"] = self.bytes_written
        if self.custom_metrics:
            result["custom_metrics"] = self.custom_metrics
        return result


class StructuredLogFormatter(logging.Formatter):
    """Log formatter that prefixes records with the active context.

    Adds request_id, sheet and any extra context values to every record
    so that lines from one conversion can be correlated.
    """

    def format(self, record: logging.LogRecord) -> str:
        prefix_parts = []
        request_id = get_request_id()
        if request_id:
            prefix_parts.append(f"request_id={request_id}")
        sheet = get_sheet()
        if sheet is not None:
            prefix_parts.append(f"sheet={sheet}")
        for key, value in get_extra_context().items():
            prefix_parts.append(f"{key}={value}")

        prefix = f"[{' '.join(prefix_parts)}] " if prefix_parts else ""

        original_msg = record.msg
        record.msg = f"{prefix}{original_msg}"
        result = super().format(record)
        record.msg = original_msg

        return result


class StructuredLogger:
    """Logger wrapper that renders keyword arguments as key=value pairs.

    Example:
        logger.info("Sheet converted", sheet="Sheet1", rows=10)
        # -> "Sheet converted | sheet=Sheet1, rows=10"
    """

    def __init__(self, name: str) -> None:
        self._logger = logging.getLogger(name)
        self._name = name

    @property
    def logger(self) -> logging.Logger:
        """Access the underlying Python logger."""
        return self._logger

    def _build_message(self, message: str, **kwargs: Any) -> str:
        if not kwargs:
            return message

        parts = [f"{k}={v}" for k, v in kwargs.items()]
        return f"{message} | {', '.join(parts)}"

    def debug(self, message: str, **kwargs: Any) -> None:
        self._logger.debug(self._build_message(message, **kwargs))

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(self._build_message(message, **kwargs))

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(self._build_message(message, **kwargs))

    def error(self, message: str, exc_info: bool = False, **kwargs: Any) -> None:
        self._logger.error(self._build_message(message, **kwargs), exc_info=exc_info)

    def exception(self, message: str, **kwargs: Any) -> None:
        """Log an exception with traceback."""
        self._logger.exception(self._build_message(message, **kwargs))

    def log_performance(self, metrics: PerformanceMetrics) -> None:
        """Log performance metrics."""
        self.info(
            f"Performance: {metrics.operation}",
            **metrics.to_dict(),
        )

    def log_conversion_result(
        self,
        filename: str,
        sheets_total: int,
        sheets_failed: int,
        duration_seconds: float,
    ) -> None:
        """Log completion of a whole-workbook conversion.

        Logged at ERROR level when any sheet failed.

        Args:
            filename: Name of the converted workbook.
            sheets_total: Number of sheets selected for conversion.
            sheets_failed: Number of sheets recorded as failures.
            duration_seconds: Total processing time.
        """
        kwargs: dict[str, Any] = {
            "filename": filename,
            "sheets_total": sheets_total,
            "sheets_failed": sheets_failed,
            "duration_seconds": f"{duration_seconds:.3f}",
        }
        level = logging.INFO if sheets_failed == 0 else logging.ERROR
        self._logger.log(level, self._build_message("Conversion completed", **kwargs))


class LogContext:
    """Context manager for adding temporary context to logs.

    Usage:
        with LogContext(sheet="Sheet1", row_offset=2):
            logger.info("Converting...")  # Includes sheet and row_offset
    """

    def __init__(self, **kwargs: Any) -> None:
        self._new_context = kwargs
        self._old_context: dict[str, Any] = {}
        self._old_sheet: str | None = None
        self._old_request_id: str | None = None

    def __enter__(self) -> "LogContext":
        self._old_context = get_extra_context().copy()
        self._old_sheet = get_sheet()
        self._old_request_id = get_request_id()

        new_context = dict(self._new_context)
        sheet = new_context.pop("sheet", None)
        request_id = new_context.pop("request_id", None)

        if sheet is not None:
            set_sheet(sheet)
        if request_id is not None:
            set_request_id(request_id)

        merged = self._old_context.copy()
        merged.update(new_context)
        set_extra_context(merged)

        return self

    def __exit__(self, *args: Any) -> None:
        set_extra_context(self._old_context)
        set_sheet(self._old_sheet)
        set_request_id(self._old_request_id)


@contextmanager
def timed_operation(
    logger: StructuredLogger,
    operation: str,
) -> Generator[PerformanceMetrics, None, None]:
    """Time an operation and log its metrics on exit.

    The metrics are logged even when the body raises.

    Args:
        logger: Logger to use for output.
        operation: Name of the operation.

    Yields:
        PerformanceMetrics instance for tracking.
    """
    metrics = PerformanceMetrics(operation=operation)
    try:
        yield metrics
    finally:
        metrics.finish()
        logger.log_performance(metrics)


def configure_logging(
    level: int | str = logging.INFO,
    format_string: str | None = None,
    use_structured_formatter: bool = True,
) -> None:
    """Configure root logging for the application.

    Args:
        level: Log level (int or string like "INFO").
        format_string: Custom format string (uses default if None).
        use_structured_formatter: Whether to use the structured formatter.
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper())

    if format_string is None:
        format_string = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)

    formatter: logging.Formatter
    if use_structured_formatter:
        formatter = StructuredLogFormatter(format_string)
    else:
        formatter = logging.Formatter(format_string)

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)


def get_logger(name: str) -> StructuredLogger:
    """Get a structured logger for a module.

    Args:
        name: Logger name (typically __name__).

    Returns:
        StructuredLogger instance.
    """
    return StructuredLogger(name)
