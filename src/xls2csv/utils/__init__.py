"""Utilities package for xls2csv.

This package provides:
- Centralized exception classes (exceptions.py)
- Structured logging utilities (logging.py)
"""

from xls2csv.utils.exceptions import (
    ConfigurationError,
    ErrorCode,
    FileError,
    HTTPStatusMixin,
    SheetError,
    SheetIndexOutOfRangeError,
    UnsupportedFormatError,
    WorkbookDecodeError,
    Xls2CsvError,
)
from xls2csv.utils.logging import (
    LogContext,
    StructuredLogger,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Exceptions
    "ConfigurationError",
    "ErrorCode",
    "FileError",
    "HTTPStatusMixin",
    "SheetError",
    "SheetIndexOutOfRangeError",
    "UnsupportedFormatError",
    "WorkbookDecodeError",
    "Xls2CsvError",
    # Logging
    "LogContext",
    "StructuredLogger",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
