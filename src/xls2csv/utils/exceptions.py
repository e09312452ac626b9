"""Centralized exception classes for xls2csv.

This module provides a hierarchy of custom exceptions with error codes,
HTTP status code mapping, and structured error details so that the CLI,
the HTTP API and library callers all report failures the same way.

Exception Hierarchy:
    Xls2CsvError (base)
    ├── FileError
    │   ├── InputFileNotFoundError
    │   ├── FileTooLargeError
    │   ├── UnsupportedFormatError
    │   └── WorkbookDecodeError
    ├── ConfigurationError
    └── SheetError
        ├── SheetIndexOutOfRangeError
        └── SheetConversionError

Error Codes:
    All errors have a unique error code (e.g., "E1001") that can be used
    for programmatic error handling and documentation.
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Enumeration of all error codes used in the application.

    Error codes are grouped by category:
    - E1xxx: Input file / workbook errors
    - E2xxx: Configuration errors
    - E3xxx: Sheet conversion errors
    - E9xxx: Internal/unexpected errors
    """

    # Input errors (E1xxx)
    FILE_NOT_FOUND = "E1001"
    FILE_TOO_LARGE = "E1002"
    UNSUPPORTED_FORMAT = "E1003"
    FILE_READ_ERROR = "E1004"
    FILE_WRITE_ERROR = "E1005"
    WORKBOOK_DECODE_FAILED = "E1006"

    # Configuration errors (E2xxx)
    INVALID_CONFIGURATION = "E2001"
    INVALID_SEPARATOR = "E2002"
    INVALID_OFFSET = "E2003"

    # Sheet errors (E3xxx)
    SHEET_INDEX_OUT_OF_RANGE = "E3001"
    SHEET_CONVERSION_FAILED = "E3002"

    # Internal errors (E9xxx)
    INTERNAL_ERROR = "E9001"


class HTTPStatusMixin:
    """Mixin that provides HTTP status code for exceptions.

    Subclasses set the `http_status` class attribute; the API layer uses it
    to build error responses.
    """

    http_status: int = 500

    def get_http_status(self) -> int:
        """Get the HTTP status code for this exception.

        Returns:
            HTTP status code appropriate for this error.
        """
        return self.http_status


class Xls2CsvError(Exception, HTTPStatusMixin):
    """Base exception for all xls2csv errors.

    Attributes:
        message: Human-readable error message.
        error_code: Unique error code from ErrorCode enum.
        details: Optional dictionary with additional error details.
        http_status: HTTP status code for API responses (default 500).
    """

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Error code from ErrorCode enum.
            details: Optional additional details about the error.
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = dict(details or {})

    def to_dict(self) -> dict[str, Any]:
        """Convert the exception to a dictionary for API responses.

        Returns:
            Dictionary with error information.
        """
        result: dict[str, Any] = {
            "error_code": self.error_code.value,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code.value}] {self.message}"


# =============================================================================
# Input Errors (E1xxx)
# =============================================================================


class FileError(Xls2CsvError):
    """Base class for input file errors."""

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.FILE_READ_ERROR,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with file path information.

        Args:
            message: Error message.
            error_code: Error code.
            file_path: Path or name of the problematic file.
            details: Additional details.
        """
        details = dict(details or {})
        if file_path:
            details["file_path"] = file_path
        super().__init__(message, error_code, details)
        self.file_path = file_path


class InputFileNotFoundError(FileError):
    """Raised when the workbook to convert does not exist."""

    http_status: int = 404

    def __init__(
        self,
        file_path: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        message = message or f"File not found: {file_path}"
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_NOT_FOUND,
            file_path=file_path,
            details=details,
        )


class FileTooLargeError(FileError):
    """Raised when a workbook exceeds the configured size limit."""

    http_status: int = 413

    def __init__(
        self,
        file_size: int,
        max_size: int,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with size information.

        Args:
            file_size: Actual file size in bytes.
            max_size: Maximum allowed size in bytes.
            file_path: Optional file path.
            details: Additional details.
        """
        details = dict(details or {})
        details["file_size_bytes"] = file_size
        details["max_size_bytes"] = max_size
        message = (
            f"File size ({file_size} bytes) exceeds maximum "
            f"allowed size ({max_size} bytes)"
        )
        super().__init__(
            message=message,
            error_code=ErrorCode.FILE_TOO_LARGE,
            file_path=file_path,
            details=details,
        )
        self.file_size = file_size
        self.max_size = max_size


class UnsupportedFormatError(FileError):
    """Raised when the input is not a workbook container we can decode."""

    http_status: int = 415

    def __init__(
        self,
        message: str,
        detected_format: str | None = None,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if detected_format:
            details["detected_format"] = detected_format
        super().__init__(
            message=message,
            error_code=ErrorCode.UNSUPPORTED_FORMAT,
            file_path=file_path,
            details=details,
        )
        self.detected_format = detected_format


class WorkbookDecodeError(FileError):
    """Raised when the spreadsheet library cannot parse the input.

    A decode failure aborts the whole request: no per-sheet outcomes are
    produced.
    """

    http_status: int = 422

    def __init__(
        self,
        message: str,
        source_format: str | None = None,
        file_path: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if source_format:
            details["source_format"] = source_format
        super().__init__(
            message=message,
            error_code=ErrorCode.WORKBOOK_DECODE_FAILED,
            file_path=file_path,
            details=details,
        )
        self.source_format = source_format


# =============================================================================
# Configuration Errors (E2xxx)
# =============================================================================


class ConfigurationError(Xls2CsvError):
    """Raised when conversion options fail validation.

    Configuration errors are detected before any conversion begins.
    """

    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INVALID_CONFIGURATION,
        field: str | None = None,
        errors: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with validation details.

        Args:
            message: Main error message.
            error_code: Error code.
            field: Option that failed validation.
            errors: List of individual validation errors.
            details: Additional details.
        """
        details = dict(details or {})
        if field:
            details["field"] = field
        if errors:
            details["validation_errors"] = errors
        super().__init__(message, error_code, details)
        self.field = field
        self.errors = errors or []


# =============================================================================
# Sheet Errors (E3xxx)
# =============================================================================


class SheetError(Xls2CsvError):
    """Base class for errors tied to one sheet of the workbook."""

    http_status: int = 500

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.SHEET_CONVERSION_FAILED,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if sheet_name is not None:
            details["sheet_name"] = sheet_name
        if sheet_index is not None:
            details["sheet_index"] = sheet_index
        super().__init__(message, error_code, details)
        self.sheet_name = sheet_name
        self.sheet_index = sheet_index


class SheetIndexOutOfRangeError(SheetError):
    """Raised when single-sheet mode targets a sheet that does not exist."""

    http_status: int = 400

    def __init__(
        self,
        sheet_index: int,
        sheet_count: int,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        details["sheet_count"] = sheet_count
        super().__init__(
            message=(
                f"Sheet index out of range: {sheet_index} "
                f"(workbook has {sheet_count} sheet(s))"
            ),
            error_code=ErrorCode.SHEET_INDEX_OUT_OF_RANGE,
            sheet_index=sheet_index,
            details=details,
        )
        self.sheet_count = sheet_count


class SheetConversionError(SheetError):
    """Raised when writing one sheet's output fails.

    The dispatcher records this as a failure outcome for the sheet and
    moves on to the next one.
    """

    def __init__(
        self,
        message: str,
        sheet_name: str | None = None,
        sheet_index: int | None = None,
        cause: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        if cause:
            details["cause"] = cause
        super().__init__(
            message=message,
            error_code=ErrorCode.SHEET_CONVERSION_FAILED,
            sheet_name=sheet_name,
            sheet_index=sheet_index,
            details=details,
        )
        self.cause = cause
