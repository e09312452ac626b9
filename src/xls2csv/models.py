"""Pydantic models for conversion requests and API responses."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as PydanticValidationError

from xls2csv.utils.exceptions import ConfigurationError, ErrorCode

SEPARATORS: tuple[str, ...] = (",", ";", "\t")
"""Field separators accepted in the output."""

SEPARATOR_ALIASES: dict[str, str] = {"\\t": "\t", "tab": "\t"}
"""Spellings of the tab separator accepted from config files and CLIs."""


def normalize_separator(value: str) -> str:
    """Resolve separator aliases and reject anything not in SEPARATORS."""
    resolved = SEPARATOR_ALIASES.get(value, value)
    if resolved not in SEPARATORS:
        allowed = ", ".join(repr(s) for s in SEPARATORS)
        raise ValueError(f"Invalid separator: {value!r}. Must be one of: {allowed}")
    return resolved


class SheetSelection(str, Enum):
    """Which sheets of the workbook to convert."""

    ALL = "all"
    INDEX = "index"


class OutcomeStatus(str, Enum):
    """Result of converting one sheet."""

    SUCCESS = "success"
    FAILURE = "failure"


class ConversionRequest(BaseModel):
    """Options for one workbook conversion, validated at construction."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    sheet_selection: SheetSelection = Field(
        default=SheetSelection.ALL, description="Convert all sheets or one index"
    )
    target_sheet_index: int = Field(
        default=0, ge=0, description="Sheet to convert when selection is 'index'"
    )
    row_offset: int = Field(
        default=0,
        ge=0,
        description="Row number of the first row to process; N skips N-1 rows",
    )
    column_offset: int = Field(
        default=0, ge=0, description="Zero-based index of the first column emitted"
    )
    separator: str = Field(default=",", description="Output field separator")

    @field_validator("separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        return normalize_separator(v)

    @classmethod
    def from_options(cls, **options: Any) -> "ConversionRequest":
        """Build a request, raising ConfigurationError on invalid options.

        Unknown option names are rejected as well.
        """
        try:
            return cls(**options)
        except PydanticValidationError as e:
            errors = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            ]
            fields = {str(err["loc"][0]) for err in e.errors() if err["loc"]}
            if fields == {"separator"}:
                code = ErrorCode.INVALID_SEPARATOR
            elif fields and fields <= {"row_offset", "column_offset", "target_sheet_index"}:
                code = ErrorCode.INVALID_OFFSET
            else:
                code = ErrorCode.INVALID_CONFIGURATION
            raise ConfigurationError(
                message=f"Invalid conversion options: {'; '.join(errors)}",
                error_code=code,
                field=sorted(fields)[0] if len(fields) == 1 else None,
                errors=errors,
            ) from e


class HealthResponse(BaseModel):
    """Response model for health check endpoint."""

    status: str
    timestamp: str
    version: str


class SheetResult(BaseModel):
    """One sheet of a conversion response."""

    sheet_index: int = Field(..., description="Zero-based index of the sheet")
    sheet_name: str = Field(..., description="Name of the sheet")
    status: OutcomeStatus = Field(..., description="success or failure")
    attributes: dict[str, str] = Field(
        default_factory=dict,
        description="Artifact metadata (sheetname, filename, mime.type)",
    )
    content: str | None = Field(
        default=None, description="CSV text of the sheet on success"
    )
    rows_written: int = Field(default=0, description="Number of records written")
    error: str | None = Field(default=None, description="Failure cause")


class ConversionResponse(BaseModel):
    """Response model for the convert endpoint."""

    filename: str = Field(..., description="Original filename of the workbook")
    source_format: str = Field(..., description="Detected container format")
    sheet_count: int = Field(..., description="Number of sheets converted")
    failed_count: int = Field(..., description="Number of sheets that failed")
    sheets: list[SheetResult] = Field(default_factory=list)


class ErrorDetail(BaseModel):
    """Error detail model for API error responses."""

    detail: str = Field(..., description="Human-readable error message")
    error_code: str | None = Field(
        default=None,
        description="Machine-readable error code (e.g., 'E1003')",
    )
    details: dict[str, Any] | None = Field(
        default=None,
        description="Additional error details for debugging",
    )
    request_id: str | None = Field(
        default=None,
        description="Request ID for error correlation",
    )
