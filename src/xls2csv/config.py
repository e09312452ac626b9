"""Configuration management for xls2csv.

This module provides centralized configuration using pydantic-settings.
All configuration options can be set via environment variables with the
XLS2CSV_ prefix, or via a .env file in the working directory.

Environment Variables:
    XLS2CSV_SHEET_SELECTION: Default sheet selection, all or index (default: all)
    XLS2CSV_TARGET_SHEET_INDEX: Default sheet index for index mode (default: 0)
    XLS2CSV_ROW_OFFSET: Default row offset (default: 0)
    XLS2CSV_COLUMN_OFFSET: Default column offset (default: 0)
    XLS2CSV_SEPARATOR: Default field separator: ",", ";" or "\\t" (default: ,)
    XLS2CSV_MAX_FILE_SIZE_MB: Maximum workbook size in MB (default: 50)
    XLS2CSV_OUTPUT_DIR: Directory the CLI writes CSV files to (default: exports)
    XLS2CSV_LOG_LEVEL: Logging level (default: INFO)
    XLS2CSV_DEBUG: Enable debug mode (default: false)
    XLS2CSV_SERVER_HOST: Server bind host (default: 0.0.0.0)
    XLS2CSV_SERVER_PORT: Server bind port (default: 8000)
"""

import logging
from typing import Any

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from xls2csv.models import ConversionRequest, SheetSelection, normalize_separator


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Example .env file:
        XLS2CSV_SEPARATOR=;
        XLS2CSV_ROW_OFFSET=2
        XLS2CSV_LOG_LEVEL=DEBUG
    """

    model_config = SettingsConfigDict(
        env_prefix="XLS2CSV_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # Conversion Defaults
    # =========================================================================

    sheet_selection: SheetSelection = SheetSelection.ALL
    """Convert every sheet (all) or a single sheet (index)."""

    target_sheet_index: int = 0
    """Zero-based sheet to convert when sheet_selection is index."""

    row_offset: int = 0
    """Row number of the first row to process. N skips N-1 leading rows."""

    column_offset: int = 0
    """Zero-based index of the first column written for every row."""

    separator: str = ","
    """Field separator used in the output."""

    # =========================================================================
    # Input / Output Settings
    # =========================================================================

    max_file_size_mb: int = 50
    """Maximum workbook size in megabytes."""

    output_dir: str = "exports"
    """Directory the CLI writes converted sheets to."""

    # =========================================================================
    # Logging Settings
    # =========================================================================

    log_level: str = "INFO"
    """Logging level: DEBUG, INFO, WARNING, ERROR, or CRITICAL."""

    debug: bool = False
    """Enable debug mode with additional error details."""

    # =========================================================================
    # Server Settings
    # =========================================================================

    server_host: str = "0.0.0.0"
    """Host address for the server to bind to."""

    server_port: int = 8000
    """Port for the server to listen on."""

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(sorted(valid_levels))}"
            )
        return upper_v

    @field_validator("row_offset", "column_offset", "target_sheet_index")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Value must be a non-negative integer, got {v}")
        return v

    @field_validator("separator")
    @classmethod
    def validate_separator(cls, v: str) -> str:
        return normalize_separator(v)

    @field_validator("max_file_size_mb")
    @classmethod
    def validate_file_size(cls, v: int) -> int:
        """Validate file size is positive and reasonable."""
        if not 1 <= v <= 500:
            raise ValueError(f"max_file_size_mb must be between 1 and 500, got {v}")
        return v

    @field_validator("server_port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        """Validate port is in valid range."""
        if not 1 <= v <= 65535:
            raise ValueError(f"server_port must be between 1 and 65535, got {v}")
        return v

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return self.max_file_size_mb * 1024 * 1024

    @property
    def log_level_int(self) -> int:
        """Get log level as integer for logging module."""
        level: int = getattr(logging, self.log_level)
        return level

    def default_request(self, **overrides: Any) -> ConversionRequest:
        """Build a ConversionRequest from the configured defaults.

        Keyword arguments whose value is None are ignored, so CLI and form
        values can be passed straight through.

        Raises:
            ConfigurationError: If an override is invalid.
        """
        options: dict[str, Any] = {
            "sheet_selection": self.sheet_selection,
            "target_sheet_index": self.target_sheet_index,
            "row_offset": self.row_offset,
            "column_offset": self.column_offset,
            "separator": self.separator,
        }
        options.update({k: v for k, v in overrides.items() if v is not None})
        return ConversionRequest.from_options(**options)

    def to_safe_dict(self) -> dict[str, Any]:
        """Convert settings to a dictionary suitable for logging."""
        return {
            "sheet_selection": self.sheet_selection.value,
            "target_sheet_index": self.target_sheet_index,
            "row_offset": self.row_offset,
            "column_offset": self.column_offset,
            "separator": repr(self.separator),
            "max_file_size_mb": self.max_file_size_mb,
            "output_dir": self.output_dir,
            "log_level": self.log_level,
            "debug": self.debug,
            "server_host": self.server_host,
            "server_port": self.server_port,
        }


def validate_settings_on_startup(s: Settings) -> None:
    """Log a configuration summary and warn about unusual settings.

    Args:
        s: Settings instance to validate.
    """
    logger = logging.getLogger(__name__)

    if s.sheet_selection == SheetSelection.ALL and s.target_sheet_index != 0:
        logger.warning(
            "XLS2CSV_TARGET_SHEET_INDEX is set but sheet selection is 'all'; "
            "the index is ignored unless a request selects a single sheet."
        )

    logger.info(
        f"Configuration loaded: log_level={s.log_level}, debug={s.debug}, "
        f"separator={s.separator!r}, row_offset={s.row_offset}, "
        f"column_offset={s.column_offset}, max_file_size_mb={s.max_file_size_mb}"
    )


# Create the global settings instance
settings = Settings()
