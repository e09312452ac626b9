"""Tests for configuration management module."""

import logging
import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from xls2csv.config import Settings, validate_settings_on_startup
from xls2csv.models import SheetSelection
from xls2csv.utils.exceptions import ConfigurationError, ErrorCode


class TestSettings:
    """Tests for the Settings class."""

    def test_default_values(self) -> None:
        """Test default configuration values."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        # Conversion defaults
        assert settings.sheet_selection == SheetSelection.ALL
        assert settings.target_sheet_index == 0
        assert settings.row_offset == 0
        assert settings.column_offset == 0
        assert settings.separator == ","

        # Input / output defaults
        assert settings.max_file_size_mb == 50
        assert settings.output_dir == "exports"

        # Logging and server defaults
        assert settings.log_level == "INFO"
        assert settings.debug is False
        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8000

    def test_environment_variable_prefix(self) -> None:
        """Environment variables use the XLS2CSV_ prefix."""
        env_vars = {
            "XLS2CSV_SEPARATOR": ";",
            "XLS2CSV_ROW_OFFSET": "3",
            "XLS2CSV_SHEET_SELECTION": "index",
            "XLS2CSV_TARGET_SHEET_INDEX": "2",
            "XLS2CSV_LOG_LEVEL": "debug",
        }
        with patch.dict(os.environ, env_vars, clear=True):
            settings = Settings(_env_file=None)

        assert settings.separator == ";"
        assert settings.row_offset == 3
        assert settings.sheet_selection == SheetSelection.INDEX
        assert settings.target_sheet_index == 2
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize("raw", ["\t", "\\t", "tab"])
    def test_tab_separator_aliases(self, raw: str) -> None:
        with patch.dict(os.environ, {"XLS2CSV_SEPARATOR": raw}, clear=True):
            settings = Settings(_env_file=None)
        assert settings.separator == "\t"

    def test_max_file_size_bytes_property(self) -> None:
        """Test max_file_size_bytes computed property."""
        with patch.dict(os.environ, {"XLS2CSV_MAX_FILE_SIZE_MB": "10"}, clear=True):
            settings = Settings(_env_file=None)

        assert settings.max_file_size_bytes == 10 * 1024 * 1024

    def test_log_level_int_property(self) -> None:
        """Test log_level_int computed property."""
        test_cases = [
            ("DEBUG", logging.DEBUG),
            ("INFO", logging.INFO),
            ("WARNING", logging.WARNING),
            ("ERROR", logging.ERROR),
            ("CRITICAL", logging.CRITICAL),
        ]

        for level_str, expected_int in test_cases:
            with patch.dict(os.environ, {"XLS2CSV_LOG_LEVEL": level_str}, clear=True):
                settings = Settings(_env_file=None)
            assert settings.log_level_int == expected_int, f"Failed for {level_str}"

    def test_to_safe_dict(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        safe_dict = settings.to_safe_dict()

        assert safe_dict["sheet_selection"] == "all"
        assert safe_dict["separator"] == "','"
        assert safe_dict["max_file_size_mb"] == 50


class TestSettingsValidation:
    """Tests for settings validators."""

    @pytest.mark.parametrize(
        ("name", "value"),
        [
            ("XLS2CSV_SEPARATOR", "|"),
            ("XLS2CSV_ROW_OFFSET", "-1"),
            ("XLS2CSV_COLUMN_OFFSET", "-5"),
            ("XLS2CSV_TARGET_SHEET_INDEX", "-1"),
            ("XLS2CSV_MAX_FILE_SIZE_MB", "0"),
            ("XLS2CSV_MAX_FILE_SIZE_MB", "501"),
            ("XLS2CSV_SERVER_PORT", "70000"),
            ("XLS2CSV_LOG_LEVEL", "VERBOSE"),
            ("XLS2CSV_SHEET_SELECTION", "some"),
        ],
    )
    def test_invalid_values_rejected(self, name: str, value: str) -> None:
        with patch.dict(os.environ, {name: value}, clear=True):
            with pytest.raises(ValidationError):
                Settings(_env_file=None)


class TestDefaultRequest:
    """Tests for Settings.default_request."""

    def test_uses_configured_defaults(self) -> None:
        env_vars = {"XLS2CSV_SEPARATOR": "tab", "XLS2CSV_COLUMN_OFFSET": "2"}
        with patch.dict(os.environ, env_vars, clear=True):
            settings = Settings(_env_file=None)

        request = settings.default_request()

        assert request.separator == "\t"
        assert request.column_offset == 2
        assert request.sheet_selection == SheetSelection.ALL

    def test_overrides_win_and_none_is_ignored(self) -> None:
        with patch.dict(os.environ, {"XLS2CSV_ROW_OFFSET": "4"}, clear=True):
            settings = Settings(_env_file=None)

        request = settings.default_request(row_offset=None, separator=";")

        assert request.row_offset == 4
        assert request.separator == ";"

    def test_invalid_override_raises_configuration_error(self) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        with pytest.raises(ConfigurationError) as exc_info:
            settings.default_request(separator="|")

        assert exc_info.value.error_code == ErrorCode.INVALID_SEPARATOR


class TestValidateSettingsOnStartup:
    """Tests for validate_settings_on_startup."""

    def test_logs_summary(self, caplog: pytest.LogCaptureFixture) -> None:
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        with caplog.at_level(logging.INFO, logger="xls2csv.config"):
            validate_settings_on_startup(settings)

        assert "Configuration loaded" in caplog.text
        assert "WARNING" not in [r.levelname for r in caplog.records]

    def test_warns_on_ignored_sheet_index(
        self, caplog: pytest.LogCaptureFixture
    ) -> None:
        with patch.dict(os.environ, {"XLS2CSV_TARGET_SHEET_INDEX": "3"}, clear=True):
            settings = Settings(_env_file=None)

        with caplog.at_level(logging.INFO, logger="xls2csv.config"):
            validate_settings_on_startup(settings)

        assert any(r.levelname == "WARNING" for r in caplog.records)
