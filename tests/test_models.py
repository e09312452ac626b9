"""Tests for request and response models."""

import pytest
from pydantic import ValidationError

from xls2csv.models import (
    ConversionRequest,
    ConversionResponse,
    ErrorDetail,
    OutcomeStatus,
    SheetResult,
    SheetSelection,
    normalize_separator,
)
from xls2csv.utils.exceptions import ConfigurationError, ErrorCode


class TestNormalizeSeparator:
    """Tests for normalize_separator."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [(",", ","), (";", ";"), ("\t", "\t"), ("\\t", "\t"), ("tab", "\t")],
    )
    def test_accepted(self, raw: str, expected: str) -> None:
        assert normalize_separator(raw) == expected

    @pytest.mark.parametrize("raw", ["|", "", ",,", " "])
    def test_rejected(self, raw: str) -> None:
        with pytest.raises(ValueError, match="Invalid separator"):
            normalize_separator(raw)


class TestConversionRequest:
    """Tests for ConversionRequest."""

    def test_defaults(self) -> None:
        request = ConversionRequest()

        assert request.sheet_selection == SheetSelection.ALL
        assert request.target_sheet_index == 0
        assert request.row_offset == 0
        assert request.column_offset == 0
        assert request.separator == ","

    def test_is_frozen(self) -> None:
        request = ConversionRequest()
        with pytest.raises(ValidationError):
            request.row_offset = 5  # type: ignore[misc]

    def test_accepts_string_selection(self) -> None:
        request = ConversionRequest(sheet_selection="index", target_sheet_index=1)
        assert request.sheet_selection == SheetSelection.INDEX


class TestFromOptions:
    """Tests for ConversionRequest.from_options."""

    def test_valid_options(self) -> None:
        request = ConversionRequest.from_options(separator="tab", row_offset=2)
        assert request.separator == "\t"
        assert request.row_offset == 2

    def test_invalid_separator(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConversionRequest.from_options(separator="|")

        error = exc_info.value
        assert error.error_code == ErrorCode.INVALID_SEPARATOR
        assert error.field == "separator"
        assert error.http_status == 400

    @pytest.mark.parametrize(
        "field", ["row_offset", "column_offset", "target_sheet_index"]
    )
    def test_negative_offsets(self, field: str) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConversionRequest.from_options(**{field: -1})

        assert exc_info.value.error_code == ErrorCode.INVALID_OFFSET
        assert exc_info.value.field == field

    def test_multiple_errors(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConversionRequest.from_options(separator="|", row_offset=-1)

        error = exc_info.value
        assert error.error_code == ErrorCode.INVALID_CONFIGURATION
        assert error.field is None
        assert len(error.errors) == 2

    def test_unknown_option(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            ConversionRequest.from_options(quote_char='"')

        assert exc_info.value.error_code == ErrorCode.INVALID_CONFIGURATION
        assert exc_info.value.field == "quote_char"


class TestResponseModels:
    """Tests for API response models."""

    def test_conversion_response(self) -> None:
        response = ConversionResponse(
            filename="book.xlsx",
            source_format="xlsx",
            sheet_count=1,
            failed_count=0,
            sheets=[
                SheetResult(
                    sheet_index=0,
                    sheet_name="S0",
                    status=OutcomeStatus.SUCCESS,
                    content="a\n",
                )
            ],
        )
        data = response.model_dump()

        assert data["sheets"][0]["status"] == "success"
        assert data["sheets"][0]["attributes"] == {}
        assert data["sheets"][0]["error"] is None

    def test_error_detail_excludes_none(self) -> None:
        detail = ErrorDetail(detail="boom", error_code="E9001")
        assert detail.model_dump(exclude_none=True) == {
            "detail": "boom",
            "error_code": "E9001",
        }
