"""Tests for the cell formatter."""

from datetime import date, datetime, time, timedelta
from decimal import Decimal

import pytest

from xls2csv.services.cell_formatter import CellFormatter, format_cell
from xls2csv.workbook import Cell, CellType


@pytest.fixture
def formatter() -> CellFormatter:
    return CellFormatter()


class TestEmptyCells:
    """Blank and missing positions."""

    def test_missing_and_blank_render_identically(self, formatter: CellFormatter) -> None:
        assert formatter.format(Cell.missing()) == ""
        assert formatter.format(Cell.blank()) == ""

    def test_text_none_value_renders_empty(self, formatter: CellFormatter) -> None:
        assert formatter.format(Cell(CellType.TEXT, None)) == ""


class TestScalarCells:
    """Text, numeric and boolean cells."""

    def test_text_is_verbatim(self, formatter: CellFormatter) -> None:
        assert formatter.format(Cell(CellType.TEXT, "hello, world")) == "hello, world"

    def test_text_keeps_embedded_newline(self, formatter: CellFormatter) -> None:
        """Newline replacement happens per line, not per cell."""
        assert formatter.format(Cell(CellType.TEXT, "a\nb")) == "a\nb"

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (42, "42"),
            (-7, "-7"),
            (3.0, "3"),
            (123.45, "123.45"),
            (0.1 + 0.2, "0.3"),
            (1e20, "1E+20"),
            (1.5e-10, "1.5E-10"),
            (Decimal("1.50"), "1.50"),
        ],
    )
    def test_numbers(self, formatter: CellFormatter, value: object, expected: str) -> None:
        assert formatter.format(Cell(CellType.NUMERIC, value)) == expected

    def test_booleans(self, formatter: CellFormatter) -> None:
        assert formatter.format(Cell(CellType.BOOLEAN, True)) == "TRUE"
        assert formatter.format(Cell(CellType.BOOLEAN, False)) == "FALSE"

    def test_error_cell_shows_error_text(self, formatter: CellFormatter) -> None:
        assert formatter.format(Cell(CellType.ERROR, "#DIV/0!")) == "#DIV/0!"


class TestDateCells:
    """Dates, times and durations."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            (datetime(2024, 1, 15), "2024-01-15"),
            (datetime(2024, 1, 15, 13, 5, 9), "2024-01-15 13:05:09"),
            (date(1999, 12, 31), "1999-12-31"),
            (time(7, 30), "07:30:00"),
            (timedelta(hours=26, minutes=3, seconds=4), "26:03:04"),
            (timedelta(seconds=-90), "-0:01:30"),
        ],
    )
    def test_date_rendering(
        self, formatter: CellFormatter, value: object, expected: str
    ) -> None:
        assert formatter.format(Cell(CellType.DATE, value)) == expected


class TestFormulaCells:
    """Formula cells render their cached result."""

    def test_formula_uses_cached_result(self, formatter: CellFormatter) -> None:
        cell = Cell(
            CellType.FORMULA,
            value="=SUM(A1:A2)",
            result=Cell(CellType.NUMERIC, 3.0),
        )
        assert formatter.format(cell) == "3"

    def test_formula_without_result_is_empty(self, formatter: CellFormatter) -> None:
        cell = Cell(CellType.FORMULA, value="=A1")
        assert formatter.format(cell) == ""

    def test_formula_text_result(self, formatter: CellFormatter) -> None:
        cell = Cell(
            CellType.FORMULA, value='="x"&"y"', result=Cell(CellType.TEXT, "xy")
        )
        assert formatter.format(cell) == "xy"


def test_module_level_format_cell() -> None:
    assert format_cell(Cell(CellType.NUMERIC, 5)) == "5"
