"""Tests for projecting a row onto an output line."""

import pytest

from xls2csv.services.cell_formatter import CellFormatter
from xls2csv.services.row_projector import LINE_TERMINATOR, project_row
from xls2csv.workbook import Cell, CellType, Row, cell_from_value


def make_row(values: list[object]) -> Row:
    return Row(index=0, cells={i: cell_from_value(v) for i, v in enumerate(values)})


@pytest.fixture
def formatter() -> CellFormatter:
    return CellFormatter()


class TestProjectRow:
    """Tests for project_row."""

    def test_column_offset_skips_leading_columns(self, formatter: CellFormatter) -> None:
        row = make_row(["a", "b", "c"])
        assert project_row(row, 1, ",", formatter) == "b,c\n"

    def test_zero_offset_emits_every_column(self, formatter: CellFormatter) -> None:
        row = make_row(["a", "b", "c"])
        assert project_row(row, 0, ";", formatter) == "a;b;c\n"

    def test_tab_separator(self, formatter: CellFormatter) -> None:
        row = make_row(["a", "b"])
        assert project_row(row, 0, "\t", formatter) == "a\tb\n"

    @pytest.mark.parametrize("offset", [3, 4, 10])
    def test_offset_at_or_past_boundary_yields_bare_terminator(
        self, formatter: CellFormatter, offset: int
    ) -> None:
        row = make_row(["a", "b", "c"])
        assert project_row(row, offset, ",", formatter) == LINE_TERMINATOR

    def test_empty_row_yields_bare_terminator(self, formatter: CellFormatter) -> None:
        assert project_row(Row(index=0), 0, ",", formatter) == "\n"

    def test_negative_offset_yields_bare_terminator(
        self, formatter: CellFormatter
    ) -> None:
        row = make_row(["a", "b"])
        assert project_row(row, -1, ",", formatter) == "\n"

    def test_gaps_render_as_empty_fields(self, formatter: CellFormatter) -> None:
        row = Row(
            index=0,
            cells={0: Cell(CellType.TEXT, "a"), 3: Cell(CellType.TEXT, "d")},
        )
        assert project_row(row, 0, ",", formatter) == "a,,,d\n"

    def test_newlines_inside_cells_become_spaces(self, formatter: CellFormatter) -> None:
        row = make_row(["line1\nline2", "x"])
        line = project_row(row, 0, ",", formatter)
        assert line == "line1 line2,x\n"
        assert line.count("\n") == 1

    def test_separator_inside_value_is_not_escaped(
        self, formatter: CellFormatter
    ) -> None:
        row = make_row(["a,b", "c"])
        assert project_row(row, 0, ",", formatter) == "a,b,c\n"

    def test_mixed_types(self, formatter: CellFormatter) -> None:
        row = make_row(["x", 2.5, True, None])
        assert project_row(row, 0, ",", formatter) == "x,2.5,TRUE,\n"
