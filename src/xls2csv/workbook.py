"""Dataclasses representing a decoded spreadsheet workbook."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import Any


class CellType(str, Enum):
    """Kind of value held by a cell."""

    NUMERIC = "numeric"
    TEXT = "text"
    BOOLEAN = "boolean"
    DATE = "date"
    FORMULA = "formula"
    ERROR = "error"
    BLANK = "blank"
    MISSING = "missing"


@dataclass(frozen=True)
class Cell:
    """A single typed cell value.

    For formula cells `value` holds the formula text and `result` the cached
    evaluated value (or None when the workbook carries no cached result).
    """

    cell_type: CellType
    value: Any = None
    result: Cell | None = None

    @classmethod
    def missing(cls) -> Cell:
        """A position that was never written."""
        return _MISSING

    @classmethod
    def blank(cls) -> Cell:
        """A position that exists but holds no value."""
        return _BLANK

    @property
    def is_empty(self) -> bool:
        return self.cell_type in (CellType.BLANK, CellType.MISSING)


_MISSING = Cell(CellType.MISSING)
_BLANK = Cell(CellType.BLANK)


@dataclass
class Row:
    """A sparse row of cells keyed by zero-based column index."""

    index: int
    cells: dict[int, Cell] = field(default_factory=dict)

    @property
    def last_column(self) -> int:
        """Exclusive upper bound of the populated columns (0 when empty)."""
        if not self.cells:
            return 0
        return max(self.cells) + 1

    def cell_at(self, column: int) -> Cell:
        """Return the cell at `column`, or the missing cell if absent."""
        return self.cells.get(column, _MISSING)


@dataclass
class Sheet:
    """A single worksheet; absent rows are not present in `rows`."""

    index: int
    name: str
    rows: list[Row] = field(default_factory=list)


@dataclass
class Workbook:
    """A decoded workbook: an ordered list of sheets."""

    sheets: list[Sheet]
    source_format: str = "xlsx"

    @property
    def sheet_count(self) -> int:
        return len(self.sheets)

    @property
    def sheet_names(self) -> list[str]:
        return [sheet.name for sheet in self.sheets]

    @classmethod
    def from_values(
        cls, sheets: dict[str, list[list[Any]]], source_format: str = "xlsx"
    ) -> Workbook:
        """Build a workbook from plain Python values.

        None becomes a blank cell; strings, numbers, booleans and dates are
        typed accordingly. Useful for tests and for callers that already
        hold tabular data.
        """
        built: list[Sheet] = []
        for sheet_index, (name, rows) in enumerate(sheets.items()):
            sheet_rows = [
                Row(
                    index=row_index,
                    cells={col: cell_from_value(v) for col, v in enumerate(values)},
                )
                for row_index, values in enumerate(rows)
            ]
            built.append(Sheet(index=sheet_index, name=name, rows=sheet_rows))
        return cls(sheets=built, source_format=source_format)


def cell_from_value(value: Any) -> Cell:
    """Map a plain Python value onto a typed cell."""
    if value is None:
        return _BLANK
    if isinstance(value, Cell):
        return value
    if isinstance(value, bool):
        return Cell(CellType.BOOLEAN, value)
    if isinstance(value, (date, time, timedelta)):
        return Cell(CellType.DATE, value)
    if isinstance(value, (int, float, Decimal)):
        return Cell(CellType.NUMERIC, value)
    if isinstance(value, str) and value == "":
        return _BLANK
    return Cell(CellType.TEXT, str(value))
