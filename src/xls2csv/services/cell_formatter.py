"""Render typed cells as display strings.

The formatter is total over `Cell`: every variant, including blank and
missing positions, yields a string and nothing raises.
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Any

from xls2csv.workbook import Cell, CellType

DATE_FORMAT = "%Y-%m-%d"
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
TIME_FORMAT = "%H:%M:%S"

# Significant digits kept for non-integral floats, matching spreadsheet
# "General" display closely enough to hide binary rounding noise.
FLOAT_PRECISION = 15


class CellFormatter:
    """Stateless cell-to-string formatter.

    One instance is created per sheet conversion and reused for every cell.
    """

    def format(self, cell: Cell) -> str:
        """Return the display string for `cell`."""
        cell_type = cell.cell_type
        if cell_type in (CellType.BLANK, CellType.MISSING):
            return ""
        if cell_type == CellType.FORMULA:
            if cell.result is None:
                return ""
            return self.format(cell.result)
        if cell_type == CellType.NUMERIC:
            return self.format_number(cell.value)
        if cell_type == CellType.BOOLEAN:
            return "TRUE" if cell.value else "FALSE"
        if cell_type == CellType.DATE:
            return self.format_date(cell.value)
        if cell.value is None:
            return ""
        return str(cell.value)

    @staticmethod
    def format_number(value: Any) -> str:
        """Locale-independent decimal form of a numeric value."""
        if isinstance(value, bool):
            return "TRUE" if value else "FALSE"
        if isinstance(value, int):
            return str(value)
        if isinstance(value, Decimal):
            return format(value, "f")
        if not isinstance(value, float):
            return str(value)
        if math.isnan(value) or math.isinf(value):
            return str(value)
        if value.is_integer() and abs(value) < 1e15:
            return str(int(value))
        return format(value, f".{FLOAT_PRECISION}g").replace("e", "E")

    @staticmethod
    def format_date(value: Any) -> str:
        """Render dates, times and durations in ISO-like form."""
        if isinstance(value, datetime):
            if value.time() == time(0, 0):
                return value.strftime(DATE_FORMAT)
            return value.strftime(DATETIME_FORMAT)
        if isinstance(value, date):
            return value.strftime(DATE_FORMAT)
        if isinstance(value, time):
            return value.strftime(TIME_FORMAT)
        if isinstance(value, timedelta):
            total = int(value.total_seconds())
            sign = "-" if total < 0 else ""
            hours, rest = divmod(abs(total), 3600)
            minutes, seconds = divmod(rest, 60)
            return f"{sign}{hours}:{minutes:02d}:{seconds:02d}"
        if value is None:
            return ""
        return str(value)


def format_cell(cell: Cell) -> str:
    """Format a single cell with a shared formatter."""
    return _DEFAULT_FORMATTER.format(cell)


_DEFAULT_FORMATTER = CellFormatter()
