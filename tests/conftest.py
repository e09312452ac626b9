from __future__ import annotations

import io
from collections.abc import Callable
from datetime import datetime

import pytest
from openpyxl import Workbook as OpenpyxlWorkbook

from xls2csv.models import ConversionRequest
from xls2csv.utils.logging import clear_context
from xls2csv.workbook import Workbook


def save_workbook(wb: OpenpyxlWorkbook) -> bytes:
    """Serialize an openpyxl workbook to .xlsx bytes."""
    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


@pytest.fixture(autouse=True)
def _clear_log_context() -> None:
    clear_context()


@pytest.fixture
def make_xlsx() -> Callable[[dict[str, list[list[object]]]], bytes]:
    """Build .xlsx bytes from {sheet name: rows of values}."""

    def _make(sheets: dict[str, list[list[object]]]) -> bytes:
        wb = OpenpyxlWorkbook()
        wb.remove(wb.active)
        for name, rows in sheets.items():
            ws = wb.create_sheet(name)
            for row in rows:
                ws.append(row)
        return save_workbook(wb)

    return _make


@pytest.fixture
def two_sheet_xlsx(make_xlsx: Callable[[dict[str, list[list[object]]]], bytes]) -> bytes:
    """Workbook with sheets S0 and S1, as used by the dispatcher scenarios."""
    return make_xlsx(
        {
            "S0": [["a", "b"], ["c", "d"]],
            "S1": [["x"]],
        }
    )


@pytest.fixture
def typed_xlsx() -> bytes:
    """Workbook with one typed cell of each kind on the second row."""
    wb = OpenpyxlWorkbook()
    ws = wb.active
    ws.title = "Typed"
    ws["A1"] = "Name"
    ws["B1"] = "Amount"
    ws["A2"] = "Alice"
    ws["B2"] = 123.45
    ws["C2"] = True
    ws["D2"] = datetime(2024, 1, 15)
    ws["E2"] = "=SUM(B2,B3)"
    ws["A3"] = "Bob"
    ws["B3"] = 10
    return save_workbook(wb)


@pytest.fixture
def two_sheet_workbook() -> Workbook:
    return Workbook.from_values(
        {
            "S0": [["a", "b"], ["c", "d"]],
            "S1": [["x"]],
        }
    )


@pytest.fixture
def default_request() -> ConversionRequest:
    return ConversionRequest()
