"""Decode workbook bytes into the Workbook/Sheet/Row/Cell model.

OOXML workbooks are read with openpyxl, legacy BIFF workbooks with xlrd.
Positions holding a value and styled positions without one become cells, so
a formatted but empty cell extends its row. Rows with no cell at all are
absent. Empty text is a blank cell in both formats.
"""

from __future__ import annotations

import io
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import xlrd
from openpyxl import load_workbook
from openpyxl.cell import Cell as OpenpyxlCell
from openpyxl.worksheet.worksheet import Worksheet

from xls2csv.config import settings
from xls2csv.services.format_detector import FormatDetector, WorkbookFormat
from xls2csv.utils.exceptions import (
    FileTooLargeError,
    InputFileNotFoundError,
    WorkbookDecodeError,
)
from xls2csv.utils.logging import get_logger
from xls2csv.workbook import Cell, CellType, Row, Sheet, Workbook, cell_from_value

logger = get_logger(__name__)


class WorkbookReader:
    """Decode .xlsx/.xlsm and .xls content into a Workbook."""

    def __init__(
        self,
        max_file_size_bytes: int | None = None,
        format_detector: FormatDetector | None = None,
    ) -> None:
        self.max_file_size_bytes = (
            max_file_size_bytes
            if max_file_size_bytes is not None
            else settings.max_file_size_bytes
        )
        self.format_detector = format_detector or FormatDetector()

    def read_path(self, file_path: str | Path) -> Workbook:
        """Decode a workbook stored on disk."""
        path = Path(file_path)
        if not path.is_file():
            raise InputFileNotFoundError(str(path))
        return self.read(path.read_bytes(), filename=path.name)

    def read(self, content: bytes, filename: str | None = None) -> Workbook:
        """Decode workbook bytes.

        Raises:
            FileTooLargeError: If the content exceeds the size limit.
            UnsupportedFormatError: If the container format is unknown.
            WorkbookDecodeError: If the spreadsheet library rejects the input.
        """
        if len(content) > self.max_file_size_bytes:
            raise FileTooLargeError(
                file_size=len(content),
                max_size=self.max_file_size_bytes,
                file_path=filename,
            )

        source_format = self.format_detector.detect_from_content(content, filename)
        if source_format == WorkbookFormat.XLS:
            workbook = self._read_xls(content, filename)
        else:
            workbook = self._read_xlsx(content, filename)

        logger.info(
            "Workbook decoded",
            filename=filename,
            source_format=source_format.value,
            sheet_count=workbook.sheet_count,
        )
        return workbook

    # ------------------------------------------------------------------ #
    # OOXML (openpyxl)
    # ------------------------------------------------------------------ #

    def _read_xlsx(self, content: bytes, filename: str | None) -> Workbook:
        try:
            # Load twice: once to see formulas, once for their cached results
            formula_wb = load_workbook(io.BytesIO(content), data_only=False)
            computed_wb = load_workbook(io.BytesIO(content), data_only=True)
        except Exception as e:
            raise WorkbookDecodeError(
                f"Unable to decode workbook: {e}",
                source_format=WorkbookFormat.XLSX.value,
                file_path=filename,
                details={"error_type": type(e).__name__},
            ) from e

        sheets = [
            self._build_xlsx_sheet(index, ws, computed_wb[ws.title])
            for index, ws in enumerate(formula_wb.worksheets)
        ]
        return Workbook(sheets=sheets, source_format=WorkbookFormat.XLSX.value)

    def _build_xlsx_sheet(
        self, index: int, sheet: Worksheet, computed_sheet: Worksheet
    ) -> Sheet:
        rows: list[Row] = []
        row_iter: Iterable[tuple[OpenpyxlCell, ...]] = sheet.iter_rows()
        computed_iter = computed_sheet.iter_rows(values_only=True)

        for row_cells, computed_values in zip(row_iter, computed_iter, strict=True):
            cells: dict[int, Cell] = {}
            for cell, computed_value in zip(row_cells, computed_values, strict=True):
                built = self._build_xlsx_cell(cell, computed_value)
                if built is not None:
                    cells[cell.column - 1] = built
            if cells:
                rows.append(Row(index=row_cells[0].row - 1, cells=cells))

        return Sheet(index=index, name=sheet.title, rows=rows)

    @staticmethod
    def _build_xlsx_cell(cell: OpenpyxlCell, computed_value: Any) -> Cell | None:
        """Create a typed cell, or None for an unstyled position without a value."""
        if cell.value is None:
            return Cell.blank() if cell.has_style else None
        if cell.data_type == "f":
            result = None if computed_value is None else cell_from_value(computed_value)
            return Cell(CellType.FORMULA, value=str(cell.value), result=result)
        if cell.data_type == "e":
            return Cell(CellType.ERROR, value=str(cell.value))
        if getattr(cell, "is_date", False):
            return Cell(CellType.DATE, value=cell.value)
        return cell_from_value(cell.value)

    # ------------------------------------------------------------------ #
    # BIFF (xlrd)
    # ------------------------------------------------------------------ #

    def _read_xls(self, content: bytes, filename: str | None) -> Workbook:
        try:
            book = xlrd.open_workbook(
                file_contents=content, ragged_rows=True, formatting_info=True
            )
        except Exception as e:
            raise WorkbookDecodeError(
                f"Unable to decode workbook: {e}",
                source_format=WorkbookFormat.XLS.value,
                file_path=filename,
                details={"error_type": type(e).__name__},
            ) from e

        try:
            sheets = [
                self._build_xls_sheet(index, book.sheet_by_index(index), book.datemode)
                for index in range(book.nsheets)
            ]
        finally:
            book.release_resources()
        return Workbook(sheets=sheets, source_format=WorkbookFormat.XLS.value)

    def _build_xls_sheet(self, index: int, sheet: Any, datemode: int) -> Sheet:
        rows: list[Row] = []
        for row_index in range(sheet.nrows):
            cells: dict[int, Cell] = {}
            for column, xl_cell in enumerate(sheet.row(row_index)):
                built = self._build_xls_cell(xl_cell, datemode)
                if built is not None:
                    cells[column] = built
            if cells:
                rows.append(Row(index=row_index, cells=cells))
        return Sheet(index=index, name=sheet.name, rows=rows)

    @staticmethod
    def _build_xls_cell(xl_cell: Any, datemode: int) -> Cell | None:
        """Map an xlrd cell onto a typed cell (None for empty positions)."""
        ctype = xl_cell.ctype
        value = xl_cell.value
        if ctype == xlrd.XL_CELL_EMPTY:
            return None
        # BLANK is a formatted position without a value
        if ctype == xlrd.XL_CELL_BLANK:
            return Cell.blank()
        if ctype == xlrd.XL_CELL_TEXT:
            return Cell(CellType.TEXT, value) if value != "" else Cell.blank()
        if ctype == xlrd.XL_CELL_NUMBER:
            return Cell(CellType.NUMERIC, value)
        if ctype == xlrd.XL_CELL_DATE:
            try:
                return Cell(CellType.DATE, xlrd.xldate_as_datetime(value, datemode))
            except (xlrd.xldate.XLDateError, ValueError, OverflowError):
                # Out-of-range serials keep their numeric value
                return Cell(CellType.NUMERIC, value)
        if ctype == xlrd.XL_CELL_BOOLEAN:
            return Cell(CellType.BOOLEAN, bool(value))
        if ctype == xlrd.XL_CELL_ERROR:
            return Cell(CellType.ERROR, xlrd.error_text_from_code.get(value, "#ERR!"))
        return cell_from_value(value)
