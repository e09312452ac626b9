"""Services for workbook-to-CSV conversion."""

from xls2csv.services.cell_formatter import CellFormatter, format_cell
from xls2csv.services.format_detector import FormatDetector, WorkbookFormat
from xls2csv.services.row_projector import project_row
from xls2csv.services.sheet_converter import SheetConverter
from xls2csv.services.workbook_dispatcher import (
    ConversionResult,
    SheetOutcome,
    WorkbookDispatcher,
    convert_document,
)
from xls2csv.services.workbook_reader import WorkbookReader

__all__ = [
    "CellFormatter",
    "ConversionResult",
    "FormatDetector",
    "SheetConverter",
    "SheetOutcome",
    "WorkbookDispatcher",
    "WorkbookFormat",
    "WorkbookReader",
    "convert_document",
    "format_cell",
    "project_row",
]
