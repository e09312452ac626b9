"""Convert one sheet into a UTF-8 delimited byte stream."""

from __future__ import annotations

import io
from itertools import islice
from typing import BinaryIO

from xls2csv.models import ConversionRequest
from xls2csv.services.cell_formatter import CellFormatter
from xls2csv.services.row_projector import project_row
from xls2csv.utils.logging import get_logger
from xls2csv.workbook import Sheet

logger = get_logger(__name__)

OUTPUT_ENCODING = "utf-8"


class SheetConverter:
    """Writes the rows of a sheet to a binary sink.

    The row offset follows the "first row to process" convention: an offset
    of N discards N-1 leading rows, and offsets 0 and 1 both keep every row.
    Skipping past the end of the sheet simply yields no output.
    """

    def __init__(
        self,
        row_offset: int = 0,
        column_offset: int = 0,
        separator: str = ",",
    ) -> None:
        self.row_offset = row_offset
        self.column_offset = column_offset
        self.separator = separator

    @classmethod
    def from_request(cls, request: ConversionRequest) -> SheetConverter:
        return cls(
            row_offset=request.row_offset,
            column_offset=request.column_offset,
            separator=request.separator,
        )

    @property
    def rows_to_skip(self) -> int:
        return max(self.row_offset - 1, 0)

    def convert(self, sheet: Sheet, sink: BinaryIO) -> int:
        """Write `sheet` to `sink` and return the number of rows written.

        Raises:
            OSError: If writing to the sink fails. Nothing is caught here;
                the caller decides how a failed sheet is reported.
        """
        formatter = CellFormatter()
        rows = islice(sheet.rows, self.rows_to_skip, None)

        written = 0
        for row in rows:
            line = project_row(row, self.column_offset, self.separator, formatter)
            sink.write(line.encode(OUTPUT_ENCODING))
            written += 1

        logger.debug(
            "Sheet rows written",
            sheet=sheet.name,
            rows_skipped=min(self.rows_to_skip, len(sheet.rows)),
            rows_written=written,
        )
        return written

    def convert_to_bytes(self, sheet: Sheet) -> bytes:
        """Convert `sheet` into an owned in-memory buffer."""
        with io.BytesIO() as buffer:
            self.convert(sheet, buffer)
            return buffer.getvalue()
