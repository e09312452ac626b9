"""Run the sheet converter over the selected sheets of a workbook.

Every selected sheet yields exactly one SheetOutcome. A write failure on one
sheet is recorded as a failure outcome for that sheet and the remaining
sheets are still converted.
"""

from __future__ import annotations

import io
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from xls2csv.models import ConversionRequest, OutcomeStatus, SheetSelection
from xls2csv.services.sheet_converter import SheetConverter
from xls2csv.services.workbook_reader import WorkbookReader
from xls2csv.utils.exceptions import SheetConversionError, SheetIndexOutOfRangeError
from xls2csv.utils.logging import LogContext, get_logger, timed_operation
from xls2csv.workbook import Sheet, Workbook

logger = get_logger(__name__)

SHEET_NAME_ATTRIBUTE = "sheetname"
FILENAME_ATTRIBUTE = "filename"
MIME_TYPE_ATTRIBUTE = "mime.type"
CSV_MIME_TYPE = "text/csv"
CSV_SUFFIX = ".csv"

SinkFactory = Callable[[], io.BytesIO]


@dataclass
class SheetOutcome:
    """Result of converting one sheet."""

    sheet_index: int
    sheet_name: str
    status: OutcomeStatus
    content: bytes | None = None
    """UTF-8 delimited text; None when the sheet failed."""

    attributes: dict[str, str] = field(default_factory=dict)
    """Artifact metadata: sheetname, filename and mime.type."""

    error: str | None = None
    """Failure cause, None on success."""

    rows_written: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @property
    def text(self) -> str | None:
        """Content decoded as UTF-8."""
        return None if self.content is None else self.content.decode("utf-8")

    def to_dict(self) -> dict[str, Any]:
        return {
            "sheet_index": self.sheet_index,
            "sheet_name": self.sheet_name,
            "status": self.status.value,
            "attributes": dict(self.attributes),
            "content": self.text,
            "rows_written": self.rows_written,
            "error": self.error,
        }


@dataclass
class ConversionResult:
    """All sheet outcomes of one request plus the untouched input."""

    filename: str
    original: bytes
    """The input bytes, forwarded unchanged for pass-through routing."""

    outcomes: list[SheetOutcome] = field(default_factory=list)
    source_format: str = "xlsx"

    @property
    def succeeded(self) -> list[SheetOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.SUCCESS]

    @property
    def failed(self) -> list[SheetOutcome]:
        return [o for o in self.outcomes if o.status == OutcomeStatus.FAILURE]


def derived_filename(filename: str) -> str:
    """Name of a sheet artifact: the original name with .csv appended."""
    return f"{filename}{CSV_SUFFIX}"


class WorkbookDispatcher:
    """Converts the selected sheets of a workbook, one outcome per sheet.

    Args:
        sink_factory: Creates the fresh output buffer for each sheet.
    """

    def __init__(self, sink_factory: SinkFactory = io.BytesIO) -> None:
        self.sink_factory = sink_factory

    def select_sheets(self, workbook: Workbook, request: ConversionRequest) -> list[Sheet]:
        """Sheets to convert, in ascending index order.

        Raises:
            SheetIndexOutOfRangeError: If single-sheet mode targets an index
                the workbook does not have.
        """
        if request.sheet_selection == SheetSelection.ALL:
            return list(workbook.sheets)

        index = request.target_sheet_index
        if not 0 <= index < workbook.sheet_count:
            raise SheetIndexOutOfRangeError(
                sheet_index=index, sheet_count=workbook.sheet_count
            )
        return [workbook.sheets[index]]

    def dispatch(
        self,
        workbook: Workbook,
        request: ConversionRequest,
        filename: str,
    ) -> list[SheetOutcome]:
        """Convert every selected sheet and return their outcomes.

        Args:
            workbook: Decoded workbook.
            request: Validated conversion options.
            filename: Original filename, used to derive artifact names.
        """
        sheets = self.select_sheets(workbook, request)
        converter = SheetConverter.from_request(request)

        outcomes: list[SheetOutcome] = []
        for sheet in sheets:
            with LogContext(sheet=sheet.name):
                outcomes.append(self._convert_sheet(converter, sheet, filename))
        return outcomes

    def _convert_sheet(
        self, converter: SheetConverter, sheet: Sheet, filename: str
    ) -> SheetOutcome:
        attributes = {
            SHEET_NAME_ATTRIBUTE: sheet.name,
            FILENAME_ATTRIBUTE: derived_filename(filename),
            MIME_TYPE_ATTRIBUTE: CSV_MIME_TYPE,
        }
        try:
            with self.sink_factory() as sink:
                rows_written = converter.convert(sheet, sink)
                content = sink.getvalue()
        except (OSError, UnicodeError) as e:
            cause = f"{type(e).__name__}: {e}"
            error = SheetConversionError(
                f"Failed to write sheet '{sheet.name}': {cause}",
                sheet_name=sheet.name,
                sheet_index=sheet.index,
                cause=cause,
            )
            logger.error(
                "Sheet conversion failed",
                error_code=error.error_code.value,
                cause=error.cause,
            )
            return SheetOutcome(
                sheet_index=sheet.index,
                sheet_name=sheet.name,
                status=OutcomeStatus.FAILURE,
                attributes={SHEET_NAME_ATTRIBUTE: sheet.name},
                error=str(error),
            )

        logger.info("Sheet converted", rows=rows_written, bytes=len(content))
        return SheetOutcome(
            sheet_index=sheet.index,
            sheet_name=sheet.name,
            status=OutcomeStatus.SUCCESS,
            content=content,
            attributes=attributes,
            rows_written=rows_written,
        )


def convert_document(
    content: bytes,
    filename: str,
    request: ConversionRequest,
    reader: WorkbookReader | None = None,
    dispatcher: WorkbookDispatcher | None = None,
) -> ConversionResult:
    """Decode `content` and convert the requested sheets.

    Decode, format and sheet-selection errors abort the request; per-sheet
    write failures become failure outcomes.

    Raises:
        FileTooLargeError, UnsupportedFormatError, WorkbookDecodeError,
        SheetIndexOutOfRangeError
    """
    reader = reader or WorkbookReader()
    dispatcher = dispatcher or WorkbookDispatcher()
    started = time.perf_counter()

    with timed_operation(logger, "convert_document") as metrics:
        workbook = reader.read(content, filename=filename)
        outcomes = dispatcher.dispatch(workbook, request, filename)
        result = ConversionResult(
            filename=filename,
            original=content,
            outcomes=outcomes,
            source_format=workbook.source_format,
        )
        metrics.sheets_processed = len(outcomes)
        metrics.sheets_failed = len(result.failed)
        metrics.rows_written = sum(o.rows_written for o in outcomes)
        metrics.bytes_written = sum(len(o.content or b"") for o in outcomes)

    logger.log_conversion_result(
        filename=filename,
        sheets_total=len(outcomes),
        sheets_failed=len(result.failed),
        duration_seconds=time.perf_counter() - started,
    )
    return result
