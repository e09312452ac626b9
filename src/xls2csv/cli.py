"""Command-line interface for xls2csv.

Usage:
  xls2csv <workbook> [--sheet N] [--row-offset N] [--column-offset N]
          [--separator SEP] [--output-dir DIR] [--log-level LEVEL]

Exit status is 0 when every sheet converted, 1 when at least one sheet
failed, and 2 when the request itself was rejected.
"""

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from xls2csv.config import settings
from xls2csv.models import SEPARATOR_ALIASES, SEPARATORS, SheetSelection
from xls2csv.output.output_service import OutputWriter
from xls2csv.services.workbook_dispatcher import convert_document
from xls2csv.utils.exceptions import (
    ErrorCode,
    FileError,
    InputFileNotFoundError,
    Xls2CsvError,
)
from xls2csv.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_SHEET_FAILED = 1
EXIT_REQUEST_FAILED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xls2csv",
        description="Convert the sheets of an .xlsx/.xls workbook to CSV files",
    )
    parser.add_argument("workbook", help="Path to the workbook")
    parser.add_argument(
        "--sheet",
        "-s",
        type=int,
        help="Zero-based index of the only sheet to convert (default: all sheets)",
    )
    parser.add_argument(
        "--row-offset",
        "-r",
        type=int,
        help="Row number of the first row to process; N skips N-1 rows",
    )
    parser.add_argument(
        "--column-offset",
        "-c",
        type=int,
        help="Zero-based index of the first column written",
    )
    parser.add_argument(
        "--separator",
        "-d",
        choices=[*SEPARATORS, *SEPARATOR_ALIASES],
        help="Field separator (default: ,)",
    )
    parser.add_argument(
        "--output-dir",
        "-o",
        help=f"Directory for the CSV files (default: {settings.output_dir})",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Logging level",
    )
    return parser


def read_workbook_bytes(path: Path) -> bytes:
    """Read the input workbook, mapping OS errors onto FileError."""
    if not path.is_file():
        raise InputFileNotFoundError(str(path))
    try:
        return path.read_bytes()
    except OSError as e:
        raise FileError(
            message=f"Unable to read workbook: {e}",
            error_code=ErrorCode.FILE_READ_ERROR,
            file_path=str(path),
        ) from e


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level, use_structured_formatter=True)

    workbook_path = Path(args.workbook)
    output_dir = Path(args.output_dir or settings.output_dir)

    try:
        request = settings.default_request(
            sheet_selection=SheetSelection.INDEX if args.sheet is not None else None,
            target_sheet_index=args.sheet,
            row_offset=args.row_offset,
            column_offset=args.column_offset,
            separator=args.separator,
        )
        result = convert_document(
            read_workbook_bytes(workbook_path), workbook_path.name, request
        )
        manifest = OutputWriter(output_dir).write(result)
    except Xls2CsvError as e:
        logger.error("Conversion aborted", error_code=e.error_code.value)
        print(f"error: {e}", file=sys.stderr)
        return EXIT_REQUEST_FAILED

    for artifact in manifest.artifacts:
        print(f"{artifact.sheet_name}: {artifact.path}")
    for outcome in result.failed:
        print(f"{outcome.sheet_name}: FAILED ({outcome.error})", file=sys.stderr)

    print(
        f"Converted {len(result.succeeded)} of {len(result.outcomes)} sheet(s) "
        f"into {output_dir}"
    )
    return EXIT_SHEET_FAILED if result.failed else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
