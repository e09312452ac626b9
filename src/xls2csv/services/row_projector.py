"""Project one spreadsheet row onto a delimited output line."""

from __future__ import annotations

from xls2csv.services.cell_formatter import CellFormatter
from xls2csv.workbook import Row

LINE_TERMINATOR = "\n"


def project_row(
    row: Row,
    column_offset: int,
    separator: str,
    formatter: CellFormatter,
) -> str:
    """Build the output line for `row`, terminator included.

    Fields run from `column_offset` up to the row's last populated column.
    Absent positions render as empty fields. Newlines are replaced on the
    assembled line, so multi-line cell text never splits a record. A row
    with nothing at or past the offset still yields a bare terminator.

    Args:
        row: Row to project.
        column_offset: Index of the first column emitted.
        separator: Text placed between consecutive fields.
        formatter: Formatter used for every cell of the row.

    Returns:
        The line, always ending in exactly one LINE_TERMINATOR.
    """
    if column_offset < 0:
        return LINE_TERMINATOR

    fields = [
        formatter.format(row.cell_at(column))
        for column in range(column_offset, row.last_column)
    ]
    line = separator.join(fields).replace("\n", " ")
    return line + LINE_TERMINATOR
