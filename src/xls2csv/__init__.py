"""xls2csv - convert spreadsheet workbooks into per-sheet CSV documents."""

__version__ = "0.1.0"

from xls2csv.services.workbook_dispatcher import (  # noqa: E402
    ConversionResult,
    SheetOutcome,
    WorkbookDispatcher,
    convert_document,
)

__all__ = [
    "ConversionResult",
    "SheetOutcome",
    "WorkbookDispatcher",
    "convert_document",
    "main",
]


def main() -> None:
    """Run the FastAPI server using uvicorn."""
    import uvicorn

    from xls2csv.config import settings

    uvicorn.run(
        "xls2csv.api:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=settings.debug,
    )
