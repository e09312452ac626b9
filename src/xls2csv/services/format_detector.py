"""Workbook container detection.

Content is classified with libmagic (python-magic). ZIP and OLE2 containers
are then opened with xlrd's format inspection to tell workbooks apart from
other documents sharing the container (.docx, .ods, .xlsb, .doc). The file
extension is only consulted when libmagic cannot classify the content.
"""

import zipfile
from enum import Enum
from pathlib import Path

import magic
import xlrd

from xls2csv.utils.exceptions import UnsupportedFormatError, WorkbookDecodeError
from xls2csv.utils.logging import get_logger

logger = get_logger(__name__)

__all__ = [
    "EXTENSION_TO_FORMAT",
    "FormatDetector",
    "WorkbookFormat",
]


class WorkbookFormat(str, Enum):
    """Spreadsheet container formats that can be decoded."""

    XLSX = "xlsx"
    XLS = "xls"


# OLE2 documents that are not BIFF workbooks
NON_WORKBOOK_OLE2_MIME_TYPES: frozenset[str] = frozenset(
    {
        "application/msword",
        "application/vnd.ms-powerpoint",
        "application/vnd.ms-outlook",
        "application/vnd.ms-project",
        "application/vnd.visio",
        "application/x-msi",
    }
)

# libmagic answers that say nothing about the content
GENERIC_MIME_TYPES: frozenset[str] = frozenset(
    {"application/octet-stream", "inode/x-empty"}
)

EXTENSION_TO_FORMAT: dict[str, WorkbookFormat] = {
    ".xlsx": WorkbookFormat.XLSX,
    ".xlsm": WorkbookFormat.XLSX,
    ".xltx": WorkbookFormat.XLSX,
    ".xltm": WorkbookFormat.XLSX,
    ".xls": WorkbookFormat.XLS,
}


class FormatDetector:
    """Detects the container format of a workbook."""

    def __init__(self) -> None:
        """Initialize the format detector with a magic instance."""
        self._magic = magic.Magic(mime=True)

    def detect_from_content(
        self,
        content: bytes,
        filename: str | None = None,
    ) -> WorkbookFormat:
        """Detect the format from content bytes.

        Priority:
        1. Container inspection (xlrd) for ZIP and OLE2 content
        2. MIME type from libmagic
        3. File extension when libmagic cannot classify the content

        Args:
            content: File content as bytes.
            filename: Optional filename for extension-based fallback.

        Raises:
            UnsupportedFormatError: If the content is not an .xlsx or .xls
                workbook.
            WorkbookDecodeError: If the content claims to be a ZIP container
                but cannot be opened.
        """
        if not content:
            raise UnsupportedFormatError(
                "Input is empty; expected an .xlsx or .xls workbook",
                file_path=filename,
            )

        extension = Path(filename).suffix.lower() if filename else ""
        mime_type = self._detect_mime(content)
        container = self._inspect_container(content, filename)

        detected = self._resolve(container, mime_type, extension, filename)

        from_extension = EXTENSION_TO_FORMAT.get(extension)
        if from_extension is not None and from_extension != detected:
            logger.warning(
                "File extension does not match detected workbook format",
                extension=extension,
                detected_format=detected.value,
            )
        return detected

    def _resolve(
        self,
        container: str | None,
        mime_type: str | None,
        extension: str,
        filename: str | None,
    ) -> WorkbookFormat:
        if container == "xlsx":
            return WorkbookFormat.XLSX
        if container == "xls":
            if mime_type in NON_WORKBOOK_OLE2_MIME_TYPES:
                raise UnsupportedFormatError(
                    f"OLE2 document is not an Excel workbook: {mime_type}",
                    detected_format=mime_type,
                    file_path=filename,
                )
            return WorkbookFormat.XLS
        if container is not None:
            # xlsb, ods, or a plain ZIP archive
            raise UnsupportedFormatError(
                f"Unsupported container format: {container}. "
                "Expected an .xlsx/.xlsm or .xls workbook.",
                detected_format=container,
                file_path=filename,
            )

        if mime_type is None or mime_type in GENERIC_MIME_TYPES:
            from_extension = EXTENSION_TO_FORMAT.get(extension)
            if from_extension is not None:
                # The decoder will reject it if the extension lies.
                logger.debug(
                    "Content not classified, using extension",
                    extension=extension,
                    mime_type=mime_type,
                )
                return from_extension

        raise UnsupportedFormatError(
            "Unable to detect workbook format. "
            "Expected an .xlsx/.xlsm (ZIP) or .xls (OLE2) workbook.",
            detected_format=mime_type,
            file_path=filename,
        )

    def _detect_mime(self, content: bytes) -> str | None:
        """MIME type reported by libmagic, lower-cased, or None on failure."""
        try:
            return self._magic.from_buffer(content).lower()
        except magic.MagicException as e:
            logger.warning(
                "Magic detection failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

    @staticmethod
    def _inspect_container(content: bytes, filename: str | None) -> str | None:
        """xlrd's container verdict: xls, xlsx, xlsb, ods, zip or None."""
        try:
            return xlrd.inspect_format(content=content)
        except zipfile.BadZipFile as e:
            raise WorkbookDecodeError(
                f"Unable to decode workbook: {e}",
                source_format=WorkbookFormat.XLSX.value,
                file_path=filename,
                details={"error_type": type(e).__name__},
            ) from e

    @staticmethod
    def get_supported_extensions() -> list[str]:
        """Get list of supported file extensions (with dots)."""
        return sorted(EXTENSION_TO_FORMAT.keys())
