"""Persist converted sheet artifacts to disk.

Each successful sheet is written to ``<output_dir>/<sheet name>/<filename>``,
where the filename comes from the outcome's ``filename`` attribute.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from xls2csv.services.workbook_dispatcher import (
    FILENAME_ATTRIBUTE,
    ConversionResult,
    SheetOutcome,
)
from xls2csv.utils.exceptions import ErrorCode, FileError
from xls2csv.utils.logging import get_logger

logger = get_logger(__name__)

MAX_NAME_LENGTH = 120


def sanitize_filename(name: str) -> str:
    """Make `name` safe to use as a single path component."""
    name = name.strip()
    name = re.sub(r"[\\/:*?\"<>|]", "_", name)
    name = re.sub(r"\s+", "_", name)
    if name in (".", ".."):
        name = name.replace(".", "_")
    return name[:MAX_NAME_LENGTH] or "sheet"


@dataclass
class WrittenArtifact:
    """One artifact written by the OutputWriter."""

    sheet_index: int
    sheet_name: str
    path: Path
    size_bytes: int


@dataclass
class OutputManifest:
    """What an OutputWriter call put on disk."""

    output_dir: Path
    artifacts: list[WrittenArtifact] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    """Names of sheets that failed conversion and were not written."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "output_dir": str(self.output_dir),
            "artifacts": [
                {
                    "sheet_index": a.sheet_index,
                    "sheet_name": a.sheet_name,
                    "path": str(a.path),
                    "size_bytes": a.size_bytes,
                }
                for a in self.artifacts
            ],
            "skipped": list(self.skipped),
        }


class OutputWriter:
    """Writes the successful outcomes of a ConversionResult to a directory."""

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)

    def target_path(self, outcome: SheetOutcome, used_dirs: set[str]) -> Path:
        """Path for `outcome`, keeping sheet directories distinct."""
        dir_name = sanitize_filename(outcome.sheet_name)
        if dir_name in used_dirs:
            dir_name = f"{dir_name}_{outcome.sheet_index}"
        used_dirs.add(dir_name)
        filename = sanitize_filename(outcome.attributes[FILENAME_ATTRIBUTE])
        return self.output_dir / dir_name / filename

    def write(self, result: ConversionResult) -> OutputManifest:
        """Write every successful sheet of `result`.

        Raises:
            FileError: If a file or directory cannot be created.
        """
        manifest = OutputManifest(output_dir=self.output_dir)
        used_dirs: set[str] = set()

        for outcome in result.outcomes:
            if not outcome.succeeded or outcome.content is None:
                manifest.skipped.append(outcome.sheet_name)
                continue

            path = self.target_path(outcome, used_dirs)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_bytes(outcome.content)
            except OSError as e:
                raise FileError(
                    message=f"Failed to write output file: {e}",
                    error_code=ErrorCode.FILE_WRITE_ERROR,
                    file_path=str(path),
                ) from e

            manifest.artifacts.append(
                WrittenArtifact(
                    sheet_index=outcome.sheet_index,
                    sheet_name=outcome.sheet_name,
                    path=path,
                    size_bytes=len(outcome.content),
                )
            )
            logger.debug("Artifact written", path=str(path), size=len(outcome.content))

        logger.info(
            "Output written",
            output_dir=str(self.output_dir),
            written=len(manifest.artifacts),
            skipped=len(manifest.skipped),
        )
        return manifest
