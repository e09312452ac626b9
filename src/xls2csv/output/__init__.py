"""Output module for writing converted sheets to disk."""

from xls2csv.output.output_service import (
    OutputManifest,
    OutputWriter,
    WrittenArtifact,
    sanitize_filename,
)

__all__ = [
    "OutputManifest",
    "OutputWriter",
    "WrittenArtifact",
    "sanitize_filename",
]
