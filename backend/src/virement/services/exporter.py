"""
Export of composed transfer orders.

Turns PDF bytes into a named artifact: an in-memory attachment for the
HTTP API, or a file on disk for the CLI.

Design Decisions:
- The filename depends only on the beneficiary name
- Files are written atomically (temp file, then rename) and the temp
  file is removed on every path
- Written paths must stay inside the output directory
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from urllib.parse import quote
from uuid import uuid4

logger = logging.getLogger(__name__)


PDF_MEDIA_TYPE = "application/pdf"

_WHITESPACE = re.compile(r"\s+")


def export_filename(beneficiary_name: str) -> str:
    """
    Download name for a beneficiary.

    Example:
        >>> export_filename("Services Beta SARL")
        'ordre_virement_Services_Beta_SARL.pdf'
    """
    return f"ordre_virement_{_WHITESPACE.sub('_', beneficiary_name)}.pdf"


def content_disposition(filename: str) -> str:
    """
    Attachment header value that survives non-ASCII names.

    Carries an ASCII fallback plus the RFC 5987 ``filename*`` form.
    """
    fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_").replace('"', "_")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


@dataclass(frozen=True)
class ExportedFile:
    """A named artifact ready to hand to the user."""
    filename: str
    content: bytes = field(repr=False)
    media_type: str = PDF_MEDIA_TYPE
    path: Path | None = None

    @property
    def headers(self) -> dict[str, str]:
        """HTTP headers for serving the artifact as a download."""
        return {"Content-Disposition": content_disposition(self.filename)}


class Exporter:
    """Names PDF bytes after the beneficiary, in memory."""

    def export(self, content: bytes, beneficiary_name: str) -> ExportedFile:
        """
        Wrap ``content`` as a downloadable artifact.

        Raises:
            ValueError: If there is nothing to export
        """
        if not content:
            raise ValueError("Cannot export an empty document")

        exported = ExportedFile(filename=export_filename(beneficiary_name), content=content)
        logger.info(f"Exported {exported.filename} ({len(content)} bytes)")
        return exported


class FileExporter(Exporter):
    """
    Writes exported orders into a directory.

    An existing file with the same name is replaced.
    """

    def __init__(self, output_dir: Path) -> None:
        self.output_dir = Path(output_dir)

    def export(self, content: bytes, beneficiary_name: str) -> ExportedFile:
        exported = super().export(content, beneficiary_name)

        self.output_dir.mkdir(parents=True, exist_ok=True)
        base = self.output_dir.resolve()
        file_path = (base / exported.filename).resolve()
        if not file_path.is_relative_to(base) or file_path.parent != base:
            raise ValueError(f"Path traversal not allowed: {exported.filename}")

        # Write atomically (write to temp, then rename)
        temp_path = base / f".{uuid4().hex}.tmp"
        try:
            temp_path.write_bytes(content)
            temp_path.replace(file_path)
        finally:
            temp_path.unlink(missing_ok=True)

        logger.info(f"Wrote {file_path}")
        return ExportedFile(
            filename=exported.filename,
            content=content,
            media_type=exported.media_type,
            path=file_path,
        )
