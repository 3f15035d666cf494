"""Shared save logic for the per-kind document repositories."""

import logging
from pathlib import Path

from ..documents import Document
from ..errors import FormatMismatchError
from ..filenames import matches
from ..fsutil import write_text_file

logger = logging.getLogger(__name__)


class DocumentRepository:
    """Root directory plus the location/filename rule shared by every kind."""

    def __init__(self, root: Path):
        self.root = root

    def path_for(self, document: Document) -> Path:
        return self.root.joinpath(*document.location(), document.file_name())

    def checked_path(self, document: Document) -> Path:
        """Like :meth:`path_for`, but rejects filenames outside the kind's grammar."""
        file_name = document.file_name()
        if "/" in file_name or "\\" in file_name or not matches(document.kind, file_name):
            raise FormatMismatchError(f"invalid {document.kind.value} filename: {file_name!r}")
        return self.path_for(document)

    def relative_path(self, path: Path) -> str:
        """POSIX-style path of ``path`` relative to the repository root."""
        return path.relative_to(self.root).as_posix()

    def save(self, document: Document, truncate: bool = False) -> Path:
        """Write a document to its derived location.

        Args:
            document: Document to serialize
            truncate: Overwrite an existing file; when False an existing file is left as is

        Returns:
            Path of the document file

        Raises:
            FormatMismatchError: If the derived filename does not fit its kind's grammar
            StorageError: On filesystem failure
        """
        path = self.checked_path(document)
        if write_text_file(path, document.content_string(), truncate):
            logger.info("File saved: %s", path)
        return path
