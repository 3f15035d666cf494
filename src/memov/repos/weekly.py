"""Single-file repository for the weekly report."""

from pathlib import Path

from ..documents import WeeklyDocument
from ..filenames import WEEKLY_FILENAME
from .base import DocumentRepository


class WeeklyRepo(DocumentRepository):
    """Writes ``weekly_report.md`` under its root, always overwriting."""

    @property
    def report_path(self) -> Path:
        return self.root / WEEKLY_FILENAME

    def save(self, document: WeeklyDocument, truncate: bool = True) -> Path:
        return super().save(document, truncate=truncate)
