"""Repository of daily todo files."""

import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path

from ..documents import TodoDocument, TodoTemplate, new_todo_template
from ..errors import FormatMismatchError, NotFoundError
from ..filenames import TEMPLATE_FILENAME, FileKind, decode_date, encode, matches
from ..fsutil import read_text_file, walk_files
from .base import DocumentRepository

logger = logging.getLogger(__name__)


class TodoRepo(DocumentRepository):
    """Todo files (``YYYYMMDDDDD_todos.md``) and the template under one root."""

    @property
    def template_path(self) -> Path:
        return self.root / TEMPLATE_FILENAME

    def load(self, path: Path) -> TodoDocument:
        date = decode_date(path.name, FileKind.TODO)
        return TodoDocument.from_markdown(date, read_text_file(path))

    def entries(self) -> list[TodoDocument]:
        """All todo documents, sorted by date then path."""
        found: list[tuple[datetime, str, TodoDocument]] = []
        for path in walk_files(self.root):
            if not matches(FileKind.TODO, path.name):
                continue
            try:
                document = self.load(path)
            except FormatMismatchError as e:
                logger.warning("Skipping %s: %s", path, e)
                continue
            found.append((document.date, str(path), document))

        found.sort(key=lambda item: (item[0], item[1]))
        return [document for _, _, document in found]

    def find_by_date(self, date: datetime) -> TodoDocument:
        """Todo document of the day ``date`` falls on.

        Raises:
            NotFoundError: If no todo file exists for that day
        """
        path = self.root / encode(FileKind.TODO, date)
        if not path.is_file():
            raise NotFoundError(f"no todo file for {date:%Y-%m-%d}: {path}")
        return self.load(path)

    def load_template(self) -> TodoTemplate:
        """Read the template, writing the default one first if it is missing."""
        if not self.template_path.exists():
            self.save(new_todo_template(), truncate=False)
            logger.info("Template file created: %s", self.template_path)
        return TodoTemplate.from_markdown(read_text_file(self.template_path))

    def template(self, date: datetime) -> TodoDocument:
        """A new todo document for ``date`` seeded from the template."""
        template = self.load_template()
        return TodoDocument(
            date,
            top_level_body=template.top_level_body,
            heading_blocks=[replace(block) for block in template.heading_blocks],
        )
