"""Daily todo workflow: inherit open items, create today's file, weekly diff report."""

import logging
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable

from .config import MemovConfig
from .documents import INHERITED_HEADINGS, TodoDocument
from .editor import Editor
from .errors import NotFoundError
from .models.results import WeeklyReportResult
from .paths import MemovPaths
from .repos import TodoRepo, WeeklyRepo
from .weekly import build_todo_weekly

logger = logging.getLogger(__name__)


class TodoService:
    """Todo operations bound to one configuration."""

    def __init__(
        self,
        config: MemovConfig,
        editor: Editor,
        now: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the service.

        Args:
            config: Loaded configuration
            editor: Editor used to open generated files
            now: Clock, injectable for tests
        """
        self.config = config
        self.paths = MemovPaths.from_config(config)
        self.paths.ensure_directories()
        self.editor = editor
        self.now = now
        self.repo = TodoRepo(self.paths.todos_dir)
        self.weekly_repo = WeeklyRepo(self.paths.todos_dir)

    def find_previous(self, today: datetime, days_to_seek: int) -> TodoDocument | None:
        """Most recent todo document in the ``days_to_seek`` days before ``today``."""
        for offset in range(1, days_to_seek + 1):
            try:
                return self.repo.find_by_date(today - timedelta(days=offset))
            except NotFoundError:
                continue
        logger.info("No todos found in the previous %d days", days_to_seek)
        return None

    def inherit_todos(self, today: datetime, days_to_seek: int) -> TodoDocument:
        """Today's document: the template with ``todos``/``wanttodos`` copied from the last day found."""
        document = self.repo.template(today)

        donor = self.find_previous(today, days_to_seek)
        if donor is None:
            return document

        for block in donor.heading_blocks:
            if block.heading_text not in INHERITED_HEADINGS:
                continue
            try:
                document.override_heading_block_matched(block)
            except NotFoundError:
                logger.warning("Template has no %r heading; not inheriting it", block.heading_text)
        return document

    def new(self, truncate: bool = False) -> Path:
        """Create (or keep) today's todo file and open it."""
        document = self.inherit_todos(self.now(), self.config.todos_daystoseek)
        path = self.repo.save(document, truncate=truncate)
        self.editor.open(self.paths.base_dir, path)
        return path

    def weekly(self) -> WeeklyReportResult:
        """Rebuild ``todos/weekly_report.md`` and open it."""
        todos = self.repo.entries()
        report, week_count = build_todo_weekly(todos)
        path = self.weekly_repo.save(report, truncate=True)
        self.editor.open(self.paths.base_dir, path)
        return WeeklyReportResult(path=path, source_count=len(todos), week_count=week_count)
