"""Memo workflow: create, open, rename, list, search, index and weekly report."""

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable

from .config import MemovConfig
from .documents import MemoDocument
from .editor import Editor
from .errors import MemovError, NotFoundError
from .fsutil import write_text_file
from .memo_index import build_memo_index
from .models.results import ListEntry, MemoIndexResult, SearchHit, TidyResult, WeeklyReportResult
from .paths import MemovPaths
from .repos import MemoRepo, WeeklyRepo
from .search import QueryExpander, identity_expander, search_memos
from .trash import Trash
from .weekly import build_memo_weekly

logger = logging.getLogger(__name__)


class MemoService:
    """Memo operations bound to one configuration."""

    def __init__(
        self,
        config: MemovConfig,
        editor: Editor,
        now: Callable[[], datetime] = datetime.now,
        expander: QueryExpander = identity_expander,
        trash: Trash | None = None,
    ):
        """Initialize the service.

        Args:
            config: Loaded configuration
            editor: Editor used to open memos and generated files
            now: Clock, injectable for tests
            expander: Query word expander used by search
            trash: Where deleted memos go (platform default if omitted)
        """
        self.config = config
        self.paths = MemovPaths.from_config(config)
        self.paths.ensure_directories()
        self.editor = editor
        self.now = now
        self.expander = expander
        self.repo = MemoRepo(
            self.paths.memos_dir,
            trash or Trash.default(fallback_dir=self.paths.trash_fallback),
        )
        self.weekly_repo = WeeklyRepo(self.paths.memos_dir)

    def display_path(self, memo: MemoDocument, full_path: bool) -> str:
        path = self.repo.path_for(memo)
        if full_path:
            return str(path)
        return self.repo.relative_path(path)

    def new(self, title: str, category_tree: list[str] | None = None) -> Path:
        """Create an empty memo stamped with the current time and open it."""
        memo = MemoDocument(self.now(), title.strip(), category_tree=category_tree or [])
        path = self.repo.save(memo, truncate=False)
        self.editor.open(self.paths.base_dir, path)
        return path

    def find(self, path: str | Path) -> MemoDocument:
        return self.repo.find(self.paths.resolve_memo_path(path))

    def open(self, path: str | Path) -> Path:
        """Open an existing memo given a path as printed by ``list``."""
        resolved = self.paths.resolve_memo_path(path)
        if not resolved.is_file():
            raise NotFoundError(f"memo file does not exist: {resolved}")
        self.editor.open(self.paths.base_dir, resolved)
        return resolved

    def rename(self, path: str | Path, title: str) -> Path:
        """Rename the memo at ``path`` to ``title``; returns the new path."""
        memo = self.find(path)
        return self.repo.rename(memo, title.strip())

    def tidy(self) -> TidyResult:
        return self.repo.tidy()

    def _tidy_quietly(self) -> TidyResult | None:
        try:
            return self.tidy()
        except MemovError as e:
            logger.error("Error tidying memos: %s", e)
            return None

    def index(self) -> MemoIndexResult:
        """Regenerate ``memos/index.md`` and open it."""
        tidy = self._tidy_quietly()
        text, stats = build_memo_index(self.paths.memos_dir)
        write_text_file(self.paths.memo_index, text, truncate=True)
        logger.info("Memo index generated: %s", self.paths.memo_index)
        self.editor.open(self.paths.base_dir, self.paths.memo_index)
        return MemoIndexResult(
            path=self.paths.memo_index,
            memo_count=stats.memo_count,
            category_count=stats.category_count,
            tidy=tidy,
        )

    def weekly(self) -> WeeklyReportResult:
        """Rebuild ``memos/weekly_report.md`` and open it."""
        tidy = self._tidy_quietly()
        memos = self.repo.entries()
        report, week_count = build_memo_weekly(memos)
        path = self.weekly_repo.save(report, truncate=True)
        self.editor.open(self.paths.base_dir, path)
        return WeeklyReportResult(path=path, source_count=len(memos), week_count=week_count, tidy=tidy)

    def list_entries(self, full_path: bool = True) -> list[ListEntry]:
        return [
            ListEntry(title=memo.title, path=self.display_path(memo, full_path))
            for memo in self.repo.entries()
        ]

    def search(self, query: str, full_path: bool = True) -> list[SearchHit]:
        """Memos matching ``query``, newest path first."""
        hits = [
            SearchHit(title=memo.title, path=self.display_path(memo, full_path), matches=matches)
            for memo, matches in search_memos(self.repo.entries(), query, self.expander)
        ]
        hits.sort(key=lambda hit: hit.path, reverse=True)
        return hits
