"""Path management for the memov base directory."""

from pathlib import Path

from .config import MemovConfig, config_file_path
from .filenames import INDEX_FILENAME, TEMPLATE_FILENAME, WEEKLY_FILENAME
from .fsutil import ensure_dir


class MemovPaths:
    """Manages paths within the memov base directory."""

    def __init__(self, base_dir: Path, todos_dir: Path, memos_dir: Path, config_file: Path | None = None):
        """Initialize paths.

        Args:
            base_dir: Root for all documents
            todos_dir: Directory of daily todo files
            memos_dir: Root of the memo category tree
            config_file: Location of ``config.toml``
        """
        self.base_dir = base_dir
        self.todos_dir = todos_dir
        self.memos_dir = memos_dir
        self.config_file = config_file or config_file_path()

        self.todo_template = todos_dir / TEMPLATE_FILENAME
        self.todo_weekly = todos_dir / WEEKLY_FILENAME
        self.memo_weekly = memos_dir / WEEKLY_FILENAME
        self.memo_index = memos_dir / INDEX_FILENAME
        self.trash_fallback = base_dir / ".trash"

    @classmethod
    def from_config(cls, config: MemovConfig, config_file: Path | None = None) -> "MemovPaths":
        """Create MemovPaths from a MemovConfig."""
        return cls(config.base_dir, config.todos_dir, config.memos_dir, config_file)

    def get_all_directories(self) -> list[Path]:
        """Get list of all directories that should exist under the base directory."""
        return [self.base_dir, self.todos_dir, self.memos_dir]

    def ensure_directories(self) -> None:
        for directory in self.get_all_directories():
            ensure_dir(directory)

    def resolve_memo_path(self, path: str | Path) -> Path:
        """Resolve a user-supplied memo path.

        Absolute paths are returned unchanged. A relative path that resolves
        from the current directory to somewhere under the memos directory is
        used as resolved; anything else is taken relative to the memos directory.
        """
        path = Path(path)
        if path.is_absolute():
            return path
        resolved = path.resolve()
        if resolved.is_relative_to(self.memos_dir.resolve()):
            return resolved
        return self.memos_dir / path
