"""Move deleted documents to a trash directory instead of unlinking them."""

import logging
import os
import shutil
import sys
from datetime import datetime
from pathlib import Path
from urllib.parse import quote

from .errors import NotFoundError, StorageError

logger = logging.getLogger(__name__)

TRASH_DIR_ENV = "MEMOV_TRASH_DIR"


class Trash:
    """A trash directory, optionally following the freedesktop layout.

    With ``freedesktop=True`` files land in ``<root>/files`` and a matching
    ``<root>/info/<name>.trashinfo`` records the original path.
    """

    def __init__(self, root: Path, freedesktop: bool = False):
        self.root = root
        self.freedesktop = freedesktop

    @property
    def files_dir(self) -> Path:
        return self.root / "files" if self.freedesktop else self.root

    @classmethod
    def default(cls, fallback_dir: Path) -> "Trash":
        """Pick the trash for this platform.

        ``$MEMOV_TRASH_DIR`` wins; then ``~/.local/share/Trash`` on Linux and
        ``~/.Trash`` on macOS; anything else uses ``fallback_dir``.
        """
        env_dir = os.environ.get(TRASH_DIR_ENV)
        if env_dir:
            return cls(Path(env_dir).expanduser())
        if sys.platform.startswith("linux"):
            data_home = os.environ.get("XDG_DATA_HOME") or str(Path.home() / ".local" / "share")
            return cls(Path(data_home) / "Trash", freedesktop=True)
        if sys.platform == "darwin":
            return cls(Path.home() / ".Trash")
        return cls(fallback_dir)

    def move(self, path: Path, now: datetime | None = None) -> Path:
        """Move ``path`` into the trash.

        Args:
            path: File to trash
            now: Timestamp used for clash suffixes and deletion records

        Returns:
            Location of the file inside the trash

        Raises:
            NotFoundError: If ``path`` does not exist
            StorageError: If the file cannot be moved
        """
        if not path.exists():
            raise NotFoundError(f"file to delete does not exist: {path}")
        now = now or datetime.now()

        target = self.files_dir / path.name
        if target.exists():
            target = self.files_dir / f"{path.stem}_{now:%Y%m%d_%H%M%S}{path.suffix}"

        try:
            self.files_dir.mkdir(parents=True, exist_ok=True)
            if self.freedesktop:
                self._write_info(target, path, now)
            shutil.move(str(path), str(target))
        except OSError as e:
            raise StorageError(f"error moving file to trash: {e}", path) from e

        logger.info("Moved to trash: %s -> %s", path, target)
        return target

    def _write_info(self, target: Path, original: Path, now: datetime) -> None:
        info_dir = self.root / "info"
        info_dir.mkdir(parents=True, exist_ok=True)
        info = (
            "[Trash Info]\n"
            f"Path={quote(str(original.resolve()))}\n"
            f"DeletionDate={now:%Y-%m-%dT%H:%M:%S}\n"
        )
        (info_dir / f"{target.name}.trashinfo").write_text(info, encoding="utf-8")
