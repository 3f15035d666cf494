"""Filesystem helpers shared by the repositories."""

import logging
import os
from pathlib import Path
from typing import Iterator

from .errors import FormatMismatchError, StorageError

logger = logging.getLogger(__name__)


def ensure_dir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageError(f"error creating directory: {e}", path) from e


def write_text_file(path: Path, content: str, truncate: bool) -> bool:
    """Write ``content`` to ``path``, creating parent directories.

    Args:
        path: Destination file
        content: Full file text
        truncate: Overwrite an existing file when True; otherwise leave it alone

    Returns:
        True if the file was written, False if it existed and ``truncate`` was False

    Raises:
        StorageError: On any underlying filesystem failure
    """
    ensure_dir(path.parent)
    mode = "w" if truncate else "x"
    try:
        with open(path, mode, encoding="utf-8", newline="\n") as f:
            f.write(content)
            f.flush()
    except FileExistsError:
        logger.debug("Not overwriting existing file %s", path)
        return False
    except OSError as e:
        raise StorageError(f"error writing file: {e}", path) from e
    return True


def read_text_file(path: Path) -> str:
    """Read ``path`` as UTF-8.

    Raises:
        FormatMismatchError: If the file is not valid UTF-8
        StorageError: On any underlying filesystem failure
    """
    try:
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise FormatMismatchError(f"not valid UTF-8 text: {path}: {e}") from e
    except OSError as e:
        raise StorageError(f"error reading file: {e}", path) from e


def walk_files(root: Path) -> Iterator[Path]:
    """Yield files below ``root`` depth-first, directories in lexical order.

    Hidden directories (leading ``.``) are not entered.
    """
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in sorted(filenames):
            yield Path(dirpath) / name


def walk_dirs(root: Path) -> Iterator[Path]:
    """Yield every non-hidden directory below ``root`` (excluding ``root``) in lexical DFS order."""
    for dirpath, dirnames, _ in os.walk(root):
        dirnames[:] = sorted(d for d in dirnames if not d.startswith("."))
        for name in dirnames:
            yield Path(dirpath) / name


def remove_empty_dirs(root: Path) -> list[Path]:
    """Remove empty non-hidden directories below ``root``, deepest first.

    Returns:
        Removed directories
    """
    removed = []
    for dirpath, dirnames, filenames in os.walk(root, topdown=False):
        current = Path(dirpath)
        if current == root or any(part.startswith(".") for part in current.relative_to(root).parts):
            continue
        if not filenames and not any(current.iterdir()):
            try:
                current.rmdir()
            except OSError as e:
                raise StorageError(f"error removing directory: {e}", current) from e
            removed.append(current)
    return removed
