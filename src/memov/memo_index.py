"""Markdown outline of the memos directory with a link to every memo."""

import os
from dataclasses import dataclass
from pathlib import Path

from .filenames import FileKind, extract_title, matches
from .markdown import builder


@dataclass
class IndexStats:
    memo_count: int = 0
    category_count: int = 0


def _sorted_entries(directory: Path) -> list[os.DirEntry]:
    with os.scandir(directory) as it:
        return sorted((e for e in it if not e.name.startswith(".")), key=lambda e: e.name)


def _render(root: Path, directory: Path, level: int, stats: IndexStats) -> str:
    parts = []
    for entry in _sorted_entries(directory):
        if entry.is_dir():
            stats.category_count += 1
            if level == 0:
                parts.append("\n" + builder.heading(2, entry.name) + "\n")
            else:
                parts.append(builder.list_item(entry.name, level))
            parts.append(_render(root, Path(entry.path), level + 1, stats))
        elif matches(FileKind.MEMO, entry.name):
            stats.memo_count += 1
            rel = Path(entry.path).relative_to(root).as_posix()
            parts.append(builder.list_item(builder.link(extract_title(entry.name), rel), level))
    return "".join(parts)


def build_memo_index(memos_root: Path) -> tuple[str, IndexStats]:
    """Walk ``memos_root`` and render the index text.

    Top-level directories become ``##`` headings, deeper directories nested
    bullets, and memo files ``- [title](relative/path)`` items. Links always
    use ``/`` separators.

    Returns:
        Index text and counts of memos and directories seen
    """
    stats = IndexStats()
    return _render(memos_root, memos_root, 0, stats), stats
