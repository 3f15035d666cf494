"""Repository of memo files laid out by category directory."""

import logging
from datetime import datetime, timedelta
from pathlib import Path

from ..documents import MemoDocument, validate_category_tree
from ..errors import ConflictError, FormatMismatchError, NotFoundError, StorageError
from ..filenames import FileKind, decode_date, extract_title, matches, slugify
from ..fsutil import read_text_file, remove_empty_dirs, walk_dirs, walk_files
from ..models.results import TidyResult
from ..trash import Trash
from .base import DocumentRepository

logger = logging.getLogger(__name__)


class MemoRepo(DocumentRepository):
    """Memo files under the memos root.

    A memo's directory below the root is its category tree; moving a memo
    to another category relocates its file.
    """

    def __init__(self, root: Path, trash: Trash | None = None):
        super().__init__(root)
        self.trash = trash or Trash.default(fallback_dir=root.parent / ".trash")

    def load(self, path: Path) -> MemoDocument:
        """Read the memo stored at ``path``.

        Raises:
            FormatMismatchError: If the filename is not a memo filename or its
                front matter cannot be parsed
            StorageError: If the file cannot be read
        """
        if not matches(FileKind.MEMO, path.name):
            raise FormatMismatchError(f"not a memo filename: {path.name}")
        date = decode_date(path.name, FileKind.MEMO)
        category_tree = list(path.parent.relative_to(self.root).parts)
        return MemoDocument.from_markdown(
            date, extract_title(path.name), category_tree, read_text_file(path)
        )

    def entries(self) -> list[MemoDocument]:
        """All memos, sorted by date then path. Malformed files are skipped."""
        found: list[tuple[datetime, str, MemoDocument]] = []
        for path in walk_files(self.root):
            if not matches(FileKind.MEMO, path.name):
                continue
            try:
                memo = self.load(path)
            except FormatMismatchError as e:
                logger.warning("Skipping %s: %s", path, e)
                continue
            found.append((memo.date, str(path), memo))

        found.sort(key=lambda item: (item[0], item[1]))
        return [memo for _, _, memo in found]

    def find(self, path: Path) -> MemoDocument:
        """Load the memo at ``path``, which must lie under the memos root.

        Raises:
            NotFoundError: If the path is outside the root or is not a file
        """
        root = self.root.absolute()
        path = path.absolute()
        if not path.is_relative_to(root):
            raise NotFoundError(f"not under the memos directory: {path}")
        if not path.is_file():
            raise NotFoundError(f"memo file does not exist: {path}")
        return self.load(self.root / path.relative_to(root))

    def categories(self) -> list[list[str]]:
        """Every category tree present as a directory under the root."""
        return [list(d.relative_to(self.root).parts) for d in walk_dirs(self.root)]

    def move(self, memo: MemoDocument, category_tree: list[str]) -> Path:
        """Relocate ``memo`` to ``category_tree``.

        Raises:
            ConflictError: If a file already exists at the destination
        """
        return self._relocate(memo, category_tree, memo.title)

    def rename(self, memo: MemoDocument, title: str) -> Path:
        """Give ``memo`` a new title and filename in the same directory.

        Raises:
            ConflictError: If the new filename is already taken
        """
        if not title.strip():
            raise FormatMismatchError("memo title must not be empty")
        return self._relocate(memo, memo.category_tree, title)

    def delete(self, memo: MemoDocument) -> Path:
        """Move the memo file to the trash and return its trash location."""
        return self.trash.move(self.path_for(memo))

    def duplicate(self, memo: MemoDocument) -> MemoDocument:
        """Copy ``memo`` next to itself, one second later than any taken timestamp."""
        source = self.load(self.path_for(memo))
        date = memo.date
        while True:
            date += timedelta(seconds=1)
            copy = MemoDocument(
                date,
                memo.title,
                category_tree=memo.category_tree,
                top_level_body=source.top_level_body,
                heading_blocks=source.heading_blocks,
                extra_metadata=source.extra_metadata,
            )
            if not self.path_for(copy).exists():
                break
        self.save(copy, truncate=False)
        logger.info("Duplicated %s as %s", memo.file_name(), copy.file_name())
        return copy

    def _relocate(self, memo: MemoDocument, category_tree: list[str], title: str) -> Path:
        old_path = self.path_for(memo)
        if not old_path.is_file():
            raise NotFoundError(f"memo file does not exist: {old_path}")

        current = self.load(old_path)
        moved = MemoDocument(
            memo.date,
            title,
            category_tree=validate_category_tree(list(category_tree)),
            top_level_body=current.top_level_body,
            heading_blocks=current.heading_blocks,
            extra_metadata=current.extra_metadata,
        )
        new_path = self.checked_path(moved)

        if new_path == old_path:
            self.save(moved, truncate=True)
        else:
            if new_path.exists():
                raise ConflictError(f"destination already exists: {new_path}")
            self.save(moved, truncate=False)
            try:
                old_path.unlink()
            except OSError as e:
                raise StorageError(f"error removing old memo file: {e}", old_path) from e
            logger.info("Moved %s -> %s", old_path, new_path)

        memo.title = moved.title
        memo.set_category_tree(moved.category_tree)
        memo.declared_category = list(moved.category_tree)
        memo.declared_title = moved.title
        return new_path

    def tidy(self) -> TidyResult:
        """Re-align memo files with the category and title in their front matter.

        Memos whose front-matter ``category`` differs from their directory are
        moved there; memos whose front-matter ``title`` slugs differently from
        their filename are renamed. Collisions and invalid metadata leave the
        file in place. Empty directories are removed afterwards.
        """
        result = TidyResult()
        for memo in self.entries():
            rel = self.relative_path(self.path_for(memo))

            target_tree = memo.category_tree
            if memo.declared_category is not None and memo.declared_category != memo.category_tree:
                try:
                    target_tree = validate_category_tree(memo.declared_category)
                except FormatMismatchError as e:
                    logger.warning("Not moving %s: %s", rel, e)
                    result.skipped.append(rel)
                    continue

            target_title = memo.title
            if memo.declared_title and slugify(memo.declared_title) != memo.slug():
                target_title = memo.declared_title

            if target_tree == memo.category_tree and target_title == memo.title:
                continue

            moved_category = target_tree != memo.category_tree
            try:
                new_path = self._relocate(memo, target_tree, target_title)
            except (ConflictError, FormatMismatchError) as e:
                logger.warning("Not moving %s: %s", rel, e)
                result.skipped.append(rel)
                continue

            change = f"{rel} -> {self.relative_path(new_path)}"
            if moved_category:
                result.moved.append(change)
            else:
                result.renamed.append(change)

        for directory in remove_empty_dirs(self.root):
            logger.info("Removed empty directory: %s", directory)
            result.removed_dirs.append(self.relative_path(directory))

        return result
