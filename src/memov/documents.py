"""Document entities: typed wrappers over the Markdown block model.

Each entity derives its filename from its metadata; filenames are never
stored. Serialized documents start with a ``# <title>`` line, memos
additionally with a YAML front-matter block holding ``category`` and
``title``.
"""

import os
from datetime import datetime
from typing import Any, ClassVar, Optional

import frontmatter
import yaml

from .errors import FormatMismatchError, NotFoundError
from .filenames import FileKind, encode, format_day, slugify
from .markdown import HeadingBlock, find_block, parse_markdown, serialize_blocks

TODOS_HEADING = "todos"
WANTTODOS_HEADING = "wanttodos"
INHERITED_HEADINGS = (TODOS_HEADING, WANTTODOS_HEADING)


def validate_category_tree(tree: list[str]) -> list[str]:
    """Check that every component can be used as a single directory name.

    Raises:
        FormatMismatchError: On empty, ``.``, ``..`` or separator-bearing components
    """
    for part in tree:
        if not isinstance(part, str) or part.strip() in ("", ".", ".."):
            raise FormatMismatchError(f"invalid category component: {part!r}")
        if "/" in part or os.sep in part:
            raise FormatMismatchError(f"category component contains a path separator: {part!r}")
    return list(tree)


def split_title_line(source: str) -> tuple[Optional[str], Optional[HeadingBlock], list[HeadingBlock]]:
    """Parse Markdown, treating a leading level-1 heading as the document title.

    Returns:
        (title or None, top-level body, remaining heading blocks)
    """
    parsed = parse_markdown(source)
    blocks = parsed.heading_blocks
    if parsed.top_level_body is None and blocks and blocks[0].level == 1:
        first = blocks[0]
        body = HeadingBlock(level=0, heading_text="", content_text=first.content_text)
        return first.heading_text, (body if body.content_text else None), blocks[1:]
    return None, parsed.top_level_body, blocks


class Document:
    """Common behaviour of every document kind."""

    kind: ClassVar[FileKind]

    def __init__(
        self,
        date: datetime,
        title: str,
        top_level_body: Optional[HeadingBlock] = None,
        heading_blocks: Optional[list[HeadingBlock]] = None,
    ):
        self.date = date
        self.title = title
        self.top_level_body = top_level_body
        self.heading_blocks: list[HeadingBlock] = list(heading_blocks or [])

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.file_name()!r})"

    def file_name(self) -> str:
        return encode(self.kind, self.date, self.title)

    def location(self) -> list[str]:
        """Directory components below the repository root."""
        return []

    def last_heading_block(self) -> Optional[HeadingBlock]:
        if not self.heading_blocks:
            return None
        return self.heading_blocks[-1]

    def set_heading_blocks(self, blocks: list[HeadingBlock]) -> None:
        self.heading_blocks = list(blocks)

    def append_heading_block(self, block: HeadingBlock) -> None:
        self.heading_blocks.append(block)

    def override_heading_block_matched(self, block: HeadingBlock) -> None:
        """Replace the first block with the same ``(level, heading_text)``.

        Raises:
            NotFoundError: If no block matches
        """
        for i, existing in enumerate(self.heading_blocks):
            if existing.matches(block):
                self.heading_blocks[i] = block
                return
        raise NotFoundError(
            f"heading block not found: {'#' * block.level} {block.heading_text}"
        )

    def override_heading_blocks_matched(self, blocks: list[HeadingBlock]) -> None:
        """Apply :meth:`override_heading_block_matched` in order; the first failure aborts."""
        for block in blocks:
            self.override_heading_block_matched(block)

    def body_string(self) -> str:
        return serialize_blocks(self.top_level_body, self.heading_blocks)

    def content_string(self) -> str:
        body = self.body_string()
        if not body:
            return f"# {self.title}\n"
        return f"# {self.title}\n\n{body}"


class TodoDocument(Document):
    """One day's todo file."""

    kind = FileKind.TODO

    def __init__(
        self,
        date: datetime,
        top_level_body: Optional[HeadingBlock] = None,
        heading_blocks: Optional[list[HeadingBlock]] = None,
    ):
        if date is None:
            raise ValueError("todo documents require a date")
        super().__init__(date, format_day(date), top_level_body, heading_blocks)

    def section_text(self, heading_text: str) -> str:
        """Content of the first block titled ``heading_text``, or empty."""
        block = find_block(self.heading_blocks, heading_text)
        return block.content_text if block is not None else ""

    @classmethod
    def from_markdown(cls, date: datetime, source: str) -> "TodoDocument":
        _, body, blocks = split_title_line(source)
        return cls(date, top_level_body=body, heading_blocks=blocks)


class TodoTemplate(Document):
    """Seed document copied into every new day's todo file."""

    kind = FileKind.TODO_TEMPLATE

    def __init__(
        self,
        date: Optional[datetime] = None,
        top_level_body: Optional[HeadingBlock] = None,
        heading_blocks: Optional[list[HeadingBlock]] = None,
    ):
        super().__init__(date or datetime.now(), "todos_template", top_level_body, heading_blocks)

    @classmethod
    def from_markdown(cls, source: str) -> "TodoTemplate":
        _, body, blocks = split_title_line(source)
        return cls(top_level_body=body, heading_blocks=blocks)


def new_todo_template() -> TodoTemplate:
    return TodoTemplate(
        heading_blocks=[
            HeadingBlock(level=2, heading_text=TODOS_HEADING),
            HeadingBlock(level=2, heading_text=WANTTODOS_HEADING),
        ]
    )


class WeeklyDocument(Document):
    """Aggregated weekly report; always saved as ``weekly_report.md``."""

    kind = FileKind.WEEKLY

    def __init__(self, date: Optional[datetime] = None):
        super().__init__(date or datetime.now(), "weekly_report")


class MemoDocument(Document):
    """A titled note living under ``memos_root / category_tree``."""

    kind = FileKind.MEMO

    def __init__(
        self,
        date: datetime,
        title: str,
        category_tree: Optional[list[str]] = None,
        top_level_body: Optional[HeadingBlock] = None,
        heading_blocks: Optional[list[HeadingBlock]] = None,
        declared_category: Optional[list[str]] = None,
        declared_title: Optional[str] = None,
        extra_metadata: Optional[dict[str, Any]] = None,
    ):
        if date is None:
            raise ValueError("memo documents require a date")
        super().__init__(date.replace(microsecond=0), title, top_level_body, heading_blocks)
        self.category_tree: list[str] = validate_category_tree(list(category_tree or []))
        # Values read from front matter; may disagree with the on-disk location until tidied.
        self.declared_category = declared_category
        self.declared_title = declared_title
        self.extra_metadata: dict[str, Any] = dict(extra_metadata or {})

    def location(self) -> list[str]:
        return list(self.category_tree)

    def slug(self) -> str:
        return slugify(self.title)

    def set_category_tree(self, tree: list[str]) -> None:
        self.category_tree = validate_category_tree(list(tree))

    def metadata(self) -> dict[str, Any]:
        meta = dict(self.extra_metadata)
        meta["category"] = list(self.category_tree)
        meta["title"] = self.title
        return meta

    def content_string(self) -> str:
        post = frontmatter.Post(super().content_string(), **self.metadata())
        return frontmatter.dumps(post) + "\n"

    @classmethod
    def from_markdown(
        cls,
        date: datetime,
        slug: str,
        category_tree: list[str],
        source: str,
    ) -> "MemoDocument":
        """Build a memo from file text found at ``category_tree`` with filename slug ``slug``.

        The front-matter title is used for display when it slugs to ``slug``;
        otherwise the slug is the title so that the filename stays derivable.
        """
        meta, content = _split_front_matter(source)

        declared_category = _coerce_category(meta.pop("category", None))
        declared_title = meta.pop("title", None)
        if declared_title is not None:
            declared_title = str(declared_title)

        title = slug
        if declared_title and slugify(declared_title) == slug:
            title = declared_title

        _, body, blocks = split_title_line(content)
        return cls(
            date,
            title,
            category_tree=category_tree,
            top_level_body=body,
            heading_blocks=blocks,
            declared_category=declared_category,
            declared_title=declared_title,
            extra_metadata=meta,
        )


_YAML_HANDLER = frontmatter.YAMLHandler()


def _split_front_matter(source: str) -> tuple[dict[str, Any], str]:
    """Split ``source`` into front-matter metadata and Markdown content.

    A leading ``---`` block counts as front matter only when it holds a YAML
    mapping (or nothing at all). Anything else, such as a thematic break
    around prose or a YAML list, stays in the content untouched.

    Raises:
        FormatMismatchError: If the leading block is not valid YAML
    """
    text = source.strip()
    if not _YAML_HANDLER.detect(text):
        return {}, text
    try:
        fm, content = _YAML_HANDLER.split(text)
    except ValueError:
        return {}, text
    try:
        data = _YAML_HANDLER.load(fm)
    except yaml.YAMLError as e:
        raise FormatMismatchError(f"invalid front matter: {e}") from e
    if data is None and not fm.strip():
        return {}, content.strip()
    if not isinstance(data, dict):
        return {}, text
    return dict(data), content.strip()


def _coerce_category(value: Any) -> Optional[list[str]]:
    if value is None:
        return None
    if isinstance(value, str):
        return [value] if value else []
    if isinstance(value, (list, tuple)):
        return [str(v) for v in value if v is not None]
    return None
