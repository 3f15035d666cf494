"""Flat heading-block model of a Markdown document.

A document is the prose before its first heading plus an ordered list of
heading blocks; nesting is derived on demand by :func:`heading_tree`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

_HEADING_RE = re.compile(r"^(#{1,6})[ \t]+(.*?)[ \t]*$")
_CODE_FENCE = "```"


def _trim_blank_lines(text: str) -> str:
    lines = text.split("\n")
    while lines and not lines[0].strip():
        lines.pop(0)
    while lines and not lines[-1].strip():
        lines.pop()
    return "\n".join(lines)


@dataclass
class HeadingBlock:
    """One Markdown heading and the text under it up to the next heading.

    ``level`` 0 with an empty ``heading_text`` is used for the prose that
    precedes the first heading of a document. ``content_text`` never starts
    or ends with blank lines.
    """

    level: int
    heading_text: str
    content_text: str = ""

    def __post_init__(self):
        if not 0 <= self.level <= 6:
            raise ValueError(f"heading level out of range: {self.level}")
        self.content_text = _trim_blank_lines(self.content_text)

    def key(self) -> tuple[int, str]:
        return (self.level, self.heading_text)

    def matches(self, other: HeadingBlock) -> bool:
        return self.key() == other.key()

    def to_markdown(self) -> str:
        """Heading line and a blank line, then the content if any."""
        heading = "#" * self.level + " " + self.heading_text + "\n\n"
        if not self.content_text:
            return heading
        return heading + self.content_text + "\n"


@dataclass(frozen=True)
class ParsedMarkdown:
    top_level_body: Optional[HeadingBlock]
    heading_blocks: list[HeadingBlock]


@dataclass
class HeadingNode:
    block: HeadingBlock
    children: list[HeadingNode] = field(default_factory=list)


def parse_markdown(source: str) -> ParsedMarkdown:
    """Split Markdown into the prose before the first heading and a flat block list.

    Every ATX heading opens a block regardless of level; a block runs until
    the next heading line. Heading-like lines inside fenced code are content.
    """
    top_lines: list[str] = []
    blocks: list[tuple[int, str, list[str]]] = []
    in_fence = False

    for line in source.replace("\r\n", "\n").split("\n"):
        if line.lstrip(" \t").startswith(_CODE_FENCE):
            in_fence = not in_fence
        elif not in_fence:
            m = _HEADING_RE.match(line)
            if m:
                blocks.append((len(m.group(1)), m.group(2), []))
                continue

        if blocks:
            blocks[-1][2].append(line)
        else:
            top_lines.append(line)

    top_text = _trim_blank_lines("\n".join(top_lines))
    top_level_body = HeadingBlock(level=0, heading_text="", content_text=top_text) if top_text else None

    return ParsedMarkdown(
        top_level_body=top_level_body,
        heading_blocks=[
            HeadingBlock(level=level, heading_text=text, content_text="\n".join(lines))
            for level, text, lines in blocks
        ],
    )


def serialize_blocks(top_level_body: Optional[HeadingBlock], heading_blocks: list[HeadingBlock]) -> str:
    """Inverse of :func:`parse_markdown`; blocks are separated by one blank line.

    An empty block already ends with its blank line, so it gets no separator.
    """
    parts: list[str] = []
    if top_level_body is not None and top_level_body.content_text:
        parts.append(top_level_body.content_text + "\n")
    parts.extend(block.to_markdown() for block in heading_blocks)

    out = ""
    for part in parts:
        if out and not out.endswith("\n\n"):
            out += "\n"
        out += part
    return out


def heading_tree(heading_blocks: list[HeadingBlock]) -> list[HeadingNode]:
    """Build a nested view of a flat block list from the heading levels."""
    roots: list[HeadingNode] = []
    stack: list[HeadingNode] = []
    for block in heading_blocks:
        node = HeadingNode(block=block)
        while stack and stack[-1].block.level >= block.level:
            stack.pop()
        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)
        stack.append(node)
    return roots


def find_block(heading_blocks: list[HeadingBlock], heading_text: str) -> Optional[HeadingBlock]:
    """Return the first block whose heading text equals ``heading_text``."""
    for block in heading_blocks:
        if block.heading_text == heading_text:
            return block
    return None
