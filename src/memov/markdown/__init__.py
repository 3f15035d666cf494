"""Markdown block model and snippet builders."""

from .blocks import (
    HeadingBlock,
    HeadingNode,
    ParsedMarkdown,
    find_block,
    heading_tree,
    parse_markdown,
    serialize_blocks,
)

__all__ = [
    "HeadingBlock",
    "HeadingNode",
    "ParsedMarkdown",
    "find_block",
    "heading_tree",
    "parse_markdown",
    "serialize_blocks",
]
