"""Tests for the Markdown block model and snippet builders."""

import pytest

from memov.markdown import HeadingBlock, find_block, heading_tree, parse_markdown, serialize_blocks
from memov.markdown import builder


# ============================================================================
# Parsing
# ============================================================================


def test_parse_splits_top_level_body_and_blocks():
    parsed = parse_markdown("intro\n\n## a\n\nline1\n\n### b\nx\n")

    assert parsed.top_level_body is not None
    assert parsed.top_level_body.content_text == "intro"
    assert [b.key() for b in parsed.heading_blocks] == [(2, "a"), (3, "b")]
    assert parsed.heading_blocks[0].content_text == "line1"
    assert parsed.heading_blocks[1].content_text == "x"


def test_parse_without_prose_has_no_top_level_body():
    parsed = parse_markdown("## todos\n\n## wanttodos\n")

    assert parsed.top_level_body is None
    assert [b.heading_text for b in parsed.heading_blocks] == ["todos", "wanttodos"]
    assert all(b.content_text == "" for b in parsed.heading_blocks)


def test_headings_inside_code_fence_are_content():
    parsed = parse_markdown("## a\n```\n# not a heading\n```\n")

    assert len(parsed.heading_blocks) == 1
    assert parsed.heading_blocks[0].content_text == "```\n# not a heading\n```"


def test_hash_without_space_is_not_a_heading():
    parsed = parse_markdown("#tag\n## real\n")

    assert parsed.top_level_body.content_text == "#tag"
    assert [b.heading_text for b in parsed.heading_blocks] == ["real"]


def test_serialize_round_trips_canonical_text():
    source = "intro\n\n## a\n\nline1\n\n### b\n\nx\n"
    parsed = parse_markdown(source)

    assert serialize_blocks(parsed.top_level_body, parsed.heading_blocks) == source


def test_serialize_keeps_blank_line_after_empty_blocks():
    source = "## todos\n\n## wanttodos\n\n"
    parsed = parse_markdown(source)

    assert serialize_blocks(parsed.top_level_body, parsed.heading_blocks) == source


def test_serialize_is_stable_after_one_pass():
    messy = "\n\nintro\n\n\n## a\nline1\n\n\n### b\nx"
    parsed = parse_markdown(messy)
    once = serialize_blocks(parsed.top_level_body, parsed.heading_blocks)
    reparsed = parse_markdown(once)

    assert serialize_blocks(reparsed.top_level_body, reparsed.heading_blocks) == once


# ============================================================================
# HeadingBlock
# ============================================================================


def test_heading_block_trims_blank_lines():
    block = HeadingBlock(level=2, heading_text="todos", content_text="\n\n- [ ] a\n\n")

    assert block.content_text == "- [ ] a"
    assert block.to_markdown() == "## todos\n\n- [ ] a\n"


def test_empty_heading_block_markdown():
    assert HeadingBlock(level=2, heading_text="todos").to_markdown() == "## todos\n\n"


def test_heading_block_rejects_bad_level():
    with pytest.raises(ValueError):
        HeadingBlock(level=7, heading_text="too deep")


def test_heading_block_matches_by_level_and_text():
    a = HeadingBlock(level=2, heading_text="todos", content_text="old")
    b = HeadingBlock(level=2, heading_text="todos", content_text="new")
    c = HeadingBlock(level=3, heading_text="todos")

    assert a.matches(b)
    assert not a.matches(c)


def test_heading_tree_nests_by_level():
    blocks = parse_markdown("## a\n### a1\n### a2\n## b\n").heading_blocks
    roots = heading_tree(blocks)

    assert [n.block.heading_text for n in roots] == ["a", "b"]
    assert [n.block.heading_text for n in roots[0].children] == ["a1", "a2"]
    assert roots[1].children == []


def test_find_block():
    blocks = parse_markdown("## a\n\nx\n## b\n").heading_blocks

    assert find_block(blocks, "b") is blocks[1]
    assert find_block(blocks, "missing") is None


# ============================================================================
# Builder
# ============================================================================


class TestBuilder:
    """Tests for Markdown snippet builders."""

    def test_anchor_tag_strips_punctuation(self):
        assert builder.anchor_tag("Hello World.") == "Hello-World"
        assert builder.anchor_tag("#1 「見出し」") == "1-見出し"
        assert builder.anchor_tag("") == ""

    def test_link(self):
        assert builder.link("t", "p.md") == "[t](p.md)"
        assert builder.link("t", "p.md", "A b") == "[t](p.md#A-b)"
        assert builder.link("", "p.md") == ""

    def test_list_item_indents_two_spaces_per_level(self):
        assert builder.list_item("x") == "- x\n"
        assert builder.list_item("x", 3) == "    - x\n"

    def test_ordered_item_indent_follows_parent_marker_width(self):
        assert builder.ordered_item(2, "x") == "2. x\n"
        assert builder.ordered_item(1, "x", level=2, parent_order=3) == "   1. x\n"
        assert builder.ordered_item(1, "x", level=2, parent_order=10) == "    1. x\n"

    def test_code_block(self):
        assert builder.code_block("a\nb", "diff") == "```diff\na\nb\n```\n"
        assert builder.code_block("", "diff") == ""

    def test_heading(self):
        assert builder.heading(2, "a") == "## a\n"
        assert builder.heading(0, "a") == ""
