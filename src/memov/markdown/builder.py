"""Small Markdown snippet builders used by the report and index generators."""

TAB_SIZE = 2

_HALF_WIDTH_STRIP = "#."
_FULL_WIDTH_STRIP = (
    "　！＠＃＄％＾＆＊（）＋｜〜＝￥｀「」｛｝；’：”、。・＜＞？【】『』《》〔〕［］‹›«»〘〙〚〛"
)


def anchor_tag(text: str) -> str:
    """Convert heading text into a link fragment (``Hello World.`` -> ``Hello-World``)."""
    if not text:
        return ""
    for ch in _HALF_WIDTH_STRIP + _FULL_WIDTH_STRIP:
        text = text.replace(ch, "")
    return text.replace(" ", "-")


def heading(level: int, text: str) -> str:
    if level < 1 or level > 6:
        return ""
    return "#" * level + " " + text + "\n"


def list_item(text: str, level: int = 1) -> str:
    """Bullet item; ``level`` 1 is flush left, each extra level indents by two spaces."""
    level = max(level, 1)
    return " " * (TAB_SIZE * (level - 1)) + "- " + text + "\n"


def ordered_item(order: int, text: str, level: int = 1, parent_order: int = 1) -> str:
    """Numbered item.

    Nested items are indented past the parent's marker, so the indent grows
    with the digit count of ``parent_order`` (``1. `` needs 3 spaces,
    ``10. `` needs 4).
    """
    order = max(order, 1)
    parent_order = max(parent_order, 1)
    indent = " " * ((TAB_SIZE + len(str(parent_order))) * (level - 1))
    return f"{indent}{order}. {text}\n"


def code_block(code: str, language: str = "") -> str:
    if not code:
        return ""
    return f"```{language}\n{code}\n```\n"


def link(text: str, url: str, tag: str = "") -> str:
    """Inline link; ``tag`` becomes the ``#fragment`` after :func:`anchor_tag`."""
    if not text or not url:
        return ""
    if not tag:
        return f"[{text}]({url})"
    return f"[{text}]({url}#{anchor_tag(tag)})"
