"""Category forest logic behind the move-to-category dialog.

Pure data transforms (sorting, visibility, selection, commit) plus a small
key-driven state machine; rendering lives in :mod:`memov.browse`.
"""

from dataclasses import dataclass, field
from enum import Enum

PATH_SEPARATOR = "/"


def path_key(path: list[str]) -> str:
    return PATH_SEPARATOR.join(path)


def sort_categories(categories: list[list[str]]) -> list[list[str]]:
    """Depth-first order: roots by first component, children by last component.

    A path whose parent is not in ``categories`` is treated as a root.
    """
    unique: dict[str, list[str]] = {}
    for path in categories:
        if path:
            unique.setdefault(path_key(path), list(path))

    children: dict[str, list[list[str]]] = {}
    roots: list[list[str]] = []
    for path in unique.values():
        parent = path_key(path[:-1])
        if len(path) > 1 and parent in unique:
            children.setdefault(parent, []).append(path)
        else:
            roots.append(path)

    ordered: list[list[str]] = []

    def visit(path: list[str]) -> None:
        ordered.append(path)
        for child in sorted(children.get(path_key(path), []), key=lambda p: p[-1]):
            visit(child)

    for root in sorted(roots, key=lambda p: (p[0], p)):
        visit(root)
    return ordered


def visible_categories(categories: list[list[str]], collapsed: set[str]) -> list[list[str]]:
    """Paths none of whose strict prefixes is collapsed."""
    return [
        path
        for path in categories
        if not any(path_key(path[:i]) in collapsed for i in range(1, len(path)))
    ]


def has_children(path: list[str], categories: list[list[str]]) -> bool:
    return any(len(other) > len(path) and other[: len(path)] == path for other in categories)


def toggle(keys: set[str], path: list[str]) -> None:
    key = path_key(path)
    if key in keys:
        keys.discard(key)
    else:
        keys.add(key)


def commit_selection(selected: set[str], categories: list[list[str]]) -> list[str]:
    """The longest selected path; ties go to the first in sorted order. Empty if nothing is selected."""
    best: list[str] = []
    for path in sort_categories(categories):
        if path_key(path) in selected and len(path) > len(best):
            best = path
    return best


def parse_category_input(text: str) -> list[str]:
    """Parse ``"a > b"`` or ``"a/b"`` into ``["a", "b"]``, dropping empty segments."""
    normalized = text.replace(">", PATH_SEPARATOR)
    return [segment.strip() for segment in normalized.split(PATH_SEPARATOR) if segment.strip()]


def add_category(categories: list[list[str]], path: list[str]) -> list[list[str]]:
    """``categories`` plus ``path`` and each of its prefixes not already present."""
    existing = {path_key(p) for p in categories}
    result = list(categories)
    for i in range(1, len(path) + 1):
        prefix = path[:i]
        if path_key(prefix) not in existing:
            existing.add(path_key(prefix))
            result.append(prefix)
    return result


class DialogMode(str, Enum):
    NORMAL = "normal"
    INPUT = "input"


class DialogOutcome(str, Enum):
    OPEN = "open"
    COMMITTED = "committed"
    CANCELED = "canceled"


@dataclass
class CategoryDialog:
    """State of the move-to-category dialog.

    Keys in normal mode: ``j``/``k`` move, ``h``/``l`` collapse/expand,
    space selects (replacing any previous selection), ``n`` starts typing a
    new category, ``enter`` commits, ``esc`` cancels. In input mode,
    ``enter`` adds the typed path and ``esc`` discards it.
    """

    categories: list[list[str]]
    selected: set[str] = field(default_factory=set)
    collapsed: set[str] = field(default_factory=set)
    cursor: int = 0
    mode: DialogMode = DialogMode.NORMAL
    input_text: str = ""
    outcome: DialogOutcome = DialogOutcome.OPEN
    result: list[str] | None = None

    @classmethod
    def for_memo(cls, categories: list[list[str]], current: list[str]) -> "CategoryDialog":
        dialog = cls(categories=sort_categories(add_category(categories, current)))
        if current:
            dialog.selected.add(path_key(current))
            visible = dialog.visible()
            if current in visible:
                dialog.cursor = visible.index(current)
        return dialog

    def visible(self) -> list[list[str]]:
        return visible_categories(self.categories, self.collapsed)

    def current(self) -> list[str] | None:
        visible = self.visible()
        if not visible:
            return None
        self.cursor = min(max(self.cursor, 0), len(visible) - 1)
        return visible[self.cursor]

    def toggle_collapse(self, path: list[str]) -> None:
        toggle(self.collapsed, path)

    def toggle_select(self, path: list[str]) -> None:
        toggle(self.selected, path)

    def handle_key(self, key: str) -> DialogOutcome:
        if self.mode is DialogMode.INPUT:
            self._handle_input_key(key)
        else:
            self._handle_normal_key(key)
        return self.outcome

    def _handle_normal_key(self, key: str) -> None:
        current = self.current()
        if key == "j":
            self.cursor += 1
            self.current()
        elif key == "k":
            self.cursor = max(self.cursor - 1, 0)
        elif key == "h" and current is not None:
            self.collapsed.add(path_key(current))
        elif key == "l" and current is not None:
            self.collapsed.discard(path_key(current))
        elif key == " " and current is not None:
            self.selected = {path_key(current)}
        elif key == "n":
            self.mode = DialogMode.INPUT
            self.input_text = ""
        elif key in ("\r", "\n"):
            self.result = commit_selection(self.selected, self.categories)
            self.outcome = DialogOutcome.COMMITTED
        elif key in ("\x1b", "q"):
            self.outcome = DialogOutcome.CANCELED

    def _handle_input_key(self, key: str) -> None:
        if key == "\x1b":
            self.input_text = ""
            self.mode = DialogMode.NORMAL
        elif key in ("\r", "\n"):
            path = parse_category_input(self.input_text)
            if path:
                self.categories = sort_categories(add_category(self.categories, path))
            self.input_text = ""
            self.mode = DialogMode.NORMAL
        elif key in ("\x7f", "\b"):
            self.input_text = self.input_text[:-1]
        elif key.isprintable():
            self.input_text += key
