"""Keystroke-driven memo browser.

Single-keystroke loop over the memo list: open, move to another category,
rename, duplicate, delete, or create memos without leaving the terminal.
"""

import sys
from typing import Callable

from rich.console import Console
from rich.markup import escape

from .categories import CategoryDialog, DialogMode, DialogOutcome, has_children, path_key
from .documents import MemoDocument
from .errors import MemovError
from .memos import MemoService

ENTER_KEYS = ("\r", "\n")
ESCAPE_KEY = "\x1b"


# ============================================================================
# Terminal Keystroke Capture
# ============================================================================


def get_single_keypress() -> str:
    """Read a single keypress from the terminal.

    Uses msvcrt on Windows, termios on Unix.

    Returns:
        Single character that was pressed
    """
    if sys.platform == "win32":
        import msvcrt

        return msvcrt.getwch()

    import termios
    import tty

    fd = sys.stdin.fileno()
    old_settings = termios.tcgetattr(fd)
    try:
        tty.setraw(fd)
        ch = sys.stdin.read(1)
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)
    return ch


class KeyInputSource:
    """Abstraction for key input to enable testing.

    In production: reads from terminal.
    In tests: reads from injected sequence.
    """

    def __init__(self, key_sequence: list[str] | None = None):
        """Initialize key input source.

        Args:
            key_sequence: Optional list of keys for testing.
                          If None, reads from terminal.
        """
        self._sequence = key_sequence
        self._index = 0

    @property
    def exhausted(self) -> bool:
        return self._sequence is not None and self._index >= len(self._sequence)

    def get_key(self) -> str:
        """Get next key.

        Returns:
            Single character from sequence or terminal
        """
        if self._sequence is None:
            return get_single_keypress()
        if self.exhausted:
            return "q"  # Auto-quit when sequence exhausted
        key = self._sequence[self._index]
        self._index += 1
        return key

    def get_line(self, prompt: str = "") -> str:
        """Get a line of input.

        Args:
            prompt: Prompt to display

        Returns:
            Line of input
        """
        if self._sequence is None:
            return input(prompt)
        # In test mode, consume until newline
        line_parts = []
        while not self.exhausted:
            char = self._sequence[self._index]
            self._index += 1
            if char in ENTER_KEYS:
                break
            line_parts.append(char)
        return "".join(line_parts)


# ============================================================================
# Browse Session
# ============================================================================


HELP_LINE = "[dim]j/k move  enter open  m move  r rename  c duplicate  d delete  n new  q quit[/dim]"
DIALOG_HELP_LINE = (
    "[dim]j/k move  h/l collapse/expand  space select  n new category  enter move here  esc cancel[/dim]"
)


class BrowseSession:
    """Interactive memo browser.

    Handles the single-keystroke loop and the move-to-category dialog.
    """

    def __init__(
        self,
        service: MemoService,
        key_source: KeyInputSource | None = None,
        console: Console | None = None,
        confirm_fn: Callable[[str], bool] | None = None,
    ):
        """Initialize browse session.

        Args:
            service: MemoService whose repository is browsed
            key_source: Optional KeyInputSource for testing
            console: Console to draw on (default: stdout)
            confirm_fn: Optional yes/no prompt (default: next key is ``y``)
        """
        self.service = service
        self.repo = service.repo
        self.key_source = key_source or KeyInputSource()
        self.console = console or Console()
        self.confirm = confirm_fn or self._confirm_with_key
        self.memos: list[MemoDocument] = []
        self.cursor = 0
        self.message = ""

        # Session stats
        self.stats = {"opened": 0, "moved": 0, "renamed": 0, "duplicated": 0, "deleted": 0, "created": 0}

    def refresh(self) -> None:
        """Reload memos, grouped by category then date."""
        self.memos = sorted(self.repo.entries(), key=lambda m: (m.category_tree, m.date, m.file_name()))
        if self.memos:
            self.cursor = min(self.cursor, len(self.memos) - 1)
        else:
            self.cursor = 0

    def selected(self) -> MemoDocument | None:
        if not self.memos:
            return None
        return self.memos[self.cursor]

    def select(self, memo: MemoDocument) -> None:
        for i, candidate in enumerate(self.memos):
            if candidate.file_name() == memo.file_name() and candidate.category_tree == memo.category_tree:
                self.cursor = i
                return

    def run(self) -> dict:
        """Run the browser until ``q``.

        Returns:
            Summary dict with counts
        """
        self.refresh()
        while True:
            self.render()
            key = self.key_source.get_key()
            if key in ("q", "\x03"):
                break
            self.handle_key(key)
        return dict(self.stats)

    def render(self) -> None:
        self.console.print()
        if not self.memos:
            self.console.print("[yellow]No memos found.[/yellow]")
        for i, memo in enumerate(self.memos):
            category = " > ".join(memo.category_tree)
            label = f"{escape(category)} [dim]>[/dim] {escape(memo.title)}" if category else escape(memo.title)
            if i == self.cursor:
                self.console.print(f"[reverse]> {label}[/reverse]")
            else:
                self.console.print(f"  {label}")
        if self.message:
            self.console.print(self.message)
            self.message = ""
        self.console.print(HELP_LINE)

    def handle_key(self, key: str) -> None:
        memo = self.selected()
        try:
            if key == "j":
                self.cursor = min(self.cursor + 1, max(len(self.memos) - 1, 0))
            elif key == "k":
                self.cursor = max(self.cursor - 1, 0)
            elif key == "n":
                self._handle_new(memo)
            elif memo is None:
                return
            elif key in ENTER_KEYS:
                self.service.editor.open(self.service.paths.base_dir, self.repo.path_for(memo))
                self.stats["opened"] += 1
            elif key == "m":
                self._handle_move(memo)
            elif key == "r":
                self._handle_rename(memo)
            elif key == "c":
                copy = self.repo.duplicate(memo)
                self.stats["duplicated"] += 1
                self.refresh()
                self.select(copy)
                self.message = f"[green]Duplicated as {escape(copy.file_name())}[/green]"
            elif key == "d":
                self._handle_delete(memo)
        except MemovError as e:
            self.message = f"[red]Error: {escape(str(e))}[/red]"

    def _confirm_with_key(self, prompt: str) -> bool:
        self.console.print(f"{prompt} [y/n]")
        return self.key_source.get_key().lower() == "y"

    def _handle_new(self, memo: MemoDocument | None) -> None:
        title = self.key_source.get_line("New memo title: ").strip()
        if not title:
            self.message = "[dim]Canceled[/dim]"
            return
        category_tree = memo.category_tree if memo is not None else []
        self.service.new(title, category_tree)
        self.stats["created"] += 1
        self.refresh()

    def _handle_rename(self, memo: MemoDocument) -> None:
        title = self.key_source.get_line(f"Rename '{memo.title}' to: ").strip()
        if not title or title == memo.title:
            self.message = "[dim]Canceled[/dim]"
            return
        self.repo.rename(memo, title)
        self.stats["renamed"] += 1
        self.refresh()
        self.select(memo)

    def _handle_delete(self, memo: MemoDocument) -> None:
        if not self.confirm(f"Delete '{escape(memo.title)}'?"):
            self.message = "[dim]Canceled[/dim]"
            return
        target = self.repo.delete(memo)
        self.stats["deleted"] += 1
        self.refresh()
        self.message = f"[green]Moved to trash: {escape(str(target))}[/green]"

    def _handle_move(self, memo: MemoDocument) -> None:
        dialog = CategoryDialog.for_memo(self.repo.categories(), memo.category_tree)
        while dialog.outcome is DialogOutcome.OPEN:
            self.render_dialog(dialog, memo)
            if self.key_source.exhausted:
                dialog.outcome = DialogOutcome.CANCELED
                break
            dialog.handle_key(self.key_source.get_key())

        if dialog.outcome is DialogOutcome.COMMITTED and dialog.result is not None:
            if dialog.result == memo.category_tree:
                return
            self.repo.move(memo, dialog.result)
            self.stats["moved"] += 1
            self.refresh()
            self.select(memo)

    def render_dialog(self, dialog: CategoryDialog, memo: MemoDocument) -> None:
        current = " > ".join(memo.category_tree) or "None"
        self.console.print()
        self.console.print(f"[bold]Move '{escape(memo.title)}' (Currently in: {escape(current)})[/bold]")
        visible = dialog.visible()
        for i, path in enumerate(visible):
            indicator = "  "
            if has_children(path, dialog.categories):
                indicator = "▶ " if path_key(path) in dialog.collapsed else "▼ "
            mark = "[x]" if path_key(path) in dialog.selected else "[ ]"
            line = f"{'  ' * (len(path) - 1)}{indicator}{escape(mark)} {escape(path[-1])}"
            if i == dialog.cursor:
                self.console.print(f"[reverse]{line}[/reverse]")
            else:
                self.console.print(line)
        if dialog.mode is DialogMode.INPUT:
            self.console.print(f"New category: {escape(dialog.input_text)}")
        self.console.print(DIALOG_HELP_LINE)
