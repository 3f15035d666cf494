"""Typer-based CLI for memov."""

import logging
from contextlib import contextmanager
from typing import Iterator, Optional

import typer
from rich.cells import cell_len
from rich.console import Console
from rich.markup import escape

from .config import MemovConfig, config_file_path, load_config
from .editor import CommandEditor
from .errors import CanceledError, MemovError
from .memos import MemoService
from .todos import TodoService

app = typer.Typer(
    name="memov",
    help="memov - daily todos and categorized memos as plain Markdown files",
    add_completion=False,
)
config_app = typer.Typer(help="Show or edit the configuration", no_args_is_help=True)
todos_app = typer.Typer(help="Daily todo files", no_args_is_help=True)
memos_app = typer.Typer(help="Categorized memo files", no_args_is_help=True)
app.add_typer(config_app, name="config")
app.add_typer(todos_app, name="todos")
app.add_typer(memos_app, name="memos")

console = Console()
err_console = Console(stderr=True)


@app.callback()
def main_callback(
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log debug output to stderr",
    ),
):
    """Manage todos and memos under the configured base directory."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@contextmanager
def handle_errors() -> Iterator[None]:
    """Translate memov errors into a stderr message and exit code."""
    try:
        yield
    except CanceledError as e:
        err_console.print(f"[dim]Canceled: {escape(str(e))}[/dim]")
        raise typer.Exit(code=0)
    except MemovError as e:
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise typer.Exit(code=1)


def _editor(config: MemovConfig) -> CommandEditor:
    return CommandEditor(config.editor_command)


def _memo_service() -> MemoService:
    config = load_config()
    return MemoService(config, _editor(config))


def _todo_service() -> TodoService:
    config = load_config()
    return TodoService(config, _editor(config))


# ============================================================================
# config
# ============================================================================


@config_app.command("show")
def config_show():
    """Print the effective directories and settings."""
    with handle_errors():
        config = load_config()
        typer.echo(f"base_dir: {config.base_dir}")
        typer.echo(f"todos_dir: {config.todos_dir}")
        typer.echo(f"memos_dir: {config.memos_dir}")
        typer.echo(f"todos_daystoseek: {config.todos_daystoseek}")


@config_app.command("edit")
def config_edit():
    """Open the config file in the editor."""
    with handle_errors():
        config = load_config()
        path = config_file_path()
        _editor(config).open(path.parent, path)


# ============================================================================
# todos
# ============================================================================


@todos_app.command("new")
def todos_new(
    truncate: bool = typer.Option(
        False,
        "--truncate",
        "-t",
        help="Overwrite today's file if it already exists",
    ),
):
    """Create today's todo file from the previous day's open items and open it."""
    with handle_errors():
        path = _todo_service().new(truncate=truncate)
        err_console.print(f"[green]+[/green] {path}")


@todos_app.command("weekly")
def todos_weekly():
    """Build the weekly report of todo changes and open it."""
    with handle_errors():
        result = _todo_service().weekly()
        err_console.print(f"[green]+[/green] {result.path} ({result.source_count} todo files)")


# ============================================================================
# memos
# ============================================================================


@memos_app.command("new")
def memos_new(
    title: Optional[list[str]] = typer.Argument(None, help="Memo title (prompted if omitted)"),
):
    """Create a memo and open it."""
    with handle_errors():
        text = " ".join(title or []).strip()
        if not text:
            text = typer.prompt("Title", default="", show_default=False).strip()
        if not text:
            raise CanceledError("empty title")
        path = _memo_service().new(text)
        err_console.print(f"[green]+[/green] {path}")


@memos_app.command("index")
def memos_index():
    """Regenerate memos/index.md and open it."""
    with handle_errors():
        result = _memo_service().index()
        err_console.print(f"[green]+[/green] {result.path} ({result.memo_count} memos)")


@memos_app.command("weekly")
def memos_weekly():
    """Build the weekly report of memos and open it."""
    with handle_errors():
        result = _memo_service().weekly()
        err_console.print(f"[green]+[/green] {result.path} ({result.source_count} memos)")


@memos_app.command("list")
def memos_list(
    short: bool = typer.Option(
        False,
        "--short",
        "-s",
        help="Show paths relative to the memos directory",
    ),
):
    """Print 'title<TAB>path' for every memo."""
    with handle_errors():
        entries = _memo_service().list_entries(full_path=not short)
        width = max((cell_len(e.title) for e in entries), default=0)
        for entry in entries:
            typer.echo(entry.to_line(width))


@memos_app.command("search")
def memos_search(
    query: list[str] = typer.Argument(..., help="Words that must all appear"),
    short: bool = typer.Option(
        False,
        "--short",
        "-s",
        help="Show paths relative to the memos directory",
    ),
    context: bool = typer.Option(
        False,
        "--context",
        "-c",
        help="Show where each memo matched",
    ),
):
    """Find memos whose title, category, headings or body contain every query word."""
    with handle_errors():
        hits = _memo_service().search(" ".join(query), full_path=not short)
        width = max((cell_len(h.title) for h in hits), default=0)
        for hit in hits:
            for line in hit.to_lines(width, show_context=context):
                typer.echo(line)


@memos_app.command("open")
def memos_open(
    path: str = typer.Argument(..., help="Memo path, as printed by 'memos list'"),
):
    """Open a memo in the editor."""
    with handle_errors():
        _memo_service().open(path)


@memos_app.command("rename")
def memos_rename(
    path: str = typer.Argument(..., help="Memo path, as printed by 'memos list'"),
    title: Optional[list[str]] = typer.Argument(None, help="New title (prompted if omitted)"),
):
    """Rename a memo; its date and category are kept."""
    with handle_errors():
        service = _memo_service()
        new_title = " ".join(title or []).strip()
        if not new_title:
            memo = service.find(path)
            err_console.print(f"Current title: {escape(memo.title)}")
            new_title = typer.prompt("New title", default="", show_default=False).strip()
        if not new_title:
            raise CanceledError("empty title")
        new_path = service.rename(path, new_title)
        err_console.print(f"[green]Renamed:[/green] {new_path}")


@memos_app.command("browse")
def memos_browse():
    """Browse memos interactively."""
    from .browse import BrowseSession

    with handle_errors():
        stats = BrowseSession(_memo_service(), console=console).run()
        changed = {name: count for name, count in stats.items() if count}
        if changed:
            summary = ", ".join(f"{name} {count}" for name, count in changed.items())
            err_console.print(f"[dim]{summary}[/dim]")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
