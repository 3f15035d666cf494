"""Filename codec: the (kind, date, title) tuple encoded in document filenames.

Grammar:

- todo:     ``YYYYMMDDDDD_todos.md``            e.g. ``20230102Mon_todos.md``
- memo:     ``YYYYMMDDDDDhhmmss_memo_<slug>.md`` e.g. ``20230102Mon150405_memo_Hello-World.md``
- weekly:   ``weekly_report.md``
- template: ``todos_template.md``

``DDD`` is always the English three-letter weekday, independent of locale.
"""

import re
from datetime import datetime
from enum import Enum

from .errors import FormatMismatchError

FILE_SEPARATOR = "_"
FILE_FILLER = "-"
FILE_EXTENSION = ".md"

WEEKDAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")

TODO_FILENAME_RE = re.compile(r"^\d{8}\S{3}_todos\.md$")
MEMO_FILENAME_RE = re.compile(r"^\d{8}\S{3}\d{6}_memo_.*\.md$")
MEMO_TITLE_RE = re.compile(r"^\d{8}\S{3}\d{6}_memo_(.*)\.md$")

_TODO_DATE_RE = re.compile(r"^(\d{8})(\S{3})")
_MEMO_DATE_RE = re.compile(r"^(\d{8})(\S{3})(\d{6})")

WEEKLY_FILENAME = "weekly_report.md"
TEMPLATE_FILENAME = "todos_template.md"
INDEX_FILENAME = "index.md"


class FileKind(str, Enum):
    """Closed set of document kinds."""

    TODO = "todo"
    MEMO = "memo"
    WEEKLY = "weekly"
    TODO_TEMPLATE = "todo_template"

    @property
    def token(self) -> str:
        """Word used inside generated filenames."""
        return {
            FileKind.TODO: "todos",
            FileKind.MEMO: "memo",
            FileKind.WEEKLY: "weekly_report",
            FileKind.TODO_TEMPLATE: "todos_template",
        }[self]


def format_day(date: datetime) -> str:
    """Format a date as ``YYYYMMDDDDD`` (e.g. ``20230102Mon``)."""
    return f"{date:%Y%m%d}{WEEKDAYS[date.weekday()]}"


def format_timestamp(date: datetime) -> str:
    """Format a datetime as ``YYYYMMDDDDDhhmmss``."""
    return f"{format_day(date)}{date:%H%M%S}"


def slugify(title: str) -> str:
    """Turn a memo title into its filename slug (spaces become ``-``)."""
    return title.replace(" ", FILE_FILLER)


def encode(kind: FileKind, date: datetime, title: str = "") -> str:
    """Build the filename for a document of ``kind``.

    Args:
        kind: Document kind
        date: Document date (ignored for weekly and template)
        title: Memo title (ignored for other kinds)

    Returns:
        Basename of the document file
    """
    if kind is FileKind.TODO:
        return format_day(date) + FILE_SEPARATOR + kind.token + FILE_EXTENSION
    if kind is FileKind.MEMO:
        return (
            format_timestamp(date)
            + FILE_SEPARATOR
            + kind.token
            + FILE_SEPARATOR
            + slugify(title)
            + FILE_EXTENSION
        )
    if kind is FileKind.WEEKLY:
        return WEEKLY_FILENAME
    return TEMPLATE_FILENAME


def matches(kind: FileKind, filename: str) -> bool:
    """Return True if ``filename`` follows the grammar of ``kind``."""
    if kind is FileKind.TODO:
        return TODO_FILENAME_RE.match(filename) is not None
    if kind is FileKind.MEMO:
        return MEMO_FILENAME_RE.match(filename) is not None
    if kind is FileKind.WEEKLY:
        return filename == WEEKLY_FILENAME
    return filename == TEMPLATE_FILENAME


def decode_date(filename: str, kind: FileKind) -> datetime:
    """Parse the leading date token of ``filename`` using the layout of ``kind``.

    Raises:
        FormatMismatchError: If the filename carries no valid date token
    """
    if kind is FileKind.TODO:
        m = _TODO_DATE_RE.match(filename)
    elif kind is FileKind.MEMO:
        m = _MEMO_DATE_RE.match(filename)
    else:
        raise FormatMismatchError(f"{kind.value} filenames carry no date: {filename}")

    if m is None:
        raise FormatMismatchError(f"no date found in filename: {filename}")

    if m.group(2) not in WEEKDAYS:
        raise FormatMismatchError(f"invalid weekday {m.group(2)!r} in filename: {filename}")

    layout = "%Y%m%d%H%M%S" if kind is FileKind.MEMO else "%Y%m%d"
    token = m.group(1) + (m.group(3) if kind is FileKind.MEMO else "")
    try:
        return datetime.strptime(token, layout)
    except ValueError as e:
        raise FormatMismatchError(f"error parsing date from filename {filename}: {e}") from e


def extract_title(filename: str) -> str:
    """Return the slug of a memo filename, or the filename itself if it is not a memo."""
    m = MEMO_TITLE_RE.match(filename)
    if m is None:
        return filename
    return m.group(1)
