"""Fold time-ordered todo and memo documents into a weekly report."""

from datetime import datetime

from .diffing import unified_diff
from .documents import TODOS_HEADING, MemoDocument, TodoDocument, WeeklyDocument
from .filenames import format_day
from .markdown import HeadingBlock
from .markdown import builder


def week_label(date: datetime) -> str:
    """``"YYYY | Week N"`` from the ISO 8601 week date."""
    year, week, _ = date.isocalendar()
    return f"{year} | Week {week}"


class _WeekTracker:
    """Appends a level-2 week heading whenever the ISO (year, week) changes."""

    def __init__(self, weekly: WeeklyDocument):
        self.weekly = weekly
        self.previous: tuple[int, int] | None = None
        self.count = 0

    def observe(self, date: datetime) -> None:
        year, week, _ = date.isocalendar()
        if (year, week) != self.previous:
            self.weekly.append_heading_block(HeadingBlock(level=2, heading_text=week_label(date)))
            self.previous = (year, week)
            self.count += 1


def memo_link_path(memo: MemoDocument) -> str:
    """POSIX path of a memo relative to the memos root."""
    return "/".join([*memo.location(), memo.file_name()])


def memo_items(memo: MemoDocument, order: int) -> str:
    """Ordered list entry for one memo with a nested entry per titled heading."""
    path = memo_link_path(memo)
    text = builder.ordered_item(order, builder.link(memo.title, path, memo.title))
    titled = [block for block in memo.heading_blocks if block.heading_text]
    for inner, block in enumerate(titled, start=1):
        heading_link = builder.link(block.heading_text, path, block.heading_text)
        text += builder.ordered_item(inner, heading_link, level=2, parent_order=order)
    return text.rstrip("\n")


def build_memo_weekly(memos: list[MemoDocument], weekly: WeeklyDocument | None = None) -> tuple[WeeklyDocument, int]:
    """Group memos by ISO week, then by day.

    Args:
        memos: Memos sorted by date ascending
        weekly: Report to append to (a new one if omitted)

    Returns:
        The report and the number of week headings emitted
    """
    weekly = weekly or WeeklyDocument()
    weeks = _WeekTracker(weekly)
    order = 0

    for memo in memos:
        weeks.observe(memo.date)

        day = format_day(memo.date)
        last = weekly.last_heading_block()
        if last is not None and last.level == 3 and last.heading_text == day:
            order += 1
            items = memo_items(memo, order)
            last.content_text = f"{last.content_text}\n{items}" if last.content_text else items
        else:
            order = 1
            weekly.append_heading_block(
                HeadingBlock(level=3, heading_text=day, content_text=memo_items(memo, order))
            )

    return weekly, weeks.count


def todos_diff(prev: TodoDocument, curr: TodoDocument) -> str:
    """Unified diff of the ``todos`` sections of two days, trimmed of blank lines."""
    diff = unified_diff(
        prev.section_text(TODOS_HEADING),
        curr.section_text(TODOS_HEADING),
        prev.file_name(),
        curr.file_name(),
    )
    return diff.strip("\n")


def build_todo_weekly(todos: list[TodoDocument], weekly: WeeklyDocument | None = None) -> tuple[WeeklyDocument, int]:
    """One level-3 heading per day after the first, holding the diff against the previous day.

    Args:
        todos: Todo documents sorted by date ascending
        weekly: Report to append to (a new one if omitted)

    Returns:
        The report and the number of week headings emitted
    """
    weekly = weekly or WeeklyDocument()
    weeks = _WeekTracker(weekly)

    for prev, curr in zip(todos, todos[1:]):
        weeks.observe(curr.date)

        diff = todos_diff(prev, curr)
        name = curr.file_name()
        weekly.append_heading_block(
            HeadingBlock(
                level=3,
                heading_text=builder.link(name, name),
                content_text=builder.code_block(diff, "diff").rstrip("\n"),
            )
        )

    return weekly, weeks.count
