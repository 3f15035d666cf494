"""Pydantic models for operation results rendered by the CLI."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field
from rich.cells import cell_len

MatchLabel = Literal["Title", "Category", "Heading", "Body"]


class TidyResult(BaseModel):
    """Outcome of a tidy pass over the memos root."""

    moved: list[str] = Field(
        default_factory=list,
        description="'old -> new' relative paths of memos moved to their declared category",
    )
    renamed: list[str] = Field(
        default_factory=list,
        description="'old -> new' relative paths of memos renamed to their declared title",
    )
    skipped: list[str] = Field(
        default_factory=list,
        description="Relative paths left in place because the destination already exists or metadata is invalid",
    )
    removed_dirs: list[str] = Field(
        default_factory=list,
        description="Empty directories removed after moving",
    )

    @property
    def changed(self) -> bool:
        return bool(self.moved or self.renamed or self.removed_dirs)


class WeeklyReportResult(BaseModel):
    """Summary of a generated weekly report."""

    path: Path
    source_count: int = Field(default=0, description="Number of source documents folded into the report")
    week_count: int = Field(default=0, description="Number of ISO week headings emitted")
    tidy: TidyResult | None = None


class MemoIndexResult(BaseModel):
    """Summary of a regenerated memo index."""

    path: Path
    memo_count: int = 0
    category_count: int = 0
    tidy: TidyResult | None = None


class ListEntry(BaseModel):
    """One memo line of ``memos list``."""

    title: str
    path: str

    def to_line(self, width: int = 0) -> str:
        return f"{pad_to_width(self.title, width)}\t{self.path}"


class SearchMatch(BaseModel):
    """A single place inside a memo where every query word was found."""

    label: MatchLabel
    excerpt: str


class SearchHit(BaseModel):
    """A memo matching a search query together with where it matched."""

    title: str
    path: str
    matches: list[SearchMatch] = Field(default_factory=list)

    def to_lines(self, width: int = 0, show_context: bool = False) -> list[str]:
        head = f"{pad_to_width(self.title, width)}\t{self.path}"
        if not show_context or not self.matches:
            return [head]
        return [f"{head}\t[{m.label}]\t{m.excerpt}" for m in self.matches]


def pad_to_width(text: str, width: int) -> str:
    """Right-pad ``text`` with spaces to ``width`` terminal cells."""
    return text + " " * max(width - cell_len(text), 0)
