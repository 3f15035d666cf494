"""Pydantic models for memov."""

from .results import (
    ListEntry,
    MatchLabel,
    MemoIndexResult,
    SearchHit,
    SearchMatch,
    TidyResult,
    WeeklyReportResult,
    pad_to_width,
)

__all__ = [
    "ListEntry",
    "MatchLabel",
    "MemoIndexResult",
    "SearchHit",
    "SearchMatch",
    "TidyResult",
    "WeeklyReportResult",
    "pad_to_width",
]
