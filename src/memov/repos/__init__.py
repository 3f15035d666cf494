"""Filesystem repositories, one per document kind."""

from .base import DocumentRepository
from .memo import MemoRepo
from .todo import TodoRepo
from .weekly import WeeklyRepo

__all__ = ["DocumentRepository", "MemoRepo", "TodoRepo", "WeeklyRepo"]
