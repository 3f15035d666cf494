"""Pytest fixtures for memov tests."""

from datetime import datetime
from pathlib import Path

import pytest

from memov.config import MemovConfig
from memov.memos import MemoService
from memov.paths import MemovPaths
from memov.repos import MemoRepo, TodoRepo
from memov.todos import TodoService
from memov.trash import Trash

FIXED_NOW = datetime(2023, 1, 2, 15, 4, 5)


class RecordingEditor:
    """Editor double that remembers what it was asked to open."""

    def __init__(self):
        self.calls: list[tuple[Path, Path]] = []

    def open(self, base_dir: Path, path: Path) -> None:
        self.calls.append((base_dir, path))

    @property
    def opened(self) -> list[Path]:
        return [path for _, path in self.calls]


@pytest.fixture
def base_dir(tmp_path):
    """Create a temporary base directory for testing.

    Args:
        tmp_path: pytest's built-in temporary directory fixture

    Returns:
        Path to temporary base directory
    """
    root = tmp_path / "dailymemo"
    root.mkdir()
    return root


@pytest.fixture
def memov_config(base_dir):
    """Create MemovConfig pointing to the temporary base directory."""
    return MemovConfig(base_dir=base_dir, editor_command=["true"])


@pytest.fixture
def memov_paths(memov_config, tmp_path):
    """Create MemovPaths for the temporary base directory.

    Args:
        memov_config: MemovConfig instance
        tmp_path: pytest's built-in temporary directory fixture

    Returns:
        MemovPaths instance with its directories created
    """
    paths = MemovPaths.from_config(memov_config, config_file=tmp_path / "config.toml")
    paths.ensure_directories()
    return paths


@pytest.fixture
def editor():
    return RecordingEditor()


@pytest.fixture
def trash(tmp_path):
    return Trash(tmp_path / "trash")


@pytest.fixture
def memo_repo(memov_paths, trash):
    return MemoRepo(memov_paths.memos_dir, trash)


@pytest.fixture
def todo_repo(memov_paths):
    return TodoRepo(memov_paths.todos_dir)


@pytest.fixture
def memo_service(memov_config, memov_paths, editor, trash):
    return MemoService(memov_config, editor, now=lambda: FIXED_NOW, trash=trash)


@pytest.fixture
def todo_service(memov_config, memov_paths, editor):
    return TodoService(memov_config, editor, now=lambda: FIXED_NOW)
