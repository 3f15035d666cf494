"""Launching an external editor on a document."""

import logging
import os
import subprocess
from pathlib import Path
from typing import Protocol

from .errors import EditorError

logger = logging.getLogger(__name__)

GOTO_LINE = 7


class Editor(Protocol):
    def open(self, base_dir: Path, path: Path) -> None: ...


class CommandEditor:
    """Runs an argv built from templates such as ``["code", "--goto", "{path}:{line}"]``."""

    def __init__(self, argv_templates: list[str], line: int = GOTO_LINE):
        if not argv_templates:
            raise ValueError("editor command must not be empty")
        self.argv_templates = list(argv_templates)
        self.line = line

    def build_argv(self, base_dir: Path, path: Path) -> list[str]:
        values = {"base_dir": str(base_dir), "path": str(path), "line": self.line}
        return [
            os.path.expanduser(os.path.expandvars(template.format(**values)))
            for template in self.argv_templates
        ]

    def open(self, base_dir: Path, path: Path) -> None:
        """Run the editor and wait for the launcher to return.

        Raises:
            EditorError: If the program is missing or exits non-zero
        """
        try:
            argv = self.build_argv(base_dir, path)
        except (KeyError, IndexError) as e:
            raise EditorError(f"error opening editor: unknown placeholder {e}") from e

        logger.debug("Running editor: %s", argv)
        try:
            subprocess.run(argv, check=True)
        except FileNotFoundError as e:
            raise EditorError(f"error opening editor: {argv[0]} not found") from e
        except subprocess.CalledProcessError as e:
            raise EditorError(f"error opening editor: {argv[0]} exited with status {e.returncode}") from e
