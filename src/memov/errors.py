"""Exception hierarchy for memov.

Library code raises these; the CLI turns them into a red message on stderr
and exit code 1 (``CanceledError`` exits 0).
"""

from pathlib import Path


class MemovError(Exception):
    """Base class for all memov errors."""
    pass


class FormatMismatchError(MemovError):
    """A filename does not match the grammar of its document kind."""
    pass


class NotFoundError(MemovError):
    """A file or heading block is absent."""
    pass


class ConflictError(MemovError):
    """The destination of a move, rename or duplicate already exists."""
    pass


class StorageError(MemovError):
    """Underlying filesystem failure, with the path it happened on."""

    def __init__(self, message: str, path: Path | str | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


class CanceledError(MemovError):
    """The user declined an interactive prompt."""
    pass


class ConfigError(MemovError):
    """Malformed configuration file or unusable directory."""
    pass


class EditorError(MemovError):
    """The external editor could not be launched."""
    pass
