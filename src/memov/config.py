"""Configuration management for memov."""

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR_ENV = "MEMOV_CONFIG_DIR"
CONFIG_FILENAME = "config.toml"

DEFAULT_BASE_FOLDERNAME = "dailymemo"
DEFAULT_TODOS_FOLDERNAME = "todos/"
DEFAULT_MEMOS_FOLDERNAME = "memos/"
DEFAULT_TODOS_DAYSTOSEEK = 10
DEFAULT_EDITOR_COMMAND = ["code", "--folder-uri", "{base_dir}", "--goto", "{path}:{line}"]


def config_dir() -> Path:
    """Directory holding ``config.toml``: ``$MEMOV_CONFIG_DIR`` or ``~/.config/memov2``."""
    env_dir = os.environ.get(CONFIG_DIR_ENV)
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".config" / "memov2"


def config_file_path() -> Path:
    return config_dir() / CONFIG_FILENAME


class MemovConfig(BaseModel):
    """User configuration: where documents live and how they are opened."""

    base_dir: Path = Field(default_factory=lambda: config_dir() / DEFAULT_BASE_FOLDERNAME)
    todos_foldername: str = Field(default=DEFAULT_TODOS_FOLDERNAME)
    memos_foldername: str = Field(default=DEFAULT_MEMOS_FOLDERNAME)
    todos_daystoseek: int = Field(default=DEFAULT_TODOS_DAYSTOSEEK, gt=0)
    editor_command: list[str] = Field(default_factory=lambda: list(DEFAULT_EDITOR_COMMAND))

    model_config = {"frozen": False}

    @field_validator("base_dir", mode="before")
    @classmethod
    def _expand_base_dir(cls, value):
        if isinstance(value, str):
            return Path(os.path.expandvars(value)).expanduser()
        return value

    @field_validator("editor_command")
    @classmethod
    def _require_program(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("editor_command must name a program")
        return value

    @property
    def todos_dir(self) -> Path:
        return self.base_dir / self.todos_foldername

    @property
    def memos_dir(self) -> Path:
        return self.base_dir / self.memos_foldername

    def to_toml_str(self) -> str:
        """Generate TOML configuration string."""
        editor = ", ".join(_toml_string(arg) for arg in self.editor_command)
        return f"""# memov configuration

base_dir = {_toml_string(str(self.base_dir))}
todos_foldername = {_toml_string(self.todos_foldername)}
memos_foldername = {_toml_string(self.memos_foldername)}

# Days to look back for the previous todo file
todos_daystoseek = {self.todos_daystoseek}

# argv used to open files; {{base_dir}}, {{path}} and {{line}} are substituted
editor_command = [{editor}]
"""


def _toml_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def load_config(path: Path | None = None) -> MemovConfig:
    """Load the configuration file, creating it with defaults when absent.

    Creating the file also creates the base, todos and memos directories.

    Args:
        path: Config file to read (default: :func:`config_file_path`)

    Returns:
        Loaded configuration

    Raises:
        ConfigError: If the file is malformed, has invalid values, or cannot be created
    """
    path = path or config_file_path()

    if not path.exists():
        config = MemovConfig()
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(config.to_toml_str(), encoding="utf-8")
            for directory in (config.base_dir, config.todos_dir, config.memos_dir):
                directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigError(f"error creating default config at {path}: {e}") from e
        logger.info("Created default config: %s", path)
        return config

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"error decoding config file {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"error reading config file {path}: {e}") from e

    try:
        return MemovConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid config file {path}: {e}") from e
