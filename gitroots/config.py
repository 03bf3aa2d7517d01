"""Settings for gitroots, read from ``GITROOTS_*`` environment variables."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _default_config_dir() -> Path:
    """Return ``$XDG_CONFIG_HOME/gitroots``, or ``~/.config/gitroots``."""
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "gitroots"
    return Path.home() / ".config" / "gitroots"


class GitrootsSettings(BaseSettings):
    """Runtime configuration.

    Attributes:
        config_dir: Directory holding ``projects.toml``.
        log_level: Level for the CLI's log handler.
    """

    model_config = {"env_prefix": "GITROOTS_"}

    config_dir: Path = Field(default_factory=_default_config_dir)
    log_level: LogLevel = "WARNING"

    @field_validator("log_level", mode="before")
    @classmethod
    def upper_log_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value


def get_settings() -> GitrootsSettings:
    """Build settings from the current environment.

    Raises:
        pydantic.ValidationError: a ``GITROOTS_*`` variable is invalid.
    """
    return GitrootsSettings()


def ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
