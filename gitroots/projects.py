"""Known-projects list — load, save and update ``projects.toml``."""

from __future__ import annotations

import logging
import time
import tomllib
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import tomli_w

from gitroots.config import GitrootsSettings, ensure_parent_dir, get_settings
from gitroots.scanner import canonicalize

logger = logging.getLogger(__name__)


class ProjectStoreError(Exception):
    """The projects file could not be read, parsed or written."""


@dataclass
class Project:
    path: Path
    name: Optional[str] = None
    last_accessed: Optional[int] = None

    @property
    def display_name(self) -> str:
        return self.name or self.path.name or str(self.path)

    def to_dict(self) -> dict:
        data: dict = {"path": str(self.path)}
        if self.name is not None:
            data["name"] = self.name
        if self.last_accessed is not None:
            data["last_accessed"] = self.last_accessed
        return data

    @classmethod
    def from_dict(cls, data: dict) -> Project:
        """Build a record from a parsed TOML table.

        Raises:
            KeyError: ``path`` is missing.
            TypeError: a field has the wrong type.
        """
        path = data["path"]
        name = data.get("name")
        last_accessed = data.get("last_accessed")
        if not isinstance(path, str):
            raise TypeError(f"path must be a string, got {path!r}")
        if name is not None and not isinstance(name, str):
            raise TypeError(f"name must be a string, got {name!r}")
        # bool is an int subclass
        if last_accessed is not None and (
            not isinstance(last_accessed, int) or isinstance(last_accessed, bool)
        ):
            raise TypeError(f"last_accessed must be an integer, got {last_accessed!r}")
        return cls(path=Path(path), name=name, last_accessed=last_accessed)


def projects_file_path(settings: GitrootsSettings | None = None) -> Path:
    settings = settings or get_settings()
    return settings.config_dir / "projects.toml"


def load_projects(file_path: Path | None = None) -> list[Project]:
    """Read the project list. A missing file is an empty list."""
    file_path = file_path or projects_file_path()
    if not file_path.exists():
        return []

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ProjectStoreError(f"Failed to read projects file: {file_path}") from exc

    try:
        data = tomllib.loads(content)
        projects = [Project.from_dict(record) for record in data.get("projects", [])]
    except (tomllib.TOMLDecodeError, KeyError, TypeError, AttributeError) as exc:
        raise ProjectStoreError(f"Failed to parse projects file: {file_path}") from exc

    logger.debug("Loaded %d projects from %s", len(projects), file_path)
    return projects


def save_projects(projects: Iterable[Project], file_path: Path | None = None) -> None:
    """Write the project list, creating the config directory if needed."""
    file_path = file_path or projects_file_path()
    records = [p.to_dict() for p in projects]
    if records:
        # One [[projects]] table per record; tomli_w would inline short ones
        content = "\n".join(f"[[projects]]\n{tomli_w.dumps(r)}" for r in records)
    else:
        content = tomli_w.dumps({"projects": []})

    try:
        ensure_parent_dir(file_path)
        file_path.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise ProjectStoreError(f"Failed to write projects file: {file_path}") from exc


def find_project(projects: list[Project], path: Path) -> Optional[Project]:
    """Return the first project whose canonical path matches *path*."""
    target = canonicalize(Path(path))
    for project in projects:
        if canonicalize(project.path) == target:
            return project
    return None


def update_project_last_accessed(
    projects: list[Project],
    path: Path,
    now: Optional[int] = None,
) -> Optional[Project]:
    """Stamp the matching project with the current time.

    Only the first match is updated. Returns it, or None if nothing matched.
    """
    project = find_project(projects, path)
    if project is not None:
        project.last_accessed = int(time.time()) if now is None else now
    return project


def add_projects(projects: list[Project], paths: Iterable[Path]) -> list[Project]:
    """Append a record for every path not already known. Returns the new ones."""
    added: list[Project] = []
    for path in paths:
        if find_project(projects, path) is not None:
            continue
        project = Project(path=canonicalize(Path(path)), name=Path(path).name or None)
        projects.append(project)
        added.append(project)
    return added


def remove_project(projects: list[Project], path: Path) -> Optional[Project]:
    project = find_project(projects, path)
    if project is not None:
        projects.remove(project)
    return project


def recent_projects(projects: Iterable[Project]) -> list[Project]:
    """Most recently accessed first; never-accessed projects last."""
    return sorted(
        projects,
        key=lambda p: (p.last_accessed is None, -(p.last_accessed or 0), str(p.path)),
    )
