"""Repo discovery — walk a directory tree and collect git repository roots."""

from __future__ import annotations

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

MARKER = ".git"


class ScanError(Exception):
    """A scan could not complete. ``path`` names the offending location."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(f"{message}: {path}")
        self.path = path


class RootResolutionError(ScanError):
    """The scan root does not exist or cannot be resolved."""


class DirectoryReadError(ScanError):
    """A directory could not be opened for a reason other than permissions."""


class EntryReadError(ScanError):
    """An entry of an opened directory could not be read."""


def canonicalize(path: Path) -> Path:
    """Return the resolved form of *path*, or *path* itself if that fails."""
    try:
        return path.resolve(strict=True)
    except (OSError, RuntimeError):
        logger.debug("Could not canonicalize %s, using it as given", path)
        return path


def _inside_claimed(path: Path, repos: set[Path]) -> bool:
    """True if *path* lies strictly below one of the claimed roots."""
    return any(parent in repos for parent in path.parents)


def _list_subdirs(directory: Path) -> list[Path] | None:
    """Return the non-symlink subdirectories of *directory*.

    Returns None when the directory cannot be listed for lack of permission.
    """
    try:
        it = os.scandir(directory)
    except PermissionError:
        logger.debug("Permission denied listing %s, skipping", directory)
        return None
    except OSError as exc:
        raise DirectoryReadError("Failed to read directory", directory) from exc

    with it:
        try:
            entries = list(it)
        except OSError as exc:
            raise EntryReadError("Failed to read entry in", directory) from exc

    subdirs: list[Path] = []
    for entry in entries:
        try:
            # Symlinks are never followed, so cycles cannot happen
            if entry.is_symlink():
                continue
            if entry.is_dir(follow_symlinks=False):
                subdirs.append(Path(entry.path))
        except OSError as exc:
            raise EntryReadError("Failed to read entry in", directory) from exc
    return subdirs


def find_repos(root: str | os.PathLike[str]) -> list[Path]:
    """Find every git repository root under *root*.

    Returns canonical absolute paths, sorted and duplicate-free. A directory
    inside an already-found repository is never listed, so nested checkouts
    and submodules are not reported separately.

    Raises:
        RootResolutionError: *root* does not resolve to an existing entry.
        DirectoryReadError: a directory could not be opened (not a
            permission problem, those are skipped).
        EntryReadError: a directory's entries could not be read.
    """
    given = Path(root).expanduser()
    try:
        start = given.resolve(strict=True)
    except (OSError, RuntimeError) as exc:
        raise RootResolutionError("Failed to resolve root path", given) from exc

    repos: set[Path] = set()
    pending = [start]

    while pending:
        current = pending.pop()
        current_canonical = canonicalize(current)

        if current.name == MARKER and current.is_dir():
            repos.add(canonicalize(current.parent))
            continue

        if _inside_claimed(current_canonical, repos):
            continue

        subdirs = _list_subdirs(current)
        if not subdirs:
            continue

        # Pop order: a marker first, so its parent is claimed before any
        # sibling is visited, then siblings by name.
        subdirs.sort(key=lambda p: p.name, reverse=True)
        subdirs.sort(key=lambda p: p.name == MARKER)
        pending.extend(subdirs)

    logger.debug("Found %d repositories under %s", len(repos), start)
    return sorted(repos)
