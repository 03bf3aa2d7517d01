"""CLI entry point for gitroots."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from gitroots import __version__
from gitroots.config import get_settings
from gitroots.projects import (
    Project,
    ProjectStoreError,
    add_projects,
    find_project,
    load_projects,
    recent_projects,
    remove_project,
    save_projects,
    update_project_last_accessed,
)
from gitroots.scanner import ScanError, canonicalize, find_repos
from gitroots.theme import (
    CYAN,
    GREEN,
    ICON_KNOWN,
    ICON_REPO,
    MUTED,
    RED,
    SURFACE,
    YELLOW,
    format_age,
    render_banner,
)

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    settings = get_settings()
    level = "DEBUG" if verbose else settings.log_level
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _scan(scan_path: str, *, add: bool) -> tuple[list[Path], list[Project], list[Project]]:
    """Scan scan_path; optionally register the results in the project list.

    Returns (repo roots, known projects, newly added projects).
    """
    err = Console(stderr=True)
    with err.status(f"Scanning {scan_path}..."):
        repos = find_repos(scan_path)

    added: list[Project] = []
    if not add:
        # The store only decorates the output here, so a broken file is not fatal
        try:
            projects = load_projects()
        except ProjectStoreError as exc:
            logger.warning("%s; known projects are not marked", exc)
            projects = []
        return repos, projects, added

    projects = load_projects()
    added = add_projects(projects, repos)
    if added:
        save_projects(projects)
        logger.info("Added %d projects", len(added))
    return repos, projects, added


def print_summary(scan_path: str, *, add: bool = False) -> None:
    """Print found repositories as a Rich table."""
    console = Console()
    console.print(render_banner())

    repos, projects, added = _scan(scan_path, add=add)
    if not repos:
        console.print(f"[{RED}]No git repos found.[/{RED}] Try: gitroots ~/code")
        return

    table = Table(border_style=SURFACE, show_edge=True, pad_edge=True)
    table.add_column("", no_wrap=True)
    table.add_column("Repo", style=f"bold {CYAN}")
    table.add_column("Path", style=MUTED)

    for repo in repos:
        known = find_project(projects, repo) is not None
        mark = f"[{YELLOW}]{ICON_KNOWN}[/{YELLOW}]" if known else ""
        table.add_row(mark, escape(repo.name), escape(str(repo)))

    console.print(table)
    console.print(
        f"  {ICON_REPO} [bold {GREEN}]{len(repos)}[/bold {GREEN}] repos"
        + (f"    [bold {GREEN}]+{len(added)}[/bold {GREEN}] added" if add else "")
    )


def print_json(scan_path: str, *, add: bool = False) -> None:
    """Dump scan results as JSON to stdout."""
    repos, _, added = _scan(scan_path, add=add)
    root = canonicalize(Path(scan_path).expanduser())
    data: dict = {"root": str(root), "repos": [str(r) for r in repos]}
    if add:
        data["added"] = [str(p.path) for p in added]
    print(json.dumps(data, indent=2))


def list_projects(*, json_output: bool = False) -> None:
    """Show known projects, most recently accessed first."""
    projects = recent_projects(load_projects())

    if json_output:
        print(json.dumps({"projects": [p.to_dict() for p in projects]}, indent=2))
        return

    console = Console()
    if not projects:
        console.print(f"[{MUTED}]No known projects.[/{MUTED}] Try: gitroots ~/code --add")
        return

    table = Table(border_style=SURFACE, show_edge=True, pad_edge=True)
    table.add_column("Project", style=f"bold {CYAN}")
    table.add_column("Path", style=MUTED)
    table.add_column("Last accessed", justify="right", style=GREEN)
    for p in projects:
        table.add_row(escape(p.display_name), escape(str(p.path)), format_age(p.last_accessed))
    console.print(table)


def touch_project(path: str) -> bool:
    """Mark a known project as accessed now. False if it is not known."""
    projects = load_projects()
    project = update_project_last_accessed(projects, Path(path).expanduser())
    if project is None:
        return False
    save_projects(projects)
    print(project.path)
    return True


def forget_project(path: str) -> bool:
    """Remove a project from the list. False if it is not known."""
    projects = load_projects()
    project = remove_project(projects, Path(path).expanduser())
    if project is None:
        return False
    save_projects(projects)
    print(project.path)
    return True


def pick_project() -> None:
    """Open the picker and print the chosen project's path."""
    from gitroots.tui import run_picker

    projects = load_projects()
    chosen, changed = run_picker(projects)
    if changed:
        save_projects(projects)
    if chosen is not None:
        print(chosen)


def main(argv: list[str] | None = None) -> None:
    """Entry point for the gitroots CLI."""
    parser = argparse.ArgumentParser(
        prog="gitroots",
        description="Find git repositories and keep a list of known projects.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Directory to scan for git repos (default: current directory)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON",
    )
    parser.add_argument(
        "--add",
        action="store_true",
        help="Add the repos found to the project list",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        dest="list_projects",
        help="Show known projects, most recent first",
    )
    parser.add_argument(
        "--touch",
        metavar="PATH",
        help="Mark a known project as accessed now",
    )
    parser.add_argument(
        "--forget",
        metavar="PATH",
        help="Remove a project from the list",
    )
    parser.add_argument(
        "--pick",
        action="store_true",
        help="Pick a known project interactively and print its path",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Log debug output to stderr",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"gitroots {__version__}",
    )

    args = parser.parse_args(argv)
    try:
        _setup_logging(args.verbose)
    except ValidationError as exc:
        _fail(f"Invalid configuration: {_describe(exc)}")

    try:
        if args.touch:
            if not touch_project(args.touch):
                _fail(f"Not a known project: {args.touch}")
        elif args.forget:
            if not forget_project(args.forget):
                _fail(f"Not a known project: {args.forget}")
        elif args.list_projects:
            list_projects(json_output=args.json_output)
        elif args.pick:
            pick_project()
        elif args.json_output:
            print_json(args.path, add=args.add)
        else:
            print_summary(args.path, add=args.add)
    except (ScanError, ProjectStoreError) as exc:
        _fail(str(exc))


def _describe(exc: ValidationError) -> str:
    return "; ".join(
        f"GITROOTS_{'_'.join(str(part) for part in err['loc']).upper()}: {err['msg']}"
        for err in exc.errors()
    )


def _fail(message: str) -> None:
    Console(stderr=True).print(f"[{RED}]{escape(message)}[/{RED}]", highlight=False)
    sys.exit(1)


if __name__ == "__main__":
    main()
