"""Textual project picker — choose a known project, most recent first."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import DataTable, Footer, Header, Label

from gitroots.projects import Project, recent_projects, update_project_last_accessed
from gitroots.theme import TAGLINE, format_age


class ProjectTable(DataTable):
    """Known projects, one row each, keyed by list index."""

    def update_data(self, projects: list[Project]) -> None:
        self.clear(columns=True)
        self.add_columns("Project", "Path", "Last accessed")
        order = recent_projects(projects)
        # Rows are keyed by position in the unsorted list
        index = {id(p): i for i, p in enumerate(projects)}
        for p in order:
            self.add_row(
                p.display_name,
                str(p.path),
                format_age(p.last_accessed),
                key=str(index[id(p)]),
            )


class ProjectPicker(App[Optional[Path]]):
    """gitroots — pick a project."""

    CSS = """
    #projects {
        height: 1fr;
        border: solid $secondary;
    }

    #empty {
        height: 100%;
        content-align: center middle;
        text-align: center;
    }
    """

    TITLE = "gitroots"
    SUB_TITLE = TAGLINE

    BINDINGS = [
        Binding("d", "forget", "Forget"),
        Binding("q", "quit", "Quit"),
        Binding("escape", "quit", "Quit", show=False),
    ]

    def __init__(self, projects: list[Project]) -> None:
        super().__init__()
        self.projects = projects
        self.changed = False

    def compose(self) -> ComposeResult:
        yield Header()
        if self.projects:
            yield ProjectTable(id="projects", cursor_type="row")
        else:
            yield Label("No known projects. Try: gitroots ~/code --add", id="empty")
        yield Footer()

    def on_mount(self) -> None:
        if self.projects:
            table = self.query_one(ProjectTable)
            table.update_data(self.projects)
            table.focus()

    def _highlighted(self) -> Optional[int]:
        table = self.query_one(ProjectTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return int(row_key.value)

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        project = self.projects[int(event.row_key.value)]
        update_project_last_accessed(self.projects, project.path)
        self.changed = True
        self.exit(project.path)

    def action_forget(self) -> None:
        if not self.projects:
            return
        index = self._highlighted()
        if index is None:
            return
        del self.projects[index]
        self.changed = True
        self.query_one(ProjectTable).update_data(self.projects)


def run_picker(projects: list[Project]) -> tuple[Optional[Path], bool]:
    """Run the picker. Returns the chosen path and whether the list changed."""
    app = ProjectPicker(projects)
    chosen = app.run()
    return chosen, app.changed
