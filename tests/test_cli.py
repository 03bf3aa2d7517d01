"""Tests for the gitroots command line."""

import json
import os
from pathlib import Path

import pytest

from gitroots.cli import main
from gitroots.projects import Project, load_projects, save_projects


@pytest.fixture(autouse=True)
def config_dir(tmp_path, monkeypatch):
    path = tmp_path / "config"
    monkeypatch.setenv("GITROOTS_CONFIG_DIR", str(path))
    return path


@pytest.fixture()
def code_dir(tmp_path):
    root = tmp_path / "code"
    os.makedirs(root / "alpha" / ".git")
    os.makedirs(root / "beta" / "nested" / ".git")
    return root.resolve()


def test_json_scan(code_dir, capsys):
    main([str(code_dir), "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["repos"] == [str(code_dir / "alpha"), str(code_dir / "beta" / "nested")]
    assert "added" not in data


def test_json_scan_with_add(code_dir, capsys):
    main([str(code_dir), "--json", "--add"])
    data = json.loads(capsys.readouterr().out)
    assert len(data["added"]) == 2
    assert {str(p.path) for p in load_projects()} == set(data["repos"])

    main([str(code_dir), "--json", "--add"])
    data = json.loads(capsys.readouterr().out)
    assert data["added"] == []


def test_summary_lists_repos(code_dir, capsys):
    main([str(code_dir)])
    out = capsys.readouterr().out
    assert "alpha" in out
    assert "nested" in out


def test_summary_no_repos(tmp_path, capsys):
    empty = tmp_path / "empty"
    empty.mkdir()
    main([str(empty)])
    assert "No git repos found" in capsys.readouterr().out


def test_list_json_most_recent_first(capsys):
    save_projects([
        Project(path=Path("/p/old"), last_accessed=1),
        Project(path=Path("/p/new"), name="new", last_accessed=2),
    ])
    main(["--list", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert [p["path"] for p in data["projects"]] == ["/p/new", "/p/old"]


def test_touch_known_project(code_dir, capsys):
    main([str(code_dir), "--json", "--add"])
    capsys.readouterr()
    main(["--touch", str(code_dir / "alpha")])
    assert str(code_dir / "alpha") in capsys.readouterr().out
    touched = [p for p in load_projects() if p.last_accessed is not None]
    assert [p.path for p in touched] == [code_dir / "alpha"]


def test_touch_unknown_project_fails(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main(["--touch", str(tmp_path / "nope")])
    assert excinfo.value.code == 1
    assert "Not a known project" in capsys.readouterr().err


def test_forget_project(code_dir, capsys):
    main([str(code_dir), "--json", "--add"])
    main(["--forget", str(code_dir / "alpha")])
    assert [p.path for p in load_projects()] == [code_dir / "beta" / "nested"]


def test_missing_root_fails(tmp_path, capsys):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tmp_path / "missing"), "--json"])
    assert excinfo.value.code == 1
    assert "Failed to resolve root path" in capsys.readouterr().err


def test_corrupt_projects_file_fails(code_dir, config_dir, capsys):
    config_dir.mkdir(parents=True)
    (config_dir / "projects.toml").write_text("not = [valid")
    with pytest.raises(SystemExit) as excinfo:
        main(["--list"])
    assert excinfo.value.code == 1
    assert "Failed to parse projects file" in capsys.readouterr().err


def test_json_root_is_canonical(code_dir, capsys, monkeypatch):
    monkeypatch.chdir(code_dir)
    main([".", "--json"])
    data = json.loads(capsys.readouterr().out)
    assert data["root"] == str(code_dir)


@pytest.mark.parametrize(
    "record",
    ['path = "/p/a"\nlast_accessed = "yesterday"\n', 'path = "/p/a"\nname = 5\n'],
)
def test_list_with_bad_field_types_fails(config_dir, record, capsys):
    config_dir.mkdir(parents=True)
    (config_dir / "projects.toml").write_text("[[projects]]\n" + record)
    with pytest.raises(SystemExit) as excinfo:
        main(["--list"])
    assert excinfo.value.code == 1
    assert "Failed to parse projects file" in capsys.readouterr().err


def test_scan_survives_corrupt_projects_file(code_dir, config_dir, capsys):
    config_dir.mkdir(parents=True)
    (config_dir / "projects.toml").write_text("not = [valid")
    main([str(code_dir), "--json"])
    captured = capsys.readouterr()
    assert len(json.loads(captured.out)["repos"]) == 2

    main([str(code_dir)])
    assert "alpha" in capsys.readouterr().out


def test_invalid_log_level_fails_cleanly(monkeypatch, capsys):
    monkeypatch.setenv("GITROOTS_LOG_LEVEL", "foo")
    with pytest.raises(SystemExit) as excinfo:
        main(["--list"])
    assert excinfo.value.code == 1
    assert "Invalid configuration" in capsys.readouterr().err


def test_log_level_is_case_insensitive(monkeypatch, capsys):
    monkeypatch.setenv("GITROOTS_LOG_LEVEL", "debug")
    main(["--list", "--json"])
    assert json.loads(capsys.readouterr().out) == {"projects": []}
