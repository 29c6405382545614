"""End-to-end tests for the mdtasks command line."""

from pathlib import Path

import pytest

from mdtasks.__main__ import main
from mdtasks.cli import generate


def run_cli(project: Path, *args: str) -> int:
    """Run mdtasks against a project directory and return the exit code."""
    with pytest.raises(SystemExit) as exc_info:
        main(["--task-root", str(project), *args])
    return exc_info.value.code


@pytest.fixture
def project(tmp_path: Path) -> Path:
    return tmp_path


def task_file(project: Path) -> Path:
    (path,) = sorted((project / "tasks").glob("*.md"))
    return path


class TestTaskCommands:
    """Tests for task commands."""

    def test_add_and_list(self, project: Path, capsys: pytest.CaptureFixture[str]):
        assert run_cli(project, "add", "Write docs", "-r", "high", "-g", "docs", "api") == 0
        assert (project / "tasks" / "001-write-docs.md").exists()

        assert run_cli(project, "list") == 0
        out = capsys.readouterr().out
        assert "Created task 001: Write docs" in out
        assert "001" in out
        assert "high" in out

    def test_list_filters(self, project: Path, capsys: pytest.CaptureFixture[str]):
        run_cli(project, "add", "Alpha", "-g", "api")
        run_cli(project, "add", "Beta", "-g", "ui")
        capsys.readouterr()

        assert run_cli(project, "list", "--tag", "ui") == 0
        out = capsys.readouterr().out
        assert "Beta" in out
        assert "Alpha" not in out

    def test_list_empty(self, project: Path, capsys: pytest.CaptureFixture[str]):
        assert run_cli(project, "list") == 0
        assert "No tasks found" in capsys.readouterr().out

    def test_show_missing_task(self, project: Path, capsys: pytest.CaptureFixture[str]):
        assert run_cli(project, "show", "404") == 1
        assert "Task with ID '404' not found" in capsys.readouterr().err

    def test_checklist_flow(self, project: Path, capsys: pytest.CaptureFixture[str]):
        run_cli(project, "add", "T")
        assert run_cli(project, "checklist", "001", "first step") == 0
        assert run_cli(project, "checklist", "001", "second step") == 0
        assert run_cli(project, "check", "001", "2") == 0

        text = task_file(project).read_text()
        assert "- [ ] first step\n- [x] second step\n" in text

        assert run_cli(project, "uncheck", "001", "2") == 0
        assert "- [ ] second step\n" in task_file(project).read_text()

        capsys.readouterr()
        assert run_cli(project, "subtasks", "001") == 0
        assert "second step" in capsys.readouterr().out

    def test_check_out_of_range(self, project: Path, capsys: pytest.CaptureFixture[str]):
        run_cli(project, "add", "T")
        assert run_cli(project, "check", "001", "5") == 1
        assert "out of range" in capsys.readouterr().err

    def test_done_and_start(self, project: Path):
        run_cli(project, "add", "T")
        assert run_cli(project, "start", "001") == 0
        assert "status: active\n" in task_file(project).read_text()
        assert run_cli(project, "done", "001") == 0
        assert "status: done\n" in task_file(project).read_text()

    def test_set_commands(self, project: Path):
        run_cli(project, "add", "T")
        assert run_cli(project, "set-title", "001", "New title") == 0
        assert run_cli(project, "set-tags", "001", "a,b") == 0
        assert run_cli(project, "set-due", "001", "2026-12-24") == 0
        assert run_cli(project, "set-project", "001", "web") == 0
        assert run_cli(project, "set-status", "001", "blocked") == 0

        text = task_file(project).read_text()
        assert 'title: "New title"\n' in text
        assert 'tags: ["a", "b"]\n' in text
        assert "due: 2026-12-24\n" in text
        assert "project: web\n" in text
        assert "status: blocked\n" in text

    def test_invalid_priority(self, project: Path, capsys: pytest.CaptureFixture[str]):
        run_cli(project, "add", "T")
        assert run_cli(project, "set-priority", "001", "urgent") == 1
        assert "Invalid value for 'priority'" in capsys.readouterr().err

    def test_add_note(self, project: Path):
        run_cli(project, "add", "T")
        assert run_cli(project, "add-note", "001", "remember") == 0
        assert "## Notes\nremember\n" in task_file(project).read_text()

    def test_cleanup(self, project: Path):
        run_cli(project, "add", "Keep")
        run_cli(project, "add", "Finished")
        run_cli(project, "done", "002")

        assert run_cli(project, "cleanup", "--yes") == 0
        assert [p.name for p in (project / "tasks").glob("*.md")] == ["001-keep.md"]

    def test_problems(self, project: Path, capsys: pytest.CaptureFixture[str]):
        run_cli(project, "add", "T")
        assert run_cli(project, "problems") == 0

        (project / "tasks" / "broken.md").write_text("---\ntitle: no id\n---\n")
        assert run_cli(project, "problems") == 1
        assert "broken.md" in capsys.readouterr().err


class TestEntryPoint:
    """Tests for global options."""

    def test_no_command_prints_help(self, project: Path, capsys: pytest.CaptureFixture[str]):
        assert run_cli(project) == 1
        assert "usage: mdtasks" in capsys.readouterr().out

    def test_generate(self, project: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr(generate, "prompt_task_root", lambda: "tasks")
        assert run_cli(project, "--generate") == 0
        assert (project / "mdtasks.yml").exists()
        assert (project / "tasks").is_dir()

    def test_uses_configured_task_root(self, project: Path):
        (project / "mdtasks.yml").write_text("task_root: work\n")
        run_cli(project, "add", "T")
        assert (project / "work" / "001-t.md").exists()
