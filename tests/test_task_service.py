"""Tests for TaskService."""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from mdtasks.errors import IndexOutOfRange, NotFound
from mdtasks.repositories import FilesystemRepository
from mdtasks.services import ConfigService, TaskFilter, TaskService


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def task_service(project_dir: Path) -> TaskService:
    """Create a TaskService over a temporary project."""
    config_service = ConfigService(project_dir)
    repo = FilesystemRepository(config_service.task_root)
    return TaskService(repo, config_service)


class TestCreateTask:
    """Tests for TaskService.create_task."""

    def test_assigns_sequential_ids(self, task_service: TaskService, project_dir: Path):
        first = task_service.create_task("First task")
        second = task_service.create_task("Second task")

        assert first.id == "001"
        assert second.id == "002"
        assert (project_dir / "tasks" / "002-second-task.md").exists()

    def test_uses_config_defaults(self, project_dir: Path):
        (project_dir / "mdtasks.yml").write_text(
            "defaults:\n  priority: high\n  status: active\n"
        )
        service = TaskService(
            FilesystemRepository(project_dir / "tasks"), ConfigService(project_dir)
        )

        task = service.create_task("Configured")

        assert task.priority == "high"
        assert task.status == "active"

    def test_explicit_values_win(self, task_service: TaskService):
        task = task_service.create_task("T", priority="low", tags="a,b", project="web")
        assert task.priority == "low"
        assert task.tags == ["a", "b"]
        assert task.project == "web"

    def test_without_config_service(self, tmp_path: Path):
        service = TaskService(FilesystemRepository(tmp_path / "tasks"))
        task = service.create_task("T")
        assert task.status == "pending"
        assert task.priority == "medium"


class TestUpdates:
    """Tests for mutations through the service."""

    def test_mark_done_persists(self, task_service: TaskService):
        created = task_service.create_task("T")
        task_service.add_checklist_item(created.id, "step one")

        task_service.mark_done(created.id)

        reloaded = task_service.get_task(created.id)
        assert reloaded.status == "done"
        assert reloaded.completed is not None
        assert all(item.done for item in reloaded.checklist)

    def test_start_task(self, task_service: TaskService):
        created = task_service.create_task("T")
        started = task_service.start_task(created.id)
        assert started.status == "active"
        assert task_service.get_task(created.id).started is not None

    def test_unchanged_task_not_written(self, task_service: TaskService):
        """A mutation that changes nothing does not rewrite the file."""
        created = task_service.create_task("T")
        task_service.mark_done(created.id)

        task_service.repository.save = MagicMock()
        task_service.mark_done(created.id)

        task_service.repository.save.assert_not_called()

    def test_set_field_and_note(self, task_service: TaskService):
        created = task_service.create_task("T")
        task_service.set_field(created.id, "priority", "high")
        task_service.add_note(created.id, "remember this")

        reloaded = task_service.get_task(created.id)
        assert reloaded.priority == "high"
        assert reloaded.notes is not None
        assert "remember this" in reloaded.notes

    def test_toggle_out_of_range(self, task_service: TaskService):
        created = task_service.create_task("T")
        with pytest.raises(IndexOutOfRange):
            task_service.toggle_checklist_item(created.id, 1)

    def test_unknown_task(self, task_service: TaskService):
        with pytest.raises(NotFound):
            task_service.mark_done("404")


class TestQueries:
    """Tests for listing and cleanup."""

    def test_list_tasks_with_filter(self, task_service: TaskService):
        task_service.create_task("Alpha", tags="api")
        task_service.create_task("Beta", tags="ui")

        assert [t.title for t in task_service.list_tasks()] == ["Alpha", "Beta"]
        result = task_service.list_tasks(TaskFilter(tags=["ui"]))
        assert [t.title for t in result] == ["Beta"]

    def test_cleanup_done(self, task_service: TaskService, project_dir: Path):
        keep = task_service.create_task("Keep")
        finished = task_service.create_task("Finished")
        task_service.mark_done(finished.id)

        done = task_service.done_tasks()
        assert [t.id for t in done] == [finished.id]
        assert task_service.delete_tasks(done) == 1

        remaining = task_service.list_tasks()
        assert [t.id for t in remaining] == [keep.id]
