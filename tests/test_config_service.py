"""Tests for ConfigService."""

from pathlib import Path

import pytest

from mdtasks.services import ConfigService


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    return tmp_path


class TestConfigServiceLoading:
    """Tests for ConfigService file loading."""

    def test_default_on_missing_file(self, project_dir: Path):
        """Missing mdtasks.yml returns default config."""
        service = ConfigService(project_dir)
        config = service.get_config()

        assert config.task_root == "tasks"
        assert config.git.branch_prefix == "feature/"
        assert config.git.main_branch == "main"
        assert config.defaults.priority == "medium"
        assert not service.has_config_error

    def test_load_valid_config(self, project_dir: Path):
        (project_dir / "mdtasks.yml").write_text(
            """
version: 1
task_root: work/tasks
git:
  branch_prefix: task/
  main_branch: trunk
defaults:
  priority: low
"""
        )

        service = ConfigService(project_dir)
        config = service.get_config()

        assert config.task_root == "work/tasks"
        assert config.git.branch_prefix == "task/"
        assert config.git.main_branch == "trunk"
        assert config.git.remote == "origin"
        assert config.defaults.priority == "low"
        assert service.task_root == project_dir / "work" / "tasks"
        assert not service.has_config_error


class TestConfigServiceFallback:
    """Invalid configuration falls back to defaults and records the error."""

    @pytest.mark.parametrize(
        "content",
        [
            "",
            "   \n\n",
            "task_root: [unclosed\n",
            "- just\n- a list\n",
            "defaults:\n  priority: urgent\n",
            "task_root: /absolute/path\n",
            "task_root: ../outside\n",
            "git:\n  branch_prefix: has space/\n",
        ],
    )
    def test_fallback(self, project_dir: Path, content: str):
        (project_dir / "mdtasks.yml").write_text(content)

        service = ConfigService(project_dir)
        config = service.get_config()

        assert config.task_root == "tasks"
        assert service.has_config_error
        assert service.config_error

    def test_config_file_is_directory(self, project_dir: Path):
        (project_dir / "mdtasks.yml").mkdir()

        service = ConfigService(project_dir)

        assert service.get_config().task_root == "tasks"
        assert service.has_config_error


class TestConfigServiceCaching:
    """Tests for config caching."""

    def test_config_is_cached(self, project_dir: Path):
        service = ConfigService(project_dir)
        assert service.get_config() is service.get_config()

    def test_reload_picks_up_new_config(self, project_dir: Path):
        service = ConfigService(project_dir)
        assert service.get_config().task_root == "tasks"

        (project_dir / "mdtasks.yml").write_text("task_root: todo\n")
        service.reload()

        assert service.get_config().task_root == "todo"

    def test_reload_clears_error(self, project_dir: Path):
        config_file = project_dir / "mdtasks.yml"
        config_file.write_text("task_root: [bad\n")
        service = ConfigService(project_dir)
        service.get_config()
        assert service.has_config_error

        config_file.write_text("task_root: tasks\n")
        service.reload()
        service.get_config()

        assert not service.has_config_error
