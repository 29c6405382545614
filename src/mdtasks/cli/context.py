"""Objects shared by the CLI command handlers."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..config import Settings
from ..repositories import FilesystemRepository
from ..services import ConfigService, TaskService


@dataclass
class CliContext:
    project_root: Path
    config_service: ConfigService
    task_service: TaskService

    @classmethod
    def from_settings(cls, settings: Settings) -> CliContext:
        config_service = ConfigService(settings.project_root)
        repository = FilesystemRepository(config_service.task_root)
        return cls(
            project_root=settings.project_root,
            config_service=config_service,
            task_service=TaskService(repository, config_service),
        )
