"""Service layer for business logic."""

from .config_service import ConfigService
from .filter_service import FilterService, TaskFilter, filter_tasks, sort_by_id
from .task_service import TaskService

__all__ = [
    "ConfigService",
    "FilterService",
    "TaskFilter",
    "TaskService",
    "filter_tasks",
    "sort_by_id",
]
