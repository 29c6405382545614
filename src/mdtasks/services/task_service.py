"""Service for task operations against a task directory."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING, Any

from .. import mutators
from ..collection import TaskCollection
from ..models import STATUS_ACTIVE, STATUS_DONE, Task
from .filter_service import TaskFilter, filter_tasks, sort_by_id

if TYPE_CHECKING:
    from ..repositories import FilesystemRepository
    from .config_service import ConfigService

logger = logging.getLogger(__name__)


class TaskService:
    """Service for task operations.

    Each operation loads the collection fresh, locates the task, applies one
    mutation and writes the document back. Nothing is cached between calls.
    """

    def __init__(
        self,
        repository: FilesystemRepository,
        config_service: ConfigService | None = None,
    ) -> None:
        self.repository = repository
        self._config_service = config_service

    def _defaults(self) -> tuple[str, str]:
        """Default (status, priority) for new tasks."""
        if self._config_service:
            defaults = self._config_service.get_config().defaults
            return defaults.status, defaults.priority
        return "pending", "medium"

    # --- Queries ---

    def load(self) -> TaskCollection:
        return self.repository.load()

    def get_task(self, task_id: str) -> Task:
        """Get a task by ID.

        Raises:
            NotFound: If no task has that id.
        """
        return self.load().get(task_id)

    def list_tasks(self, filter_: TaskFilter | None = None) -> list[Task]:
        """All tasks, or those matching a filter, ordered by id."""
        tasks = self.load().tasks
        if filter_ is None:
            return sort_by_id(tasks)
        return filter_tasks(tasks, filter_)

    # --- Creation ---

    def create_task(
        self,
        title: str,
        status: str | None = None,
        priority: str | None = None,
        tags: list[str] | str | None = None,
        project: str | None = None,
        due: date | str | None = None,
        notes: str | None = None,
    ) -> Task:
        """
        Create a new task document with the next free id.

        The file is named "<id>-<slug>.md" after the title.
        """
        default_status, default_priority = self._defaults()
        collection = self.load()
        task = mutators.new_task(
            collection.next_id(),
            title,
            status=status or default_status,
            priority=priority or default_priority,
            tags=tags,
            project=project,
            due=due,
            notes=notes,
        )
        self.repository.ensure_directory()
        saved = self.repository.save(task)
        logger.info("Task created: %s (%s)", saved.id, saved.source)
        return saved

    # --- Mutations ---

    def update(self, task_id: str, mutate: Callable[[Task], Task]) -> Task:
        """Apply one mutation to a stored task and write it back.

        The document is left untouched when the mutation changes nothing.
        """
        task = self.get_task(task_id)
        updated = mutate(task)
        if updated == task:
            logger.debug("Task %s unchanged, not writing", task_id)
            return task
        return self.repository.save(updated)

    def mark_done(self, task_id: str) -> Task:
        """Mark a task done, completing its checklist."""
        return self.update(task_id, lambda t: mutators.transition_status(t, STATUS_DONE))

    def start_task(self, task_id: str) -> Task:
        """Mark a task active."""
        return self.update(task_id, lambda t: mutators.transition_status(t, STATUS_ACTIVE))

    def set_status(self, task_id: str, status: str) -> Task:
        return self.update(task_id, lambda t: mutators.transition_status(t, status))

    def set_field(self, task_id: str, name: str, value: Any) -> Task:
        return self.update(task_id, lambda t: mutators.set_field(t, name, value))

    def add_note(self, task_id: str, text: str) -> Task:
        return self.update(task_id, lambda t: mutators.append_note(t, text))

    def add_checklist_item(self, task_id: str, text: str) -> Task:
        return self.update(task_id, lambda t: mutators.add_checklist_item(t, text))

    def toggle_checklist_item(self, task_id: str, position: int, done: bool | None = None) -> Task:
        return self.update(
            task_id, lambda t: mutators.toggle_checklist_item(t, position, done)
        )

    # --- Cleanup ---

    def done_tasks(self) -> list[Task]:
        return [task for task in self.list_tasks() if task.is_done]

    def delete_tasks(self, tasks: list[Task]) -> int:
        """Delete the documents of the given tasks; returns how many were removed."""
        deleted = 0
        for task in tasks:
            logger.info("Deleting task: %s", task.id)
            self.repository.delete(task)
            deleted += 1
        return deleted
