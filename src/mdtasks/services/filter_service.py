"""Service for parsing and applying filters to tasks."""

import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from ..models import Task


@dataclass
class TaskFilter:
    """Represents a parsed filter expression.

    Empty fields place no constraint. Values within one field are ORed,
    distinct fields are ANDed.
    """

    text: str | None = None  # Free text search over title and body
    statuses: list[str] = field(default_factory=list)  # status:value
    priorities: list[str] = field(default_factory=list)  # priority:value
    tags: list[str] = field(default_factory=list)  # tag:value (any-of)
    projects: list[str] = field(default_factory=list)  # project:value

    @property
    def is_empty(self) -> bool:
        return not (self.text or self.statuses or self.priorities or self.tags or self.projects)


class FilterService:
    """Service for parsing and applying filters to tasks."""

    # Pattern for key:value tokens
    TOKEN_PATTERN = re.compile(r"(?:(tag|tags|status|state|priority|project):)?(\S+)")

    def parse(self, expression: str) -> TaskFilter:
        """
        Parse a filter expression string.

        Syntax:
        - Free text: matches title or body
        - tag:value: filter by tag (several tags match any of them)
        - status:pending/active/done (or a custom status)
        - priority:low/medium/high
        - project:value

        Conditions on different fields are ANDed together.
        """
        f = TaskFilter()
        text_parts: list[str] = []

        for match in self.TOKEN_PATTERN.finditer(expression):
            key = match.group(1)
            value = match.group(2)

            if key is None:
                text_parts.append(value)
            elif key in ("tag", "tags"):
                f.tags.extend(v for v in value.split(",") if v)
            elif key in ("status", "state"):
                f.statuses.append(value)
            elif key == "priority":
                f.priorities.append(value)
            elif key == "project":
                f.projects.append(value)

        if text_parts:
            f.text = " ".join(text_parts)

        return f

    def apply(self, tasks: Iterable[Task], filter_: TaskFilter) -> list[Task]:
        """Apply filter to tasks, returning matches ordered by id."""
        return filter_tasks(tasks, filter_)


def filter_tasks(tasks: Iterable[Task], filter_: TaskFilter) -> list[Task]:
    """Return the tasks matching every supplied predicate, sorted by id."""
    return sort_by_id(task for task in tasks if matches(task, filter_))


def matches(task: Task, f: TaskFilter) -> bool:
    """Check if a task matches the filter."""
    # Status filter (any match)
    if f.statuses and not _equals_any(task.status, f.statuses):
        return False

    # Priority filter (any match)
    if f.priorities and not _equals_any(task.priority, f.priorities):
        return False

    # Tag inclusion (any match)
    if f.tags:
        task_tags = {t.lower() for t in task.tags}
        if not any(tag.lower() in task_tags for tag in f.tags):
            return False

    # Project filter (any match)
    if f.projects and not _equals_any(task.project, f.projects):
        return False

    # Text search (case-insensitive)
    if f.text:
        search_text = f.text.lower()
        if search_text not in task.title.lower() and search_text not in task.body.lower():
            return False

    return True


def _equals_any(value: str | None, candidates: list[str]) -> bool:
    if value is None:
        return False
    value = value.lower()
    return any(value == candidate.lower() for candidate in candidates)


def id_sort_key(task: Task) -> tuple[int, int, str]:
    """Numeric ids first in numeric order, then other ids in text order."""
    if task.id.isascii() and task.id.isdigit():
        return (0, int(task.id), task.id)
    return (1, 0, task.id)


def sort_by_id(tasks: Iterable[Task]) -> list[Task]:
    """Stable ascending sort by id."""
    return sorted(tasks, key=id_sort_key)
