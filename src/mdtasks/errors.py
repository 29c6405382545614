"""Exceptions raised by the task document model and its collaborators."""

from __future__ import annotations

from typing import Any


class MdtasksError(Exception):
    """Base exception for mdtasks errors."""

    pass


class MalformedDocument(MdtasksError):
    """A document could not be parsed into a task."""

    def __init__(self, reason: str, source: str | None = None, line: int | None = None) -> None:
        self.reason = reason
        self.source = source
        self.line = line
        location = source or "<document>"
        if line is not None:
            location = f"{location}:{line}"
        super().__init__(f"{location}: {reason}")


class DuplicateId(MdtasksError):
    """Two documents in a collection share the same task id."""

    def __init__(self, task_id: str, source: str | None, first_source: str | None) -> None:
        self.task_id = task_id
        self.source = source
        self.first_source = first_source
        super().__init__(
            f"{source}: duplicate task id '{task_id}' (already used by {first_source}); skipped"
        )


class InvalidFieldValue(MdtasksError):
    """A mutation tried to write a value a field does not accept."""

    def __init__(self, field: str, value: Any, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid value for '{field}': {value!r} ({reason})")


class InvalidTransition(MdtasksError):
    """A status transition was rejected."""

    def __init__(self, value: Any, reason: str) -> None:
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid status transition to {value!r}: {reason}")


class IndexOutOfRange(MdtasksError):
    """A checklist position is outside the checklist."""

    def __init__(self, position: int, size: int) -> None:
        self.position = position
        self.size = size
        if size == 0:
            detail = "the checklist is empty"
        else:
            detail = f"valid positions are 1..{size}"
        super().__init__(f"Checklist position {position} is out of range ({detail})")


class NotFound(MdtasksError):
    """A referenced task id is not in the collection."""

    def __init__(self, task_id: str) -> None:
        self.task_id = task_id
        super().__init__(f"Task with ID '{task_id}' not found")


class GitError(MdtasksError):
    """A git or gh command failed."""

    def __init__(self, message: str, command: list[str] | None = None, stderr: str = "") -> None:
        self.command = command or []
        self.stderr = stderr
        super().__init__(message)
