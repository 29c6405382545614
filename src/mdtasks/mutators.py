"""Operations that transform one Task into an updated Task.

Mutators never modify their input: each returns a copy with the requested
change applied, or raises without side effects. Validation here is strict;
values a person could type into a document by hand but that the tool should
never write (unknown priorities, empty titles, malformed dates) are rejected.
"""

from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Any

from .document.parser import parse, parse_date, split_lines
from .document.serializer import render_new_document
from .errors import InvalidFieldValue, InvalidTransition
from .models.checklist import ChecklistItem, complete_all, set_item_done
from .models.task import (
    DEFAULT_PRIORITY,
    KNOWN_STATUSES,
    PRIORITIES,
    STATUS_ACTIVE,
    STATUS_DONE,
    STATUS_PENDING,
    Task,
)
from .utils import today as current_day

logger = logging.getLogger(__name__)

SETTABLE_FIELDS = ("title", "status", "priority", "tags", "project", "due")
MANAGED_FIELDS = ("id", "created", "started", "completed")


# --- Creation ---


def new_task(
    task_id: str,
    title: str,
    *,
    status: str | None = None,
    priority: str | None = None,
    tags: list[str] | str | None = None,
    project: str | None = None,
    due: date | str | None = None,
    notes: str | None = None,
    today: date | None = None,
    source: str | None = None,
) -> Task:
    """Create a task in canonical document layout.

    Status defaults to "pending", priority to "medium", and ``created`` to
    today. The result is parsed back from its rendered text so that it
    carries a document layout like any loaded task.
    """
    task_id = str(task_id).strip()
    if not task_id or "\n" in task_id:
        raise InvalidFieldValue("id", task_id, "id cannot be empty")

    values: dict[str, Any] = {
        "id": task_id,
        "title": validate_title(title),
        "status": validate_status(status) if status is not None else STATUS_PENDING,
        "priority": validate_priority(priority) or DEFAULT_PRIORITY,
        "tags": validate_tags(tags),
        "project": validate_project(project),
        "created": today or current_day(),
        "due": validate_date("due", due),
    }
    if notes is not None and not notes.strip():
        notes = None

    task = parse(render_new_document(values, notes=notes), source=source)
    logger.debug("New task %s: %s", task.id, task.title)
    return task


# --- Field updates ---


def set_field(task: Task, name: str, value: Any, today: date | None = None) -> Task:
    """Set a front matter field after validating the value.

    Settable fields are title, status, priority, tags, project and due.
    Setting status goes through transition_status so the done cascade
    applies. Empty values clear optional fields.

    Raises:
        InvalidFieldValue: Unknown or read-only field, or a rejected value.
        InvalidTransition: Empty status.
    """
    if name in MANAGED_FIELDS:
        raise InvalidFieldValue(name, value, "field is managed by mdtasks and cannot be set")
    if name not in SETTABLE_FIELDS:
        raise InvalidFieldValue(
            name, value, f"unknown field; settable fields are {', '.join(SETTABLE_FIELDS)}"
        )

    if name == "status":
        return transition_status(task, value, today=today)

    if name == "title":
        new_value: Any = validate_title(value)
    elif name == "priority":
        new_value = validate_priority(value)
    elif name == "tags":
        new_value = validate_tags(value)
    elif name == "project":
        new_value = validate_project(value)
    else:
        new_value = validate_date(name, value)

    logger.debug("Task %s: %s -> %r", task.id, name, new_value)
    return task.model_copy(update={name: new_value})


def transition_status(task: Task, new_status: str, today: date | None = None) -> Task:
    """Move a task to a new status.

    Moving to "done" marks every checklist item complete and stamps
    ``completed`` if it is unset. Moving to "active" stamps ``started`` if
    unset. Leaving "done" keeps the checklist as it is.

    Raises:
        InvalidTransition: If new_status is empty.
    """
    status = validate_status(new_status)
    day = today or current_day()
    update: dict[str, Any] = {"status": status}

    if status == STATUS_DONE:
        update["checklist"] = complete_all(task.checklist)
        if task.completed is None:
            update["completed"] = day
    elif status == STATUS_ACTIVE and task.started is None:
        update["started"] = day

    logger.debug("Task %s: status %s -> %s", task.id, task.status, status)
    return task.model_copy(update=update)


# --- Notes ---


def append_note(task: Task, text: str) -> Task:
    """Add text at the end of the Notes region, creating the region if needed."""
    if not isinstance(text, str) or not text.strip():
        raise InvalidFieldValue("notes", text, "note cannot be empty")

    newline = task.document.newline if task.document else "\n"
    note = newline.join(text.strip("\r\n").splitlines()) + newline

    if task.notes is None:
        notes = note
    else:
        kept, trailing_blank = _split_trailing_blank(task.notes)
        if kept and not kept.endswith("\n"):
            kept += newline
        notes = kept + note + trailing_blank

    return task.model_copy(update={"notes": notes})


def _split_trailing_blank(text: str) -> tuple[str, str]:
    lines = split_lines(text)
    cut = len(lines)
    while cut > 0 and not lines[cut - 1].strip():
        cut -= 1
    return "".join(lines[:cut]), "".join(lines[cut:])


# --- Checklist ---


def toggle_checklist_item(task: Task, position: int, done: bool | None = None) -> Task:
    """Set the item at a 1-based position to done/undone (flip it if done is None).

    Raises:
        IndexOutOfRange: If position is not within 1..len(checklist).
    """
    if isinstance(position, bool) or not isinstance(position, int):
        raise InvalidFieldValue("checklist", position, "position must be an integer")
    return task.model_copy(update={"checklist": set_item_done(task.checklist, position, done)})


def add_checklist_item(task: Task, text: str) -> Task:
    """Append an unchecked item to the checklist."""
    if not isinstance(text, str) or not text.strip():
        raise InvalidFieldValue("checklist", text, "item text cannot be empty")
    if "\n" in text.strip() or "\r" in text.strip():
        raise InvalidFieldValue("checklist", text, "item text must be a single line")
    item = ChecklistItem(text=text.strip())
    return task.model_copy(update={"checklist": [*task.checklist, item]})


def complete_checklist(task: Task) -> Task:
    """Mark every checklist item done."""
    return task.model_copy(update={"checklist": complete_all(task.checklist)})


# --- Validation ---


def validate_title(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidFieldValue("title", value, "title cannot be empty")
    if "\n" in value or "\r" in value:
        raise InvalidFieldValue("title", value, "title must be a single line")
    return value.strip()


def validate_status(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise InvalidTransition(value, "status cannot be empty")
    if "\n" in value or "\r" in value:
        raise InvalidTransition(value, "status must be a single line")
    status = value.strip()
    if status.lower() in KNOWN_STATUSES:
        status = status.lower()
    return status


def validate_priority(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str) or value.strip().lower() not in PRIORITIES:
        raise InvalidFieldValue("priority", value, f"must be one of: {', '.join(PRIORITIES)}")
    return value.strip().lower()


def validate_tags(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        candidates = value.split(",")
    elif isinstance(value, (list, tuple)):
        candidates = list(value)
    else:
        raise InvalidFieldValue("tags", value, "expected a list or comma-separated string")

    tags: list[str] = []
    for candidate in candidates:
        if not isinstance(candidate, str):
            raise InvalidFieldValue("tags", value, "tags must be strings")
        tag = candidate.strip()
        if "\n" in tag or "\r" in tag:
            raise InvalidFieldValue("tags", value, "tags must be single-line")
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def validate_project(value: Any) -> str | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str) or not value.strip():
        raise InvalidFieldValue("project", value, "project must be a non-empty string")
    if "\n" in value or "\r" in value:
        raise InvalidFieldValue("project", value, "project must be a single line")
    return value.strip()


def validate_date(name: str, value: Any) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str):
        parsed = parse_date(value)
        if parsed is not None:
            return parsed
    raise InvalidFieldValue(name, value, "expected a date like YYYY-MM-DD")
