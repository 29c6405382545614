"""Markdown task documents with YAML front matter.

The document model is usable without the CLI::

    from mdtasks import parse, serialize, transition_status

    task = parse(text, source="tasks/001-write-docs.md")
    text = serialize(transition_status(task, "done"))
"""

from .collection import TaskCollection, load_collection
from .document import parse, serialize
from .errors import (
    DuplicateId,
    GitError,
    IndexOutOfRange,
    InvalidFieldValue,
    InvalidTransition,
    MalformedDocument,
    MdtasksError,
    NotFound,
)
from .models import ChecklistItem, Task
from .mutators import (
    add_checklist_item,
    append_note,
    complete_checklist,
    new_task,
    set_field,
    toggle_checklist_item,
    transition_status,
)
from .services.filter_service import TaskFilter, filter_tasks

__version__ = "0.1.0"

__all__ = [
    "ChecklistItem",
    "DuplicateId",
    "GitError",
    "IndexOutOfRange",
    "InvalidFieldValue",
    "InvalidTransition",
    "MalformedDocument",
    "MdtasksError",
    "NotFound",
    "Task",
    "TaskCollection",
    "TaskFilter",
    "add_checklist_item",
    "append_note",
    "complete_checklist",
    "filter_tasks",
    "load_collection",
    "new_task",
    "parse",
    "serialize",
    "set_field",
    "toggle_checklist_item",
    "transition_status",
]
