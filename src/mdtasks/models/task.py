"""Task domain model."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from .checklist import ChecklistItem, progress
from .layout import TaskDocument

# Status values with transition handling; others pass through untouched
STATUS_PENDING = "pending"
STATUS_ACTIVE = "active"
STATUS_DONE = "done"
KNOWN_STATUSES = (STATUS_PENDING, STATUS_ACTIVE, STATUS_DONE)

PRIORITIES = ("low", "medium", "high")
DEFAULT_PRIORITY = "medium"

# Canonical front matter order; also the set of recognized keys
FIELD_ORDER = (
    "id",
    "title",
    "status",
    "priority",
    "tags",
    "project",
    "created",
    "due",
    "started",
    "completed",
)
DATE_FIELDS = ("created", "due", "started", "completed")

DateValue = datetime | date


class Task(BaseModel):
    """Represents a single task document."""

    id: str  # opaque token, e.g. "001" or "auth-42"
    title: str

    status: str | None = None  # custom statuses allowed
    priority: str | None = None
    tags: list[str] = Field(default_factory=list)
    project: str | None = None
    created: DateValue | None = None
    due: DateValue | None = None
    started: DateValue | None = None
    completed: DateValue | None = None

    checklist: list[ChecklistItem] = Field(default_factory=list)
    notes: str | None = None  # Notes region content, None if there is no region
    extra_fields: dict[str, Any] = Field(default_factory=dict)  # unknown front matter keys

    source: str | None = None  # document identifier, set by the loader
    document: TaskDocument | None = Field(default=None, exclude=True, repr=False)

    @property
    def is_done(self) -> bool:
        return self.status == STATUS_DONE

    @property
    def progress(self) -> tuple[int, int]:
        """(done, total) checklist items."""
        return progress(self.checklist)

    @property
    def body(self) -> str:
        """The narrative body as it would be written, reflecting pending mutations."""
        from ..document.serializer import render_body

        return render_body(self)

    def field_value(self, name: str) -> Any:
        """Return a recognized front matter field by name."""
        if name not in FIELD_ORDER:
            raise KeyError(name)
        return getattr(self, name)
