"""Data models."""

from .checklist import ChecklistItem
from .config import DefaultsConfig, GitConfig, MdtasksConfig
from .layout import (
    ChecklistLine,
    ChecklistRegion,
    MetadataEntry,
    NotesRegion,
    TaskDocument,
    TextBlock,
)
from .task import (
    FIELD_ORDER,
    KNOWN_STATUSES,
    PRIORITIES,
    STATUS_ACTIVE,
    STATUS_DONE,
    STATUS_PENDING,
    Task,
)

__all__ = [
    "FIELD_ORDER",
    "KNOWN_STATUSES",
    "PRIORITIES",
    "STATUS_ACTIVE",
    "STATUS_DONE",
    "STATUS_PENDING",
    "ChecklistItem",
    "ChecklistLine",
    "ChecklistRegion",
    "DefaultsConfig",
    "GitConfig",
    "MdtasksConfig",
    "MetadataEntry",
    "NotesRegion",
    "Task",
    "TaskDocument",
    "TextBlock",
]
