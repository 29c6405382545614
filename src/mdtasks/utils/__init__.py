"""Utility helpers."""

from .datetime import now_utc, today
from .slug import slugify, task_filename

__all__ = [
    "now_utc",
    "slugify",
    "task_filename",
    "today",
]
