"""Repository layer for data access."""

from .filesystem import FilesystemRepository

__all__ = [
    "FilesystemRepository",
]
