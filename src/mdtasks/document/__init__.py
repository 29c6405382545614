"""Task document parsing and serialization."""

from .parser import parse
from .serializer import render_body, render_new_document, serialize

__all__ = [
    "parse",
    "render_body",
    "render_new_document",
    "serialize",
]
