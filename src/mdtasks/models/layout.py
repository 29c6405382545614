"""Verbatim layout of a parsed task document.

The layout keeps every byte of the source document so that serializing an
unmodified task reproduces it exactly. Recognized pieces (metadata entries,
the Notes region, checklist item lines) also remember the value they held
at parse time; the serializer compares that against the current task and
only re-renders what differs.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from .checklist import ChecklistItem, ItemLine


class MetadataEntry(BaseModel):
    """One entry of the front matter block.

    ``key`` is None for comment and blank lines, which pass through as-is.
    ``raw`` holds the entry's full text including continuation lines and
    line endings.
    """

    model_config = ConfigDict(frozen=True)

    key: str | None = None
    raw: str
    value: Any = None
    line: int = 0
    recognized: bool = False


class TextBlock(BaseModel):
    """Body text outside the recognized regions, kept verbatim."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["text"] = "text"
    text: str


class NotesRegion(BaseModel):
    """The Notes heading and the text below it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["notes"] = "notes"
    heading: str
    content: str = ""


class ChecklistLine(BaseModel):
    """A line inside the checklist region; ``parsed`` is None for non-item lines."""

    model_config = ConfigDict(frozen=True)

    raw: str
    parsed: ItemLine | None = None


class ChecklistRegion(BaseModel):
    """The Checklist heading and the lines below it."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["checklist"] = "checklist"
    heading: str
    lines: list[ChecklistLine] = Field(default_factory=list)

    @property
    def items(self) -> list[ChecklistItem]:
        return [line.parsed.item for line in self.lines if line.parsed is not None]


BodyBlock = TextBlock | NotesRegion | ChecklistRegion


class TaskDocument(BaseModel):
    """Front matter entries plus body blocks, in source order."""

    model_config = ConfigDict(frozen=True)

    opening: str = "---\n"
    entries: list[MetadataEntry] = Field(default_factory=list)
    closing: str = "---\n"
    blocks: list[BodyBlock] = Field(default_factory=list)
    newline: str = "\n"

    def entry(self, key: str) -> MetadataEntry | None:
        """Return the entry bound to a recognized key, if present."""
        for entry in self.entries:
            if entry.recognized and entry.key == key:
                return entry
        return None

    @property
    def notes_region(self) -> NotesRegion | None:
        for block in self.blocks:
            if isinstance(block, NotesRegion):
                return block
        return None

    @property
    def checklist_region(self) -> ChecklistRegion | None:
        for block in self.blocks:
            if isinstance(block, ChecklistRegion):
                return block
        return None
