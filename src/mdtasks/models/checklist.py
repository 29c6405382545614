"""Checklist items embedded in a task body."""

from __future__ import annotations

import re

from pydantic import BaseModel, ConfigDict

from ..errors import IndexOutOfRange

# "- [ ] text", "* [x] text", "  + [X] text"
ITEM_PATTERN = re.compile(
    r"^(?P<indent>[ \t]*)(?P<bullet>[-*+])[ \t]+"
    r"\[(?P<mark>[ xX])\](?:[ \t]+(?P<text>.*?))?[ \t]*$"
)


class ChecklistItem(BaseModel):
    """A single checkable line in the checklist region."""

    model_config = ConfigDict(frozen=True)

    text: str
    done: bool = False

    @property
    def marker(self) -> str:
        return "[x]" if self.done else "[ ]"


class ItemLine(BaseModel):
    """Parsed shape of a checklist item line, kept for re-rendering."""

    model_config = ConfigDict(frozen=True)

    indent: str = ""
    bullet: str = "-"
    item: ChecklistItem


def parse_item_line(line: str) -> ItemLine | None:
    """Match a line (without its line ending) against the checkbox pattern."""
    match = ITEM_PATTERN.match(line)
    if match is None:
        return None
    return ItemLine(
        indent=match.group("indent"),
        bullet=match.group("bullet"),
        item=ChecklistItem(
            text=match.group("text") or "",
            done=match.group("mark") in "xX",
        ),
    )


def render_item_line(item: ChecklistItem, indent: str = "", bullet: str = "-") -> str:
    """Render an item as a markdown checkbox line (no line ending)."""
    line = f"{indent}{bullet} {item.marker}"
    if item.text:
        line = f"{line} {item.text}"
    return line


def set_item_done(
    items: list[ChecklistItem], position: int, done: bool | None = None
) -> list[ChecklistItem]:
    """Return a copy of items with the 1-based position set (or flipped if done is None)."""
    if not 1 <= position <= len(items):
        raise IndexOutOfRange(position, len(items))
    updated = list(items)
    current = updated[position - 1]
    new_done = (not current.done) if done is None else done
    if new_done != current.done:
        updated[position - 1] = current.model_copy(update={"done": new_done})
    return updated


def complete_all(items: list[ChecklistItem]) -> list[ChecklistItem]:
    """Return a copy of items with every item marked done."""
    return [item if item.done else item.model_copy(update={"done": True}) for item in items]


def progress(items: list[ChecklistItem]) -> tuple[int, int]:
    """Return (done, total) for a checklist."""
    return sum(1 for item in items if item.done), len(items)
