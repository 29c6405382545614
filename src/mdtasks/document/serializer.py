"""Serialize Task values back into task documents.

Every piece of a parsed document is re-emitted byte-for-byte unless the
corresponding task field changed. Changed front matter fields are rendered
in place, newly set ones are slotted in at their canonical position, and the
body only regenerates the checklist lines and Notes content that differ.
"""

from __future__ import annotations

import json
from datetime import date
from typing import Any

import yaml

from ..models.checklist import ChecklistItem, render_item_line
from ..models.layout import (
    ChecklistRegion,
    MetadataEntry,
    NotesRegion,
    TaskDocument,
    TextBlock,
)
from ..models.task import DATE_FIELDS, FIELD_ORDER, Task
from .parser import split_lines, strip_eol

NOTES_HEADING = "## Notes"
CHECKLIST_HEADING = "## Checklist"


def serialize(task: Task) -> str:
    """Render a task as document text."""
    document = task.document or TaskDocument()
    body = render_body(task)

    closing = document.closing
    if body and not closing.endswith("\n"):
        closing += document.newline

    return "".join(
        [
            document.opening,
            *_render_metadata(task, document),
            closing,
            body,
        ]
    )


# --- Front matter ---


def _render_metadata(task: Task, document: TaskDocument) -> list[str]:
    newline = document.newline
    present = [entry.key for entry in document.entries if entry.recognized]

    # Fields set on the task but absent from the document, keyed by the
    # present field they should follow (None: before the first one)
    inserts: dict[str | None, list[str]] = {}
    for key in FIELD_ORDER:
        if key in present or _is_empty(task.field_value(key)):
            continue
        index = FIELD_ORDER.index(key)
        anchor = next((k for k in reversed(FIELD_ORDER[:index]) if k in present), None)
        inserts.setdefault(anchor, []).append(key)

    def rendered(keys: list[str]) -> list[str]:
        return [render_entry(key, task.field_value(key), newline) for key in keys]

    out: list[str] = []
    leading_done = False
    for entry in document.entries:
        if not entry.recognized:
            out.append(entry.raw)
            continue
        if not leading_done:
            out.extend(rendered(inserts.get(None, [])))
            leading_done = True
        out.extend(_render_existing(entry, task, newline))
        out.extend(rendered(inserts.get(entry.key, [])))

    if not leading_done:
        out.extend(rendered(inserts.get(None, [])))
    return out


def _render_existing(entry: MetadataEntry, task: Task, newline: str) -> list[str]:
    assert entry.key is not None
    value = task.field_value(entry.key)
    if _same(value, entry.value):
        return [entry.raw]
    if _is_empty(value):
        return []
    return [render_entry(entry.key, value, _line_ending(entry.raw, newline))]


def _same(value: Any, original: Any) -> bool:
    return type(value) is type(original) and value == original


def _is_empty(value: Any) -> bool:
    return value is None or value == "" or value == []


def _line_ending(raw: str, default: str) -> str:
    first = split_lines(raw)[0]
    ending = first[len(strip_eol(first)) :]
    return ending or default


def render_entry(key: str, value: Any, newline: str = "\n") -> str:
    """Render one front matter line in canonical form."""
    if key == "title":
        text = quote(value)
    elif key == "tags":
        text = "[" + ", ".join(quote(tag) for tag in value) + "]"
    elif key in DATE_FIELDS:
        text = format_date(value)
    elif key == "id":
        text = value if _is_plain_token(value) else quote(value)
    else:
        text = render_scalar(value)
    return f"{key}: {text}{newline}"


def format_date(value: date) -> str:
    """Dates as YYYY-MM-DD, datetimes in ISO format."""
    return value.isoformat()


def quote(value: str) -> str:
    """Double-quote a string (JSON escapes are valid YAML double-quoted escapes)."""
    return json.dumps(value, ensure_ascii=False)


def render_scalar(value: str) -> str:
    """Render a string plain when YAML reads it back unchanged, quoted otherwise."""
    if "\n" not in value and value == value.strip():
        try:
            if yaml.safe_load(f"k: {value}") == {"k": value}:
                return value
        except yaml.YAMLError:
            pass
    return quote(value)


def _is_plain_token(value: str) -> bool:
    return bool(value) and all(c.isalnum() or c in "-_." for c in value)


# --- Body ---


def render_body(task: Task) -> str:
    """Render the narrative body of a task."""
    document = task.document or TaskDocument()
    newline = document.newline
    parts: list[str] = []

    has_notes = document.notes_region is not None
    has_checklist = document.checklist_region is not None

    for block in document.blocks:
        if isinstance(block, TextBlock):
            parts.append(block.text)
        elif isinstance(block, NotesRegion):
            if task.notes is not None:
                parts.extend(_render_notes(block, task.notes, newline))
        elif isinstance(block, ChecklistRegion):
            if not has_notes and task.notes is not None:
                parts.append(
                    _new_region(parts, NOTES_HEADING, task.notes, newline, before_heading=True)
                )
                has_notes = True
            parts.extend(_render_checklist(block, task.checklist, newline))

    if not has_notes and task.notes is not None:
        parts.append(_new_region(parts, NOTES_HEADING, task.notes, newline))
    if not has_checklist and task.checklist:
        lines = "".join(render_item_line(item) + newline for item in task.checklist)
        parts.append(_new_region(parts, CHECKLIST_HEADING, lines, newline))

    return "".join(parts)


def _render_notes(block: NotesRegion, notes: str, newline: str) -> list[str]:
    if notes == block.content:
        return [block.heading, block.content]
    heading = block.heading
    if not heading.endswith("\n"):
        heading += newline
    return [heading, notes]


def _new_region(
    parts: list[str], heading: str, content: str, newline: str, before_heading: bool = False
) -> str:
    """Text for a region that did not exist yet.

    The region is separated from the text before it by a blank line and, when
    it is placed in front of another heading, followed by one.
    """
    previous = "".join(parts)
    prefix = ""
    if previous.strip():
        if not previous.endswith("\n"):
            prefix = newline + newline
        elif not previous.endswith(newline + newline):
            prefix = newline
    elif previous and not previous.endswith("\n"):
        prefix = newline

    if content and not content.endswith("\n"):
        content += newline
    region = f"{prefix}{heading}{newline}{content}"
    if before_heading:
        region += newline
    return region


def _render_checklist(
    region: ChecklistRegion, items: list[ChecklistItem], newline: str
) -> list[str]:
    slots = [index for index, line in enumerate(region.lines) if line.parsed is not None]

    if slots:
        insert_after = slots[-1]
        template = region.lines[slots[-1]].parsed
        indent, bullet = template.indent, template.bullet
    else:
        # After the heading and any blank lines directly below it
        insert_after = -1
        for index, line in enumerate(region.lines):
            if line.raw.strip():
                break
            insert_after = index
        indent, bullet = "", "-"

    added = items[len(slots) :]
    added_text = "".join(render_item_line(item, indent, bullet) + newline for item in added)

    heading = region.heading
    if added_text and insert_after == -1 and not heading.endswith("\n"):
        heading += newline
    out = [heading]
    if insert_after == -1:
        out.append(added_text)

    position = 0
    for index, line in enumerate(region.lines):
        raw = line.raw
        if line.parsed is not None:
            if position < len(items):
                item = items[position]
                if item != line.parsed.item:
                    ending = raw[len(strip_eol(raw)) :]
                    raw = render_item_line(item, line.parsed.indent, line.parsed.bullet) + ending
            else:
                raw = ""
            position += 1
        if index == insert_after and added_text:
            if raw and not raw.endswith("\n"):
                raw += newline
            raw += added_text
        out.append(raw)
    return out


def render_new_document(values: dict[str, Any], notes: str | None = None) -> str:
    """Render a fresh document in canonical layout.

    Front matter keys follow the canonical field order; the body gets a
    "Task Details" heading, the Notes region when notes are given, and an
    empty Checklist region.
    """
    lines = ["---\n"]
    for key in FIELD_ORDER:
        value = values.get(key)
        if not _is_empty(value):
            lines.append(render_entry(key, value))
    lines.append("---\n\n# Task Details\n\n")
    if notes:
        if not notes.endswith("\n"):
            notes += "\n"
        lines.append(f"{NOTES_HEADING}\n{notes}\n")
    lines.append(f"{CHECKLIST_HEADING}\n\n")
    return "".join(lines)
