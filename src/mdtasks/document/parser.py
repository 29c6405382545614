"""Parse task documents into Task values.

Reading is lenient: unknown front matter keys, comments,
unrecognized headings and malformed checklist lines are all kept as
passthrough text instead of failing the parse. Only a missing front matter
block, a missing id or title, an unparseable structured value or an invalid
date rejects the document.
"""

from __future__ import annotations

import logging
import re
from datetime import date, datetime
from typing import Any

import yaml
from frontmatter.default_handlers import YAMLHandler

from ..errors import MalformedDocument
from ..models.checklist import parse_item_line
from ..models.layout import (
    BodyBlock,
    ChecklistLine,
    ChecklistRegion,
    MetadataEntry,
    NotesRegion,
    TaskDocument,
    TextBlock,
)
from ..models.task import DATE_FIELDS, FIELD_ORDER, Task

logger = logging.getLogger(__name__)

# Same boundary rule python-frontmatter uses for YAML front matter
BOUNDARY = YAMLHandler.FM_BOUNDARY

KEY_PATTERN = re.compile(r"^(?P<key>[A-Za-z_][\w.-]*)[ \t]*:(?=[ \t]|\r?\n|$)")
HEADING_PATTERN = re.compile(r"^(?P<level>#{1,6})[ \t]+(?P<text>.*?)[ \t#]*$")
FENCE_PATTERN = re.compile(r"^[ \t]{0,3}(```|~~~)")
LINE_PATTERN = re.compile(r"[^\n]*\n|[^\n]+$")

# Heading names accepted for each recognized region, compared lowercased
CHECKLIST_HEADINGS = frozenset({"checklist", "subtasks", "sub-tasks", "todo", "to-do", "to do"})
NOTES_HEADINGS = frozenset({"notes", "note"})

TEXT_FIELDS = ("id", "title", "status", "priority", "project")


def split_lines(text: str) -> list[str]:
    """Split on \\n only, keeping line endings, so that ''.join() is lossless."""
    return LINE_PATTERN.findall(text)


def strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def heading_of(line: str) -> tuple[int, str] | None:
    """Return (level, normalized text) if the line is an ATX heading."""
    match = HEADING_PATTERN.match(strip_eol(line))
    if match is None:
        return None
    text = " ".join(match.group("text").split()).rstrip(":").strip().lower()
    return len(match.group("level")), text


def parse(text: str, source: str | None = None) -> Task:
    """Parse a task document.

    Args:
        text: Full document text
        source: Document identifier used in error messages (e.g. a path)

    Returns:
        The parsed Task, carrying its verbatim layout for serialization.

    Raises:
        MalformedDocument: If the document cannot be read as a task.
    """
    lines = split_lines(text)

    if not lines or not BOUNDARY.match(lines[0]):
        raise MalformedDocument("missing metadata block", source=source, line=1)

    closing_index = None
    for index in range(1, len(lines)):
        if BOUNDARY.match(lines[index]):
            closing_index = index
            break
    if closing_index is None:
        raise MalformedDocument("metadata block is not terminated by '---'", source=source, line=1)

    newline = "\r\n" if lines[0].endswith("\r\n") else "\n"

    entries = _split_entries(lines[1:closing_index], source)
    entries, fields, extra = _interpret_entries(entries, source)
    blocks = _parse_body(lines[closing_index + 1 :])

    document = TaskDocument(
        opening=lines[0],
        entries=entries,
        closing=lines[closing_index],
        blocks=blocks,
        newline=newline,
    )

    notes_region = document.notes_region
    checklist_region = document.checklist_region

    return Task(
        **fields,
        checklist=checklist_region.items if checklist_region else [],
        notes=notes_region.content if notes_region else None,
        extra_fields=extra,
        source=source,
        document=document,
    )


# --- Front matter ---


def _split_entries(lines: list[str], source: str | None) -> list[MetadataEntry]:
    """Group front matter lines into entries (key line plus continuation lines)."""
    entries: list[MetadataEntry] = []
    current_key: str | None = None
    current_lines: list[str] = []
    current_start = 0
    pending_blank: list[str] = []
    pending_start = 0

    def flush_current() -> None:
        nonlocal current_key, current_lines
        if current_lines:
            entries.append(
                MetadataEntry(key=current_key, raw="".join(current_lines), line=current_start)
            )
        current_key = None
        current_lines = []

    def flush_blank() -> None:
        nonlocal pending_blank
        if pending_blank:
            entries.append(MetadataEntry(raw="".join(pending_blank), line=pending_start))
        pending_blank = []

    for offset, line in enumerate(lines):
        lineno = offset + 2  # the opening delimiter is line 1
        content = strip_eol(line)

        if not content.strip():
            if not pending_blank:
                pending_start = lineno
            pending_blank.append(line)
            continue

        key_match = KEY_PATTERN.match(content)
        if key_match:
            flush_current()
            flush_blank()
            current_key = key_match.group("key")
            current_lines = [line]
            current_start = lineno
        elif content.startswith("#"):
            flush_current()
            flush_blank()
            entries.append(MetadataEntry(raw=line, line=lineno))
        elif current_key is not None:
            # Indented or "- item" continuation of the current entry
            current_lines.extend(pending_blank)
            pending_blank = []
            current_lines.append(line)
        else:
            raise MalformedDocument(
                f"unexpected line in metadata block: {content.strip()!r}",
                source=source,
                line=lineno,
            )

    flush_current()
    flush_blank()
    return entries


def _interpret_entries(
    entries: list[MetadataEntry], source: str | None
) -> tuple[list[MetadataEntry], dict[str, Any], dict[str, Any]]:
    """Load each keyed entry with YAML and bind recognized fields."""
    interpreted: list[MetadataEntry] = []
    fields: dict[str, Any] = {}
    extra: dict[str, Any] = {}

    for entry in entries:
        if entry.key is None:
            interpreted.append(entry)
            continue

        key = entry.key
        value = _load_value(entry, source)

        if key in FIELD_ORDER:
            if key in fields:
                logger.warning(
                    "%s:%d: duplicate '%s' key ignored", source or "<document>", entry.line, key
                )
                interpreted.append(entry)
                continue
            value = _normalize_field(key, value, entry, source)
            fields[key] = value
            interpreted.append(entry.model_copy(update={"value": value, "recognized": True}))
        else:
            if key not in extra:
                extra[key] = value
            interpreted.append(entry.model_copy(update={"value": value}))

    for required in ("id", "title"):
        if not str(fields.get(required) or "").strip():
            raise MalformedDocument(f"missing required field '{required}'", source=source)

    return interpreted, fields, extra


def _load_value(entry: MetadataEntry, source: str | None) -> Any:
    """Load an entry's value with YAML, tolerating unquoted scalars YAML rejects."""
    try:
        loaded = yaml.safe_load(entry.raw)
    except (yaml.YAMLError, ValueError) as e:
        token = _scalar_token(entry.raw)
        single_line = entry.raw.count("\n") <= 1
        plain = single_line and bool(token) and token[0] not in "[{\"'|>"
        if isinstance(e, ValueError):
            # PyYAML builds timestamps with date(), which rejects e.g. 2024-02-30
            if entry.key in DATE_FIELDS or not plain:
                raise MalformedDocument(
                    f"invalid date format for '{entry.key}': {token!r} ({e})",
                    source=source,
                    line=entry.line,
                ) from e
            return token
        if plain:
            # e.g. "title: Fix: login" - read it the way a person would
            return token
        problem = getattr(e, "problem", None) or str(e)
        raise MalformedDocument(
            f"invalid value for '{entry.key}': {problem}", source=source, line=entry.line
        ) from e

    if not isinstance(loaded, dict) or len(loaded) != 1:
        raise MalformedDocument(
            f"invalid value for '{entry.key}'", source=source, line=entry.line
        )
    return next(iter(loaded.values()))


def _scalar_token(raw: str) -> str:
    """The literal text after 'key:' on the first line, without a trailing comment."""
    first_line = strip_eol(split_lines(raw)[0])
    _, _, rest = first_line.partition(":")
    return re.sub(r"[ \t]+#.*$", "", rest).strip()


def _normalize_field(key: str, value: Any, entry: MetadataEntry, source: str | None) -> Any:
    if key in TEXT_FIELDS:
        return _text_value(key, value, entry, source)
    if key == "tags":
        return _tags_value(value, entry, source)
    if key in DATE_FIELDS:
        return _date_value(key, value, entry, source)
    return value


def _text_value(key: str, value: Any, entry: MetadataEntry, source: str | None) -> str | None:
    if value is None:
        return None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (list, dict)):
        raise MalformedDocument(
            f"'{key}' must be a single value, not a list or mapping",
            source=source,
            line=entry.line,
        )
    # Plain scalars YAML resolved to numbers, booleans or dates keep their literal text
    return _scalar_token(entry.raw).strip("\"'") or None


def _tags_value(value: Any, entry: MetadataEntry, source: str | None) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, dict):
        raise MalformedDocument("'tags' must be a list", source=source, line=entry.line)
    if not isinstance(value, list):
        return [str(value)]

    tags: list[str] = []
    for item in value:
        if item is None:
            continue
        if isinstance(item, (list, dict)):
            raise MalformedDocument(
                "'tags' entries must be plain values", source=source, line=entry.line
            )
        tag = str(item)
        if tag and tag not in tags:
            tags.append(tag)
    return tags


def _date_value(key: str, value: Any, entry: MetadataEntry, source: str | None) -> date | None:
    if value is None or value == "":
        return None
    if isinstance(value, (date, datetime)):
        return value
    if isinstance(value, str):
        parsed = parse_date(value)
        if parsed is not None:
            return parsed
    raise MalformedDocument(
        f"invalid date format for '{key}': {value!r}", source=source, line=entry.line
    )


def parse_date(value: str) -> date | None:
    """Parse an ISO date or datetime string; None if it is neither."""
    value = value.strip()
    try:
        return date.fromisoformat(value)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None


# --- Body ---


def _parse_body(lines: list[str]) -> list[BodyBlock]:
    """Split the body into opaque text and the first Notes / Checklist regions."""
    blocks: list[BodyBlock] = []
    text: list[str] = []
    seen: set[str] = set()
    in_fence = False
    index = 0

    while index < len(lines):
        line = lines[index]
        kind = None
        heading = None if in_fence else heading_of(line)
        if heading is not None:
            kind = _region_kind(heading[1])
            if kind in seen:
                kind = None

        if kind is None:
            if FENCE_PATTERN.match(line):
                in_fence = not in_fence
            text.append(line)
            index += 1
            continue

        if text:
            blocks.append(TextBlock(text="".join(text)))
            text = []

        pending = {"notes", "checklist"} - seen - {kind}
        end = _region_end(lines, index + 1, heading[0], pending)
        region_lines = lines[index + 1 : end]
        if kind == "notes":
            blocks.append(NotesRegion(heading=line, content="".join(region_lines)))
        else:
            blocks.append(
                ChecklistRegion(
                    heading=line,
                    lines=[
                        ChecklistLine(raw=raw, parsed=parse_item_line(strip_eol(raw)))
                        for raw in region_lines
                    ],
                )
            )
        seen.add(kind)
        index = end

    if text:
        blocks.append(TextBlock(text="".join(text)))
    return blocks


def _region_kind(heading_text: str) -> str | None:
    if heading_text in CHECKLIST_HEADINGS:
        return "checklist"
    if heading_text in NOTES_HEADINGS:
        return "notes"
    return None


def _region_end(lines: list[str], start: int, level: int, pending: set[str]) -> int:
    """Index of the first heading that closes a region opened at ``level``.

    That is a heading at ``level`` or above, or any heading starting a region
    kind in ``pending``, so a ``# Notes`` region never swallows the checklist.
    """
    in_fence = False
    for index in range(start, len(lines)):
        line = lines[index]
        if FENCE_PATTERN.match(line):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        heading = heading_of(line)
        if heading is None:
            continue
        if heading[0] <= level or _region_kind(heading[1]) in pending:
            return index
    return len(lines)
