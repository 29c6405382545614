"""Tests for parsing task documents."""

from datetime import date, datetime

import pytest

from mdtasks.document import parse
from mdtasks.errors import MalformedDocument
from mdtasks.models import ChecklistItem


class TestFrontMatter:
    """Tests for reading the metadata block."""

    def test_recognized_fields(self, sample_text: str):
        """Recognized keys map to task fields."""
        task = parse(sample_text)
        assert task.id == "001"
        assert task.title == "Write docs"
        assert task.status == "pending"
        assert task.priority == "high"
        assert task.tags == ["docs", "api"]
        assert task.created == date(2024, 1, 15)
        assert task.due is None

    def test_unknown_keys_kept_as_extra(self, sample_text: str):
        """Keys outside the schema are exposed read-only."""
        task = parse(sample_text)
        assert task.extra_fields == {"owner": "alice"}

    def test_numeric_id_keeps_literal_text(self):
        """id: 001 stays "001" rather than becoming 1."""
        task = parse("---\nid: 001\ntitle: T\n---\n")
        assert task.id == "001"

    def test_non_numeric_id(self):
        task = parse("---\nid: auth-42\ntitle: T\n---\n")
        assert task.id == "auth-42"

    def test_custom_status_passes_through(self):
        """Statuses other than pending/active/done are kept as written."""
        task = parse("---\nid: 1\ntitle: T\nstatus: blocked\n---\n")
        assert task.status == "blocked"

    def test_unquoted_title_with_colon(self):
        """A plain title containing ': ' is read literally."""
        task = parse("---\nid: 1\ntitle: Fix: login page\n---\n")
        assert task.title == "Fix: login page"

    def test_scalar_tags_promoted_to_list(self):
        task = parse("---\nid: 1\ntitle: T\ntags: solo\n---\n")
        assert task.tags == ["solo"]

    def test_block_list_tags(self):
        """YAML block lists are read as continuation lines of the key."""
        task = parse("---\nid: 1\ntitle: T\ntags:\n  - a\n  - b\nproject: web\n---\n")
        assert task.tags == ["a", "b"]
        assert task.project == "web"

    def test_empty_date_is_none(self):
        task = parse("---\nid: 1\ntitle: T\ndue:\n---\n")
        assert task.due is None

    def test_datetime_value(self):
        """Timestamps stay datetimes."""
        task = parse("---\nid: 1\ntitle: T\nstarted: 2024-01-15T10:30:00\n---\n")
        assert isinstance(task.started, datetime)
        assert task.started == datetime(2024, 1, 15, 10, 30)

    def test_quoted_date_string(self):
        task = parse('---\nid: 1\ntitle: T\ndue: "2024-03-01"\n---\n')
        assert task.due == date(2024, 3, 1)

    def test_duplicate_key_first_wins(self):
        """The first occurrence of a recognized key binds."""
        task = parse("---\nid: 1\ntitle: T\nstatus: pending\nstatus: done\n---\n")
        assert task.status == "pending"

    def test_comments_and_blank_lines_allowed(self):
        task = parse("---\n# tracked by mdtasks\nid: 1\n\ntitle: T\n---\n")
        assert task.id == "1"
        assert task.title == "T"

    def test_source_recorded(self, sample_text: str):
        task = parse(sample_text, source="tasks/001-write-docs.md")
        assert task.source == "tasks/001-write-docs.md"


class TestMalformedDocuments:
    """Tests for documents that cannot be read as tasks."""

    def test_missing_front_matter(self):
        with pytest.raises(MalformedDocument, match="missing metadata block"):
            parse("# Just a heading\n")

    def test_empty_document(self):
        with pytest.raises(MalformedDocument):
            parse("")

    def test_unterminated_front_matter(self):
        with pytest.raises(MalformedDocument, match="not terminated"):
            parse("---\nid: 1\ntitle: T\n")

    def test_missing_title(self):
        with pytest.raises(MalformedDocument, match="'title'"):
            parse("---\nid: 1\nstatus: pending\n---\n")

    def test_missing_id(self):
        with pytest.raises(MalformedDocument, match="'id'"):
            parse("---\ntitle: T\n---\n")

    def test_invalid_date_names_source_and_line(self):
        """The error carries the document identifier and offending line."""
        with pytest.raises(MalformedDocument) as exc_info:
            parse("---\nid: 1\ntitle: T\ndue: nope\n---\n", source="tasks/x.md")

        error = exc_info.value
        assert error.source == "tasks/x.md"
        assert error.line == 4
        assert str(error).startswith("tasks/x.md:4:")
        assert "'nope'" in str(error)

    @pytest.mark.parametrize(
        ("line", "key"),
        [("due: 2024-02-30", "due"), ("created: 2024-13-01", "created")],
    )
    def test_impossible_date(self, line: str, key: str):
        """Dates YAML recognizes but cannot build are reported with their line."""
        with pytest.raises(MalformedDocument, match=f"invalid date format for '{key}'") as exc_info:
            parse(f"---\nid: 1\ntitle: T\n{line}\n---\n", source="x.md")
        assert exc_info.value.line == 4

    def test_impossible_date_in_unknown_key_kept_as_text(self):
        task = parse("---\nid: 1\ntitle: T\nowner: 2024-02-30\n---\n")
        assert task.extra_fields == {"owner": "2024-02-30"}

    def test_whitespace_title(self):
        with pytest.raises(MalformedDocument, match="'title'"):
            parse('---\nid: 1\ntitle: "   "\n---\n')

    def test_unclosed_bracket_list(self):
        with pytest.raises(MalformedDocument, match="'tags'"):
            parse("---\nid: 1\ntitle: T\ntags: [a, b\n---\n")

    def test_title_as_mapping(self):
        with pytest.raises(MalformedDocument):
            parse("---\nid: 1\ntitle:\n  nested: value\n---\n")

    def test_stray_indented_line(self):
        with pytest.raises(MalformedDocument, match="unexpected line"):
            parse("---\n  orphan\nid: 1\ntitle: T\n---\n")


class TestBody:
    """Tests for Notes and Checklist regions."""

    def test_checklist_items(self, sample_text: str):
        """Items of any bullet style are read; other lines are not items."""
        task = parse(sample_text)
        assert task.checklist == [
            ChecklistItem(text="outline", done=False),
            ChecklistItem(text="draft", done=True),
            ChecklistItem(text="review", done=True),
        ]

    def test_notes_content(self, sample_text: str):
        """Notes content runs to the next heading of the same level."""
        task = parse(sample_text)
        assert task.notes == "First note.\n\n"

    def test_no_regions(self):
        task = parse("---\nid: 1\ntitle: T\n---\nJust text.\n")
        assert task.checklist == []
        assert task.notes is None

    def test_heading_variants(self):
        """Subtasks / TODO headings are checklist regions too."""
        for heading in ("## Subtasks", "### TODO:", "# To Do", "## sub-tasks"):
            task = parse(f"---\nid: 1\ntitle: T\n---\n{heading}\n- [ ] a\n")
            assert task.checklist == [ChecklistItem(text="a")], heading

    def test_region_ends_at_same_level_heading(self):
        text = "---\nid: 1\ntitle: T\n---\n## Checklist\n- [ ] a\n### Detail\n- [ ] b\n## Other\n- [ ] c\n"
        task = parse(text)
        assert [item.text for item in task.checklist] == ["a", "b"]

    def test_top_level_notes_end_at_checklist(self):
        """A lower-level Checklist heading still closes a # Notes region."""
        text = "---\nid: 1\ntitle: T\n---\n# Notes\nsome\n\n## Checklist\n- [ ] a\n- [ ] b\n"
        task = parse(text)
        assert task.notes == "some\n\n"
        assert [item.text for item in task.checklist] == ["a", "b"]

    def test_top_level_checklist_ends_at_notes(self):
        text = "---\nid: 1\ntitle: T\n---\n# Checklist\n- [ ] a\n### Notes\n- [ ] b\n"
        task = parse(text)
        assert [item.text for item in task.checklist] == ["a"]
        assert task.notes == "- [ ] b\n"

    def test_only_first_checklist_recognized(self):
        text = "---\nid: 1\ntitle: T\n---\n## Checklist\n- [ ] a\n## Todo\n- [ ] b\n"
        task = parse(text)
        assert [item.text for item in task.checklist] == ["a"]

    def test_headings_in_code_fences_ignored(self):
        text = "---\nid: 1\ntitle: T\n---\n```\n## Checklist\n- [ ] a\n```\n"
        task = parse(text)
        assert task.checklist == []

    def test_crlf_document(self):
        text = "---\r\nid: 1\r\ntitle: T\r\n---\r\n## Checklist\r\n- [ ] a\r\n- [x] b\r\n"
        task = parse(text)
        assert task.title == "T"
        assert task.checklist == [ChecklistItem(text="a"), ChecklistItem(text="b", done=True)]
        assert task.document.newline == "\r\n"

    def test_body_property(self, sample_text: str):
        task = parse(sample_text)
        assert "Some context." in task.body
        assert task.body.startswith("\n# Task Details")

    def test_progress(self, sample_text: str):
        assert parse(sample_text).progress == (2, 3)
