"""Tests for sparky.ai.tools.notes module."""

from __future__ import annotations

import pytest

from sparky.ai.tools import DomainContext
from sparky.ai.tools.notes import (
    exec_create_note,
    exec_delete_note,
    exec_edit_note,
    exec_list_notes,
    exec_remove_reminder,
    exec_search_notes,
    exec_set_reminder,
    exec_toggle_note_status,
    strip_html,
)
from sparky.models import Note
from sparky.notebook import Notebook


def dump(notebook: Notebook) -> list[dict]:
    return [n.model_dump() for n in notebook.get_notes()]


def note(notebook: Notebook, note_id: str) -> Note:
    return next(n for n in notebook.get_notes() if n.id == note_id)


class TestCreateNote:

    def test_defaults_missing_fields(self, ctx, notebook):
        result = exec_create_note(ctx, {})
        assert result["success"] is True
        created = note(notebook, result["noteId"])
        assert created.title == "Untitled Note"
        assert created.content == ""
        assert created.is_pinned is False
        assert created.is_favourite is False
        assert created.is_completed is False

    def test_uses_supplied_fields(self, ctx, notebook):
        result = exec_create_note(ctx, {
            "title": "Ideas", "content": "<p>rocket</p>", "isPinned": True, "isFavourite": True,
        })
        created = note(notebook, result["noteId"])
        assert created.title == "Ideas"
        assert created.is_pinned and created.is_favourite
        assert 'Created note "Ideas"' in result["message"]

    def test_wrong_type_title_rejected(self, ctx, notebook):
        count = len(notebook.get_notes())
        result = exec_create_note(ctx, {"title": 5})
        assert result["success"] is False
        assert "title" in result["error"]
        assert len(notebook.get_notes()) == count

    def test_new_note_visible_in_snapshot(self, ctx):
        result = exec_create_note(ctx, {"title": "Fresh"})
        assert ctx.notes[0].id == result["noteId"]


class TestEditNote:

    def test_only_supplied_fields_change(self, ctx, notebook):
        before = note(notebook, "n1")
        result = exec_edit_note(ctx, {"noteId": "n1", "title": "Weekly shop"})
        assert result["success"] is True

        after = note(notebook, "n1")
        assert after.title == "Weekly shop"
        assert after.last_modified != before.last_modified
        untouched = {"title", "last_modified"}
        assert after.model_dump(exclude=untouched) == before.model_dump(exclude=untouched)

    def test_null_arguments_are_ignored(self, ctx, notebook):
        before = note(notebook, "n3")
        exec_edit_note(ctx, {"noteId": "n3", "content": None, "isCompleted": True})
        after = note(notebook, "n3")
        assert after.content == before.content
        assert after.is_completed is True
        assert after.reminder == before.reminder

    def test_can_clear_boolean(self, ctx, notebook):
        exec_edit_note(ctx, {"noteId": "n1", "isPinned": False})
        assert note(notebook, "n1").is_pinned is False

    @pytest.mark.parametrize("bad,field", [
        ({"title": 5}, "title"),
        ({"content": 123}, "content"),
        ({"isPinned": "maybe"}, "is_pinned"),
    ])
    def test_wrong_types_rejected_without_change(self, ctx, notebook, bad, field):
        before = dump(notebook)
        result = exec_edit_note(ctx, {"noteId": "n1", **bad})
        assert result["success"] is False
        assert field in result["error"]
        assert dump(notebook) == before
        assert [n.model_dump() for n in ctx.notes] == before

    def test_rejected_edit_leaves_notes_usable(self, ctx, notebook):
        exec_edit_note(ctx, {"noteId": "n1", "title": 5})

        found = exec_search_notes(ctx, {"query": "milk"})
        assert found["success"] is True
        assert found["count"] == 1

        restored = Notebook.from_state(*notebook.to_state())
        assert note(restored, "n1").title == "Groceries"


@pytest.mark.parametrize("executor,extra", [
    (exec_edit_note, {"title": "x"}),
    (exec_delete_note, {}),
    (exec_set_reminder, {"time": "2026-05-01T10:00:00"}),
    (exec_remove_reminder, {}),
    (exec_toggle_note_status, {"status": "pin"}),
])
def test_unknown_note_id_is_not_found(executor, extra, ctx, notebook):
    before = dump(notebook)
    result = executor(ctx, {"noteId": "missing", **extra})
    assert result == {"success": False, "error": "Note not found"}
    assert dump(notebook) == before


def test_non_string_note_id_is_not_found(ctx):
    assert exec_delete_note(ctx, {"noteId": 42})["success"] is False
    assert exec_delete_note(ctx, {})["success"] is False


class TestDeleteNote:

    def test_deletes_and_names_note(self, ctx, notebook):
        result = exec_delete_note(ctx, {"noteId": "n2"})
        assert result["success"] is True
        assert "Tax return" in result["message"]
        assert all(n.id != "n2" for n in notebook.get_notes())
        assert all(n.id != "n2" for n in ctx.notes)


class TestSearchNotes:

    def test_matches_content_with_tags_stripped(self, ctx):
        result = exec_search_notes(ctx, {"query": "BUY MILK"})
        assert result["count"] == 1
        assert result["notes"][0]["id"] == "n1"
        assert result["notes"][0]["preview"] == "Buy milk and eggs"

    def test_matches_title(self, ctx):
        result = exec_search_notes(ctx, {"query": "dent"})
        assert [n["id"] for n in result["notes"]] == ["n3"]

    def test_filter_applies_after_match(self, ctx):
        # "e" appears in every note
        assert exec_search_notes(ctx, {"query": "e"})["count"] == 3
        result = exec_search_notes(ctx, {"query": "e", "filter": "completed"})
        assert [n["id"] for n in result["notes"]] == ["n2"]
        result = exec_search_notes(ctx, {"query": "e", "filter": "with-reminder"})
        assert [n["id"] for n in result["notes"]] == ["n3"]

    def test_preview_is_truncated_and_never_full_content(self):
        long = "<div>" + "a" * 250 + "</div>"
        ctx = DomainContext(Notebook(notes=[Note(id="x", title="Long", content=long)]))
        preview = exec_search_notes(ctx, {"query": "long"})["notes"][0]["preview"]
        assert preview == "a" * 100
        assert "content" not in exec_search_notes(ctx, {"query": "long"})["notes"][0]

    def test_requires_query(self, ctx):
        assert exec_search_notes(ctx, {})["success"] is False
        assert exec_search_notes(ctx, {"query": "  "})["success"] is False

    def test_unknown_filter(self, ctx):
        result = exec_search_notes(ctx, {"query": "e", "filter": "archived"})
        assert result["success"] is False


class TestListNotes:

    @pytest.fixture
    def two_notes(self):
        return DomainContext(Notebook(notes=[
            Note(id="a", title="A", is_pinned=True, is_completed=False),
            Note(id="b", title="B", is_pinned=False, is_completed=True),
        ]))

    def test_pending(self, two_notes):
        result = exec_list_notes(two_notes, {"filter": "pending"})
        assert [n["id"] for n in result["notes"]] == ["a"]

    def test_completed(self, two_notes):
        result = exec_list_notes(two_notes, {"filter": "completed"})
        assert [n["id"] for n in result["notes"]] == ["b"]

    def test_all_keeps_order(self, two_notes):
        result = exec_list_notes(two_notes, {"filter": "all"})
        assert [n["id"] for n in result["notes"]] == ["a", "b"]
        assert result["total"] == 2

    def test_default_limit_is_ten(self):
        ctx = DomainContext(Notebook(notes=[Note(id=str(i), title=f"N{i}") for i in range(12)]))
        result = exec_list_notes(ctx, {})
        assert result["count"] == 10
        assert result["total"] == 12
        assert result["notes"][0]["id"] == "0"

    def test_explicit_limit(self, ctx):
        result = exec_list_notes(ctx, {"limit": 2.0})
        assert [n["id"] for n in result["notes"]] == ["n1", "n2"]
        assert result["total"] == 3

    def test_includes_metadata(self, ctx):
        first = exec_list_notes(ctx, {})["notes"][0]
        assert first["lastModified"] == "2026-01-01T00:00:00+00:00"
        assert first["isPinned"] is True
        assert first["hasReminder"] is False


class TestReminders:

    def test_set_reminder(self, ctx, notebook):
        result = exec_set_reminder(ctx, {"noteId": "n1", "time": "2026-12-25T10:00:00", "repeat": "weekly"})
        assert result["success"] is True
        assert "2026-12-25 10:00" in result["message"]
        reminder = note(notebook, "n1").reminder
        assert reminder.time == "2026-12-25T10:00:00"
        assert reminder.repeat == "weekly"

    def test_repeat_defaults_to_none(self, ctx, notebook):
        exec_set_reminder(ctx, {"noteId": "n2", "time": "2026-12-25T10:00:00"})
        assert note(notebook, "n2").reminder.repeat == "none"

    def test_invalid_time_rejected(self, ctx, notebook):
        before = dump(notebook)
        result = exec_set_reminder(ctx, {"noteId": "n1", "time": "next tuesday-ish"})
        assert result["success"] is False
        assert dump(notebook) == before

    def test_invalid_repeat_rejected(self, ctx):
        result = exec_set_reminder(ctx, {"noteId": "n1", "time": "2026-12-25T10:00:00", "repeat": "fortnightly"})
        assert result["success"] is False

    def test_remove_reminder(self, ctx, notebook):
        result = exec_remove_reminder(ctx, {"noteId": "n3"})
        assert result["success"] is True
        assert note(notebook, "n3").reminder is None


class TestToggleNoteStatus:

    @pytest.mark.parametrize("status,field,expected", [
        ("pin", "is_pinned", False),
        ("favourite", "is_favourite", True),
        ("completed", "is_completed", True),
    ])
    def test_flips_exactly_one_field(self, ctx, notebook, status, field, expected):
        before = note(notebook, "n1")
        result = exec_toggle_note_status(ctx, {"noteId": "n1", "status": status})
        assert result["newValue"] is expected
        after = note(notebook, "n1")
        assert getattr(after, field) is expected
        untouched = {field, "last_modified"}
        assert after.model_dump(exclude=untouched) == before.model_dump(exclude=untouched)

    def test_unknown_status(self, ctx):
        assert exec_toggle_note_status(ctx, {"noteId": "n1", "status": "archive"})["success"] is False


def test_strip_html():
    assert strip_html("<p>Hi <i>there</i></p>") == "Hi there"
