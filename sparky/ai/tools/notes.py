"""Note, reminder and status executors."""

from __future__ import annotations

import logging
import re
from datetime import datetime
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ...constants import DEFAULT_LIST_LIMIT, PREVIEW_MAX_CHARS, UNTITLED_NOTE
from ...models import Note, NoteDraft, Reminder, utc_now
from .schemas import NOTE_FILTERS, REMINDER_REPEATS, TOGGLE_STATUSES

if TYPE_CHECKING:
    from .context import DomainContext

logger = logging.getLogger(__name__)

_TAG_RE = re.compile(r"<[^>]*>")

# editNote argument → Note field
_EDITABLE_FIELDS = {
    "title": "title",
    "content": "content",
    "isPinned": "is_pinned",
    "isFavourite": "is_favourite",
    "isCompleted": "is_completed",
}

# toggleNoteStatus status → Note field
_TOGGLE_FIELDS = {
    "pin": "is_pinned",
    "favourite": "is_favourite",
    "completed": "is_completed",
}


def _not_found() -> dict:
    return {"success": False, "error": "Note not found"}


def _invalid_fields(e: ValidationError) -> dict:
    fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
    return {"success": False, "error": f"Invalid value for: {fields}"}


def strip_html(content: str) -> str:
    return _TAG_RE.sub("", content)


def _matches_filter(note: Note, flt: str) -> bool:
    match flt:
        case "pinned":
            return note.is_pinned
        case "favourite":
            return note.is_favourite
        case "completed":
            return note.is_completed
        case "pending":
            return not note.is_completed
        case "with-reminder":
            return note.reminder is not None
        case _:
            return True


def _apply_filter(notes: list[Note], flt: Any) -> list[Note] | None:
    """Return the filtered notes, or None when the filter value is invalid."""
    if flt is None or flt == "all":
        return list(notes)
    if flt not in NOTE_FILTERS:
        return None
    return [n for n in notes if _matches_filter(n, flt)]


def _summary(note: Note) -> dict:
    return {
        "id": note.id,
        "title": note.title,
        "preview": strip_html(note.content)[:PREVIEW_MAX_CHARS],
        "isPinned": note.is_pinned,
        "isFavourite": note.is_favourite,
        "isCompleted": note.is_completed,
        "hasReminder": note.reminder is not None,
    }


def exec_create_note(ctx: DomainContext, args: dict) -> dict:
    """Create a note, defaulting anything the model left out."""
    try:
        draft = NoteDraft(
            title=args.get("title") or UNTITLED_NOTE,
            content=args.get("content") or "",
            is_pinned=bool(args.get("isPinned", False)),
            is_favourite=bool(args.get("isFavourite", False)),
            is_completed=False,
        )
    except ValidationError as e:
        return _invalid_fields(e)
    note = ctx.create_note(draft)
    return {
        "success": True,
        "message": f'Created note "{note.title}" with ID {note.id}',
        "noteId": note.id,
    }


def exec_edit_note(ctx: DomainContext, args: dict) -> dict:
    """
    Partial update: only arguments present (and not null) are applied;
    every other field is carried over from the existing note unchanged.
    """
    note = ctx.find_note(args.get("noteId"))
    if note is None:
        return _not_found()

    changes: dict[str, Any] = {
        field: args[arg]
        for arg, field in _EDITABLE_FIELDS.items()
        if args.get(arg) is not None
    }
    changes["last_modified"] = utc_now()
    # model_copy skips validation; model arguments must go through it
    try:
        updated = Note.model_validate({**note.model_dump(), **changes})
    except ValidationError as e:
        return _invalid_fields(e)
    ctx.update_note(updated)
    return {"success": True, "message": f'Updated note "{updated.title}"'}


def exec_delete_note(ctx: DomainContext, args: dict) -> dict:
    note = ctx.find_note(args.get("noteId"))
    if note is None:
        return _not_found()
    ctx.delete_note(note.id)
    return {"success": True, "message": f'Deleted note "{note.title}"'}


def exec_search_notes(ctx: DomainContext, args: dict) -> dict:
    """Case-insensitive substring search over titles and tag-stripped content."""
    query = args.get("query")
    if not isinstance(query, str) or not query.strip():
        return {"success": False, "error": "Please provide a search query"}
    needle = query.lower()

    matches = [
        n for n in ctx.notes
        if needle in n.title.lower() or needle in strip_html(n.content).lower()
    ]
    results = _apply_filter(matches, args.get("filter"))
    if results is None:
        return {"success": False, "error": f"Unknown filter: {args.get('filter')}"}

    return {
        "success": True,
        "count": len(results),
        "notes": [_summary(n) for n in results],
    }


def exec_list_notes(ctx: DomainContext, args: dict) -> dict:
    results = _apply_filter(ctx.notes, args.get("filter"))
    if results is None:
        return {"success": False, "error": f"Unknown filter: {args.get('filter')}"}

    limit = args.get("limit")
    if not isinstance(limit, (int, float)) or isinstance(limit, bool) or limit < 1:
        limit = DEFAULT_LIST_LIMIT
    results = results[: int(limit)]

    return {
        "success": True,
        "count": len(results),
        "total": len(ctx.notes),
        "notes": [{**_summary(n), "lastModified": n.last_modified} for n in results],
    }


def exec_set_reminder(ctx: DomainContext, args: dict) -> dict:
    note = ctx.find_note(args.get("noteId"))
    if note is None:
        return _not_found()

    time_str = args.get("time")
    try:
        when = datetime.fromisoformat(time_str)
    except (TypeError, ValueError):
        return {"success": False, "error": f"Invalid reminder time: {time_str!r}"}

    repeat = args.get("repeat") or "none"
    if repeat not in REMINDER_REPEATS:
        return {"success": False, "error": f"Unknown repeat value: {repeat}"}

    reminder = Reminder(time=time_str, repeat=repeat)
    ctx.update_note(note.model_copy(update={"reminder": reminder, "last_modified": utc_now()}))
    return {
        "success": True,
        "message": f'Set reminder for "{note.title}" at {when.strftime("%Y-%m-%d %H:%M")}',
        "reminder": {"time": reminder.time, "repeat": reminder.repeat},
    }


def exec_remove_reminder(ctx: DomainContext, args: dict) -> dict:
    note = ctx.find_note(args.get("noteId"))
    if note is None:
        return _not_found()
    ctx.update_note(note.model_copy(update={"reminder": None, "last_modified": utc_now()}))
    return {"success": True, "message": f'Removed reminder from "{note.title}"'}


def exec_toggle_note_status(ctx: DomainContext, args: dict) -> dict:
    note = ctx.find_note(args.get("noteId"))
    if note is None:
        return _not_found()

    status = args.get("status")
    if status not in TOGGLE_STATUSES:
        return {"success": False, "error": f"Unknown status: {status}"}

    field = _TOGGLE_FIELDS[status]
    new_value = not getattr(note, field)
    ctx.update_note(note.model_copy(update={field: new_value, "last_modified": utc_now()}))
    return {
        "success": True,
        "message": f'Toggled {status} for "{note.title}"',
        "newValue": new_value,
    }
