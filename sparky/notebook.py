"""
In-memory note host.

Implements the NoteHost interface the agent mutates through. New notes are
prepended so the list stays most-recent-first. The terminal entry point
persists it between runs via the key-value store.
"""

import logging
from typing import Any

from .models import AppSettings, Note, NoteDraft, new_id, utc_now

logger = logging.getLogger(__name__)


class Notebook:
    def __init__(self, notes: list[Note] | None = None, settings: AppSettings | None = None) -> None:
        self._notes: list[Note] = list(notes or [])
        self._settings = settings or AppSettings()

    @classmethod
    def from_state(cls, notes: list[dict] | None, settings: dict | None) -> "Notebook":
        return cls(
            notes=[Note.model_validate(n) for n in notes or []],
            settings=AppSettings.model_validate(settings) if settings else None,
        )

    def to_state(self) -> tuple[list[dict], dict]:
        return (
            [n.model_dump(mode="json") for n in self._notes],
            self._settings.model_dump(mode="json"),
        )

    def get_notes(self) -> list[Note]:
        return list(self._notes)

    def get_settings(self) -> AppSettings:
        return self._settings

    def create_note(self, draft: NoteDraft) -> str:
        note = Note(id=new_id(), last_modified=utc_now(), **draft.model_dump())
        self._notes.insert(0, note)
        return note.id

    def update_note(self, note: Note) -> None:
        if not any(n.id == note.id for n in self._notes):
            logger.warning("update_note: no note with id %s", note.id)
            return
        self._notes = [note if n.id == note.id else n for n in self._notes]

    def delete_note(self, note_id: str) -> None:
        self._notes = [n for n in self._notes if n.id != note_id]

    def update_settings(self, changes: dict[str, Any]) -> None:
        self._settings = self._settings.model_copy(update=changes)
