"""
Host collaborator interface and the per-send domain snapshot.

The host application owns note and settings storage. For each message the
agent takes one snapshot of notes and settings from the host; every mutation
an executor performs goes to the host *and* is mirrored into the snapshot,
so later function calls in the same loop see earlier effects without
re-reading host state.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from ...models import AppSettings, Note, NoteDraft, utc_now

logger = logging.getLogger(__name__)


class NoteHost(Protocol):
    """Operations the host application exposes to the agent."""

    def get_notes(self) -> list[Note]: ...

    def get_settings(self) -> AppSettings: ...

    def create_note(self, draft: NoteDraft) -> str: ...

    def update_note(self, note: Note) -> None: ...

    def delete_note(self, note_id: str) -> None: ...

    def update_settings(self, changes: dict[str, Any]) -> None: ...


class DomainContext:
    """Notes/settings snapshot for one send_message call."""

    def __init__(
        self,
        host: NoteHost,
        notes: list[Note] | None = None,
        settings: AppSettings | None = None,
    ) -> None:
        self._host = host
        self.notes: list[Note] = list(notes if notes is not None else host.get_notes())
        self.settings: AppSettings = settings if settings is not None else host.get_settings()

    def find_note(self, note_id: Any) -> Note | None:
        if not isinstance(note_id, str):
            return None
        return next((n for n in self.notes if n.id == note_id), None)

    def create_note(self, draft: NoteDraft) -> Note:
        note_id = self._host.create_note(draft)
        note = Note(id=note_id, last_modified=utc_now(), **draft.model_dump())
        self.notes.insert(0, note)
        return note

    def update_note(self, note: Note) -> None:
        self._host.update_note(note)
        self.notes = [note if n.id == note.id else n for n in self.notes]

    def delete_note(self, note_id: str) -> None:
        self._host.delete_note(note_id)
        self.notes = [n for n in self.notes if n.id != note_id]

    def update_settings(self, changes: dict[str, Any]) -> None:
        self._host.update_settings(changes)
        self.settings = self.settings.model_copy(update=changes)
