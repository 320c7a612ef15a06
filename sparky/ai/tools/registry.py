"""
Function registry and dispatch logic.

Function names from the model are parsed into the closed FunctionName enum
and dispatched with an exhaustive match. Nothing here raises to the caller:
unknown names, domain failures and executor crashes all come back as
`{"success": False, "error": ...}` results for the model to react to.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, assert_never

from . import app, notes
from .context import DomainContext
from .schemas import FUNCTION_DECLARATIONS

logger = logging.getLogger(__name__)


class FunctionName(str, Enum):
    CREATE_NOTE = "createNote"
    EDIT_NOTE = "editNote"
    DELETE_NOTE = "deleteNote"
    SEARCH_NOTES = "searchNotes"
    LIST_NOTES = "listNotes"
    SET_REMINDER = "setReminder"
    REMOVE_REMINDER = "removeReminder"
    TOGGLE_NOTE_STATUS = "toggleNoteStatus"
    CHANGE_THEME = "changeTheme"
    UPDATE_SETTINGS = "updateSettings"
    GET_APP_STATUS = "getAppStatus"


class ToolRegistry:
    """Holds the function declarations and dispatches calls to executors."""

    @property
    def declarations(self) -> list[dict]:
        """Return the list of Gemini function declarations."""
        return FUNCTION_DECLARATIONS

    @property
    def tools(self) -> list[dict]:
        """The `tools` field of a generateContent request."""
        return [{"functionDeclarations": FUNCTION_DECLARATIONS}]

    def dispatch(self, name: str, args: dict[str, Any] | None, ctx: DomainContext) -> dict:
        """
        Execute the named function against the domain snapshot.
        Returns a JSON-serialisable dict that always carries `success`.
        """
        try:
            fn = FunctionName(name)
        except ValueError:
            logger.warning("Model requested unknown function %r", name)
            return {"success": False, "error": f"Unknown function: {name}"}

        args = args or {}
        try:
            match fn:
                # Notes
                case FunctionName.CREATE_NOTE:
                    return notes.exec_create_note(ctx, args)
                case FunctionName.EDIT_NOTE:
                    return notes.exec_edit_note(ctx, args)
                case FunctionName.DELETE_NOTE:
                    return notes.exec_delete_note(ctx, args)
                case FunctionName.SEARCH_NOTES:
                    return notes.exec_search_notes(ctx, args)
                case FunctionName.LIST_NOTES:
                    return notes.exec_list_notes(ctx, args)

                # Reminders
                case FunctionName.SET_REMINDER:
                    return notes.exec_set_reminder(ctx, args)
                case FunctionName.REMOVE_REMINDER:
                    return notes.exec_remove_reminder(ctx, args)

                # Status
                case FunctionName.TOGGLE_NOTE_STATUS:
                    return notes.exec_toggle_note_status(ctx, args)

                # App
                case FunctionName.CHANGE_THEME:
                    return app.exec_change_theme(ctx, args)
                case FunctionName.UPDATE_SETTINGS:
                    return app.exec_update_settings(ctx, args)
                case FunctionName.GET_APP_STATUS:
                    return app.exec_get_app_status(ctx)

                case _:
                    assert_never(fn)

        except Exception as exc:
            logger.error("Function %s failed: %s", name, exc, exc_info=True)
            return {"success": False, "error": f"Function {name} encountered an error: {exc}"}
