"""
Function declarations for Gemini function calling.

Functions available:
  Notes
    createNote        → create a new note
    editNote          → partial update of an existing note
    deleteNote        → delete a note by ID
    searchNotes       → substring search over titles and content
    listNotes         → list notes with an optional status filter

  Reminders
    setReminder       → attach a (possibly repeating) reminder to a note
    removeReminder    → remove a note's reminder

  Status
    toggleNoteStatus  → flip pin / favourite / completed

  App
    changeTheme       → light or dark
    updateSettings    → auto-save, notifications, delete-completed
    getAppStatus      → note counts plus current settings
"""

from __future__ import annotations

NOTE_FILTERS = ["all", "pinned", "favourite", "completed", "pending", "with-reminder"]
REMINDER_REPEATS = ["none", "hourly", "daily", "weekly", "monthly", "yearly"]
TOGGLE_STATUSES = ["pin", "favourite", "completed"]
THEMES = ["light", "dark"]

FUNCTION_DECLARATIONS: list[dict] = [
    # ------------------------------------------------------------------ #
    # Notes                                                                #
    # ------------------------------------------------------------------ #
    {
        "name": "createNote",
        "description": (
            "Create a new note with title and content. "
            "Use this when user wants to create, add, or write a new note."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "title": {"type": "string", "description": "The title of the note"},
                "content": {
                    "type": "string",
                    "description": "The content/body of the note (can include HTML formatting)",
                },
                "isPinned": {"type": "boolean", "description": "Whether to pin the note to top"},
                "isFavourite": {"type": "boolean", "description": "Whether to mark as favourite"},
            },
            "required": ["title", "content"],
        },
    },
    {
        "name": "editNote",
        "description": (
            "Edit an existing note by its ID. Use this to update title, content, "
            "or properties of an existing note. Only the fields you pass are changed."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "noteId": {"type": "string", "description": "The ID of the note to edit"},
                "title": {"type": "string", "description": "New title (optional)"},
                "content": {"type": "string", "description": "New content (optional)"},
                "isPinned": {"type": "boolean", "description": "Pin status (optional)"},
                "isFavourite": {"type": "boolean", "description": "Favourite status (optional)"},
                "isCompleted": {"type": "boolean", "description": "Completion status (optional)"},
            },
            "required": ["noteId"],
        },
    },
    {
        "name": "deleteNote",
        "description": "Delete a note by its ID. Ask for confirmation before deleting.",
        "parameters": {
            "type": "object",
            "properties": {
                "noteId": {"type": "string", "description": "The ID of the note to delete"},
            },
            "required": ["noteId"],
        },
    },
    {
        "name": "searchNotes",
        "description": "Search for notes by title or content. Returns matching notes.",
        "parameters": {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Search query to find in note titles or content",
                },
                "filter": {
                    "type": "string",
                    "enum": NOTE_FILTERS,
                    "description": "Filter notes by status",
                },
            },
            "required": ["query"],
        },
    },
    {
        "name": "listNotes",
        "description": (
            "Get a list of all notes with optional filtering. "
            "Use this to see what notes exist."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "filter": {
                    "type": "string",
                    "enum": NOTE_FILTERS,
                    "description": "Filter to apply",
                },
                "limit": {
                    "type": "number",
                    "description": "Maximum number of notes to return (default 10)",
                },
            },
            "required": [],
        },
    },
    # ------------------------------------------------------------------ #
    # Reminders                                                            #
    # ------------------------------------------------------------------ #
    {
        "name": "setReminder",
        "description": (
            "Set a reminder for a note. "
            "The reminder will notify the user at the specified time."
        ),
        "parameters": {
            "type": "object",
            "properties": {
                "noteId": {"type": "string", "description": "The ID of the note to set reminder for"},
                "time": {
                    "type": "string",
                    "description": 'ISO date-time string for when to remind (e.g., "2024-12-25T10:00:00")',
                },
                "repeat": {
                    "type": "string",
                    "enum": REMINDER_REPEATS,
                    "description": "How often to repeat the reminder",
                },
            },
            "required": ["noteId", "time"],
        },
    },
    {
        "name": "removeReminder",
        "description": "Remove a reminder from a note.",
        "parameters": {
            "type": "object",
            "properties": {
                "noteId": {
                    "type": "string",
                    "description": "The ID of the note to remove reminder from",
                },
            },
            "required": ["noteId"],
        },
    },
    # ------------------------------------------------------------------ #
    # Status                                                               #
    # ------------------------------------------------------------------ #
    {
        "name": "toggleNoteStatus",
        "description": "Toggle pin, favourite, or completed status of a note.",
        "parameters": {
            "type": "object",
            "properties": {
                "noteId": {"type": "string", "description": "The ID of the note"},
                "status": {
                    "type": "string",
                    "enum": TOGGLE_STATUSES,
                    "description": "Which status to toggle",
                },
            },
            "required": ["noteId", "status"],
        },
    },
    # ------------------------------------------------------------------ #
    # App                                                                  #
    # ------------------------------------------------------------------ #
    {
        "name": "changeTheme",
        "description": "Change the app theme to light or dark mode.",
        "parameters": {
            "type": "object",
            "properties": {
                "theme": {"type": "string", "enum": THEMES, "description": "The theme to set"},
            },
            "required": ["theme"],
        },
    },
    {
        "name": "updateSettings",
        "description": "Update app settings like auto-save, notifications, etc.",
        "parameters": {
            "type": "object",
            "properties": {
                "autoSave": {"type": "boolean", "description": "Enable/disable auto-save"},
                "allowNotifications": {
                    "type": "boolean",
                    "description": "Enable/disable notifications",
                },
                "deleteCompletedTasks": {
                    "type": "boolean",
                    "description": "Automatically delete completed tasks",
                },
            },
            "required": [],
        },
    },
    {
        "name": "getAppStatus",
        "description": "Get current app status including note counts, settings, etc.",
        "parameters": {
            "type": "object",
            "properties": {},
            "required": [],
        },
    },
]
