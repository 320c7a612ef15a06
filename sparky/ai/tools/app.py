"""Theme, settings and app status executors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .schemas import THEMES

if TYPE_CHECKING:
    from .context import DomainContext

# updateSettings argument → AppSettings field
_SETTING_FIELDS = {
    "autoSave": "auto_save",
    "allowNotifications": "allow_notifications",
    "deleteCompletedTasks": "delete_completed_tasks",
}


def exec_change_theme(ctx: DomainContext, args: dict) -> dict:
    theme = args.get("theme")
    if theme not in THEMES:
        return {"success": False, "error": f"Unknown theme: {theme}"}
    ctx.update_settings({"theme": theme})
    return {"success": True, "message": f"Changed theme to {theme} mode"}


def exec_update_settings(ctx: DomainContext, args: dict) -> dict:
    """Apply only the boolean settings that were actually supplied."""
    changes = {
        field: args[arg]
        for arg, field in _SETTING_FIELDS.items()
        if isinstance(args.get(arg), bool)
    }
    if not changes:
        return {"success": True, "message": "No settings changed"}
    ctx.update_settings(changes)
    applied = [arg for arg, field in _SETTING_FIELDS.items() if field in changes]
    return {"success": True, "message": f"Updated settings: {', '.join(applied)}"}


def exec_get_app_status(ctx: DomainContext) -> dict:
    notes = ctx.notes
    s = ctx.settings
    completed = sum(1 for n in notes if n.is_completed)
    return {
        "success": True,
        "status": {
            "totalNotes": len(notes),
            "pinnedNotes": sum(1 for n in notes if n.is_pinned),
            "favouriteNotes": sum(1 for n in notes if n.is_favourite),
            "completedNotes": completed,
            "pendingNotes": len(notes) - completed,
            "notesWithReminders": sum(1 for n in notes if n.reminder is not None),
            "theme": s.theme,
            "autoSave": s.auto_save,
            "notifications": s.allow_notifications,
        },
        "settings": {
            "theme": s.theme,
            "allowNotifications": s.allow_notifications,
            "reminderAlerts": s.reminder_alerts,
            "soundForNotifications": s.sound_for_notifications,
            "autoSave": s.auto_save,
            "deleteCompletedTasks": s.delete_completed_tasks,
        },
    }
