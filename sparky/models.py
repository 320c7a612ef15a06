"""
Pydantic v2 data models for sparky.
"""

import uuid
from datetime import datetime, timezone
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field

ReminderRepeat = Literal["none", "hourly", "daily", "weekly", "monthly", "yearly", "custom"]
Theme = Literal["light", "dark"]
MessageRole = Literal["user", "assistant", "system"]


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return uuid.uuid4().hex


# --------------------------------------------------------------------------- #
# Host domain                                                                 #
# --------------------------------------------------------------------------- #

class Reminder(BaseModel):
    time: str  # ISO date-time
    repeat: ReminderRepeat = "none"
    custom_days: Optional[int] = None


class NoteDraft(BaseModel):
    """A note as handed to the host for creation (no id, no timestamp yet)."""
    title: str
    content: str = ""  # HTML
    media: list[dict[str, Any]] = Field(default_factory=list)
    is_pinned: bool = False
    is_favourite: bool = False
    is_completed: bool = False
    reminder: Optional[Reminder] = None


class Note(NoteDraft):
    id: str
    last_modified: str = Field(default_factory=utc_now)


class AppSettings(BaseModel):
    theme: Theme = "dark"
    allow_notifications: bool = True
    reminder_alerts: bool = True
    sound_for_notifications: bool = False
    auto_save: bool = False
    delete_completed_tasks: bool = False


# --------------------------------------------------------------------------- #
# Conversations                                                               #
# --------------------------------------------------------------------------- #

class FunctionCallSummary(BaseModel):
    """Aggregate of every function call behind one assistant reply."""
    name: str  # comma-joined function names
    args: dict[str, dict[str, Any]] = Field(default_factory=dict)  # keyed by function name
    result: str = ""  # newline-joined result texts


class ChatMessage(BaseModel):
    id: str = Field(default_factory=new_id)
    role: MessageRole
    content: str
    timestamp: str = Field(default_factory=utc_now)
    function_call: Optional[FunctionCallSummary] = None


class Conversation(BaseModel):
    id: str = Field(default_factory=new_id)
    title: str
    messages: list[ChatMessage] = Field(default_factory=list)
    created_at: str = Field(default_factory=utc_now)
    last_message_at: str = Field(default_factory=utc_now)


# --------------------------------------------------------------------------- #
# Agent loop                                                                  #
# --------------------------------------------------------------------------- #

class ToolCallRecord(BaseModel):
    """One executed function call inside an agent loop."""
    name: str
    args: dict[str, Any] = Field(default_factory=dict)
    result: str


class TokenUsage(BaseModel):
    input_tokens: int = 0
    output_tokens: int = 0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            input_tokens=self.input_tokens + other.input_tokens,
            output_tokens=self.output_tokens + other.output_tokens,
        )
