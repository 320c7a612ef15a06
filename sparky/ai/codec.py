"""
Turn protocol codec: conversion between persisted ChatMessages and the
role + parts "contents" representation used by the generateContent API.

A Part carries exactly one of text, functionCall or functionResponse.
Function-call turns only ever enter history through append_function_exchange();
they are never rebuilt from persisted messages.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from ..models import ChatMessage

logger = logging.getLogger(__name__)


class FunctionCall(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    args: dict[str, Any] = Field(default_factory=dict)


class FunctionResponse(BaseModel):
    name: str
    response: dict[str, Any]


class Part(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    text: Optional[str] = None
    function_call: Optional[FunctionCall] = Field(default=None, alias="functionCall")
    function_response: Optional[FunctionResponse] = Field(default=None, alias="functionResponse")

    @model_validator(mode="after")
    def _exactly_one(self) -> "Part":
        present = [
            v for v in (self.text, self.function_call, self.function_response)
            if v is not None
        ]
        if len(present) != 1:
            raise ValueError("a part must carry exactly one of text, functionCall, functionResponse")
        return self


class Turn(BaseModel):
    role: Literal["user", "model"]
    parts: list[Part]

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


def user_turn(text: str) -> Turn:
    return Turn(role="user", parts=[Part(text=text)])


def model_turn(text: str) -> Turn:
    return Turn(role="model", parts=[Part(text=text)])


def to_protocol_turn(message: ChatMessage) -> Turn | None:
    """Map a user/assistant message to a single-text-part turn; system messages map to None."""
    if message.role == "user":
        return user_turn(message.content)
    if message.role == "assistant":
        return model_turn(message.content)
    return None


def history_from_messages(messages: Iterable[ChatMessage]) -> list[Turn]:
    """
    Rebuild protocol history from persisted messages.

    Only plain text turns survive: the function calls behind an assistant
    message are summarised on the message, not stored as turns. Messages
    with empty content are skipped since the API rejects empty text parts.
    """
    turns: list[Turn] = []
    for message in messages:
        turn = to_protocol_turn(message)
        if turn is not None and message.content:
            turns.append(turn)
    return turns


def append_function_exchange(history: list[Turn], call: FunctionCall, result: str) -> None:
    """Append the model's function-call turn followed by the user's function-result turn."""
    history.append(Turn(role="model", parts=[Part(function_call=call)]))
    history.append(
        Turn(
            role="user",
            parts=[Part(function_response=FunctionResponse(name=call.name, response={"result": result}))],
        )
    )


def parse_parts(raw_parts: list[dict]) -> list[Part]:
    """Validate response parts, dropping any that carry none of the known payloads."""
    parts: list[Part] = []
    for raw in raw_parts:
        try:
            parts.append(Part.model_validate(raw))
        except ValidationError as e:
            logger.debug("Skipping unrecognised response part %r: %s", raw, e)
    return parts
