"""
Conversation store: persisted conversations, the active-conversation
pointer and the transient protocol history of the active conversation.

The whole conversation list is persisted as one value under a single key;
every change replaces the list in memory first (no awaits in between) and
then writes it out under a lock, so writes land in order.

Only plain text turns can be rebuilt from persisted messages. The function
call exchanges behind an assistant reply are kept as a summary on the
message, so after a reload or a conversation switch the model no longer
sees them.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from pydantic import ValidationError

from ..ai.codec import Turn, history_from_messages, model_turn, user_turn
from ..ai.orchestrator import AgentOrchestrator
from ..ai.tools import DomainContext, NoteHost
from ..constants import (
    CONVERSATIONS_KEY,
    DEFAULT_CONVERSATION_TITLE,
    ERROR_MESSAGES,
    SYSTEM_ERROR_PREFIX,
    TITLE_ELLIPSIS,
    TITLE_MAX_CHARS,
)
from ..exceptions import AgentError, ConversationBusyError, MissingCredentialError
from ..models import ChatMessage, Conversation, FunctionCallSummary, ToolCallRecord, utc_now
from .kv_store import KeyValueStore

logger = logging.getLogger(__name__)


def derive_title(text: str) -> str:
    """First 30 characters of the message, with an ellipsis if it was cut."""
    text = text.strip()
    if len(text) > TITLE_MAX_CHARS:
        return text[:TITLE_MAX_CHARS] + TITLE_ELLIPSIS
    return text


def summarize_calls(calls: list[ToolCallRecord]) -> FunctionCallSummary | None:
    """Collapse the executed calls of one reply into a single summary."""
    if not calls:
        return None
    return FunctionCallSummary(
        name=", ".join(c.name for c in calls),
        args={c.name: c.args for c in calls},
        result="\n".join(c.result for c in calls),
    )


class ConversationSession:
    """Protocol history of the active conversation; discarded when it is deselected."""

    def __init__(self, conversation_id: str, history: list[Turn] | None = None) -> None:
        self.conversation_id = conversation_id
        self.history: list[Turn] = history or []


class ConversationStore:
    """Owns the conversation list, the active session and message sending."""

    def __init__(
        self,
        kv: KeyValueStore,
        orchestrator: AgentOrchestrator,
        host: NoteHost,
        *,
        key: str = CONVERSATIONS_KEY,
    ) -> None:
        self._kv = kv
        self._orchestrator = orchestrator
        self._host = host
        self._key = key
        self._conversations: list[Conversation] = []
        self._session: ConversationSession | None = None
        # Conversations with a send_message call in flight
        self._in_flight: set[str] = set()
        self._write_lock = asyncio.Lock()
        self.error: str | None = None

    # ------------------------------------------------------------------ #
    # State                                                                #
    # ------------------------------------------------------------------ #

    @property
    def conversations(self) -> list[Conversation]:
        return list(self._conversations)

    @property
    def session(self) -> ConversationSession | None:
        return self._session

    @property
    def current_conversation_id(self) -> str | None:
        return self._session.conversation_id if self._session else None

    @property
    def current_conversation(self) -> Conversation | None:
        conv_id = self.current_conversation_id
        return self.get(conv_id) if conv_id else None

    @property
    def is_loading(self) -> bool:
        return bool(self._in_flight)

    def is_busy(self, conversation_id: str) -> bool:
        return conversation_id in self._in_flight

    def get(self, conversation_id: str) -> Conversation | None:
        return next((c for c in self._conversations if c.id == conversation_id), None)

    # ------------------------------------------------------------------ #
    # Persistence                                                          #
    # ------------------------------------------------------------------ #

    async def load(self) -> None:
        """Restore persisted conversations and select the most recent one."""
        raw = await self._kv.get(self._key) or []
        conversations: list[Conversation] = []
        for item in raw:
            try:
                conversations.append(Conversation.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping corrupt conversation record: %s", e)
        self._conversations = conversations
        logger.info("Loaded %d conversation(s)", len(conversations))

        if self._session is None and self._conversations:
            self.select_conversation(self._conversations[0].id)

    async def _persist(self) -> None:
        async with self._write_lock:
            await self._kv.set(
                self._key, [c.model_dump(mode="json") for c in self._conversations]
            )

    def _replace(self, conversation_id: str, update: Callable[[Conversation], Conversation]) -> bool:
        found = False
        updated: list[Conversation] = []
        for conv in self._conversations:
            if conv.id == conversation_id:
                conv = update(conv)
                found = True
            updated.append(conv)
        self._conversations = updated
        return found

    def _append(self, conversation_id: str, message: ChatMessage) -> bool:
        def update(conv: Conversation) -> Conversation:
            changes: dict = {
                "messages": [*conv.messages, message],
                "last_message_at": utc_now(),
            }
            if not conv.messages and message.role == "user":
                changes["title"] = derive_title(message.content)
            return conv.model_copy(update=changes)

        if not self._replace(conversation_id, update):
            logger.warning(
                "Conversation %s no longer exists; dropping %s message",
                conversation_id, message.role,
            )
            return False
        return True

    # ------------------------------------------------------------------ #
    # Conversation lifecycle                                               #
    # ------------------------------------------------------------------ #

    def _new_conversation(self) -> str:
        conv = Conversation(title=DEFAULT_CONVERSATION_TITLE)
        self._conversations = [conv, *self._conversations]
        self._session = ConversationSession(conv.id)
        logger.info("Created conversation %s", conv.id)
        return conv.id

    async def create_conversation(self) -> str:
        """Start an empty conversation and make it active."""
        conv_id = self._new_conversation()
        await self._persist()
        return conv_id

    def select_conversation(self, conversation_id: str) -> bool:
        """Make a conversation active, rebuilding its protocol history from messages."""
        conv = self.get(conversation_id)
        if conv is None:
            logger.warning("Cannot select unknown conversation %s", conversation_id)
            return False
        self._session = ConversationSession(conv.id, history_from_messages(conv.messages))
        logger.info(
            "Selected conversation %s (%d turns rebuilt)",
            conv.id, len(self._session.history),
        )
        return True

    async def delete_conversation(self, conversation_id: str) -> bool:
        before = len(self._conversations)
        self._conversations = [c for c in self._conversations if c.id != conversation_id]
        if self.current_conversation_id == conversation_id:
            self._session = None
        removed = len(self._conversations) < before
        if removed:
            await self._persist()
            logger.info("Deleted conversation %s", conversation_id)
        return removed

    async def clear_all(self) -> None:
        self._conversations = []
        self._session = None
        await self._persist()
        logger.info("Cleared all conversations")

    # ------------------------------------------------------------------ #
    # Messaging                                                            #
    # ------------------------------------------------------------------ #

    async def send_message(self, text: str) -> ChatMessage | None:
        """
        Send one user message through the agent and persist the outcome.

        The user message is stored before the model is called. On success
        the assistant reply is appended and returned; on failure a system
        error message is appended and the exception re-raised. Blank input
        is ignored (returns None). Without an API key MissingCredentialError
        is raised before anything is created or stored. A second call for a
        conversation that still has one in flight raises ConversationBusyError.
        """
        content = text.strip()
        if not content:
            return None

        if not self._orchestrator.is_configured:
            self.error = ERROR_MESSAGES["missing_key"]
            logger.warning("Message not sent: no API key configured")
            raise MissingCredentialError(self.error)

        conv_id = self.current_conversation_id
        if conv_id is None:
            conv_id = self._new_conversation()

        # Checked and set with no await in between
        if conv_id in self._in_flight:
            raise ConversationBusyError(conv_id)
        self._in_flight.add(conv_id)

        try:
            self.error = None
            session = self._session
            history = list(session.history) if session is not None else []

            self._append(conv_id, ChatMessage(role="user", content=content))
            await self._persist()

            ctx = DomainContext(self._host)
            try:
                result = await self._orchestrator.run(history, content, ctx)
            except Exception as e:
                message = e.user_message if isinstance(e, AgentError) else (str(e) or ERROR_MESSAGES["unknown"])
                self.error = message
                logger.error("Message failed in conversation %s: %s", conv_id, message)
                self._append(
                    conv_id,
                    ChatMessage(role="system", content=f"{SYSTEM_ERROR_PREFIX}{message}"),
                )
                await self._persist()
                raise

            reply = ChatMessage(
                role="assistant",
                content=result.text,
                function_call=summarize_calls(result.function_calls),
            )
            self._append(conv_id, reply)
            await self._persist()

            # Skipped if the conversation was re-selected or left while in flight
            if session is not None and self._session is session:
                session.history.append(user_turn(content))
                # The API rejects empty text parts
                if result.text:
                    session.history.append(model_turn(result.text))

            logger.info(
                "Reply in conversation %s after %d iteration(s), %d function call(s)",
                conv_id, result.iterations, len(result.function_calls),
            )
            return reply
        finally:
            self._in_flight.discard(conv_id)
