"""Custom exception hierarchy for sparky."""

from __future__ import annotations


class SparkyError(Exception):
    """Base exception for sparky."""
    pass


class AgentError(SparkyError):
    """
    Raised when a model round trip fails and the agent loop must stop.

    `user_message` is the text shown to the user and persisted as the
    system message of the conversation.
    """

    def __init__(self, user_message: str, *, status_code: int | None = None) -> None:
        super().__init__(user_message)
        self.user_message = user_message
        self.status_code = status_code


class RateLimitedError(AgentError):
    """HTTP 429 from the model service. Never retried automatically."""
    pass


class UnauthorizedError(AgentError):
    """HTTP 400/403: invalid or insufficiently privileged API key."""
    pass


class MissingCredentialError(UnauthorizedError):
    """No API key configured; raised before any network I/O."""
    pass


class ServiceError(AgentError):
    """Any other non-success status, transport failure, or an `error` body."""
    pass


class NoResponseError(AgentError):
    """The response carried no candidates."""
    pass


class MaxIterationsExceeded(AgentError):
    """
    The tool-call cap was hit without a final text reply.

    The calls already executed (and their side effects) are kept on
    `function_calls`.
    """

    def __init__(self, user_message: str, *, function_calls: list | None = None) -> None:
        super().__init__(user_message)
        self.function_calls = function_calls or []


class ConversationBusyError(SparkyError):
    """A message is already being processed for this conversation."""

    def __init__(self, conversation_id: str) -> None:
        super().__init__(f"Conversation {conversation_id} already has a message in flight")
        self.conversation_id = conversation_id


class StorageError(SparkyError):
    """Raised when the key-value store cannot be read or written."""
    pass
