"""
Agentic function-calling loop.

For one user message: send the history, execute the function call the model
asks for, feed the result back, and repeat until the model answers with text
or the iteration cap is reached. Each iteration makes exactly one request;
API failures abort the loop immediately (no retries).

    AwaitingResponse ──functionCall──▶ ExecutingFunction ──dispatched──▶ AwaitingResponse
    AwaitingResponse ──text──▶ Done
    AwaitingResponse ──API error──▶ Failed
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Literal, Protocol

from ..config import settings
from ..constants import ERROR_MESSAGES, SYSTEM_PROMPT
from ..exceptions import AgentError, MaxIterationsExceeded, NoResponseError, ServiceError
from ..models import TokenUsage, ToolCallRecord
from .codec import Part, Turn, append_function_exchange, parse_parts, user_turn
from .tools import DomainContext, ToolRegistry

logger = logging.getLogger(__name__)


class AgentState(str, Enum):
    AWAITING_RESPONSE = "awaiting_response"
    EXECUTING_FUNCTION = "executing_function"
    DONE = "done"
    FAILED = "failed"


class ModelClient(Protocol):
    @property
    def is_configured(self) -> bool: ...

    async def generate_content(self, body: dict) -> dict: ...


@dataclass
class AgentResult:
    text: str
    function_calls: list[ToolCallRecord] = field(default_factory=list)
    usage: TokenUsage = field(default_factory=TokenUsage)
    iterations: int = 0
    state: AgentState = AgentState.DONE


def _usage(data: dict) -> TokenUsage:
    meta = data.get("usageMetadata")
    if not isinstance(meta, dict):
        return TokenUsage()
    return TokenUsage(
        input_tokens=meta.get("promptTokenCount", 0) or 0,
        output_tokens=meta.get("candidatesTokenCount", 0) or 0,
    )


def _malformed(what: str) -> ServiceError:
    logger.error("Malformed generateContent response: %s", what)
    return ServiceError(ERROR_MESSAGES["unknown"])


def _candidate_parts(data: dict) -> list[Part]:
    """
    Return the parts of the first candidate.

    Raises ServiceError on error bodies or a body of the wrong shape, and
    NoResponseError when there are no candidates.
    """
    if not isinstance(data, dict):
        raise _malformed(f"body is {type(data).__name__}")

    error = data.get("error")
    if error:
        if isinstance(error, dict):
            raise ServiceError(
                error.get("message") or ERROR_MESSAGES["unknown"],
                status_code=error.get("code"),
            )
        raise ServiceError(str(error))

    candidates = data.get("candidates") or []
    if not isinstance(candidates, list):
        raise _malformed(f"candidates is {type(candidates).__name__}")
    if not candidates:
        raise NoResponseError(ERROR_MESSAGES["no_response"])

    candidate = candidates[0]
    if not isinstance(candidate, dict):
        raise _malformed(f"candidate is {type(candidate).__name__}")

    content = candidate.get("content") or {}
    if not isinstance(content, dict):
        raise _malformed(f"content is {type(content).__name__}")

    raw_parts = content.get("parts") or []
    if not isinstance(raw_parts, list):
        raise _malformed(f"parts is {type(raw_parts).__name__}")
    return parse_parts(raw_parts)


class AgentOrchestrator:
    def __init__(
        self,
        client: ModelClient,
        registry: ToolRegistry | None = None,
        *,
        system_prompt: str | None = None,
        temperature: float | None = None,
        max_output_tokens: int | None = None,
        max_iterations: int | None = None,
        max_iterations_policy: Literal["error", "empty"] | None = None,
    ) -> None:
        self._client = client
        self._registry = registry or ToolRegistry()
        self._system_prompt = system_prompt if system_prompt is not None else SYSTEM_PROMPT
        self._temperature = temperature if temperature is not None else settings.temperature
        self._max_output_tokens = max_output_tokens or settings.max_output_tokens
        self.max_iterations = max_iterations or settings.max_tool_iterations
        self.max_iterations_policy = max_iterations_policy or settings.max_iterations_policy

    @property
    def is_configured(self) -> bool:
        """Whether the model client has a credential to send with."""
        return self._client.is_configured

    def build_request(self, contents: list[Turn]) -> dict:
        return {
            "contents": [t.to_wire() for t in contents],
            "systemInstruction": {"parts": [{"text": self._system_prompt}]},
            "tools": self._registry.tools,
            "generationConfig": {
                "temperature": self._temperature,
                "maxOutputTokens": self._max_output_tokens,
            },
        }

    async def run(self, history: list[Turn], user_text: str, ctx: DomainContext) -> AgentResult:
        """
        Run the loop for one user message.

        `history` is not modified; the loop works on a copy that gains the
        user turn and any function-call exchanges. Raises AgentError on API
        failure, and MaxIterationsExceeded when the cap is hit under the
        "error" policy.
        """
        working = list(history)
        working.append(user_turn(user_text))
        calls: list[ToolCallRecord] = []
        usage = TokenUsage()
        state = AgentState.AWAITING_RESPONSE

        for iteration in range(1, self.max_iterations + 1):
            logger.debug(
                "Agent iteration %d/%d (%s), turns=%d",
                iteration, self.max_iterations, state.value, len(working),
            )

            try:
                data = await self._client.generate_content(self.build_request(working))
                parts = _candidate_parts(data)
            except AgentError as e:
                logger.warning(
                    "Agent loop %s on iteration %d: %s",
                    AgentState.FAILED.value, iteration, e.user_message,
                )
                raise

            usage = usage + _usage(data)

            call_part = next((p for p in parts if p.function_call is not None), None)
            if call_part is not None:
                state = AgentState.EXECUTING_FUNCTION
                call = call_part.function_call
                logger.info("Executing function %s (iteration %d)", call.name, iteration)
                outcome = self._registry.dispatch(call.name, call.args, ctx)
                result = json.dumps(outcome, ensure_ascii=False)
                calls.append(ToolCallRecord(name=call.name, args=call.args, result=result))
                append_function_exchange(working, call, result)
                state = AgentState.AWAITING_RESPONSE
                continue

            text_part = next((p for p in parts if p.text), None)
            state = AgentState.DONE
            return AgentResult(
                text=text_part.text if text_part is not None else "",
                function_calls=calls,
                usage=usage,
                iterations=iteration,
                state=state,
            )

        logger.warning(
            "Agent hit max iterations (%d) without a text reply; %d function call(s) executed",
            self.max_iterations, len(calls),
        )
        if self.max_iterations_policy == "error":
            raise MaxIterationsExceeded(ERROR_MESSAGES["max_iterations"], function_calls=calls)

        return AgentResult(
            text="",
            function_calls=calls,
            usage=usage,
            iterations=self.max_iterations,
            state=AgentState.DONE,
        )
