"""
Gemini generateContent client over httpx.

One POST per call, no streaming and no retries: a failed request is
classified into the AgentError hierarchy and raised straight away.
Timeouts are left to the transport (httpx).
"""

import logging

import httpx

from ..config import settings
from ..constants import ERROR_MESSAGES
from ..exceptions import (
    MissingCredentialError,
    RateLimitedError,
    ServiceError,
    UnauthorizedError,
)

logger = logging.getLogger(__name__)


def _upstream_message(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("message")
    return None


class GeminiClient:
    """Client for the Gemini generateContent REST endpoint."""

    def __init__(
        self,
        api_key: str | None = None,
        model: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self._base_url = (base_url or settings.gemini_base_url).rstrip("/")
        self._timeout = timeout if timeout is not None else settings.gemini_timeout
        self._transport = transport

    @property
    def is_configured(self) -> bool:
        return bool(self._api_key and self._api_key.strip())

    def _client(self, timeout: float | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout if timeout is not None else self._timeout,
            transport=self._transport,
        )

    def _headers(self) -> dict[str, str]:
        return {
            "x-goog-api-key": self._api_key,
            "Content-Type": "application/json",
        }

    async def generate_content(self, body: dict) -> dict:
        """
        POST one generateContent request and return the decoded JSON body.

        Raises MissingCredentialError before any I/O when no key is set,
        RateLimitedError on 429, UnauthorizedError on 400/403 and
        ServiceError on any other failure.
        """
        if not self.is_configured:
            raise MissingCredentialError(ERROR_MESSAGES["missing_key"])

        url = f"{self._base_url}/models/{self.model}:generateContent"
        try:
            async with self._client() as client:
                response = await client.post(url, json=body, headers=self._headers())
        except httpx.HTTPError as e:
            logger.error("Gemini request failed (%s): %s", type(e).__name__, e)
            raise ServiceError(f"{ERROR_MESSAGES['transport']}: {e}") from e

        if not response.is_success:
            status = response.status_code
            upstream = _upstream_message(response)
            logger.error("Gemini API error (%d): %s", status, upstream or response.text[:200])
            if status == 429:
                raise RateLimitedError(ERROR_MESSAGES["rate_limited"], status_code=status)
            if status == 400:
                raise UnauthorizedError(ERROR_MESSAGES["invalid_key"], status_code=status)
            if status == 403:
                raise UnauthorizedError(ERROR_MESSAGES["forbidden"], status_code=status)
            raise ServiceError(upstream or f"API Error: {status}", status_code=status)

        try:
            return response.json()
        except ValueError as e:
            logger.error("Gemini returned a non-JSON body: %s", response.text[:200])
            raise ServiceError(f"API Error: malformed response ({response.status_code})") from e

    async def is_available(self) -> bool:
        """Check the key and model are usable (5s timeout)."""
        if not self.is_configured:
            return False
        try:
            async with self._client(timeout=5.0) as client:
                response = await client.get(
                    f"{self._base_url}/models/{self.model}", headers=self._headers()
                )
                return response.status_code == 200
        except httpx.HTTPError:
            return False
