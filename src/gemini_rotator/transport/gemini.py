"""Gemini ``generateContent`` transport over httpx."""

from types import TracebackType
from typing import Any

import httpx
import orjson
from structlog import get_logger

from gemini_rotator.exceptions import TransportError
from gemini_rotator.rotation.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_HTTP_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_MODEL,
    DEFAULT_PER_ATTEMPT_TIMEOUT_SECONDS,
    RETRIABLE_REASONS,
    RETRIABLE_STATUS_CODES,
    RETRIABLE_UPSTREAM_STATUSES,
)
from gemini_rotator.rotation.types import GenerationConfig


logger = get_logger(__name__)

API_KEY_HEADER = "x-goog-api-key"


def build_request_body(prompt: str, config: GenerationConfig) -> dict[str, Any]:
    """Build the JSON body of a single-turn generateContent request."""
    return {
        "contents": [{"role": "user", "parts": [{"text": prompt}]}],
        "generationConfig": config.to_wire(),
    }


def extract_text(data: Any) -> str | None:
    """Join the text parts of the first candidate.

    Unexpected shapes are treated like a reply without text.

    Returns:
        The generated text, or None if the reply has no text part
    """
    if not isinstance(data, dict):
        return None

    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    if not isinstance(candidates[0], dict):
        return None

    content = candidates[0].get("content")
    if not isinstance(content, dict):
        return None
    parts = content.get("parts")
    if not isinstance(parts, list):
        return None

    texts = [
        part["text"]
        for part in parts
        if isinstance(part, dict) and isinstance(part.get("text"), str)
    ]
    if not texts:
        return None
    return "".join(texts)


def parse_error_response(response: httpx.Response) -> TransportError:
    """Convert a non-2xx Gemini response into a tagged TransportError.

    The error is tagged retriable when the HTTP status, the google.rpc
    status or an ErrorInfo reason points at the key or at service
    capacity. Otherwise the tag is left unset and message patterns decide.
    """
    message = response.text or response.reason_phrase
    upstream_status: str | None = None
    reason: str | None = None

    try:
        payload = orjson.loads(response.content)
    except orjson.JSONDecodeError:
        payload = None

    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        error = payload["error"]
        message = error.get("message") or message
        upstream_status = error.get("status")
        for detail in error.get("details") or []:
            if isinstance(detail, dict) and detail.get("reason"):
                reason = detail["reason"]
                break

    retriable = (
        response.status_code in RETRIABLE_STATUS_CODES
        or upstream_status in RETRIABLE_UPSTREAM_STATUSES
        or reason in RETRIABLE_REASONS
    )
    logger.debug(
        "upstream_error_response",
        status_code=response.status_code,
        upstream_status=upstream_status,
        reason=reason,
        retriable=retriable,
    )

    return TransportError(
        f"{response.status_code}: {message}",
        status_code=response.status_code,
        upstream_status=upstream_status,
        reason=reason,
        retriable=True if retriable else None,
    )


class GeminiTransport:
    """Calls ``models/{model}:generateContent`` with the given API key.

    Owns an ``httpx.AsyncClient`` unless one is injected; use as an async
    context manager or call ``aclose`` when done.
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        model: str = DEFAULT_MODEL,
        timeout: float = DEFAULT_PER_ATTEMPT_TIMEOUT_SECONDS,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._model = model
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=httpx.Timeout(timeout, connect=DEFAULT_HTTP_CONNECT_TIMEOUT_SECONDS)
        )

    @property
    def model(self) -> str:
        return self._model

    @property
    def endpoint(self) -> str:
        return f"{self._base_url}/models/{self._model}:generateContent"

    async def complete(
        self,
        credential: str,
        prompt: str,
        config: GenerationConfig,
    ) -> str | None:
        """Run one generation request.

        Raises:
            TransportError: On network failure, timeout or a non-2xx reply
        """
        try:
            response = await self._client.post(
                self.endpoint,
                headers={API_KEY_HEADER: credential},
                json=build_request_body(prompt, config),
            )
        except httpx.TimeoutException as e:
            raise TransportError(
                f"Request to {self._model} timed out: {e}",
                status_code=504,
                upstream_status="DEADLINE_EXCEEDED",
                retriable=True,
            ) from e
        except httpx.RequestError as e:
            raise TransportError(
                f"Connection to Gemini API failed: {e}",
                status_code=503,
                upstream_status="UNAVAILABLE",
                retriable=True,
            ) from e

        if response.is_error:
            raise parse_error_response(response)

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError(
                f"Malformed JSON in response from {self._model}: {e}",
                status_code=502,
            ) from e

        return extract_text(data)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "GeminiTransport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
