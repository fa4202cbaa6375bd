"""High-level client combining the pool, transport and rotation loop."""

from types import TracebackType
from typing import Any

from structlog import get_logger

from gemini_rotator.config.settings import CredentialSettings, Settings, get_settings
from gemini_rotator.rotation import (
    CredentialPool,
    CredentialProvider,
    Dispatcher,
    EnvCredentialProvider,
    FailureClassifier,
    FileCredentialProvider,
    RequestMode,
    RetryCoordinator,
)
from gemini_rotator.rotation.constants import DEFAULT_PER_ATTEMPT_TIMEOUT_SECONDS
from gemini_rotator.transport import GeminiTransport, TextGenerationClient


logger = get_logger(__name__)


def build_provider(settings: CredentialSettings) -> CredentialProvider:
    """Pick the credential provider described by the settings.

    A configured ``keys_file`` wins; otherwise keys come from the
    environment, falling back to the statically configured ``api_keys``.
    """
    if settings.keys_file is not None:
        return FileCredentialProvider(settings.keys_file)
    return EnvCredentialProvider(
        settings.api_keys,
        slot_prefix=settings.key_slot_prefix,
        max_slots=settings.max_key_slots,
    )


class GeminiClient:
    """Resilient Gemini client failing over across a pool of API keys.

    Example:
        >>> async with GeminiClient.from_settings() as client:
        ...     text = await client.generate_text("Summarize this project")
    """

    def __init__(
        self,
        provider: CredentialProvider,
        transport: TextGenerationClient,
        *,
        classifier: FailureClassifier | None = None,
        per_attempt_timeout: float | None = DEFAULT_PER_ATTEMPT_TIMEOUT_SECONDS,
    ) -> None:
        self._transport = transport
        self._pool = CredentialPool(provider)
        self._coordinator = RetryCoordinator(
            self._pool,
            Dispatcher(
                transport,
                classifier or FailureClassifier(),
                per_attempt_timeout=per_attempt_timeout,
            ),
        )

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "GeminiClient":
        """Build a client wired from configuration."""
        settings = settings or get_settings()
        transport = GeminiTransport(
            base_url=settings.gemini.base_url,
            model=settings.gemini.model,
            timeout=settings.gemini.per_attempt_timeout,
        )
        logger.debug(
            "gemini_client_created",
            model=settings.gemini.model,
            per_attempt_timeout=settings.gemini.per_attempt_timeout,
        )
        return cls(
            build_provider(settings.credentials),
            transport,
            classifier=FailureClassifier(settings.rotation.retriable_patterns),
            per_attempt_timeout=settings.gemini.per_attempt_timeout,
        )

    @property
    def pool(self) -> CredentialPool:
        return self._pool

    async def generate(self, prompt: str, mode: RequestMode) -> str:
        """Generate text for ``prompt`` in the requested mode.

        See ``RetryCoordinator.generate`` for the raised errors.
        """
        return await self._coordinator.generate(prompt, mode)

    async def generate_json(self, prompt: str) -> str:
        """Generate a JSON document (returned undecoded)."""
        return await self.generate(prompt, RequestMode.STRUCTURED_JSON)

    async def generate_text(self, prompt: str) -> str:
        return await self.generate(prompt, RequestMode.PLAIN_TEXT)

    async def get_status(self) -> dict[str, Any]:
        """Reload the pool and return its monitoring snapshot."""
        await self._pool.load()
        return self._pool.get_status()

    async def aclose(self) -> None:
        aclose = getattr(self._transport, "aclose", None)
        if aclose is not None:
            await aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
