"""Bounded credential-rotation loop behind ``generate``."""

from structlog import get_logger

from gemini_rotator.core.validators import mask_credential
from gemini_rotator.exceptions import (
    AllCredentialsExhaustedError,
    FatalUpstreamError,
    NoCredentialsError,
)
from gemini_rotator.rotation.dispatcher import Dispatcher
from gemini_rotator.rotation.pool import CredentialPool
from gemini_rotator.rotation.types import (
    FatalFailure,
    RequestMode,
    Success,
)


logger = get_logger(__name__)


class RetryCoordinator:
    """Turns a credential pool into a single logical client.

    Each call reloads the pool, then makes at most one attempt per loaded
    credential starting at the shared cursor:

    - success returns the text
    - a retriable failure advances the cursor and tries the next key
    - a fatal failure raises ``FatalUpstreamError`` at once
    - running out of keys raises ``AllCredentialsExhaustedError``

    The number of attempts is fixed by the pool size right after the reload,
    so a credential is never tried twice in one call even if other callers
    move the cursor concurrently.
    """

    def __init__(self, pool: CredentialPool, dispatcher: Dispatcher) -> None:
        self._pool = pool
        self._dispatcher = dispatcher

    @property
    def pool(self) -> CredentialPool:
        return self._pool

    async def generate(self, prompt: str, mode: RequestMode) -> str:
        """Generate text, failing over across credentials.

        Args:
            prompt: Prompt sent verbatim to the model
            mode: Requested response format

        Returns:
            The generated text

        Raises:
            NoCredentialsError: The pool is empty, no attempt was made
            FatalUpstreamError: A non-retriable failure ended the call
            AllCredentialsExhaustedError: Every credential failed retriably
        """
        await self._pool.load()
        total = self._pool.size
        if total == 0:
            logger.warning("generate_without_credentials")
            raise NoCredentialsError()

        logger.debug("prompt_sent", mode=str(mode), prompt=prompt)

        failures: list[BaseException] = []
        for attempt in range(1, total + 1):
            credential = await self._pool.current()
            key = mask_credential(credential)
            logger.debug("attempt_started", attempt=attempt, total=total, key=key)

            outcome = await self._dispatcher.attempt(credential, mode, prompt)

            if isinstance(outcome, Success):
                logger.info("attempt_succeeded", attempt=attempt, total=total, key=key)
                return outcome.text

            if isinstance(outcome, FatalFailure):
                logger.error(
                    "attempt_failed_fatal",
                    attempt=attempt,
                    total=total,
                    key=key,
                    error=str(outcome.error),
                )
                raise FatalUpstreamError(
                    outcome.error, attempts=attempt
                ) from outcome.error

            logger.warning(
                "attempt_failed_retriable",
                attempt=attempt,
                total=total,
                key=key,
                error=str(outcome.error),
            )
            failures.append(outcome.error)
            await self._pool.advance()

        logger.error("all_credentials_exhausted", attempts=total)
        raise AllCredentialsExhaustedError(failures) from failures[-1]
