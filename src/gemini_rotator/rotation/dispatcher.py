"""Single-attempt execution against one credential."""

import asyncio
from http import HTTPStatus

from structlog import get_logger

from gemini_rotator.core.validators import mask_credential
from gemini_rotator.exceptions import EmptyResponseError, TransportError
from gemini_rotator.rotation.classifier import FailureClassifier
from gemini_rotator.rotation.constants import DEFAULT_PER_ATTEMPT_TIMEOUT_SECONDS
from gemini_rotator.rotation.types import (
    AttemptOutcome,
    FailureKind,
    FatalFailure,
    GenerationConfig,
    RequestMode,
    RetriableFailure,
    Success,
)
from gemini_rotator.transport.base import TextGenerationClient


logger = get_logger(__name__)


class Dispatcher:
    """Runs one generation request and turns the result into an outcome.

    Transport errors, empty payloads and per-attempt timeouts are all
    reported as failures classified by the ``FailureClassifier``. Any other
    exception is a bug and propagates.
    """

    def __init__(
        self,
        transport: TextGenerationClient,
        classifier: FailureClassifier | None = None,
        *,
        per_attempt_timeout: float | None = DEFAULT_PER_ATTEMPT_TIMEOUT_SECONDS,
    ) -> None:
        self._transport = transport
        self._classifier = classifier or FailureClassifier()
        self._per_attempt_timeout = per_attempt_timeout

    async def attempt(
        self,
        credential: str,
        mode: RequestMode,
        prompt: str,
    ) -> AttemptOutcome:
        config = GenerationConfig.for_mode(mode)

        try:
            text = await asyncio.wait_for(
                self._transport.complete(credential, prompt, config),
                timeout=self._per_attempt_timeout,
            )
        except TimeoutError:
            error: Exception = TransportError(
                f"Attempt timed out after {self._per_attempt_timeout}s",
                status_code=HTTPStatus.GATEWAY_TIMEOUT,
                upstream_status="DEADLINE_EXCEEDED",
                retriable=True,
            )
        except (TransportError, EmptyResponseError) as e:
            error = e
        else:
            if text:
                logger.debug("raw_response", key=mask_credential(credential), text=text)
                return Success(text)
            error = EmptyResponseError()

        if self._classifier.classify(error) is FailureKind.RETRIABLE:
            return RetriableFailure(error)
        return FatalFailure(error)
