"""Tests for single-attempt dispatch."""

import asyncio

import pytest

from gemini_rotator.exceptions import EmptyResponseError, TransportError
from gemini_rotator.rotation.dispatcher import Dispatcher
from gemini_rotator.rotation.types import (
    FatalFailure,
    GenerationConfig,
    RequestMode,
    RetriableFailure,
    Success,
)


@pytest.mark.unit
class TestDispatcher:
    @pytest.mark.asyncio
    async def test_non_empty_payload_is_success(self, scripted_transport) -> None:
        scripted_transport.replies = {"k1": "hello"}
        dispatcher = Dispatcher(scripted_transport)

        outcome = await dispatcher.attempt("k1", RequestMode.PLAIN_TEXT, "hi")

        assert outcome == Success("hello")

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [None, ""])
    async def test_empty_payload_is_retriable(
        self, scripted_transport, payload: str | None
    ) -> None:
        scripted_transport.replies = {"k1": payload}
        dispatcher = Dispatcher(scripted_transport)

        outcome = await dispatcher.attempt("k1", RequestMode.PLAIN_TEXT, "hi")

        assert isinstance(outcome, RetriableFailure)
        assert isinstance(outcome.error, EmptyResponseError)

    @pytest.mark.asyncio
    async def test_retriable_transport_error(self, scripted_transport) -> None:
        error = TransportError("quota exceeded")
        scripted_transport.replies = {"k1": error}
        dispatcher = Dispatcher(scripted_transport)

        outcome = await dispatcher.attempt("k1", RequestMode.STRUCTURED_JSON, "hi")

        assert outcome == RetriableFailure(error)

    @pytest.mark.asyncio
    async def test_fatal_transport_error(self, scripted_transport) -> None:
        error = TransportError("malformed request body")
        scripted_transport.replies = {"k1": error}
        dispatcher = Dispatcher(scripted_transport)

        outcome = await dispatcher.attempt("k1", RequestMode.STRUCTURED_JSON, "hi")

        assert outcome == FatalFailure(error)

    @pytest.mark.asyncio
    async def test_unexpected_exceptions_propagate(self, scripted_transport) -> None:
        scripted_transport.replies = {"k1": KeyError("bug")}
        dispatcher = Dispatcher(scripted_transport)

        with pytest.raises(KeyError):
            await dispatcher.attempt("k1", RequestMode.PLAIN_TEXT, "hi")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("mode", "mime_type"),
        [
            (RequestMode.STRUCTURED_JSON, "application/json"),
            (RequestMode.PLAIN_TEXT, "text/plain"),
        ],
    )
    async def test_generation_config_follows_mode(
        self, scripted_transport, mode: RequestMode, mime_type: str
    ) -> None:
        scripted_transport.replies = {"k1": "ok"}
        dispatcher = Dispatcher(scripted_transport)

        await dispatcher.attempt("k1", mode, "the prompt")

        credential, prompt, config = scripted_transport.calls[0]
        assert credential == "k1"
        assert prompt == "the prompt"
        assert config == GenerationConfig(response_mime_type=mime_type, temperature=0.1)
        assert config.to_wire() == {"responseMimeType": mime_type, "temperature": 0.1}

    @pytest.mark.asyncio
    async def test_per_attempt_timeout_is_retriable(self) -> None:
        class SlowTransport:
            async def complete(self, credential, prompt, config):
                await asyncio.sleep(10)
                return "too late"

        dispatcher = Dispatcher(SlowTransport(), per_attempt_timeout=0.01)

        outcome = await dispatcher.attempt("k1", RequestMode.PLAIN_TEXT, "hi")

        assert isinstance(outcome, RetriableFailure)
        assert isinstance(outcome.error, TransportError)
        assert outcome.error.status_code == 504
