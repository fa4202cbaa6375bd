"""Interface between the rotation loop and a text-generation backend."""

from typing import Protocol, runtime_checkable

from gemini_rotator.rotation.types import GenerationConfig


@runtime_checkable
class TextGenerationClient(Protocol):
    """Backend able to run one generation request with a given key.

    Implementations return the generated text, or ``None``/``""`` when the
    reply carries no payload, and raise ``TransportError`` for any transport
    or service failure.
    """

    async def complete(
        self,
        credential: str,
        prompt: str,
        config: GenerationConfig,
    ) -> str | None: ...
