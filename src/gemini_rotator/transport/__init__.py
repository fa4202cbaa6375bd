"""Text-generation transports."""

from gemini_rotator.transport.base import TextGenerationClient
from gemini_rotator.transport.gemini import GeminiTransport


__all__ = ["GeminiTransport", "TextGenerationClient"]
