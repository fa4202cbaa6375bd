"""Value types passed between the rotation components."""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from gemini_rotator.rotation.constants import GENERATION_TEMPERATURE


class RequestMode(StrEnum):
    """Response format requested from the model."""

    STRUCTURED_JSON = "json"
    PLAIN_TEXT = "text"

    @property
    def response_mime_type(self) -> str:
        if self is RequestMode.STRUCTURED_JSON:
            return "application/json"
        return "text/plain"


class FailureKind(StrEnum):
    """Outcome of classifying a failed attempt."""

    RETRIABLE = "retriable"
    FATAL = "fatal"


@dataclass(frozen=True, slots=True)
class GenerationConfig:
    """Generation parameters forwarded unchanged to the transport."""

    response_mime_type: str
    temperature: float = GENERATION_TEMPERATURE

    @classmethod
    def for_mode(cls, mode: RequestMode) -> "GenerationConfig":
        return cls(response_mime_type=mode.response_mime_type)

    def to_wire(self) -> dict[str, Any]:
        """Serialize as the ``generationConfig`` object of a request body."""
        return {
            "responseMimeType": self.response_mime_type,
            "temperature": self.temperature,
        }


@dataclass(frozen=True, slots=True)
class Success:
    text: str


@dataclass(frozen=True, slots=True)
class RetriableFailure:
    error: Exception


@dataclass(frozen=True, slots=True)
class FatalFailure:
    error: Exception


AttemptOutcome = Success | RetriableFailure | FatalFailure
