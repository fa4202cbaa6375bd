"""Failure classification for the rotation loop.

Failures that belong to the key itself (invalid key, exhausted quota) or to
transient service capacity are retriable. Everything else is fatal.
"""

from collections.abc import Iterable

from gemini_rotator.exceptions import EmptyResponseError, TransportError
from gemini_rotator.rotation.constants import DEFAULT_RETRIABLE_PATTERNS
from gemini_rotator.rotation.types import FailureKind


class FailureClassifier:
    """Maps an attempt error to RETRIABLE or FATAL.

    Decision order:
    1. ``EmptyResponseError`` is always retriable.
    2. A ``TransportError`` with a structured ``retriable`` tag uses the tag.
    3. Otherwise the error message is matched case-insensitively against
       the known patterns.
    """

    def __init__(self, patterns: Iterable[str] = DEFAULT_RETRIABLE_PATTERNS) -> None:
        self._patterns = tuple(p.casefold() for p in patterns if p)

    @property
    def patterns(self) -> tuple[str, ...]:
        return self._patterns

    def classify(self, error: BaseException) -> FailureKind:
        if isinstance(error, EmptyResponseError):
            return FailureKind.RETRIABLE

        if isinstance(error, TransportError) and error.retriable is not None:
            return FailureKind.RETRIABLE if error.retriable else FailureKind.FATAL

        if self.matches(str(error)):
            return FailureKind.RETRIABLE
        return FailureKind.FATAL

    def matches(self, message: str) -> bool:
        """Check a raw error message against the retriable patterns."""
        lowered = message.casefold()
        return any(pattern in lowered for pattern in self._patterns)
