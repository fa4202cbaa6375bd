"""Credential rotation for gemini-rotator.

Turns an ordered pool of API keys into one logical client that fails over
to the next key on retriable errors and surfaces every other error.
"""

from gemini_rotator.rotation.constants import (
    DEFAULT_RETRIABLE_PATTERNS,
    GENERATION_TEMPERATURE,
)
from gemini_rotator.rotation.types import (
    AttemptOutcome,
    FailureKind,
    FatalFailure,
    GenerationConfig,
    RequestMode,
    RetriableFailure,
    Success,
)
from gemini_rotator.rotation.classifier import FailureClassifier
from gemini_rotator.rotation.providers import (
    CredentialProvider,
    EnvCredentialProvider,
    FileCredentialProvider,
    StaticCredentialProvider,
)
from gemini_rotator.rotation.pool import CredentialPool
from gemini_rotator.rotation.dispatcher import Dispatcher
from gemini_rotator.rotation.coordinator import RetryCoordinator


__all__ = [
    "DEFAULT_RETRIABLE_PATTERNS",
    "GENERATION_TEMPERATURE",
    "AttemptOutcome",
    "CredentialPool",
    "CredentialProvider",
    "Dispatcher",
    "EnvCredentialProvider",
    "FailureClassifier",
    "FailureKind",
    "FatalFailure",
    "FileCredentialProvider",
    "GenerationConfig",
    "RequestMode",
    "RetriableFailure",
    "RetryCoordinator",
    "StaticCredentialProvider",
    "Success",
]
