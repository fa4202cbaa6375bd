"""gemini-rotator: a Gemini client that fails over across a pool of API keys."""

from gemini_rotator.client import GeminiClient, build_provider
from gemini_rotator.exceptions import (
    AllCredentialsExhaustedError,
    ConfigurationError,
    EmptyResponseError,
    FatalUpstreamError,
    GeminiRotatorError,
    NoCredentialsError,
    TransportError,
)
from gemini_rotator.rotation import (
    CredentialPool,
    Dispatcher,
    FailureClassifier,
    RequestMode,
    RetryCoordinator,
)


__version__ = "0.1.0"

__all__ = [
    "AllCredentialsExhaustedError",
    "ConfigurationError",
    "CredentialPool",
    "Dispatcher",
    "EmptyResponseError",
    "FailureClassifier",
    "FatalUpstreamError",
    "GeminiClient",
    "GeminiRotatorError",
    "NoCredentialsError",
    "RequestMode",
    "RetryCoordinator",
    "TransportError",
    "__version__",
    "build_provider",
]
