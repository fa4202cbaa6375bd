"""Constants for the rotation module.

This module centralizes configuration values used across the rotation package.
"""

# Upstream endpoint
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_MODEL = "gemini-2.0-flash"

# Sampling temperature sent with every request, regardless of mode
GENERATION_TEMPERATURE = 0.1

# Time constants (in seconds)
DEFAULT_PER_ATTEMPT_TIMEOUT_SECONDS = 60.0
DEFAULT_HTTP_CONNECT_TIMEOUT_SECONDS = 10.0

# Credential discovery
DEFAULT_KEYS_ENV_VAR = "GEMINI_API_KEYS"
DEFAULT_KEY_SLOT_PREFIX = "GEMINI_API_KEY_"
DEFAULT_MAX_KEY_SLOTS = 10

# Substrings of upstream error messages that mark a failure as retriable.
# The first three are matched verbatim against Google's error text.
DEFAULT_RETRIABLE_PATTERNS: tuple[str, ...] = (
    "API key not valid",
    "quota",
    "503",
    "invalid api key",
    "service unavailable",
)

# HTTP statuses attributable to the key or to transient capacity
RETRIABLE_STATUS_CODES: frozenset[int] = frozenset({401, 403, 429, 503, 504})

# google.rpc status names and ErrorInfo reasons with the same meaning
RETRIABLE_UPSTREAM_STATUSES: frozenset[str] = frozenset(
    {"RESOURCE_EXHAUSTED", "UNAVAILABLE", "UNAUTHENTICATED", "DEADLINE_EXCEEDED"}
)
RETRIABLE_REASONS: frozenset[str] = frozenset(
    {"API_KEY_INVALID", "API_KEY_EXPIRED", "RATE_LIMIT_EXCEEDED"}
)
