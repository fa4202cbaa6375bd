"""Configuration module for gemini-rotator."""

from gemini_rotator.exceptions import ConfigurationError

from .settings import (
    CredentialSettings,
    GeminiSettings,
    LoggingSettings,
    RotationSettings,
    Settings,
    get_settings,
)


__all__ = [
    "ConfigurationError",
    "CredentialSettings",
    "GeminiSettings",
    "LoggingSettings",
    "RotationSettings",
    "Settings",
    "get_settings",
]
