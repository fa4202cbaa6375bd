"""Settings configuration for gemini-rotator."""

import contextlib
import os
import tomllib
from pathlib import Path
from typing import Annotated, Any

import orjson
import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from gemini_rotator.config.discovery import find_toml_config_file
from gemini_rotator.core.validators import (
    NonEmptyStr,
    PositiveTimeout,
    parse_comma_separated,
)
from gemini_rotator.exceptions import ConfigurationError
from gemini_rotator.rotation.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_KEY_SLOT_PREFIX,
    DEFAULT_MAX_KEY_SLOTS,
    DEFAULT_MODEL,
    DEFAULT_PER_ATTEMPT_TIMEOUT_SECONDS,
    DEFAULT_RETRIABLE_PATTERNS,
)


__all__ = [
    "CredentialSettings",
    "GeminiSettings",
    "LoggingSettings",
    "RotationSettings",
    "Settings",
    "get_settings",
]


logger = structlog.get_logger(__name__)


def _coerce_settings(value: Any, settings_class: type) -> Any:
    """Coerce value to settings class instance.

    Handles: None → default, dict → instance, passthrough existing instances.
    """
    if value is None:
        return settings_class()
    if isinstance(value, settings_class):
        return value
    if isinstance(value, dict):
        return settings_class(**value)
    if hasattr(value, "model_dump"):
        return settings_class(**value.model_dump())
    return value


class GeminiSettings(BaseSettings):
    """Upstream Gemini endpoint settings."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
    )

    base_url: NonEmptyStr = Field(
        default=DEFAULT_BASE_URL,
        description="Base URL of the Generative Language API",
    )

    model: NonEmptyStr = Field(
        default=DEFAULT_MODEL,
        description="Model used for every generateContent call",
    )

    per_attempt_timeout: PositiveTimeout = Field(
        default=DEFAULT_PER_ATTEMPT_TIMEOUT_SECONDS,
        description="Upper bound in seconds for a single attempt against one key",
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class CredentialSettings(BaseSettings):
    """Where the rotation pool reads its API keys from."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_",
        case_sensitive=False,
        extra="ignore",
    )

    api_keys: Annotated[list[str], NoDecode] = Field(
        default_factory=list,
        description="API keys in rotation order (list or comma-separated string)",
    )

    keys_file: Path | None = Field(
        default=None,
        description="JSON or newline-delimited file re-read before every call",
    )

    key_slot_prefix: NonEmptyStr = Field(
        default=DEFAULT_KEY_SLOT_PREFIX,
        description="Prefix of numbered key variables (GEMINI_API_KEY_1, ...)",
    )

    max_key_slots: int = Field(
        default=DEFAULT_MAX_KEY_SLOTS,
        ge=0,
        le=100,
        description="Highest numbered key variable that is looked up",
    )

    @field_validator("api_keys", mode="before")
    @classmethod
    def parse_api_keys(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str | list):
            return parse_comma_separated(v)
        return v

    @field_validator("keys_file", mode="before")
    @classmethod
    def expand_keys_file(cls, v: Any) -> Any:
        if v in (None, ""):
            return None
        return Path(v).expanduser()


class RotationSettings(BaseSettings):
    """Failure classification settings for the rotation loop."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_ROTATION_",
        case_sensitive=False,
        extra="ignore",
    )

    retriable_patterns: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_RETRIABLE_PATTERNS),
        description="Error message substrings that mark a failure as retriable",
    )

    @field_validator("retriable_patterns", mode="before")
    @classmethod
    def parse_patterns(cls, v: Any) -> Any:
        if isinstance(v, str | list):
            return parse_comma_separated(v)
        return v


class LoggingSettings(BaseSettings):
    """structlog output settings."""

    model_config = SettingsConfigDict(
        env_prefix="GEMINI_LOG_",
        case_sensitive=False,
        extra="ignore",
    )

    level: str = Field(default="INFO", description="Minimum log level")
    json_logs: bool = Field(default=False, description="Emit JSON log lines")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Invalid log level: {v}")
        return level


class Settings(BaseSettings):
    """
    Configuration settings for gemini-rotator.

    Settings are loaded from environment variables, .env files, and TOML configuration files.
    Environment variables take precedence over .env file values.
    TOML configuration files are looked up in the following order:
    1. .gemini_rotator.toml / gemini_rotator.toml in current directory
    2. the same names in the git repository root
    3. config.toml in user config directory/gemini_rotator/ (platform-specific)
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_nested_delimiter="__",
    )

    gemini: GeminiSettings = Field(
        default_factory=GeminiSettings,
        description="Upstream endpoint settings",
    )

    credentials: CredentialSettings = Field(
        default_factory=CredentialSettings,
        description="API key source settings",
    )

    rotation: RotationSettings = Field(
        default_factory=RotationSettings,
        description="Failure classification settings",
    )

    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging settings",
    )

    @field_validator("gemini", mode="before")
    @classmethod
    def validate_gemini(cls, v: Any) -> Any:
        return _coerce_settings(v, GeminiSettings)

    @field_validator("credentials", mode="before")
    @classmethod
    def validate_credentials(cls, v: Any) -> Any:
        return _coerce_settings(v, CredentialSettings)

    @field_validator("rotation", mode="before")
    @classmethod
    def validate_rotation(cls, v: Any) -> Any:
        return _coerce_settings(v, RotationSettings)

    @field_validator("logging", mode="before")
    @classmethod
    def validate_logging(cls, v: Any) -> Any:
        return _coerce_settings(v, LoggingSettings)

    def model_dump_safe(self) -> dict[str, Any]:
        """Dump model data with API keys masked."""
        from gemini_rotator.core.validators import mask_credential

        data = self.model_dump(mode="json")
        data["credentials"]["api_keys"] = [
            mask_credential(key) for key in self.credentials.api_keys
        ]
        return data

    @classmethod
    def load_toml_config(cls, toml_path: Path) -> dict[str, Any]:
        """Load configuration from a TOML file.

        Raises:
            ValueError: If the TOML file is invalid or cannot be read
        """
        try:
            with toml_path.open("rb") as f:
                return tomllib.load(f)
        except OSError as e:
            raise ValueError(f"Cannot read TOML config file {toml_path}: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ValueError(f"Invalid TOML syntax in {toml_path}: {e}") from e

    @classmethod
    def load_config_file(cls, config_path: Path) -> dict[str, Any]:
        """Load configuration from a file based on its extension.

        Raises:
            ValueError: If the file format is unsupported or invalid
        """
        suffix = config_path.suffix.lower()

        if suffix == ".toml":
            return cls.load_toml_config(config_path)
        raise ValueError(
            f"Unsupported config file format: {suffix}. "
            "Only TOML (.toml) files are supported."
        )

    @classmethod
    def from_config(
        cls, config_path: Path | str | None = None, **kwargs: Any
    ) -> "Settings":
        """Create Settings instance from configuration file.

        Args:
            config_path: Path to configuration file. Can be:
                - None: Auto-discover config file or use CONFIG_FILE env var
                - Path or str: Use this specific config file
            **kwargs: Additional keyword arguments to override config values

        Returns:
            Settings: Configured Settings instance
        """
        if config_path is None:
            config_path_env = os.environ.get("CONFIG_FILE")
            if config_path_env:
                config_path = Path(config_path_env)

        if isinstance(config_path, str):
            config_path = Path(config_path)

        if config_path is None:
            config_path = find_toml_config_file()

        config_data: dict[str, Any] = {}
        if config_path and config_path.exists():
            config_data = cls.load_config_file(config_path)
            logger.debug("config_file_loaded", path=str(config_path))

        merged_config = {**config_data, **kwargs}
        return cls(**merged_config)


def get_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from the environment and an optional TOML file.

    JSON overrides passed through ``GEMINI_ROTATOR_CONFIG_OVERRIDES`` are
    applied on top of the file values.

    Raises:
        ConfigurationError: If the file cannot be read or values are invalid
    """
    try:
        overrides: dict[str, Any] = {}
        overrides_json = os.environ.get("GEMINI_ROTATOR_CONFIG_OVERRIDES")
        if overrides_json:
            with contextlib.suppress(ValueError):
                overrides = orjson.loads(overrides_json)

        return Settings.from_config(config_path=config_path, **overrides)
    except (OSError, ValueError, tomllib.TOMLDecodeError) as e:
        # pydantic.ValidationError is a ValueError subclass
        raise ConfigurationError(f"Failed to load configuration: {e}") from e
