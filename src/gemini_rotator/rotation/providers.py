"""Credential providers consulted by the pool before every call.

A provider returns the current ordered list of API keys. The pool calls it
at the start of each ``generate`` so key changes take effect on the next
call without a separate reload step.
"""

import os
from collections.abc import Awaitable, Mapping, Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

import orjson
from structlog import get_logger

from gemini_rotator.core.validators import parse_comma_separated
from gemini_rotator.exceptions import ConfigurationError
from gemini_rotator.rotation.constants import (
    DEFAULT_KEY_SLOT_PREFIX,
    DEFAULT_KEYS_ENV_VAR,
    DEFAULT_MAX_KEY_SLOTS,
)


logger = get_logger(__name__)


@runtime_checkable
class CredentialProvider(Protocol):
    """Source of the ordered credential set.

    ``load`` may be a plain or a coroutine function.
    """

    def load(self) -> Sequence[str] | Awaitable[Sequence[str]]: ...


class StaticCredentialProvider:
    """Fixed list of keys, mostly useful for tests and embedding."""

    def __init__(self, keys: Sequence[str] = ()) -> None:
        self._keys = list(keys)

    def set_keys(self, keys: Sequence[str]) -> None:
        self._keys = list(keys)

    def load(self) -> list[str]:
        return list(self._keys)


class EnvCredentialProvider:
    """Reads keys from environment variables on every load.

    Looks at ``GEMINI_API_KEYS`` (comma-separated) first, then the numbered
    slots ``GEMINI_API_KEY_1`` .. ``GEMINI_API_KEY_<max_slots>``. Falls back
    to ``default_keys`` (typically from the TOML config) when the
    environment holds none.
    """

    def __init__(
        self,
        default_keys: Sequence[str] = (),
        *,
        env_var: str = DEFAULT_KEYS_ENV_VAR,
        slot_prefix: str = DEFAULT_KEY_SLOT_PREFIX,
        max_slots: int = DEFAULT_MAX_KEY_SLOTS,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        self._default_keys = list(default_keys)
        self._env_var = env_var
        self._slot_prefix = slot_prefix
        self._max_slots = max_slots
        self._environ = environ

    def load(self) -> list[str]:
        environ = os.environ if self._environ is None else self._environ

        keys = parse_comma_separated(environ.get(self._env_var, ""))
        for slot in range(1, self._max_slots + 1):
            value = environ.get(f"{self._slot_prefix}{slot}", "").strip()
            if value:
                keys.append(value)

        if not keys:
            return list(self._default_keys)
        return keys


class FileCredentialProvider:
    """Reads keys from a file, re-parsing it only when its mtime changes.

    Accepted formats:
    - JSON list of strings: ``["key1", "key2"]``
    - JSON object with an ``api_keys`` list
    - plain text, one key per line; blank lines and ``#`` comments ignored

    A missing file yields an empty list. An unreadable or malformed file
    raises ``ConfigurationError``.
    """

    def __init__(self, path: Path | str) -> None:
        self._path = Path(path).expanduser()
        self._last_modified: float | None = None
        self._keys: list[str] = []

    @property
    def path(self) -> Path:
        return self._path

    def has_file_changed(self) -> bool:
        """Check if the keys file has been modified since last read."""
        if not self._path.exists():
            return self._last_modified is not None
        return self._path.stat().st_mtime != self._last_modified

    def load(self) -> list[str]:
        if not self._path.exists():
            if self._last_modified is not None or self._keys:
                logger.warning("keys_file_removed", path=str(self._path))
            else:
                logger.warning("keys_file_not_found", path=str(self._path))
            self._last_modified = None
            self._keys = []
            return []

        if self.has_file_changed():
            try:
                raw = self._path.read_bytes()
            except OSError as e:
                raise ConfigurationError(
                    f"Cannot read keys file {self._path}: {e}"
                ) from e
            self._keys = self._parse(raw)
            self._last_modified = self._path.stat().st_mtime
            logger.debug("keys_file_read", path=str(self._path), count=len(self._keys))

        return list(self._keys)

    def _parse(self, raw: bytes) -> list[str]:
        try:
            text = raw.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            raise ConfigurationError(
                f"Keys file {self._path} is not valid UTF-8: {e}"
            ) from e

        if text.startswith(("[", "{")):
            try:
                data = orjson.loads(text)
            except orjson.JSONDecodeError as e:
                raise ConfigurationError(
                    f"Invalid JSON in keys file {self._path}: {e}"
                ) from e

            if isinstance(data, dict):
                data = data.get("api_keys", [])
            if not isinstance(data, list) or not all(
                isinstance(item, str) for item in data
            ):
                raise ConfigurationError(
                    f"Keys file {self._path} must contain a list of strings"
                )
            return [item.strip() for item in data if item.strip()]

        keys = []
        for line in text.splitlines():
            line = line.strip()
            if line and not line.startswith("#"):
                keys.append(line)
        return keys
