"""Rotation pool for managing multiple Gemini API keys.

Holds the ordered key set and a round-robin cursor shared by every call
made through one client instance.
"""

import asyncio
import inspect
from typing import Any

from structlog import get_logger

from gemini_rotator.core.validators import mask_credential
from gemini_rotator.exceptions import NoCredentialsError
from gemini_rotator.rotation.providers import CredentialProvider


logger = get_logger(__name__)


class CredentialPool:
    """Ordered pool of API keys with a rotation cursor.

    The key tuple is replaced wholesale on every ``load`` and the cursor is
    only read or written under ``_lock``, so concurrent calls never observe
    a half-updated pool or an out-of-bounds cursor.
    """

    def __init__(self, provider: CredentialProvider) -> None:
        """Initialize an empty pool.

        Args:
            provider: Source queried on every ``load``
        """
        self._provider = provider
        self._credentials: tuple[str, ...] = ()
        self._cursor = 0
        self._lock = asyncio.Lock()

    @property
    def size(self) -> int:
        """Get number of credentials currently loaded."""
        return len(self._credentials)

    @property
    def cursor(self) -> int:
        """Get the cursor position (meaningless while the pool is empty)."""
        return self._cursor

    async def load(self) -> None:
        """Replace the stored credentials with the provider's current set.

        Resets the cursor to 0 if the new set is too small for it.
        """
        result = self._provider.load()
        if inspect.isawaitable(result):
            result = await result
        credentials = tuple(result)

        async with self._lock:
            previous_size = len(self._credentials)
            self._credentials = credentials
            if self._cursor >= len(credentials):
                self._cursor = 0

        if len(credentials) != previous_size:
            if credentials:
                logger.info("credential_pool_loaded", count=len(credentials))
            else:
                logger.warning("credential_pool_empty")

    async def current(self) -> str:
        """Get the credential under the cursor.

        Raises:
            NoCredentialsError: If the pool is empty
        """
        async with self._lock:
            if not self._credentials:
                raise NoCredentialsError()
            return self._credentials[self._cursor]

    async def advance(self) -> None:
        """Move the cursor to the next credential, wrapping at the end."""
        async with self._lock:
            if not self._credentials:
                return
            self._cursor = (self._cursor + 1) % len(self._credentials)
            logger.debug("credential_cursor_advanced", cursor=self._cursor)

    def get_status(self) -> dict[str, Any]:
        """Get pool status for monitoring.

        Returns:
            Status dictionary with masked credentials and the cursor
        """
        credentials = self._credentials
        return {
            "size": len(credentials),
            "cursor": self._cursor if credentials else None,
            "credentials": [
                {
                    "index": index,
                    "key": mask_credential(credential),
                    "current": index == self._cursor,
                }
                for index, credential in enumerate(credentials)
            ],
        }
