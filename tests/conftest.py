"""Shared fixtures for gemini-rotator tests."""

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gemini_rotator.rotation.types import GenerationConfig


@pytest.fixture(autouse=True)
def clean_environment(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> Iterator[None]:
    """Isolate tests from GEMINI_* variables and config files on the host."""
    for name in list(os.environ):
        if name.upper().startswith("GEMINI_") or name.upper() == "CONFIG_FILE":
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(
        "gemini_rotator.config.discovery.user_config_dir",
        lambda: tmp_path / "user-config",
    )
    monkeypatch.setattr(
        "gemini_rotator.config.discovery.repository_root", lambda start: None
    )
    monkeypatch.chdir(tmp_path)
    yield


@dataclass
class ScriptedTransport:
    """Transport returning scripted replies per credential.

    A reply is a string (returned), ``None`` (empty payload) or an
    exception instance (raised). Every call is recorded in order.
    """

    replies: dict[str, object] = field(default_factory=dict)
    calls: list[tuple[str, str, GenerationConfig]] = field(default_factory=list)

    async def complete(
        self, credential: str, prompt: str, config: GenerationConfig
    ) -> str | None:
        self.calls.append((credential, prompt, config))
        reply = self.replies.get(credential)
        if isinstance(reply, BaseException):
            raise reply
        return reply  # type: ignore[return-value]

    @property
    def credentials_tried(self) -> list[str]:
        return [credential for credential, _, _ in self.calls]


@pytest.fixture
def scripted_transport() -> ScriptedTransport:
    return ScriptedTransport()
