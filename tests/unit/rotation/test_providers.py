"""Tests for credential providers."""

import os
from pathlib import Path

import pytest

from gemini_rotator.exceptions import ConfigurationError, GeminiRotatorError
from gemini_rotator.rotation.coordinator import RetryCoordinator
from gemini_rotator.rotation.dispatcher import Dispatcher
from gemini_rotator.rotation.pool import CredentialPool
from gemini_rotator.rotation.providers import (
    CredentialProvider,
    EnvCredentialProvider,
    FileCredentialProvider,
    StaticCredentialProvider,
)
from gemini_rotator.rotation.types import RequestMode


@pytest.mark.unit
class TestEnvCredentialProvider:
    def test_comma_separated_variable(self) -> None:
        provider = EnvCredentialProvider(environ={"GEMINI_API_KEYS": "k1, k2 ,,k3"})

        assert provider.load() == ["k1", "k2", "k3"]

    def test_numbered_slots_follow_list_variable(self) -> None:
        provider = EnvCredentialProvider(
            environ={
                "GEMINI_API_KEYS": "k1",
                "GEMINI_API_KEY_1": "slot-1",
                "GEMINI_API_KEY_3": "slot-3",
                "GEMINI_API_KEY_2": "  ",
            }
        )

        assert provider.load() == ["k1", "slot-1", "slot-3"]

    def test_slots_beyond_max_are_ignored(self) -> None:
        provider = EnvCredentialProvider(
            max_slots=2,
            environ={"GEMINI_API_KEY_1": "a", "GEMINI_API_KEY_3": "c"},
        )

        assert provider.load() == ["a"]

    def test_custom_slot_prefix(self) -> None:
        provider = EnvCredentialProvider(
            slot_prefix="MY_KEY_", environ={"MY_KEY_1": "mine"}
        )

        assert provider.load() == ["mine"]

    def test_falls_back_to_default_keys(self) -> None:
        provider = EnvCredentialProvider(["configured"], environ={})

        assert provider.load() == ["configured"]

    def test_empty_environment_yields_empty_list(self) -> None:
        assert EnvCredentialProvider(environ={}).load() == []

    def test_reads_process_environment_on_every_load(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        provider = EnvCredentialProvider()
        assert provider.load() == []

        monkeypatch.setenv("GEMINI_API_KEYS", "live-1,live-2")

        assert provider.load() == ["live-1", "live-2"]


@pytest.mark.unit
class TestFileCredentialProvider:
    def test_json_list(self, tmp_path: Path) -> None:
        path = tmp_path / "keys.json"
        path.write_text('["k1", "k2"]')

        assert FileCredentialProvider(path).load() == ["k1", "k2"]

    def test_json_object(self, tmp_path: Path) -> None:
        path = tmp_path / "keys.json"
        path.write_text('{"api_keys": ["k1", " k2 ", ""]}')

        assert FileCredentialProvider(path).load() == ["k1", "k2"]

    def test_plain_lines_skip_comments(self, tmp_path: Path) -> None:
        path = tmp_path / "keys.txt"
        path.write_text("# primary\nk1\n\n  k2  \n# spare\nk3\n")

        assert FileCredentialProvider(path).load() == ["k1", "k2", "k3"]

    def test_missing_file_yields_empty_list(self, tmp_path: Path) -> None:
        provider = FileCredentialProvider(tmp_path / "absent.txt")

        assert provider.load() == []

    def test_invalid_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "keys.json"
        path.write_text("[not json")

        with pytest.raises(ConfigurationError, match="Invalid JSON"):
            FileCredentialProvider(path).load()

    def test_non_string_entries_raise(self, tmp_path: Path) -> None:
        path = tmp_path / "keys.json"
        path.write_text("[1, 2]")

        with pytest.raises(ConfigurationError, match="list of strings"):
            FileCredentialProvider(path).load()

    def test_object_without_list_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "keys.json"
        path.write_text('{"api_keys": "k1"}')

        with pytest.raises(ConfigurationError, match="list of strings"):
            FileCredentialProvider(path).load()

    def test_invalid_utf8_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "keys.txt"
        path.write_bytes(b"\xff\xfe\xfa key")

        with pytest.raises(ConfigurationError, match="not valid UTF-8") as exc_info:
            FileCredentialProvider(path).load()

        assert isinstance(exc_info.value.__cause__, UnicodeDecodeError)

    @pytest.mark.asyncio
    async def test_malformed_file_surfaces_typed_error_from_generate(
        self, tmp_path: Path, scripted_transport
    ) -> None:
        path = tmp_path / "keys.json"
        path.write_text('["k1",')
        pool = CredentialPool(FileCredentialProvider(path))
        coordinator = RetryCoordinator(pool, Dispatcher(scripted_transport))

        with pytest.raises(GeminiRotatorError) as exc_info:
            await coordinator.generate("prompt", RequestMode.PLAIN_TEXT)

        assert isinstance(exc_info.value, ConfigurationError)
        assert scripted_transport.calls == []

    def test_changes_are_picked_up(self, tmp_path: Path) -> None:
        path = tmp_path / "keys.txt"
        path.write_text("k1\n")
        provider = FileCredentialProvider(path)
        assert provider.load() == ["k1"]
        assert not provider.has_file_changed()

        path.write_text("k1\nk2\n")
        stat = path.stat()
        os.utime(path, (stat.st_atime, stat.st_mtime + 10))

        assert provider.has_file_changed()
        assert provider.load() == ["k1", "k2"]

    def test_removed_file_empties_the_list(self, tmp_path: Path) -> None:
        path = tmp_path / "keys.txt"
        path.write_text("k1\n")
        provider = FileCredentialProvider(path)
        provider.load()

        path.unlink()

        assert provider.has_file_changed()
        assert provider.load() == []


@pytest.mark.unit
def test_providers_satisfy_protocol(tmp_path: Path) -> None:
    for provider in (
        StaticCredentialProvider(["k"]),
        EnvCredentialProvider(environ={}),
        FileCredentialProvider(tmp_path / "keys.txt"),
    ):
        assert isinstance(provider, CredentialProvider)
