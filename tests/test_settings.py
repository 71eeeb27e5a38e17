"""Tests for the settings persistence layer."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from mindnote.services.settings import SecretVault, Settings, SettingsStore, redact_secret


def _store(tmp_path: Path) -> SettingsStore:
    return SettingsStore(tmp_path / "settings.json", vault=SecretVault(key_path=tmp_path / "settings.key"))


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "MINDNOTE_STORE_URL",
        "MINDNOTE_API_TOKEN",
        "MINDNOTE_OVERLAY_BACKGROUND",
        "MINDNOTE_LOG_DIR",
        "MINDNOTE_DEBUG_LOGGING",
        "MINDNOTE_AUTOSAVE_DELAY",
        "MINDNOTE_REQUEST_TIMEOUT",
        "MINDNOTE_MAX_RETRIES",
    ):
        monkeypatch.delenv(name, raising=False)


def test_load_returns_defaults_when_file_missing(tmp_path: Path) -> None:
    assert _store(tmp_path).load() == Settings()


def test_save_and_load_roundtrip(tmp_path: Path) -> None:
    original = Settings(
        store_url="https://notes.example/api",
        api_token="super-secret",
        autosave_delay=2.5,
        max_retries=5,
        overlay_background="#202124",
        debug_logging=True,
    )

    _store(tmp_path).save(original)
    reloaded = _store(tmp_path).load()

    assert reloaded == original


def test_api_token_is_encrypted_at_rest(tmp_path: Path) -> None:
    _store(tmp_path).save(Settings(api_token="super-secret"))

    raw = json.loads((tmp_path / "settings.json").read_text(encoding="utf-8"))

    assert "api_token" not in raw
    assert raw["api_token_ciphertext"]
    assert "super-secret" not in (tmp_path / "settings.json").read_text(encoding="utf-8")
    assert raw["version"] == 1


def test_unknown_fields_are_ignored_and_file_is_migrated(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"store_url": "https://old", "theme": "dark"}), encoding="utf-8")

    settings = _store(tmp_path).load()

    assert settings.store_url == "https://old"
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == 1


def test_invalid_json_falls_back_to_defaults(tmp_path: Path) -> None:
    (tmp_path / "settings.json").write_text("{not json", encoding="utf-8")

    assert _store(tmp_path).load() == Settings()


def test_undecryptable_token_is_dropped(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"version": 1, "api_token_ciphertext": "garbage"}), encoding="utf-8")

    assert _store(tmp_path).load().api_token == ""


def test_cli_overrides_apply_before_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINDNOTE_STORE_URL", "https://env.example/api")

    settings = _store(tmp_path).load(overrides={"store_url": "https://cli.example", "autosave_delay": 0.25})

    assert settings.store_url == "https://env.example/api"
    assert settings.autosave_delay == 0.25


def test_typed_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MINDNOTE_DEBUG_LOGGING", "yes")
    monkeypatch.setenv("MINDNOTE_AUTOSAVE_DELAY", "0.5")
    monkeypatch.setenv("MINDNOTE_MAX_RETRIES", "7")
    monkeypatch.setenv("MINDNOTE_REQUEST_TIMEOUT", "soon")

    settings = _store(tmp_path).load()

    assert settings.debug_logging is True
    assert settings.autosave_delay == 0.5
    assert settings.max_retries == 7
    assert settings.request_timeout == Settings().request_timeout


def test_vault_round_trip_and_invalid_token(tmp_path: Path) -> None:
    vault = SecretVault(key_path=tmp_path / "vault.key")

    token = vault.encrypt("abc123")

    assert vault.decrypt(token) == "abc123"
    assert SecretVault(key_path=tmp_path / "vault.key").decrypt(token) == "abc123"
    assert vault.encrypt("") == ""
    with pytest.raises(ValueError):
        vault.decrypt("not-a-token")


@pytest.mark.parametrize(
    "value, expected",
    [("", ""), ("abc", "***"), ("sk-abcdef", "sk*****ef")],
)
def test_redact_secret(value: str, expected: str) -> None:
    assert redact_secret(value) == expected
