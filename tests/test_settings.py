import json
from pathlib import Path

import pytest

from cc_switch.apps.app_id import AppKind
from cc_switch.errors import FileIOError, InvalidConfigSchemaError, InvalidJsonFormatError
from cc_switch.settings import LocalSettings, SettingsStore


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")

    settings = store.get()

    assert settings.current_providers == {}
    assert settings.color_output is True
    assert settings.is_visible(AppKind.GEMINI) is True
    assert not store.path.exists()


def test_set_current_provider_persists_camel_case(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    store = SettingsStore(path)

    store.set_current_provider(AppKind.CLAUDE, "p1")
    store.set_current_provider(AppKind.CODEX, "c1")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["currentProviderClaude"] == "p1"
    assert payload["currentProviderCodex"] == "c1"
    assert SettingsStore(path).current_provider(AppKind.CLAUDE) == "p1"


def test_additive_app_ignores_current_provider_writes(tmp_path: Path) -> None:
    store = SettingsStore(tmp_path / "settings.json")

    store.set_current_provider(AppKind.OPENCODE, "oc")

    assert store.current_provider(AppKind.OPENCODE) is None
    assert not (tmp_path / "settings.json").exists()


def test_unknown_keys_survive_rewrite(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(
        json.dumps({"language": "zh", "claudeConfigDir": "/opt/claude"}),
        encoding="utf-8",
    )
    store = SettingsStore(path)

    store.set_current_provider(AppKind.GEMINI, "g1")

    payload = json.loads(path.read_text(encoding="utf-8"))
    assert payload["language"] == "zh"
    assert payload["claudeConfigDir"] == "/opt/claude"
    assert payload["currentProviderGemini"] == "g1"
    assert store.get().config_dir_override(AppKind.CLAUDE) == "/opt/claude"


def test_clearing_current_provider_drops_key(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    store = SettingsStore(path)
    store.set_current_provider(AppKind.CLAUDE, "p1")

    store.set_current_provider(AppKind.CLAUDE, None)

    assert "currentProviderClaude" not in json.loads(path.read_text(encoding="utf-8"))


def test_malformed_file_raises(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text("{broken", encoding="utf-8")

    with pytest.raises(InvalidJsonFormatError):
        SettingsStore(path).get()


def test_wrong_shape_raises_schema_error(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    path.write_text(json.dumps({"colorOutput": "yes"}), encoding="utf-8")

    with pytest.raises(InvalidConfigSchemaError) as exc_info:
        SettingsStore(path).get()

    assert "colorOutput" in str(exc_info.value)


def test_reload_picks_up_external_edits(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    store = SettingsStore(path)
    store.set_current_provider(AppKind.CLAUDE, "p1")

    path.write_text(json.dumps({"currentProviderClaude": "p2"}), encoding="utf-8")

    assert store.current_provider(AppKind.CLAUDE) == "p1"
    store.reload()
    assert store.current_provider(AppKind.CLAUDE) == "p2"


def test_visible_apps_round_trip() -> None:
    settings = LocalSettings.from_dict({"visibleApps": {"codex": False}})

    assert settings.is_visible(AppKind.CODEX) is False
    assert settings.is_visible(AppKind.CLAUDE) is True
    assert settings.as_dict()["visibleApps"]["codex"] is False


def test_failed_write_keeps_cached_settings(tmp_path: Path) -> None:
    path = tmp_path / "settings.json"
    store = SettingsStore(path)
    store.set_current_provider(AppKind.CLAUDE, "p1")
    path.unlink()
    path.mkdir()

    with pytest.raises(FileIOError):
        store.set_current_provider(AppKind.CLAUDE, "p2")

    assert store.current_provider(AppKind.CLAUDE) == "p1"
