import json
from pathlib import Path

import pytest

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.common.framework import list_registered_projectors
from cc_switch.errors import (
    InvalidConfigurationError,
    InvalidJsonFormatError,
    InvalidTomlFormatError,
)
from cc_switch.models import Prompt, Provider


def test_every_app_has_a_projector() -> None:
    assert list_registered_projectors() == list(AppKind)


# --- validation ---


@pytest.mark.parametrize(
    ("app", "settings_config"),
    [
        (AppKind.CLAUDE, {"env": {"ANTHROPIC_AUTH_TOKEN": "sk"}}),
        (AppKind.CLAUDE, {"env": {"ANTHROPIC_API_KEY": "sk"}}),
        (AppKind.CODEX, {"config": 'model_provider = "x"\napi_key = "sk"\n'}),
        (AppKind.CODEX, {"auth": '[openai]\napi_key = "sk"\n'}),
        (AppKind.GEMINI, {"apiKey": "g-key"}),
        (AppKind.OPENCODE, {"anything": ["goes"]}),
    ],
)
def test_valid_settings_pass(projector_for, app, settings_config) -> None:
    projector_for(app).validate_settings(settings_config)


@pytest.mark.parametrize(
    ("app", "settings_config"),
    [
        (AppKind.CLAUDE, {}),
        (AppKind.CLAUDE, {"env": {"ANTHROPIC_AUTH_TOKEN": ""}}),
        (AppKind.CLAUDE, {"env": "token"}),
        (AppKind.CODEX, {"config": 'model = "gpt"\n'}),
        (AppKind.CODEX, {"auth": ""}),
        (AppKind.GEMINI, {"apiKey": ""}),
        (AppKind.GEMINI, ["apiKey"]),
    ],
)
def test_invalid_settings_raise(projector_for, app, settings_config) -> None:
    with pytest.raises(InvalidConfigurationError) as exc_info:
        projector_for(app).validate_settings(settings_config)

    assert exc_info.value.app == app.value


# --- claude ---


def test_claude_sync_preserves_unrelated_keys(projector_for, tmp_path: Path, write_json) -> None:
    live = tmp_path / ".claude" / "settings.json"
    write_json(live, {"permissions": {"allow": ["Bash"]}, "env": {"OLD": "1"}})
    settings = {
        "env": {
            "ANTHROPIC_AUTH_TOKEN": "sk-new",
            "ANTHROPIC_BASE_URL": "https://relay.example.com",
        }
    }
    projector = projector_for(AppKind.CLAUDE)

    projector.sync_provider(Provider(id="p1", name="One", settings_config=settings))
    live_settings = projector.read_live_settings()

    assert live_settings["env"] == settings["env"]
    assert live_settings["permissions"] == {"allow": ["Bash"]}


def test_claude_sync_refuses_malformed_file(projector_for, tmp_path: Path) -> None:
    live = tmp_path / ".claude" / "settings.json"
    live.parent.mkdir(parents=True)
    live.write_text("{oops", encoding="utf-8")

    with pytest.raises(InvalidJsonFormatError):
        projector_for(AppKind.CLAUDE).sync_provider(
            Provider(id="p1", name="One", settings_config={"env": {"ANTHROPIC_AUTH_TOKEN": "x"}})
        )

    assert live.read_text(encoding="utf-8") == "{oops"


def test_claude_mcp_goes_to_home_claude_json(projector_for, tmp_path: Path, write_json, read_json) -> None:
    write_json(tmp_path / ".claude.json", {"numStartups": 4})

    projector_for(AppKind.CLAUDE).sync_mcp({"fs": {"command": "npx"}})

    payload = read_json(tmp_path / ".claude.json")
    assert payload == {"numStartups": 4, "mcpServers": {"fs": {"command": "npx"}}}
    assert not (tmp_path / ".claude" / "settings.json").exists()


# --- codex ---


def test_codex_sync_writes_config_and_auth_verbatim(projector_for, tmp_path: Path) -> None:
    config = 'model_provider = "relay"\nmodel = "gpt-5"\n\n[model_providers.relay]\nbase_url = "https://relay/v1"\n'
    auth = '[openai]\napi_key = "sk-codex"\n'
    projector = projector_for(AppKind.CODEX)

    projector.sync_provider(
        Provider(id="c1", name="Codex", settings_config={"config": config, "auth": auth})
    )

    assert (tmp_path / ".codex" / "config.toml").read_text(encoding="utf-8") == config
    assert (tmp_path / ".codex" / "auth.toml").read_text(encoding="utf-8") == auth
    assert projector.read_live_settings() == {"config": config, "auth": auth}


def test_codex_sync_skips_absent_half(projector_for, tmp_path: Path) -> None:
    auth_path = tmp_path / ".codex" / "auth.toml"
    auth_path.parent.mkdir(parents=True)
    auth_path.write_text("keep = true\n", encoding="utf-8")

    projector_for(AppKind.CODEX).sync_provider(
        Provider(id="c1", name="Codex", settings_config={"config": 'api_key = "k"\n'})
    )

    assert auth_path.read_text(encoding="utf-8") == "keep = true\n"


def test_codex_mcp_table_keeps_other_keys(projector_for, tmp_path: Path) -> None:
    config_path = tmp_path / ".codex" / "config.toml"
    config_path.parent.mkdir(parents=True)
    config_path.write_text('model = "gpt-5"\n\n[mcp_servers.old]\ncommand = "old"\n', encoding="utf-8")
    projector = projector_for(AppKind.CODEX)

    projector.sync_mcp({"fs": {"command": "npx", "args": ["-y", "server-fs"]}})

    assert projector.repository.load_config()["model"] == "gpt-5"
    assert projector.read_live_mcp() == {"fs": {"command": "npx", "args": ["-y", "server-fs"]}}


def test_codex_mcp_refuses_malformed_toml(projector_for, tmp_path: Path) -> None:
    config_path = tmp_path / ".codex" / "config.toml"
    config_path.parent.mkdir(parents=True)
    config_path.write_text("model = \n", encoding="utf-8")

    with pytest.raises(InvalidTomlFormatError):
        projector_for(AppKind.CODEX).sync_mcp({})

    assert config_path.read_text(encoding="utf-8") == "model = \n"


def test_codex_extract_credentials(projector_for) -> None:
    projector = projector_for(AppKind.CODEX)
    settings = {
        "config": '[model_providers.relay]\nbase_url = "https://relay/v1"\n',
        "auth": '[openai]\napi_key = "sk-codex"\n',
    }

    assert projector.extract_credentials(settings) == ("sk-codex", "https://relay/v1")

    malformed = {"config": "base_url = \"https://relay/v1\"\nmodel =", "auth": "api_key = sk-raw"}
    assert projector.extract_credentials(malformed) == ("sk-raw", "https://relay/v1")


# --- gemini ---


def test_gemini_sync_merges_at_root(projector_for, tmp_path: Path, write_json, read_json) -> None:
    live = tmp_path / ".gemini" / "settings.json"
    write_json(live, {"theme": "dark", "mcpServers": {"x": {"command": "x"}}})

    projector_for(AppKind.GEMINI).sync_provider(
        Provider(id="g1", name="Gemini", settings_config={"apiKey": "g-key", "model": "gemini-2.5-pro"})
    )

    assert read_json(live) == {
        "theme": "dark",
        "mcpServers": {"x": {"command": "x"}},
        "apiKey": "g-key",
        "model": "gemini-2.5-pro",
    }


def test_gemini_extract_credentials_default_base_url(projector_for) -> None:
    assert projector_for(AppKind.GEMINI).extract_credentials({"apiKey": "g"}) == (
        "g",
        "https://generativelanguage.googleapis.com",
    )


# --- opencode ---


def test_opencode_providers_are_namespaced(projector_for, tmp_path: Path, write_json, read_json) -> None:
    live = tmp_path / ".opencode" / "opencode.json"
    write_json(live, {"$schema": "https://opencode.ai/config.json", "provider": {"other": {"name": "O"}}})
    projector = projector_for(AppKind.OPENCODE)

    projector.sync_provider(Provider(id="mine", name="Mine", settings_config={"name": "Mine"}))
    assert projector.read_live_settings() == {"other": {"name": "O"}, "mine": {"name": "Mine"}}

    projector.remove_provider("mine")
    payload = read_json(live)
    assert payload["provider"] == {"other": {"name": "O"}}
    assert payload["$schema"] == "https://opencode.ai/config.json"


def test_opencode_extract_credentials(projector_for) -> None:
    settings = {"options": {"apiKey": "oc-key", "baseURL": "https://oc/v1"}}

    assert projector_for(AppKind.OPENCODE).extract_credentials(settings) == ("oc-key", "https://oc/v1")
    assert projector_for(AppKind.OPENCODE).extract_credentials({}) == ("", "")


# --- prompts ---


def test_prompt_sync_writes_and_truncates(projector_for, tmp_path: Path) -> None:
    projector = projector_for(AppKind.GEMINI)
    prompt_path = tmp_path / ".gemini" / "GEMINI.md"

    projector.sync_prompt(None)
    assert not prompt_path.exists()

    projector.sync_prompt(Prompt(id="p", name="P", content="# Rules\n"))
    assert projector.read_live_prompt() == "# Rules\n"

    projector.sync_prompt(None)
    assert prompt_path.exists()
    assert prompt_path.read_text(encoding="utf-8") == ""
