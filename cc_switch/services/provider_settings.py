"""Build and edit per-app ``settings_config`` values from CLI-style inputs."""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any

import yaml

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.common import toml
from cc_switch.constants import DEFAULT_BASE_URLS
from cc_switch.errors import FileIOError, InvalidInputError, SerializationError
from cc_switch.utils import now_ts, sanitize_name

CODEX_DEFAULT_BASE_URL = "https://api.openai.com/v1"
CODEX_DEFAULT_MODEL = "gpt-4"
CODEX_DEFAULT_PROVIDER = "openai"


def generate_provider_id(name: str) -> str:
    return f"{sanitize_name(name)}-{now_ts()}"


def _codex_config_table(model: str, base_url: str) -> dict[str, Any]:
    return {
        "model_provider": CODEX_DEFAULT_PROVIDER,
        "model": model,
        "model_providers": {
            CODEX_DEFAULT_PROVIDER: {
                "name": "OpenAI",
                "base_url": base_url,
                "wire_api": "responses",
            }
        },
    }


def _codex_config(model: str, base_url: str) -> str:
    return toml.dumps(_codex_config_table(model, base_url))


def _codex_auth(api_key: str) -> str:
    return toml.dumps({CODEX_DEFAULT_PROVIDER: {"api_key": api_key}})


def _edit_codex_config(text: Any, base_url: str | None, model: str | None) -> str:
    """Replace ``model`` and the active provider's ``base_url``, keeping every other key."""
    current = _parse_codex_config(text)
    if not current:
        current = _codex_config_table(CODEX_DEFAULT_MODEL, CODEX_DEFAULT_BASE_URL)
    if model:
        current["model"] = model
    if base_url:
        provider_name = current.get("model_provider")
        if not isinstance(provider_name, str) or not provider_name:
            provider_name = CODEX_DEFAULT_PROVIDER
            current["model_provider"] = provider_name
        providers = current.get("model_providers")
        if not isinstance(providers, dict):
            providers = {}
            current["model_providers"] = providers
        section = providers.get(provider_name)
        if not isinstance(section, dict):
            section = {"name": provider_name}
            providers[provider_name] = section
        section["base_url"] = base_url
    return toml.dumps(current)


def build_settings_config(
    app: AppKind,
    name: str,
    api_key: str | None,
    base_url: str | None = None,
    model: str | None = None,
    small_model: str | None = None,
) -> dict[str, Any]:
    if not api_key and app != AppKind.OPENCODE:
        raise InvalidInputError(f"{app.label} providers require an API key")

    if app == AppKind.CLAUDE:
        env: dict[str, Any] = {
            "ANTHROPIC_AUTH_TOKEN": api_key,
            "ANTHROPIC_BASE_URL": base_url or DEFAULT_BASE_URLS["claude"],
        }
        if model:
            env["ANTHROPIC_MODEL"] = model
        if small_model:
            env["ANTHROPIC_SMALL_FAST_MODEL"] = small_model
        return {"env": env}

    if app == AppKind.CODEX:
        return {
            "config": _codex_config(
                model or CODEX_DEFAULT_MODEL, base_url or CODEX_DEFAULT_BASE_URL
            ),
            "auth": _codex_auth(str(api_key)),
        }

    if app == AppKind.GEMINI:
        config: dict[str, Any] = {
            "apiKey": api_key,
            "baseUrl": base_url or DEFAULT_BASE_URLS["gemini"],
        }
        if model:
            config["model"] = model
        return config

    options: dict[str, Any] = {}
    if base_url:
        options["baseURL"] = base_url
    if api_key:
        options["apiKey"] = api_key
    payload: dict[str, Any] = {
        "npm": "@ai-sdk/openai-compatible",
        "name": name,
        "options": options,
    }
    if model:
        payload["models"] = {model: {"name": model}}
    return payload


def update_settings_config(
    app: AppKind,
    settings_config: Any,
    api_key: str | None = None,
    base_url: str | None = None,
    model: str | None = None,
    small_model: str | None = None,
) -> dict[str, Any]:
    """Return a copy of ``settings_config`` with the given fields replaced."""
    updated = copy.deepcopy(settings_config) if isinstance(settings_config, dict) else {}

    if app == AppKind.CLAUDE:
        env = updated.get("env")
        if not isinstance(env, dict):
            env = {}
        if api_key:
            env.pop("ANTHROPIC_API_KEY", None)
            env["ANTHROPIC_AUTH_TOKEN"] = api_key
        if base_url:
            env["ANTHROPIC_BASE_URL"] = base_url
        if model:
            env["ANTHROPIC_MODEL"] = model
        if small_model:
            env["ANTHROPIC_SMALL_FAST_MODEL"] = small_model
        updated["env"] = env
        return updated

    if app == AppKind.CODEX:
        if api_key:
            updated["auth"] = _codex_auth(api_key)
        if base_url or model:
            updated["config"] = _edit_codex_config(updated.get("config"), base_url, model)
        return updated

    if app == AppKind.GEMINI:
        if api_key:
            updated["apiKey"] = api_key
        if base_url:
            updated["baseUrl"] = base_url
        if model:
            updated["model"] = model
        return updated

    options = updated.get("options")
    if not isinstance(options, dict):
        options = {}
    if api_key:
        options["apiKey"] = api_key
    if base_url:
        options["baseURL"] = base_url
    updated["options"] = options
    if model:
        models = updated.get("models")
        if not isinstance(models, dict):
            models = {}
        models[model] = {"name": model}
        updated["models"] = models
    return updated


def _parse_codex_config(text: Any) -> dict[str, Any]:
    if not isinstance(text, str) or not text.strip():
        return {}
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise SerializationError(f"codex config: {exc}") from exc


def load_settings_file(path: Path) -> Any:
    """Read a ``settings_config`` value from a JSON, YAML or TOML file.

    TOML files are taken as codex ``config.toml`` text.
    """
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileIOError(path, str(exc)) from exc

    suffix = path.suffix.lower()
    if suffix == ".toml":
        return {"config": content}
    try:
        if suffix == ".json":
            return json.loads(content)
        return yaml.safe_load(content)
    except (ValueError, yaml.YAMLError) as exc:
        raise SerializationError(str(exc), path=path) from exc
