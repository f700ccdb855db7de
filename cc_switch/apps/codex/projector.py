import logging
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.codex.config_repository import CodexConfigRepository
from cc_switch.apps.common.framework import (
    RegisteredAppProjector,
    prompt_repository_for,
)
from cc_switch.models import Provider
from cc_switch.paths import AppPaths

logger = logging.getLogger(__name__)


def _find_key(payload: Any, key: str) -> str | None:
    """Depth-first lookup of the first string value stored under ``key``."""
    if not isinstance(payload, dict):
        return None
    value = payload.get(key)
    if isinstance(value, str) and value:
        return value
    for child in payload.values():
        found = _find_key(child, key)
        if found is not None:
            return found
    return None


def _scan_key(text: str, key: str) -> str:
    """Line-based ``key = "value"`` lookup for text that does not parse as TOML."""
    for line in text.splitlines():
        name, sep, value = line.strip().partition("=")
        if sep and name.strip() == key:
            return value.strip().strip('"')
    return ""


class CodexProjector(RegisteredAppProjector):
    APP_KIND = AppKind.CODEX
    SETTINGS_SCHEMA = {
        "type": "object",
        "properties": {
            "config": {"type": "string"},
            "auth": {"type": "string"},
        },
        "anyOf": [
            {
                "required": ["config"],
                "properties": {"config": {"pattern": "api_key|access_token"}},
            },
            {
                "required": ["auth"],
                "properties": {"auth": {"minLength": 1}},
            },
        ],
    }

    @classmethod
    def create_default(cls, paths: AppPaths) -> "CodexProjector":
        return cls(
            repository=CodexConfigRepository.from_paths(paths),
            prompt_repository=prompt_repository_for(paths),
        )

    @property
    def config_repository(self) -> CodexConfigRepository:
        return self._repository  # type: ignore[return-value]

    def sync_provider(self, provider: Provider) -> None:
        settings = provider.settings_config
        if not isinstance(settings, dict):
            settings = {}
        config = settings.get("config")
        auth = settings.get("auth")
        if isinstance(config, str):
            logger.debug("writing codex config for provider %s", provider.id)
            self.config_repository.write_config_text(config)
        if isinstance(auth, str):
            logger.debug("writing codex auth for provider %s", provider.id)
            self.config_repository.write_auth_text(auth)

    def read_live_settings(self) -> Any:
        return {
            "config": self.config_repository.read_config_text(),
            "auth": self.config_repository.read_auth_text(),
        }

    def extract_credentials(self, settings_config: Any) -> tuple[str, str]:
        config = settings_config if isinstance(settings_config, dict) else {}
        api_key = ""
        base_url = ""
        for field in ("config", "auth"):
            text = config.get(field)
            if not isinstance(text, str) or not text.strip():
                continue
            try:
                parsed = tomllib.loads(text)
            except tomllib.TOMLDecodeError as exc:
                logger.debug("codex %s is not valid TOML, scanning lines: %s", field, exc)
                api_key = api_key or _scan_key(text, "api_key")
                base_url = base_url or _scan_key(text, "base_url")
                continue
            api_key = api_key or _find_key(parsed, "api_key") or ""
            api_key = api_key or _find_key(parsed, "OPENAI_API_KEY") or ""
            base_url = base_url or _find_key(parsed, "base_url") or ""
        return api_key, base_url
