import logging
from typing import Any

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.claude.config_repository import ClaudeConfigRepository
from cc_switch.apps.common.framework import (
    RegisteredAppProjector,
    prompt_repository_for,
)
from cc_switch.constants import DEFAULT_BASE_URLS
from cc_switch.models import Provider
from cc_switch.paths import AppPaths

logger = logging.getLogger(__name__)

_TOKEN = {"type": "string", "minLength": 1}


class ClaudeProjector(RegisteredAppProjector):
    APP_KIND = AppKind.CLAUDE
    SETTINGS_SCHEMA = {
        "type": "object",
        "required": ["env"],
        "properties": {
            "env": {
                "type": "object",
                "anyOf": [
                    {
                        "required": ["ANTHROPIC_AUTH_TOKEN"],
                        "properties": {"ANTHROPIC_AUTH_TOKEN": _TOKEN},
                    },
                    {
                        "required": ["ANTHROPIC_API_KEY"],
                        "properties": {"ANTHROPIC_API_KEY": _TOKEN},
                    },
                ],
            }
        },
    }

    @classmethod
    def create_default(cls, paths: AppPaths) -> "ClaudeProjector":
        return cls(
            repository=ClaudeConfigRepository.from_paths(paths),
            prompt_repository=prompt_repository_for(paths),
        )

    @property
    def config_repository(self) -> ClaudeConfigRepository:
        return self._repository  # type: ignore[return-value]

    def sync_provider(self, provider: Provider) -> None:
        logger.debug(
            "merging provider %s into %s", provider.id, self.repository.config_path
        )
        self.config_repository.merge_config(dict(provider.settings_config))

    def read_live_settings(self) -> Any:
        return self.repository.load_config()

    def extract_credentials(self, settings_config: Any) -> tuple[str, str]:
        env = settings_config.get("env") if isinstance(settings_config, dict) else None
        if not isinstance(env, dict):
            env = {}
        api_key = env.get("ANTHROPIC_AUTH_TOKEN") or env.get("ANTHROPIC_API_KEY") or ""
        base_url = env.get("ANTHROPIC_BASE_URL") or DEFAULT_BASE_URLS["claude"]
        return str(api_key), str(base_url)
