from typing import Any

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.common.framework import (
    RegisteredAppProjector,
    prompt_repository_for,
)
from cc_switch.apps.gemini.config_repository import GeminiConfigRepository
from cc_switch.constants import DEFAULT_BASE_URLS
from cc_switch.models import Provider
from cc_switch.paths import AppPaths


class GeminiProjector(RegisteredAppProjector):
    APP_KIND = AppKind.GEMINI
    SETTINGS_SCHEMA = {
        "type": "object",
        "required": ["apiKey"],
        "properties": {
            "apiKey": {"type": "string", "minLength": 1},
            "baseUrl": {"type": "string"},
            "model": {"type": "string"},
        },
    }

    @classmethod
    def create_default(cls, paths: AppPaths) -> "GeminiProjector":
        return cls(
            repository=GeminiConfigRepository.from_paths(paths),
            prompt_repository=prompt_repository_for(paths),
        )

    def sync_provider(self, provider: Provider) -> None:
        repository: GeminiConfigRepository = self._repository  # type: ignore[assignment]
        repository.merge_config(dict(provider.settings_config))

    def read_live_settings(self) -> Any:
        return self.repository.load_config()

    def extract_credentials(self, settings_config: Any) -> tuple[str, str]:
        config = settings_config if isinstance(settings_config, dict) else {}
        api_key = config.get("apiKey") or ""
        base_url = config.get("baseUrl") or DEFAULT_BASE_URLS["gemini"]
        return str(api_key), str(base_url)
