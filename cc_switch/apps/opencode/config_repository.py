from typing import Any

from cc_switch.apps.common.repositories import JsonConfigRepository
from cc_switch.paths import AppPaths

PROVIDER_KEY = "provider"


class OpenCodeConfigRepository(JsonConfigRepository):
    """``opencode.json``: providers keyed by id under ``provider``."""

    @classmethod
    def from_paths(cls, paths: AppPaths) -> "OpenCodeConfigRepository":
        return cls(root=paths.config_dir, config_path=paths.settings_path)

    def load_providers(self) -> dict[str, Any]:
        providers = self.load_config().get(PROVIDER_KEY)
        return providers if isinstance(providers, dict) else {}

    def save_provider(self, provider_id: str, settings_config: Any) -> None:
        config = self.load_config()
        providers = config.get(PROVIDER_KEY)
        if not isinstance(providers, dict):
            providers = {}
        providers[provider_id] = settings_config
        config[PROVIDER_KEY] = providers
        self.save_config(config)

    def remove_provider(self, provider_id: str) -> bool:
        if not self.config_path.exists():
            return False
        config = self.load_config()
        providers = config.get(PROVIDER_KEY)
        if not isinstance(providers, dict) or provider_id not in providers:
            return False
        del providers[provider_id]
        self.save_config(config)
        return True
