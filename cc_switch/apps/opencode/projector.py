import logging
from typing import Any

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.common.framework import (
    RegisteredAppProjector,
    prompt_repository_for,
)
from cc_switch.apps.opencode.config_repository import OpenCodeConfigRepository
from cc_switch.models import Provider
from cc_switch.paths import AppPaths

logger = logging.getLogger(__name__)


class OpenCodeProjector(RegisteredAppProjector):
    APP_KIND = AppKind.OPENCODE
    SETTINGS_SCHEMA: dict[str, Any] = {}

    @classmethod
    def create_default(cls, paths: AppPaths) -> "OpenCodeProjector":
        return cls(
            repository=OpenCodeConfigRepository.from_paths(paths),
            prompt_repository=prompt_repository_for(paths),
        )

    @property
    def config_repository(self) -> OpenCodeConfigRepository:
        return self._repository  # type: ignore[return-value]

    def sync_provider(self, provider: Provider) -> None:
        logger.debug("writing opencode provider entry %s", provider.id)
        self.config_repository.save_provider(provider.id, provider.settings_config)

    def remove_provider(self, provider_id: str) -> None:
        if self.config_repository.remove_provider(provider_id):
            logger.debug("removed opencode provider entry %s", provider_id)

    def read_live_settings(self) -> Any:
        return self.config_repository.load_providers()

    def extract_credentials(self, settings_config: Any) -> tuple[str, str]:
        config = settings_config if isinstance(settings_config, dict) else {}
        options = config.get("options")
        if not isinstance(options, dict):
            return "", ""
        return str(options.get("apiKey") or ""), str(options.get("baseURL") or "")
