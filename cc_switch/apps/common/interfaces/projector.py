from abc import ABC, abstractmethod
from typing import Any

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.common.interfaces.repositories import (
    IAppConfigRepository,
    IPromptRepository,
)
from cc_switch.models import Prompt, Provider


class IAppProjector(ABC):
    """Writes stored entities into one app's native files and reads them back."""

    @property
    @abstractmethod
    def app_kind(self) -> AppKind:
        raise NotImplementedError

    @property
    @abstractmethod
    def repository(self) -> IAppConfigRepository:
        raise NotImplementedError

    @property
    @abstractmethod
    def prompt_repository(self) -> IPromptRepository:
        raise NotImplementedError

    @abstractmethod
    def validate_settings(self, settings_config: Any) -> None:
        raise NotImplementedError

    @abstractmethod
    def sync_provider(self, provider: Provider) -> None:
        raise NotImplementedError

    @abstractmethod
    def read_live_settings(self) -> Any:
        raise NotImplementedError

    @abstractmethod
    def extract_credentials(self, settings_config: Any) -> tuple[str, str]:
        raise NotImplementedError

    def remove_provider(self, provider_id: str) -> None:
        """Drop a provider's live entry; only additive apps keep one per provider."""

    def sync_mcp(self, servers: dict[str, Any]) -> None:
        self.repository.save_mcp_payload(servers)

    def read_live_mcp(self) -> dict[str, Any]:
        return self.repository.load_mcp_payload()

    def sync_prompt(self, prompt: Prompt | None) -> None:
        repo = self.prompt_repository
        if prompt is not None:
            repo.save_prompt(prompt.content)
        elif repo.prompt_path.exists():
            repo.save_prompt("")

    def read_live_prompt(self) -> str | None:
        return self.prompt_repository.load_prompt()
