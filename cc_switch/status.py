from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from cc_switch.apps.app_id import AppKind
from cc_switch.services.config import ConfigService
from cc_switch.services.mcp import McpService
from cc_switch.services.prompt import PromptService
from cc_switch.services.provider import ProviderService
from cc_switch.state import AppState


class AppSyncStatus(str, Enum):
    ACTIVE = "active"
    NO_PROVIDER = "no provider"
    ADDITIVE = "additive"
    NOT_INSTALLED = "not installed"


@dataclass(frozen=True)
class AppStatusRow:
    app: AppKind
    status: AppSyncStatus
    provider_count: int
    current_provider: str | None
    mcp_count: int
    prompt: str | None


class StatusService:
    def __init__(self, state: AppState) -> None:
        self._providers = ProviderService(state)
        self._mcp = McpService(state)
        self._prompts = PromptService(state)
        self._config = ConfigService(state)

    def build_app_status(self, apps: list[AppKind] | None = None) -> list[AppStatusRow]:
        rows: list[AppStatusRow] = []
        for app in apps or list(AppKind):
            providers = self._providers.list(app)
            current = self._providers.current_provider(app)
            prompt = self._prompts.enabled(app)

            if not self._config.is_configured(app) and not providers:
                status = AppSyncStatus.NOT_INSTALLED
            elif app.additive:
                status = AppSyncStatus.ADDITIVE
            elif current is None:
                status = AppSyncStatus.NO_PROVIDER
            else:
                status = AppSyncStatus.ACTIVE

            rows.append(
                AppStatusRow(
                    app=app,
                    status=status,
                    provider_count=len(providers),
                    current_provider=current.name if current is not None else None,
                    mcp_count=len(self._mcp.enabled_servers(app)),
                    prompt=prompt.name if prompt is not None else None,
                )
            )
        return rows
