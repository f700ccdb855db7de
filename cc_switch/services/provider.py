"""Provider registry and the switch/exclusivity rules for each app."""

from __future__ import annotations

import logging
from typing import Any

from cc_switch.apps.app_id import AppKind
from cc_switch.errors import (
    DuplicateEntityError,
    NoProvidersConfiguredError,
    ProviderIsCurrentError,
    ProviderNotFoundError,
)
from cc_switch.models import Provider
from cc_switch.state import AppState
from cc_switch.store import Database

logger = logging.getLogger(__name__)


class ProviderService:
    def __init__(self, state: AppState) -> None:
        self._state = state

    @property
    def _db(self) -> Database:
        return self._state.db

    def list(self, app: AppKind) -> dict[str, Provider]:
        return self._db.get_all_providers(app.value)

    def get(self, app: AppKind, provider_id: str) -> Provider | None:
        return self._db.get_provider(app.value, provider_id)

    def find(self, app: AppKind, name_or_id: str) -> Provider | None:
        """Match by exact id, then case-insensitive name, then name prefix."""
        providers = self.list(app)
        if name_or_id in providers:
            return providers[name_or_id]
        needle = name_or_id.lower()
        for provider in providers.values():
            if provider.name.lower() == needle:
                return provider
        for provider in providers.values():
            if provider.name.lower().startswith(needle):
                return provider
        return None

    def current(self, app: AppKind) -> str:
        """Return the current provider id, or ``""`` when there is none.

        The overlay value wins only while the store still holds that provider;
        a stale overlay id falls through to the store's own marker.
        """
        if app.additive:
            return ""
        cached = self._state.settings.current_provider(app)
        if cached and self._db.get_provider(app.value, cached) is not None:
            return cached
        if cached:
            logger.debug("overlay current provider %s for %s is stale", cached, app.value)
        return self._db.get_current_provider(app.value) or ""

    def current_provider(self, app: AppKind) -> Provider | None:
        provider_id = self.current(app)
        if not provider_id:
            return None
        return self.get(app, provider_id)

    def add(self, app: AppKind, provider: Provider) -> None:
        projector = self._state.projector(app)
        projector.validate_settings(provider.settings_config)
        if self.get(app, provider.id) is not None:
            raise DuplicateEntityError("Provider", provider.id)

        self._db.save_provider(app.value, provider)

        if app.additive:
            projector.sync_provider(provider)
            return

        if self._db.get_current_provider(app.value) is None:
            logger.debug("auto-selecting first provider %s for %s", provider.id, app.value)
            self._state.settings.set_current_provider(app, provider.id)
            self._db.set_current_provider(app.value, provider.id)
            projector.sync_provider(provider)

    def update(self, app: AppKind, provider: Provider) -> None:
        projector = self._state.projector(app)
        projector.validate_settings(provider.settings_config)
        if self.get(app, provider.id) is None:
            raise ProviderNotFoundError(provider.id)

        self._db.save_provider(app.value, provider)

        if app.additive or self.current(app) == provider.id:
            projector.sync_provider(provider)

    def delete(self, app: AppKind, provider_id: str) -> None:
        if self.get(app, provider_id) is None:
            raise ProviderNotFoundError(provider_id)

        if not app.additive and self.current(app) == provider_id:
            raise ProviderIsCurrentError(app.value, provider_id)

        self._db.delete_provider(app.value, provider_id)
        if app.additive:
            self._state.projector(app).remove_provider(provider_id)

    def switch(self, app: AppKind, provider_id: str) -> Provider:
        provider = self.get(app, provider_id)
        if provider is None:
            raise ProviderNotFoundError(provider_id)

        if not app.additive:
            self._state.settings.set_current_provider(app, provider_id)
            self._db.set_current_provider(app.value, provider_id)

        logger.debug("switching %s to provider %s", app.value, provider_id)
        self._state.projector(app).sync_provider(provider)
        return provider

    def resync(self, app: AppKind) -> list[str]:
        """Re-project stored providers onto the live files; returns synced ids."""
        projector = self._state.projector(app)
        if app.additive:
            providers = list(self.list(app).values())
        else:
            current = self.current_provider(app)
            providers = [current] if current is not None else []
        if not providers:
            raise NoProvidersConfiguredError(app.value)
        for provider in providers:
            projector.sync_provider(provider)
        return [provider.id for provider in providers]

    def read_live_settings(self, app: AppKind) -> Any:
        return self._state.projector(app).read_live_settings()

    def extract_credentials(self, provider: Provider, app: AppKind) -> tuple[str, str]:
        return self._state.projector(app).extract_credentials(provider.settings_config)
