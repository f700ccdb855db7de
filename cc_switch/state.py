from __future__ import annotations

from typing import Mapping

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.common.framework import (
    RegisteredAppProjector,
    create_registered_projector,
)
from cc_switch.paths import AppPaths, ConfigPaths
from cc_switch.settings import SettingsStore
from cc_switch.store import Database


class AppState:
    """Composition root: one database, one overlay cache, per-app projectors."""

    def __init__(
        self,
        db: Database,
        settings: SettingsStore,
        environ: Mapping[str, str] | None = None,
        platform: str | None = None,
    ) -> None:
        self.db = db
        self.settings = settings
        self._environ = environ
        self._platform = platform

    @classmethod
    def open(
        cls, environ: Mapping[str, str] | None = None, platform: str | None = None
    ) -> "AppState":
        paths = ConfigPaths(environ=environ, platform=platform)
        return cls(
            db=Database.open(paths.database_path()),
            settings=SettingsStore(paths.settings_path()),
            environ=environ,
            platform=platform,
        )

    @classmethod
    def memory(
        cls, environ: Mapping[str, str] | None = None, platform: str | None = None
    ) -> "AppState":
        paths = ConfigPaths(environ=environ, platform=platform)
        return cls(
            db=Database.memory(),
            settings=SettingsStore(paths.settings_path()),
            environ=environ,
            platform=platform,
        )

    @property
    def paths(self) -> ConfigPaths:
        return ConfigPaths(
            environ=self._environ,
            overrides=self.settings.get().config_dirs,
            platform=self._platform,
        )

    def app_paths(self, app: AppKind) -> AppPaths:
        return self.paths.resolve(app)

    def projector(self, app: AppKind) -> RegisteredAppProjector:
        return create_registered_projector(app, self.app_paths(app))

    def close(self) -> None:
        self.db.close()
