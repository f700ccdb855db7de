from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from cc_switch.apps.app_id import AppKind
from cc_switch.paths import AppPaths
from cc_switch.state import AppState


@dataclass(frozen=True)
class ToolPaths:
    config_dir: Path
    database_path: Path
    settings_path: Path
    skills_dir: Path


class ConfigService:
    def __init__(self, state: AppState) -> None:
        self._state = state

    def tool_paths(self) -> ToolPaths:
        paths = self._state.paths
        return ToolPaths(
            config_dir=paths.app_config_dir(),
            database_path=paths.database_path(),
            settings_path=paths.settings_path(),
            skills_dir=paths.skills_store_dir(),
        )

    def app_paths(self, app: AppKind) -> AppPaths:
        return self._state.app_paths(app)

    def all_app_paths(self) -> dict[AppKind, AppPaths]:
        return {app: self.app_paths(app) for app in AppKind}

    def is_configured(self, app: AppKind) -> bool:
        paths = self.app_paths(app)
        return paths.config_dir.exists() or paths.settings_path.exists()

    def configured_apps(self) -> list[AppKind]:
        return [app for app in AppKind if self.is_configured(app)]
