"""Resolve the on-disk locations used by cc-switch and the apps it manages.

Every lookup checks an explicit environment override first, then a
device-level override from the local settings overlay, then falls back to
the conventional home-relative default. Nothing here creates files.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from cc_switch.apps.app_id import AppKind, app_metadata
from cc_switch.constants import (
    APP_DIR_NAME,
    APP_NAME,
    CLAUDE_MCP_PATH_ENV,
    CONFIG_DIR_ENV,
    DATABASE_FILENAME,
    HOME_ENV,
    SETTINGS_FILENAME,
    SKILLS_DIRNAME,
    XDG_CONFIG_HOME_ENV,
)


@dataclass(frozen=True)
class AppPaths:
    app: AppKind
    config_dir: Path
    settings_path: Path
    mcp_path: Path
    prompt_path: Path
    skills_dir: Path
    auth_path: Path | None = None

    def live_files(self) -> list[Path]:
        files = [self.settings_path]
        if self.auth_path is not None:
            files.append(self.auth_path)
        return files


class ConfigPaths:
    def __init__(
        self,
        environ: Mapping[str, str] | None = None,
        overrides: Mapping[AppKind, str] | None = None,
        platform: str | None = None,
    ) -> None:
        self._environ = os.environ if environ is None else environ
        self._overrides = dict(overrides or {})
        self._platform = platform or sys.platform

    def _env(self, name: str) -> str | None:
        value = self._environ.get(name)
        if value is None or not value.strip():
            return None
        return value.strip()

    def home_dir(self) -> Path:
        override = self._env(HOME_ENV)
        if override is not None:
            return Path(override)
        return Path.home()

    def app_config_dir(self) -> Path:
        override = self._env(CONFIG_DIR_ENV)
        if override is not None:
            return Path(override)
        if self._platform.startswith("linux"):
            xdg = self._env(XDG_CONFIG_HOME_ENV)
            if xdg is not None:
                return Path(xdg) / APP_NAME
        return self.home_dir() / APP_DIR_NAME

    def database_path(self) -> Path:
        return self.app_config_dir() / DATABASE_FILENAME

    def settings_path(self) -> Path:
        return self.app_config_dir() / SETTINGS_FILENAME

    def skills_store_dir(self) -> Path:
        return self.app_config_dir() / SKILLS_DIRNAME

    def config_dir(self, app: AppKind) -> Path:
        metadata = app_metadata(app)
        env_override = self._env(metadata.env_override)
        if env_override is not None:
            return Path(env_override)
        overlay = self._overrides.get(app)
        if overlay:
            return Path(overlay).expanduser()
        return self.home_dir() / metadata.dir_name

    def claude_mcp_path(self) -> Path:
        override = self._env(CLAUDE_MCP_PATH_ENV)
        if override is not None:
            return Path(override)
        return self.home_dir() / ".claude.json"

    def resolve(self, app: AppKind) -> AppPaths:
        config_dir = self.config_dir(app)
        prompt_path = config_dir / app_metadata(app).prompt_filename
        skills_dir = config_dir / SKILLS_DIRNAME

        if app == AppKind.CLAUDE:
            settings_path = config_dir / "settings.json"
            legacy = config_dir / "claude.json"
            if not settings_path.exists() and legacy.exists():
                settings_path = legacy
            return AppPaths(
                app=app,
                config_dir=config_dir,
                settings_path=settings_path,
                mcp_path=self.claude_mcp_path(),
                prompt_path=prompt_path,
                skills_dir=skills_dir,
            )
        if app == AppKind.CODEX:
            config_path = config_dir / "config.toml"
            return AppPaths(
                app=app,
                config_dir=config_dir,
                settings_path=config_path,
                mcp_path=config_path,
                prompt_path=prompt_path,
                skills_dir=skills_dir,
                auth_path=config_dir / "auth.toml",
            )
        if app == AppKind.GEMINI:
            settings_path = config_dir / "settings.json"
        else:
            settings_path = config_dir / "opencode.json"
        return AppPaths(
            app=app,
            config_dir=config_dir,
            settings_path=settings_path,
            mcp_path=settings_path,
            prompt_path=prompt_path,
            skills_dir=skills_dir,
        )
