"""Device-local settings overlay stored next to the database.

The overlay caches the current provider per exclusive app and carries
per-device directory overrides. It is owned by the composition root and
passed explicitly to the services that need it.
"""

from __future__ import annotations

import copy
import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable

from jsonschema import Draft202012Validator

from cc_switch.apps.app_id import AppKind
from cc_switch.apps.common.framework import format_schema_error
from cc_switch.errors import InvalidConfigSchemaError
from cc_switch.utils import load_json_object, write_json

logger = logging.getLogger(__name__)

SETTINGS_SCHEMA: dict[str, Any] = {
    "type": "object",
    "properties": {
        "claudeConfigDir": {"type": "string"},
        "codexConfigDir": {"type": "string"},
        "geminiConfigDir": {"type": "string"},
        "opencodeConfigDir": {"type": "string"},
        "currentProviderClaude": {"type": "string"},
        "currentProviderCodex": {"type": "string"},
        "currentProviderGemini": {"type": "string"},
        "visibleApps": {
            "type": "object",
            "additionalProperties": {"type": "boolean"},
        },
        "defaultApp": {"type": "string"},
        "colorOutput": {"type": "boolean"},
        "outputFormat": {"type": "string"},
    },
}

_CONFIG_DIR_KEYS = {app: f"{app.value}ConfigDir" for app in AppKind}
_CURRENT_PROVIDER_KEYS = {
    app: f"currentProvider{app.value.capitalize()}" for app in AppKind if not app.additive
}
_KNOWN_KEYS = (
    set(_CONFIG_DIR_KEYS.values())
    | set(_CURRENT_PROVIDER_KEYS.values())
    | {"visibleApps", "defaultApp", "colorOutput", "outputFormat"}
)


@dataclass
class LocalSettings:
    config_dirs: dict[AppKind, str] = field(default_factory=dict)
    current_providers: dict[AppKind, str] = field(default_factory=dict)
    visible_apps: dict[AppKind, bool] | None = None
    default_app: str | None = None
    color_output: bool = True
    output_format: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def current_provider(self, app: AppKind) -> str | None:
        return self.current_providers.get(app)

    def set_current_provider(self, app: AppKind, provider_id: str | None) -> None:
        if app.additive:
            return
        if provider_id:
            self.current_providers[app] = provider_id
        else:
            self.current_providers.pop(app, None)

    def config_dir_override(self, app: AppKind) -> str | None:
        return self.config_dirs.get(app)

    def is_visible(self, app: AppKind) -> bool:
        if self.visible_apps is None:
            return True
        return self.visible_apps.get(app, True)

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = dict(self.extra)
        for app, key in _CONFIG_DIR_KEYS.items():
            if app in self.config_dirs:
                payload[key] = self.config_dirs[app]
        for app, key in _CURRENT_PROVIDER_KEYS.items():
            if app in self.current_providers:
                payload[key] = self.current_providers[app]
        if self.visible_apps is not None:
            payload["visibleApps"] = {
                app.value: visible for app, visible in self.visible_apps.items()
            }
        if self.default_app is not None:
            payload["defaultApp"] = self.default_app
        payload["colorOutput"] = self.color_output
        if self.output_format is not None:
            payload["outputFormat"] = self.output_format
        return payload

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "LocalSettings":
        visible = payload.get("visibleApps")
        visible_apps = None
        if isinstance(visible, dict):
            visible_apps = {
                app: bool(visible.get(app.value, True)) for app in AppKind
            }
        return cls(
            config_dirs={
                app: payload[key]
                for app, key in _CONFIG_DIR_KEYS.items()
                if payload.get(key)
            },
            current_providers={
                app: payload[key]
                for app, key in _CURRENT_PROVIDER_KEYS.items()
                if payload.get(key)
            },
            visible_apps=visible_apps,
            default_app=payload.get("defaultApp"),
            color_output=payload.get("colorOutput", True),
            output_format=payload.get("outputFormat"),
            extra={k: v for k, v in payload.items() if k not in _KNOWN_KEYS},
        )


class SettingsStore:
    """Lock-protected, lazily loaded cache of the overlay file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.RLock()
        self._settings: LocalSettings | None = None
        self._validator = Draft202012Validator(SETTINGS_SCHEMA)

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> LocalSettings:
        payload = load_json_object(self._path)
        error = next(iter(self._validator.iter_errors(payload)), None)
        if error is not None:
            raise InvalidConfigSchemaError(self._path, format_schema_error(error))
        return LocalSettings.from_dict(payload)

    def get(self) -> LocalSettings:
        with self._lock:
            if self._settings is None:
                self._settings = self._load()
            return self._settings

    def update(self, update_fn: Callable[[LocalSettings], None]) -> LocalSettings:
        with self._lock:
            settings = copy.deepcopy(self.get())
            update_fn(settings)
            write_json(self._path, settings.as_dict())
            self._settings = settings
            return settings

    def reload(self) -> LocalSettings:
        with self._lock:
            self._settings = None
            return self.get()

    def current_provider(self, app: AppKind) -> str | None:
        if app.additive:
            return None
        return self.get().current_provider(app)

    def set_current_provider(self, app: AppKind, provider_id: str | None) -> None:
        if app.additive:
            return
        logger.debug("overlay current provider for %s -> %s", app.value, provider_id)
        self.update(lambda settings: settings.set_current_provider(app, provider_id))
