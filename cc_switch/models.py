from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Mapping

from cc_switch.apps.app_id import AppKind
from cc_switch.constants import DEFAULT_SKILL_BRANCH
from cc_switch.utils import now_ts


class AppFlags:
    """Per-app enabled set used by MCP servers and skills.

    Any subset of apps may be enabled; this is not an exclusivity set.
    """

    def __init__(self, enabled: Mapping[AppKind, bool] | None = None) -> None:
        self._flags: dict[AppKind, bool] = {app: False for app in AppKind}
        for app, value in (enabled or {}).items():
            self._flags[AppKind(app)] = bool(value)

    @classmethod
    def of(cls, *apps: AppKind) -> "AppFlags":
        return cls({app: True for app in apps})

    def is_enabled_for(self, app: AppKind) -> bool:
        return self._flags[app]

    def set_enabled_for(self, app: AppKind, enabled: bool) -> None:
        self._flags[app] = bool(enabled)

    def enabled_apps(self) -> list[AppKind]:
        return [app for app in AppKind if self._flags[app]]

    def is_empty(self) -> bool:
        return not any(self._flags.values())

    def copy(self) -> "AppFlags":
        return AppFlags(self._flags)

    def as_dict(self) -> dict[str, bool]:
        return {app.value: value for app, value in self._flags.items()}

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> "AppFlags":
        flags = cls()
        for app in AppKind:
            if payload and isinstance(payload.get(app.value), bool):
                flags.set_enabled_for(app, payload[app.value])
        return flags

    def __iter__(self) -> Iterator[tuple[AppKind, bool]]:
        return iter(self._flags.items())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AppFlags):
            return NotImplemented
        return self._flags == other._flags

    def __repr__(self) -> str:
        enabled = ",".join(app.value for app in self.enabled_apps())
        return f"AppFlags({enabled})"


@dataclass
class ProviderMeta:
    custom_endpoints: dict[str, dict[str, Any]] = field(default_factory=dict)
    usage_script: dict[str, Any] | None = None
    test_config: dict[str, Any] | None = None
    proxy_config: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.custom_endpoints:
            payload["custom_endpoints"] = self.custom_endpoints
        for key in ("usage_script", "test_config", "proxy_config"):
            value = getattr(self, key)
            if value is not None:
                payload[key] = value
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ProviderMeta":
        endpoints = payload.get("custom_endpoints")
        return cls(
            custom_endpoints=dict(endpoints) if isinstance(endpoints, dict) else {},
            usage_script=_dict_or_none(payload.get("usage_script")),
            test_config=_dict_or_none(payload.get("test_config")),
            proxy_config=_dict_or_none(payload.get("proxy_config")),
        )


@dataclass
class Provider:
    id: str
    name: str
    settings_config: Any = field(default_factory=dict)
    website_url: str | None = None
    category: str | None = None
    created_at: int | None = field(default_factory=now_ts)
    sort_index: int | None = None
    notes: str | None = None
    meta: ProviderMeta | None = None
    icon: str | None = None
    icon_color: str | None = None
    in_failover_queue: bool = False

    def base_url(self) -> str | None:
        config = self.settings_config if isinstance(self.settings_config, dict) else {}
        env = config.get("env")
        if isinstance(env, dict) and isinstance(env.get("ANTHROPIC_BASE_URL"), str):
            return env["ANTHROPIC_BASE_URL"]
        toml_text = config.get("config")
        if isinstance(toml_text, str):
            for line in toml_text.splitlines():
                key, sep, value = line.partition("=")
                if sep and key.strip() == "base_url":
                    return value.strip().strip('"')
        if isinstance(config.get("baseUrl"), str):
            return config["baseUrl"]
        return None

    def model(self) -> str | None:
        config = self.settings_config if isinstance(self.settings_config, dict) else {}
        env = config.get("env")
        if isinstance(env, dict) and isinstance(env.get("ANTHROPIC_MODEL"), str):
            return env["ANTHROPIC_MODEL"]
        if isinstance(config.get("model"), str):
            return config["model"]
        return None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.id,
            "name": self.name,
            "settingsConfig": self.settings_config,
        }
        optional = {
            "websiteUrl": self.website_url,
            "category": self.category,
            "createdAt": self.created_at,
            "sortIndex": self.sort_index,
            "notes": self.notes,
            "meta": self.meta.as_dict() if self.meta is not None else None,
            "icon": self.icon,
            "iconColor": self.icon_color,
        }
        payload.update({key: value for key, value in optional.items() if value is not None})
        payload["inFailoverQueue"] = self.in_failover_queue
        return payload

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "Provider":
        meta = payload.get("meta")
        return cls(
            id=str(payload["id"]),
            name=str(payload.get("name", payload["id"])),
            settings_config=payload.get("settingsConfig", {}),
            website_url=payload.get("websiteUrl"),
            category=payload.get("category"),
            created_at=payload.get("createdAt", now_ts()),
            sort_index=payload.get("sortIndex"),
            notes=payload.get("notes"),
            meta=ProviderMeta.from_dict(meta) if isinstance(meta, dict) else None,
            icon=payload.get("icon"),
            icon_color=payload.get("iconColor"),
            in_failover_queue=bool(payload.get("inFailoverQueue", False)),
        )


@dataclass
class McpServer:
    id: str
    name: str
    server_config: Any = field(default_factory=dict)
    apps: AppFlags = field(default_factory=AppFlags)
    description: str | None = None
    homepage: str | None = None
    docs: str | None = None
    tags: list[str] = field(default_factory=list)
    created_at: int | None = field(default_factory=now_ts)
    sort_index: int | None = None

    def enabled_apps_label(self) -> str:
        apps = self.apps.enabled_apps()
        return ", ".join(app.label for app in apps) if apps else "none"


@dataclass
class Prompt:
    id: str
    name: str
    content: str
    description: str | None = None
    enabled: bool = False
    created_at: int | None = field(default_factory=now_ts)
    updated_at: int | None = field(default_factory=now_ts)


@dataclass
class Skill:
    id: str
    name: str
    directory: str
    description: str | None = None
    repo_owner: str | None = None
    repo_name: str | None = None
    repo_branch: str | None = None
    readme_url: str | None = None
    apps: AppFlags = field(default_factory=AppFlags)
    installed_at: int | None = field(default_factory=now_ts)

    def repo_url(self) -> str | None:
        if self.repo_owner and self.repo_name:
            return f"https://github.com/{self.repo_owner}/{self.repo_name}"
        return None

    def enabled_apps_label(self) -> str:
        apps = self.apps.enabled_apps()
        return ", ".join(app.label for app in apps) if apps else "none"


@dataclass
class SkillRepo:
    owner: str
    name: str
    branch: str = DEFAULT_SKILL_BRANCH
    enabled: bool = True

    @property
    def id(self) -> str:
        return f"{self.owner}/{self.name}"

    def url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}"


def _dict_or_none(value: Any) -> dict[str, Any] | None:
    return dict(value) if isinstance(value, dict) else None
