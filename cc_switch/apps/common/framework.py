import logging
from abc import ABCMeta, abstractmethod
from typing import Any, ClassVar, cast

from jsonschema import Draft202012Validator

from cc_switch.apps.app_id import AppKind, app_label
from cc_switch.apps.common.interfaces.projector import IAppProjector
from cc_switch.apps.common.interfaces.repositories import (
    IAppConfigRepository,
    IPromptRepository,
)
from cc_switch.apps.common.repositories import PromptFileRepository
from cc_switch.errors import InvalidConfigurationError
from cc_switch.paths import AppPaths

logger = logging.getLogger(__name__)


def format_schema_error(error: Any) -> str:
    path = ".".join([str(part) for part in error.path])
    return f"{error.message} at {path}" if path else str(error.message)


class AppProjectorRegistryMeta(ABCMeta):
    _registry: dict[AppKind, type["RegisteredAppProjector"]] = {}

    def __new__(
        mcls,
        name: str,
        bases: tuple[type, ...],
        namespace: dict[str, Any],
        **kwargs: Any,
    ):
        cls = super().__new__(mcls, name, bases, namespace, **kwargs)
        app_kind = getattr(cls, "APP_KIND", None)
        is_abstract = bool(getattr(cls, "__abstractmethods__", False))
        if app_kind is not None and not is_abstract:
            mcls._registry[app_kind] = cast(type["RegisteredAppProjector"], cls)  # type: ignore[assignment]
        return cls


class RegisteredAppProjector(IAppProjector, metaclass=AppProjectorRegistryMeta):
    APP_KIND: ClassVar[AppKind | None] = None
    SETTINGS_SCHEMA: ClassVar[dict[str, Any]] = {}

    def __init__(
        self, repository: IAppConfigRepository, prompt_repository: IPromptRepository
    ) -> None:
        self._repository = repository
        self._prompt_repository = prompt_repository
        self._validator = Draft202012Validator(self.SETTINGS_SCHEMA)

    @classmethod
    @abstractmethod
    def create_default(cls, paths: AppPaths) -> "RegisteredAppProjector":
        raise NotImplementedError

    @property
    def app_kind(self) -> AppKind:
        if self.APP_KIND is None:
            raise NotImplementedError
        return self.APP_KIND

    @property
    def app_label(self) -> str:
        return app_label(self.app_kind)

    @property
    def repository(self) -> IAppConfigRepository:
        return self._repository

    @property
    def prompt_repository(self) -> IPromptRepository:
        return self._prompt_repository

    def validate_settings(self, settings_config: Any) -> None:
        error = next(iter(self._validator.iter_errors(settings_config)), None)
        if error is not None:
            raise InvalidConfigurationError(
                self.app_kind.value, format_schema_error(error)
            )

    def sync_mcp(self, servers: dict[str, Any]) -> None:
        logger.debug(
            "writing %d mcp servers for %s to %s",
            len(servers),
            self.app_kind.value,
            self.repository.mcp_path,
        )
        super().sync_mcp(servers)


def prompt_repository_for(paths: AppPaths) -> PromptFileRepository:
    return PromptFileRepository(paths.prompt_path)


def list_registered_projectors() -> list[AppKind]:
    _load_registered_modules()
    return [app for app in AppKind if app in AppProjectorRegistryMeta._registry]


def create_registered_projector(
    app_kind: AppKind, paths: AppPaths
) -> RegisteredAppProjector:
    _load_registered_modules()
    projector_class = AppProjectorRegistryMeta._registry.get(app_kind)
    if projector_class is None:
        raise KeyError(f"No projector registered for: {app_kind.value}")
    return projector_class.create_default(paths)


def _load_registered_modules() -> None:
    from cc_switch.apps.common.loader import load_app_projector_modules

    load_app_projector_modules()
