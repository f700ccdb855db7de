from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from cc_switch.utils import dump_json


class IAppConfigRepository(ABC):
    @property
    @abstractmethod
    def root(self) -> Path:
        raise NotImplementedError

    @property
    @abstractmethod
    def config_path(self) -> Path:
        raise NotImplementedError

    @property
    def mcp_path(self) -> Path:
        return self.config_path

    @abstractmethod
    def load_config(self) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def save_config(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    @abstractmethod
    def load_mcp_payload(self) -> dict[str, Any]:
        raise NotImplementedError

    @abstractmethod
    def save_mcp_payload(self, payload: dict[str, Any]) -> None:
        raise NotImplementedError

    def serialize_config(self, payload: dict[str, Any]) -> str:
        return dump_json(payload)


class IPromptRepository(ABC):
    @property
    @abstractmethod
    def prompt_path(self) -> Path:
        raise NotImplementedError

    @abstractmethod
    def load_prompt(self) -> str | None:
        raise NotImplementedError

    @abstractmethod
    def save_prompt(self, content: str) -> None:
        raise NotImplementedError
