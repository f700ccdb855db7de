from pathlib import Path
from typing import Any

from cc_switch.apps.common.interfaces.repositories import (
    IAppConfigRepository,
    IPromptRepository,
)
from cc_switch.errors import FileIOError
from cc_switch.utils import load_json_object, write_json, write_text

MCP_SERVERS_KEY = "mcpServers"


class JsonConfigRepository(IAppConfigRepository):
    """A JSON settings file whose ``mcpServers`` map may live in another file."""

    def __init__(
        self, root: Path, config_path: Path, mcp_path: Path | None = None
    ) -> None:
        self._root = root
        self._config_path = config_path
        self._mcp_path = mcp_path or config_path

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config_path(self) -> Path:
        return self._config_path

    @property
    def mcp_path(self) -> Path:
        return self._mcp_path

    def load_config(self) -> dict[str, Any]:
        return load_json_object(self.config_path)

    def save_config(self, payload: dict[str, Any]) -> None:
        write_json(self.config_path, payload)

    def merge_config(self, updates: dict[str, Any]) -> dict[str, Any]:
        """Replace top-level keys from ``updates``; keep every other key."""
        merged = self.load_config()
        merged.update(updates)
        self.save_config(merged)
        return merged

    def load_mcp_payload(self) -> dict[str, Any]:
        payload = load_json_object(self.mcp_path)
        mcp = payload.get(MCP_SERVERS_KEY)
        return mcp if isinstance(mcp, dict) else {}

    def save_mcp_payload(self, payload: dict[str, Any]) -> None:
        config = load_json_object(self.mcp_path)
        config[MCP_SERVERS_KEY] = payload
        write_json(self.mcp_path, config)


class PromptFileRepository(IPromptRepository):
    def __init__(self, prompt_path: Path) -> None:
        self._prompt_path = prompt_path

    @property
    def prompt_path(self) -> Path:
        return self._prompt_path

    def load_prompt(self) -> str | None:
        if not self.prompt_path.exists():
            return None
        try:
            return self.prompt_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise FileIOError(self.prompt_path, str(exc)) from exc

    def save_prompt(self, content: str) -> None:
        write_text(self.prompt_path, content)
