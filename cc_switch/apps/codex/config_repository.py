from pathlib import Path
from typing import Any

from cc_switch.apps.common import toml
from cc_switch.apps.common.interfaces.repositories import IAppConfigRepository
from cc_switch.errors import FileIOError
from cc_switch.paths import AppPaths
from cc_switch.utils import write_text

MCP_SERVERS_KEY = "mcp_servers"


class CodexConfigRepository(IAppConfigRepository):
    def __init__(self, root: Path, auth_path: Path | None = None) -> None:
        self._root = root
        self._auth_path = auth_path or (root / "auth.toml")

    @classmethod
    def from_paths(cls, paths: AppPaths) -> "CodexConfigRepository":
        return cls(root=paths.config_dir, auth_path=paths.auth_path)

    @property
    def root(self) -> Path:
        return self._root

    @property
    def config_path(self) -> Path:
        return self.root / "config.toml"

    @property
    def auth_path(self) -> Path:
        return self._auth_path

    def load_config(self) -> dict[str, Any]:
        return toml.load_file(self.config_path)

    def save_config(self, payload: dict[str, Any]) -> None:
        write_text(self.config_path, self.serialize_config(payload))

    def serialize_config(self, payload: dict[str, Any]) -> str:
        return toml.dumps(payload)

    def read_config_text(self) -> str:
        return _read_text(self.config_path)

    def write_config_text(self, text: str) -> None:
        write_text(self.config_path, text)

    def read_auth_text(self) -> str:
        return _read_text(self.auth_path)

    def write_auth_text(self, text: str) -> None:
        write_text(self.auth_path, text)

    def load_mcp_payload(self) -> dict[str, Any]:
        payload = self.load_config()
        mcp = payload.get(MCP_SERVERS_KEY)
        return mcp if isinstance(mcp, dict) else {}

    def save_mcp_payload(self, payload: dict[str, Any]) -> None:
        config = self.load_config()
        config[MCP_SERVERS_KEY] = payload
        self.save_config(config)


def _read_text(path: Path) -> str:
    if not path.exists():
        return ""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileIOError(path, str(exc)) from exc
