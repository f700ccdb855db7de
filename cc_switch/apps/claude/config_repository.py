from cc_switch.apps.common.repositories import JsonConfigRepository
from cc_switch.paths import AppPaths


class ClaudeConfigRepository(JsonConfigRepository):
    """``settings.json`` under the Claude dir; MCP servers live in ``~/.claude.json``."""

    @classmethod
    def from_paths(cls, paths: AppPaths) -> "ClaudeConfigRepository":
        return cls(
            root=paths.config_dir,
            config_path=paths.settings_path,
            mcp_path=paths.mcp_path,
        )
