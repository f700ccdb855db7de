"""MCP server management service for add/remove/toggle and per-app sync."""

from __future__ import annotations

import logging
from typing import Any

from cc_switch.apps.app_id import AppKind
from cc_switch.errors import DuplicateEntityError, EntityNotFoundError
from cc_switch.models import McpServer
from cc_switch.state import AppState

logger = logging.getLogger(__name__)

MCP_KIND = "MCP server"


class McpService:
    def __init__(self, state: AppState) -> None:
        self._state = state

    def list(self) -> dict[str, McpServer]:
        return self._state.db.get_all_mcp_servers()

    def get(self, server_id: str) -> McpServer | None:
        return self._state.db.get_mcp_server(server_id)

    def _require(self, server_id: str) -> McpServer:
        server = self.get(server_id)
        if server is None:
            raise EntityNotFoundError(MCP_KIND, server_id)
        return server

    def add(self, server: McpServer) -> None:
        if self.get(server.id) is not None:
            raise DuplicateEntityError(MCP_KIND, server.id)
        self._state.db.save_mcp_server(server)
        for app in server.apps.enabled_apps():
            self.sync_to_app(app)

    def update(self, server: McpServer) -> None:
        self._require(server.id)
        self._state.db.save_mcp_server(server)
        self.sync_all()

    def remove(self, server_id: str) -> None:
        self._require(server_id)
        self._state.db.delete_mcp_server(server_id)
        self.sync_all()

    def toggle(self, server_id: str, app: AppKind, enabled: bool) -> McpServer:
        server = self._require(server_id)
        server.apps.set_enabled_for(app, enabled)
        self._state.db.update_mcp_server_apps(server_id, server.apps)
        self.sync_to_app(app)
        return server

    def enabled_servers(self, app: AppKind) -> dict[str, Any]:
        return {
            server_id: server.server_config
            for server_id, server in self.list().items()
            if server.apps.is_enabled_for(app)
        }

    def sync_to_app(self, app: AppKind) -> int:
        """Write every server enabled for ``app`` as that app's whole MCP map."""
        servers = self.enabled_servers(app)
        self._state.projector(app).sync_mcp(servers)
        return len(servers)

    def sync_all(self) -> dict[AppKind, int]:
        synced: dict[AppKind, int] = {}
        for app in AppKind:
            projector = self._state.projector(app)
            servers = self.enabled_servers(app)
            if not servers and not projector.repository.mcp_path.exists():
                logger.debug("skipping mcp sync for %s: nothing to write", app.value)
                continue
            projector.sync_mcp(servers)
            synced[app] = len(servers)
        return synced

    def import_from_app(self, app: AppKind) -> list[str]:
        """Register live MCP entries not yet stored, enabled for ``app`` only."""
        imported: list[str] = []
        for server_id, config in self._state.projector(app).read_live_mcp().items():
            if self.get(server_id) is not None:
                continue
            server = McpServer(id=server_id, name=server_id, server_config=config)
            server.apps.set_enabled_for(app, True)
            self._state.db.save_mcp_server(server)
            imported.append(server_id)
        return imported
