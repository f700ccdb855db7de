from rich.table import Column, Table

from cc_switch.apps.app_id import AppKind
from cc_switch.models import McpServer, Prompt, Provider, Skill, SkillRepo
from cc_switch.paths import AppPaths
from cc_switch.status import AppStatusRow
from cc_switch.tui.enums import APP_STATUS_STYLE, UIStyle
from cc_switch.utils import compact_home_path


def _enabled_cell(enabled: bool) -> str:
    if enabled:
        return f"[{UIStyle.GREEN.value}]yes[/{UIStyle.GREEN.value}]"
    return f"[{UIStyle.DIM.value}]no[/{UIStyle.DIM.value}]"


class ProviderTable:
    @staticmethod
    def providers_table(providers: list[Provider], current_id: str) -> Table:
        table = Table(
            Column(header="", width=2),
            Column(header="ID", overflow="ellipsis", max_width=24),
            Column(header="Name", overflow="ellipsis"),
            Column(header="Base URL", overflow="ellipsis"),
            Column(header="Model", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for provider in providers:
            marker = (
                f"[{UIStyle.GREEN.value}]*[/{UIStyle.GREEN.value}]"
                if provider.id == current_id
                else ""
            )
            table.add_row(
                marker,
                provider.id,
                provider.name,
                provider.base_url() or "-",
                provider.model() or "-",
            )
        return table


class McpTable:
    @staticmethod
    def servers_table(servers: list[McpServer]) -> Table:
        table = Table(
            Column(header="ID", overflow="ellipsis", max_width=24),
            Column(header="Name", overflow="ellipsis"),
            *[Column(header=app.value, width=9) for app in AppKind],
            expand=True,
            header_style="bold",
        )
        for server in servers:
            table.add_row(
                server.id,
                server.name,
                *[_enabled_cell(server.apps.is_enabled_for(app)) for app in AppKind],
            )
        return table


class PromptTable:
    @staticmethod
    def prompts_table(prompts: list[Prompt]) -> Table:
        table = Table(
            Column(header="ID", overflow="ellipsis", max_width=28),
            Column(header="Name", overflow="ellipsis"),
            Column(header="Enabled", width=8),
            Column(header="Size", width=8, justify="right"),
            expand=True,
            header_style="bold",
        )
        for prompt in prompts:
            table.add_row(
                prompt.id,
                prompt.name,
                _enabled_cell(prompt.enabled),
                str(len(prompt.content)),
            )
        return table


class SkillTable:
    @staticmethod
    def skills_table(skills: list[Skill]) -> Table:
        table = Table(
            Column(header="ID", overflow="ellipsis", max_width=28),
            Column(header="Name", overflow="ellipsis"),
            Column(header="Apps", overflow="ellipsis"),
            Column(header="Repository", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for skill in skills:
            table.add_row(
                skill.id,
                skill.name,
                skill.enabled_apps_label(),
                skill.repo_url() or "-",
            )
        return table

    @staticmethod
    def repos_table(repos: list[SkillRepo]) -> Table:
        table = Table(
            Column(header="Repository", overflow="ellipsis"),
            Column(header="Branch", width=16),
            Column(header="Enabled", width=8),
            expand=True,
            header_style="bold",
        )
        for repo in repos:
            table.add_row(repo.id, repo.branch, _enabled_cell(repo.enabled))
        return table


class StatusTable:
    @staticmethod
    def apps_table(items: list[AppStatusRow]) -> Table:
        table = Table(
            Column(header="App", width=14),
            Column(header="Status", width=14),
            Column(header="Provider", overflow="ellipsis"),
            Column(header="Providers", width=9, justify="right"),
            Column(header="MCP", width=5, justify="right"),
            Column(header="Prompt", overflow="ellipsis"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            style = APP_STATUS_STYLE.get(item.status, UIStyle.WHITE.value)
            table.add_row(
                item.app.label,
                f"[{style}]{item.status.value}[/{style}]",
                item.current_provider or "-",
                str(item.provider_count),
                str(item.mcp_count),
                item.prompt or "-",
            )
        return table


class PathsTable:
    @staticmethod
    def app_paths_table(items: list[AppPaths]) -> Table:
        table = Table(
            Column(header="App", width=14),
            Column(header="Settings", overflow="fold"),
            Column(header="MCP", overflow="fold"),
            Column(header="Prompt", overflow="fold"),
            expand=True,
            header_style="bold",
        )
        for item in items:
            table.add_row(
                item.app.label,
                compact_home_path(item.settings_path),
                compact_home_path(item.mcp_path),
                compact_home_path(item.prompt_path),
            )
        return table
