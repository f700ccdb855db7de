from rich.console import Console

from cc_switch.apps.app_id import AppKind
from cc_switch.models import McpServer, Prompt, Provider, Skill, SkillRepo
from cc_switch.paths import AppPaths
from cc_switch.services.config import ToolPaths
from cc_switch.status import AppStatusRow
from cc_switch.tui.enums import UIStyle
from cc_switch.tui.sections import UISection
from cc_switch.tui.tables import (
    McpTable,
    PathsTable,
    PromptTable,
    ProviderTable,
    SkillTable,
    StatusTable,
)
from cc_switch.utils import compact_home_path, mask_secret


class SwitchConsoleUI:
    def __init__(self, console: Console | None = None) -> None:
        self.console = console or Console()

    def render_success(self, title: str, message: str) -> None:
        self.console.print(UISection.note(title, message, style=UIStyle.GREEN.value))

    def render_warning(self, title: str, message: str) -> None:
        self.console.print(UISection.note(title, message, style=UIStyle.YELLOW.value))

    def render_providers(
        self, app: AppKind, providers: list[Provider], current_id: str
    ) -> None:
        title = f"{app.label} providers"
        if not providers:
            self.console.print(
                UISection.empty(title, f"No providers configured for {app.value}.")
            )
            return
        subtitle = "additive: every provider is live" if app.additive else None
        self.console.print(
            UISection.wrap(
                title,
                ProviderTable.providers_table(providers, current_id),
                style=UIStyle.BLUE.value,
                subtitle=subtitle,
            )
        )

    def render_current(self, app: AppKind, provider: Provider | None) -> None:
        if app.additive:
            self.render_warning("current", f"{app.label} has no single current provider.")
            return
        if provider is None:
            self.render_warning("current", f"No current provider for {app.value}.")
            return
        self.console.print(
            UISection.note(
                "current",
                f"{app.label}: [bold]{provider.name}[/bold] ({provider.id})",
                style=UIStyle.GREEN.value,
            )
        )

    def render_provider_detail(
        self,
        app: AppKind,
        provider: Provider,
        credentials: tuple[str, str],
        is_current: bool,
    ) -> None:
        api_key, base_url = credentials
        rows = [
            ("ID", provider.id),
            ("Name", provider.name),
            ("App", app.label),
            ("Current", "yes" if is_current else "no"),
            ("API key", mask_secret(api_key) or "-"),
            ("Base URL", base_url or "-"),
            ("Model", provider.model() or "-"),
        ]
        if provider.website_url:
            rows.append(("Website", provider.website_url))
        if provider.notes:
            rows.append(("Notes", provider.notes))
        self.console.print(UISection.details("provider", rows))

    def render_mcp_servers(self, servers: list[McpServer]) -> None:
        if not servers:
            self.console.print(UISection.empty("mcp servers", "No MCP servers configured."))
            return
        self.console.print(
            UISection.wrap("mcp servers", McpTable.servers_table(servers), style=UIStyle.BLUE.value)
        )

    def render_prompts(self, app: AppKind, prompts: list[Prompt]) -> None:
        title = f"{app.label} prompts"
        if not prompts:
            self.console.print(UISection.empty(title, f"No prompts stored for {app.value}."))
            return
        self.console.print(
            UISection.wrap(title, PromptTable.prompts_table(prompts), style=UIStyle.BLUE.value)
        )

    def render_skills(self, skills: list[Skill]) -> None:
        if not skills:
            self.console.print(UISection.empty("skills", "No skills installed."))
            return
        self.console.print(
            UISection.wrap("skills", SkillTable.skills_table(skills), style=UIStyle.BLUE.value)
        )

    def render_skill_repos(self, repos: list[SkillRepo]) -> None:
        if not repos:
            self.console.print(UISection.empty("skill repos", "No skill repositories registered."))
            return
        self.console.print(
            UISection.wrap("skill repos", SkillTable.repos_table(repos), style=UIStyle.CYAN.value)
        )

    def render_imported(self, title: str, ids: list[str]) -> None:
        if not ids:
            self.render_warning(title, "Nothing new to import.")
            return
        body = "\n".join(f"- {item}" for item in ids)
        self.console.print(UISection.note(title, body, style=UIStyle.GREEN.value))

    def render_status(self, rows: list[AppStatusRow]) -> None:
        self.console.print(
            UISection.wrap("apps", StatusTable.apps_table(rows), style=UIStyle.BLUE.value)
        )

    def render_paths(self, tool_paths: ToolPaths, app_paths: list[AppPaths]) -> None:
        self.console.print(
            UISection.details(
                "cc-switch",
                [
                    ("Config dir", compact_home_path(tool_paths.config_dir)),
                    ("Database", compact_home_path(tool_paths.database_path)),
                    ("Settings", compact_home_path(tool_paths.settings_path)),
                    ("Skills", compact_home_path(tool_paths.skills_dir)),
                ],
            )
        )
        self.console.print(
            UISection.wrap(
                "app files", PathsTable.app_paths_table(app_paths), style=UIStyle.CYAN.value
            )
        )
