import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import click
from rich.console import Console

from cc_switch import __version__
from cc_switch.apps.app_id import AppKind, parse_app
from cc_switch.errors import AppError, InvalidInputError, ProviderNotFoundError
from cc_switch.models import AppFlags, McpServer, Prompt, Provider, SkillRepo
from cc_switch.services import (
    ConfigService,
    McpService,
    PromptService,
    ProviderService,
    SkillService,
)
from cc_switch.services.provider_settings import (
    build_settings_config,
    generate_provider_id,
    load_settings_file,
    update_settings_config,
)
from cc_switch.services.skill import parse_repo
from cc_switch.state import AppState
from cc_switch.status import StatusService
from cc_switch.tui.renderers import SwitchConsoleUI


def _parse_app_option(_ctx: click.Context, _param: click.Parameter, value: Any) -> Any:
    if value is None:
        return None
    try:
        if isinstance(value, tuple):
            return tuple(parse_app(item) for item in value)
        return parse_app(value)
    except InvalidInputError as exc:
        raise click.BadParameter(str(exc))


def _app_option(default: Optional[str] = AppKind.CLAUDE.value, **kwargs: Any):
    return click.option(
        "-a",
        "--app",
        "app",
        default=default,
        show_default=default is not None,
        callback=_parse_app_option,
        help="Target app: claude, codex, gemini or opencode.",
        **kwargs,
    )


def _parse_pairs(values: tuple[str, ...], option: str) -> dict[str, str]:
    pairs: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise click.BadParameter(f"expected KEY=VALUE, got {item!r}", param_hint=option)
        pairs[key] = value
    return pairs


@contextmanager
def _domain_errors() -> Iterator[None]:
    try:
        yield
    except AppError as exc:
        raise click.ClickException(str(exc))


def _state(obj: Dict[str, Any]) -> AppState:
    state = obj.get("state")
    if state is None:
        with _domain_errors():
            state = AppState.open()
        obj["state"] = state
        click.get_current_context().call_on_close(state.close)
    return state


def _ui() -> SwitchConsoleUI:
    return SwitchConsoleUI(Console())


def _find_provider(service: ProviderService, app: AppKind, name: str) -> Provider:
    provider = service.find(app, name)
    if provider is None:
        raise ProviderNotFoundError(name)
    return provider


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(__version__, prog_name="cc-switch")
@click.option("-v", "--verbose", is_flag=True, help="Log sync decisions to stderr.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Switch providers, MCP servers, prompts and skills for AI coding CLIs."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )
    ctx.obj = {}


@cli.command(help="Show current provider and extension state per app.")
@_app_option(default=None)
@click.pass_obj
def status(obj: Dict[str, Any], app: Optional[AppKind]) -> None:
    state = _state(obj)
    with _domain_errors():
        rows = StatusService(state).build_app_status([app] if app else None)
    _ui().render_status(rows)


@cli.command(help="Show the files cc-switch reads and writes.")
@click.pass_obj
def paths(obj: Dict[str, Any]) -> None:
    service = ConfigService(_state(obj))
    with _domain_errors():
        tool_paths = service.tool_paths()
        app_paths = list(service.all_app_paths().values())
    _ui().render_paths(tool_paths, app_paths)


# providers


@cli.group(help="Manage provider profiles.")
def provider() -> None:
    pass


@provider.command("list", help="List providers for an app.")
@_app_option()
@click.pass_obj
def provider_list(obj: Dict[str, Any], app: AppKind) -> None:
    service = ProviderService(_state(obj))
    with _domain_errors():
        providers = list(service.list(app).values())
        current = service.current(app)
    _ui().render_providers(app, providers, current)


@provider.command("current", help="Show the live provider for an app.")
@_app_option()
@click.pass_obj
def provider_current(obj: Dict[str, Any], app: AppKind) -> None:
    service = ProviderService(_state(obj))
    with _domain_errors():
        current = service.current_provider(app)
    _ui().render_current(app, current)


@provider.command("add", help="Register a provider profile.")
@click.argument("name")
@_app_option()
@click.option("--id", "provider_id", help="Explicit provider id.")
@click.option("--api-key", help="API key or auth token.")
@click.option("--base-url", help="API base URL.")
@click.option("-m", "--model", help="Primary model.")
@click.option("--small-model", help="Small/fast model (claude).")
@click.option("--website", help="Provider website URL.")
@click.option("--notes", help="Free-form notes.")
@click.option(
    "--from-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read settings from a JSON, YAML or TOML file.",
)
@click.pass_obj
def provider_add(
    obj: Dict[str, Any],
    name: str,
    app: AppKind,
    provider_id: Optional[str],
    api_key: Optional[str],
    base_url: Optional[str],
    model: Optional[str],
    small_model: Optional[str],
    website: Optional[str],
    notes: Optional[str],
    from_file: Optional[Path],
) -> None:
    service = ProviderService(_state(obj))
    with _domain_errors():
        if from_file is not None:
            settings_config = load_settings_file(from_file)
        else:
            settings_config = build_settings_config(
                app, name, api_key, base_url=base_url, model=model, small_model=small_model
            )
        item = Provider(
            id=provider_id or generate_provider_id(name),
            name=name,
            settings_config=settings_config,
            website_url=website,
            notes=notes,
        )
        service.add(app, item)
        is_current = service.current(app) == item.id
    message = f"Added provider [bold]{name}[/bold] ({item.id}) for {app.label}"
    if is_current:
        message += "\nSelected as current provider."
    _ui().render_success("provider", message)


@provider.command("update", help="Edit a provider profile.")
@click.argument("name")
@_app_option()
@click.option("--api-key", help="New API key or auth token.")
@click.option("--base-url", help="New API base URL.")
@click.option("-m", "--model", help="New primary model.")
@click.option("--small-model", help="New small/fast model (claude).")
@click.option("--new-name", help="Rename the provider.")
@click.pass_obj
def provider_update(
    obj: Dict[str, Any],
    name: str,
    app: AppKind,
    api_key: Optional[str],
    base_url: Optional[str],
    model: Optional[str],
    small_model: Optional[str],
    new_name: Optional[str],
) -> None:
    service = ProviderService(_state(obj))
    with _domain_errors():
        item = _find_provider(service, app, name)
        item.settings_config = update_settings_config(
            app,
            item.settings_config,
            api_key=api_key,
            base_url=base_url,
            model=model,
            small_model=small_model,
        )
        if new_name:
            item.name = new_name
        service.update(app, item)
    _ui().render_success("provider", f"Updated provider [bold]{item.name}[/bold] ({item.id})")


@provider.command("remove", help="Delete a provider profile.")
@click.argument("name")
@_app_option()
@click.option("-y", "--yes", is_flag=True, help="Skip confirmation.")
@click.pass_obj
def provider_remove(obj: Dict[str, Any], name: str, app: AppKind, yes: bool) -> None:
    service = ProviderService(_state(obj))
    with _domain_errors():
        item = _find_provider(service, app, name)
    if not yes:
        click.confirm(f"Remove provider {item.name} ({item.id})?", abort=True)
    with _domain_errors():
        service.delete(app, item.id)
    _ui().render_success("provider", f"Removed provider [bold]{item.name}[/bold] ({item.id})")


@provider.command("use", help="Switch an app to a provider.")
@click.argument("name")
@_app_option()
@click.pass_obj
def provider_use(obj: Dict[str, Any], name: str, app: AppKind) -> None:
    service = ProviderService(_state(obj))
    with _domain_errors():
        item = service.switch(app, _find_provider(service, app, name).id)
    _ui().render_success(
        "switch", f"{app.label} now uses [bold]{item.name}[/bold] ({item.id})"
    )


@provider.command("show", help="Show one provider with its key masked.")
@click.argument("name")
@_app_option()
@click.pass_obj
def provider_show(obj: Dict[str, Any], name: str, app: AppKind) -> None:
    service = ProviderService(_state(obj))
    with _domain_errors():
        item = _find_provider(service, app, name)
        credentials = service.extract_credentials(item, app)
        is_current = service.current(app) == item.id
    _ui().render_provider_detail(app, item, credentials, is_current)


@provider.command("sync", help="Rewrite the live config from the stored provider.")
@_app_option()
@click.pass_obj
def provider_sync(obj: Dict[str, Any], app: AppKind) -> None:
    service = ProviderService(_state(obj))
    with _domain_errors():
        synced = service.resync(app)
    _ui().render_success("sync", f"Synced {app.label}: {', '.join(synced)}")


# mcp servers


@cli.group(help="Manage MCP servers.")
def mcp() -> None:
    pass


@mcp.command("list", help="List MCP servers and the apps they are enabled for.")
@click.pass_obj
def mcp_list(obj: Dict[str, Any]) -> None:
    service = McpService(_state(obj))
    with _domain_errors():
        servers = list(service.list().values())
    _ui().render_mcp_servers(servers)


@mcp.command("add", help="Add an MCP server.")
@click.argument("server_id")
@click.option("--name", help="Display name; defaults to the id.")
@click.option("--command", help="Executable for a stdio server.")
@click.option("--args", "args", multiple=True, help="Argument for --command (repeatable).")
@click.option("--url", help="URL for an http server.")
@click.option("--env", "env", multiple=True, help="KEY=VALUE environment entry.")
@click.option("--header", "headers", multiple=True, help="KEY=VALUE http header.")
@click.option("--description", help="Short description.")
@_app_option(default=None, multiple=True)
@click.pass_obj
def mcp_add(
    obj: Dict[str, Any],
    server_id: str,
    name: Optional[str],
    command: Optional[str],
    args: tuple[str, ...],
    url: Optional[str],
    env: tuple[str, ...],
    headers: tuple[str, ...],
    description: Optional[str],
    app: tuple[AppKind, ...],
) -> None:
    if (command is None) == (url is None):
        raise click.UsageError("Provide exactly one of --command or --url.")

    server_config: dict[str, Any]
    if command is not None:
        server_config = {"type": "stdio", "command": command}
        if args:
            server_config["args"] = list(args)
        if env:
            server_config["env"] = _parse_pairs(env, "--env")
    else:
        server_config = {"type": "http", "url": url}
        if headers:
            server_config["headers"] = _parse_pairs(headers, "--header")

    server = McpServer(
        id=server_id,
        name=name or server_id,
        server_config=server_config,
        apps=AppFlags.of(*app),
        description=description,
    )
    with _domain_errors():
        McpService(_state(obj)).add(server)
    _ui().render_success(
        "mcp", f"Added MCP server [bold]{server_id}[/bold] (apps: {server.enabled_apps_label()})"
    )


@mcp.command("remove", help="Remove an MCP server from the store and every app.")
@click.argument("server_id")
@click.pass_obj
def mcp_remove(obj: Dict[str, Any], server_id: str) -> None:
    with _domain_errors():
        McpService(_state(obj)).remove(server_id)
    _ui().render_success("mcp", f"Removed MCP server [bold]{server_id}[/bold]")


def _toggle_mcp(obj: Dict[str, Any], server_id: str, app: AppKind, enabled: bool) -> None:
    with _domain_errors():
        McpService(_state(obj)).toggle(server_id, app, enabled)
    verb = "Enabled" if enabled else "Disabled"
    _ui().render_success("mcp", f"{verb} [bold]{server_id}[/bold] for {app.label}")


@mcp.command("enable", help="Enable an MCP server for an app.")
@click.argument("server_id")
@_app_option()
@click.pass_obj
def mcp_enable(obj: Dict[str, Any], server_id: str, app: AppKind) -> None:
    _toggle_mcp(obj, server_id, app, True)


@mcp.command("disable", help="Disable an MCP server for an app.")
@click.argument("server_id")
@_app_option()
@click.pass_obj
def mcp_disable(obj: Dict[str, Any], server_id: str, app: AppKind) -> None:
    _toggle_mcp(obj, server_id, app, False)


@mcp.command("import", help="Import MCP servers from an app's live config.")
@_app_option()
@click.pass_obj
def mcp_import(obj: Dict[str, Any], app: AppKind) -> None:
    with _domain_errors():
        imported = McpService(_state(obj)).import_from_app(app)
    _ui().render_imported(f"mcp import from {app.value}", imported)


@mcp.command("sync", help="Write enabled MCP servers into app configs.")
@_app_option(default=None)
@click.pass_obj
def mcp_sync(obj: Dict[str, Any], app: Optional[AppKind]) -> None:
    service = McpService(_state(obj))
    with _domain_errors():
        if app is not None:
            counts = {app: service.sync_to_app(app)}
        else:
            counts = service.sync_all()
    if not counts:
        _ui().render_warning("mcp sync", "Nothing to sync.")
        return
    lines = "\n".join(f"- {item.label}: {count} server(s)" for item, count in counts.items())
    _ui().render_success("mcp sync", lines)


# prompts


@cli.group(help="Manage system prompts (CLAUDE.md, AGENTS.md, GEMINI.md).")
def prompt() -> None:
    pass


@prompt.command("list", help="List stored prompts for an app.")
@_app_option()
@click.pass_obj
def prompt_list(obj: Dict[str, Any], app: AppKind) -> None:
    with _domain_errors():
        prompts = list(PromptService(_state(obj)).list(app).values())
    _ui().render_prompts(app, prompts)


@prompt.command("add", help="Store a prompt for an app.")
@click.argument("prompt_id")
@_app_option()
@click.option("--name", help="Display name; defaults to the id.")
@click.option("--content", help="Prompt text.")
@click.option(
    "--file",
    "content_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read prompt text from a file.",
)
@click.option("--description", help="Short description.")
@click.option("--enable", is_flag=True, help="Enable it right away.")
@click.pass_obj
def prompt_add(
    obj: Dict[str, Any],
    prompt_id: str,
    app: AppKind,
    name: Optional[str],
    content: Optional[str],
    content_file: Optional[Path],
    description: Optional[str],
    enable: bool,
) -> None:
    if (content is None) == (content_file is None):
        raise click.UsageError("Provide exactly one of --content or --file.")
    if content_file is not None:
        try:
            content = content_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise click.FileError(str(content_file), hint=str(exc))
    item = Prompt(
        id=prompt_id,
        name=name or prompt_id,
        content=content or "",
        description=description,
        enabled=enable,
    )
    with _domain_errors():
        PromptService(_state(obj)).add(app, item)
    _ui().render_success("prompt", f"Added prompt [bold]{prompt_id}[/bold] for {app.label}")


@prompt.command("remove", help="Delete a stored prompt.")
@click.argument("prompt_id")
@_app_option()
@click.pass_obj
def prompt_remove(obj: Dict[str, Any], prompt_id: str, app: AppKind) -> None:
    with _domain_errors():
        PromptService(_state(obj)).remove(app, prompt_id)
    _ui().render_success("prompt", f"Removed prompt [bold]{prompt_id}[/bold]")


@prompt.command("enable", help="Make a prompt the live one for an app.")
@click.argument("prompt_id")
@_app_option()
@click.pass_obj
def prompt_enable(obj: Dict[str, Any], prompt_id: str, app: AppKind) -> None:
    with _domain_errors():
        PromptService(_state(obj)).enable(app, prompt_id)
    _ui().render_success("prompt", f"Enabled prompt [bold]{prompt_id}[/bold] for {app.label}")


@prompt.command("disable", help="Disable a prompt; the live file is emptied.")
@click.argument("prompt_id")
@_app_option()
@click.pass_obj
def prompt_disable(obj: Dict[str, Any], prompt_id: str, app: AppKind) -> None:
    with _domain_errors():
        PromptService(_state(obj)).disable(app, prompt_id)
    _ui().render_success("prompt", f"Disabled prompt [bold]{prompt_id}[/bold] for {app.label}")


@prompt.command("import", help="Import an app's live prompt file.")
@_app_option()
@click.pass_obj
def prompt_import(obj: Dict[str, Any], app: AppKind) -> None:
    with _domain_errors():
        imported = PromptService(_state(obj)).import_from_app(app)
    _ui().render_imported(
        f"prompt import from {app.value}", [imported] if imported else []
    )


# skills


@cli.group(help="Manage skills installed from git repositories.")
def skill() -> None:
    pass


@skill.command("list", help="List installed skills.")
@click.pass_obj
def skill_list(obj: Dict[str, Any]) -> None:
    with _domain_errors():
        skills = list(SkillService(_state(obj)).list().values())
    _ui().render_skills(skills)


@skill.command("install", help="Install a skill from a GitHub owner/name repository.")
@click.argument("repo")
@click.option("-b", "--branch", help="Branch to clone (default: main).")
@click.pass_obj
def skill_install(obj: Dict[str, Any], repo: str, branch: Optional[str]) -> None:
    with _domain_errors():
        installed = SkillService(_state(obj)).install(repo, branch)
    _ui().render_success(
        "skill", f"Installed [bold]{installed.name}[/bold] ({installed.id})"
    )


@skill.command("uninstall", help="Remove a skill, its links and its files.")
@click.argument("skill_id")
@click.pass_obj
def skill_uninstall(obj: Dict[str, Any], skill_id: str) -> None:
    with _domain_errors():
        SkillService(_state(obj)).uninstall(skill_id)
    _ui().render_success("skill", f"Uninstalled [bold]{skill_id}[/bold]")


def _toggle_skill(obj: Dict[str, Any], skill_id: str, app: AppKind, enabled: bool) -> None:
    with _domain_errors():
        SkillService(_state(obj)).toggle(skill_id, app, enabled)
    verb = "Enabled" if enabled else "Disabled"
    _ui().render_success("skill", f"{verb} [bold]{skill_id}[/bold] for {app.label}")


@skill.command("enable", help="Link a skill into an app's skills directory.")
@click.argument("skill_id")
@_app_option()
@click.pass_obj
def skill_enable(obj: Dict[str, Any], skill_id: str, app: AppKind) -> None:
    _toggle_skill(obj, skill_id, app, True)


@skill.command("disable", help="Unlink a skill from an app's skills directory.")
@click.argument("skill_id")
@_app_option()
@click.pass_obj
def skill_disable(obj: Dict[str, Any], skill_id: str, app: AppKind) -> None:
    _toggle_skill(obj, skill_id, app, False)


@skill.command("scan", help="Register skill directories found on disk.")
@click.pass_obj
def skill_scan(obj: Dict[str, Any]) -> None:
    with _domain_errors():
        found = SkillService(_state(obj)).scan()
    _ui().render_imported("skill scan", found)


@skill.command("sync", help="Recreate skill links for every app.")
@click.pass_obj
def skill_sync(obj: Dict[str, Any]) -> None:
    with _domain_errors():
        SkillService(_state(obj)).sync_all()
    _ui().render_success("skill", "Skill links synced.")


@skill.command("repos", help="List registered skill repositories.")
@click.pass_obj
def skill_repos(obj: Dict[str, Any]) -> None:
    with _domain_errors():
        repos = SkillService(_state(obj)).list_repos()
    _ui().render_skill_repos(repos)


@skill.command("repo-add", help="Register a skill repository (owner/name).")
@click.argument("repo")
@click.option("-b", "--branch", default="main", show_default=True)
@click.pass_obj
def skill_repo_add(obj: Dict[str, Any], repo: str, branch: str) -> None:
    with _domain_errors():
        owner, name = parse_repo(repo)
        SkillService(_state(obj)).add_repo(SkillRepo(owner=owner, name=name, branch=branch))
    _ui().render_success("skill repos", f"Registered [bold]{owner}/{name}[/bold] ({branch})")


@skill.command("repo-remove", help="Unregister a skill repository.")
@click.argument("repo")
@click.pass_obj
def skill_repo_remove(obj: Dict[str, Any], repo: str) -> None:
    with _domain_errors():
        SkillService(_state(obj)).remove_repo(repo)
    _ui().render_success("skill repos", f"Removed [bold]{repo}[/bold]")


def main() -> int:
    try:
        cli(standalone_mode=False)
    except click.exceptions.Exit as exc:
        code = exc.exit_code
        return code if isinstance(code, int) else 1
    except click.exceptions.Abort:
        return 1
    except click.ClickException as exc:
        exc.show()
        return 2
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
