from dataclasses import dataclass
from enum import Enum

from cc_switch.errors import InvalidInputError


class AppKind(str, Enum):
    CLAUDE = "claude"
    CODEX = "codex"
    GEMINI = "gemini"
    OPENCODE = "opencode"

    @property
    def label(self) -> str:
        return app_metadata(self).label

    @property
    def additive(self) -> bool:
        return app_metadata(self).additive


@dataclass(frozen=True)
class AppMetadata:
    app_kind: AppKind
    label: str
    additive: bool
    dir_name: str
    env_override: str
    prompt_filename: str
    aliases: tuple[str, ...] = ()


APP_CATALOG: dict[AppKind, AppMetadata] = {
    AppKind.CLAUDE: AppMetadata(
        app_kind=AppKind.CLAUDE,
        label="Claude Code",
        additive=False,
        dir_name=".claude",
        env_override="CCSWITCH_CLAUDE_CONFIG_DIR",
        prompt_filename="CLAUDE.md",
        aliases=("claude-code", "claude_code"),
    ),
    AppKind.CODEX: AppMetadata(
        app_kind=AppKind.CODEX,
        label="Codex CLI",
        additive=False,
        dir_name=".codex",
        env_override="CCSWITCH_CODEX_CONFIG_DIR",
        prompt_filename="AGENTS.md",
        aliases=("codex-cli", "codex_cli"),
    ),
    AppKind.GEMINI: AppMetadata(
        app_kind=AppKind.GEMINI,
        label="Gemini CLI",
        additive=False,
        dir_name=".gemini",
        env_override="CCSWITCH_GEMINI_CONFIG_DIR",
        prompt_filename="GEMINI.md",
        aliases=("gemini-cli", "gemini_cli"),
    ),
    AppKind.OPENCODE: AppMetadata(
        app_kind=AppKind.OPENCODE,
        label="OpenCode",
        additive=True,
        dir_name=".opencode",
        env_override="CCSWITCH_OPENCODE_CONFIG_DIR",
        prompt_filename="AGENTS.md",
        aliases=("open-code", "open_code"),
    ),
}


def app_metadata(app: AppKind | str) -> AppMetadata:
    app_kind = app if isinstance(app, AppKind) else AppKind(app)
    return APP_CATALOG[app_kind]


def app_label(app: AppKind | str) -> str:
    return app_metadata(app).label


def parse_app(value: str) -> AppKind:
    normalized = value.strip().lower()
    for app_kind, metadata in APP_CATALOG.items():
        if normalized == app_kind.value or normalized in metadata.aliases:
            return app_kind
    raise InvalidInputError(f"Unknown app type: {value}")


def exclusive_apps() -> list[AppKind]:
    return [app for app in AppKind if not app.additive]
