from typing import Final


APP_NAME: Final[str] = "cc-switch"
APP_DIR_NAME: Final[str] = ".cc-switch"

DATABASE_FILENAME: Final[str] = "cc-switch.db"
SETTINGS_FILENAME: Final[str] = "settings.json"
SKILLS_DIRNAME: Final[str] = "skills"
SKILL_MANIFEST_FILENAME: Final[str] = "SKILL.md"

HOME_ENV: Final[str] = "CCSWITCH_HOME"
CONFIG_DIR_ENV: Final[str] = "CCSWITCH_CONFIG_DIR"
CLAUDE_MCP_PATH_ENV: Final[str] = "CCSWITCH_CLAUDE_MCP_PATH"
XDG_CONFIG_HOME_ENV: Final[str] = "XDG_CONFIG_HOME"

DEFAULT_SKILL_BRANCH: Final[str] = "main"

DEFAULT_BASE_URLS: Final[dict[str, str]] = {
    "claude": "https://api.anthropic.com",
    "gemini": "https://generativelanguage.googleapis.com",
}
