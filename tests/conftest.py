import json
import sys
from pathlib import Path
from typing import Any

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

_SCRUBBED_ENV = (
    "CCSWITCH_CONFIG_DIR",
    "CCSWITCH_CLAUDE_MCP_PATH",
    "CCSWITCH_CLAUDE_CONFIG_DIR",
    "CCSWITCH_CODEX_CONFIG_DIR",
    "CCSWITCH_GEMINI_CONFIG_DIR",
    "CCSWITCH_OPENCODE_CONFIG_DIR",
    "XDG_CONFIG_HOME",
)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("CCSWITCH_HOME", str(tmp_path))
    for name in _SCRUBBED_ENV:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def write_json():
    def _write(path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")

    return _write


@pytest.fixture
def read_json():
    def _read(path: Path) -> Any:
        return json.loads(path.read_text(encoding="utf-8"))

    return _read


@pytest.fixture
def tool_root(tmp_path: Path) -> Path:
    return tmp_path / ".cc-switch"


@pytest.fixture
def state():
    from cc_switch.state import AppState

    app_state = AppState.memory()
    yield app_state
    app_state.close()


@pytest.fixture
def claude_settings():
    def _make(token: str = "sk-ant-test", base_url: str = "https://api.example.com") -> dict:
        return {
            "env": {
                "ANTHROPIC_AUTH_TOKEN": token,
                "ANTHROPIC_BASE_URL": base_url,
            }
        }

    return _make


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("CCSWITCH_HOME", str(tmp_path))
            env.setdefault("COLUMNS", "200")
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()
