from pathlib import Path

import pytest

from cc_switch.apps.app_id import AppKind
from cc_switch.errors import DuplicateEntityError, EntityNotFoundError
from cc_switch.models import Prompt
from cc_switch.services import PromptService


@pytest.fixture
def service(state) -> PromptService:
    return PromptService(state)


@pytest.fixture
def claude_md(tmp_path: Path) -> Path:
    return tmp_path / ".claude" / "CLAUDE.md"


def _enabled_ids(service: PromptService, app: AppKind) -> list[str]:
    return [prompt.id for prompt in service.list(app).values() if prompt.enabled]


def test_enabling_b_disables_a(service, claude_md: Path) -> None:
    service.add(AppKind.CLAUDE, Prompt(id="a", name="A", content="prompt a", enabled=True))
    service.add(AppKind.CLAUDE, Prompt(id="b", name="B", content="prompt b"))

    service.enable(AppKind.CLAUDE, "b")

    assert service.get(AppKind.CLAUDE, "a").enabled is False
    assert service.get(AppKind.CLAUDE, "b").enabled is True
    assert claude_md.read_text(encoding="utf-8") == "prompt b"


def test_adding_enabled_prompt_keeps_single_enabled(service) -> None:
    service.add(AppKind.CODEX, Prompt(id="a", name="A", content="a", enabled=True))
    service.add(AppKind.CODEX, Prompt(id="b", name="B", content="b", enabled=True))

    assert _enabled_ids(service, AppKind.CODEX) == ["b"]


def test_prompts_are_independent_per_app(service) -> None:
    service.add(AppKind.CLAUDE, Prompt(id="p", name="Claude", content="c", enabled=True))
    service.add(AppKind.GEMINI, Prompt(id="p", name="Gemini", content="g", enabled=True))

    assert _enabled_ids(service, AppKind.CLAUDE) == ["p"]
    assert _enabled_ids(service, AppKind.GEMINI) == ["p"]


def test_disable_truncates_live_file(service, claude_md: Path) -> None:
    service.add(AppKind.CLAUDE, Prompt(id="a", name="A", content="rules", enabled=True))

    service.disable(AppKind.CLAUDE, "a")

    assert service.enabled(AppKind.CLAUDE) is None
    assert claude_md.exists()
    assert claude_md.read_text(encoding="utf-8") == ""


def test_add_disabled_prompt_does_not_create_file(service, claude_md: Path) -> None:
    service.add(AppKind.CLAUDE, Prompt(id="a", name="A", content="rules"))

    assert not claude_md.exists()


def test_update_enabled_prompt_rewrites_file(service, claude_md: Path) -> None:
    service.add(AppKind.CLAUDE, Prompt(id="a", name="A", content="v1", enabled=True))

    service.update(AppKind.CLAUDE, Prompt(id="a", name="A", content="v2", enabled=True))

    assert claude_md.read_text(encoding="utf-8") == "v2"


def test_remove_enabled_prompt_empties_file(service, claude_md: Path) -> None:
    service.add(AppKind.CLAUDE, Prompt(id="a", name="A", content="v1", enabled=True))

    service.remove(AppKind.CLAUDE, "a")

    assert service.list(AppKind.CLAUDE) == {}
    assert claude_md.read_text(encoding="utf-8") == ""


def test_duplicate_and_missing(service) -> None:
    service.add(AppKind.CLAUDE, Prompt(id="a", name="A", content="x"))

    with pytest.raises(DuplicateEntityError):
        service.add(AppKind.CLAUDE, Prompt(id="a", name="A", content="x"))
    with pytest.raises(EntityNotFoundError):
        service.enable(AppKind.CLAUDE, "missing")


def test_import_from_app(service, tmp_path: Path) -> None:
    service.add(AppKind.CODEX, Prompt(id="old", name="Old", content="x", enabled=True))
    live = tmp_path / ".codex" / "AGENTS.md"
    live.write_text("# House rules\n", encoding="utf-8")

    prompt_id = service.import_from_app(AppKind.CODEX)

    assert prompt_id is not None
    imported = service.get(AppKind.CODEX, prompt_id)
    assert imported.content == "# House rules\n"
    assert imported.name == "Imported from Codex CLI"
    assert _enabled_ids(service, AppKind.CODEX) == [prompt_id]


def test_import_skips_blank_file(service, tmp_path: Path) -> None:
    live = tmp_path / ".gemini" / "GEMINI.md"
    live.parent.mkdir(parents=True)
    live.write_text("   \n", encoding="utf-8")

    assert service.import_from_app(AppKind.GEMINI) is None
    assert service.import_from_app(AppKind.CLAUDE) is None
