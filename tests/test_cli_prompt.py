"""Tests for prompt CLI commands."""

from pathlib import Path

from cc_switch.__main__ import cli


def test_prompt_list_empty(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["prompt", "list", "--app", "gemini"])

    assert result.exit_code == 0
    assert "No prompts stored for gemini" in result.output


def test_prompt_add_enabled_writes_file(cli_runner, tmp_path: Path) -> None:
    result = cli_runner.invoke(
        cli, ["prompt", "add", "house", "--content", "# House rules\n", "--enable"]
    )

    assert result.exit_code == 0, result.output
    assert (tmp_path / ".claude" / "CLAUDE.md").read_text(encoding="utf-8") == "# House rules\n"


def test_prompt_add_from_file(cli_runner, tmp_path: Path) -> None:
    source = tmp_path / "rules.md"
    source.write_text("be terse", encoding="utf-8")

    result = cli_runner.invoke(
        cli, ["prompt", "add", "terse", "--file", str(source), "--app", "codex"]
    )

    assert result.exit_code == 0, result.output
    assert not (tmp_path / ".codex" / "AGENTS.md").exists()
    listing = cli_runner.invoke(cli, ["prompt", "list", "--app", "codex"])
    assert "terse" in listing.output


def test_prompt_add_from_non_utf8_file(cli_runner, tmp_path: Path) -> None:
    source = tmp_path / "latin1.md"
    source.write_bytes(b"caf\xe9 rules")

    result = cli_runner.invoke(cli, ["prompt", "add", "latin", "--file", str(source)])

    assert result.exit_code == 1
    assert "Could not open file" in result.output
    assert isinstance(result.exception, SystemExit)


def test_prompt_add_needs_content(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["prompt", "add", "empty"])

    assert result.exit_code == 2
    assert "exactly one of --content or --file" in result.output


def test_prompt_enable_switches_content(cli_runner, tmp_path: Path) -> None:
    cli_runner.invoke(cli, ["prompt", "add", "a", "--content", "A", "--enable"])
    cli_runner.invoke(cli, ["prompt", "add", "b", "--content", "B"])

    result = cli_runner.invoke(cli, ["prompt", "enable", "b"])

    assert result.exit_code == 0, result.output
    assert (tmp_path / ".claude" / "CLAUDE.md").read_text(encoding="utf-8") == "B"


def test_prompt_disable_and_remove(cli_runner, tmp_path: Path) -> None:
    cli_runner.invoke(cli, ["prompt", "add", "a", "--content", "A", "--enable"])

    disabled = cli_runner.invoke(cli, ["prompt", "disable", "a"])
    assert disabled.exit_code == 0
    assert (tmp_path / ".claude" / "CLAUDE.md").read_text(encoding="utf-8") == ""

    removed = cli_runner.invoke(cli, ["prompt", "remove", "a"])
    assert removed.exit_code == 0
    missing = cli_runner.invoke(cli, ["prompt", "remove", "a"])
    assert missing.exit_code == 1
    assert "Prompt not found: a" in missing.output


def test_prompt_import(cli_runner, tmp_path: Path) -> None:
    live = tmp_path / ".gemini" / "GEMINI.md"
    live.parent.mkdir(parents=True)
    live.write_text("existing prompt", encoding="utf-8")

    result = cli_runner.invoke(cli, ["prompt", "import", "--app", "gemini"])

    assert result.exit_code == 0, result.output
    assert "imported-" in result.output
    listing = cli_runner.invoke(cli, ["prompt", "list", "--app", "gemini"])
    assert "Imported from Gemini CLI" in listing.output
