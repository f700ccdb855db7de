"""Tests for status, paths and the process entry point."""

import sys
from pathlib import Path

from cc_switch.__main__ import cli, main


def test_status_lists_every_app(cli_runner) -> None:
    cli_runner.invoke(cli, ["provider", "add", "Main", "--api-key", "k1", "--id", "main"])

    result = cli_runner.invoke(cli, ["status"])

    assert result.exit_code == 0, result.output
    for label in ("Claude Code", "Codex CLI", "Gemini CLI", "OpenCode"):
        assert label in result.output
    assert "active" in result.output
    assert "not installed" in result.output


def test_status_single_app(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["status", "--app", "codex"])

    assert result.exit_code == 0
    assert "Codex CLI" in result.output
    assert "Gemini CLI" not in result.output


def test_paths(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["paths"])

    assert result.exit_code == 0, result.output
    assert "~/.cc-switch/cc-switch.db" in result.output
    assert "~/.claude.json" in result.output
    assert "~/.codex/config.toml" in result.output


def test_paths_honour_env_override(cli_runner, tmp_path: Path) -> None:
    result = cli_runner.invoke(
        cli, ["paths"], env={"CCSWITCH_GEMINI_CONFIG_DIR": str(tmp_path / "work-gemini")}
    )

    assert result.exit_code == 0
    assert "~/work-gemini/settings.json" in result.output


def test_version(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "cc-switch" in result.output


def test_main_maps_click_errors_to_exit_code(monkeypatch, capsys) -> None:
    monkeypatch.setattr(sys, "argv", ["cc-switch", "provider", "use", "ghost"])

    assert main() == 2
    assert "Provider not found: ghost" in capsys.readouterr().err


def test_main_returns_zero_on_success(monkeypatch) -> None:
    monkeypatch.setattr(sys, "argv", ["cc-switch", "provider", "list"])

    assert main() == 0
