"""Tests for mcp CLI commands."""

from pathlib import Path

from cc_switch.__main__ import cli


def test_mcp_list_empty(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["mcp", "list"])

    assert result.exit_code == 0
    assert "No MCP servers" in result.output


def test_mcp_add_stdio(cli_runner, tmp_path: Path, read_json) -> None:
    result = cli_runner.invoke(
        cli,
        [
            "mcp", "add", "github",
            "--command", "npx",
            "--args=-y", "--args", "@mcp/github",
            "--env", "GITHUB_TOKEN=abc",
            "--app", "claude", "--app", "gemini",
        ],
    )

    assert result.exit_code == 0, result.output
    assert "Added MCP server" in result.output
    expected = {
        "type": "stdio",
        "command": "npx",
        "args": ["-y", "@mcp/github"],
        "env": {"GITHUB_TOKEN": "abc"},
    }
    assert read_json(tmp_path / ".claude.json")["mcpServers"]["github"] == expected
    assert read_json(tmp_path / ".gemini" / "settings.json")["mcpServers"]["github"] == expected


def test_mcp_add_http(cli_runner) -> None:
    result = cli_runner.invoke(
        cli,
        ["mcp", "add", "remote", "--url", "https://example.com/mcp", "--header", "Authorization=Bearer x"],
    )

    assert result.exit_code == 0, result.output
    listing = cli_runner.invoke(cli, ["mcp", "list"])
    assert "remote" in listing.output


def test_mcp_add_requires_command_or_url(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["mcp", "add", "broken"])

    assert result.exit_code == 2
    assert "exactly one of --command or --url" in result.output


def test_mcp_add_rejects_bad_env_pair(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["mcp", "add", "x", "--command", "x", "--env", "NOVALUE"])

    assert result.exit_code == 2
    assert "KEY=VALUE" in result.output


def test_mcp_enable_disable(cli_runner, tmp_path: Path, read_json) -> None:
    cli_runner.invoke(cli, ["mcp", "add", "fs", "--command", "npx"])

    enabled = cli_runner.invoke(cli, ["mcp", "enable", "fs", "--app", "gemini"])
    assert enabled.exit_code == 0, enabled.output
    assert "fs" in read_json(tmp_path / ".gemini" / "settings.json")["mcpServers"]

    disabled = cli_runner.invoke(cli, ["mcp", "disable", "fs", "--app", "gemini"])
    assert disabled.exit_code == 0
    assert read_json(tmp_path / ".gemini" / "settings.json")["mcpServers"] == {}


def test_mcp_enable_unknown(cli_runner) -> None:
    result = cli_runner.invoke(cli, ["mcp", "enable", "ghost"])

    assert result.exit_code == 1
    assert "MCP server not found: ghost" in result.output


def test_mcp_import_and_remove(cli_runner, tmp_path: Path, write_json, read_json) -> None:
    write_json(tmp_path / ".claude.json", {"mcpServers": {"fs": {"command": "npx"}}})

    imported = cli_runner.invoke(cli, ["mcp", "import", "--app", "claude"])
    assert imported.exit_code == 0, imported.output
    assert "- fs" in imported.output

    again = cli_runner.invoke(cli, ["mcp", "import", "--app", "claude"])
    assert "Nothing new to import" in again.output

    removed = cli_runner.invoke(cli, ["mcp", "remove", "fs"])
    assert removed.exit_code == 0
    assert read_json(tmp_path / ".claude.json")["mcpServers"] == {}


def test_mcp_sync_reports_counts(cli_runner) -> None:
    cli_runner.invoke(cli, ["mcp", "add", "fs", "--command", "npx", "--app", "codex"])

    result = cli_runner.invoke(cli, ["mcp", "sync"])

    assert result.exit_code == 0, result.output
    assert "Codex CLI: 1 server(s)" in result.output
