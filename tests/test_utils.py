import json
import os
import stat
from pathlib import Path

import pytest

from cc_switch.errors import FileIOError, InvalidJsonFormatError
from cc_switch.utils import (
    atomic_write,
    compact_home_path,
    load_json_object,
    mask_secret,
    read_json_safe,
    sanitize_name,
    write_json,
)


# --- read_json_safe / load_json_object ---


def test_read_json_safe_file_missing(tmp_path: Path) -> None:
    result, error = read_json_safe(tmp_path / "missing.json")

    assert result is None
    assert error is None


def test_read_json_safe_invalid_json(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")

    result, error = read_json_safe(path)

    assert result is None
    assert error is not None


def test_load_json_object_empty_file_is_empty_dict(tmp_path: Path) -> None:
    path = tmp_path / "empty.json"
    path.write_text("", encoding="utf-8")

    assert load_json_object(path) == {}


def test_load_json_object_rejects_malformed(tmp_path: Path) -> None:
    path = tmp_path / "bad.json"
    path.write_text("{", encoding="utf-8")

    with pytest.raises(InvalidJsonFormatError) as exc_info:
        load_json_object(path)

    assert exc_info.value.path == path


def test_load_json_object_rejects_non_object(tmp_path: Path) -> None:
    path = tmp_path / "list.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(InvalidJsonFormatError):
        load_json_object(path)


# --- atomic_write ---


def test_atomic_write_creates_parent_and_file(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "dir" / "out.txt"

    atomic_write(target, b"hello")

    assert target.read_bytes() == b"hello"
    assert [p.name for p in target.parent.iterdir()] == ["out.txt"]


def test_atomic_write_preserves_permissions(tmp_path: Path) -> None:
    target = tmp_path / "secret.json"
    target.write_text("{}", encoding="utf-8")
    os.chmod(target, 0o600)

    write_json(target, {"key": "value"})

    assert stat.S_IMODE(target.stat().st_mode) == 0o600
    assert json.loads(target.read_text(encoding="utf-8")) == {"key": "value"}


def test_atomic_write_failure_before_rename_leaves_target_intact(
    tmp_path: Path, monkeypatch
) -> None:
    target = tmp_path / "settings.json"
    original = b'{"env": {"ANTHROPIC_AUTH_TOKEN": "old"}}\n'
    target.write_bytes(original)

    def _fail_replace(src, dst):
        raise OSError("simulated crash before rename")

    monkeypatch.setattr(os, "replace", _fail_replace)

    with pytest.raises(FileIOError) as exc_info:
        atomic_write(target, b'{"env": {"ANTHROPIC_AUTH_TOKEN": "new"}}\n')

    assert exc_info.value.path == target
    assert target.read_bytes() == original
    assert [p.name for p in tmp_path.iterdir()] == ["settings.json"]


# --- helpers ---


def test_compact_home_path(tmp_path: Path) -> None:
    assert compact_home_path(tmp_path) == "~"
    assert compact_home_path(tmp_path / ".claude" / "settings.json") == "~/.claude/settings.json"
    assert compact_home_path("/etc/hosts") == "/etc/hosts"


def test_mask_secret() -> None:
    assert mask_secret("") == ""
    assert mask_secret("short") == "*****"
    assert mask_secret("sk-ant-1234567890") == "sk-a...7890"


def test_sanitize_name() -> None:
    assert sanitize_name("My/Provider:One") == "my-provider-one"
