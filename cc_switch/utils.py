import json
import os
import stat
import time
import uuid
from pathlib import Path
from typing import Any

from cc_switch.errors import FileIOError, InvalidJsonFormatError, SerializationError


def now_ts() -> int:
    return int(time.time())


def read_json(path: Path) -> Any:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def read_json_safe(path: Path) -> tuple[Any | None, str | None]:
    if not path.exists():
        return None, None
    if path.stat().st_size == 0:
        return None, None
    try:
        return read_json(path), None
    except (OSError, ValueError) as exc:
        return None, str(exc)


def load_json_object(path: Path) -> dict[str, Any]:
    """Load a JSON object from ``path``; a missing or empty file is ``{}``."""
    payload, error = read_json_safe(path)
    if error is not None:
        raise InvalidJsonFormatError(path, error)
    if payload is None:
        return {}
    if not isinstance(payload, dict):
        raise InvalidJsonFormatError(path, "must be a JSON object")
    return payload


def atomic_write(path: Path, data: bytes) -> None:
    """Replace ``path`` with ``data`` via a sibling temp file and rename.

    The target ends up holding either its previous content or ``data``,
    never a mix. Existing permission bits are carried over to the new file.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FileIOError(path.parent, str(exc)) from exc

    tmp_path = path.with_name(f"{path.name}.tmp.{uuid.uuid4().hex}")
    try:
        with tmp_path.open("wb") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        if path.exists():
            mode = stat.S_IMODE(path.stat().st_mode)
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, path)
    except OSError as exc:
        if tmp_path.exists():
            tmp_path.unlink()
        raise FileIOError(path, str(exc)) from exc


def write_text(path: Path, text: str) -> None:
    atomic_write(path, text.encode("utf-8"))


def dump_json(payload: Any) -> str:
    try:
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(exc)) from exc


def write_json(path: Path, payload: Any) -> None:
    write_text(path, dump_json(payload))


def compact_home_path(path: str | Path) -> str:
    text = str(path)
    home = str(Path.home())
    if text == home:
        return "~"
    home_prefix = f"{home}/"
    if text.startswith(home_prefix):
        return f"~/{text[len(home_prefix):]}"
    return text


def mask_secret(value: str) -> str:
    if not value:
        return ""
    if len(value) <= 8:
        return "*" * len(value)
    return f"{value[:4]}...{value[-4:]}"


_UNSAFE_NAME_CHARS = '<>:"/\\|?*'


def sanitize_name(name: str) -> str:
    return "".join("-" if char in _UNSAFE_NAME_CHARS else char for char in name).lower()
