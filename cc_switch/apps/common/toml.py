import datetime
import re
from pathlib import Path
from typing import Any

try:
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    import tomli as tomllib  # type: ignore

from cc_switch.errors import InvalidTomlFormatError, SerializationError

_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")


def loads(text: str, path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise InvalidTomlFormatError(path, str(exc)) from exc


def load_file(path: Path) -> dict[str, Any]:
    if not path.exists() or path.stat().st_size == 0:
        return {}
    return loads(path.read_text(encoding="utf-8"), path)


def _dump_key(key: str) -> str:
    if _BARE_KEY.match(key):
        return key
    return _dump_toml_value(key)


def _dump_toml_value(value: Any) -> str:
    if value is None:
        return '""'
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(value, (datetime.datetime, datetime.date, datetime.time)):
        return value.isoformat()
    if isinstance(value, list):
        return "[" + ", ".join(_dump_toml_value(item) for item in value) + "]"
    if isinstance(value, dict):
        items = ", ".join(
            f"{_dump_key(str(k))} = {_dump_toml_value(v)}" for k, v in value.items()
        )
        return "{ " + items + " }" if items else "{}"
    if isinstance(value, str):
        escaped = (
            value.replace("\\", "\\\\")
            .replace('"', '\\"')
            .replace("\n", "\\n")
            .replace("\r", "\\r")
            .replace("\t", "\\t")
        )
        return f'"{escaped}"'
    raise SerializationError(f"unsupported TOML value type: {type(value).__name__}")


def _dump_table(lines: list[str], prefix: str, table: dict[str, Any]) -> None:
    scalars = [(k, v) for k, v in table.items() if not isinstance(v, dict)]
    tables = [(k, v) for k, v in table.items() if isinstance(v, dict)]

    if prefix and (scalars or not tables):
        lines.append(f"[{prefix}]")
    for key, value in scalars:
        lines.append(f"{_dump_key(str(key))} = {_dump_toml_value(value)}")
    if scalars or (prefix and not tables):
        lines.append("")

    for key, value in tables:
        name = _dump_key(str(key))
        _dump_table(lines, f"{prefix}.{name}" if prefix else name, value)


def dumps(payload: dict[str, Any]) -> str:
    """Serialize a TOML document; nested dicts become ``[a.b]`` tables."""
    lines: list[str] = []
    _dump_table(lines, "", payload)
    text = "\n".join(lines).strip()
    return text + "\n" if text else ""
