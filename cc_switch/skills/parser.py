"""Read skill name and description from ``SKILL.md`` YAML frontmatter."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

import yaml

from cc_switch.constants import SKILL_MANIFEST_FILENAME
from cc_switch.errors import FileIOError, SerializationError

_FRONTMATTER_RE = re.compile(r"^---\s*\n(.*?)\n---\s*\n", re.DOTALL)


@dataclass(frozen=True)
class SkillManifest:
    name: str
    description: str = ""
    content: str = ""


def parse_manifest_text(text: str, default_name: str, path: Path | None = None) -> SkillManifest:
    match = _FRONTMATTER_RE.match(text)
    if match:
        try:
            raw = yaml.safe_load(match.group(1)) or {}
        except yaml.YAMLError as exc:
            raise SerializationError(f"invalid frontmatter: {exc}", path=path) from exc
        content = text[match.end() :]
    else:
        raw = {}
        content = text

    if not isinstance(raw, dict):
        raw = {}

    name = raw.get("name")
    description = raw.get("description")
    return SkillManifest(
        name=str(name) if name else default_name,
        description=str(description) if description else "",
        content=content,
    )


def read_skill_manifest(directory: Path) -> SkillManifest | None:
    """Parse ``<directory>/SKILL.md``; ``None`` when the skill ships no manifest."""
    path = directory / SKILL_MANIFEST_FILENAME
    if not path.is_file():
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise FileIOError(path, str(exc)) from exc
    return parse_manifest_text(text, default_name=directory.name, path=path)
