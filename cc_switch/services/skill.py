"""Skill installation from git repositories and per-app symlink management."""

from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable

from cc_switch.apps.app_id import AppKind
from cc_switch.constants import DEFAULT_SKILL_BRANCH
from cc_switch.errors import (
    ConfigurationError,
    DuplicateEntityError,
    EntityNotFoundError,
    FileIOError,
    InvalidInputError,
)
from cc_switch.models import Skill, SkillRepo
from cc_switch.skills.parser import read_skill_manifest
from cc_switch.state import AppState

logger = logging.getLogger(__name__)

SKILL_KIND = "Skill"
SKILL_REPO_KIND = "Skill repo"

CloneRunner = Callable[[str, str, Path], None]


def git_clone(url: str, branch: str, destination: Path) -> None:
    command = ["git", "clone", "--depth", "1", "--branch", branch, url, str(destination)]
    try:
        result = subprocess.run(command, capture_output=True, text=True, check=False)
    except OSError as exc:
        raise ConfigurationError(f"Failed to run git clone: {exc}") from exc
    if result.returncode != 0:
        raise ConfigurationError(f"Failed to clone {url}: {result.stderr.strip()}")


def parse_repo(value: str) -> tuple[str, str]:
    parts = value.strip().split("/")
    if len(parts) != 2 or not all(parts):
        raise InvalidInputError(f"Repository must be in owner/name form: {value}")
    return parts[0], parts[1]


class SkillService:
    def __init__(self, state: AppState, clone: CloneRunner | None = None) -> None:
        self._state = state
        self._clone = clone or git_clone

    @property
    def skills_dir(self) -> Path:
        return self._state.paths.skills_store_dir()

    def app_skills_dir(self, app: AppKind) -> Path:
        return self._state.app_paths(app).skills_dir

    def list(self) -> dict[str, Skill]:
        return self._state.db.get_all_skills()

    def get(self, skill_id: str) -> Skill | None:
        return self._state.db.get_skill(skill_id)

    def _require(self, skill_id: str) -> Skill:
        skill = self.get(skill_id)
        if skill is None:
            raise EntityNotFoundError(SKILL_KIND, skill_id)
        return skill

    def install(self, repo: str, branch: str | None = None) -> Skill:
        owner, name = parse_repo(repo)
        branch = branch or DEFAULT_SKILL_BRANCH
        skill_id = f"{owner}-{name}"
        if self.get(skill_id) is not None:
            raise DuplicateEntityError(SKILL_KIND, skill_id)

        destination = self.skills_dir / skill_id
        if destination.exists():
            raise FileIOError(destination, "skill directory already exists")
        try:
            self.skills_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileIOError(self.skills_dir, str(exc)) from exc

        url = f"{SkillRepo(owner=owner, name=name).url()}.git"
        logger.debug("cloning %s (%s) into %s", url, branch, destination)
        self._clone(url, branch, destination)

        manifest = read_skill_manifest(destination)
        skill = Skill(
            id=skill_id,
            name=manifest.name if manifest is not None else name,
            description=(manifest.description or None) if manifest is not None else None,
            directory=str(destination),
            repo_owner=owner,
            repo_name=name,
            repo_branch=branch,
            readme_url=f"https://github.com/{owner}/{name}/blob/{branch}/README.md",
        )
        self._state.db.save_skill(skill)
        return skill

    def uninstall(self, skill_id: str) -> None:
        skill = self._require(skill_id)
        directory = Path(skill.directory)
        if directory.exists():
            try:
                shutil.rmtree(directory)
            except OSError as exc:
                raise FileIOError(directory, str(exc)) from exc
        for app in AppKind:
            self._remove_link(app, skill_id)
        self._state.db.delete_skill(skill_id)

    def toggle(self, skill_id: str, app: AppKind, enabled: bool) -> Skill:
        skill = self._require(skill_id)
        skill.apps.set_enabled_for(app, enabled)
        self._state.db.update_skill_apps(skill_id, skill.apps)
        if enabled:
            self._create_link(app, skill)
        else:
            self._remove_link(app, skill_id)
        return skill

    def sync_all(self) -> None:
        skills = self.list()
        for app in AppKind:
            for skill in skills.values():
                if skill.apps.is_enabled_for(app):
                    self._create_link(app, skill)
                else:
                    self._remove_link(app, skill.id)

    def scan(self) -> list[str]:
        """Register skill directories that exist on disk but not in the store."""
        if not self.skills_dir.is_dir():
            return []
        found: list[str] = []
        for path in sorted(self.skills_dir.iterdir()):
            if not path.is_dir() or self.get(path.name) is not None:
                continue
            manifest = read_skill_manifest(path)
            skill = Skill(
                id=path.name,
                name=manifest.name if manifest is not None else path.name,
                description=(manifest.description or None) if manifest is not None else None,
                directory=str(path),
            )
            self._state.db.save_skill(skill)
            found.append(path.name)
        return found

    def _create_link(self, app: AppKind, skill: Skill) -> None:
        link = self.app_skills_dir(app) / skill.id
        source = Path(skill.directory)
        if link.is_symlink():
            if link.resolve() == source.resolve():
                return
            link.unlink()
        elif link.exists():
            raise FileIOError(link, "non-symlink path exists")
        try:
            link.parent.mkdir(parents=True, exist_ok=True)
            link.symlink_to(source.resolve(), target_is_directory=True)
        except OSError as exc:
            raise FileIOError(link, str(exc)) from exc

    def _remove_link(self, app: AppKind, skill_id: str) -> None:
        link = self.app_skills_dir(app) / skill_id
        if link.is_symlink():
            link.unlink()
        elif link.exists():
            logger.debug("leaving non-symlink skill path in place: %s", link)

    # repositories

    def list_repos(self) -> list[SkillRepo]:
        return self._state.db.get_all_skill_repos()

    def add_repo(self, repo: SkillRepo) -> None:
        if self._state.db.get_skill_repo(repo.id) is not None:
            raise DuplicateEntityError(SKILL_REPO_KIND, repo.id)
        self._state.db.save_skill_repo(repo)

    def remove_repo(self, repo_id: str) -> None:
        if not self._state.db.delete_skill_repo(repo_id):
            raise EntityNotFoundError(SKILL_REPO_KIND, repo_id)
