"""SQLite persistence for providers, MCP servers, prompts, skills and settings."""

from __future__ import annotations

import json
import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from cc_switch.apps.app_id import AppKind
from cc_switch.errors import DatabaseError, LockError, SerializationError
from cc_switch.models import (
    AppFlags,
    McpServer,
    Prompt,
    Provider,
    ProviderMeta,
    Skill,
    SkillRepo,
)

logger = logging.getLogger(__name__)

SCHEMA_VERSION = 1

_ENABLED_COLUMNS = [f"enabled_{app.value}" for app in AppKind]
_ENABLED_DDL = ",\n".join(
    f"                {column} INTEGER NOT NULL DEFAULT 0" for column in _ENABLED_COLUMNS
)

_PROVIDER_COLUMNS = (
    "id, name, settings_config, website_url, category, created_at, sort_index, "
    "notes, meta, icon, icon_color, in_failover_queue"
)
_MCP_COLUMNS = (
    "id, name, server_config, description, homepage, docs, tags, "
    + ", ".join(_ENABLED_COLUMNS)
    + ", created_at, sort_index"
)
_SKILL_COLUMNS = (
    "id, name, description, directory, repo_owner, repo_name, repo_branch, readme_url, "
    + ", ".join(_ENABLED_COLUMNS)
    + ", installed_at"
)


def _to_json(value: Any) -> str:
    try:
        return json.dumps(value, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SerializationError(str(exc)) from exc


def _from_json(text: str | None, column: str) -> Any:
    if text is None:
        return None
    try:
        return json.loads(text)
    except ValueError as exc:
        raise SerializationError(f"column {column}: {exc}") from exc


def _flags_from_row(row: sqlite3.Row) -> AppFlags:
    return AppFlags({app: bool(row[f"enabled_{app.value}"]) for app in AppKind})


def _flags_params(flags: AppFlags) -> list[int]:
    return [1 if flags.is_enabled_for(app) else 0 for app in AppKind]


class Database:
    """Owns the single shared connection; every statement runs under one lock.

    Multi-statement operations are not transactional: each statement commits
    on its own.
    """

    def __init__(
        self, conn: sqlite3.Connection, lock_timeout: float = 10.0
    ) -> None:
        self._conn = conn
        self._conn.row_factory = sqlite3.Row
        self._lock = threading.Lock()
        self._lock_timeout = lock_timeout
        self._init_db()

    @classmethod
    def open(cls, db_path: Path) -> "Database":
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(db_path), check_same_thread=False)
        except (OSError, sqlite3.Error) as exc:
            raise DatabaseError(f"cannot open {db_path}: {exc}") from exc
        logger.debug("opened database at %s", db_path)
        return cls(conn)

    @classmethod
    def memory(cls) -> "Database":
        return cls(sqlite3.connect(":memory:", check_same_thread=False))

    def close(self) -> None:
        with self._locked() as conn:
            conn.close()

    @contextmanager
    def _locked(self) -> Iterator[sqlite3.Connection]:
        if not self._lock.acquire(timeout=self._lock_timeout):
            raise LockError("database connection lock acquisition timed out")
        try:
            yield self._conn
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        finally:
            self._lock.release()

    def _execute(self, sql: str, params: tuple | list = ()) -> int:
        with self._locked() as conn:
            cursor = conn.execute(sql, params)
            conn.commit()
            return cursor.rowcount

    def _fetchall(self, sql: str, params: tuple | list = ()) -> list[sqlite3.Row]:
        with self._locked() as conn:
            return conn.execute(sql, params).fetchall()

    def _fetchone(self, sql: str, params: tuple | list = ()) -> sqlite3.Row | None:
        with self._locked() as conn:
            return conn.execute(sql, params).fetchone()

    def _init_db(self) -> None:
        with self._locked() as conn:
            conn.executescript(
                f"""
            CREATE TABLE IF NOT EXISTS providers (
                id TEXT NOT NULL,
                app_type TEXT NOT NULL,
                name TEXT NOT NULL,
                settings_config TEXT NOT NULL,
                website_url TEXT,
                category TEXT,
                created_at INTEGER,
                sort_index INTEGER,
                notes TEXT,
                meta TEXT,
                icon TEXT,
                icon_color TEXT,
                in_failover_queue INTEGER NOT NULL DEFAULT 0,
                is_current INTEGER NOT NULL DEFAULT 0,
                PRIMARY KEY (id, app_type)
            );

            CREATE TABLE IF NOT EXISTS mcp_servers (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                server_config TEXT NOT NULL,
                description TEXT,
                homepage TEXT,
                docs TEXT,
                tags TEXT,
{_ENABLED_DDL},
                created_at INTEGER,
                sort_index INTEGER
            );

            CREATE TABLE IF NOT EXISTS prompts (
                id TEXT NOT NULL,
                app_type TEXT NOT NULL,
                name TEXT NOT NULL,
                content TEXT NOT NULL,
                description TEXT,
                enabled INTEGER NOT NULL DEFAULT 0,
                created_at INTEGER,
                updated_at INTEGER,
                PRIMARY KEY (id, app_type)
            );

            CREATE TABLE IF NOT EXISTS skills (
                id TEXT PRIMARY KEY,
                name TEXT NOT NULL,
                description TEXT,
                directory TEXT NOT NULL,
                repo_owner TEXT,
                repo_name TEXT,
                repo_branch TEXT,
                readme_url TEXT,
{_ENABLED_DDL},
                installed_at INTEGER
            );

            CREATE TABLE IF NOT EXISTS skill_repos (
                id TEXT PRIMARY KEY,
                owner TEXT NOT NULL,
                name TEXT NOT NULL,
                branch TEXT NOT NULL,
                enabled INTEGER NOT NULL DEFAULT 1
            );

            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );

            CREATE INDEX IF NOT EXISTS idx_providers_app_type ON providers (app_type);
            CREATE INDEX IF NOT EXISTS idx_providers_is_current ON providers (is_current);
            """
            )
            self._migrate_enabled_columns(conn, "mcp_servers")
            self._migrate_enabled_columns(conn, "skills")
            conn.execute(f"PRAGMA user_version = {SCHEMA_VERSION}")
            conn.commit()

    @staticmethod
    def _migrate_enabled_columns(conn: sqlite3.Connection, table: str) -> None:
        cols = {
            str(row["name"])
            for row in conn.execute(f"PRAGMA table_info({table})").fetchall()
        }
        for column in _ENABLED_COLUMNS:
            if column not in cols:
                conn.execute(
                    f"ALTER TABLE {table} ADD COLUMN {column} INTEGER NOT NULL DEFAULT 0"
                )

    def schema_version(self) -> int:
        row = self._fetchone("PRAGMA user_version")
        return int(row[0]) if row is not None else 0

    # providers

    @staticmethod
    def _provider_from_row(row: sqlite3.Row) -> Provider:
        meta = _from_json(row["meta"], "meta")
        return Provider(
            id=row["id"],
            name=row["name"],
            settings_config=_from_json(row["settings_config"], "settings_config"),
            website_url=row["website_url"],
            category=row["category"],
            created_at=row["created_at"],
            sort_index=row["sort_index"],
            notes=row["notes"],
            meta=ProviderMeta.from_dict(meta) if isinstance(meta, dict) else None,
            icon=row["icon"],
            icon_color=row["icon_color"],
            in_failover_queue=bool(row["in_failover_queue"]),
        )

    def get_all_providers(self, app_type: str) -> dict[str, Provider]:
        rows = self._fetchall(
            f"""
            SELECT {_PROVIDER_COLUMNS}
            FROM providers
            WHERE app_type = ?
            ORDER BY sort_index IS NULL, sort_index ASC, created_at ASC
            """,
            (app_type,),
        )
        providers: dict[str, Provider] = {}
        for row in rows:
            provider = self._provider_from_row(row)
            providers[provider.id] = provider
        return providers

    def get_provider(self, app_type: str, provider_id: str) -> Provider | None:
        row = self._fetchone(
            f"SELECT {_PROVIDER_COLUMNS} FROM providers WHERE app_type = ? AND id = ?",
            (app_type, provider_id),
        )
        return self._provider_from_row(row) if row is not None else None

    def save_provider(self, app_type: str, provider: Provider) -> None:
        meta = _to_json(provider.meta.as_dict()) if provider.meta is not None else None
        self._execute(
            """
            INSERT INTO providers (
                id, app_type, name, settings_config, website_url, category, created_at,
                sort_index, notes, meta, icon, icon_color, in_failover_queue
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (id, app_type) DO UPDATE SET
                name = excluded.name,
                settings_config = excluded.settings_config,
                website_url = excluded.website_url,
                category = excluded.category,
                created_at = excluded.created_at,
                sort_index = excluded.sort_index,
                notes = excluded.notes,
                meta = excluded.meta,
                icon = excluded.icon,
                icon_color = excluded.icon_color,
                in_failover_queue = excluded.in_failover_queue
            """,
            (
                provider.id,
                app_type,
                provider.name,
                _to_json(provider.settings_config),
                provider.website_url,
                provider.category,
                provider.created_at,
                provider.sort_index,
                provider.notes,
                meta,
                provider.icon,
                provider.icon_color,
                1 if provider.in_failover_queue else 0,
            ),
        )

    def delete_provider(self, app_type: str, provider_id: str) -> bool:
        deleted = self._execute(
            "DELETE FROM providers WHERE id = ? AND app_type = ?",
            (provider_id, app_type),
        )
        return deleted > 0

    def get_current_provider(self, app_type: str) -> str | None:
        row = self._fetchone(
            "SELECT id FROM providers WHERE app_type = ? AND is_current = 1",
            (app_type,),
        )
        return str(row["id"]) if row is not None else None

    def set_current_provider(self, app_type: str, provider_id: str) -> None:
        self._execute(
            "UPDATE providers SET is_current = 0 WHERE app_type = ?", (app_type,)
        )
        self._execute(
            "UPDATE providers SET is_current = 1 WHERE id = ? AND app_type = ?",
            (provider_id, app_type),
        )

    def get_provider_count(self, app_type: str) -> int:
        row = self._fetchone(
            "SELECT COUNT(*) FROM providers WHERE app_type = ?", (app_type,)
        )
        return int(row[0]) if row is not None else 0

    # mcp servers

    @staticmethod
    def _mcp_from_row(row: sqlite3.Row) -> McpServer:
        tags = _from_json(row["tags"], "tags")
        return McpServer(
            id=row["id"],
            name=row["name"],
            server_config=_from_json(row["server_config"], "server_config"),
            apps=_flags_from_row(row),
            description=row["description"],
            homepage=row["homepage"],
            docs=row["docs"],
            tags=[str(tag) for tag in tags] if isinstance(tags, list) else [],
            created_at=row["created_at"],
            sort_index=row["sort_index"],
        )

    def get_all_mcp_servers(self) -> dict[str, McpServer]:
        rows = self._fetchall(
            f"""
            SELECT {_MCP_COLUMNS}
            FROM mcp_servers
            ORDER BY sort_index IS NULL, sort_index ASC, created_at ASC
            """
        )
        servers: dict[str, McpServer] = {}
        for row in rows:
            server = self._mcp_from_row(row)
            servers[server.id] = server
        return servers

    def get_mcp_server(self, server_id: str) -> McpServer | None:
        row = self._fetchone(
            f"SELECT {_MCP_COLUMNS} FROM mcp_servers WHERE id = ?", (server_id,)
        )
        return self._mcp_from_row(row) if row is not None else None

    def save_mcp_server(self, server: McpServer) -> None:
        placeholders = ", ".join("?" for _ in range(9 + len(_ENABLED_COLUMNS)))
        self._execute(
            f"INSERT OR REPLACE INTO mcp_servers ({_MCP_COLUMNS}) VALUES ({placeholders})",
            [
                server.id,
                server.name,
                _to_json(server.server_config),
                server.description,
                server.homepage,
                server.docs,
                _to_json(server.tags),
                *_flags_params(server.apps),
                server.created_at,
                server.sort_index,
            ],
        )

    def delete_mcp_server(self, server_id: str) -> bool:
        return self._execute("DELETE FROM mcp_servers WHERE id = ?", (server_id,)) > 0

    def update_mcp_server_apps(self, server_id: str, apps: AppFlags) -> None:
        assignments = ", ".join(f"{column} = ?" for column in _ENABLED_COLUMNS)
        self._execute(
            f"UPDATE mcp_servers SET {assignments} WHERE id = ?",
            [*_flags_params(apps), server_id],
        )

    def get_mcp_server_count(self) -> int:
        row = self._fetchone("SELECT COUNT(*) FROM mcp_servers")
        return int(row[0]) if row is not None else 0

    # prompts

    @staticmethod
    def _prompt_from_row(row: sqlite3.Row) -> Prompt:
        return Prompt(
            id=row["id"],
            name=row["name"],
            content=row["content"],
            description=row["description"],
            enabled=bool(row["enabled"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
        )

    def get_all_prompts(self, app_type: str) -> dict[str, Prompt]:
        rows = self._fetchall(
            """
            SELECT id, name, content, description, enabled, created_at, updated_at
            FROM prompts
            WHERE app_type = ?
            ORDER BY created_at ASC
            """,
            (app_type,),
        )
        prompts: dict[str, Prompt] = {}
        for row in rows:
            prompt = self._prompt_from_row(row)
            prompts[prompt.id] = prompt
        return prompts

    def get_prompt(self, app_type: str, prompt_id: str) -> Prompt | None:
        row = self._fetchone(
            """
            SELECT id, name, content, description, enabled, created_at, updated_at
            FROM prompts
            WHERE app_type = ? AND id = ?
            """,
            (app_type, prompt_id),
        )
        return self._prompt_from_row(row) if row is not None else None

    def save_prompt(self, app_type: str, prompt: Prompt) -> None:
        self._execute(
            """
            INSERT OR REPLACE INTO prompts
            (id, app_type, name, content, description, enabled, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                prompt.id,
                app_type,
                prompt.name,
                prompt.content,
                prompt.description,
                1 if prompt.enabled else 0,
                prompt.created_at,
                prompt.updated_at,
            ),
        )

    def delete_prompt(self, app_type: str, prompt_id: str) -> bool:
        deleted = self._execute(
            "DELETE FROM prompts WHERE id = ? AND app_type = ?", (prompt_id, app_type)
        )
        return deleted > 0

    def update_prompt_enabled(
        self, app_type: str, prompt_id: str, enabled: bool, updated_at: int
    ) -> None:
        self._execute(
            "UPDATE prompts SET enabled = ?, updated_at = ? WHERE id = ? AND app_type = ?",
            (1 if enabled else 0, updated_at, prompt_id, app_type),
        )

    def get_enabled_prompt(self, app_type: str) -> Prompt | None:
        for prompt in self.get_all_prompts(app_type).values():
            if prompt.enabled:
                return prompt
        return None

    # skills

    @staticmethod
    def _skill_from_row(row: sqlite3.Row) -> Skill:
        return Skill(
            id=row["id"],
            name=row["name"],
            description=row["description"],
            directory=row["directory"],
            repo_owner=row["repo_owner"],
            repo_name=row["repo_name"],
            repo_branch=row["repo_branch"],
            readme_url=row["readme_url"],
            apps=_flags_from_row(row),
            installed_at=row["installed_at"],
        )

    def get_all_skills(self) -> dict[str, Skill]:
        rows = self._fetchall(
            f"SELECT {_SKILL_COLUMNS} FROM skills ORDER BY installed_at ASC"
        )
        skills: dict[str, Skill] = {}
        for row in rows:
            skill = self._skill_from_row(row)
            skills[skill.id] = skill
        return skills

    def get_skill(self, skill_id: str) -> Skill | None:
        row = self._fetchone(
            f"SELECT {_SKILL_COLUMNS} FROM skills WHERE id = ?", (skill_id,)
        )
        return self._skill_from_row(row) if row is not None else None

    def save_skill(self, skill: Skill) -> None:
        placeholders = ", ".join("?" for _ in range(9 + len(_ENABLED_COLUMNS)))
        self._execute(
            f"INSERT OR REPLACE INTO skills ({_SKILL_COLUMNS}) VALUES ({placeholders})",
            [
                skill.id,
                skill.name,
                skill.description,
                skill.directory,
                skill.repo_owner,
                skill.repo_name,
                skill.repo_branch,
                skill.readme_url,
                *_flags_params(skill.apps),
                skill.installed_at,
            ],
        )

    def delete_skill(self, skill_id: str) -> bool:
        return self._execute("DELETE FROM skills WHERE id = ?", (skill_id,)) > 0

    def update_skill_apps(self, skill_id: str, apps: AppFlags) -> None:
        assignments = ", ".join(f"{column} = ?" for column in _ENABLED_COLUMNS)
        self._execute(
            f"UPDATE skills SET {assignments} WHERE id = ?",
            [*_flags_params(apps), skill_id],
        )

    # skill repos

    def get_all_skill_repos(self) -> list[SkillRepo]:
        rows = self._fetchall(
            "SELECT owner, name, branch, enabled FROM skill_repos ORDER BY id ASC"
        )
        return [
            SkillRepo(
                owner=row["owner"],
                name=row["name"],
                branch=row["branch"],
                enabled=bool(row["enabled"]),
            )
            for row in rows
        ]

    def get_skill_repo(self, repo_id: str) -> SkillRepo | None:
        row = self._fetchone(
            "SELECT owner, name, branch, enabled FROM skill_repos WHERE id = ?",
            (repo_id,),
        )
        if row is None:
            return None
        return SkillRepo(
            owner=row["owner"],
            name=row["name"],
            branch=row["branch"],
            enabled=bool(row["enabled"]),
        )

    def save_skill_repo(self, repo: SkillRepo) -> None:
        self._execute(
            "INSERT OR REPLACE INTO skill_repos (id, owner, name, branch, enabled) "
            "VALUES (?, ?, ?, ?, ?)",
            (repo.id, repo.owner, repo.name, repo.branch, 1 if repo.enabled else 0),
        )

    def delete_skill_repo(self, repo_id: str) -> bool:
        return self._execute("DELETE FROM skill_repos WHERE id = ?", (repo_id,)) > 0

    # settings

    def get_setting(self, key: str) -> str | None:
        row = self._fetchone("SELECT value FROM settings WHERE key = ?", (key,))
        return str(row["value"]) if row is not None else None

    def set_setting(self, key: str, value: str) -> None:
        self._execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)", (key, value)
        )

    def delete_setting(self, key: str) -> bool:
        return self._execute("DELETE FROM settings WHERE key = ?", (key,)) > 0
