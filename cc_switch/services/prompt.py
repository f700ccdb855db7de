from __future__ import annotations

import logging

from cc_switch.apps.app_id import AppKind
from cc_switch.errors import DuplicateEntityError, EntityNotFoundError
from cc_switch.models import Prompt
from cc_switch.state import AppState
from cc_switch.utils import now_ts

logger = logging.getLogger(__name__)

PROMPT_KIND = "Prompt"


class PromptService:
    """Per-app prompt library; at most one prompt per app is enabled."""

    def __init__(self, state: AppState) -> None:
        self._state = state

    def list(self, app: AppKind) -> dict[str, Prompt]:
        return self._state.db.get_all_prompts(app.value)

    def get(self, app: AppKind, prompt_id: str) -> Prompt | None:
        return self._state.db.get_prompt(app.value, prompt_id)

    def enabled(self, app: AppKind) -> Prompt | None:
        return self._state.db.get_enabled_prompt(app.value)

    def _require(self, app: AppKind, prompt_id: str) -> Prompt:
        prompt = self.get(app, prompt_id)
        if prompt is None:
            raise EntityNotFoundError(PROMPT_KIND, prompt_id)
        return prompt

    def _disable_others(self, app: AppKind, keep_id: str | None) -> None:
        timestamp = now_ts()
        for prompt_id, prompt in self.list(app).items():
            if prompt_id != keep_id and prompt.enabled:
                self._state.db.update_prompt_enabled(app.value, prompt_id, False, timestamp)

    def add(self, app: AppKind, prompt: Prompt) -> None:
        if self.get(app, prompt.id) is not None:
            raise DuplicateEntityError(PROMPT_KIND, prompt.id)
        if prompt.enabled:
            self._disable_others(app, prompt.id)
        self._state.db.save_prompt(app.value, prompt)
        if prompt.enabled:
            self.sync_to_app(app)

    def update(self, app: AppKind, prompt: Prompt) -> None:
        self._require(app, prompt.id)
        prompt.updated_at = now_ts()
        if prompt.enabled:
            self._disable_others(app, prompt.id)
        self._state.db.save_prompt(app.value, prompt)
        self.sync_to_app(app)

    def remove(self, app: AppKind, prompt_id: str) -> None:
        prompt = self._require(app, prompt_id)
        self._state.db.delete_prompt(app.value, prompt_id)
        if prompt.enabled:
            self.sync_to_app(app)

    def enable(self, app: AppKind, prompt_id: str) -> None:
        self._require(app, prompt_id)
        self._disable_others(app, prompt_id)
        self._state.db.update_prompt_enabled(app.value, prompt_id, True, now_ts())
        logger.debug("enabled prompt %s for %s", prompt_id, app.value)
        self.sync_to_app(app)

    def disable(self, app: AppKind, prompt_id: str) -> None:
        self._require(app, prompt_id)
        self._state.db.update_prompt_enabled(app.value, prompt_id, False, now_ts())
        self.sync_to_app(app)

    def import_from_app(self, app: AppKind) -> str | None:
        """Store a non-empty live prompt file as the enabled prompt for ``app``."""
        content = self._state.projector(app).read_live_prompt()
        if content is None or not content.strip():
            return None

        prompt_id = f"imported-{now_ts()}"
        while self.get(app, prompt_id) is not None:
            prompt_id = f"{prompt_id}-1"
        prompt = Prompt(
            id=prompt_id,
            name=f"Imported from {app.label}",
            content=content,
            enabled=True,
        )
        self._disable_others(app, None)
        self._state.db.save_prompt(app.value, prompt)
        return prompt_id

    def sync_to_app(self, app: AppKind) -> None:
        self._state.projector(app).sync_prompt(self.enabled(app))

    def sync_all(self) -> None:
        for app in AppKind:
            self.sync_to_app(app)
