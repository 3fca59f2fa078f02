# src/smart_todo/core/state.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

from ..llm.service import AIService
from ..tasks.task_models import Profile
from ..tasks.task_store import CredentialStore, ProfileStore, TaskList
from .ports import CompletionTransport


@dataclass
class AppState:
    """
    Everything the console session works with.

    ai is None until a credential is configured; it is rebuilt whenever the
    credential changes and handed to the orchestration functions explicitly
    (core/todo.py) instead of being read from a module-level global.
    """

    settings: Any

    tasks: TaskList
    profile_store: ProfileStore
    credentials: CredentialStore
    transport: CompletionTransport

    profile: Profile = field(default_factory=Profile)
    ai: AIService | None = None

    suggestions: list[str] = field(default_factory=list)

    # In-flight background work (categorization) and the single suggestion refresh.
    pending: set[asyncio.Task[Any]] = field(default_factory=set)
    suggestion_refresh: asyncio.Task[list[str]] | None = None

    def set_credential(self, api_key: str | None) -> None:
        """Store (or clear) the key and rebuild the AI client to match."""
        if api_key is None or not api_key.strip():
            self.credentials.clear()
            self.ai = None
            self.suggestions = []
            return
        key = self.credentials.set(api_key)
        self.ai = AIService(key, self.transport, model=getattr(self.settings, "default_model", None))

    def update_profile(self, profile: Profile) -> None:
        self.profile_store.save(profile)
        self.profile = profile
