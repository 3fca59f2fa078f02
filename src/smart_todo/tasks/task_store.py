# src/smart_todo/tasks/task_store.py

from __future__ import annotations

import json
import logging
import time
from dataclasses import replace
from datetime import UTC, datetime
from typing import Callable

from ..core.ports import KeyValueStorage
from .task_models import (
    FALLBACK_CATEGORY,
    PLACEHOLDER_CATEGORY,
    CategorizationResult,
    Priority,
    Profile,
    Task,
)

logger = logging.getLogger(__name__)

TASKS_KEY = "smart-todos"
PROFILE_KEY = "user-profile"
CREDENTIAL_KEY = "claude-api-key"


def _now_ms() -> int:
    return time.time_ns() // 1_000_000


def _now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


class TaskList:
    """
    The task list and its persistence.

    Invariants:
    - the list is never mutated in place: every change builds a new list and swaps it in
      (readers holding the previous list keep a consistent snapshot)
    - the list is persisted after every mutation
    - ids are unique and increasing in insertion order
    - task id is the only join key for asynchronous updates; an update for an id that
      is no longer present is dropped
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        clock_ms: Callable[[], int] = _now_ms,
        clock_iso: Callable[[], str] = _now_iso,
    ) -> None:
        self._storage = storage
        self._clock_ms = clock_ms
        self._clock_iso = clock_iso
        self._tasks: list[Task] = self._load()
        logger.info("TaskList ready total=%d", len(self._tasks))

    # ---- persistence ----

    def _load(self) -> list[Task]:
        raw = self._storage.get(TASKS_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except Exception:
            logger.exception("Stored task list is not valid JSON; starting empty")
            return []
        if not isinstance(data, list):
            logger.warning("Stored task list is not a list; starting empty")
            return []

        out: list[Task] = []
        seen: set[int] = set()
        for item in data:
            if not isinstance(item, dict):
                continue
            try:
                task = Task.from_dict(item)
            except Exception:
                logger.warning("Skipping unreadable stored task: %r", item)
                continue
            if task.id in seen:
                continue
            seen.add(task.id)
            out.append(task)
        return out

    def _replace(self, tasks: list[Task]) -> None:
        self._tasks = tasks
        self._storage.set(TASKS_KEY, json.dumps([t.to_dict() for t in tasks], ensure_ascii=False))

    def _next_id(self) -> int:
        candidate = self._clock_ms()
        if self._tasks:
            candidate = max(candidate, max(t.id for t in self._tasks) + 1)
        return candidate

    # ---- queries ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def get(self, task_id: int) -> Task | None:
        return next((t for t in self._tasks if t.id == task_id), None)

    def completed(self) -> list[Task]:
        return [t for t in self._tasks if t.completed]

    def incomplete(self) -> list[Task]:
        return [t for t in self._tasks if not t.completed]

    def stats(self) -> dict[str, int]:
        total = len(self._tasks)
        done = len(self.completed())
        percent = int(done * 100 / total + 0.5) if total else 0
        return {
            "total": total,
            "completed": done,
            "remaining": total - done,
            "percent_done": percent,
        }

    # ---- mutations ----

    def add(self, text: str, *, from_suggestion: bool = False) -> Task:
        """Append a task in the placeholder (pending) state and persist."""
        clean = (text or "").strip()
        if not clean:
            raise ValueError("Task text must not be empty.")

        task = Task(
            id=self._next_id(),
            text=clean,
            category=PLACEHOLDER_CATEGORY,
            priority=Priority.MEDIUM,
            completed=False,
            created_at=self._clock_iso(),
            from_suggestion=from_suggestion,
        )
        self._replace([*self._tasks, task])
        logger.info("Task added id=%s from_suggestion=%s", task.id, from_suggestion)
        return task

    def apply_categorization(self, task_id: int, result: CategorizationResult) -> Task | None:
        current = self.get(task_id)
        if current is None:
            logger.debug("Categorization for missing task id=%s dropped", task_id)
            return None

        updated = replace(
            current,
            category=result.category,
            priority=result.priority,
            ai_reasoning=result.reasoning,
            suggested_time=result.suggested_time,
            is_routine=result.is_routine,
        )
        self._replace([updated if t.id == task_id else t for t in self._tasks])
        logger.info(
            "Task categorized id=%s category=%s priority=%s",
            task_id,
            updated.category,
            updated.priority.value,
        )
        return updated

    def settle_uncategorized(self, task_id: int) -> Task | None:
        """Leave AI fields unset, only drop the placeholder category (no AI client configured)."""
        current = self.get(task_id)
        if current is None:
            return None
        updated = replace(current, category=FALLBACK_CATEGORY)
        self._replace([updated if t.id == task_id else t for t in self._tasks])
        return updated

    def toggle(self, task_id: int) -> Task | None:
        current = self.get(task_id)
        if current is None:
            return None
        updated = replace(current, completed=not current.completed)
        self._replace([updated if t.id == task_id else t for t in self._tasks])
        return updated

    def delete(self, task_id: int) -> bool:
        remaining = [t for t in self._tasks if t.id != task_id]
        if len(remaining) == len(self._tasks):
            return False
        self._replace(remaining)
        logger.info("Task deleted id=%s", task_id)
        return True


class ProfileStore:
    """Profile persistence. The profile is always saved wholesale."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def load(self) -> Profile:
        raw = self._storage.get(PROFILE_KEY)
        if not raw:
            return Profile()
        try:
            data = json.loads(raw)
        except Exception:
            logger.exception("Stored profile is not valid JSON; using defaults")
            return Profile()
        if not isinstance(data, dict):
            return Profile()
        return Profile.from_dict(data)

    def save(self, profile: Profile) -> None:
        self._storage.set(PROFILE_KEY, json.dumps(profile.to_dict(), ensure_ascii=False))
        logger.info(
            "Profile saved categories=%d routine_tasks=%d priorities=%d",
            len(profile.categories),
            len(profile.routine_tasks),
            len(profile.priorities),
        )


class CredentialStore:
    """
    Model API key persistence.

    The key is only ever read back to be attached as a proxy request header.
    Never log it.
    """

    def __init__(self, storage: KeyValueStorage) -> None:
        self._storage = storage

    def get(self) -> str | None:
        raw = self._storage.get(CREDENTIAL_KEY)
        if raw is None:
            return None
        key = raw.strip()
        return key or None

    def set(self, api_key: str) -> str:
        key = (api_key or "").strip()
        if not key:
            raise ValueError("API key must not be empty.")
        self._storage.set(CREDENTIAL_KEY, key)
        logger.info("API key stored")
        return key

    def clear(self) -> None:
        self._storage.remove(CREDENTIAL_KEY)
        logger.info("API key cleared")
