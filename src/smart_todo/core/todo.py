# src/smart_todo/core/todo.py

"""
Task orchestration.

Per-task lifecycle:
    Pending      task is in the list right away (placeholder category, Medium priority)
    Categorized  AI result merged in by id
    Defaulted    AI failed; fixed fallback merged in by id
Categorized/Defaulted are terminal. A task deleted while Pending simply never
receives its result (the merge finds no matching id).

Concurrency: everything runs on one event loop. Categorization requests are
independent background tasks and may complete in any order; reconciliation is
purely by task id, so ordering does not matter.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..llm.service import AIService
from ..tasks.task_models import SuggestionContext, Task
from .state import AppState

logger = logging.getLogger(__name__)

RECENT_COMPLETED_LIMIT = 10


def submit_task(state: AppState, text: str, *, from_suggestion: bool = False) -> Task:
    """
    Add a task immediately (optimistic) and kick off categorization in the background.

    Must be called from inside a running event loop when an AI client is configured.
    Raises ValueError for blank text.
    """
    task = state.tasks.add(text, from_suggestion=from_suggestion)

    ai = state.ai
    if ai is None:
        state.tasks.settle_uncategorized(task.id)
        return task

    bg = asyncio.get_running_loop().create_task(
        categorize_task(state, ai, task.id, task.text),
        name=f"categorize-{task.id}",
    )
    state.pending.add(bg)
    bg.add_done_callback(state.pending.discard)
    return task


async def categorize_task(state: AppState, ai: AIService, task_id: int, text: str) -> Task | None:
    """Categorize one task and merge the result by id (no-op if the task is gone)."""
    result = await ai.categorize(text, state.profile)
    return state.tasks.apply_categorization(task_id, result)


async def drain(state: AppState) -> None:
    """Wait for all in-flight categorizations (shutdown / tests)."""
    while state.pending:
        await asyncio.gather(*list(state.pending), return_exceptions=True)


def build_suggestion_context(state: AppState, now: datetime | None = None) -> SuggestionContext:
    now = now or datetime.now()
    completed = state.tasks.completed()[-RECENT_COMPLETED_LIMIT:]
    return SuggestionContext(
        profile=state.profile,
        recent_completed=[t.text for t in completed],
        incomplete=[t.text for t in state.tasks.incomplete()],
        hour=now.hour,
        weekday=now.weekday(),
    )


def can_suggest(state: AppState) -> bool:
    return state.ai is not None and bool(state.profile.name)


async def refresh_suggestions(state: AppState, now: datetime | None = None) -> list[str]:
    """
    Fetch a fresh suggestion list.

    Overlapping refreshes are coalesced: while one request is in flight, further
    calls await that same request instead of issuing another one.
    """
    if not can_suggest(state):
        state.suggestions = []
        return []

    inflight = state.suggestion_refresh
    if inflight is not None and not inflight.done():
        logger.debug("Suggestion refresh already in flight; joining it")
        return list(await asyncio.shield(inflight))

    ai = state.ai
    assert ai is not None
    context = build_suggestion_context(state, now)

    async def _run() -> list[str]:
        result = await ai.suggest(context)
        state.suggestions = list(result.suggestions)
        logger.info("Suggestions refreshed count=%d", len(state.suggestions))
        return state.suggestions

    task = asyncio.get_running_loop().create_task(_run(), name="suggestions-refresh")
    state.suggestion_refresh = task
    try:
        return list(await asyncio.shield(task))
    finally:
        if task.done() and state.suggestion_refresh is task:
            state.suggestion_refresh = None


def accept_suggestion(state: AppState, suggestion: str) -> Task:
    """Turn a suggestion into a task and drop it from the current suggestion list."""
    task = submit_task(state, suggestion, from_suggestion=True)
    state.suggestions = [s for s in state.suggestions if s != suggestion]
    return task
