# src/smart_todo/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/stores/transport/AI client).
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import CompletionTransport, KeyValueStorage
from ..core.state import AppState
from ..llm.client import ProxyTransport
from ..storage.kv import JsonFileStorage
from ..tasks.task_store import CredentialStore, ProfileStore, TaskList

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    transport: CompletionTransport | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Storage and transport are injectable so tests can swap in in-memory fakes.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = JsonFileStorage(settings.storage_path)

    if transport is None:
        transport = ProxyTransport(
            settings.proxy_url,
            timeout=float(getattr(settings, "client_timeout_seconds", 30.0)),
        )

    profile_store = ProfileStore(storage)
    credentials = CredentialStore(storage)

    state = AppState(
        settings=settings,
        tasks=TaskList(storage),
        profile_store=profile_store,
        credentials=credentials,
        transport=transport,
        profile=profile_store.load(),
    )

    api_key = credentials.get()
    if api_key:
        state.set_credential(api_key)
        logger.info("AI categorization enabled (stored API key found).")
    else:
        logger.info("No API key stored; AI categorization disabled until /key is used.")

    return state


async def close_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    aclose = getattr(state.transport, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception:
        logger.debug("Transport close failed.", exc_info=True)
