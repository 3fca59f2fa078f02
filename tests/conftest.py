# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from smart_todo.cli.bootstrap import create_initial_state
from smart_todo.core.state import AppState
from smart_todo.storage.kv import InMemoryStorage

from .fakes import FakeTransport


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="smart-todo-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.json",
        proxy_url="http://proxy.test/api/claude",
        client_timeout_seconds=5.0,
        proxy_host="127.0.0.1",
        proxy_port=3001,
        default_model="claude-3-haiku-20240307",
        default_max_tokens=400,
        allowed_origins=["http://localhost:5173"],
    )


@pytest.fixture()
def storage() -> InMemoryStorage:
    return InMemoryStorage()


@pytest.fixture()
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture()
def state(settings: SimpleNamespace, storage: InMemoryStorage, transport: FakeTransport) -> AppState:
    """AppState wired with in-memory storage and a fake proxy transport (no key yet)."""
    return create_initial_state(settings=settings, storage=storage, transport=transport)
