# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from smart_todo.config import DEFAULT_MAX_TOKENS, DEFAULT_MODEL, Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "SMART_TODO_DATA_DIR",
        "SMART_TODO_STORAGE_PATH",
        "SMART_TODO_PROXY_PORT",
        "PORT",
        "SMART_TODO_DEFAULT_MODEL",
        "SMART_TODO_DEFAULT_MAX_TOKENS",
        "SMART_TODO_ALLOWED_ORIGINS",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()

    assert s.default_model == DEFAULT_MODEL
    assert s.default_max_tokens == DEFAULT_MAX_TOKENS
    assert s.proxy_port == 3001
    assert s.storage_path == s.data_dir / "storage.json"


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("SMART_TODO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("SMART_TODO_ALLOWED_ORIGINS", "https://a.example, https://b.example")
    monkeypatch.setenv("SMART_TODO_DEFAULT_MAX_TOKENS", "-3")

    s = Settings.from_env()

    assert s.storage_path == tmp_path / "storage.json"
    assert s.proxy_port == 8080
    assert s.allowed_origins == ["https://a.example", "https://b.example"]
    assert s.default_max_tokens == DEFAULT_MAX_TOKENS


def test_prefixed_port_wins_over_platform_port(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("SMART_TODO_PROXY_PORT", "9000")

    assert Settings.from_env().proxy_port == 9000
