# src/smart_todo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time: the model API key is supplied per request
  by the caller and is never part of Settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

ENV_PREFIX = "SMART_TODO"

DEFAULT_MODEL = "claude-3-haiku-20240307"
DEFAULT_MAX_TOKENS = 400


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_local_dotenv() -> None:
    """Load .env from the working directory if present (existing env wins)."""
    load_dotenv(override=False)


_load_local_dotenv()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    parts = [p.strip() for p in raw.replace(",", " ").split() if p.strip()]
    return parts


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path

    # ---- Client side ----
    proxy_url: str
    client_timeout_seconds: float

    # ---- Proxy side ----
    proxy_host: str
    proxy_port: int
    default_model: str
    default_max_tokens: int
    allowed_origins: List[str]

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "smart-todo") or "smart-todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/smart_todo"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.json")

        proxy_url = _env(_k("PROXY_URL"), "http://localhost:3001/api/claude")
        client_timeout_seconds = _env_float(_k("CLIENT_TIMEOUT_SECONDS"), 30.0)

        proxy_host = _env(_k("PROXY_HOST"), "127.0.0.1")
        # PORT is what most hosting platforms inject.
        proxy_port = _env_int(_k("PROXY_PORT"), _env_int("PORT", 3001))

        default_model = (_first_env(_k("DEFAULT_MODEL"), default=DEFAULT_MODEL) or DEFAULT_MODEL).strip()
        default_max_tokens = _env_int(_k("DEFAULT_MAX_TOKENS"), DEFAULT_MAX_TOKENS)
        if default_max_tokens <= 0:
            default_max_tokens = DEFAULT_MAX_TOKENS

        allowed_origins = _env_list(
            _k("ALLOWED_ORIGINS"),
            ["http://localhost:5173", "http://localhost:3000"],
        )

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_path=storage_path,
            proxy_url=proxy_url,
            client_timeout_seconds=client_timeout_seconds,
            proxy_host=proxy_host,
            proxy_port=proxy_port,
            default_model=default_model,
            default_max_tokens=default_max_tokens,
            allowed_origins=allowed_origins,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
