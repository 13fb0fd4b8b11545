# src/study_tracker/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- No secrets required at import time.
- The remote API origin can also come from VITE_API_BASE so the same .env
  serves the web build and this client.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "STUDY"

BACKEND_LOCAL = "local"
BACKEND_REMOTE = "remote"
BACKENDS = (BACKEND_LOCAL, BACKEND_REMOTE)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _first_env(*names: str, default: str | None = None) -> str | None:
    for n in names:
        v = os.getenv(n)
        if v is not None and v.strip() != "":
            return v
    return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


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

    # ---- Persistence ----
    backend: str
    api_base: str
    http_timeout_seconds: float
    load_retry_delay_seconds: float

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path

    @property
    def is_remote(self) -> bool:
        return self.backend == BACKEND_REMOTE

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "study-tracker") or "study-tracker"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        # Unknown values are kept as-is; the composition root warns and falls back to local.
        backend = _env(_k("BACKEND"), BACKEND_LOCAL).strip().lower() or BACKEND_LOCAL
        api_base = (
            _first_env(_k("API_BASE"), "VITE_API_BASE", default="http://127.0.0.1:8000")
            or "http://127.0.0.1:8000"
        ).strip().rstrip("/")

        http_timeout_seconds = max(1.0, _env_float(_k("HTTP_TIMEOUT_SECONDS"), 30.0))
        load_retry_delay_seconds = max(0.0, _env_float(_k("LOAD_RETRY_DELAY_SECONDS"), 3.0))

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/study-tracker"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "local_storage.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            backend=backend,
            api_base=api_base,
            http_timeout_seconds=http_timeout_seconds,
            load_retry_delay_seconds=load_retry_delay_seconds,
            data_dir=data_dir,
            storage_path=storage_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
