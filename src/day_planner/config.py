# src/day_planner/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Tests build their own settings instead of reading the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "DAYPLANNER"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except ImportError:
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


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


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

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    db_path: Path

    # ---- Remote backup ----
    github_api_url: str
    github_token: str | None
    sync_timeout_seconds: float
    gist_description: str
    gist_filename: str

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "day-planner") or "day-planner"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/day_planner"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "planner.sqlite3")

        github_api_url = _env(_k("GITHUB_API_URL"), "https://api.github.com").rstrip("/")
        # A token from the environment only seeds the local credential slot.
        github_token = _first_env(_k("GITHUB_TOKEN"), default=None)
        sync_timeout_seconds = _env_float(_k("SYNC_TIMEOUT_SECONDS"), 15.0)
        gist_description = _env(_k("GIST_DESCRIPTION"), "Todo App Data Backup")
        gist_filename = _env(_k("GIST_FILENAME"), "todo-data.json")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            data_dir=data_dir,
            db_path=db_path,
            github_api_url=github_api_url,
            github_token=github_token.strip() if github_token else None,
            sync_timeout_seconds=sync_timeout_seconds,
            gist_description=gist_description,
            gist_filename=gist_filename,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
