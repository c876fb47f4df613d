# src/day_planner/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the key-value slots, task store, lifecycle engine and sync engine into AppState.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

import httpx

from ..config import get_settings
from ..core.state import AppState
from ..storage.kv_store import KeyValueStore
from ..storage.persistence import TaskPersistence
from ..sync.credentials import CredentialStore
from ..sync.errors import InvalidCredentialError
from ..sync.sync_engine import RemoteSyncEngine
from ..tasks.task_lifecycle import TaskLifecycle
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def _seed_token(settings, credentials: CredentialStore) -> None:
    token = getattr(settings, "github_token", None)
    if not token or credentials.has_token():
        return
    try:
        credentials.set_token(token)
    except InvalidCredentialError as e:
        logger.warning("Ignoring DAYPLANNER_GITHUB_TOKEN from environment: %s", e)


def create_initial_state(
    *,
    settings=None,
    on_change: Callable[[], None] | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    kv = KeyValueStore(settings.db_path)
    store = TaskStore.open(TaskPersistence(kv), on_change=on_change)
    credentials = CredentialStore(kv)
    _seed_token(settings, credentials)

    return AppState(
        settings=settings,
        kv=kv,
        store=store,
        lifecycle=TaskLifecycle(store),
        credentials=credentials,
        sync=RemoteSyncEngine.from_settings(settings, store, credentials, transport=transport),
    )
