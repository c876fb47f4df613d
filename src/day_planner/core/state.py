# src/day_planner/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..storage.kv_store import KeyValueStore
from ..sync.credentials import CredentialStore
from ..sync.sync_engine import RemoteSyncEngine
from ..tasks.task_lifecycle import TaskLifecycle
from ..tasks.task_models import Category, today_key
from ..tasks.task_store import TaskStore


@dataclass
class AppState:
    # Store Settings on the state for easy access in command handlers.
    settings: Any

    kv: KeyValueStore
    store: TaskStore
    lifecycle: TaskLifecycle
    credentials: CredentialStore
    sync: RemoteSyncEngine

    # Per-session view: which bucket the user is looking at.
    viewed_date: str = field(default_factory=today_key)
    tab: Category = Category.PERSONAL
