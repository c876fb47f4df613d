# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from day_planner.cli.bootstrap import create_initial_state
from day_planner.core.state import AppState
from day_planner.storage.kv_store import KeyValueStore
from day_planner.storage.persistence import TaskPersistence
from day_planner.sync.credentials import CredentialStore
from day_planner.sync.sync_engine import RemoteSyncEngine
from day_planner.tasks.task_lifecycle import TaskLifecycle
from day_planner.tasks.task_store import TaskStore

from .fakes import FakeGistServer, MemoryKV

DAY = "2024-03-05"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the sync engine.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="day-planner-test",
        log_level="DEBUG",
        console_enabled=False,
        data_dir=tmp_path,
        db_path=tmp_path / "planner.sqlite3",
        github_api_url="https://api.github.test",
        github_token=None,
        sync_timeout_seconds=5.0,
        gist_description="Todo App Data Backup",
        gist_filename="todo-data.json",
    )


@pytest.fixture()
def kv() -> MemoryKV:
    return MemoryKV()


@pytest.fixture()
def store(kv: MemoryKV) -> TaskStore:
    return TaskStore(TaskPersistence(kv))


@pytest.fixture()
def lifecycle(store: TaskStore) -> TaskLifecycle:
    return TaskLifecycle(store)


@pytest.fixture()
def gist_server() -> FakeGistServer:
    return FakeGistServer()


@pytest.fixture()
def credentials(kv: MemoryKV, gist_server: FakeGistServer) -> CredentialStore:
    creds = CredentialStore(kv)
    creds.set_token(gist_server.token)
    return creds


@pytest.fixture()
def engine(
    store: TaskStore, credentials: CredentialStore, gist_server: FakeGistServer
) -> RemoteSyncEngine:
    return RemoteSyncEngine(
        store,
        credentials,
        base_url="https://api.github.test",
        transport=gist_server.transport(),
    )


@pytest.fixture()
def state(settings: SimpleNamespace, gist_server: FakeGistServer) -> AppState:
    """
    AppState wired through the real composition root.

    NOTE: the SQLite key-value store is real here because its correctness is
    part of what we want to test; only the network is faked.
    """
    st = create_initial_state(settings=settings, transport=gist_server.transport())
    st.viewed_date = DAY
    return st


@pytest.fixture()
def sqlite_kv(tmp_path: Path) -> KeyValueStore:
    return KeyValueStore(tmp_path / "kv.sqlite3")
