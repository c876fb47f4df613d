# tests/test_persistence.py

from __future__ import annotations

import json

import pytest

from day_planner.storage.kv_store import KeyValueStore
from day_planner.storage.persistence import TASKS_KEY, TaskPersistence
from day_planner.tasks.task_lifecycle import TaskLifecycle
from day_planner.tasks.task_models import Category, Task, TaskCollection
from day_planner.tasks.task_store import TaskStore


def test_kv_get_set_delete(sqlite_kv: KeyValueStore) -> None:
    assert sqlite_kv.get("missing") is None

    sqlite_kv.set("a", "1")
    sqlite_kv.set("a", "2")
    sqlite_kv.set("b", "x")
    assert sqlite_kv.get("a") == "2"
    assert sqlite_kv.keys() == ["a", "b"]

    sqlite_kv.delete("a", "b", "never-set")
    assert sqlite_kv.keys() == []


def test_load_without_slot_is_empty(sqlite_kv: KeyValueStore) -> None:
    loaded = TaskPersistence(sqlite_kv).load()
    assert loaded.to_dict() == {"personal": {}, "work": {}, "pool": []}


def test_save_load_preserves_order_and_fields(sqlite_kv: KeyValueStore) -> None:
    done = Task(id=2, text="B", original_date="2024-03-05", moved=True)
    done.mark_completed("2024-03-07")
    col = TaskCollection(
        personal={"2024-03-05": [Task(id=3, text="C", original_date="2024-03-05"), done]},
        work={"2024-03-06": []},
        pool=[Task(id=9, text="P")],
    )
    persistence = TaskPersistence(sqlite_kv)
    persistence.save(col)

    assert persistence.load().to_dict() == col.to_dict()
    raw = json.loads(sqlite_kv.get(TASKS_KEY) or "{}")
    assert raw["personal"]["2024-03-05"][1]["completedDate"] == "2024-03-07"
    assert raw["work"] == {"2024-03-06": []}


def test_corrupt_slot_propagates(sqlite_kv: KeyValueStore) -> None:
    sqlite_kv.set(TASKS_KEY, "{not json")
    with pytest.raises(json.JSONDecodeError):
        TaskPersistence(sqlite_kv).load()


def test_store_survives_reopen(tmp_path) -> None:
    db = tmp_path / "planner.sqlite3"
    store = TaskStore.open(TaskPersistence(KeyValueStore(db)))
    lifecycle = TaskLifecycle(store)
    lifecycle.add_task(Category.WORK, "persist me", viewed_date="2024-03-05")
    lifecycle.add_pool_task("later")

    reopened = TaskStore.open(TaskPersistence(KeyValueStore(db)))
    assert [t.text for t in reopened.bucket(Category.WORK, "2024-03-05")] == ["persist me"]
    assert [t.text for t in reopened.pool()] == ["later"]
