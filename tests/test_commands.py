# tests/test_commands.py

from __future__ import annotations

from day_planner.cli.commands import CommandRegistry, registry
from day_planner.core.state import AppState
from day_planner.tasks.task_models import Category, TaskStatus

from .conftest import DAY
from .fakes import FakeGistServer


def test_command_registry_routes_2_and_3_params(state: AppState) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert reg.handle(state, "/a x") == "h2"
    assert reg.handle(state, "/b y", emit=lambda _: None) == "h3"
    assert called == {"h2": 1, "h3": 1}


def test_command_registry_unknown_and_non_command(state: AppState) -> None:
    reg = CommandRegistry()
    assert reg.handle(state, "hello") is None
    assert "Unknown command" in (reg.handle(state, "/nope") or "")


def test_add_done_and_show(state: AppState) -> None:
    registry.handle(state, "/add Buy milk")
    out = registry.handle(state, "/done 1") or ""

    task = state.store.bucket(Category.PERSONAL, DAY)[0]
    assert task.status is TaskStatus.COMPLETED
    assert "[x] Buy milk" in out
    assert "on-time" in out


def test_bad_position_shows_usage(state: AppState) -> None:
    assert registry.handle(state, "/done 3") == "Usage: /done N"
    assert registry.handle(state, "/done x") == "Usage: /done N"


def test_next_leaves_stub_and_day_navigation(state: AppState) -> None:
    registry.handle(state, "/add A")
    out = registry.handle(state, "/next 1") or ""
    assert "(moved)" in out

    out = registry.handle(state, "/day +1") or ""
    assert state.viewed_date == "2024-03-06"
    assert "[ ] A" in out
    assert registry.handle(state, "/day someday") == "Usage: /day [today|+N|-N|YYYY-MM-DD]"


def test_day_canonicalises_unpadded_dates(state: AppState) -> None:
    registry.handle(state, "/day 2024-3-5")
    assert state.viewed_date == "2024-03-05"

    registry.handle(state, "/add A")
    registry.handle(state, "/next 1")
    registry.handle(state, "/day +1")
    out = registry.handle(state, "/done 1") or ""

    assert state.store.date_keys(Category.PERSONAL) == ["2024-03-05", "2024-03-06"]
    assert "(done 2024-03-06, late)" in out


def test_day_offset_out_of_range_is_usage(state: AppState) -> None:
    assert registry.handle(state, "/day +999999999") == "Usage: /day [today|+N|-N|YYYY-MM-DD]"
    assert state.viewed_date == DAY


def test_tab_and_category_moves(state: AppState) -> None:
    registry.handle(state, "/add A")
    registry.handle(state, "/to pool 1")
    assert state.store.bucket(Category.PERSONAL, DAY) == ()

    registry.handle(state, "/tab pool")
    assert state.tab is Category.POOL
    registry.handle(state, "/to work 1")
    assert [t.text for t in state.store.bucket(Category.WORK, DAY)] == ["A"]
    assert registry.handle(state, "/tab nowhere") == "Usage: /tab personal | work | pool"


def test_reorder_and_delete(state: AppState) -> None:
    for text in ("A", "B", "C"):
        registry.handle(state, f"/add {text}")
    registry.handle(state, "/reorder 3 1")
    assert [t.text for t in state.store.bucket(Category.PERSONAL, DAY)] == ["C", "A", "B"]

    registry.handle(state, "/del 2")
    assert [t.text for t in state.store.bucket(Category.PERSONAL, DAY)] == ["C", "B"]


def test_token_validation(state: AppState) -> None:
    assert "ghp_" in (registry.handle(state, "/token abc") or "")
    assert not state.credentials.has_token()

    assert registry.handle(state, "/token ghp_test") == "GitHub token saved successfully."
    assert state.credentials.has_token()

    registry.handle(state, "/token clear")
    assert not state.credentials.has_token()


def test_sync_without_token_is_reported(state: AppState) -> None:
    out = registry.handle(state, "/sync") or ""
    assert out.startswith("Sync failed:")
    assert "token" in out


def test_sync_push_pull_round_trip(state: AppState, gist_server: FakeGistServer) -> None:
    notes: list[str] = []
    registry.handle(state, "/token ghp_test")
    assert "No backup found" in (registry.handle(state, "/pull") or "")

    registry.handle(state, "/add A")
    out = registry.handle(state, "/sync", emit=notes.append) or ""
    assert "local tasks uploaded" in out
    assert notes == ["[SYNC] Syncing with GitHub..."]
    assert len(gist_server.gists) == 1

    registry.handle(state, "/del 1")
    assert registry.handle(state, "/pull") is not None
    assert [t.text for t in state.store.bucket(Category.PERSONAL, DAY)] == ["A"]

    assert registry.handle(state, "/push") == "Tasks backed up to cloud!"
