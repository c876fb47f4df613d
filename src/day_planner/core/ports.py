# src/day_planner/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The task store and the sync engine depend on Protocols instead of concrete
storage classes. This keeps the SQLite slots swappable and makes testing easier.
"""

from typing import Protocol

from ..tasks.task_models import TaskCollection


class KeyValueRepo(Protocol):
    """Durable string slots (the local equivalent of browser localStorage)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, *keys: str) -> None: ...


class CollectionRepo(Protocol):
    """Whole-snapshot persistence for the task collection."""

    def save(self, collection: TaskCollection) -> None: ...
    def load(self) -> TaskCollection: ...
