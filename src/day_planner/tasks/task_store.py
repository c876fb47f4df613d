# src/day_planner/tasks/task_store.py

from __future__ import annotations

import contextlib
import copy
import logging
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from ..core.ports import CollectionRepo
from .task_models import Category, Task, TaskCollection

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class TaskLocation:
    category: Category
    date_key: str | None
    index: int
    task: Task


class TaskStore:
    """
    In-memory task collection keyed by category and date.

    Reads return copies and never mutate. find/find_in_bucket are the
    exception: they hand back the live task for use inside mutate(). Every
    write goes through commit(): persist the full snapshot, then notify the
    owner that a rerender is due.

    Buckets are created lazily on first insert and are kept (possibly empty)
    after the last task leaves them.
    """

    def __init__(
        self,
        persistence: CollectionRepo | None = None,
        *,
        collection: TaskCollection | None = None,
        on_change: Callable[[], None] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._persistence = persistence
        self._collection = collection if collection is not None else TaskCollection.empty()
        self._on_change = on_change
        self._clock = clock
        self._last_id = 0

    @classmethod
    def open(
        cls,
        persistence: CollectionRepo,
        *,
        on_change: Callable[[], None] | None = None,
    ) -> TaskStore:
        collection = persistence.load()
        store = cls(persistence, collection=collection, on_change=on_change)
        logger.info("TaskStore ready total=%s", store.count())
        return store

    # ---- reads ----

    def _tasks(self, category: Category, date_key: str | None) -> list[Task]:
        if category is Category.POOL:
            return self._collection.pool
        if date_key is None:
            raise ValueError(f"date_key is required for category {category}")
        return self._collection.buckets(category).get(date_key, [])

    def bucket(self, category: Category | str, date_key: str | None = None) -> tuple[Task, ...]:
        return tuple(copy.copy(t) for t in self._tasks(Category(category), date_key))

    def pool(self) -> tuple[Task, ...]:
        return self.bucket(Category.POOL)

    def date_keys(self, category: Category | str) -> list[str]:
        return sorted(self._collection.buckets(Category(category)))

    def tasks_for_date(self, date_key: str) -> dict[Category, tuple[Task, ...]]:
        return {c: self.bucket(c, date_key) for c in Category.dated()}

    def find(self, task_id: int) -> TaskLocation | None:
        for category in Category.dated():
            for key, tasks in self._collection.buckets(category).items():
                for index, task in enumerate(tasks):
                    if task.id == task_id:
                        return TaskLocation(category, key, index, task)
        for index, task in enumerate(self._collection.pool):
            if task.id == task_id:
                return TaskLocation(Category.POOL, None, index, task)
        return None

    def find_in_bucket(
        self, category: Category | str, date_key: str | None, task_id: int
    ) -> TaskLocation | None:
        category = Category(category)
        if category.is_dated and date_key is None:
            return None
        for index, task in enumerate(self._tasks(category, date_key)):
            if task.id == task_id:
                return TaskLocation(category, date_key if category.is_dated else None, index, task)
        return None

    def count(self) -> int:
        return self._collection.count()

    def snapshot(self) -> TaskCollection:
        return self._collection.copy()

    # ---- ids ----

    def next_id(self) -> int:
        """
        Millisecond timestamp id, strictly greater than every id issued so far
        and every id currently held.
        """
        candidate = int(self._clock() * 1000)
        floor = max(self._last_id, max(self._collection.ids(), default=0))
        if candidate <= floor:
            candidate = floor + 1
        self._last_id = candidate
        return candidate

    # ---- writes ----

    def live_bucket(self, category: Category, date_key: str | None = None) -> list[Task]:
        """Mutable bucket list, created on demand. Only for use inside mutate()."""
        if category is Category.POOL:
            return self._collection.pool
        if date_key is None:
            raise ValueError(f"date_key is required for category {category}")
        return self._collection.buckets(category).setdefault(date_key, [])

    @contextlib.contextmanager
    def mutate(self) -> Iterator[TaskCollection]:
        """
        Yield the live collection; commit on normal exit.

        Callers validate before mutating, so an exception here means a bug:
        nothing is persisted and the error propagates.
        """
        yield self._collection
        self.commit()

    def commit(self) -> None:
        if self._persistence is not None:
            self._persistence.save(self._collection)
        logger.debug("TaskStore commit total=%s", self.count())
        if self._on_change is not None:
            self._on_change()

    def replace_collection(self, collection: TaskCollection) -> None:
        self._collection = collection.copy()
        self.commit()
