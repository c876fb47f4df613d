# src/day_planner/tasks/task_models.py

from __future__ import annotations

import copy
import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    Values are the persisted wire strings, so they must stay stable.
    """

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @classmethod
    def from_raw(cls, raw: str | None, *, completed: bool = False) -> TaskStatus:
        if not raw:
            return cls.COMPLETED if completed else cls.PENDING
        try:
            return cls(raw)
        except ValueError:
            logger.debug("Unknown task status=%r read as pending.", raw)
            return cls.PENDING


class Category(StrEnum):
    PERSONAL = "personal"
    WORK = "work"
    POOL = "pool"

    @classmethod
    def dated(cls) -> tuple[Category, Category]:
        return (cls.PERSONAL, cls.WORK)

    @property
    def is_dated(self) -> bool:
        return self is not Category.POOL


class CompletionTiming(StrEnum):
    ON_TIME = "on-time"
    LATE = "late"
    EARLY = "early"


# ---- date keys ----

DATE_KEY_FORMAT = "%Y-%m-%d"


def date_key(d: date) -> str:
    """Calendar date -> "YYYY-MM-DD" (local date, never shifted to UTC)."""
    return d.strftime(DATE_KEY_FORMAT)


def parse_date_key(key: str) -> date:
    return datetime.strptime(key.strip(), DATE_KEY_FORMAT).date()


def shift_date_key(key: str, days: int) -> str:
    return date_key(parse_date_key(key) + timedelta(days=days))


def today_key() -> str:
    return date_key(date.today())


# ---- task ----


@dataclass(slots=True)
class Task:
    """
    A single planner task.

    `completed` is derived from `status`, and `completed_date` is only written
    by the status transitions below, so a completed flag can never disagree
    with the status.
    """

    id: int
    text: str
    status: TaskStatus = TaskStatus.PENDING
    completed_date: str | None = None
    moved: bool = False
    original_date: str | None = None

    @property
    def completed(self) -> bool:
        return self.status is TaskStatus.COMPLETED

    # ---- transitions ----

    def mark_completed(self, on_date: str) -> None:
        self.status = TaskStatus.COMPLETED
        self.completed_date = on_date

    def mark_pending(self) -> None:
        self.status = TaskStatus.PENDING
        self.completed_date = None

    def mark_in_progress(self) -> None:
        self.status = TaskStatus.IN_PROGRESS
        self.completed_date = None

    def clone(self, *, new_id: int, **changes: Any) -> Task:
        """Copy of this task under a fresh id (relocations never reuse ids)."""
        data = {
            "text": self.text,
            "status": self.status,
            "completed_date": self.completed_date,
            "moved": self.moved,
            "original_date": self.original_date,
        }
        data.update(changes)
        task = Task(id=new_id, **data)
        if not task.completed:
            task.completed_date = None
        return task

    # ---- wire format ----

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "status": self.status.value,
            "completed": self.completed,
            "completedDate": self.completed_date,
            "moved": self.moved,
            "originalDate": self.original_date,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> Task:
        status = TaskStatus.from_raw(raw.get("status"), completed=bool(raw.get("completed")))
        completed_date = raw.get("completedDate") if status is TaskStatus.COMPLETED else None
        return cls(
            id=int(raw["id"]),
            text=str(raw.get("text") or "").strip(),
            status=status,
            completed_date=completed_date,
            moved=bool(raw.get("moved", False)),
            original_date=raw.get("originalDate"),
        )


def completion_timing(task: Task) -> CompletionTiming | None:
    """
    Presentation hint for completed tasks.

    ISO date keys sort chronologically, so plain string comparison is enough.
    """
    if not task.completed or not task.completed_date or not task.original_date:
        return None
    if task.completed_date == task.original_date:
        return CompletionTiming.ON_TIME
    if task.completed_date > task.original_date:
        return CompletionTiming.LATE
    return CompletionTiming.EARLY


ACTION_EDIT = "edit"
ACTION_DELETE = "delete"
ACTION_PROGRESS = "progress"
ACTION_COMPLETE = "complete"
ACTION_UNCOMPLETE = "uncomplete"
ACTION_MOVE_DATE = "move-date"


def available_actions(task: Task) -> frozenset[str]:
    """Actions a front end should offer for this task."""
    actions = {ACTION_EDIT, ACTION_DELETE}
    if task.completed:
        actions.add(ACTION_UNCOMPLETE)
    elif not task.moved:
        actions.update((ACTION_PROGRESS, ACTION_COMPLETE, ACTION_MOVE_DATE))
    return frozenset(actions)


# ---- collection ----

Buckets = dict[str, list[Task]]


@dataclass(slots=True)
class TaskCollection:
    personal: Buckets = field(default_factory=dict)
    work: Buckets = field(default_factory=dict)
    pool: list[Task] = field(default_factory=list)

    @classmethod
    def empty(cls) -> TaskCollection:
        return cls()

    def buckets(self, category: Category) -> Buckets:
        if category is Category.PERSONAL:
            return self.personal
        if category is Category.WORK:
            return self.work
        raise ValueError("pool has no date buckets")

    def iter_tasks(self) -> Iterator[tuple[Category, str | None, Task]]:
        for category in Category.dated():
            for key, tasks in self.buckets(category).items():
                for task in tasks:
                    yield category, key, task
        for task in self.pool:
            yield Category.POOL, None, task

    def count(self) -> int:
        return sum(1 for _ in self.iter_tasks())

    def ids(self) -> set[int]:
        return {task.id for _, _, task in self.iter_tasks()}

    def copy(self) -> TaskCollection:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "personal": {k: [t.to_dict() for t in v] for k, v in self.personal.items()},
            "work": {k: [t.to_dict() for t in v] for k, v in self.work.items()},
            "pool": [t.to_dict() for t in self.pool],
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> TaskCollection:
        if not raw:
            return cls.empty()

        def _buckets(value: Any) -> Buckets:
            if not isinstance(value, Mapping):
                return {}
            out: Buckets = {}
            for key, tasks in value.items():
                if not isinstance(tasks, list):
                    logger.debug("Dropping non-list bucket key=%s", key)
                    continue
                out[str(key)] = [Task.from_dict(t) for t in tasks if isinstance(t, Mapping)]
            return out

        pool: list[Task] = []
        for item in raw.get("pool") or []:
            if not isinstance(item, Mapping):
                continue
            task = Task.from_dict(item)
            # Pool tasks are date-less and never completed.
            if task.original_date is not None or task.completed:
                logger.debug("Normalising pool task id=%s", task.id)
            task.original_date = None
            if task.completed:
                task.mark_pending()
            pool.append(task)

        return cls(
            personal=_buckets(raw.get("personal")),
            work=_buckets(raw.get("work")),
            pool=pool,
        )
