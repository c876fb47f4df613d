# src/day_planner/tasks/task_lifecycle.py

"""
Task lifecycle operations: status transitions, relocations, reordering.

Every operation that cannot find its subject is a silent no-op and returns
None. Successful operations commit the store exactly once and return the task
that was changed or created.

The viewed date is always passed in explicitly; "today" for completion
purposes is the date the user is looking at, not the wall clock.
"""

from __future__ import annotations

import logging

from .task_models import Category, Task, TaskStatus, shift_date_key
from .task_store import TaskStore

logger = logging.getLogger(__name__)

ADJACENT_OFFSETS = (-1, 1)


def _clean_text(text: str | None) -> str:
    return (text or "").strip()


def _check_offset(days_offset: int) -> None:
    if days_offset not in ADJACENT_OFFSETS:
        raise ValueError(f"days_offset must be -1 or +1, got {days_offset}")


class TaskLifecycle:
    def __init__(self, store: TaskStore) -> None:
        self.store = store

    # ---- creation ----

    def add_task(self, category: Category | str, text: str, *, viewed_date: str) -> Task | None:
        category = Category(category)
        if category is Category.POOL:
            return self.add_pool_task(text)

        text = _clean_text(text)
        if not text:
            return None

        with self.store.mutate():
            task = Task(id=self.store.next_id(), text=text, original_date=viewed_date)
            self.store.live_bucket(category, viewed_date).append(task)
        logger.debug("Task added id=%s category=%s date=%s", task.id, category, viewed_date)
        return task

    def add_pool_task(self, text: str) -> Task | None:
        text = _clean_text(text)
        if not text:
            return None

        with self.store.mutate():
            task = Task(id=self.store.next_id(), text=text, original_date=None)
            self.store.live_bucket(Category.POOL).append(task)
        logger.debug("Task added id=%s category=pool", task.id)
        return task

    # ---- status ----

    def toggle_in_progress(
        self, category: Category | str, task_id: int, *, viewed_date: str
    ) -> Task | None:
        loc = self.store.find_in_bucket(category, viewed_date, task_id)
        if loc is None or loc.task.moved or loc.task.completed:
            return None

        task = loc.task
        with self.store.mutate():
            if task.status is TaskStatus.IN_PROGRESS:
                task.mark_pending()
            else:
                task.mark_in_progress()
        logger.debug("Task progress id=%s status=%s", task.id, task.status)
        return task

    def complete_task(
        self, category: Category | str, task_id: int, *, viewed_date: str
    ) -> Task | None:
        category = Category(category)
        if category is Category.POOL:
            return self.complete_pool_task(task_id, viewed_date=viewed_date)

        loc = self.store.find_in_bucket(category, viewed_date, task_id)
        if loc is None or loc.task.moved or loc.task.completed:
            return None

        task = loc.task
        with self.store.mutate():
            task.mark_completed(viewed_date)
        logger.debug("Task completed id=%s on=%s original=%s", task.id, viewed_date, task.original_date)
        return task

    def complete_pool_task(self, task_id: int, *, viewed_date: str) -> Task | None:
        """
        Pool tasks are not completed in place: the pool copy is destroyed and a
        completed task is filed under personal/<viewed_date>.
        """
        loc = self.store.find_in_bucket(Category.POOL, None, task_id)
        if loc is None:
            return None

        with self.store.mutate():
            self.store.live_bucket(Category.POOL).pop(loc.index)
            done = loc.task.clone(
                new_id=self.store.next_id(),
                moved=False,
                original_date=viewed_date,
            )
            done.mark_completed(viewed_date)
            self.store.live_bucket(Category.PERSONAL, viewed_date).append(done)
        logger.debug("Pool task completed id=%s -> id=%s date=%s", task_id, done.id, viewed_date)
        return done

    def uncomplete_task(
        self, category: Category | str, task_id: int, *, viewed_date: str
    ) -> Task | None:
        loc = self.store.find_in_bucket(category, viewed_date, task_id)
        if loc is None or not loc.task.completed:
            return None

        task = loc.task
        with self.store.mutate():
            task.mark_pending()
        logger.debug("Task uncompleted id=%s", task.id)
        return task

    def edit_task(
        self, category: Category | str, task_id: int, text: str, *, viewed_date: str
    ) -> Task | None:
        text = _clean_text(text)
        loc = self.store.find_in_bucket(category, viewed_date, task_id)
        if loc is None or not text or text == loc.task.text:
            return None

        task = loc.task
        with self.store.mutate():
            task.text = text
        logger.debug("Task edited id=%s", task.id)
        return task

    # ---- relocation ----

    def move_to_adjacent_date(
        self, category: Category | str, task_id: int, days_offset: int, *, viewed_date: str
    ) -> Task | None:
        """
        Leave a moved stub at the origin and file a fresh copy one day away.

        The offset is relative to the viewed date. The copy keeps the source's
        original_date so completion timing still measures against the day the
        task was first planned.
        """
        category = Category(category)
        _check_offset(days_offset)
        if category is Category.POOL:
            return self.move_pool_task_to_adjacent_date(task_id, days_offset, viewed_date=viewed_date)

        loc = self.store.find_in_bucket(category, viewed_date, task_id)
        if loc is None or loc.task.moved:
            return None

        target_date = shift_date_key(viewed_date, days_offset)
        source = loc.task
        with self.store.mutate():
            source.moved = True
            copy = source.clone(
                new_id=self.store.next_id(),
                moved=False,
                original_date=source.original_date,
            )
            self.store.live_bucket(category, target_date).append(copy)
        logger.debug("Task moved id=%s -> id=%s date=%s", source.id, copy.id, target_date)
        return copy

    def move_pool_task_to_adjacent_date(
        self, task_id: int, days_offset: int, *, viewed_date: str
    ) -> Task | None:
        _check_offset(days_offset)
        loc = self.store.find_in_bucket(Category.POOL, None, task_id)
        if loc is None:
            return None

        target_date = shift_date_key(viewed_date, days_offset)
        with self.store.mutate():
            self.store.live_bucket(Category.POOL).pop(loc.index)
            copy = loc.task.clone(
                new_id=self.store.next_id(),
                moved=False,
                original_date=target_date,
            )
            self.store.live_bucket(Category.PERSONAL, target_date).append(copy)
        logger.debug("Pool task scheduled id=%s -> id=%s date=%s", task_id, copy.id, target_date)
        return copy

    def move_between_categories(
        self,
        from_category: Category | str,
        to_category: Category | str,
        task_id: int,
        *,
        viewed_date: str,
    ) -> Task | None:
        from_category = Category(from_category)
        to_category = Category(to_category)
        if from_category is to_category or not (from_category.is_dated and to_category.is_dated):
            return None

        loc = self.store.find_in_bucket(from_category, viewed_date, task_id)
        if loc is None:
            return None

        with self.store.mutate():
            self.store.live_bucket(from_category, viewed_date).pop(loc.index)
            copy = loc.task.clone(new_id=self.store.next_id(), moved=False)
            self.store.live_bucket(to_category, viewed_date).append(copy)
        logger.debug(
            "Task recategorised id=%s -> id=%s %s->%s date=%s",
            task_id,
            copy.id,
            from_category,
            to_category,
            viewed_date,
        )
        return copy

    def move_to_pool(
        self, from_category: Category | str, task_id: int, *, viewed_date: str
    ) -> Task | None:
        from_category = Category(from_category)
        if not from_category.is_dated:
            return None

        loc = self.store.find_in_bucket(from_category, viewed_date, task_id)
        if loc is None:
            return None

        with self.store.mutate():
            self.store.live_bucket(from_category, viewed_date).pop(loc.index)
            status = TaskStatus.PENDING if loc.task.completed else loc.task.status
            copy = loc.task.clone(
                new_id=self.store.next_id(),
                status=status,
                completed_date=None,
                moved=False,
                original_date=None,
            )
            self.store.live_bucket(Category.POOL).append(copy)
        logger.debug("Task pooled id=%s -> id=%s from=%s", task_id, copy.id, from_category)
        return copy

    def move_from_pool(
        self, to_category: Category | str, task_id: int, *, viewed_date: str
    ) -> Task | None:
        to_category = Category(to_category)
        if not to_category.is_dated:
            return None

        loc = self.store.find_in_bucket(Category.POOL, None, task_id)
        if loc is None:
            return None

        with self.store.mutate():
            self.store.live_bucket(Category.POOL).pop(loc.index)
            copy = loc.task.clone(
                new_id=self.store.next_id(),
                moved=False,
                original_date=viewed_date,
            )
            self.store.live_bucket(to_category, viewed_date).append(copy)
        logger.debug("Pool task placed id=%s -> id=%s %s/%s", task_id, copy.id, to_category, viewed_date)
        return copy

    def drop_on_category(
        self,
        from_category: Category | str,
        to_category: Category | str,
        task_id: int,
        *,
        viewed_date: str,
    ) -> Task | None:
        """Route a drop onto a category tab to the matching relocation."""
        from_category = Category(from_category)
        to_category = Category(to_category)
        if from_category is to_category:
            return None
        if from_category is Category.POOL:
            return self.move_from_pool(to_category, task_id, viewed_date=viewed_date)
        if to_category is Category.POOL:
            return self.move_to_pool(from_category, task_id, viewed_date=viewed_date)
        return self.move_between_categories(
            from_category, to_category, task_id, viewed_date=viewed_date
        )

    # ---- ordering / removal ----

    def reorder(
        self,
        category: Category | str,
        dragged_id: int,
        target_id: int,
        *,
        insert_before: bool = True,
        viewed_date: str | None = None,
    ) -> bool:
        category = Category(category)
        if dragged_id == target_id:
            return False

        dragged = self.store.find_in_bucket(category, viewed_date, dragged_id)
        target = self.store.find_in_bucket(category, viewed_date, target_id)
        if dragged is None or target is None:
            return False

        with self.store.mutate():
            tasks = self.store.live_bucket(category, viewed_date)
            task = tasks.pop(dragged.index)
            # removal shifts everything after the dragged slot one to the left
            new_target = target.index - 1 if dragged.index < target.index else target.index
            tasks.insert(new_target if insert_before else new_target + 1, task)
        logger.debug(
            "Task reordered id=%s target=%s before=%s", dragged_id, target_id, insert_before
        )
        return True

    def delete_task(self, task_id: int) -> Task | None:
        """Remove the task from whichever bucket currently holds it."""
        loc = self.store.find(task_id)
        if loc is None:
            return None
        return self._remove(loc.category, loc.date_key, loc.index)

    def delete_task_in(
        self, category: Category | str, task_id: int, *, viewed_date: str | None = None
    ) -> Task | None:
        loc = self.store.find_in_bucket(category, viewed_date, task_id)
        if loc is None:
            return None
        return self._remove(loc.category, loc.date_key, loc.index)

    def _remove(self, category: Category, date_key: str | None, index: int) -> Task:
        with self.store.mutate():
            task = self.store.live_bucket(category, date_key).pop(index)
        logger.debug("Task deleted id=%s category=%s date=%s", task.id, category, date_key)
        return task
