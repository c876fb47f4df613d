# src/day_planner/sync/merge.py

from __future__ import annotations

from ..tasks.task_models import Buckets, Category, Task, TaskCollection


def _union(local: list[Task], remote: list[Task]) -> tuple[list[Task], int]:
    known = {t.id for t in local}
    added = [t for t in remote if t.id not in known]
    return local + added, len(added)


def merge_collections(local: TaskCollection, remote: TaskCollection) -> tuple[TaskCollection, int]:
    """
    Additive merge of a remote snapshot into the local one.

    Per bucket: adopt the remote bucket if the local side has none, else
    append remote tasks whose id is not present locally. A local task is
    never overwritten or removed, even if the remote copy with the same id
    differs. Merging the same remote twice changes nothing the second time.

    Returns the merged collection (a new object) and the number of tasks added.
    """
    merged = local.copy()
    remote = remote.copy()
    added = 0

    for category in Category.dated():
        target: Buckets = merged.buckets(category)
        for key, tasks in remote.buckets(category).items():
            if key not in target:
                target[key] = list(tasks)
                added += len(tasks)
                continue
            target[key], n = _union(target[key], tasks)
            added += n

    merged.pool, n = _union(merged.pool, remote.pool)
    added += n
    return merged, added
