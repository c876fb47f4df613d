# src/day_planner/storage/persistence.py

from __future__ import annotations

import json
import logging

from ..core.ports import KeyValueRepo
from ..tasks.task_models import TaskCollection

logger = logging.getLogger(__name__)

TASKS_KEY = "taskTodoPlanner"
DOCUMENT_ID_KEY = "todoGistId"
TOKEN_KEY = "githubToken"


class TaskPersistence:
    """Mirror the whole task collection into a single JSON slot."""

    def __init__(self, kv: KeyValueRepo, key: str = TASKS_KEY) -> None:
        self._kv = kv
        self._key = key

    def save(self, collection: TaskCollection) -> None:
        self._kv.set(self._key, json.dumps(collection.to_dict(), ensure_ascii=False))

    def load(self) -> TaskCollection:
        raw = self._kv.get(self._key)
        if raw is None:
            logger.debug("No stored tasks under key=%s; starting empty.", self._key)
            return TaskCollection.empty()
        return TaskCollection.from_dict(json.loads(raw))
