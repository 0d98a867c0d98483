"""In-memory task snapshot adapter."""

from datetime import date, datetime

from donext.core.dates import to_day, today_of
from donext.core.tasks import Task


class TaskStoreError(Exception):
    """Raised when a task snapshot can't be loaded."""

    pass


class SnapshotTaskStore:
    """
    Task store over an in-memory list.

    Implements TaskProvider protocol. Accessors filter the snapshot on
    every call; no business logic beyond that.
    """

    def __init__(self, tasks: list[Task] | None = None):
        self._tasks: list[Task] = list(tasks or [])

    def replace(self, tasks: list[Task]) -> None:
        """Swap in a new snapshot."""
        self._tasks = list(tasks)

    def all_tasks(self) -> list[Task]:
        return list(self._tasks)

    def completed_non_archived_tasks(self) -> list[Task]:
        return [t for t in self._tasks if t.completed and not t.archived]

    def archived_tasks(self) -> list[Task]:
        return [t for t in self._tasks if t.archived]

    def completed_today_tasks(self, as_of: datetime | date | None = None) -> list[Task]:
        """Non-archived tasks completed on the day of `as_of`."""
        today = today_of(as_of)
        result = []
        for task in self.completed_non_archived_tasks():
            try:
                if to_day(task.completed_date) == today:
                    result.append(task)
            except ValueError:
                continue
        return result
