"""Task provider interface."""

from typing import Protocol

from donext.core.tasks import Task


class TaskProvider(Protocol):
    """Interface for supplying a task snapshot from any store."""

    def all_tasks(self) -> list[Task]:
        """Every task, in display order."""
        ...

    def completed_non_archived_tasks(self) -> list[Task]:
        """Completed tasks that are not archived (any completion date)."""
        ...

    def archived_tasks(self) -> list[Task]:
        """Archived tasks, completed or not."""
        ...
