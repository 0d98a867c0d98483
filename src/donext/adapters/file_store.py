"""JSON file task snapshot adapter."""

import json
import logging
from pathlib import Path

from donext.core.tasks import Task

from .memory import SnapshotTaskStore, TaskStoreError

logger = logging.getLogger(__name__)


class FileTaskStore(SnapshotTaskStore):
    """
    Task snapshot read from a JSON file.

    Implements TaskProvider protocol. The file holds either a list of
    task rows or an object with a "tasks" list. A missing file is an
    empty snapshot.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()
        super().__init__(self._load())

    def _load(self) -> list[Task]:
        if not self.path.exists():
            logger.info(f"No task file at {self.path}, starting empty")
            return []

        try:
            data = json.loads(self.path.read_text())
        except json.JSONDecodeError as e:
            raise TaskStoreError(f"Invalid JSON in {self.path}: {e}") from e

        rows = data.get("tasks", []) if isinstance(data, dict) else data
        if not isinstance(rows, list):
            raise TaskStoreError(f"Expected a list of tasks in {self.path}")

        try:
            return [Task.from_api(row) for row in rows]
        except (KeyError, TypeError, ValueError) as e:
            raise TaskStoreError(f"Bad task row in {self.path}: {e}") from e

    def reload(self) -> None:
        """Re-read the file."""
        self.replace(self._load())
