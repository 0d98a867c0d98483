"""Supabase REST adapter - HTTP snapshot fetch of the task table."""

import logging

import requests

from donext.config import Config, load_config
from donext.core.tasks import Task

from .memory import SnapshotTaskStore, TaskStoreError

logger = logging.getLogger(__name__)

TASKS_ENDPOINT = "/rest/v1/tasks"
TASK_SELECT = "*,tags(*),people(*)"


class SupabaseTaskStore(SnapshotTaskStore):
    """
    Supabase (PostgREST) task snapshot.

    Implements TaskProvider protocol. Fetches the whole task table once,
    lazily, and serves accessors from that snapshot. No filtering is
    pushed to the server.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        self._session = session or requests.Session()
        self._loaded = False
        super().__init__()

    def _headers(self) -> dict[str, str]:
        if not self.config.supabase_key:
            raise TaskStoreError("Missing Supabase key. Add SUPABASE_KEY to config/donext.conf")
        return {
            "apikey": self.config.supabase_key,
            "Authorization": f"Bearer {self.config.supabase_key}",
            "Accept": "application/json",
        }

    def _params(self) -> dict[str, str]:
        params = {"select": TASK_SELECT, "order": "created_at.asc"}
        if self.config.supabase_user_id:
            params["user_id"] = f"eq.{self.config.supabase_user_id}"
        return params

    def fetch_raw(self) -> list[dict]:
        """Fetch raw task rows."""
        if not self.config.supabase_url:
            raise TaskStoreError("Missing Supabase URL. Add SUPABASE_URL to config/donext.conf")

        url = f"{self.config.supabase_url.rstrip('/')}{TASKS_ENDPOINT}"
        try:
            resp = self._session.get(url, headers=self._headers(), params=self._params(), timeout=30)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise TaskStoreError(f"Task fetch failed: {e}") from e

        rows = resp.json()
        logger.debug(f"Fetched {len(rows)} task rows from {url}")
        return rows

    def refresh(self) -> None:
        """Refetch the snapshot from the server."""
        rows = self.fetch_raw()
        try:
            self.replace([Task.from_api(row) for row in rows])
        except (KeyError, TypeError, ValueError) as e:
            raise TaskStoreError(f"Bad task row from Supabase: {e}") from e
        self._loaded = True

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.refresh()

    def all_tasks(self) -> list[Task]:
        self._ensure_loaded()
        return super().all_tasks()

    def completed_non_archived_tasks(self) -> list[Task]:
        self._ensure_loaded()
        return super().completed_non_archived_tasks()

    def archived_tasks(self) -> list[Task]:
        self._ensure_loaded()
        return super().archived_tasks()
