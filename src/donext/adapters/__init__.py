"""Adapters - I/O implementations of ports."""

from .memory import SnapshotTaskStore, TaskStoreError
from .file_store import FileTaskStore
from .supabase_api import SupabaseTaskStore

__all__ = [
    "SnapshotTaskStore",
    "TaskStoreError",
    "FileTaskStore",
    "SupabaseTaskStore",
]
