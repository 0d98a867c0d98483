"""Task view & filter engine - stateful controller over a task provider."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from .filtering import (
    DueDateFilter,
    FilterState,
    View,
    coerce_enum,
    todays_tasks,
    visible_tasks,
)
from .grouping import TaskGroup, group_by_date
from .tasks import Person, Priority, Tag, Task, unique_people, unique_tags

if TYPE_CHECKING:
    from donext.ports.task_provider import TaskProvider

logger = logging.getLogger(__name__)


class TaskViewEngine:
    """
    Holds view, filter and search state and projects the visible task list.

    Nothing is cached: every read re-derives the projection from the
    provider's current snapshot, so state changes can't leave stale results.
    """

    def __init__(
        self,
        provider: TaskProvider,
        search_term: str = "",
        clock: Callable[[], datetime] | None = None,
    ):
        self.provider = provider
        self._clock = clock or datetime.now
        self._view = View.ACTIVE
        self._filters = FilterState()
        self._search_term = ""
        self.set_search_term(search_term)

    # ============== State (read) ==============

    @property
    def view(self) -> View:
        return self._view

    @property
    def filters(self) -> FilterState:
        """A copy of the current filter state."""
        return self._filters.copy()

    @property
    def search_term(self) -> str:
        return self._search_term

    # ============== View transitions ==============

    def _switch_view(self, view: View) -> None:
        # Re-selecting the current view toggles back to Active
        self._view = View.ACTIVE if self._view is view else view
        logger.debug(f"View is now {self._view.value}")

    def show_all_active(self) -> None:
        self._view = View.ACTIVE

    def show_today(self) -> None:
        self._switch_view(View.TODAY)

    def show_completed(self) -> None:
        self._switch_view(View.COMPLETED)

    def show_archived(self) -> None:
        self._switch_view(View.ARCHIVED)

    def set_view(self, view: View | str) -> None:
        """Jump straight to a view (no toggle)."""
        self._view = coerce_enum(View, view, error=ValueError)

    # ============== Search & filters ==============

    def set_search_term(self, term: str) -> None:
        if not isinstance(term, str):
            raise TypeError(f"Search term must be a string, got {type(term).__name__}")
        self._search_term = term

    def toggle_tag(self, tag_id: str) -> None:
        _toggle(self._filters.tags, _require_id(tag_id, "Tag"))

    def toggle_person(self, person_id: str) -> None:
        _toggle(self._filters.people, _require_id(person_id, "Person"))

    def toggle_priority(self, priority: Priority | str) -> None:
        _toggle(self._filters.priorities, coerce_enum(Priority, priority))

    def set_filter_by_due_date(self, bucket: DueDateFilter | str) -> None:
        self._filters.due_date = coerce_enum(DueDateFilter, bucket)

    def set_filter_by_go_live(self, enabled: bool) -> None:
        if not isinstance(enabled, bool):
            raise TypeError(f"Go-live filter must be a bool, got {type(enabled).__name__}")
        self._filters.go_live = enabled

    def clear_all_filters(self) -> None:
        """Reset every filter axis. View and search are left alone."""
        self._filters = FilterState()

    # ============== Projection ==============

    def get_visible_tasks(self) -> list[Task]:
        """Recompute the visible list from the provider's current snapshot."""
        return self._visible_at(self._clock())

    def _visible_at(self, now: datetime) -> list[Task]:
        result = visible_tasks(
            self._view,
            self.provider.all_tasks(),
            self.provider.completed_non_archived_tasks(),
            self.provider.archived_tasks(),
            self._filters,
            self._search_term,
            as_of=now,
        )
        logger.debug(f"{len(result)} visible tasks in {self._view.value} view")
        return result

    @property
    def visible_tasks(self) -> list[Task]:
        return self.get_visible_tasks()

    def grouped_tasks(self) -> list[TaskGroup]:
        """Date-bucketed visible tasks. Only Active and Today views are grouped."""
        if not self._view.is_filterable:
            raise ValueError(f"The {self._view.value} view is a flat list and is not grouped")
        now = self._clock()
        return group_by_date(self._visible_at(now), as_of=now)

    # ============== Derived values ==============

    @property
    def active_filter_count(self) -> int:
        """Badge count: one per active filter axis plus one for a non-empty search."""
        return self._filters.active_count + bool(self._search_term.strip())

    @property
    def todays_count(self) -> int:
        return len(todays_tasks(self.provider.all_tasks(), self._clock()))

    @property
    def completed_count(self) -> int:
        return len(self.provider.completed_non_archived_tasks())

    def get_task_by_id(self, task_id: str) -> Task | None:
        """Look up a task in the full, unfiltered collection."""
        return next((t for t in self.provider.all_tasks() if t.id == task_id), None)

    def all_tags(self) -> list[Tag]:
        return unique_tags(self.provider.all_tasks())

    def all_people(self) -> list[Person]:
        return unique_people(self.provider.all_tasks())


def _toggle(selected: set, value) -> None:
    if value in selected:
        selected.remove(value)
    else:
        selected.add(value)


def _require_id(value: str, kind: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{kind} id must be a string, got {type(value).__name__}")
    return value
