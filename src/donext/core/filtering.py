"""Pure view/filter pipeline - no I/O dependencies."""

import logging
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from enum import Enum

from .dates import now_of, to_day, to_moment, today_of
from .tasks import DateLike, Priority, Task, search_tasks

logger = logging.getLogger(__name__)


class FilterValueError(ValueError):
    """Raised when a filter is given a value outside its allowed set."""

    pass


class View(Enum):
    """Top-level task population being browsed. Exactly one is active."""

    ACTIVE = "active"
    TODAY = "today"
    COMPLETED = "completed"
    ARCHIVED = "archived"

    @property
    def is_filterable(self) -> bool:
        """Completed and archived lists are searched, never sliced by filters."""
        return self in (View.ACTIVE, View.TODAY)


class DueDateFilter(Enum):
    ALL = "all"
    TODAY = "today"
    WEEK = "week"
    OVERDUE = "overdue"
    PAST = "past"
    FUTURE = "future"
    NEXT_7_DAYS = "next7days"


def coerce_enum(enum_cls: type[Enum], value, error: type[ValueError] = FilterValueError):
    """Accept an enum member or its value; anything else raises `error`."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(repr(m.value) for m in enum_cls)
        raise error(
            f"Invalid {enum_cls.__name__} value {value!r} (expected one of {allowed})"
        ) from None


@dataclass
class FilterState:
    """Independent filter axes. Only consulted in Active and Today views."""

    priorities: set[Priority] = field(default_factory=set)
    tags: set[str] = field(default_factory=set)
    people: set[str] = field(default_factory=set)
    due_date: DueDateFilter = DueDateFilter.ALL
    go_live: bool = False

    def copy(self) -> "FilterState":
        return replace(
            self,
            priorities=set(self.priorities),
            tags=set(self.tags),
            people=set(self.people),
        )

    @property
    def is_default(self) -> bool:
        return self.active_count == 0

    @property
    def active_count(self) -> int:
        """One per filter axis that differs from its default."""
        return (
            bool(self.priorities)
            + bool(self.tags)
            + bool(self.people)
            + (self.due_date is not DueDateFilter.ALL)
            + self.go_live
        )


def _day_or_none(task: Task, field_name: str, value: DateLike) -> date | None:
    """Calendar day of a date field; a malformed value never matches."""
    try:
        return to_day(value)
    except ValueError:
        logger.warning(f"Ignoring malformed {field_name} on task {task.id}: {value!r}")
        return None


def is_on_day(task: Task, field_name: str, day: date) -> bool:
    return _day_or_none(task, field_name, getattr(task, field_name)) == day


def is_for_today(task: Task, as_of: datetime | date | None = None) -> bool:
    """Due date, go-live date or target deadline falls on today."""
    today = today_of(as_of)
    return any(
        is_on_day(task, name, today)
        for name in ("due_date", "go_live_date", "target_deadline")
    )


def active_tasks(tasks: list[Task]) -> list[Task]:
    return [t for t in tasks if t.is_active]


def todays_tasks(tasks: list[Task], as_of: datetime | date | None = None) -> list[Task]:
    """Active tasks with any of their dates on today."""
    return [t for t in active_tasks(tasks) if is_for_today(t, as_of)]


def base_tasks(
    view: View,
    tasks: list[Task],
    completed: list[Task],
    archived: list[Task],
    as_of: datetime | date | None = None,
) -> list[Task]:
    """
    Select the base population for a view.

    Completed and archived lists come from the store's own accessors
    rather than being re-derived from `tasks`.
    """
    match view:
        case View.ACTIVE:
            return active_tasks(tasks)
        case View.TODAY:
            return todays_tasks(tasks, as_of)
        case View.COMPLETED:
            return list(completed)
        case View.ARCHIVED:
            return list(archived)


def matches_due_date(
    task: Task,
    due_filter: DueDateFilter,
    as_of: datetime | date | None = None,
) -> bool:
    """
    Evaluate the due-date bucket filter against the task's due date.

    Tasks with no due date are left in: the bucket filter only narrows
    dated tasks.
    """
    if due_filter is DueDateFilter.ALL:
        return True

    try:
        due_moment = to_moment(task.due_date)
    except ValueError:
        logger.warning(f"Ignoring malformed due_date on task {task.id}: {task.due_date!r}")
        return False
    if due_moment is None:
        return True

    due = due_moment.date()
    today = today_of(as_of)

    match due_filter:
        case DueDateFilter.TODAY:
            return due == today
        case DueDateFilter.WEEK:
            return today <= due <= today + timedelta(days=7)
        case DueDateFilter.NEXT_7_DAYS:
            return today <= due <= today + timedelta(days=6)
        case DueDateFilter.OVERDUE:
            return due_moment < now_of(as_of)
        case DueDateFilter.PAST:
            return due < today
        case DueDateFilter.FUTURE:
            return due > today
    return True


def matches_filters(
    task: Task,
    filters: FilterState,
    as_of: datetime | date | None = None,
) -> bool:
    """All non-empty filter axes must match."""
    if filters.priorities and task.priority not in filters.priorities:
        return False
    if filters.tags and not task.tag_ids() & filters.tags:
        return False
    if filters.people and not task.person_ids() & filters.people:
        return False
    if not matches_due_date(task, filters.due_date, as_of):
        return False
    if filters.go_live and not is_on_day(task, "go_live_date", today_of(as_of)):
        return False
    return True


def visible_tasks(
    view: View,
    tasks: list[Task],
    completed: list[Task],
    archived: list[Task],
    filters: FilterState,
    search_term: str = "",
    as_of: datetime | date | None = None,
) -> list[Task]:
    """
    Full projection: view base list -> search -> filters.

    Filters are bypassed for Completed and Archived views. Relative order
    from the base list is kept.
    Pure function - no I/O.
    """
    result = search_tasks(base_tasks(view, tasks, completed, archived, as_of), search_term)
    if not view.is_filterable:
        return result
    return [t for t in result if matches_filters(t, filters, as_of)]
