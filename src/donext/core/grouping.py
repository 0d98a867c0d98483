"""Date bucketing - pure classification and grouping, no I/O."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum

from .dates import (
    is_next_week,
    is_same_month,
    is_same_week,
    to_day,
    today_of,
)
from .tasks import Task

logger = logging.getLogger(__name__)


class DateGroup(Enum):
    """Date buckets. Declaration order is the display order."""

    OVERDUE = "Overdue"
    TODAY = "Today"
    TOMORROW = "Tomorrow"
    THIS_WEEK = "This Week"
    NEXT_WEEK = "Next Week"
    THIS_MONTH = "This Month"
    FUTURE = "Future"
    NO_DATE = "No Date"

    @property
    def rank(self) -> int:
        return GROUP_ORDER.index(self)

    def __lt__(self, other: "DateGroup") -> bool:
        if not isinstance(other, DateGroup):
            return NotImplemented
        return self.rank < other.rank


GROUP_ORDER = list(DateGroup)


@dataclass
class TaskGroup:
    """A non-empty date bucket ready for rendering."""

    group: DateGroup
    tasks: list[Task] = field(default_factory=list)

    @property
    def id(self) -> str:
        return self.group.value

    @property
    def title(self) -> str:
        return self.group.value


def classify(task: Task, as_of: datetime | date | None = None) -> DateGroup:
    """
    Bucket a task by its target deadline.

    The due date is never consulted. Completed tasks are never Overdue;
    they fall through to whichever later check their day matches.
    Raises ValueError if the target deadline is malformed.
    """
    deadline = to_day(task.target_deadline)
    if deadline is None:
        return DateGroup.NO_DATE

    today = today_of(as_of)

    if not task.completed and deadline < today:
        return DateGroup.OVERDUE
    if deadline == today:
        return DateGroup.TODAY
    if deadline == today + timedelta(days=1):
        return DateGroup.TOMORROW
    if is_same_week(deadline, today):
        return DateGroup.THIS_WEEK
    if is_next_week(deadline, today):
        return DateGroup.NEXT_WEEK
    if is_same_month(deadline, today):
        return DateGroup.THIS_MONTH
    return DateGroup.FUTURE


def has_valid_dates(task: Task) -> bool:
    """True if both due date and target deadline parse (absent counts as valid)."""
    for value in (task.due_date, task.target_deadline):
        try:
            to_day(value)
        except ValueError:
            return False
    return True


def group_by_date(tasks: list[Task], as_of: datetime | date | None = None) -> list[TaskGroup]:
    """
    Partition tasks into non-empty date buckets in display order.

    Tasks with malformed dates are skipped (and logged) without affecting
    the rest. Within a bucket, input order is kept.
    Pure function - no I/O.
    """
    buckets: dict[DateGroup, list[Task]] = {g: [] for g in GROUP_ORDER}

    for task in tasks:
        if not has_valid_dates(task):
            logger.warning(f"Skipping task {task.id} with malformed dates")
            continue
        buckets[classify(task, as_of)].append(task)

    return [TaskGroup(group=g, tasks=buckets[g]) for g in GROUP_ORDER if buckets[g]]


def sort_by_target_deadline(tasks: list[Task]) -> list[Task]:
    """
    Sort tasks by target deadline (ascending), undated tasks last.

    Malformed deadlines sort with the undated tasks. Stable for ties.
    """

    def sort_key(t: Task) -> tuple[int, date]:
        try:
            day = to_day(t.target_deadline)
        except ValueError:
            day = None
        return (1, date.max) if day is None else (0, day)

    return sorted(tasks, key=sort_key)


def format_group_title(group: DateGroup, tasks: list[Task]) -> str:
    """Bucket heading with count, e.g. "Today (5)"."""
    return f"{group.value} ({len(tasks)})"
