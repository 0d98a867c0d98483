"""Functional core - pure business logic with no I/O."""

from .tasks import Task, Tag, Person, Priority, DueDateType, search_tasks
from .grouping import DateGroup, TaskGroup, classify, group_by_date, has_valid_dates
from .filtering import DueDateFilter, FilterState, FilterValueError, View, visible_tasks
from .engine import TaskViewEngine

__all__ = [
    # Tasks
    "Task",
    "Tag",
    "Person",
    "Priority",
    "DueDateType",
    "search_tasks",
    # Grouping
    "DateGroup",
    "TaskGroup",
    "classify",
    "group_by_date",
    "has_valid_dates",
    # Filtering
    "DueDateFilter",
    "FilterState",
    "FilterValueError",
    "View",
    "visible_tasks",
    # Engine
    "TaskViewEngine",
]
