"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

DateLike = date | datetime | str | None


class Priority(Enum):
    """Task priority, highest first."""

    HIGH = "high"
    NORMAL = "normal"
    LOW = "low"
    LOWEST = "lowest"


class DueDateType(Enum):
    """Qualifier for a due date: due *on* the day, or *by* the day."""

    ON = "on"
    BY = "by"
    NONE = "none"


@dataclass(frozen=True)
class Tag:
    id: str
    name: str


@dataclass(frozen=True)
class Person:
    id: str
    name: str


@dataclass
class Task:
    """
    A task as supplied by the owning store.

    Treated as read-only: nothing in the view engine mutates a Task.
    Date fields may hold raw ISO strings; they are parsed on use so a
    malformed value only affects the task that carries it.
    """

    id: str
    title: str
    description: str = ""
    priority: Priority = Priority.NORMAL
    due_date: DateLike = None
    due_date_type: DueDateType = DueDateType.NONE
    target_deadline: DateLike = None
    go_live_date: DateLike = None
    completed: bool = False
    completed_date: DateLike = None
    archived: bool = False
    tags: list[Tag] = field(default_factory=list)
    people: list[Person] = field(default_factory=list)
    dependencies: list[str] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return not self.completed and not self.archived

    def tag_ids(self) -> set[str]:
        return {t.id for t in self.tags}

    def person_ids(self) -> set[str]:
        return {p.id for p in self.people}

    def matches_search(self, term: str) -> bool:
        """Case-insensitive substring match on title, description or any tag name."""
        needle = term.lower()
        if needle in (self.title or "").lower():
            return True
        if needle in (self.description or "").lower():
            return True
        return any(needle in (tag.name or "").lower() for tag in self.tags)

    @classmethod
    def from_api(cls, data: dict) -> "Task":
        """Create Task from a stored task row (snake_case keys)."""
        priority = data.get("priority") or Priority.NORMAL.value
        due_type = data.get("due_date_type") or DueDateType.NONE.value
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "",
            description=data.get("description") or "",
            priority=Priority(priority),
            due_date=data.get("due_date"),
            due_date_type=DueDateType(due_type),
            target_deadline=data.get("target_deadline"),
            go_live_date=data.get("go_live_date"),
            completed=bool(data.get("completed", False)),
            completed_date=data.get("completed_date"),
            archived=bool(data.get("is_archived", False)),
            tags=[Tag(**_unwrap(t, "tags")) for t in data.get("tags") or []],
            people=[Person(**_unwrap(p, "people")) for p in data.get("people") or []],
            dependencies=list(data.get("dependencies") or []),
        )


def _unwrap(entry: dict, key: str) -> dict:
    """Accept either a bare {id, name} object or a join row {key: {id, name}}."""
    if key in entry and isinstance(entry[key], dict):
        entry = entry[key]
    return {"id": str(entry["id"]), "name": entry.get("name") or ""}


def search_tasks(tasks: list[Task], term: str) -> list[Task]:
    """
    Filter tasks by a free-text search term.

    An empty (or whitespace-only) term matches everything.
    Pure function - no I/O.
    """
    term = term.strip()
    if not term:
        return list(tasks)
    return [t for t in tasks if t.matches_search(term)]


def unique_tags(tasks: list[Task]) -> list[Tag]:
    """All distinct tags across tasks, in first-seen order."""
    seen: dict[str, Tag] = {}
    for task in tasks:
        for tag in task.tags:
            seen.setdefault(tag.id, tag)
    return list(seen.values())


def unique_people(tasks: list[Task]) -> list[Person]:
    """All distinct people across tasks, in first-seen order."""
    seen: dict[str, Person] = {}
    for task in tasks:
        for person in task.people:
            seen.setdefault(person.id, person)
    return list(seen.values())
