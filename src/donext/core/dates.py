"""Calendar-day helpers shared by the classifier and the filters."""

from datetime import date, datetime, time, timedelta

from .tasks import DateLike


def to_moment(value: DateLike) -> datetime | None:
    """
    Coerce a task date field to a naive local datetime.

    Plain dates become midnight. Aware datetimes are converted to local
    time so they compare against a naive "now". Raises ValueError for
    values that can't be read as a date.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _local_naive(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        return _local_naive(datetime.fromisoformat(text))
    raise ValueError(f"Unsupported date value: {value!r}")


def to_day(value: DateLike) -> date | None:
    """Normalize a task date field to its calendar day (time of day dropped)."""
    moment = to_moment(value)
    return moment.date() if moment else None


def _local_naive(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


def today_of(as_of: datetime | date | None = None) -> date:
    """The calendar day of `as_of` (defaults to now)."""
    if as_of is None:
        return date.today()
    if isinstance(as_of, datetime):
        return _local_naive(as_of).date()
    return as_of


def now_of(as_of: datetime | date | None = None) -> datetime:
    """`as_of` as a naive local datetime (defaults to now)."""
    if as_of is None:
        return datetime.now()
    return to_moment(as_of)


def start_of_week(day: date) -> date:
    """Monday of the week containing `day`."""
    return day - timedelta(days=day.weekday())


def is_same_week(day: date, reference: date) -> bool:
    return start_of_week(day) == start_of_week(reference)


def is_next_week(day: date, reference: date) -> bool:
    return start_of_week(day) == start_of_week(reference) + timedelta(days=7)


def is_same_month(day: date, reference: date) -> bool:
    return (day.year, day.month) == (reference.year, reference.month)


def format_date(value: DateLike) -> str:
    """Format a date for display, e.g. "Jun 5, 2025"."""
    day = to_day(value)
    if day is None:
        return ""
    return f"{day.strftime('%b')} {day.day}, {day.year}"
