"""donext CLI - print task views from a snapshot."""

import json
import logging
import sys
from datetime import date

import click

from .adapters import FileTaskStore, SupabaseTaskStore, TaskStoreError
from .config import Config, load_config
from .core.dates import format_date, to_moment
from .core.engine import TaskViewEngine
from .core.filtering import DueDateFilter, View
from .core.grouping import format_group_title
from .core.tasks import DateLike, DueDateType, Priority, Task
from .ports import TaskProvider

PRIORITY_MARKERS = {
    Priority.HIGH: "!!!",
    Priority.NORMAL: "!!",
    Priority.LOW: "!",
    Priority.LOWEST: "",
}


@click.group()
@click.version_option(package_name="donext")
def main():
    """donext - task views from the command line."""
    pass


def _setup_logging(debug: bool, config: Config) -> None:
    logging.basicConfig(
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        level=logging.DEBUG if debug else getattr(logging, config.log_level, logging.WARNING),
    )


def get_provider(config: Config) -> TaskProvider:
    """Supabase if configured, otherwise the local JSON snapshot."""
    if config.supabase_url:
        return SupabaseTaskStore(config)
    return FileTaskStore(config.tasks_file)


def _iso(value: DateLike) -> str | None:
    try:
        moment = to_moment(value)
    except ValueError:
        return str(value)
    return moment.isoformat() if moment else None


def serialize_task(t: Task) -> dict:
    return {
        "id": t.id,
        "title": t.title,
        "description": t.description,
        "priority": t.priority.value,
        "due_date": _iso(t.due_date),
        "due_date_type": t.due_date_type.value,
        "target_deadline": _iso(t.target_deadline),
        "go_live_date": _iso(t.go_live_date),
        "completed": t.completed,
        "completed_date": _iso(t.completed_date),
        "archived": t.archived,
        "tags": [{"id": tag.id, "name": tag.name} for tag in t.tags],
        "people": [{"id": p.id, "name": p.name} for p in t.people],
        "dependencies": t.dependencies,
    }


def format_task_line(t: Task) -> str:
    """One-line summary of a task for terminal output."""
    marker = PRIORITY_MARKERS[t.priority]
    try:
        due = format_date(t.due_date)
    except ValueError:
        due = f"invalid date {t.due_date!r}"
    qualifier = "" if t.due_date_type is DueDateType.NONE else f"{t.due_date_type.value} "
    due_str = f" (due {qualifier}{due})" if due else ""
    tags = "".join(f" #{tag.name}" for tag in t.tags)
    people = "".join(f" @{p.name}" for p in t.people)
    check = "x" if t.completed else " "
    return f"[{check}] [{marker:3}] {t.title}{due_str}{tags}{people}"


def selection_options(func):
    """View, search and filter options shared by the listing commands."""
    options = [
        click.option("--view", "view", type=click.Choice([v.value for v in View]), default=None,
                     help="Task population (defaults to DEFAULT_VIEW from config)"),
        click.option("--search", "-s", "search", default="", help="Case-insensitive text search"),
        click.option("--priority", "-p", "priorities", multiple=True,
                     type=click.Choice([p.value for p in Priority]), help="Priority filter (repeatable)"),
        click.option("--tag", "-t", "tags", multiple=True, help="Tag id filter (repeatable)"),
        click.option("--person", "people", multiple=True, help="Person id filter (repeatable)"),
        click.option("--due", "due", type=click.Choice([d.value for d in DueDateFilter]),
                     default=DueDateFilter.ALL.value, help="Due-date bucket filter"),
        click.option("--go-live", "go_live", is_flag=True, help="Only tasks going live today"),
        click.option("--debug", is_flag=True, help="Enable debug logging"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def build_engine(
    provider: TaskProvider,
    view: str,
    search: str = "",
    priorities: tuple[str, ...] = (),
    tags: tuple[str, ...] = (),
    people: tuple[str, ...] = (),
    due: str = "all",
    go_live: bool = False,
) -> TaskViewEngine:
    """Create an engine and apply a one-shot selection."""
    engine = TaskViewEngine(provider, search_term=search)
    engine.set_view(view)
    for p in dict.fromkeys(priorities):
        engine.toggle_priority(p)
    for tag_id in dict.fromkeys(tags):
        engine.toggle_tag(tag_id)
    for person_id in dict.fromkeys(people):
        engine.toggle_person(person_id)
    engine.set_filter_by_due_date(due)
    engine.set_filter_by_go_live(go_live)
    return engine


def _engine_from_options(config: Config, view: str | None, **selection) -> TaskViewEngine:
    try:
        return build_engine(get_provider(config), view or config.default_view, **selection)
    except (TaskStoreError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)


def _summary(engine: TaskViewEngine) -> str:
    filters = engine.active_filter_count
    suffix = f", {filters} filter(s) active" if filters else ""
    return f"{engine.view.value.title()} view{suffix}"


@main.command("list")
@selection_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def list_tasks(view, search, priorities, tags, people, due, go_live, debug, as_json):
    """List the visible tasks for a view."""
    config = load_config()
    _setup_logging(debug, config)
    engine = _engine_from_options(
        config, view, search=search, priorities=priorities, tags=tags,
        people=people, due=due, go_live=go_live,
    )

    try:
        visible = engine.get_visible_tasks()
    except TaskStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([serialize_task(t) for t in visible], indent=2))
        return

    click.echo(_summary(engine))
    if not visible:
        click.echo("No tasks.")
        return

    for task in visible:
        click.echo(format_task_line(task))


@main.command()
@selection_options
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def groups(view, search, priorities, tags, people, due, go_live, debug, as_json):
    """Show visible tasks grouped by target deadline."""
    config = load_config()
    _setup_logging(debug, config)
    engine = _engine_from_options(
        config, view, search=search, priorities=priorities, tags=tags,
        people=people, due=due, go_live=go_live,
    )

    try:
        grouped = engine.grouped_tasks()
    except (TaskStoreError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {"group": g.title, "tasks": [serialize_task(t) for t in g.tasks]}
                    for g in grouped
                ],
                indent=2,
            )
        )
        return

    if not grouped:
        click.echo("No tasks.")
        return

    for i, group in enumerate(grouped):
        if i:
            click.echo()
        click.echo(f"### {format_group_title(group.group, group.tasks)}")
        for task in group.tasks:
            click.echo(f"  {format_task_line(task)}")


@main.command()
@click.argument("task_id")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def show(task_id: str, as_json: bool):
    """Show a single task by id."""
    config = load_config()
    _setup_logging(False, config)
    try:
        engine = TaskViewEngine(get_provider(config))
        task = engine.get_task_by_id(task_id)
    except TaskStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if task is None:
        click.echo(f"Error: No task with id {task_id}", err=True)
        sys.exit(1)

    if as_json:
        click.echo(json.dumps(serialize_task(task), indent=2))
        return

    click.echo(format_task_line(task))
    if task.description:
        click.echo(f"\n{task.description}")
    if task.dependencies:
        click.echo(f"\nDepends on: {', '.join(task.dependencies)}")


@main.command()
def today():
    """Count today's tasks and completed tasks."""
    config = load_config()
    _setup_logging(False, config)
    try:
        engine = TaskViewEngine(get_provider(config))
        click.echo(f"{date.today().strftime('%A, %B %d')}")
        click.echo(f"Due or going live today: {engine.todays_count}")
        click.echo(f"Completed (not archived): {engine.completed_count}")
    except TaskStoreError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
