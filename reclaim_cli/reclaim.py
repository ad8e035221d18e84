#!/usr/bin/env python3
import logging
from types import SimpleNamespace
from typing import Callable, List, Optional

import typer

from .commands.add_command import EventCategory, Priority, handle_create
from .commands.dashboard_command import run_dashboard
from .commands.delete_command import handle_delete
from .commands.events_command import (
    Transparency,
    Visibility,
    handle_events_apply,
    handle_events_create,
    handle_events_delete,
    handle_events_get,
    handle_events_list,
    handle_events_update,
)
from .commands.get_command import handle_get
from .commands.list_command import handle_list
from .commands.update_command import handle_patch, handle_put
from .reclaim_api.data_models import ZERO_POLICY_ID, TaskCompletionFilter
from .reclaim_api.errors import CliError, InvalidInputError
from .reclaim_api.http_client import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECS, ReclaimClient
from .utils.config import API_KEY_ENV, BASE_URL_ENV, TIMEOUT_ENV, load_env_vars
from .utils.format_utils import OutputFormat
from .utils.logger import configure_logging, get_logger

# Load environment variables before typer resolves envvar defaults
load_env_vars()

log = get_logger(__name__)

EXIT_FAILURE = 2

app = typer.Typer(
    name="reclaim",
    help=(
        "Simple CLI for Reclaim.ai tasks.\n\n"
        "Set your API key with RECLAIM_API_KEY or pass --api-key. "
        "Use --format json when another tool/agent will parse the output."
    ),
    no_args_is_help=True,
)
events_app = typer.Typer(help="List, inspect and change calendar events via schedule actions.", no_args_is_help=True)
app.add_typer(events_app, name="events")


def report_error(error: CliError) -> None:
    typer.echo(f"Error: {error}", err=True)
    if error.hint:
        typer.echo(f"Hint: {error.hint}", err=True)


def run_command(ctx: typer.Context, handler: Callable, **args) -> None:
    """Build the client from the global options and run ``handler``.

    Every ``CliError`` is reported on stderr and turned into exit code 2.
    """
    settings = ctx.obj
    try:
        client = ReclaimClient(settings.api_key, settings.base_url, settings.timeout_secs)
        handler(client, SimpleNamespace(**args), settings.format)
    except CliError as exc:
        log.debug("Command failed: %r", exc)
        report_error(exc)
        raise typer.Exit(code=EXIT_FAILURE)


@app.callback()
def main_callback(
    ctx: typer.Context,
    api_key: Optional[str] = typer.Option(
        None, "--api-key", envvar=API_KEY_ENV, show_envvar=True, show_default=False,
        help="Reclaim API key. Falls back to RECLAIM_API_KEY.",
    ),
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", envvar=BASE_URL_ENV, help="Reclaim API base URL."),
    timeout_secs: int = typer.Option(DEFAULT_TIMEOUT_SECS, "--timeout-secs", envvar=TIMEOUT_ENV, help="HTTP timeout in seconds."),
    output_format: OutputFormat = typer.Option(OutputFormat.human, "--format", help="Output format."),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log requests and responses to stderr."),
):
    """Global options shared by every command."""
    configure_logging(logging.DEBUG if verbose else logging.WARNING)
    ctx.obj = SimpleNamespace(
        api_key=api_key,
        base_url=base_url,
        timeout_secs=timeout_secs,
        format=output_format,
    )


# --- tasks ------------------------------------------------------------------

@app.command("list")
def list_tasks(
    ctx: typer.Context,
    all_tasks: bool = typer.Option(False, "--all", "-a", help="Include deleted, archived and cancelled tasks."),
    completion: Optional[TaskCompletionFilter] = typer.Option(
        None, "--filter", help="Only show open or completed tasks."
    ),
):
    """List tasks (active by default)."""
    run_command(ctx, handle_list, all=all_tasks, completion=completion)


@app.command("get")
def get_task(ctx: typer.Context, task_id: int = typer.Argument(..., help="Task ID.")):
    """Get one task by ID."""
    run_command(ctx, handle_get, task_id=task_id)


@app.command("put")
def put_task(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task ID."),
    json_body: Optional[str] = typer.Option(None, "--json", help="Full task JSON object."),
    set_entries: Optional[List[str]] = typer.Option(None, "--set", help="KEY=VALUE field update (repeatable)."),
    notification_key: Optional[str] = typer.Option(None, "--notification-key", help="Optional notificationKey query value."),
):
    """
    Replace a task via PUT.

    Pass --json with a full task object, or pass --set key=value fields.
    If only --set is passed, the current task is fetched first and your updates are applied on top.
    """
    run_command(ctx, handle_put, task_id=task_id, json=json_body, set=set_entries or [], notification_key=notification_key)


@app.command("patch")
def patch_task(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task ID."),
    json_body: Optional[str] = typer.Option(None, "--json", help="Partial task JSON object."),
    set_entries: Optional[List[str]] = typer.Option(None, "--set", help="KEY=VALUE field update (repeatable)."),
    notification_key: Optional[str] = typer.Option(None, "--notification-key", help="Optional notificationKey query value."),
):
    """
    Partially update a task via PATCH.

    Pass --json with a partial JSON object and/or repeated --set key=value entries.
    """
    run_command(ctx, handle_patch, task_id=task_id, json=json_body, set=set_entries or [], notification_key=notification_key)


@app.command("delete")
def delete_task(
    ctx: typer.Context,
    task_id: int = typer.Argument(..., help="Task ID."),
    notification_key: Optional[str] = typer.Option(None, "--notification-key", help="Optional notificationKey query value."),
):
    """Delete one task by ID."""
    run_command(ctx, handle_delete, task_id=task_id, notification_key=notification_key)


@app.command("create")
def create_task(
    ctx: typer.Context,
    title: str = typer.Option(..., "--title", help="Task title."),
    notes: Optional[str] = typer.Option(None, "--notes", help="Optional notes/description for the task."),
    priority: Optional[Priority] = typer.Option(None, "--priority", help="Optional priority (P1-P4)."),
    due: Optional[str] = typer.Option(None, "--due", help="Due date/time (ISO 8601 or natural language)."),
    time_chunks_required: Optional[int] = typer.Option(
        None, "--time-chunks-required", help="Total duration in 15-minute chunks."
    ),
    event_category: EventCategory = typer.Option(EventCategory.WORK, "--event-category", help="Event category."),
    min_chunk_size: Optional[int] = typer.Option(None, "--min-chunk-size", help="Minimum chunk size (15-minute chunks)."),
    max_chunk_size: Optional[int] = typer.Option(None, "--max-chunk-size", help="Maximum chunk size (15-minute chunks)."),
    always_private: bool = typer.Option(True, "--always-private/--no-always-private", help="Keep scheduled events private."),
):
    """Create a new task."""
    run_command(
        ctx,
        handle_create,
        title=title,
        notes=notes,
        priority=priority,
        due=due,
        time_chunks_required=time_chunks_required,
        event_category=event_category,
        min_chunk_size=min_chunk_size,
        max_chunk_size=max_chunk_size,
        always_private=always_private,
    )


def _handle_dashboard(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    run_dashboard(client, args.all)


@app.command("dashboard")
def dashboard(
    ctx: typer.Context,
    all_tasks: bool = typer.Option(False, "--all", "-a", help="Include deleted, archived and cancelled tasks."),
):
    """Open the interactive task dashboard."""
    if ctx.obj.format == OutputFormat.json:
        report_error(InvalidInputError(
            "The dashboard is an interactive TUI and only supports --format human.",
            hint="Run: reclaim dashboard",
        ))
        raise typer.Exit(code=EXIT_FAILURE)
    run_command(ctx, _handle_dashboard, all=all_tasks)


# Aliases
app.command("ls", hidden=True)(list_tasks)
app.command("show", hidden=True)(get_task)
for _alias in ("del", "rm", "remove"):
    app.command(_alias, hidden=True)(delete_task)


# --- events -----------------------------------------------------------------

@events_app.command("list")
def events_list(
    ctx: typer.Context,
    calendar_ids: Optional[List[int]] = typer.Option(None, "--calendar-id", help="Calendar ID to include (repeatable)."),
    all_connected: bool = typer.Option(False, "--all-connected", help="Include all connected calendars."),
    start: Optional[str] = typer.Option(None, "--start", help="Range start (ISO 8601 or natural language)."),
    end: Optional[str] = typer.Option(None, "--end", help="Range end (ISO 8601 or natural language)."),
    source_details: bool = typer.Option(False, "--source-details", help="Ask for source details."),
    thin: bool = typer.Option(False, "--thin", help="Ask for thin event objects."),
):
    """List calendar events."""
    run_command(
        ctx,
        handle_events_list,
        calendar_ids=calendar_ids or [],
        all_connected=all_connected,
        start=start,
        end=end,
        source_details=source_details,
        thin=thin,
    )


@events_app.command("get")
def events_get(
    ctx: typer.Context,
    calendar_id: int = typer.Argument(..., help="Calendar ID."),
    event_id: str = typer.Argument(..., help="Event ID."),
    source_details: bool = typer.Option(False, "--source-details", help="Ask for source details."),
    thin: bool = typer.Option(False, "--thin", help="Ask for a thin event object."),
):
    """Get one calendar event."""
    run_command(
        ctx, handle_events_get, calendar_id=calendar_id, event_id=event_id, source_details=source_details, thin=thin
    )


@events_app.command("create")
def events_create(
    ctx: typer.Context,
    calendar_id: int = typer.Option(..., "--calendar-id", help="Calendar to create the event in."),
    title: str = typer.Option(..., "--title", help="Event title."),
    start: str = typer.Option(..., "--start", help="Event start (ISO 8601 or natural language)."),
    end: str = typer.Option(..., "--end", help="Event end (ISO 8601 or natural language)."),
    policy_id: str = typer.Option(ZERO_POLICY_ID, "--policy-id", help="Scheduling policy ID."),
    attendees: Optional[List[str]] = typer.Option(None, "--attendee", help="Attendee email (repeatable)."),
    description: Optional[str] = typer.Option(None, "--description", help="Event description."),
    location: Optional[str] = typer.Option(None, "--location", help="Event location."),
    priority: Optional[Priority] = typer.Option(None, "--priority", help="Event priority (P1-P4)."),
    visibility: Optional[Visibility] = typer.Option(None, "--visibility", help="Event visibility."),
    transparency: Optional[Transparency] = typer.Option(None, "--transparency", help="Busy (OPAQUE) or free (TRANSPARENT)."),
    guests_can_modify: bool = typer.Option(False, "--guests-can-modify/--no-guests-can-modify"),
    guests_can_invite_others: bool = typer.Option(True, "--guests-can-invite-others/--no-guests-can-invite-others"),
    guests_can_see_other_guests: bool = typer.Option(True, "--guests-can-see-other-guests/--no-guests-can-see-other-guests"),
    json_body: Optional[str] = typer.Option(None, "--json", help="JSON object merged over the action."),
    set_entries: Optional[List[str]] = typer.Option(None, "--set", help="KEY=VALUE action field (repeatable)."),
):
    """Create a calendar event (AddEventAction)."""
    run_command(
        ctx,
        handle_events_create,
        calendar_id=calendar_id,
        title=title,
        start=start,
        end=end,
        policy_id=policy_id,
        attendees=attendees or [],
        description=description,
        location=location,
        priority=priority,
        visibility=visibility,
        transparency=transparency,
        guests_can_modify=guests_can_modify,
        guests_can_invite_others=guests_can_invite_others,
        guests_can_see_other_guests=guests_can_see_other_guests,
        json=json_body,
        set=set_entries or [],
    )


@events_app.command("update")
def events_update(
    ctx: typer.Context,
    calendar_id: int = typer.Argument(..., help="Calendar ID."),
    event_id: str = typer.Argument(..., help="Event ID."),
    policy_id: str = typer.Option(ZERO_POLICY_ID, "--policy-id", help="Scheduling policy ID."),
    title: Optional[str] = typer.Option(None, "--title", help="New title."),
    description: Optional[str] = typer.Option(None, "--description", help="New description."),
    location: Optional[str] = typer.Option(None, "--location", help="New location."),
    priority: Optional[Priority] = typer.Option(None, "--priority", help="New priority (P1-P4)."),
    visibility: Optional[Visibility] = typer.Option(None, "--visibility", help="New visibility."),
    transparency: Optional[Transparency] = typer.Option(None, "--transparency", help="New transparency."),
    start: Optional[str] = typer.Option(None, "--start", help="New start; requires --end."),
    end: Optional[str] = typer.Option(None, "--end", help="New end; requires --start."),
    json_body: Optional[str] = typer.Option(None, "--json", help="JSON object merged over the action."),
    set_entries: Optional[List[str]] = typer.Option(None, "--set", help="KEY=VALUE action field (repeatable)."),
):
    """Update a calendar event (UpdateEventAction)."""
    run_command(
        ctx,
        handle_events_update,
        calendar_id=calendar_id,
        event_id=event_id,
        policy_id=policy_id,
        title=title,
        description=description,
        location=location,
        priority=priority,
        visibility=visibility,
        transparency=transparency,
        start=start,
        end=end,
        json=json_body,
        set=set_entries or [],
    )


@events_app.command("delete")
def events_delete(
    ctx: typer.Context,
    calendar_id: int = typer.Argument(..., help="Calendar ID."),
    event_id: str = typer.Argument(..., help="Event ID."),
    policy_id: str = typer.Option(ZERO_POLICY_ID, "--policy-id", help="Scheduling policy ID."),
    message: Optional[str] = typer.Option(None, "--message", help="Optional notification message for attendees."),
):
    """Cancel a calendar event (CancelEventAction)."""
    run_command(
        ctx, handle_events_delete, calendar_id=calendar_id, event_id=event_id, policy_id=policy_id, message=message
    )


@events_app.command("apply")
def events_apply(
    ctx: typer.Context,
    json_body: str = typer.Option(..., "--json", help="Full {\"actionsTaken\": [...]} request."),
):
    """Post raw schedule actions."""
    run_command(ctx, handle_events_apply, json=json_body)


def main():
    app()


if __name__ == "__main__":
    main()
