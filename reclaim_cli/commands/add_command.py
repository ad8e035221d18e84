"""
Handles the 'create' command: validates the typed flags and builds the
CreateTaskRequest sent to ``POST tasks``.

Chunk sizes are counted in 15-minute chunks.
"""
from enum import Enum
from typing import Any, Dict, Optional

from rich.console import Console

from ..reclaim_api.data_models import CreateTaskRequest
from ..reclaim_api.errors import InvalidInputError
from ..reclaim_api.http_client import ReclaimClient
from ..utils.format_utils import OutputFormat, parse_timestamp, print_json


class Priority(str, Enum):
    P1 = "P1"
    P2 = "P2"
    P3 = "P3"
    P4 = "P4"


class EventCategory(str, Enum):
    WORK = "WORK"
    PERSONAL = "PERSONAL"


def resolve_chunk_bounds(
    time_chunks_required: Optional[int],
    min_chunk_size: Optional[int],
    max_chunk_size: Optional[int],
):
    """Return ``(min, max)`` after defaulting and cross-checking against the total."""
    for flag, value in (("--min-chunk-size", min_chunk_size), ("--max-chunk-size", max_chunk_size)):
        if value is not None and value < 1:
            raise InvalidInputError(
                f"Invalid {flag} value: {value} must be at least 1.",
                hint="Chunk sizes are counted in 15-minute increments, starting at 1.",
            )

    if (min_chunk_size is not None or max_chunk_size is not None) and time_chunks_required is None:
        raise InvalidInputError(
            "Invalid chunk options: --min-chunk-size/--max-chunk-size require --time-chunks-required.",
            hint=(
                "Pass --time-chunks-required with chunk size options, e.g. "
                "--time-chunks-required 4 --min-chunk-size 2 --max-chunk-size 4"
            ),
        )

    if time_chunks_required is not None:
        if min_chunk_size is None:
            min_chunk_size = 1
        if max_chunk_size is None:
            max_chunk_size = time_chunks_required

        if min_chunk_size > time_chunks_required:
            raise InvalidInputError(
                f"Invalid --min-chunk-size value: {min_chunk_size} exceeds "
                f"--time-chunks-required ({time_chunks_required}).",
                hint="Use a min chunk size less than or equal to --time-chunks-required.",
            )
        if max_chunk_size > time_chunks_required:
            raise InvalidInputError(
                f"Invalid --max-chunk-size value: {max_chunk_size} exceeds "
                f"--time-chunks-required ({time_chunks_required}).",
                hint="Use a max chunk size less than or equal to --time-chunks-required.",
            )

    if min_chunk_size is not None and max_chunk_size is not None and min_chunk_size > max_chunk_size:
        raise InvalidInputError(
            f"Invalid chunk bounds: --min-chunk-size ({min_chunk_size}) cannot exceed "
            f"--max-chunk-size ({max_chunk_size}).",
            hint="Choose chunk sizes where min <= max.",
        )

    return min_chunk_size, max_chunk_size


def build_create_request(
    title: str,
    notes: Optional[str] = None,
    priority: Optional[str] = None,
    due: Optional[str] = None,
    time_chunks_required: Optional[int] = None,
    min_chunk_size: Optional[int] = None,
    max_chunk_size: Optional[int] = None,
    event_category: Optional[str] = EventCategory.WORK.value,
    always_private: Optional[bool] = True,
) -> CreateTaskRequest:
    title = (title or "").strip()
    if not title:
        raise InvalidInputError("Invalid --title value: it cannot be empty.", hint="Pass --title \"Plan Q1 roadmap\".")

    due = parse_timestamp(due, "--due")
    min_chunk_size, max_chunk_size = resolve_chunk_bounds(time_chunks_required, min_chunk_size, max_chunk_size)

    fields: Dict[str, Any] = {
        "notes": notes,
        "priority": priority,
        "due": due,
        "time_chunks_required": time_chunks_required,
        "min_chunk_size": min_chunk_size,
        "max_chunk_size": max_chunk_size,
        "event_category": event_category,
        "always_private": always_private,
    }
    # Only supplied fields are set, so absent ones never reach the wire.
    supplied = {name: value for name, value in fields.items() if value is not None}
    return CreateTaskRequest(title=title, **supplied)


def handle_create(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    """Create a new task in Reclaim."""
    request = build_create_request(
        title=args.title,
        notes=args.notes,
        priority=args.priority.value if args.priority else None,
        due=args.due,
        time_chunks_required=args.time_chunks_required,
        min_chunk_size=args.min_chunk_size,
        max_chunk_size=args.max_chunk_size,
        event_category=args.event_category.value,
        always_private=args.always_private,
    )
    created = client.create_task(request)

    if output_format == OutputFormat.json:
        print_json(created.to_dict())
        return

    console = Console()
    console.print(f"Created task #{created.id}: {created.title}", markup=False)
    if created.status is not None:
        console.print(f"Status: {created.status}", markup=False)
    if created.due is not None:
        console.print(f"Due: {created.due}", markup=False)
