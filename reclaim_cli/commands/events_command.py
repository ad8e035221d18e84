"""
Handles the 'events' sub-commands.

Events are never edited directly: create, update and delete are expressed as
schedule actions posted to ``schedule-actions/apply-actions`` in a
``{"actionsTaken": [...]}`` envelope.
"""
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from ..reclaim_api.data_models import (
    EVENT_ACTION_ADAPTER,
    UPDATE_IDENTITY_KEYS,
    ZERO_POLICY_ID,
    AddEventAction,
    Attendee,
    CancelEventAction,
    DateRange,
    EventListQuery,
    UpdateEventAction,
    actions_envelope,
)
from ..reclaim_api.errors import InvalidInputError
from ..reclaim_api.http_client import ReclaimClient
from ..utils.format_utils import (
    OutputFormat,
    json_text_by_pointers,
    parse_timestamp,
    print_json,
    render_pretty_json,
)
from ..utils.json_args import layer_payload, parse_json_object_argument

TIME_RANGE_HINT = "Use ISO 8601 timestamps, e.g. --start 2026-02-21T18:30:00Z --end 2026-02-21T19:00:00Z"
POLICY_HINT = f"Use a UUID, or omit --policy-id to use {ZERO_POLICY_ID}."

TITLE_POINTERS = ("/title",)
KEY_POINTERS = ("/key", "/eventKey")
START_POINTERS = ("/eventDate/start", "/dateRange/start", "/originalStart")
END_POINTERS = ("/eventDate/end", "/dateRange/end", "/originalEnd")


class Visibility(str, Enum):
    DEFAULT = "DEFAULT"
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"
    CONFIDENTIAL = "CONFIDENTIAL"


class Transparency(str, Enum):
    OPAQUE = "OPAQUE"
    TRANSPARENT = "TRANSPARENT"


def _clean(value: Optional[str]) -> Optional[str]:
    """Trimmed value, or None when blank."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def _enum_value(value: Any) -> Optional[str]:
    if value is None:
        return None
    return value.value if isinstance(value, Enum) else str(value)


def _require_policy_id(policy_id: Optional[str]) -> str:
    policy_id = _clean(policy_id)
    if policy_id is None:
        raise InvalidInputError("Invalid --policy-id value: it cannot be empty.", hint=POLICY_HINT)
    return policy_id


def _validated_action(payload: Dict[str, Any]) -> Dict[str, Any]:
    """Check the merged action against the tagged union; return it unchanged."""
    try:
        EVENT_ACTION_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ())) or "action"
        raise InvalidInputError(
            f"Invalid event action: {location}: {first.get('msg', 'invalid value')}",
            hint="Check --json/--set overrides; 'type' must be AddEventAction, UpdateEventAction or CancelEventAction.",
        ) from exc
    return payload


def build_event_create_request(
    calendar_id: int,
    title: str,
    start: str,
    end: str,
    policy_id: Optional[str] = ZERO_POLICY_ID,
    attendees: Optional[Iterable[str]] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
    priority: Any = None,
    visibility: Any = None,
    transparency: Any = None,
    guests_can_modify: bool = False,
    guests_can_invite_others: bool = True,
    guests_can_see_other_guests: bool = True,
    raw_json: Optional[str] = None,
    set_entries: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    start, end = _clean(start), _clean(end)
    if start is None or end is None:
        raise InvalidInputError("Invalid event time range: --start and --end are required.", hint=TIME_RANGE_HINT)
    policy_id = _require_policy_id(policy_id)

    action = AddEventAction(
        policy_id=policy_id,
        calendar_id=calendar_id,
        title=title,
        date_range=DateRange(start=parse_timestamp(start, "--start"), end=parse_timestamp(end, "--end")),
        guests_can_modify=guests_can_modify,
        guests_can_invite_others=guests_can_invite_others,
        guests_can_see_other_guests=guests_can_see_other_guests,
        attendees=[Attendee(email=email) for email in map(_clean, attendees or []) if email],
        description=_clean(description),
        location=_clean(location),
        priority=_enum_value(priority),
        visibility=_enum_value(visibility),
        transparency=_enum_value(transparency),
    )
    payload = layer_payload(action.to_payload(), raw_json, set_entries)
    return actions_envelope(_validated_action(payload))


def build_event_update_request(
    calendar_id: int,
    event_id: str,
    policy_id: Optional[str] = ZERO_POLICY_ID,
    title: Optional[str] = None,
    description: Optional[str] = None,
    location: Optional[str] = None,
    priority: Any = None,
    visibility: Any = None,
    transparency: Any = None,
    start: Optional[str] = None,
    end: Optional[str] = None,
    raw_json: Optional[str] = None,
    set_entries: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    policy_id = _require_policy_id(policy_id)

    if (start is None) != (end is None):
        raise InvalidInputError(
            "Invalid date range update: --start and --end must be passed together.",
            hint="Pass both --start and --end, or neither. For partial advanced updates, use --json.",
        )

    date_range = None
    if start is not None and end is not None:
        start, end = _clean(start), _clean(end)
        if start is None or end is None:
            raise InvalidInputError(
                "Invalid date range update: --start and --end cannot be empty.",
                hint=TIME_RANGE_HINT,
            )
        date_range = DateRange(start=parse_timestamp(start, "--start"), end=parse_timestamp(end, "--end"))

    action = UpdateEventAction(
        policy_id=policy_id,
        calendar_id=calendar_id,
        event_id=event_id,
        title=_clean(title),
        description=_clean(description),
        location=_clean(location),
        priority=_enum_value(priority),
        visibility=_enum_value(visibility),
        transparency=_enum_value(transparency),
        date_range=date_range,
    )
    payload = layer_payload(action.to_payload(), raw_json, set_entries)

    if not any(key not in UPDATE_IDENTITY_KEYS for key in payload):
        raise InvalidInputError(
            "Event update requires at least one field change.",
            hint=(
                "Pass one of: --title/--description/--location/--priority/--start+--end, "
                "or use --json/--set."
            ),
        )
    return actions_envelope(_validated_action(payload))


def build_event_delete_request(
    calendar_id: int,
    event_id: str,
    policy_id: Optional[str] = ZERO_POLICY_ID,
    message: Optional[str] = None,
) -> Dict[str, Any]:
    policy_id = _require_policy_id(policy_id)
    action = CancelEventAction(
        policy_id=policy_id,
        event_key=f"{calendar_id}/{event_id}",
        notification_message=_clean(message),
    )
    return actions_envelope(action.to_payload())


def build_events_apply_request(raw_json: str) -> Dict[str, Any]:
    request = parse_json_object_argument(raw_json, "--json")
    actions = request.get("actionsTaken")
    if not isinstance(actions, list) or not actions:
        raise InvalidInputError(
            "Invalid --json request: actionsTaken is required and must be a non-empty array.",
            hint="Example: --json '{\"actionsTaken\":[{\"type\":\"CancelEventAction\",...}]}'",
        )
    return request


# --- rendering ------------------------------------------------------------

def _event_summary(event: Any) -> Dict[str, str]:
    return {
        "title": json_text_by_pointers(event, TITLE_POINTERS) or "<untitled>",
        "key": json_text_by_pointers(event, KEY_POINTERS) or "-",
        "start": json_text_by_pointers(event, START_POINTERS) or "-",
        "end": json_text_by_pointers(event, END_POINTERS) or "-",
    }


def print_events_list_human(events: List[Any]) -> None:
    console = Console()
    if not events:
        console.print("No events found.", markup=False)
        return

    for event in events:
        summary = _event_summary(event)
        console.print(
            f"- {summary['title']} [{summary['key']}] ({summary['start']} -> {summary['end']})",
            markup=False,
        )
    console.print("\nTip: use --format json for machine-readable output.", markup=False)


def print_event_human(event: Any) -> None:
    console = Console()
    summary = _event_summary(event)
    for label in ("title", "key", "start", "end"):
        console.print(f"{label}: {summary[label]}", markup=False)
    console.print("\nRaw event JSON:", markup=False)
    console.print(render_pretty_json(event), markup=False)


def print_event_apply_human(response: Any) -> None:
    """One line per action result: ``N. RESULT | ActionType | eventKey``."""
    console = Console()
    results = response.get("results") if isinstance(response, dict) else None
    if not isinstance(results, list):
        console.print(render_pretty_json(response), markup=False)
        return

    if not results:
        console.print("No action results returned.", markup=False)
        return

    for index, item in enumerate(results, start=1):
        result = json_text_by_pointers(item, ("/result",)) or "UNKNOWN"
        action_type = json_text_by_pointers(item, ("/action/action/type", "/action/type", "/type")) or "UnknownAction"
        event_key = json_text_by_pointers(
            item,
            ("/action/action/eventKey", "/action/eventKey", "/action/action/key", "/action/key"),
        ) or "-"
        console.print(f"{index}. {escape(result)} | {escape(action_type)} | {escape(event_key)}")
    console.print("\nTip: use --format json for full mutation response.", markup=False)


def _print_mutation(
    operation: str,
    calendar_id: int,
    event_id: Optional[str],
    response: Any,
    output_format: OutputFormat,
) -> None:
    if output_format == OutputFormat.json:
        output: Dict[str, Any] = {"operation": operation, "calendar_id": calendar_id}
        if event_id is not None:
            output["event_id"] = event_id
        output["response"] = response
        print_json(output)
        return

    console = Console()
    if event_id is not None:
        console.print(f"Applied {operation} event action for {calendar_id}/{event_id}.", markup=False)
    else:
        console.print(f"Applied {operation} event action for calendar {calendar_id}.", markup=False)
    print_event_apply_human(response)


# --- handlers -------------------------------------------------------------

def handle_events_list(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    query = EventListQuery(
        calendar_ids=list(args.calendar_ids or []),
        all_connected=True if args.all_connected else None,
        start=parse_timestamp(_clean(args.start), "--start") if _clean(args.start) else None,
        end=parse_timestamp(_clean(args.end), "--end") if _clean(args.end) else None,
        source_details=True if args.source_details else None,
        thin=True if args.thin else None,
    )
    events = client.list_events(query)
    if output_format == OutputFormat.json:
        print_json(events)
    else:
        print_events_list_human(events)


def handle_events_get(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    event = client.get_event(
        args.calendar_id,
        args.event_id,
        source_details=True if args.source_details else None,
        thin=True if args.thin else None,
    )
    if output_format == OutputFormat.json:
        print_json(event)
    else:
        print_event_human(event)


def handle_events_create(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    request = build_event_create_request(
        calendar_id=args.calendar_id,
        title=args.title,
        start=args.start,
        end=args.end,
        policy_id=args.policy_id,
        attendees=args.attendees,
        description=args.description,
        location=args.location,
        priority=args.priority,
        visibility=args.visibility,
        transparency=args.transparency,
        guests_can_modify=args.guests_can_modify,
        guests_can_invite_others=args.guests_can_invite_others,
        guests_can_see_other_guests=args.guests_can_see_other_guests,
        raw_json=args.json,
        set_entries=args.set,
    )
    response = client.apply_schedule_actions(request)
    _print_mutation("create", args.calendar_id, None, response, output_format)


def handle_events_update(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    request = build_event_update_request(
        calendar_id=args.calendar_id,
        event_id=args.event_id,
        policy_id=args.policy_id,
        title=args.title,
        description=args.description,
        location=args.location,
        priority=args.priority,
        visibility=args.visibility,
        transparency=args.transparency,
        start=args.start,
        end=args.end,
        raw_json=args.json,
        set_entries=args.set,
    )
    response = client.apply_schedule_actions(request)
    _print_mutation("update", args.calendar_id, args.event_id, response, output_format)


def handle_events_delete(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    request = build_event_delete_request(
        calendar_id=args.calendar_id,
        event_id=args.event_id,
        policy_id=args.policy_id,
        message=args.message,
    )
    response = client.apply_schedule_actions(request)
    _print_mutation("delete", args.calendar_id, args.event_id, response, output_format)


def handle_events_apply(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    request = build_events_apply_request(args.json)
    response = client.apply_schedule_actions(request)
    if output_format == OutputFormat.json:
        print_json(response)
    else:
        print_event_apply_human(response)
