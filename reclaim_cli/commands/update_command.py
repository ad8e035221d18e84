"""
Handles the 'put' and 'patch' commands.

PUT replaces the whole task. When only ``--set`` entries are given, the
current task is fetched first and the entries are layered on top of it so
unmodeled fields are sent back unchanged.
"""
from typing import Any, Dict, Iterable, Optional

from ..reclaim_api.errors import InvalidInputError
from ..reclaim_api.http_client import ReclaimClient
from ..utils.format_utils import OutputFormat, print_json
from ..utils.json_args import layer_payload
from ..utils.logger import get_logger
from .get_command import print_mutation_human

log = get_logger(__name__)


def build_put_payload(
    client: ReclaimClient,
    task_id: int,
    raw_json: Optional[str],
    set_entries: Optional[Iterable[str]],
) -> Dict[str, Any]:
    set_entries = list(set_entries or [])
    if raw_json is None and not set_entries:
        raise InvalidInputError(
            "PUT requires update data. Pass --json and/or one or more --set entries.",
            hint="Examples: --json '{\"title\":\"Plan sprint\"}' or --set priority=P4",
        )

    if raw_json is not None:
        return layer_payload(None, raw_json, set_entries)

    log.debug("No --json given for PUT; fetching task #%s to apply --set entries", task_id)
    existing = client.get_task(task_id)
    return layer_payload(existing.to_dict(), None, set_entries)


def build_patch_payload(raw_json: Optional[str], set_entries: Optional[Iterable[str]]) -> Dict[str, Any]:
    payload = layer_payload(None, raw_json, set_entries)
    if not payload:
        raise InvalidInputError(
            "PATCH requires at least one field update.",
            hint="Pass --json '{\"priority\":\"P4\"}' or one/more --set key=value entries.",
        )
    return payload


def handle_put(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    payload = build_put_payload(client, args.task_id, args.json, args.set)
    updated = client.put_task(args.task_id, payload, args.notification_key)
    if output_format == OutputFormat.json:
        print_json(updated.to_dict())
    else:
        print_mutation_human("Updated (PUT)", updated)


def handle_patch(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    payload = build_patch_payload(args.json, args.set)
    updated = client.patch_task(args.task_id, payload, args.notification_key)
    if output_format == OutputFormat.json:
        print_json(updated.to_dict())
    else:
        print_mutation_human("Updated (PATCH)", updated)
