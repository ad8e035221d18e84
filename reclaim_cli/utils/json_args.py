"""
Helpers for turning ``--json`` blobs and repeatable ``--set KEY=VALUE``
entries into one JSON object.

Precedence, lowest to highest: typed flags, then the ``--json`` blob, then
``--set`` entries. Each layer replaces colliding top-level keys wholesale.
"""

import json
import math
from typing import Any, Dict, Iterable, Mapping, Optional, Tuple

from ..reclaim_api.errors import InvalidInputError


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _finite_float(text: str) -> float:
    value = float(text)
    if not math.isfinite(value):
        raise ValueError(f"number {text} is out of range")
    return value


def strict_json_loads(text: str) -> Any:
    """``json.loads`` limited to standard JSON: no NaN, Infinity or overflowing numbers."""
    return json.loads(text, parse_constant=_reject_constant, parse_float=_finite_float)


def _object_hint(flag_name: str) -> str:
    return f"Pass {flag_name} with a JSON object, e.g. {flag_name} '{{\"priority\":\"P4\"}}'."


def parse_json_object_argument(raw_json: str, flag_name: str = "--json") -> Dict[str, Any]:
    """Parse ``raw_json`` and require a JSON object."""
    raw_json = (raw_json or "").strip()
    if not raw_json:
        raise InvalidInputError(
            f"Invalid {flag_name} value: it cannot be empty.",
            hint=_object_hint(flag_name),
        )

    try:
        parsed = strict_json_loads(raw_json)
    except ValueError as exc:
        raise InvalidInputError(f"Invalid {flag_name} JSON: {exc}", hint=_object_hint(flag_name)) from exc

    if not isinstance(parsed, dict):
        raise InvalidInputError(
            f"Invalid {flag_name} value: expected a JSON object.",
            hint=_object_hint(flag_name),
        )
    return parsed


def parse_set_value(raw_value: str) -> Any:
    """JSON literal when ``raw_value`` parses as JSON, otherwise the string itself."""
    try:
        return strict_json_loads(raw_value)
    except ValueError:
        return raw_value


def parse_set_entry(entry: str) -> Tuple[str, Any]:
    if "=" not in entry:
        raise InvalidInputError(
            f"Invalid --set value '{entry}'. Expected KEY=VALUE.",
            hint="Examples: --set priority=P4 --set snoozeUntil=2026-02-25T17:00:00Z",
        )

    raw_key, raw_value = entry.split("=", 1)
    key = raw_key.strip()
    if not key:
        raise InvalidInputError(
            f"Invalid --set value '{entry}': key cannot be empty.",
            hint="Use a non-empty key, e.g. --set priority=P4",
        )
    return key, parse_set_value(raw_value.strip())


def parse_set_entries(entries: Optional[Iterable[str]]) -> Dict[str, Any]:
    updates: Dict[str, Any] = {}
    for entry in entries or ():
        key, value = parse_set_entry(entry)
        updates[key] = value
    return updates


def merge_object_fields(target: Dict[str, Any], updates: Mapping[str, Any]) -> Dict[str, Any]:
    """Shallow merge: keys in ``updates`` replace those in ``target``."""
    for key, value in updates.items():
        target[key] = value
    return target


def layer_payload(
    base: Optional[Mapping[str, Any]] = None,
    raw_json: Optional[str] = None,
    set_entries: Optional[Iterable[str]] = None,
) -> Dict[str, Any]:
    """Apply ``--json`` then ``--set`` on top of ``base`` (typed-flag fields)."""
    payload = dict(base or {})
    if raw_json is not None:
        merge_object_fields(payload, parse_json_object_argument(raw_json, "--json"))
    merge_object_fields(payload, parse_set_entries(set_entries))
    return payload
