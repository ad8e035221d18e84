"""
Formatting helpers shared by the command handlers: timestamps in, JSON out.
"""

import json
from enum import Enum
from datetime import timezone
from typing import Any, Iterable, Optional

import dateparser
from dateutil.parser import isoparse

from ..reclaim_api.errors import InvalidInputError, OutputError

TIMESTAMP_HINT = "Use ISO 8601, for example: 2026-02-19T15:00:00Z, or a phrase like 'tomorrow 5pm'."


class OutputFormat(str, Enum):
    human = "human"
    json = "json"


def parse_timestamp(value: Optional[str], flag_name: str) -> Optional[str]:
    """
    Normalize a user-supplied timestamp.
    Handles:
      - ISO 8601 (e.g., 2026-02-19T15:00:00Z), passed through unchanged
      - Natural language (e.g., 'tomorrow 5pm', 'next Friday')
    Returns:
      - the ISO 8601 string to send, in UTC for natural-language input
      - None if no value was given
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        raise InvalidInputError(f"Invalid {flag_name} value: it cannot be empty.", hint=TIMESTAMP_HINT)

    try:
        isoparse(text)
        return text
    except ValueError:
        pass

    parsed = dateparser.parse(text, settings={"RETURN_AS_TIMEZONE_AWARE": True})
    if parsed is None:
        raise InvalidInputError(f"Invalid {flag_name} value: could not parse '{text}' as a date/time.", hint=TIMESTAMP_HINT)
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def render_pretty_json(value: Any) -> str:
    try:
        return json.dumps(value, indent=2, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise OutputError(f"Could not render JSON output: {exc}") from exc


def print_json(value: Any) -> None:
    print(render_pretty_json(value))


def _pointer_get(value: Any, pointer: str) -> Any:
    """Resolve a JSON pointer like ``/eventDate/start``; None when absent."""
    current = value
    for token in pointer.lstrip("/").split("/"):
        token = token.replace("~1", "/").replace("~0", "~")
        if isinstance(current, dict):
            current = current.get(token)
        elif isinstance(current, list) and token.isdigit() and int(token) < len(current):
            current = current[int(token)]
        else:
            return None
        if current is None:
            return None
    return current


def json_text_by_pointers(value: Any, pointers: Iterable[str]) -> Optional[str]:
    """Text of the first non-null value found at any of ``pointers``."""
    for pointer in pointers:
        candidate = _pointer_get(value, pointer)
        if candidate is None:
            continue
        if isinstance(candidate, str):
            return candidate
        if isinstance(candidate, bool):
            return "true" if candidate else "false"
        if isinstance(candidate, (int, float)):
            return str(candidate)
        return json.dumps(candidate, separators=(",", ":"))
    return None

