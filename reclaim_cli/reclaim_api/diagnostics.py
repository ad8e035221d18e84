"""
Turns failed requests into errors that can be debugged without re-running
the command.

A ``RequestSnapshot`` is taken once per request, before it is sent, and is
passed to every error path so the user always sees what was sent.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import requests

from .errors import ApiError, ResponseParseError, TransportError

DEBUG_BODY_LIMIT = 8192
DEBUG_SUMMARY_LIMIT = 512
TRUNCATION_MARKER = "... <truncated>"

MESSAGE_FIELDS = ("message", "title", "error", "detail")
REQUEST_ID_HEADERS = ("x-request-id", "x-correlation-id", "x-amzn-trace-id")


@dataclass(frozen=True)
class RequestSnapshot:
    method: str
    url: str
    body: Optional[str] = None

    @classmethod
    def from_prepared(cls, prepared: requests.PreparedRequest) -> "RequestSnapshot":
        body = prepared.body
        if isinstance(body, bytes):
            try:
                body = body.decode("utf-8")
            except UnicodeDecodeError:
                body = f"<{len(prepared.body)} bytes binary request body>"
        if isinstance(body, str):
            body = body.strip() or None
        else:
            body = None
        return cls(method=prepared.method or "UNKNOWN", url=prepared.url or "", body=body)


def truncate_debug_text(text: str, max_chars: int) -> str:
    """Cap ``text`` at ``max_chars`` characters, marking the cut."""
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def pretty_json_or_raw(text: str) -> str:
    try:
        return json.dumps(json.loads(text), indent=2, ensure_ascii=False)
    except ValueError:
        return text


def format_request_context(snapshot: Optional[RequestSnapshot]) -> str:
    if snapshot is None:
        return ""
    lines = [f"Request: {snapshot.method} {snapshot.url}"]
    if snapshot.body:
        lines.append(
            "Request payload: "
            + truncate_debug_text(pretty_json_or_raw(snapshot.body), DEBUG_SUMMARY_LIMIT)
        )
    return "\n" + "\n".join(lines)


def _nonblank(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _entry_message(entry: Any) -> Optional[str]:
    """A string entry, or the ``message`` of an object entry."""
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict) and isinstance(entry.get("message"), str):
        return entry["message"]
    return None


def extract_errors_message(errors: Any) -> Optional[str]:
    """Pull the first message out of an ``errors`` value of any common shape."""
    if isinstance(errors, str):
        return errors

    if isinstance(errors, list):
        for entry in errors:
            message = _entry_message(entry)
            if message is not None:
                return message

    if isinstance(errors, dict):
        for name, value in errors.items():
            if isinstance(value, str):
                return f"{name}: {value}"
            if isinstance(value, list):
                for entry in value:
                    message = _entry_message(entry)
                    if message is not None:
                        return f"{name}: {message}"

    return None


def extract_api_message(payload: Any) -> Optional[str]:
    if not isinstance(payload, dict):
        return None

    for name in MESSAGE_FIELDS:
        candidate = _nonblank(payload.get(name))
        if candidate:
            return candidate

    if "errors" in payload:
        return _nonblank(extract_errors_message(payload["errors"]))
    return None


def extract_request_id(headers: Optional[Mapping[str, str]]) -> Optional[str]:
    if not headers:
        return None
    for name in REQUEST_ID_HEADERS:
        value = _nonblank(headers.get(name))
        if value:
            return value
    return None


def hint_for_status(status: int) -> Optional[str]:
    if status in (400, 422):
        return (
            "Check command arguments and inspect the raw response JSON above "
            "for field-level validation details."
        )
    if status in (401, 403):
        return "Set a valid API key with RECLAIM_API_KEY or --api-key, then retry."
    if status == 404:
        return "Verify the task ID exists in your Reclaim account."
    if status == 429:
        return "Rate limited by Reclaim. Wait a few seconds and retry."
    if 500 <= status <= 599:
        return (
            "Reclaim returned a 5xx. This can be an outage OR a rejected payload "
            "surfaced as internal_error. Compare the request payload above with "
            "a known-good request."
        )
    return None


def parse_api_error(
    status: int,
    response_body: str,
    response_url: str,
    response_headers: Optional[Mapping[str, str]],
    snapshot: Optional[RequestSnapshot],
) -> ApiError:
    """Build the ApiError for a non-2xx response."""
    body = response_body.strip()
    parsed: Any = None
    is_json = False
    if body:
        try:
            parsed = json.loads(body)
            is_json = True
        except ValueError:
            pass

    message = extract_api_message(parsed) if is_json else None
    if message is None:
        message = truncate_debug_text(body, DEBUG_SUMMARY_LIMIT) if body else f"Request failed with HTTP {status}."

    if snapshot is not None:
        request_method, request_url = snapshot.method, snapshot.url
    else:
        request_method, request_url = "UNKNOWN", response_url

    lines = [
        f"Request: {request_method} {request_url}",
        f"API message: {message}",
    ]
    if request_url != response_url:
        lines.append(f"Response URL: {response_url}")

    request_id = extract_request_id(response_headers)
    if request_id:
        lines.append(f"Reclaim request id: {request_id}")

    if is_json:
        rendered = json.dumps(parsed, indent=2, ensure_ascii=False)
        lines.append(f"Raw response JSON: {truncate_debug_text(rendered, DEBUG_BODY_LIMIT)}")
    elif not body:
        lines.append("Raw response body: <empty>")
    else:
        lines.append(f"Raw response body: {truncate_debug_text(body, DEBUG_BODY_LIMIT)}")

    if snapshot is not None and snapshot.body:
        lines.append(
            "Request payload: "
            + truncate_debug_text(pretty_json_or_raw(snapshot.body), DEBUG_BODY_LIMIT)
        )

    return ApiError(status, "\n".join(lines), hint_for_status(status))


def response_parse_error(
    error: Exception,
    response_body: str,
    response_url: str,
    snapshot: Optional[RequestSnapshot],
) -> ResponseParseError:
    lines = [f"Reclaim API returned a non-JSON success response: {error}"]
    if snapshot is not None:
        lines.append(f"Request: {snapshot.method} {snapshot.url}")
    else:
        lines.append(f"Response URL: {response_url}")

    body = response_body.strip()
    if body:
        lines.append(
            "Raw response body: "
            + truncate_debug_text(pretty_json_or_raw(body), DEBUG_BODY_LIMIT)
        )
    else:
        lines.append("Raw response body: <empty>")

    return ResponseParseError(
        "\n".join(lines),
        hint="Keep the raw response body above when reporting this issue.",
    )


def map_transport_error(
    error: requests.exceptions.RequestException,
    snapshot: Optional[RequestSnapshot],
) -> TransportError:
    """Classify a requests failure as timeout, connection or generic."""
    context = format_request_context(snapshot)

    # ConnectTimeout is both a Timeout and a ConnectionError; treat it as a timeout.
    if isinstance(error, requests.exceptions.Timeout):
        return TransportError(
            f"Request to Reclaim timed out before receiving a response. Source error: {error}{context}",
            hint="Try again or raise --timeout-secs.",
        )

    if isinstance(error, requests.exceptions.ConnectionError):
        return TransportError(
            f"Could not connect to the Reclaim API. Source error: {error}{context}",
            hint="Check network access and confirm --base-url is correct.",
        )

    return TransportError(
        f"Request failed before receiving a usable API response. Source error: {error}{context}",
        hint="Retry. If this keeps happening, verify your network and API key.",
    )


def body_read_error(error: Exception, snapshot: Optional[RequestSnapshot]) -> TransportError:
    return TransportError(
        f"Could not read Reclaim API response body: {error}\n{format_request_context(snapshot)}",
        hint="Retry the command. If this repeats, capture the output and file a bug.",
    )
