"""
HTTP client for the Reclaim REST API.

One ``ReclaimClient`` is built per CLI invocation and owns the session and
credential for its lifetime. Each public method issues exactly one request
and either returns a decoded value or raises a ``CliError`` subclass.
"""

from __future__ import annotations

import json
from typing import Any, Callable, List, Optional, Sequence, Tuple
from urllib.parse import urljoin, urlsplit, urlunsplit

import requests
from pydantic import TypeAdapter, ValidationError

from .. import __version__
from ..utils.logger import get_logger
from .data_models import CreateTaskRequest, EventListQuery, Task, TaskFilter
from .diagnostics import (
    RequestSnapshot,
    body_read_error,
    map_transport_error,
    parse_api_error,
    response_parse_error,
)
from .errors import InvalidBaseUrlError, InvalidInputError, MissingApiKeyError
from .search_filters import is_active_task

log = get_logger(__name__)

USER_AGENT = f"reclaim-cli/{__version__}"
DEFAULT_BASE_URL = "https://api.app.reclaim.ai/api"
DEFAULT_TIMEOUT_SECS = 15

_TASK_LIST = TypeAdapter(List[Task])
_JSON_LIST = TypeAdapter(List[Any])


def normalize_base_url(raw: str) -> str:
    """Validate ``raw`` and make sure its path ends with exactly one ``/``.

    Relative joins then always land under the base path, whatever trailing
    slashes the caller supplied.
    """
    try:
        parts = urlsplit(raw)
    except ValueError:
        raise InvalidBaseUrlError(raw) from None
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise InvalidBaseUrlError(raw)

    path = parts.path.rstrip("/") + "/"
    return urlunsplit((parts.scheme, parts.netloc, path, parts.query, ""))


class ReclaimClient:
    """Authenticated access to the Reclaim task, event and schedule-action endpoints."""

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_BASE_URL,
        timeout_secs: int = DEFAULT_TIMEOUT_SECS,
    ):
        api_key = (api_key or "").strip()
        if not api_key:
            raise MissingApiKeyError()

        self.base_url = normalize_base_url(base_url)
        self.timeout = max(int(timeout_secs), 1)

        self.session = requests.Session()
        self.session.headers["Authorization"] = f"Bearer {api_key}"
        self.session.headers["Accept"] = "application/json"
        self.session.headers["Content-Type"] = "application/json"
        self.session.headers["User-Agent"] = USER_AGENT

    # -- request construction ---------------------------------------------

    def url_for(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def prepare(
        self,
        method: str,
        path: str,
        params: Optional[Sequence[Tuple[str, str]]] = None,
        json_body: Any = None,
        notification_key: Optional[str] = None,
    ) -> requests.PreparedRequest:
        query = list(params or [])
        if notification_key is not None and notification_key.strip():
            query.append(("notificationKey", notification_key.strip()))

        request = requests.Request(
            method,
            self.url_for(path),
            params=query or None,
            json=json_body,
        )
        try:
            return self.session.prepare_request(request)
        except requests.exceptions.InvalidJSONError as exc:
            raise InvalidInputError(
                f"Request body is not valid JSON: {exc}",
                hint="Remove NaN or Infinity values from --json and --set input.",
            ) from exc

    # -- send / interpret ---------------------------------------------------

    def _send(
        self,
        prepared: requests.PreparedRequest,
        decode: Optional[Callable[[Any], Any]] = None,
        empty_is_none: bool = False,
    ) -> Any:
        """Send ``prepared`` and return the decoded JSON body.

        ``decode`` checks the body has the expected shape (a pydantic
        validator). With ``empty_is_none`` a 2xx response with an empty body
        yields ``None`` instead of a parse error.
        """
        snapshot = RequestSnapshot.from_prepared(prepared)
        log.debug("→ %s %s", snapshot.method, snapshot.url)

        try:
            response = self.session.send(prepared, timeout=self.timeout, stream=True)
        except requests.exceptions.RequestException as exc:
            raise map_transport_error(exc, snapshot) from exc

        try:
            body = response.text
        except requests.exceptions.RequestException as exc:
            raise body_read_error(exc, snapshot) from exc
        finally:
            response.close()

        log.debug("← HTTP %s (%d chars) from %s", response.status_code, len(body), response.url)

        if not 200 <= response.status_code < 300:
            raise parse_api_error(
                response.status_code,
                body,
                response.url or snapshot.url,
                response.headers,
                snapshot,
            )

        if empty_is_none and not body.strip():
            return None

        try:
            payload = json.loads(body)
            return decode(payload) if decode is not None else payload
        except (ValueError, ValidationError) as exc:
            raise response_parse_error(exc, body, response.url or snapshot.url, snapshot) from exc

    # -- capability surface -------------------------------------------------

    def list_tasks(self, task_filter: TaskFilter = TaskFilter.ACTIVE) -> List[Task]:
        tasks = self._send(self.prepare("GET", "tasks"), decode=_TASK_LIST.validate_python)
        if task_filter == TaskFilter.ACTIVE:
            tasks = [task for task in tasks if is_active_task(task)]
        return tasks

    def get_task(self, task_id: int) -> Task:
        return self._send(self.prepare("GET", f"tasks/{task_id}"), decode=Task.model_validate)

    def create_task(self, request: CreateTaskRequest) -> Task:
        prepared = self.prepare("POST", "tasks", json_body=request.to_payload())
        return self._send(prepared, decode=Task.model_validate)

    def list_events(self, query: Optional[EventListQuery] = None) -> List[Any]:
        query = query or EventListQuery()
        prepared = self.prepare("GET", "events", params=query.to_params())
        return self._send(prepared, decode=_JSON_LIST.validate_python)

    def get_event(
        self,
        calendar_id: int,
        event_id: str,
        source_details: Optional[bool] = None,
        thin: Optional[bool] = None,
    ) -> Any:
        params = []
        if source_details is not None:
            params.append(("sourceDetails", "true" if source_details else "false"))
        if thin is not None:
            params.append(("thin", "true" if thin else "false"))
        return self._send(self.prepare("GET", f"events/{calendar_id}/{event_id}", params=params))

    def apply_schedule_actions(self, request: Any) -> Any:
        return self._send(self.prepare("POST", "schedule-actions/apply-actions", json_body=request))

    def put_task(self, task_id: int, request: Any, notification_key: Optional[str] = None) -> Task:
        prepared = self.prepare(
            "PUT", f"tasks/{task_id}", json_body=request, notification_key=notification_key
        )
        return self._send(prepared, decode=Task.model_validate)

    def patch_task(self, task_id: int, request: Any, notification_key: Optional[str] = None) -> Task:
        prepared = self.prepare(
            "PATCH", f"tasks/{task_id}", json_body=request, notification_key=notification_key
        )
        return self._send(prepared, decode=Task.model_validate)

    def delete_task(self, task_id: int, notification_key: Optional[str] = None) -> Any:
        prepared = self.prepare("DELETE", f"tasks/{task_id}", notification_key=notification_key)
        return self._send(prepared, empty_is_none=True)
