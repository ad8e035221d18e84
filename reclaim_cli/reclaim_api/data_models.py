"""
Data models representing Reclaim objects (tasks, create requests, event actions).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic.alias_generators import to_camel

ZERO_POLICY_ID = "00000000-0000-0000-0000-000000000000"


class TaskFilter(str, Enum):
    ACTIVE = "active"
    ALL = "all"


class TaskCompletionFilter(str, Enum):
    OPEN = "open"
    COMPLETED = "completed"


class ApiModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class Task(ApiModel):
    """A task as returned by the API.

    Fields the client does not model are kept in ``extra_fields`` and written
    back untouched by ``to_dict`` so a read-modify-write never drops them.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: int
    title: str
    status: Optional[str] = None
    due: Optional[str] = None
    priority: Optional[str] = None
    notes: Optional[str] = None
    deleted: bool = False

    @property
    def extra_fields(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CreateTaskRequest(ApiModel):
    """Body for ``POST tasks``.

    Only fields that were actually supplied reach the wire; passing ``None``
    explicitly sends ``null``.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    title: str = Field(min_length=1)
    notes: Optional[str] = None
    priority: Optional[str] = None
    due: Optional[str] = None
    time_chunks_required: Optional[int] = None
    min_chunk_size: Optional[int] = None
    max_chunk_size: Optional[int] = None
    event_category: Optional[str] = None
    always_private: Optional[bool] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


@dataclass
class EventListQuery:
    calendar_ids: List[int] = field(default_factory=list)
    all_connected: Optional[bool] = None
    start: Optional[str] = None
    end: Optional[str] = None
    source_details: Optional[bool] = None
    thin: Optional[bool] = None

    def to_params(self) -> List[tuple]:
        """Query pairs in wire order; blank start/end values are dropped."""
        params: List[tuple] = [("calendarIds", str(cid)) for cid in self.calendar_ids]
        if self.all_connected is not None:
            params.append(("allConnected", _bool_param(self.all_connected)))
        if self.start and self.start.strip():
            params.append(("start", self.start.strip()))
        if self.end and self.end.strip():
            params.append(("end", self.end.strip()))
        if self.source_details is not None:
            params.append(("sourceDetails", _bool_param(self.source_details)))
        if self.thin is not None:
            params.append(("thin", _bool_param(self.thin)))
        return params


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


# --- Schedule actions -------------------------------------------------------

class ActionModel(ApiModel):
    # --json/--set may add keys the client does not model
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")


class DateRange(ActionModel):
    type: str = "FixedDateTimeRange"
    start: Optional[str] = None
    end: Optional[str] = None


class Attendee(ActionModel):
    email: str


class AddEventAction(ActionModel):
    type: Literal["AddEventAction"] = "AddEventAction"
    hash: str = ""
    policy_id: str = ZERO_POLICY_ID
    event_key: str = ""
    calendar_id: int
    title: str
    date_range: DateRange
    guests_can_modify: bool = False
    guests_can_invite_others: bool = True
    guests_can_see_other_guests: bool = True
    attendees: List[Attendee] = Field(default_factory=list)
    description: Optional[str] = None
    location: Optional[str] = None
    priority: Optional[str] = None
    visibility: Optional[str] = None
    transparency: Optional[str] = None


class UpdateEventAction(ActionModel):
    type: Literal["UpdateEventAction"] = "UpdateEventAction"
    hash: str = ""
    policy_id: str = ZERO_POLICY_ID
    calendar_id: int
    event_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    priority: Optional[str] = None
    visibility: Optional[str] = None
    transparency: Optional[str] = None
    date_range: Optional[DateRange] = None


class CancelEventAction(ActionModel):
    type: Literal["CancelEventAction"] = "CancelEventAction"
    hash: str = ""
    policy_id: str = ZERO_POLICY_ID
    event_key: str
    notification_message: Optional[str] = None


EventAction = Annotated[
    Union[AddEventAction, UpdateEventAction, CancelEventAction],
    Field(discriminator="type"),
]

EVENT_ACTION_ADAPTER: TypeAdapter = TypeAdapter(EventAction)

# Keys that identify an update action rather than change the event.
UPDATE_IDENTITY_KEYS = frozenset({"type", "hash", "policyId", "calendarId", "eventId"})


def actions_envelope(*actions: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap wire-format actions for ``schedule-actions/apply-actions``."""
    return {"actionsTaken": list(actions)}
