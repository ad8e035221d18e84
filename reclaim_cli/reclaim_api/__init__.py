"""
Reclaim API layer package.
Implements the HTTP client, wire models, error taxonomy and client-side filters.
"""

from .data_models import CreateTaskRequest, EventListQuery, Task, TaskCompletionFilter, TaskFilter
from .errors import (
    ApiError,
    CliError,
    InvalidBaseUrlError,
    InvalidInputError,
    MissingApiKeyError,
    OutputError,
    ResponseParseError,
    TransportError,
)
from .http_client import ReclaimClient
from .search_filters import filter_by_completion, task_is_completed

__all__ = [
    'ApiError',
    'CliError',
    'CreateTaskRequest',
    'EventListQuery',
    'InvalidBaseUrlError',
    'InvalidInputError',
    'MissingApiKeyError',
    'OutputError',
    'ReclaimClient',
    'ResponseParseError',
    'Task',
    'TaskCompletionFilter',
    'TaskFilter',
    'TransportError',
    'filter_by_completion',
    'task_is_completed',
]
