"""
Client-side task filters applied after a fetch.

The active/all filter runs first (inside ``list_tasks``); the completion
filter is layered on top of whatever that returned.
"""

from typing import Any, List, Optional

from .data_models import Task, TaskCompletionFilter

INACTIVE_STATUSES = frozenset({"ARCHIVED", "CANCELLED"})
COMPLETED_STATUSES = frozenset({"COMPLETED", "COMPLETE", "DONE", "FINISHED"})


def is_active_task(task: Task) -> bool:
    return not task.deleted and task.status not in INACTIVE_STATUSES


def status_indicates_completed(status: Any) -> bool:
    return isinstance(status, str) and status.upper() in COMPLETED_STATUSES


def task_is_completed(task: Task) -> bool:
    """Return True if any completion signal on the task says it is done."""
    if status_indicates_completed(task.status):
        return True

    extra = task.extra_fields
    if status_indicates_completed(extra.get("completionStatus")):
        return True

    return any(extra.get(name) is True for name in ("completed", "isComplete"))


def filter_by_completion(tasks: List[Task], completion: Optional[TaskCompletionFilter]) -> List[Task]:
    """
    Keep only open or only completed tasks. ``None`` leaves the list untouched.
    """
    if completion is None:
        return list(tasks)
    want_completed = completion == TaskCompletionFilter.COMPLETED
    return [task for task in tasks if task_is_completed(task) == want_completed]
