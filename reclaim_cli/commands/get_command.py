from rich.console import Console

from ..reclaim_api.data_models import Task
from ..reclaim_api.http_client import ReclaimClient
from ..utils.format_utils import OutputFormat, print_json


def print_task_human(task: Task) -> None:
    console = Console()
    console.print(f"#{task.id} {task.title}", markup=False)
    for label, value in (
        ("status", task.status),
        ("priority", task.priority),
        ("due", task.due),
        ("notes", task.notes),
    ):
        if value is not None:
            console.print(f"{label}: {value}", markup=False)


def print_mutation_human(prefix: str, task: Task) -> None:
    """Short summary after a create/update."""
    console = Console()
    console.print(f"{prefix} task #{task.id}: {task.title}", markup=False)
    for label, value in (("Status", task.status), ("Priority", task.priority), ("Due", task.due)):
        if value is not None:
            console.print(f"{label}: {value}", markup=False)


def handle_get(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    task = client.get_task(args.task_id)
    if output_format == OutputFormat.json:
        print_json(task.to_dict())
    else:
        print_task_human(task)
