from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..reclaim_api.data_models import Task, TaskCompletionFilter, TaskFilter
from ..reclaim_api.http_client import ReclaimClient
from ..reclaim_api.search_filters import filter_by_completion
from ..utils.format_utils import OutputFormat, print_json

JSON_TIP = "Tip: use --format json for machine-readable output."


def fetch_tasks(
    client: ReclaimClient,
    include_all: bool = False,
    completion: Optional[TaskCompletionFilter] = None,
) -> List[Task]:
    """Fetch tasks, apply the active/all filter, then the completion filter."""
    task_filter = TaskFilter.ALL if include_all else TaskFilter.ACTIVE
    tasks = client.list_tasks(task_filter)
    return filter_by_completion(tasks, completion)


def empty_list_message(include_all: bool, completion: Optional[TaskCompletionFilter]) -> str:
    scope = "tasks" if include_all else "active tasks"
    if completion is not None:
        return f"No {scope} found with completion status '{completion.value}'."
    return f"No {scope} found."


def print_task_list_human(tasks: List[Task], include_all: bool, completion: Optional[TaskCompletionFilter]) -> None:
    console = Console()
    if not tasks:
        console.print(empty_list_message(include_all, completion), markup=False)
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Status", style="magenta", no_wrap=True)
    table.add_column("Task", style="green")
    table.add_column("Due", style="yellow")

    for task in tasks:
        table.add_row(
            f"#{task.id}",
            escape(task.status or "UNKNOWN"),
            escape(task.title),
            escape(task.due or "-"),
        )

    console.print(table)
    console.print(f"\n{JSON_TIP}", markup=False)


def handle_list(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    """List tasks (active by default), optionally narrowed to open or completed ones."""
    tasks = fetch_tasks(client, args.all, args.completion)
    if output_format == OutputFormat.json:
        print_json([task.to_dict() for task in tasks])
    else:
        print_task_list_human(tasks, args.all, args.completion)
