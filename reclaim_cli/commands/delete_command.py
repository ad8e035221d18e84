"""
Handles the 'delete' command.
"""
from rich.console import Console

from ..reclaim_api.http_client import ReclaimClient
from ..utils.format_utils import OutputFormat, print_json, render_pretty_json


def handle_delete(client: ReclaimClient, args, output_format: OutputFormat) -> None:
    """Delete one task. An empty API response is reported as ``null``."""
    api_response = client.delete_task(args.task_id, args.notification_key)
    result = {
        "task_id": args.task_id,
        "deleted": True,
        "api_response": api_response,
    }

    if output_format == OutputFormat.json:
        print_json(result)
        return

    console = Console()
    console.print(f"Deleted task #{args.task_id}.", markup=False)
    if api_response is not None:
        console.print(f"API response:\n{render_pretty_json(api_response)}", markup=False)
