"""
Test suite for the main CLI interface.
"""

import json

import pytest
from typer.testing import CliRunner

from reclaim_cli.reclaim import app
from reclaim_cli.reclaim_api.data_models import Task, TaskFilter
from reclaim_cli.reclaim_api.errors import ApiError

runner = CliRunner()


@pytest.fixture
def client(mocker):
    """The ReclaimClient instance the CLI builds for each command."""
    client_class = mocker.patch("reclaim_cli.reclaim.ReclaimClient")
    return client_class.return_value


class TestCLI:
    """Test cases for the main CLI application."""

    def test_cli_help(self):
        """Test that the CLI shows help information."""
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "Reclaim.ai" in result.output

    def test_events_help(self):
        """Test that the events sub-app lists its commands."""
        result = runner.invoke(app, ["events", "--help"])
        assert result.exit_code == 0
        assert "apply" in result.output

    def test_global_options_reach_client(self, mocker):
        """Test that global options are passed to the client."""
        client_class = mocker.patch("reclaim_cli.reclaim.ReclaimClient")
        client_class.return_value.list_tasks.return_value = []

        result = runner.invoke(
            app, ["--api-key", "k-1", "--base-url", "https://example.com/api", "--timeout-secs", "3", "list"]
        )

        assert result.exit_code == 0
        client_class.assert_called_once_with("k-1", "https://example.com/api", 3)

    def test_missing_api_key(self, monkeypatch):
        """Test that a missing key is reported with a hint and exit code 2."""
        monkeypatch.delenv("RECLAIM_API_KEY", raising=False)
        result = runner.invoke(app, ["list"])
        assert result.exit_code == 2
        assert "Error: Missing Reclaim API key." in result.output
        assert "Hint: Set RECLAIM_API_KEY" in result.output


class TestTaskCommands:

    def test_list_json(self, client):
        """Test that list prints tasks as JSON."""
        client.list_tasks.return_value = [Task(id=1, title="Plan", status="NEW")]

        result = runner.invoke(app, ["--format", "json", "list"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {"id": 1, "title": "Plan", "status": "NEW", "due": None, "priority": None, "notes": None, "deleted": False}
        ]
        client.list_tasks.assert_called_once_with(TaskFilter.ACTIVE)

    def test_ls_alias_with_completion_filter(self, client):
        """Test the ls alias with --all and the completion filter."""
        client.list_tasks.return_value = [
            Task(id=1, title="Open one", status="NEW"),
            Task(id=2, title="Done one", status="COMPLETE"),
        ]

        result = runner.invoke(app, ["ls", "--all", "--filter", "completed"])

        assert result.exit_code == 0
        assert "Done one" in result.output
        assert "Open one" not in result.output
        client.list_tasks.assert_called_once_with(TaskFilter.ALL)

    def test_empty_list_message(self, client):
        """Test the empty-list message naming the filter."""
        client.list_tasks.return_value = []
        result = runner.invoke(app, ["list", "--filter", "open"])
        assert result.exit_code == 0
        assert "No active tasks found with completion status 'open'." in result.output

    def test_get_human(self, client):
        """Test the human rendering of one task."""
        client.get_task.return_value = Task(id=7, title="Write report", priority="P2")
        result = runner.invoke(app, ["show", "7"])
        assert result.exit_code == 0
        assert "#7 Write report" in result.output
        assert "priority: P2" in result.output
        client.get_task.assert_called_once_with(7)

    def test_api_error_exit_code(self, client):
        """Test that API errors print Error/Hint and exit with code 2."""
        client.get_task.side_effect = ApiError(
            404, "Request: GET https://api.app.reclaim.ai/api/tasks/9", "Verify the task ID exists in your Reclaim account."
        )
        result = runner.invoke(app, ["get", "9"])
        assert result.exit_code == 2
        assert "Error: Reclaim API returned HTTP 404: Request: GET" in result.output
        assert "Hint: Verify the task ID exists" in result.output

    def test_patch_with_set_entries(self, client):
        """Test that patch sends --set entries and the notification key."""
        client.patch_task.return_value = Task(id=3, title="Plan", priority="P4")

        result = runner.invoke(
            app, ["patch", "3", "--set", "priority=P4", "--set", "snoozed=false", "--notification-key", "n-1"]
        )

        assert result.exit_code == 0
        client.patch_task.assert_called_once_with(3, {"priority": "P4", "snoozed": False}, "n-1")
        assert "Updated (PATCH) task #3: Plan" in result.output

    def test_patch_nan_set_entry_sent_as_text(self, client):
        """Test that a NaN --set value is sent as a string."""
        client.patch_task.return_value = Task(id=1, title="Plan")

        result = runner.invoke(app, ["patch", "1", "--set", "estimate=NaN"])

        assert result.exit_code == 0
        client.patch_task.assert_called_once_with(1, {"estimate": "NaN"}, None)

    def test_patch_nan_json_rejected(self, client):
        """Test that a --json blob containing NaN is rejected before sending."""
        result = runner.invoke(app, ["patch", "1", "--json", '{"x": NaN}'])
        assert result.exit_code == 2
        assert "Invalid --json JSON" in result.output
        client.patch_task.assert_not_called()

    def test_put_requires_data(self, client):
        """Test that put without data fails before any request."""
        result = runner.invoke(app, ["put", "3"])
        assert result.exit_code == 2
        assert "PUT requires update data" in result.output
        client.put_task.assert_not_called()

    def test_put_merges_over_fetched_task(self, client):
        """Test that put with --set merges over the fetched task."""
        client.get_task.return_value = Task.model_validate({"id": 3, "title": "Old", "eventCategory": "WORK"})
        client.put_task.return_value = Task(id=3, title="New")

        result = runner.invoke(app, ["put", "3", "--set", "title=New"])

        assert result.exit_code == 0
        payload = client.put_task.call_args.args[1]
        assert payload["title"] == "New"
        assert payload["eventCategory"] == "WORK"

    @pytest.mark.parametrize("command", ["delete", "del", "rm", "remove"])
    def test_delete_json(self, client, command):
        """Test the JSON result of delete and its aliases."""
        client.delete_task.return_value = None
        result = runner.invoke(app, ["--format", "json", command, "5"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"task_id": 5, "deleted": True, "api_response": None}
        client.delete_task.assert_called_once_with(5, None)

    def test_create(self, client):
        """Test the create payload built from typed flags."""
        client.create_task.return_value = Task(id=11, title="Plan Q1", status="NEW")

        result = runner.invoke(
            app,
            ["create", "--title", "Plan Q1", "--priority", "P2", "--time-chunks-required", "4", "--no-always-private"],
        )

        assert result.exit_code == 0
        request = client.create_task.call_args.args[0]
        assert request.to_payload() == {
            "title": "Plan Q1",
            "priority": "P2",
            "timeChunksRequired": 4,
            "minChunkSize": 1,
            "maxChunkSize": 4,
            "eventCategory": "WORK",
            "alwaysPrivate": False,
        }
        assert "Created task #11: Plan Q1" in result.output

    def test_create_blank_title(self, client):
        """Test that a whitespace-only title is rejected."""
        result = runner.invoke(app, ["create", "--title", "   "])
        assert result.exit_code == 2
        assert "Invalid --title value" in result.output
        client.create_task.assert_not_called()

    def test_create_chunk_error(self, client):
        """Test that chunk bounds without a total are rejected."""
        result = runner.invoke(app, ["create", "--title", "x", "--min-chunk-size", "2"])
        assert result.exit_code == 2
        assert "require --time-chunks-required" in result.output
        client.create_task.assert_not_called()

    def test_dashboard_rejects_json(self, client):
        """Test that the dashboard refuses --format json."""
        result = runner.invoke(app, ["--format", "json", "dashboard"])
        assert result.exit_code == 2
        assert "only supports --format human" in result.output
        assert "Hint: Run: reclaim dashboard" in result.output


class TestEventCommands:

    def test_list_empty(self, client):
        """Test the empty event list and repeated --calendar-id."""
        client.list_events.return_value = []
        result = runner.invoke(app, ["events", "list", "--calendar-id", "1", "--calendar-id", "2"])
        assert result.exit_code == 0
        assert "No events found." in result.output
        query = client.list_events.call_args.args[0]
        assert query.calendar_ids == [1, 2]

    def test_list_human(self, client):
        """Test the one-line human rendering of an event."""
        client.list_events.return_value = [
            {"title": "Standup", "key": "1/abc", "eventDate": {"start": "09:00", "end": "09:15"}}
        ]
        result = runner.invoke(app, ["events", "list"])
        assert "- Standup [1/abc] (09:00 -> 09:15)" in result.output

    def test_create_human(self, client):
        """Test the summary printed after creating an event."""
        client.apply_schedule_actions.return_value = {
            "results": [{"result": "SUCCESS", "action": {"action": {"type": "AddEventAction", "eventKey": "42/abc"}}}]
        }

        result = runner.invoke(
            app,
            [
                "events", "create", "--calendar-id", "42", "--title", "Dinner",
                "--start", "2026-02-21T18:30:00Z", "--end", "2026-02-21T19:00:00Z",
            ],
        )

        assert result.exit_code == 0
        assert "Applied create event action for calendar 42." in result.output
        assert "1. SUCCESS | AddEventAction | 42/abc" in result.output
        request = client.apply_schedule_actions.call_args.args[0]
        assert request["actionsTaken"][0]["type"] == "AddEventAction"

    def test_update_requires_change(self, client):
        """Test that an update without changes is rejected."""
        result = runner.invoke(app, ["events", "update", "42", "abc"])
        assert result.exit_code == 2
        assert "Event update requires at least one field change." in result.output
        client.apply_schedule_actions.assert_not_called()

    def test_delete_json(self, client):
        """Test the JSON result of an event delete."""
        client.apply_schedule_actions.return_value = {"results": []}
        result = runner.invoke(app, ["--format", "json", "events", "delete", "5", "evt"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == {
            "operation": "delete",
            "calendar_id": 5,
            "event_id": "evt",
            "response": {"results": []},
        }

    def test_apply_without_results(self, client):
        """Test apply output when no results are returned."""
        client.apply_schedule_actions.return_value = {"results": []}
        result = runner.invoke(
            app, ["events", "apply", "--json", '{"actionsTaken": [{"type": "CancelEventAction", "eventKey": "1/x"}]}']
        )
        assert result.exit_code == 0
        assert "No action results returned." in result.output

    def test_apply_requires_actions(self, client):
        """Test that apply requires a non-empty actionsTaken."""
        result = runner.invoke(app, ["events", "apply", "--json", '{"actionsTaken": []}'])
        assert result.exit_code == 2
        assert "actionsTaken is required" in result.output
