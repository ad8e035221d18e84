"""
Tests for layering --json blobs and --set entries into task update payloads.
"""

from unittest.mock import MagicMock

import pytest

from reclaim_cli.commands.update_command import build_patch_payload, build_put_payload
from reclaim_cli.reclaim_api.data_models import Task
from reclaim_cli.reclaim_api.errors import InvalidInputError
from reclaim_cli.utils.json_args import (
    layer_payload,
    parse_json_object_argument,
    parse_set_entry,
    parse_set_value,
)


class TestSetEntries:

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("P4", "P4"),
            ("true", True),
            ("3", 3),
            ("1.5", 1.5),
            ("null", None),
            ('{"a": 1}', {"a": 1}),
            ("2026-02-25T17:00:00Z", "2026-02-25T17:00:00Z"),
        ],
    )
    def test_value_is_json_or_string(self, raw, expected):
        """Valid JSON literals are parsed; anything else stays a string."""
        assert parse_set_value(raw) == expected

    @pytest.mark.parametrize("raw", ["NaN", "Infinity", "-Infinity", "1e400", "-1e400"])
    def test_non_standard_numbers_stay_strings(self, raw):
        """NaN, Infinity and overflowing numbers are not JSON, so they are kept as text."""
        assert parse_set_value(raw) == raw

    def test_nested_nan_stays_string(self):
        """A non-finite number anywhere in the value makes the whole value a string."""
        assert parse_set_value("[1, NaN]") == "[1, NaN]"

    def test_split_on_first_equals_and_trim(self):
        """Only the first '=' separates key from value; both sides are trimmed."""
        assert parse_set_entry(" notes = a=b ") == ("notes", "a=b")

    def test_missing_equals(self):
        """An entry without '=' is rejected."""
        with pytest.raises(InvalidInputError) as excinfo:
            parse_set_entry("priority")
        assert "Expected KEY=VALUE" in str(excinfo.value)

    def test_empty_key(self):
        """A blank key is rejected."""
        with pytest.raises(InvalidInputError) as excinfo:
            parse_set_entry("  =P4")
        assert "key cannot be empty" in str(excinfo.value)


class TestJsonArgument:

    @pytest.mark.parametrize("raw", ["", "   ", "{not json", "[1, 2]", '"text"'])
    def test_rejects_non_objects(self, raw):
        """Empty, malformed and non-object blobs are invalid input naming the flag."""
        with pytest.raises(InvalidInputError) as excinfo:
            parse_json_object_argument(raw, "--json")
        assert "--json" in str(excinfo.value)

    @pytest.mark.parametrize("raw", ['{"x": NaN}', '{"x": Infinity}', '{"x": -Infinity}', '{"x": 1e400}'])
    def test_rejects_non_standard_numbers(self, raw):
        """Blobs carrying NaN, Infinity or overflowing numbers are not valid JSON."""
        with pytest.raises(InvalidInputError) as excinfo:
            parse_json_object_argument(raw, "--json")
        assert str(excinfo.value).startswith("Invalid --json JSON:")

    def test_accepts_object(self):
        """A JSON object is returned as a dict."""
        assert parse_json_object_argument('{"title": "x"}') == {"title": "x"}


def test_precedence_flags_then_json_then_set():
    """Typed flags lose to --json, which loses to --set."""
    payload = layer_payload(
        {"title": "from flag", "notes": "keep"},
        '{"title": "from json", "priority": "P2"}',
        ["priority=P4"],
    )
    assert payload == {"title": "from json", "notes": "keep", "priority": "P4"}


def test_collisions_replace_wholesale():
    """Colliding keys are replaced, never deep-merged."""
    payload = layer_payload({"dateRange": {"start": "a", "end": "b"}}, '{"dateRange": {"start": "c"}}', [])
    assert payload == {"dateRange": {"start": "c"}}


class TestPut:

    def test_requires_some_update(self):
        """PUT with neither --json nor --set fails before any request."""
        client = MagicMock()
        with pytest.raises(InvalidInputError) as excinfo:
            build_put_payload(client, 1, None, [])
        assert "PUT requires update data" in str(excinfo.value)
        client.get_task.assert_not_called()

    def test_json_blob_skips_fetch(self):
        """With --json the current task is not fetched."""
        client = MagicMock()
        payload = build_put_payload(client, 1, '{"title": "New"}', ["priority=P4"])
        assert payload == {"title": "New", "priority": "P4"}
        client.get_task.assert_not_called()

    def test_set_only_merges_over_current_task(self):
        """--set alone is layered over the fetched task, unmodeled fields included."""
        client = MagicMock()
        client.get_task.return_value = Task.model_validate(
            {"id": 7, "title": "Old", "status": "NEW", "snoozeUntil": "2026-03-01T09:00:00Z", "timeChunksRequired": 4}
        )

        payload = build_put_payload(client, 7, None, ["title=New", "priority=P1"])

        client.get_task.assert_called_once_with(7)
        assert payload["title"] == "New"
        assert payload["priority"] == "P1"
        assert payload["status"] == "NEW"
        assert payload["snoozeUntil"] == "2026-03-01T09:00:00Z"
        assert payload["timeChunksRequired"] == 4


class TestPatch:

    def test_empty_patch_rejected(self):
        """An empty resulting object is invalid input."""
        with pytest.raises(InvalidInputError) as excinfo:
            build_patch_payload("{}", [])
        assert str(excinfo.value) == "PATCH requires at least one field update."

    def test_nothing_given_rejected(self):
        """PATCH with no blob and no overrides fails."""
        with pytest.raises(InvalidInputError):
            build_patch_payload(None, None)

    def test_set_overrides_json(self):
        """--set entries win over --json keys."""
        assert build_patch_payload('{"priority": "P2", "notes": "n"}', ["priority=P4"]) == {
            "priority": "P4",
            "notes": "n",
        }

    def test_nan_override_is_sent_as_text(self):
        """A NaN override becomes a string field rather than an unsendable float."""
        assert build_patch_payload(None, ["estimate=NaN"]) == {"estimate": "NaN"}
