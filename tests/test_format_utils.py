import re

import pytest

from reclaim_cli.reclaim_api.errors import InvalidInputError, OutputError
from reclaim_cli.utils.format_utils import json_text_by_pointers, parse_timestamp, render_pretty_json


class TestParseTimestamp:

    @pytest.mark.parametrize("value", ["2026-02-19T15:00:00Z", "2026-02-19T15:00:00+01:00", "2026-02-19"])
    def test_iso_passes_through(self, value):
        """ISO 8601 timestamps are sent as typed."""
        assert parse_timestamp(f" {value} ", "--due") == value

    def test_none_is_none(self):
        """No value means no timestamp."""
        assert parse_timestamp(None, "--due") is None

    def test_blank_rejected(self):
        """Blank timestamps are invalid input."""
        with pytest.raises(InvalidInputError) as excinfo:
            parse_timestamp("  ", "--start")
        assert str(excinfo.value) == "Invalid --start value: it cannot be empty."

    def test_natural_language_resolves_to_utc(self):
        """Natural-language dates resolve to a UTC timestamp."""
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}Z", parse_timestamp("tomorrow 5pm", "--due"))

    def test_gibberish_rejected(self):
        """Unparseable dates are invalid input."""
        with pytest.raises(InvalidInputError) as excinfo:
            parse_timestamp("zzqx flurb", "--due")
        assert "could not parse" in str(excinfo.value)


def test_pointer_lookup_order():
    """The first pointer with a value wins."""
    event = {"dateRange": {"start": "a"}, "originalStart": "b", "key": 12}
    assert json_text_by_pointers(event, ["/eventDate/start", "/dateRange/start", "/originalStart"]) == "a"
    assert json_text_by_pointers(event, ["/key"]) == "12"
    assert json_text_by_pointers(event, ["/missing", "/also/missing"]) is None


def test_pointer_non_string_values():
    """Non-string values are rendered as compact JSON text."""
    assert json_text_by_pointers({"a": True}, ["/a"]) == "true"
    assert json_text_by_pointers({"a": {"b": 1}}, ["/a"]) == '{"b":1}'
    assert json_text_by_pointers({"a": [{"b": "x"}]}, ["/a/0/b"]) == "x"


def test_render_pretty_json():
    """JSON output is indented and keeps non-ASCII text."""
    assert render_pretty_json({"a": "é"}) == '{\n  "a": "é"\n}'


def test_render_unserializable():
    """Unserializable values raise an output error."""
    with pytest.raises(OutputError):
        render_pretty_json({"a": object()})
