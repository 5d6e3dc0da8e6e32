"""Tests for TraceFormatter and script-name resolution."""

import json

import pytest

from scripttrace.formatting import ScriptNameResolver, TraceFormatter
from scripttrace.models import EventKind, FormatterState


class TestFormatCalls:
    """Tests for Call/NativeCall rendering."""

    def test_call_line_layout(self, make_event):
        """Test the column layout of a call line."""
        formatter = TraceFormatter()
        state = FormatterState()

        line = formatter.format(make_event(line=12), state)

        assert line == "py    12 " + "game.py".ljust(20) + " Scene.run"
        assert state.depth == 1

    def test_native_call_tag(self, make_event):
        """Test that native calls are tagged C."""
        formatter = TraceFormatter()
        line = formatter.format(
            make_event(kind=EventKind.NATIVE_CALL, method="append", owner="list"),
            FormatterState(),
        )
        assert line.startswith(" C ")
        assert line.endswith("list.append")

    def test_indent_follows_depth(self, make_event):
        """Test that each nested call is indented one more space."""
        formatter = TraceFormatter()
        state = FormatterState(depth=3)

        flat = formatter.format(make_event(), FormatterState())
        line = formatter.format(make_event(), state)

        assert line == flat.replace(" Scene.run", "    Scene.run")
        assert state.depth == 4

    def test_empty_owner(self, make_event):
        """Test that an empty owner renders the bare method name."""
        line = TraceFormatter().format(make_event(owner=""), FormatterState())
        assert line.endswith(" run")
        assert ".run" not in line

    def test_long_location_not_truncated(self, make_event):
        """Test that locations wider than the column are kept whole."""
        location = "scripts/very/long/path/to/game_module.py"
        line = TraceFormatter().format(make_event(location=location), FormatterState())
        assert location in line

    def test_custom_tags(self, make_event):
        """Test overriding the call tags."""
        formatter = TraceFormatter(tags={EventKind.CALL: "rb", EventKind.NATIVE_CALL: "C"})
        line = formatter.format(make_event(), FormatterState())
        assert line.startswith("rb ")


class TestFormatReturns:
    """Tests for depth tracking on returns."""

    @pytest.mark.parametrize("kind", [EventKind.RETURN, EventKind.NATIVE_RETURN])
    def test_return_emits_nothing(self, make_event, kind):
        """Test that returns only decrement depth."""
        state = FormatterState(depth=2)
        assert TraceFormatter().format(make_event(kind=kind), state) is None
        assert state.depth == 1

    def test_unmatched_return_at_zero(self, make_event):
        """Test that an unmatched return keeps depth at zero."""
        state = FormatterState()
        assert TraceFormatter().format(make_event(kind=EventKind.RETURN), state) is None
        assert state.depth == 0

    @pytest.mark.parametrize(
        "kind",
        [EventKind.LINE, EventKind.CLASS_OPEN, EventKind.CLASS_CLOSE, EventKind.RAISE],
    )
    def test_other_kinds_emit_nothing(self, make_event, kind):
        """Test that non call/return kinds leave state alone."""
        state = FormatterState(depth=2)
        assert TraceFormatter().format(make_event(kind=kind), state) is None
        assert state.depth == 2


class TestLocationResolution:
    """Tests for {N} placeholder resolution."""

    def test_resolves_placeholder(self, make_event):
        """Test that a placeholder is replaced by the script name."""
        resolver = ScriptNameResolver(["Main", "Cache", "Scripts/Combat"])
        line = TraceFormatter(resolver=resolver).format(
            make_event(location="{2}"), FormatterState()
        )
        assert line.split()[2] == "Scripts/Combat"

    def test_unresolved_without_resolver(self, make_event):
        """Test that the raw placeholder passes through with no resolver."""
        line = TraceFormatter().format(make_event(location="{7}"), FormatterState())
        assert line.split()[2] == "{7}"

    def test_out_of_range_index(self, make_event):
        """Test that an unknown index passes through unresolved."""
        formatter = TraceFormatter(resolver=ScriptNameResolver(["Main"]))
        assert formatter.resolve_location("{7}") == "{7}"

    def test_resolver_returning_none(self):
        """Test a mapping-style resolver without an entry."""
        formatter = TraceFormatter(resolver={0: "Main"}.get)
        assert formatter.resolve_location("{3}") == "{3}"
        assert formatter.resolve_location("{0}") == "Main"

    def test_keeps_suffix(self):
        """Test that only the placeholder prefix is replaced."""
        formatter = TraceFormatter(resolver=ScriptNameResolver(["Main"]))
        assert formatter.resolve_location("{0}:eval") == "Main:eval"

    def test_ignores_plain_locations(self):
        """Test that ordinary file names are untouched."""
        formatter = TraceFormatter(resolver=ScriptNameResolver(["Main"]))
        assert formatter.resolve_location("game.py") == "game.py"
        assert formatter.resolve_location("x{0}") == "x{0}"


class TestScriptNameResolver:
    """Tests for ScriptNameResolver."""

    def test_lookup(self):
        """Test index lookup."""
        resolver = ScriptNameResolver(["Main", "Cache"])
        assert resolver(1) == "Cache"
        assert len(resolver) == 2

    def test_negative_index_is_a_miss(self):
        """Test that negative indexes do not wrap around."""
        with pytest.raises(IndexError):
            ScriptNameResolver(["Main"])(-1)

    def test_from_file_names(self, tmp_path):
        """Test loading a plain list of names."""
        path = tmp_path / "scripts.json"
        path.write_text(json.dumps(["Main", "Combat"]), encoding="utf-8")
        assert ScriptNameResolver.from_file(path)(1) == "Combat"

    def test_from_file_rows(self, tmp_path):
        """Test loading engine-style [id, name, source] rows."""
        path = tmp_path / "scripts.json"
        rows = [[1001, "Main", "..."], [1002, "Scripts/Combat", "..."]]
        path.write_text(json.dumps(rows), encoding="utf-8")
        assert ScriptNameResolver.from_file(path)(1) == "Scripts/Combat"

    @pytest.mark.parametrize("payload", [{"a": 1}, [42], [[1]]])
    def test_from_file_invalid(self, tmp_path, payload):
        """Test that malformed tables are rejected."""
        path = tmp_path / "scripts.json"
        path.write_text(json.dumps(payload), encoding="utf-8")
        with pytest.raises(ValueError):
            ScriptNameResolver.from_file(path)

    def test_from_file_missing(self, tmp_path):
        """Test that a missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            ScriptNameResolver.from_file(tmp_path / "missing.json")
