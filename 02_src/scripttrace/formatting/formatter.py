"""TraceFormatter: renders accepted events as indented call lines."""

import re
from typing import Protocol

from ..models import EventKind, FormatterState, TraceEvent
from .resolver import ScriptResolver

PLACEHOLDER_PATTERN = re.compile(r"^\{(\d+)\}")

DEFAULT_TAGS = {
    EventKind.NATIVE_CALL: "C",
    EventKind.CALL: "py",
}


class ITraceFormatter(Protocol):
    """Turns an accepted event into an output line, tracking call depth."""

    def format(self, event: TraceEvent, state: FormatterState) -> str | None:
        """Return the line to emit, or None."""
        ...


class TraceFormatter:
    """Default formatter: one line per call, indented by call depth."""

    def __init__(
        self,
        resolver: ScriptResolver | None = None,
        tags: dict[EventKind, str] | None = None,
    ):
        self._resolver = resolver
        self._tags = dict(DEFAULT_TAGS if tags is None else tags)

    def format(self, event: TraceEvent, state: FormatterState) -> str | None:
        """Return the call line for Call/NativeCall events, None otherwise."""
        if event.is_call:
            line = self.render(event, state.depth)
            state.push()
            return line

        if event.is_return:
            state.pop()

        return None

    def render(self, event: TraceEvent, depth: int) -> str:
        tag = self._tags.get(event.kind, "")
        location = self.resolve_location(event.location)
        name = f"{event.owner_name}.{event.method_name}" if event.owner_name else event.method_name
        return f"{tag:>2} {event.line_number:>5} {location:<20} {' ' * depth}{name}"

    def resolve_location(self, location: str) -> str:
        """Replace a leading ``{N}`` placeholder with the script name, if known."""
        match = PLACEHOLDER_PATTERN.match(location)
        if match is None or self._resolver is None:
            return location

        try:
            name = self._resolver(int(match.group(1)))
        except LookupError:
            return location

        if not name:
            return location
        return name + location[match.end():]
