"""EventFilter: decides which trace events reach the formatter."""

from typing import Iterable

from ..models import EventKind, TraceEvent

DEFAULT_KINDS = frozenset(
    {
        EventKind.CALL,
        EventKind.NATIVE_CALL,
        EventKind.RETURN,
        EventKind.NATIVE_RETURN,
    }
)


class EventFilter:
    """Accepts events whose kind is in a fixed set."""

    def __init__(self, kinds: Iterable[EventKind] = DEFAULT_KINDS):
        self._kinds = frozenset(EventKind(kind) for kind in kinds)

    @property
    def kinds(self) -> frozenset[EventKind]:
        return self._kinds

    def accepts(self, event: TraceEvent) -> bool:
        """Return True iff the event's kind is selected."""
        return event.kind in self._kinds

    __call__ = accepts

    def __repr__(self) -> str:
        names = ", ".join(sorted(kind.name for kind in self._kinds))
        return f"EventFilter({names})"


default_filter = EventFilter(DEFAULT_KINDS)
