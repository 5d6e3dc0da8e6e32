"""Trace event data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable


class EventKind(str, Enum):
    """Kinds of execution steps reported by an event source."""

    NATIVE_CALL = "c-call"
    NATIVE_RETURN = "c-return"
    CALL = "call"
    RETURN = "return"
    CLASS_OPEN = "class"
    CLASS_CLOSE = "end"
    LINE = "line"
    RAISE = "raise"


CALL_KINDS = frozenset({EventKind.CALL, EventKind.NATIVE_CALL})
RETURN_KINDS = frozenset({EventKind.RETURN, EventKind.NATIVE_RETURN})


@dataclass(frozen=True)
class TraceEvent:
    """A single monitored execution step."""

    kind: EventKind
    location: str  # file or unit identifier, may be a "{N}" placeholder
    line_number: int
    method_name: str = ""
    owner_name: str = ""  # enclosing class/module
    context: Any = field(default=None, compare=False, repr=False)  # frame

    def __post_init__(self):
        if self.line_number < 0:
            raise ValueError(f"line_number must be >= 0, got {self.line_number}")

    @property
    def is_call(self) -> bool:
        return self.kind in CALL_KINDS

    @property
    def is_return(self) -> bool:
        return self.kind in RETURN_KINDS


FilterPredicate = Callable[[TraceEvent], bool]
TraceCallback = Callable[[TraceEvent], None]


@dataclass
class FormatterState:
    """Call depth owned by one trace session."""

    depth: int = 0

    def push(self) -> None:
        self.depth += 1

    def pop(self) -> None:
        # A return without a matching call happens when tracing starts mid-stack.
        if self.depth > 0:
            self.depth -= 1

    def reset(self) -> None:
        self.depth = 0
