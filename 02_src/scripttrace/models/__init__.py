"""Core data models for scripttrace."""

from .events import (
    CALL_KINDS,
    RETURN_KINDS,
    EventKind,
    FilterPredicate,
    FormatterState,
    TraceCallback,
    TraceEvent,
)
from .targets import InstrumentationTarget

__all__ = [
    # Events
    "EventKind",
    "TraceEvent",
    "CALL_KINDS",
    "RETURN_KINDS",
    "FilterPredicate",
    "TraceCallback",
    "FormatterState",
    # Instrumentation
    "InstrumentationTarget",
]
