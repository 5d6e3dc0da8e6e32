"""Session module."""

from .session import (
    ITraceSession,
    LineSink,
    SessionRegistry,
    SessionState,
    TraceSession,
    stdout_sink,
)

__all__ = [
    "ITraceSession",
    "LineSink",
    "SessionRegistry",
    "SessionState",
    "TraceSession",
    "stdout_sink",
]
