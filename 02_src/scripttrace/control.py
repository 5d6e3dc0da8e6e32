"""Module-level start/stop over a process-wide default registry."""

from .event_source import RuntimeEventSource
from .formatting import ITraceFormatter
from .models import FilterPredicate
from .session import LineSink, SessionRegistry, TraceSession

_registry: SessionRegistry | None = None


def default_registry(trace_threads: bool = False) -> SessionRegistry:
    """Return the registry bound to the interpreter's trace hooks.

    There is one per process because the hooks themselves are global.
    trace_threads only applies when the registry is first created.
    """
    global _registry
    if _registry is None:
        _registry = SessionRegistry(RuntimeEventSource(trace_threads=trace_threads))
    return _registry


def start(
    event_filter: FilterPredicate | None = None,
    formatter: ITraceFormatter | None = None,
    sink: LineSink | None = None,
) -> bool:
    """Start a new session, superseding any active one."""
    session = TraceSession(
        default_registry(),
        sink=sink,
        event_filter=event_filter,
        formatter=formatter,
    )
    return session.start()


def stop() -> bool:
    """Stop the active session. No-op returning True when none is active."""
    session = default_registry().active
    if session is None:
        return True
    return session.stop()


run = start
pause = stop
