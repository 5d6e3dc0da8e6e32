"""scripttrace: call/return execution tracer."""

from .app import Application, IApplication
from .control import default_registry, pause, run, start, stop
from .event_source import IEventSource, ManualEventSource, RuntimeEventSource
from .filtering import DEFAULT_KINDS, EventFilter, default_filter
from .formatting import ITraceFormatter, ScriptNameResolver, TraceFormatter
from .instrumentation import Instrumentor, TargetResolutionError
from .models import (
    EventKind,
    FilterPredicate,
    FormatterState,
    InstrumentationTarget,
    TraceEvent,
)
from .session import SessionRegistry, SessionState, TraceSession
from .settings import INSTRUMENTATION_TARGETS, TracerSettings, load_settings

__all__ = [
    # Application
    "Application",
    "IApplication",
    "TracerSettings",
    "INSTRUMENTATION_TARGETS",
    "load_settings",
    # Control API
    "start",
    "stop",
    "run",
    "pause",
    "default_registry",
    # Models
    "EventKind",
    "TraceEvent",
    "FilterPredicate",
    "FormatterState",
    "InstrumentationTarget",
    # Components
    "IEventSource",
    "RuntimeEventSource",
    "ManualEventSource",
    "EventFilter",
    "DEFAULT_KINDS",
    "default_filter",
    "ITraceFormatter",
    "TraceFormatter",
    "ScriptNameResolver",
    "SessionRegistry",
    "SessionState",
    "TraceSession",
    "Instrumentor",
    "TargetResolutionError",
]
