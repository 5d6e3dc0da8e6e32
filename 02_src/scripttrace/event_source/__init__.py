"""EventSource module."""

from .event_source import IEventSource, ManualEventSource, RuntimeEventSource

__all__ = ["IEventSource", "ManualEventSource", "RuntimeEventSource"]
