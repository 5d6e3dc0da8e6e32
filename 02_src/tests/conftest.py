"""Pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def manual_source():
    """Create an event source driven by explicit emit() calls."""
    from scripttrace.event_source import ManualEventSource

    return ManualEventSource()


@pytest.fixture
def registry(manual_source):
    """Create SessionRegistry over the manual source."""
    from scripttrace.session import SessionRegistry

    return SessionRegistry(manual_source)


@pytest.fixture
def lines():
    """Collected trace output."""
    return []


@pytest.fixture
def session(registry, lines):
    """Create an idle TraceSession writing into `lines`."""
    ts = registry.new_session(sink=lines.append)
    yield ts
    ts.stop()


@pytest.fixture
def instrumentor(registry, lines):
    """Create Instrumentor whose sessions write into `lines`."""
    from scripttrace.instrumentation import Instrumentor

    inst = Instrumentor(registry, lambda: registry.new_session(sink=lines.append))
    yield inst
    inst.unwrap_all()


@pytest.fixture
def make_event():
    """Factory for TraceEvents with sensible defaults."""
    from scripttrace.models import EventKind, TraceEvent

    def factory(kind=EventKind.CALL, method="run", owner="Scene", location="game.py", line=1):
        return TraceEvent(
            kind=kind,
            location=location,
            line_number=line,
            method_name=method,
            owner_name=owner,
        )

    return factory
