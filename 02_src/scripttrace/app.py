"""Application bootstrap: auto-run and method instrumentation."""

import runpy
import sys
from pathlib import Path
from typing import Protocol, Sequence

from . import control
from .event_source import IEventSource
from .formatting import ScriptNameResolver, TraceFormatter
from .instrumentation import Instrumentor
from .logging_config import get_logger
from .models import InstrumentationTarget
from .session import LineSink, SessionRegistry, TraceSession
from .settings import TracerSettings, load_settings

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    def start(self) -> None:
        """Apply auto-run and instrument configured targets."""
        ...

    def stop(self) -> None:
        """Restore instrumented targets and stop tracing."""
        ...


class Application:
    """Wires settings, event source, sessions and the instrumentor."""

    def __init__(
        self,
        settings: TracerSettings | None = None,
        source: IEventSource | None = None,
        sink: LineSink | None = None,
    ):
        self._settings = settings or load_settings()
        self._source = source
        self._sink = sink

        # Components (will be initialized in start())
        self._registry: SessionRegistry | None = None
        self._instrumentor: Instrumentor | None = None
        self._formatter: TraceFormatter | None = None
        self._auto_session: TraceSession | None = None
        self._misses: list[InstrumentationTarget] = []

    def start(self) -> None:
        """Apply auto-run and instrument configured targets."""
        logger.info("Starting tracer")

        if self._source is None:
            # Share the slot of the module-level start()/stop().
            self._registry = control.default_registry(trace_threads=self._settings.trace_threads)
            self._source = self._registry.source
        else:
            self._registry = SessionRegistry(self._source)
        self._formatter = TraceFormatter(resolver=self._load_resolver())
        self._instrumentor = Instrumentor(self._registry, self.new_session)

        # Auto-run comes first so it covers every instrumented call.
        if self._settings.should_auto_run:
            self._auto_session = self.new_session()
            if self._auto_session.start():
                logger.info("Auto-run trace session started")

        self._misses = self._instrumentor.wrap_all(self._settings.targets)
        if self._misses:
            logger.warning(
                "%d instrumentation target(s) not found",
                len(self._misses),
                extra={"context": {"targets": [str(t) for t in self._misses]}},
            )

    def stop(self) -> None:
        """Restore instrumented targets and stop tracing."""
        if self._auto_session:
            self._auto_session.stop()
            self._auto_session = None
        if self._instrumentor:
            self._instrumentor.unwrap_all()
        logger.info("Tracer stopped")

    def new_session(self) -> TraceSession:
        """Create a session with the configured formatter and sink."""
        return self.registry.new_session(sink=self._sink, formatter=self._formatter)

    def run_script(self, path: str, argv: Sequence[str] = ()) -> None:
        """Run a Python script as __main__ inside a trace session."""
        script = Path(path)
        saved_argv = sys.argv
        sys.argv = [str(script), *argv]
        session = self.new_session()
        session.start()
        try:
            runpy.run_path(str(script), run_name="__main__")
        finally:
            session.stop()
            sys.argv = saved_argv

    def _load_resolver(self) -> ScriptNameResolver | None:
        path = self._settings.script_table
        if path is None:
            return None
        try:
            return ScriptNameResolver.from_file(path)
        except (OSError, ValueError) as e:
            logger.warning("Script table %s not loaded: %s", path, e)
            return None

    @property
    def settings(self) -> TracerSettings:
        return self._settings

    @property
    def misses(self) -> list[InstrumentationTarget]:
        """Targets that could not be instrumented at start()."""
        return list(self._misses)

    @property
    def registry(self) -> SessionRegistry:
        """Get session registry."""
        if not self._registry:
            raise RuntimeError("Application not started")
        return self._registry

    @property
    def instrumentor(self) -> Instrumentor:
        """Get instrumentor."""
        if not self._instrumentor:
            raise RuntimeError("Application not started")
        return self._instrumentor
