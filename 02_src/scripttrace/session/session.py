"""TraceSession lifecycle and the process-wide session registry."""

import sys
from enum import Enum
from typing import Callable, Protocol

from ..event_source import IEventSource
from ..filtering import default_filter
from ..formatting import ITraceFormatter, TraceFormatter
from ..logging_config import get_logger
from ..models import FilterPredicate, FormatterState, TraceCallback, TraceEvent

logger = get_logger(__name__)

LineSink = Callable[[str], None]


def stdout_sink(line: str) -> None:
    """Write one trace line to standard output."""
    sys.stdout.write(line + "\n")


class SessionState(str, Enum):
    """TraceSession lifecycle states."""

    IDLE = "idle"
    ACTIVE = "active"
    STOPPED = "stopped"


class ITraceSession(Protocol):
    """Binds a filter and formatter pair to an event source."""

    def start(
        self,
        event_filter: FilterPredicate | None = None,
        formatter: ITraceFormatter | None = None,
    ) -> bool:
        """Subscribe to the event source. False on failure."""
        ...

    def stop(self) -> bool:
        """Unsubscribe from the event source. False on failure."""
        ...


class SessionRegistry:
    """Holds the single active session of an event source."""

    def __init__(self, source: IEventSource):
        self._source = source
        self._active: "TraceSession | None" = None

    @property
    def source(self) -> IEventSource:
        return self._source

    @property
    def active(self) -> "TraceSession | None":
        return self._active

    def new_session(self, **kwargs) -> "TraceSession":
        """Create an idle session bound to this registry."""
        return TraceSession(self, **kwargs)

    def attach(self, session: "TraceSession", callback: TraceCallback) -> None:
        """Make session the sole subscriber, superseding any other."""
        previous = self._active
        if previous is not None and previous is not session:
            logger.info("Trace session superseded by a newer session")
        try:
            self._source.subscribe(callback)
        except Exception:
            self._active = None
            if previous is not None and previous is not session:
                previous._superseded()
            self._clear_source()
            raise

        self._active = session
        if previous is not None and previous is not session:
            previous._superseded()

    def detach(self, session: "TraceSession") -> None:
        """Unsubscribe session if it holds the slot."""
        if self._active is not session:
            return
        self._source.subscribe(None)
        self._active = None

    def _clear_source(self) -> None:
        try:
            self._source.subscribe(None)
        except Exception:
            logger.warning("Failed to clear event subscription", exc_info=True)


class TraceSession:
    """Filters and formats events from one subscription to the event source."""

    def __init__(
        self,
        registry: SessionRegistry,
        sink: LineSink | None = None,
        event_filter: FilterPredicate | None = None,
        formatter: ITraceFormatter | None = None,
    ):
        self._registry = registry
        self._sink = sink or stdout_sink
        self._filter = event_filter or default_filter
        self._formatter = formatter or TraceFormatter()
        self._state = FormatterState()
        self._status = SessionState.IDLE

    @property
    def state(self) -> SessionState:
        return self._status

    @property
    def is_active(self) -> bool:
        return self._status is SessionState.ACTIVE

    @property
    def depth(self) -> int:
        return self._state.depth

    def start(
        self,
        event_filter: FilterPredicate | None = None,
        formatter: ITraceFormatter | None = None,
    ) -> bool:
        """
        Subscribe this session to the event source.

        Args:
            event_filter: Replaces the session's filter when given.
            formatter: Replaces the session's formatter when given.

        Returns:
            True on success. False if the subscription could not be made, in
            which case no subscription is left active.
        """
        if event_filter is not None:
            self._filter = event_filter
        if formatter is not None:
            self._formatter = formatter

        self._state.reset()
        logger.debug("Starting trace session")
        try:
            self._registry.attach(self, self._handle_event)
        except Exception as e:
            self._status = SessionState.STOPPED
            logger.warning("Failed to start trace session: %s", e, exc_info=True)
            return False

        self._status = SessionState.ACTIVE
        return True

    run = start

    def stop(self) -> bool:
        """
        Unsubscribe this session.

        Returns:
            True on success or when the session is not active. False if the
            subscription could not be removed.
        """
        self._state.reset()
        if self._status is not SessionState.ACTIVE:
            return True

        try:
            self._registry.detach(self)
        except Exception as e:
            logger.warning("Failed to stop trace session: %s", e, exc_info=True)
            return False

        self._status = SessionState.STOPPED
        logger.debug("Trace session stopped")
        return True

    pause = stop

    def _superseded(self) -> None:
        self._state.reset()
        self._status = SessionState.STOPPED

    def _handle_event(self, event: TraceEvent) -> None:
        try:
            if not self._filter(event):
                return
            line = self._formatter.format(event, self._state)
            if line is not None:
                self._sink(line)
        except Exception:
            logger.warning(
                "Dropping %s event after trace callback failure",
                event.kind.value,
                exc_info=True,
            )
