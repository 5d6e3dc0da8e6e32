"""Event sources: the single-subscriber feeds of trace events."""

import inspect
import sys
import threading
from typing import Iterable, Protocol

from ..logging_config import get_logger
from ..models import EventKind, TraceCallback, TraceEvent

logger = get_logger(__name__)

_PACKAGE = __name__.partition(".")[0]

_NATIVE_KINDS = {
    "c_call": EventKind.NATIVE_CALL,
    "c_return": EventKind.NATIVE_RETURN,
    # A C function that raises reports c_exception instead of c_return.
    "c_exception": EventKind.NATIVE_RETURN,
}


class IEventSource(Protocol):
    """A registration point accepting a single trace callback."""

    def subscribe(self, callback: TraceCallback | None) -> None:
        """Install callback as the sole subscriber; None unsubscribes."""
        ...


def _is_internal(frame) -> bool:
    module = frame.f_globals.get("__name__") or ""
    return module == _PACKAGE or module.startswith(_PACKAGE + ".")


def _is_class_body(code) -> bool:
    return not (code.co_flags & inspect.CO_NEWLOCALS) and code.co_name != "<module>"


def _python_owner(frame) -> str:
    code = frame.f_code
    qualname = getattr(code, "co_qualname", code.co_name)
    owner = qualname.rpartition(".")[0]
    return owner or frame.f_globals.get("__name__") or ""


def _native_owner(func) -> str:
    bound = getattr(func, "__self__", None)
    if bound is None:
        # Unbound method descriptors carry their class separately.
        objclass = getattr(func, "__objclass__", None)
        if isinstance(objclass, type):
            return objclass.__name__
    if bound is None or inspect.ismodule(bound):
        return getattr(func, "__module__", None) or "builtins"
    if isinstance(bound, type):
        return bound.__name__
    return type(bound).__name__


class RuntimeEventSource:
    """Feeds events from the interpreter via sys.settrace and sys.setprofile.

    Python frames come from the trace hook (call, line, return, exception),
    C functions from the profile hook. Frames of this package are skipped.
    """

    def __init__(self, trace_threads: bool = False):
        self._callback: TraceCallback | None = None
        self._trace_threads = trace_threads

    @property
    def active(self) -> bool:
        return self._callback is not None

    def subscribe(self, callback: TraceCallback | None) -> None:
        """Install callback as the sole subscriber; None unsubscribes."""
        if callback is None:
            self._uninstall()
            return

        if not callable(callback):
            raise TypeError(f"Trace callback must be callable, got {callback!r}")

        self._warn_on_foreign_hooks()
        self._callback = callback
        sys.settrace(self._trace)
        sys.setprofile(self._profile)
        if self._trace_threads:
            threading.settrace(self._trace)
            threading.setprofile(self._profile)

    def _uninstall(self) -> None:
        self._callback = None
        # Leave hooks installed by someone else alone.
        if sys.gettrace() == self._trace:
            sys.settrace(None)
        if sys.getprofile() == self._profile:
            sys.setprofile(None)
        if self._trace_threads:
            threading.settrace(None)
            threading.setprofile(None)

    def _warn_on_foreign_hooks(self) -> None:
        hooks = (
            ("trace", sys.gettrace(), self._trace),
            ("profile", sys.getprofile(), self._profile),
        )
        for kind, current, ours in hooks:
            if current is not None and current != ours:
                logger.warning("Replacing existing %s function %r", kind, current)

    def _deliver(self, callback: TraceCallback, event: TraceEvent) -> None:
        try:
            callback(event)
        except Exception:
            # An exception escaping a trace hook would unset it and surface in
            # the traced program.
            logger.warning("Trace callback failed for %s event", event.kind.value, exc_info=True)

    def _trace(self, frame, event, arg):
        callback = self._callback
        if callback is None or event != "call" or _is_internal(frame):
            return None

        code = frame.f_code
        class_body = _is_class_body(code)
        kind = EventKind.CLASS_OPEN if class_body else EventKind.CALL
        self._deliver(callback, self._python_event(kind, frame))
        return self._local_tracer(EventKind.CLASS_CLOSE if class_body else EventKind.RETURN)

    def _local_tracer(self, return_kind: EventKind):
        def local_trace(frame, event, arg):
            callback = self._callback
            if callback is None:
                return None

            if event == "line":
                kind = EventKind.LINE
            elif event == "return":
                kind = return_kind
            elif event == "exception":
                kind = EventKind.RAISE
            else:
                return local_trace

            self._deliver(callback, self._python_event(kind, frame))
            return local_trace

        return local_trace

    def _profile(self, frame, event, arg):
        kind = _NATIVE_KINDS.get(event)
        callback = self._callback
        if kind is None or callback is None or _is_internal(frame):
            return

        trace_event = TraceEvent(
            kind=kind,
            location=frame.f_code.co_filename,
            line_number=frame.f_lineno or 0,
            method_name=getattr(arg, "__name__", "") or "",
            owner_name=_native_owner(arg),
            context=frame,
        )
        self._deliver(callback, trace_event)

    @staticmethod
    def _python_event(kind: EventKind, frame) -> TraceEvent:
        return TraceEvent(
            kind=kind,
            location=frame.f_code.co_filename,
            line_number=frame.f_lineno or 0,
            method_name=frame.f_code.co_name,
            owner_name=_python_owner(frame),
            context=frame,
        )


class ManualEventSource:
    """Event source driven by explicit emit() calls.

    Used where events are produced by hand-inserted instrumentation, and in
    tests.
    """

    def __init__(self):
        self._callback: TraceCallback | None = None
        self._failure: Exception | None = None
        self.subscribe_calls = 0

    @property
    def active(self) -> bool:
        return self._callback is not None

    def fail_next(self, error: Exception | None = None) -> None:
        """Make the next subscribe() call raise."""
        self._failure = error or RuntimeError("event subscription unavailable")

    def subscribe(self, callback: TraceCallback | None) -> None:
        """Install callback as the sole subscriber; None unsubscribes."""
        self.subscribe_calls += 1
        if self._failure is not None:
            error, self._failure = self._failure, None
            raise error
        self._callback = callback

    def emit(self, event: TraceEvent) -> None:
        """Deliver event to the current subscriber, if any."""
        if self._callback is not None:
            self._callback(event)

    def emit_all(self, events: Iterable[TraceEvent]) -> None:
        for event in events:
            self.emit(event)
