"""Instrumentor: brackets selected callables with a trace session."""

import functools
import importlib
import inspect
import types
from typing import Any, Callable, Iterable

from ..logging_config import get_logger
from ..models import InstrumentationTarget
from ..session import ITraceSession, SessionRegistry

logger = get_logger(__name__)

SessionFactory = Callable[[], ITraceSession]

# Class attributes besides plain functions that bind self on access.
_BINDING_DESCRIPTORS = (types.MethodDescriptorType, types.WrapperDescriptorType)


class TargetResolutionError(LookupError):
    """An instrumentation target could not be located."""


def resolve_owner(target: InstrumentationTarget) -> Any:
    """Import the module of target and walk to the owning class or module."""
    try:
        owner = importlib.import_module(target.module_path)
    except ImportError as e:
        raise TargetResolutionError(f"module {target.module_path!r} not importable: {e}") from e

    if target.owner_path:
        for part in target.owner_path.split("."):
            try:
                owner = getattr(owner, part)
            except AttributeError as e:
                raise TargetResolutionError(f"{target.type_name!r} has no attribute {part!r}") from e
    return owner


class Instrumentor:
    """Wraps callables so each call runs inside a trace session."""

    def __init__(
        self,
        registry: SessionRegistry,
        session_factory: SessionFactory | None = None,
    ):
        self._registry = registry
        self._session_factory = session_factory or registry.new_session
        # Captured before wrapping, kept so the original stays invocable.
        # Values are (owner, original, defined_on_owner).
        self._originals: dict[InstrumentationTarget, tuple[Any, Any, bool]] = {}

    @property
    def originals(self) -> dict[InstrumentationTarget, Any]:
        return {target: raw for target, (_, raw, _) in self._originals.items()}

    def original(self, target: InstrumentationTarget) -> Callable:
        """Return the unwrapped callable captured for target."""
        _, raw, _ = self._originals[target]
        if isinstance(raw, (staticmethod, classmethod)):
            return raw.__func__
        return raw

    def traced(self, func: Callable) -> Callable:
        """
        Return a callable that runs func inside a new trace session.

        The session is stopped on every exit path. Generator functions are
        traced while they are iterated. When a session is already
        active the call runs inside it and leaves it running.
        """
        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_shim(*args, **kwargs):
                if self._registry.active is not None:
                    return await func(*args, **kwargs)
                session = self._session_factory()
                session.start()
                try:
                    return await func(*args, **kwargs)
                finally:
                    session.stop()

            return async_shim

        if inspect.isgeneratorfunction(func):

            # The session spans iteration, not creation of the generator.
            @functools.wraps(func)
            def generator_shim(*args, **kwargs):
                if self._registry.active is not None:
                    return (yield from func(*args, **kwargs))
                session = self._session_factory()
                session.start()
                try:
                    return (yield from func(*args, **kwargs))
                finally:
                    session.stop()

            return generator_shim

        @functools.wraps(func)
        def shim(*args, **kwargs):
            if self._registry.active is not None:
                return func(*args, **kwargs)
            session = self._session_factory()
            session.start()
            try:
                return func(*args, **kwargs)
            finally:
                session.stop()

        return shim

    def wrap(self, target: InstrumentationTarget) -> bool:
        """
        Replace target's callable with a traced shim.

        Returns:
            True if the target is wrapped, False if it could not be located.
        """
        if target in self._originals:
            return True

        try:
            owner = resolve_owner(target)
            own = target.method_name in getattr(owner, "__dict__", {})
            raw = self._wrap_instance_method(owner, target) or self._wrap_type_level(owner, target)
        except (TargetResolutionError, TypeError, AttributeError) as e:
            logger.warning("Skipping instrumentation target %s: %s", target, e)
            return False

        self._originals[target] = (owner, raw, own)
        logger.info("Instrumented %s", target)
        return True

    def wrap_all(self, targets: Iterable[InstrumentationTarget]) -> list[InstrumentationTarget]:
        """Wrap every target; return the ones that could not be wrapped."""
        return [target for target in targets if not self.wrap(target)]

    def unwrap(self, target: InstrumentationTarget) -> bool:
        """Restore the original callable of target."""
        entry = self._originals.pop(target, None)
        if entry is None:
            return False
        owner, raw, own = entry
        if own:
            setattr(owner, target.method_name, raw)
        else:
            delattr(owner, target.method_name)
        return True

    def unwrap_all(self) -> None:
        for target in list(self._originals):
            self.unwrap(target)

    def _wrap_instance_method(self, owner: Any, target: InstrumentationTarget) -> Any:
        """Wrap a plain function defined on the class itself. None if not applicable."""
        if not inspect.isclass(owner):
            return None
        raw = owner.__dict__.get(target.method_name)
        if not inspect.isfunction(raw):
            return None
        setattr(owner, target.method_name, self.traced(raw))
        return raw

    def _wrap_type_level(self, owner: Any, target: InstrumentationTarget) -> Any:
        """Wrap a static/class method, module function or inherited attribute."""
        name = target.method_name
        try:
            # The descriptor itself, not what it binds to.
            raw = inspect.getattr_static(owner, name)
        except AttributeError:
            raise TargetResolutionError(f"{target.type_name!r} has no method {name!r}") from None

        if isinstance(raw, (staticmethod, classmethod)):
            setattr(owner, name, type(raw)(self.traced(raw.__func__)))
            return raw

        if not callable(raw):
            raise TargetResolutionError(f"{target} is not callable")

        if inspect.isclass(owner) and not (inspect.isfunction(raw) or isinstance(raw, _BINDING_DESCRIPTORS)):
            # A function shim would bind self where the original does not.
            raise TargetResolutionError(f"{target} is not a method")

        setattr(owner, name, self.traced(raw))
        return raw
