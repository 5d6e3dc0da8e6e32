"""Tracer settings: the static instrumentation table and env overrides."""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from .config import resolve_project_path
from .logging_config import get_logger
from .models import InstrumentationTarget

logger = get_logger(__name__)


# Methods bracketed with a trace session at process start.
# Example: InstrumentationTarget("game.scenes:SceneManager", "run")
INSTRUMENTATION_TARGETS: tuple[InstrumentationTarget, ...] = ()

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class TracerSettings:
    """Configuration read once at process start."""

    auto_run: bool = False
    # Auto-run only fires in test mode (a debug/test play of the host program).
    test_mode: bool = True
    targets: tuple[InstrumentationTarget, ...] = INSTRUMENTATION_TARGETS
    script_table: Path | None = None
    trace_threads: bool = False

    @property
    def should_auto_run(self) -> bool:
        return self.auto_run and self.test_mode


def _flag(environ: Mapping[str, str], name: str, default: bool) -> bool:
    value = environ.get(name)
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in _TRUE_VALUES


def parse_targets(value: str | None) -> tuple[InstrumentationTarget, ...]:
    """Parse a comma separated list of ``module:Class.method`` entries.

    Invalid entries are logged and skipped.
    """
    if not value:
        return ()

    targets = []
    for entry in value.split(","):
        if not entry.strip():
            continue
        try:
            targets.append(InstrumentationTarget.parse(entry))
        except ValueError as e:
            logger.warning("Skipping instrumentation target: %s", e)
    return tuple(targets)


def load_settings(environ: Mapping[str, str] | None = None) -> TracerSettings:
    """Build TracerSettings from the environment (after .env is loaded)."""
    if environ is None:
        environ = os.environ

    targets = INSTRUMENTATION_TARGETS + parse_targets(environ.get("TRACER_TARGETS"))

    return TracerSettings(
        auto_run=_flag(environ, "TRACER_AUTO_RUN", False),
        test_mode=_flag(environ, "TRACER_TEST_MODE", True),
        targets=targets,
        script_table=resolve_project_path(environ.get("TRACER_SCRIPT_TABLE")),
        trace_threads=_flag(environ, "TRACER_TRACE_THREADS", False),
    )
