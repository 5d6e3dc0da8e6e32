"""Formatting module."""

from .formatter import DEFAULT_TAGS, PLACEHOLDER_PATTERN, ITraceFormatter, TraceFormatter
from .resolver import ScriptNameResolver, ScriptResolver

__all__ = [
    "DEFAULT_TAGS",
    "PLACEHOLDER_PATTERN",
    "ITraceFormatter",
    "TraceFormatter",
    "ScriptNameResolver",
    "ScriptResolver",
]
