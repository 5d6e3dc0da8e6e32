"""Instrumentation module."""

from .instrumentor import Instrumentor, SessionFactory, TargetResolutionError, resolve_owner

__all__ = ["Instrumentor", "SessionFactory", "TargetResolutionError", "resolve_owner"]
