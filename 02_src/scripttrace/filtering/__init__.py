"""Filtering module."""

from .event_filter import DEFAULT_KINDS, EventFilter, default_filter

__all__ = ["DEFAULT_KINDS", "EventFilter", "default_filter"]
