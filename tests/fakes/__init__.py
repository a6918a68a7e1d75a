"""Exports for test fakes."""

from .clock import FixedClock
from .filesystem import InMemoryFileSystem

__all__ = ["FixedClock", "InMemoryFileSystem"]
