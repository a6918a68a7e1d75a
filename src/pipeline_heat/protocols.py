"""Protocol definitions for dependency injection.

These protocols define the abstract interfaces that the rules loader depends
on, enabling isolated unit testing with in-memory implementations.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable


@runtime_checkable
class FileSystem(Protocol):
    """Abstract filesystem for reading rules documents and snapshots."""

    def read_text(self, path: Path) -> str:
        """Read a UTF-8 text file."""
        ...

    def exists(self, path: Path) -> bool:
        """Check whether a path exists."""
        ...
