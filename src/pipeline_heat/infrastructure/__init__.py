"""Infrastructure implementations for the heat engine."""

from .filesystem import LocalFileSystem

__all__ = ["LocalFileSystem"]
