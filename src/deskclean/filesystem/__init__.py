"""Filesystem access backends."""

from .base import FileSystem
from .local import LocalFileSystem
from .memory import MemoryFile, MemoryFileSystem

__all__ = ["FileSystem", "LocalFileSystem", "MemoryFile", "MemoryFileSystem"]
