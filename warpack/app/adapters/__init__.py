"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .archive import JarClassesArchiver
from .naming import TemplateFinalNameResolver
from .storage import FileSystemStorageAdapter

__all__ = [
    "FileSystemStorageAdapter",
    "JarClassesArchiver",
    "TemplateFinalNameResolver",
]
