"""Application layer for warpack.

Packaging decisions live here. Copies and archive writes are delegated to
adapters via port interfaces.
"""

__all__ = [
    "AssemblyContext",
    "ClassesPackagingService",
    "PathRegistry",
    "SourceCollector",
]

from warpack.app.classes_packaging import ClassesPackagingService
from warpack.app.collector import SourceCollector
from warpack.app.context import AssemblyContext
from warpack.app.registry import PathRegistry
