"""Fatal packaging errors raised to the assembly caller."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from warpack.app.ports.naming import ArtifactCoordinates


class PackagingError(RuntimeError):
    """Raised when a packaging task cannot complete and the run must abort."""


class ArchiveNameError(PackagingError):
    """Raised when the archive file name of an artifact cannot be resolved."""

    def __init__(self, message: str, *, coordinates: ArtifactCoordinates | None = None) -> None:
        super().__init__(message)
        self.coordinates = coordinates


class PackagingExecutionError(PackagingError):
    """Raised when copying files or writing an archive fails."""

    def __init__(self, message: str, *, path: Path | str) -> None:
        super().__init__(message)
        self.path = path
