"""Storage port interface for filesystem operations."""

from pathlib import Path
from typing import Protocol


class StoragePort(Protocol):
    """Port interface for storage operations.

    Abstracts filesystem I/O to enable testing and alternative backends.

    Side effects: Creates directories and copies files (offline).
    """

    def ensure_dir(self, path: Path) -> Path:
        """Create ``path`` and its parents when missing.

        Args:
            path: Directory path

        Returns:
            The directory path
        """
        ...

    def exists(self, path: Path) -> bool:
        """Return True when ``path`` exists."""
        ...

    def copy_file(self, src: Path, dst: Path) -> None:
        """Copy file.

        Args:
            src: Source path
            dst: Destination path
        """
        ...
