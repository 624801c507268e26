"""Filesystem-backed storage port implementation."""

from __future__ import annotations

import shutil
from pathlib import Path

from warpack.app.ports import StoragePort
from warpack.utils.paths import ensure_dir


class FileSystemStorageAdapter(StoragePort):
    """Adapter that performs direct filesystem operations."""

    def ensure_dir(self, path: Path) -> Path:
        return ensure_dir(Path(path))

    def exists(self, path: Path) -> bool:
        return Path(path).exists()

    def copy_file(self, src: Path, dst: Path) -> None:
        destination = Path(dst)
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(src, destination)
