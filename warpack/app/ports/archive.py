"""Ports for bundling compiled classes into a single archive."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Protocol


class ArchiverPort(Protocol):
    """Port interface for writing a classes archive."""

    def archive(
        self,
        source_dir: Path,
        destination: Path,
        *,
        timestamp: datetime | None = None,
    ) -> Path:
        """Bundle every file under ``source_dir`` into ``destination`` and return it."""
        ...
