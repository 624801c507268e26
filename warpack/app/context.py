"""Assembly context shared by the packaging tasks of one run."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from warpack.app.errors import PackagingExecutionError
from warpack.app.ports import (
    ArchiveFile,
    ArchiverPort,
    Contributor,
    CopySet,
    StoragePort,
)
from warpack.app.registry import PathRegistry
from warpack.utils.paths import normalize_logical_path

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AssemblyContext:
    """Configuration and execution surface for packaging one contributor.

    The registry is owned by the caller so several contexts of the same run
    (the project and each overlay) can share it.
    """

    webapp_output_root: Path
    classes_input_directory: Path
    archive_classes: bool
    contributor: Contributor
    registry: PathRegistry
    storage: StoragePort
    archiver: ArchiverPort
    output_timestamp: datetime | None = None
    resources: list[str] = field(default_factory=list)
    file_copies: dict[str, Path] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)

    def add_discovered_resource(self, path: str) -> None:
        """Record ``path`` as a known resource of the assembled application."""
        logical_path = normalize_logical_path(path)
        if logical_path not in self.resources:
            self.resources.append(logical_path)

    def emit_warning(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)

    def execute_copy(self, instruction: CopySet) -> list[str]:
        """Copy every file of ``instruction`` into the webapp output root.

        Returns:
            Logical paths written

        Raises:
            PackagingExecutionError: If any file cannot be copied
        """
        written: list[str] = []
        for relative, logical_path in zip(
            sorted(instruction.relative_paths), instruction.target_paths(), strict=True
        ):
            source = instruction.source_dir / relative
            destination = self.webapp_output_root / logical_path
            try:
                self.storage.copy_file(source, destination)
            except OSError as exc:
                raise PackagingExecutionError(
                    f"Could not copy webapp classes [{instruction.source_dir}] "
                    f"to [{destination}]: {exc}",
                    path=destination,
                ) from exc
            written.append(logical_path)

        logger.debug(
            "Copied %d file(s) from %s to %s",
            len(written),
            instruction.source_dir,
            instruction.destination_subpath,
        )
        return written

    def execute_archive(self, instruction: ArchiveFile) -> Path:
        """Write the classes archive described by ``instruction``.

        Raises:
            PackagingExecutionError: If the archive cannot be written
        """
        destination = self.webapp_output_root / instruction.destination_archive_path
        try:
            archive_path = self.archiver.archive(
                instruction.source_dir,
                destination,
                timestamp=self.output_timestamp,
            )
        except (OSError, ValueError) as exc:
            raise PackagingExecutionError(
                f"Could not generate archive classes file [{destination}]: {exc}",
                path=destination,
            ) from exc

        self.file_copies[instruction.destination_archive_path] = archive_path
        logger.debug("Archived %s into %s", instruction.source_dir, archive_path)
        return archive_path
