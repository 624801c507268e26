"""Classes packaging service.

Handles the compiled classes directory of the project (or an overlay). Based on
the archive-classes flag the files are either copied into ``WEB-INF/classes``
or bundled into one jar inside ``WEB-INF/lib``.

Raw copies never consult the path registry; they overwrite identical relative
paths across contributors. Archives do: each archive path in ``WEB-INF/lib`` is
produced at most once per run, and a second claim degrades to a warning.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from warpack.app.collector import SourceCollector
from warpack.app.context import AssemblyContext
from warpack.app.errors import ArchiveNameError
from warpack.app.ports import (
    ArchiveFile,
    Contributor,
    CopySet,
    FinalNamePort,
    Instruction,
    LedgerPort,
    PackagingMode,
    Skip,
    StoragePort,
)
from warpack.app.ports.packaging import CLASSES_PATH, LIB_PATH
from warpack.app.registry import PathRegistry
from warpack.utils.paths import same_directory

logger = logging.getLogger(__name__)

SKIP_MISSING_INPUT = "classes directory does not exist"
SKIP_SELF_COPY = "classes directory is the webapp classes directory"
SKIP_ALREADY_REGISTERED = "archive already registered"


class ClassesPackagingService:
    """Decides and performs the packaging of one contributor's classes directory."""

    def __init__(
        self,
        storage_port: StoragePort,
        name_resolver: FinalNamePort,
        ledger_port: LedgerPort,
        *,
        collector: SourceCollector | None = None,
    ) -> None:
        """Initialize classes packaging service.

        Args:
            storage_port: Filesystem operations port
            name_resolver: Computes archive file names from coordinates
            ledger_port: Audit logging port
            collector: Enumerates the files of the classes directory
        """
        self.storage = storage_port
        self.name_resolver = name_resolver
        self.ledger = ledger_port
        self.collector = collector or SourceCollector()

    def decide(
        self,
        contributor: Contributor,
        input_directory: Path,
        output_root: Path,
        archive_mode: bool | PackagingMode,
        registry: PathRegistry,
        *,
        warn: Callable[[str], None] | None = None,
    ) -> Instruction:
        """Choose what to do with ``input_directory`` for ``contributor``.

        Creates ``WEB-INF/classes`` under ``output_root`` in every case. In
        archive mode a successful decision claims the archive path in
        ``registry``.

        Args:
            contributor: Project or overlay supplying the classes
            input_directory: Compiled classes directory
            output_root: Root of the exploded web application
            archive_mode: Packaging mode, or the archive-classes flag
            registry: Path registry of the current run
            warn: Receives the duplicate-claim warning (defaults to logging)

        Returns:
            ``Skip``, ``CopySet`` or ``ArchiveFile``

        Raises:
            ArchiveNameError: If the archive name cannot be computed
        """
        webapp_classes_dir = Path(output_root) / CLASSES_PATH
        self.storage.ensure_dir(webapp_classes_dir)

        source_dir = Path(input_directory)
        if not self.storage.exists(source_dir):
            logger.debug("Skipping %s: %s (%s)", contributor, SKIP_MISSING_INPUT, source_dir)
            return Skip(reason=SKIP_MISSING_INPUT)
        if same_directory(source_dir, webapp_classes_dir):
            logger.debug("Skipping %s: %s (%s)", contributor, SKIP_SELF_COPY, source_dir)
            return Skip(reason=SKIP_SELF_COPY)

        if PackagingMode.from_flag(archive_mode) is PackagingMode.COPY_FILES:
            sources = self.collector.collect(source_dir)
            return CopySet(
                source_dir=source_dir,
                relative_paths=sources,
                destination_subpath=CLASSES_PATH.rstrip("/"),
            )

        target_filename = LIB_PATH + self._archive_name(contributor)
        try:
            claimed = registry.register(contributor, target_filename)
        except ValueError as exc:
            raise ArchiveNameError(
                f"Invalid archive path [{target_filename}] for [{contributor.coordinates}]: {exc}",
                coordinates=contributor.coordinates,
            ) from exc
        if claimed:
            return ArchiveFile(source_dir=source_dir, destination_archive_path=target_filename)

        message = (
            f"Could not generate archive classes file [{target_filename}] "
            "has already been copied."
        )
        (warn or logger.warning)(message)
        return Skip(reason=f"{SKIP_ALREADY_REGISTERED}: {target_filename}")

    def perform(self, context: AssemblyContext) -> Instruction:
        """Decide for ``context`` and execute the resulting instruction.

        Raises:
            ArchiveNameError: If the archive name cannot be computed
            PackagingExecutionError: If copying or archiving fails
        """
        instruction = self.decide(
            context.contributor,
            context.classes_input_directory,
            context.webapp_output_root,
            context.archive_classes,
            context.registry,
            warn=context.emit_warning,
        )

        if isinstance(instruction, CopySet):
            written = context.execute_copy(instruction)
            self.ledger.log(
                operation="classes.copy",
                inputs=[str(instruction.source_dir)],
                outputs=written,
                args={"contributor": context.contributor.id, "file_count": len(written)},
            )
        elif isinstance(instruction, ArchiveFile):
            context.add_discovered_resource(instruction.destination_archive_path)
            archive_path = context.execute_archive(instruction)
            self.ledger.log(
                operation="classes.archive",
                inputs=[str(instruction.source_dir)],
                outputs=[instruction.destination_archive_path],
                args={"contributor": context.contributor.id, "archive": str(archive_path)},
            )
        else:
            self.ledger.log(
                operation="classes.skip",
                inputs=[str(context.classes_input_directory)],
                outputs=[],
                args={"contributor": context.contributor.id, "reason": instruction.reason},
            )

        return instruction

    def _archive_name(self, contributor: Contributor) -> str:
        coordinates = contributor.coordinates
        if coordinates is None:
            raise ArchiveNameError(
                f"Could not get the final name of the artifact for [{contributor.id}]: "
                "no artifact coordinates configured"
            )

        try:
            return self.name_resolver.resolve(coordinates)
        except ArchiveNameError as exc:
            if exc.coordinates is not None:
                raise
            raise ArchiveNameError(
                f"Could not get the final name of the artifact [{coordinates}]: {exc}",
                coordinates=coordinates,
            ) from exc
        except (KeyError, ValueError) as exc:
            raise ArchiveNameError(
                f"Could not get the final name of the artifact [{coordinates}]: {exc}",
                coordinates=coordinates,
            ) from exc
