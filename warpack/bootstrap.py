"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from warpack.app import AssemblyContext, ClassesPackagingService, PathRegistry
from warpack.app.adapters import (
    FileSystemStorageAdapter,
    JarClassesArchiver,
    TemplateFinalNameResolver,
)
from warpack.app.ports import (
    ArchiverPort,
    Contributor,
    FinalNamePort,
    LedgerPort,
    StoragePort,
)
from warpack.audit.ledger import AuditLedger
from warpack.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    classes_service: ClassesPackagingService
    storage_port: StoragePort
    archiver_port: ArchiverPort
    name_resolver: FinalNamePort
    ledger_port: LedgerPort

    def new_context(
        self,
        contributor: Contributor,
        registry: PathRegistry,
        *,
        classes_dir: Path | None = None,
        webapp_dir: Path | None = None,
        archive_classes: bool | None = None,
    ) -> AssemblyContext:
        """Build an assembly context for ``contributor`` from the settings.

        Explicit arguments override the matching settings values.
        """
        return AssemblyContext(
            webapp_output_root=Path(webapp_dir or self.settings.webapp_dir),
            classes_input_directory=Path(classes_dir or self.settings.classes_dir),
            archive_classes=(
                self.settings.archive_classes if archive_classes is None else archive_classes
            ),
            contributor=contributor,
            registry=registry,
            storage=self.storage_port,
            archiver=self.archiver_port,
            output_timestamp=self.settings.get_output_datetime(),
        )


class NoOpLedger:
    """Ledger implementation that drops all writes."""

    def log(self, *args: Any, **kwargs: Any) -> None:
        return None

    def read_all(self) -> list[dict[str, Any]]:
        return []

    def verify(self) -> tuple[bool, str | None]:
        return (True, None)


def bootstrap_application(settings: Settings | None = None) -> ApplicationContainer:
    """Wire the default adapters into an application container."""
    active_settings = settings or get_settings()

    storage = FileSystemStorageAdapter()
    archiver = JarClassesArchiver()
    name_resolver = TemplateFinalNameResolver(active_settings.output_file_name_mapping)

    ledger: LedgerPort
    if active_settings.audit_enabled:
        ledger = AuditLedger(active_settings.get_audit_path())
    else:
        ledger = NoOpLedger()

    classes_service = ClassesPackagingService(
        storage_port=storage,
        name_resolver=name_resolver,
        ledger_port=ledger,
    )

    return ApplicationContainer(
        settings=active_settings,
        classes_service=classes_service,
        storage_port=storage,
        archiver_port=archiver,
        name_resolver=name_resolver,
        ledger_port=ledger,
    )
