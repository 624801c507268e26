"""Port interfaces for the warpack application layer.

These protocol interfaces define contracts for adapters.
Packaging logic depends on these ports, never on concrete implementations.
"""

__all__ = [
    "ArchiveFile",
    "ArchiverPort",
    "ArtifactCoordinates",
    "AuditRecord",
    "Contributor",
    "CopySet",
    "FinalNamePort",
    "Instruction",
    "LedgerPort",
    "PackagingMode",
    "Skip",
    "StoragePort",
]

from warpack.app.ports.archive import ArchiverPort
from warpack.app.ports.ledger import AuditRecord, LedgerPort
from warpack.app.ports.naming import ArtifactCoordinates, FinalNamePort
from warpack.app.ports.packaging import (
    ArchiveFile,
    Contributor,
    CopySet,
    Instruction,
    PackagingMode,
    Skip,
)
from warpack.app.ports.storage import StoragePort
