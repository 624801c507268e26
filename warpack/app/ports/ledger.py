"""Ledger port interface for audit trail operations."""

from typing import Any, Protocol

from pydantic import BaseModel, Field


class AuditRecord(BaseModel):
    """Normalized view of an audit ledger entry."""

    timestamp: str = Field(..., description="ISO-8601 timestamp")
    operation: str = Field(..., description="Operation name recorded in the ledger")
    inputs: list[str] = Field(default_factory=list, description="Input identifiers for the event")
    outputs: list[str] = Field(
        default_factory=list, description="Output identifiers or artifact paths for the event"
    )
    args: dict[str, Any] = Field(default_factory=dict, description="Additional parameters")
    versions: dict[str, str] | None = Field(default=None, description="Tool versions (optional)")


class LedgerPort(Protocol):
    """Port interface for audit ledger operations.

    Side effects: Writes to audit ledger (offline).
    """

    def log(
        self,
        operation: str,
        inputs: list[str],
        outputs: list[str],
        args: dict[str, Any],
    ) -> Any:
        """Log an operation to the audit ledger.

        Args:
            operation: Operation name (e.g., "classes.copy", "classes.archive")
            inputs: List of input paths/identifiers
            outputs: List of output paths/identifiers
            args: Additional arguments/metadata
        """
        ...

    def verify(self) -> tuple[bool, str | None]:
        """Verify audit ledger integrity, returning a reason on failure."""
        ...

    def read_all(self) -> list[Any]:
        """Read all audit entries."""
        ...
