"""Append-only audit ledger recording the outcome of packaging tasks."""

from __future__ import annotations

import json
import os
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from warpack import __version__
from warpack.utils.hashing import compute_sha256

GENESIS_HASH = "0" * 64


class AuditEntry(BaseModel):
    """Single audit ledger entry.

    Entries are linked in a hash chain so that edits or removals are detectable.
    """

    timestamp: str = Field(..., description="ISO 8601 timestamp in UTC")
    operation: str = Field(..., description="Operation name (e.g., classes.copy)")
    inputs: list[str] = Field(default_factory=list, description="Input paths or identifiers")
    outputs: list[str] = Field(default_factory=list, description="Logical output paths")
    args: dict[str, Any] = Field(default_factory=dict, description="Operation arguments")
    versions: dict[str, str] = Field(default_factory=dict, description="Tool versions")
    previous_hash: str = Field(
        default=GENESIS_HASH,
        description="SHA-256 hash of previous entry. Genesis entry has 64 zeros.",
    )
    sequence: int | None = Field(default=None, ge=1, description="Sequence number from 1")
    entry_hash: str | None = Field(
        default=None,
        description="SHA-256 hash of entry content including previous_hash",
    )

    def compute_hash(self) -> str:
        """Compute deterministic hash of entry content, excluding ``entry_hash``."""
        data = self.model_dump(mode="json", exclude={"entry_hash"}, exclude_none=True)
        content = json.dumps(data, sort_keys=True, separators=(",", ":"))
        return compute_sha256(content.encode("utf-8"))

    def model_post_init(self, __context: Any) -> None:
        """Compute hash after initialization if not set."""
        if self.entry_hash is None:
            self.entry_hash = self.compute_hash()


class AuditLedger:
    """Append-only JSONL ledger of packaging operations."""

    def __init__(self, ledger_path: Path) -> None:
        self.ledger_path = ledger_path
        self.ledger_path.parent.mkdir(parents=True, exist_ok=True)

        self._last_hash = GENESIS_HASH
        self._last_sequence = 0

        entries = self._read_entries()
        if entries:
            last_entry = entries[-1]
            self._last_hash = last_entry.entry_hash or GENESIS_HASH
            self._last_sequence = last_entry.sequence or len(entries)

    def _read_entries(self) -> list[AuditEntry]:
        if not self.ledger_path.exists():
            return []

        entries: list[AuditEntry] = []
        with open(self.ledger_path, encoding="utf-8") as fh:
            for line_num, raw_line in enumerate(fh, 1):
                line = raw_line.strip()
                if not line:
                    continue
                try:
                    entries.append(AuditEntry.model_validate_json(line))
                except ValueError as exc:
                    raise ValueError(
                        f"Invalid entry at line {line_num} in {self.ledger_path}: {exc}"
                    ) from exc

        return entries

    def log(
        self,
        operation: str,
        inputs: list[str] | None = None,
        outputs: list[str] | None = None,
        args: dict[str, Any] | None = None,
        versions: dict[str, str] | None = None,
    ) -> AuditEntry:
        """Append an operation to the ledger and return the stored entry."""
        versions = dict(versions or {})
        versions.setdefault("warpack", __version__)

        sequence = self._last_sequence + 1
        entry = AuditEntry(
            timestamp=datetime.now(UTC).isoformat(),
            operation=operation,
            inputs=inputs or [],
            outputs=outputs or [],
            args=args or {},
            versions=versions,
            previous_hash=self._last_hash,
            sequence=sequence,
        )

        with open(self.ledger_path, "a", encoding="utf-8") as fh:
            fh.write(entry.model_dump_json() + "\n")
            fh.flush()
            os.fsync(fh.fileno())

        self._last_sequence = sequence
        self._last_hash = entry.entry_hash or GENESIS_HASH
        return entry

    def read_all(self) -> list[AuditEntry]:
        return self._read_entries()

    def verify(self) -> tuple[bool, str | None]:
        """Verify the hash chain.

        Returns:
            ``(True, None)`` when intact, otherwise ``(False, reason)``
        """
        try:
            entries = self._read_entries()
        except ValueError as exc:
            return False, str(exc)

        previous_hash = GENESIS_HASH
        for index, entry in enumerate(entries, 1):
            if entry.sequence is not None and entry.sequence != index:
                return False, f"Sequence gap at entry {index}: found {entry.sequence}"
            if entry.previous_hash != previous_hash:
                return False, f"Broken chain at entry {index}"
            if entry.entry_hash != entry.compute_hash():
                return False, f"Hash mismatch at entry {index}"
            previous_hash = entry.entry_hash

        return True, None
