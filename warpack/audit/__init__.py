"""Audit trail for packaging operations."""

from warpack.audit.ledger import AuditEntry, AuditLedger

__all__ = ["AuditEntry", "AuditLedger"]
