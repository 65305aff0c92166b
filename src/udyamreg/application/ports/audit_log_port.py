from __future__ import annotations

from typing import Protocol, runtime_checkable

from udyamreg.domain.audit import SubmissionLogEntry


@runtime_checkable
class AuditLogPort(Protocol):
    """
    Sink for submission/lookup audit entries.

    Implementations may log to stdout, keep entries in memory, or persist to DB.
    Callers treat every sink as unreliable.
    """

    def append(self, entry: SubmissionLogEntry) -> None:
        """Append one entry."""

    def close(self) -> None:
        """Close underlying resources (optional)."""
