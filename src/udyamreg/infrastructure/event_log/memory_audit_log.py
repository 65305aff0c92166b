from __future__ import annotations

import threading
from typing import List

from udyamreg.application.ports.audit_log_port import AuditLogPort
from udyamreg.domain.audit import SubmissionLogEntry


class InMemoryAuditLog(AuditLogPort):
    """Simple in-memory audit log (useful for tests)."""

    def __init__(self) -> None:
        self.entries: List[SubmissionLogEntry] = []
        self._lock = threading.Lock()

    def append(self, entry: SubmissionLogEntry) -> None:
        with self._lock:
            self.entries.append(entry)

    def for_endpoint(self, endpoint: str) -> List[SubmissionLogEntry]:
        with self._lock:
            return [e for e in self.entries if e.endpoint == endpoint]

    def close(self) -> None:
        return None
