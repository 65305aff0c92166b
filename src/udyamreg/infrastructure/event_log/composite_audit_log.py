from __future__ import annotations

import logging
from typing import List

from udyamreg.application.ports.audit_log_port import AuditLogPort
from udyamreg.domain.audit import SubmissionLogEntry

logger = logging.getLogger(__name__)


class CompositeAuditLog(AuditLogPort):
    """Tee entries to multiple backends; one failing backend does not stop the others."""

    def __init__(self, backends: List[AuditLogPort]):
        self._backends = [b for b in backends if b is not None]

    @property
    def backends(self) -> List[AuditLogPort]:
        return list(self._backends)

    def append(self, entry: SubmissionLogEntry) -> None:
        for backend in self._backends:
            try:
                backend.append(entry)
            except Exception as e:
                logger.warning(f"Audit backend {type(backend).__name__} append failed: {e}")

    def close(self) -> None:
        for backend in self._backends:
            try:
                backend.close()
            except Exception as e:
                logger.debug(f"Audit backend {type(backend).__name__} close failed: {e}")
