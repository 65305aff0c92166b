from __future__ import annotations

import logging
from typing import Optional

from udyamreg.application.ports.audit_log_port import AuditLogPort
from udyamreg.domain.audit import SubmissionLogEntry


class LoggingAuditLog(AuditLogPort):
    """Emit audit entries as JSON lines to the Python logger."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        self._logger = logger or logging.getLogger("udyamreg.audit")
        self._level = level

    def append(self, entry: SubmissionLogEntry) -> None:
        self._logger.log(self._level, entry.to_json())

    def close(self) -> None:
        return None
