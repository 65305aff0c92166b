from __future__ import annotations

from typing import Optional

from udyamreg.application.ports.audit_log_port import AuditLogPort
from udyamreg.domain.audit import SubmissionLogEntry
from udyamreg.infrastructure.stores.models import Base, SubmissionLogModel
from udyamreg.infrastructure.stores.sqlalchemy_db import SessionProvider, get_db_url


class SqlAlchemyAuditLog(AuditLogPort):
    """
    Persist audit entries into the ``form_submission_logs`` table, one row per entry.
    """

    def __init__(self, db_url: Optional[str] = None, *, auto_create_schema: bool = True):
        self.db_url = db_url or get_db_url()
        self._provider = SessionProvider(self.db_url)
        if auto_create_schema:
            Base.metadata.create_all(self._provider.engine)

    def append(self, entry: SubmissionLogEntry) -> None:
        row = SubmissionLogModel(
            endpoint=entry.endpoint,
            method=entry.method,
            status_code=int(entry.status_code),
            duration_ms=int(entry.duration_ms),
            ip_address=entry.client_meta.ip_address,
            user_agent=entry.client_meta.user_agent,
            error_message=entry.error_message,
            created_at=entry.created_at,
        )
        row.set_request_payload(entry.request_payload)
        row.set_details(entry.details)
        with self._provider.session() as session:
            session.add(row)
            session.commit()

    def close(self) -> None:
        self._provider.dispose()
