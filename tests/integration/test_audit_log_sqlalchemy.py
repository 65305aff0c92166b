from __future__ import annotations

from sqlalchemy import select

from udyamreg.domain.audit import ClientMeta, SubmissionLogEntry
from udyamreg.infrastructure.event_log import SqlAlchemyAuditLog
from udyamreg.infrastructure.stores.models import SubmissionLogModel
from udyamreg.infrastructure.stores.sqlalchemy_db import SessionProvider


def test_sqlalchemy_audit_log_persists_entries(db_url):
    audit_log = SqlAlchemyAuditLog(db_url=db_url, auto_create_schema=True)

    audit_log.append(
        SubmissionLogEntry(
            endpoint="/api/pincode/110001",
            method="GET",
            status_code=404,
            duration_ms=5001,
            client_meta=ClientMeta("127.0.0.1", "pytest"),
            error_message="Location details not found for the provided PIN code.",
            details={"pincode": "110001", "resolution": "unavailable", "source": "none", "reason": "timeout"},
        )
    )
    audit_log.append(
        SubmissionLogEntry(
            endpoint="/api/submit",
            method="POST",
            status_code=201,
            duration_ms=40,
            request_payload={"aadhaarNumber": "123456789012"},
        )
    )
    audit_log.close()

    provider = SessionProvider(db_url)
    with provider.session() as session:
        rows = session.execute(select(SubmissionLogModel).order_by(SubmissionLogModel.id)).scalars().all()
        assert [r.endpoint for r in rows] == ["/api/pincode/110001", "/api/submit"]

        lookup, submit = rows
        assert lookup.get_details()["resolution"] == "unavailable"
        assert lookup.ip_address == "127.0.0.1"
        assert lookup.get_request_payload() is None

        assert submit.get_request_payload() == {"aadhaarNumber": "123456789012"}
        assert submit.get_details() == {}
    provider.dispose()
