from __future__ import annotations

import logging
import threading
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from udyamreg.application.ports.registration_repository_port import RegistrationRepositoryPort
from udyamreg.core.errors import PersistenceError
from udyamreg.domain.audit import ClientMeta, utcnow
from udyamreg.domain.registration import (
    RegistrationEnterprise,
    RegistrationIdentity,
    RegistrationRecord,
)
from udyamreg.infrastructure.stores.models import Base, RegistrationModel
from udyamreg.infrastructure.stores.sqlalchemy_db import SessionProvider, get_db_url

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _as_utc(value: datetime) -> datetime:
    # SQLite drops tzinfo on DateTime(timezone=True) columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _to_record(row: RegistrationModel) -> RegistrationRecord:
    return RegistrationRecord(
        id=row.id,
        identity=RegistrationIdentity(
            aadhaar_number=row.aadhaar_number,
            applicant_name=row.applicant_name,
            mobile_number=row.mobile_number,
            email_address=row.email_address,
            pan_number=row.pan_number,
        ),
        enterprise=RegistrationEnterprise(
            business_name=row.business_name,
            business_type=row.business_type,
            business_address=row.business_address,
            pincode=row.pincode,
            state=row.state,
            district=row.district,
            city=row.city,
            gstin_number=row.gstin_number,
            bank_account_number=row.bank_account_number,
            ifsc_code=row.ifsc_code,
        ),
        created_at=_as_utc(row.created_at),
        is_completed=row.is_completed,
        submission_step=row.submission_step,
        client_meta=ClientMeta(ip_address=row.ip_address, user_agent=row.user_agent),
    )


class SqlAlchemyRegistrationStore(RegistrationRepositoryPort):
    """Append-only registration table. Storage failures surface as PersistenceError."""

    def __init__(self, db_url: Optional[str] = None, *, auto_create_schema: bool = True):
        self.db_url = db_url or get_db_url()
        self._provider = SessionProvider(self.db_url)
        if auto_create_schema:
            Base.metadata.create_all(self._provider.engine)

    def create(
        self,
        identity: RegistrationIdentity,
        enterprise: RegistrationEnterprise,
        client_meta: ClientMeta,
    ) -> RegistrationRecord:
        row = RegistrationModel(
            id=_new_id(),
            aadhaar_number=identity.aadhaar_number,
            applicant_name=identity.applicant_name,
            mobile_number=identity.mobile_number,
            email_address=identity.email_address,
            pan_number=identity.pan_number,
            business_name=enterprise.business_name,
            business_type=enterprise.business_type,
            business_address=enterprise.business_address,
            pincode=enterprise.pincode,
            state=enterprise.state,
            district=enterprise.district,
            city=enterprise.city,
            gstin_number=enterprise.gstin_number,
            bank_account_number=enterprise.bank_account_number,
            ifsc_code=enterprise.ifsc_code,
            submission_step=2,
            is_completed=True,
            ip_address=client_meta.ip_address,
            user_agent=client_meta.user_agent,
            created_at=utcnow(),
        )
        try:
            with self._provider.session() as session:
                session.add(row)
                session.commit()
                session.refresh(row)
                return _to_record(row)
        except SQLAlchemyError as e:
            logger.error(f"Failed to persist registration: {e}")
            raise PersistenceError(
                message="Failed to store registration",
                context={"pincode": enterprise.pincode},
            ) from e

    def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        with self._provider.session() as session:
            row = session.get(RegistrationModel, registration_id)
            return _to_record(row) if row is not None else None

    def close(self) -> None:
        self._provider.dispose()


class InMemoryRegistrationStore(RegistrationRepositoryPort):
    """Simple in-memory store (useful for tests)."""

    def __init__(self) -> None:
        self.records: Dict[str, RegistrationRecord] = {}
        self._lock = threading.Lock()

    def create(
        self,
        identity: RegistrationIdentity,
        enterprise: RegistrationEnterprise,
        client_meta: ClientMeta,
    ) -> RegistrationRecord:
        record = RegistrationRecord(
            id=_new_id(),
            identity=identity,
            enterprise=enterprise,
            created_at=utcnow(),
            client_meta=client_meta,
        )
        with self._lock:
            self.records[record.id] = record
        return record

    def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        with self._lock:
            return self.records.get(registration_id)

    def close(self) -> None:
        return None
