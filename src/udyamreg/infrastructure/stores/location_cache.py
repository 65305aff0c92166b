from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError

from udyamreg.application.ports.location_cache_port import LocationCachePort
from udyamreg.domain.audit import utcnow
from udyamreg.domain.location import LocationRecord
from udyamreg.infrastructure.stores.models import Base, PostalCodeModel
from udyamreg.infrastructure.stores.sqlalchemy_db import SessionProvider, get_db_url

logger = logging.getLogger(__name__)


class SqlAlchemyLocationCache(LocationCachePort):
    """
    PIN code cache table backed by SQLAlchemy.

    ``put`` is insert-if-absent: the primary key on ``pincode`` makes the race
    between two writers resolve in the database, and the loser sees an
    IntegrityError which is reported as "not inserted".
    """

    def __init__(self, db_url: Optional[str] = None, *, auto_create_schema: bool = True):
        self.db_url = db_url or get_db_url()
        self._provider = SessionProvider(self.db_url)
        if auto_create_schema:
            Base.metadata.create_all(self._provider.engine)

    def get(self, pincode: str) -> Optional[LocationRecord]:
        with self._provider.session() as session:
            row = session.get(PostalCodeModel, pincode)
            if row is None:
                return None
            return LocationRecord(
                pincode=row.pincode,
                city=row.city,
                district=row.district,
                state=row.state,
            )

    def put(self, record: LocationRecord) -> bool:
        with self._provider.session() as session:
            if session.get(PostalCodeModel, record.pincode) is not None:
                return False
            session.add(
                PostalCodeModel(
                    pincode=record.pincode,
                    city=record.city,
                    district=record.district,
                    state=record.state,
                    created_at=utcnow(),
                )
            )
            try:
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.debug("PIN code %s already cached by a concurrent writer", record.pincode)
                return False
        return True

    def close(self) -> None:
        self._provider.dispose()


class InMemoryLocationCache(LocationCachePort):
    """Dict-backed cache (useful for tests/CLI)."""

    def __init__(self) -> None:
        self._records: Dict[str, LocationRecord] = {}
        self._lock = threading.Lock()

    def get(self, pincode: str) -> Optional[LocationRecord]:
        with self._lock:
            return self._records.get(pincode)

    def put(self, record: LocationRecord) -> bool:
        with self._lock:
            if record.pincode in self._records:
                return False
            self._records[record.pincode] = record
            return True

    def close(self) -> None:
        return None
