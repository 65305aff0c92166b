from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from udyamreg.domain.audit import ClientMeta
from udyamreg.domain.registration import (
    RegistrationEnterprise,
    RegistrationIdentity,
    RegistrationRecord,
)


@runtime_checkable
class RegistrationRepositoryPort(Protocol):
    """Append-only registration storage: create and read, no update/delete."""

    def create(
        self,
        identity: RegistrationIdentity,
        enterprise: RegistrationEnterprise,
        client_meta: ClientMeta,
    ) -> RegistrationRecord:
        """Persist a completed registration; raises PersistenceError on failure."""

    def get(self, registration_id: str) -> Optional[RegistrationRecord]:
        """Read back a registration by id."""
