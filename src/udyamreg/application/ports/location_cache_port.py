from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from udyamreg.domain.location import LocationRecord


@runtime_checkable
class LocationCachePort(Protocol):
    """
    Durable PIN code -> LocationRecord store.

    Write policy is "first write wins": ``put`` never overwrites an existing
    record and must be an atomic insert-if-absent, so concurrent writers for the
    same code cannot both believe they were first. A TTL/refresh policy would be
    a different implementation of this port; the resolution service does not
    depend on the policy.
    """

    def get(self, pincode: str) -> Optional[LocationRecord]:
        """Return the cached record or None on a miss. No side effects."""

    def put(self, record: LocationRecord) -> bool:
        """Insert if absent. Returns True if this call created the record."""
