from __future__ import annotations

from typing import Protocol, runtime_checkable

from udyamreg.domain.location import UpstreamOutcome


@runtime_checkable
class UpstreamResolverPort(Protocol):
    """
    Client for the external PIN code registry.

    One attempt per call, bounded by a timeout. Must not touch the cache.
    """

    async def resolve(self, pincode: str) -> UpstreamOutcome:
        """Return found / not_found / unavailable; never raises for network failures."""

    async def close(self) -> None:
        """Release the underlying HTTP session."""
