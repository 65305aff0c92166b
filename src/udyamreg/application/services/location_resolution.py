"""
PIN code resolution: cache first, then the upstream directory, then give up.

Write policy lives here and nowhere else: the upstream client never touches the
cache, and the submission pipeline only reads what this service returns.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Dict, Optional

from udyamreg.application.ports.location_cache_port import LocationCachePort
from udyamreg.application.ports.upstream_resolver_port import UpstreamResolverPort
from udyamreg.domain.location import (
    LocationRecord,
    Resolution,
    ResolutionSource,
    ResolutionStatus,
    UpstreamOutcome,
    validate_postal_code,
)

logger = logging.getLogger(__name__)


@dataclass
class _InFlight:
    task: "asyncio.Task[Resolution]"
    waiters: int = 0


class LocationResolutionService:
    """
    Resolve a PIN code to a LocationRecord.

    - invalid format raises InvalidFormatError before any cache or network access
    - cache hit returns immediately, no upstream call
    - cache miss makes exactly one upstream call, shared by every concurrent
      caller for the same code; a found record is written through (best effort)
    - if every caller waiting on a lookup is cancelled, the lookup is cancelled
      and nothing is cached
    """

    def __init__(self, cache: LocationCachePort, upstream: UpstreamResolverPort):
        self._cache = cache
        self._upstream = upstream
        self._inflight: Dict[str, _InFlight] = {}

    @property
    def inflight_count(self) -> int:
        return len(self._inflight)

    async def resolve(self, pincode: str) -> Resolution:
        pincode = validate_postal_code(pincode).unwrap()

        cached = self._cache_get(pincode)
        if cached is not None:
            return Resolution(
                pincode=pincode,
                status=ResolutionStatus.FOUND,
                record=cached,
                source=ResolutionSource.CACHE,
            )

        flight = self._inflight.get(pincode)
        if flight is None:
            flight = _InFlight(task=asyncio.ensure_future(self._fetch(pincode)))
            self._inflight[pincode] = flight
            flight.task.add_done_callback(lambda _t, p=pincode, f=flight: self._forget(p, f))

        flight.waiters += 1
        try:
            return await asyncio.shield(flight.task)
        finally:
            flight.waiters -= 1
            if flight.waiters == 0 and not flight.task.done():
                logger.debug("All callers for %s cancelled; cancelling upstream lookup", pincode)
                self._forget(pincode, flight)
                flight.task.cancel()

    def _forget(self, pincode: str, flight: _InFlight) -> None:
        if self._inflight.get(pincode) is flight:
            del self._inflight[pincode]

    def _cache_get(self, pincode: str) -> Optional[LocationRecord]:
        try:
            return self._cache.get(pincode)
        except Exception as e:
            logger.warning(f"Location cache read failed for {pincode}: {e}")
            return None

    async def _fetch(self, pincode: str) -> Resolution:
        try:
            outcome = await self._upstream.resolve(pincode)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.warning(f"Upstream resolver raised for {pincode}: {e}")
            outcome = UpstreamOutcome.unavailable(f"resolver error: {e.__class__.__name__}")

        if outcome.status is not ResolutionStatus.FOUND or outcome.record is None:
            logger.info("PIN code %s unresolved (%s)", pincode, outcome.status.value)
            return Resolution(pincode=pincode, status=outcome.status, reason=outcome.reason)

        return Resolution(
            pincode=pincode,
            status=ResolutionStatus.FOUND,
            record=self._write_through(outcome.record),
            source=ResolutionSource.UPSTREAM,
        )

    def _write_through(self, record: LocationRecord) -> LocationRecord:
        """Cache the record; if another writer got there first, return theirs."""
        try:
            inserted = self._cache.put(record)
        except Exception as e:
            logger.warning(f"Location cache write failed for {record.pincode}: {e}")
            return record

        if inserted:
            return record

        existing = self._cache_get(record.pincode)
        return existing if existing is not None else record
