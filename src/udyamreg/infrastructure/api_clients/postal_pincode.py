"""
Client for the public India Post PIN code directory (api.postalpincode.in).

Response shape::

    [{"Message": "...", "Status": "Success" | "Error" | "404",
      "PostOffice": [{"Name": ..., "Block": ..., "District": ..., "State": ...}, ...] | null}]

The first post office in the list is taken as representative of the code.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Optional

import aiohttp

from udyamreg.config.settings import DEFAULT_UPSTREAM_URL, UpstreamConfig
from udyamreg.core.errors import UpstreamError
from udyamreg.domain.location import LocationRecord, UpstreamOutcome

from .base import APIClient

logger = logging.getLogger(__name__)


def _text(value: Any) -> Optional[str]:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def parse_pincode_payload(pincode: str, payload: Any) -> UpstreamOutcome:
    """Map a decoded response body onto found / not_found / unavailable."""
    if not isinstance(payload, list) or not payload or not isinstance(payload[0], Mapping):
        return UpstreamOutcome.unavailable("unexpected response shape")

    entry = payload[0]
    if entry.get("Status") != "Success":
        return UpstreamOutcome.not_found(str(entry.get("Message") or "no records"))

    offices = entry.get("PostOffice")
    if not isinstance(offices, list) or not offices or not isinstance(offices[0], Mapping):
        return UpstreamOutcome.not_found("no post offices listed")

    office = offices[0]
    district = _text(office.get("District"))
    state = _text(office.get("State"))
    if district is None or state is None:
        return UpstreamOutcome.not_found("incomplete post office record")

    return UpstreamOutcome.found(
        LocationRecord(
            pincode=pincode,
            city=_text(office.get("Name")) or _text(office.get("Block")),
            district=district,
            state=state,
        )
    )


class PostalPincodeClient(APIClient):
    """Resolve a PIN code against the public directory. Never touches the cache."""

    def __init__(
        self,
        base_url: str = DEFAULT_UPSTREAM_URL,
        timeout: float = 5.0,
        user_agent: str = "UdyamRegistration/0.1",
    ):
        super().__init__(base_url=base_url, timeout=timeout, user_agent=user_agent)

    @classmethod
    def from_config(cls, config: UpstreamConfig) -> "PostalPincodeClient":
        return cls(
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            user_agent=config.user_agent,
        )

    async def resolve(self, pincode: str) -> UpstreamOutcome:
        try:
            payload = await self.get(f"pincode/{pincode}")
        except asyncio.TimeoutError:
            return UpstreamOutcome.unavailable("timeout")
        except UpstreamError as e:
            return UpstreamOutcome.unavailable(e.message)
        except aiohttp.ClientError as e:
            return UpstreamOutcome.unavailable(f"connection error: {e.__class__.__name__}")

        outcome = parse_pincode_payload(pincode, payload)
        logger.debug("Upstream lookup %s -> %s", pincode, outcome.status.value)
        return outcome
