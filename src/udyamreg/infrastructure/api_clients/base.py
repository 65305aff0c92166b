"""
Shared async HTTP client wrapper.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp
from aiohttp import ClientTimeout

from udyamreg.core.errors import UpstreamError

logger = logging.getLogger(__name__)


class APIClient:
    """Generic async JSON-over-HTTP client. One attempt per request, no retries."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        user_agent: str = "UdyamRegistration/0.1",
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = ClientTimeout(total=timeout)
        self.user_agent = user_agent
        self._session: Optional[aiohttp.ClientSession] = None

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or lazily create the aiohttp session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
            )
        return self._session

    async def get(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        GET ``endpoint`` and decode the JSON body.

        Raises UpstreamError for non-2xx statuses and undecodable bodies;
        ``asyncio.TimeoutError`` and ``aiohttp.ClientError`` propagate.
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        session = await self._get_session()

        try:
            async with session.get(url, params=params) as response:
                if response.status >= 400:
                    text = await response.text()
                    logger.warning(f"API error {response.status} for {url}: {text[:200]}")
                    raise UpstreamError(
                        message=f"API error: {response.status}",
                        status=response.status,
                        context={"url": url},
                    )
                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise UpstreamError(
                        message="Malformed JSON response",
                        status=response.status,
                        context={"url": url},
                    ) from e
        except asyncio.TimeoutError:
            logger.warning(f"Request timeout: {url}")
            raise
        except aiohttp.ClientError as e:
            logger.warning(f"Request failed: {url} - {e}")
            raise

    async def close(self) -> None:
        """Close the session."""
        if self._session and not self._session.closed:
            await self._session.close()
        self._session = None

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
