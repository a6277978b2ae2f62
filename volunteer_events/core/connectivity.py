"""
Connectivity probe: is the network reachable right now?
"""

import logging
from typing import Protocol

import httpx

from volunteer_events.config import get_settings

logger = logging.getLogger(__name__)


class ConnectivityProbe(Protocol):
    async def is_connected(self) -> bool: ...


class HttpConnectivityProbe:
    """Reports connected when a lightweight GET to the check URL gets any response.

    Any HTTP status counts as reachable; only transport errors mean offline.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.url = url or settings.CONNECTIVITY_CHECK_URL or settings.API_BASE_URL
        self._timeout = timeout if timeout is not None else settings.CONNECTIVITY_TIMEOUT
        self._transport = transport

    async def is_connected(self) -> bool:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                await client.get(self.url)
            return True
        except httpx.HTTPError as e:
            logger.info(f"Connectivity probe failed for {self.url}: {e}")
            return False
