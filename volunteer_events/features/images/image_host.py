"""
Images feature: upload client for the external image host.

The host takes a base64 payload and answers with an envelope like
{"data": {"url": "https://i.ibb.co/..."}, "success": true}.
"""

import logging
from typing import Protocol

import httpx

from volunteer_events.config import get_settings
from volunteer_events.core.exceptions import UploadFailed

logger = logging.getLogger(__name__)


class ImageHost(Protocol):
    async def upload(self, base64_payload: str) -> str: ...


def extract_image_url(body: object) -> str | None:
    """Pull `data.url` out of the host's JSON envelope."""
    if not isinstance(body, dict):
        return None
    data = body.get("data")
    if not isinstance(data, dict):
        return None
    url = data.get("url")
    return url if isinstance(url, str) and url else None


class ImgbbImageHost:
    """imgbb-compatible host: POST form field `image`, API key as `key` param."""

    def __init__(
        self,
        api_key: str | None = None,
        upload_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        settings = get_settings()
        self.api_key = api_key if api_key is not None else settings.IMAGE_HOST_API_KEY
        self.upload_url = upload_url or settings.IMAGE_HOST_URL
        self._timeout = timeout if timeout is not None else settings.IMAGE_HOST_TIMEOUT
        self._transport = transport

    async def upload(self, base64_payload: str) -> str:
        """Upload and return the public URL.

        Raises:
            UploadFailed: transport error, non-2xx status, or no `data.url`.
        """
        params = {"key": self.api_key} if self.api_key else None
        try:
            async with httpx.AsyncClient(
                timeout=float(self._timeout),
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.upload_url,
                    params=params,
                    data={"image": base64_payload},
                )
                response.raise_for_status()
                body = response.json()
        except httpx.HTTPError as e:
            raise UploadFailed(f"Image host request failed: {e}") from e
        except ValueError as e:
            raise UploadFailed(f"Image host returned invalid JSON: {e}") from e

        url = extract_image_url(body)
        if not url:
            raise UploadFailed("No URL returned")

        logger.info(f"Image uploaded: {url[:60]}")
        return url
