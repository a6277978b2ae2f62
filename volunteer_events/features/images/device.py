"""
Images feature: device capabilities the pipeline needs (picker + file access).

The picker is always provided by the host app. LocalFileAccess covers plain
file paths and file:// URIs.
"""

import asyncio
import base64
from pathlib import Path
from typing import Protocol
from urllib.parse import unquote, urlparse

from volunteer_events.features.images.schemas import PickerResult


class ImagePicker(Protocol):
    async def request_camera_permission(self) -> bool: ...

    async def request_library_permission(self) -> bool: ...

    async def pick_from_library(self) -> PickerResult: ...

    async def capture_photo(self) -> PickerResult: ...


class FileAccess(Protocol):
    async def get_size(self, uri: str) -> int | None: ...

    async def read_base64(self, uri: str) -> str: ...


def uri_to_path(uri: str) -> Path:
    parsed = urlparse(uri)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    return Path(uri)


class LocalFileAccess:
    """Reads assets from the local filesystem off the event loop."""

    async def get_size(self, uri: str) -> int | None:
        path = uri_to_path(uri)
        try:
            stat = await asyncio.to_thread(path.stat)
        except FileNotFoundError:
            return None
        return stat.st_size

    async def read_base64(self, uri: str) -> str:
        raw = await asyncio.to_thread(uri_to_path(uri).read_bytes)
        return base64.b64encode(raw).decode("ascii")
