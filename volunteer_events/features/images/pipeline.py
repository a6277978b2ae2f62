"""
Images feature: turn a picked or captured photo into an uploaded ImageResource.

STAGES (each can abort the run):
  1. Permissions   camera + photo library, both required   → PermissionDenied
  2. Acquisition   library pick or camera capture           → None on cancel
  3. Metadata      file name + size in KB
  4. Encoding      inline base64, else read from storage    → EncodingFailed
  5. Upload        image host returns data.url              → UploadFailed

One asset per run. Callers must not start a second run while one is in flight.
"""

import logging
import re

from volunteer_events.core.exceptions import EncodingFailed, PermissionDenied
from volunteer_events.features.images.device import FileAccess, ImagePicker
from volunteer_events.features.images.image_host import ImageHost
from volunteer_events.features.images.schemas import (
    ImageResource,
    ImageSource,
    PickedAsset,
)

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "selected_image.jpg"


def file_name_from_uri(uri: str) -> str:
    """Last path segment of the URI, or the default name."""
    segment = re.split(r"[\\/]", uri or "")[-1]
    return segment or DEFAULT_FILE_NAME


def strip_data_uri_prefix(payload: str) -> str:
    """Cut everything up to the first comma: "data:image/jpeg;base64,AAAA" -> "AAAA"."""
    if "," in payload:
        return payload.split(",", 1)[1]
    return payload


def bytes_to_kb(size: int | None) -> float:
    if not size:
        return 0
    return round(size / 1024, 2)


class ImageIngestionPipeline:
    """Runs stages 1–5 for a single image."""

    def __init__(self, picker: ImagePicker, files: FileAccess, host: ImageHost):
        self.picker = picker
        self.files = files
        self.host = host

    async def ingest(self, source: ImageSource) -> ImageResource | None:
        """Pick/capture one image and upload it.

        Returns:
            The uploaded ImageResource, or None if the user cancelled.

        Raises:
            PermissionDenied, EncodingFailed, UploadFailed
        """
        await self.ensure_permissions()

        asset = await self._acquire(source)
        if asset is None:
            logger.info(f"Image {source.value} selection cancelled")
            return None

        return await self.process(asset)

    async def ensure_permissions(self) -> None:
        """Ask for both permissions up front; either refusal aborts."""
        camera = await self.picker.request_camera_permission()
        library = await self.picker.request_library_permission()
        refused = [
            name for name, granted in (("camera", camera), ("library", library))
            if not granted
        ]
        if refused:
            raise PermissionDenied(refused)

    async def _acquire(self, source: ImageSource) -> PickedAsset | None:
        if source == ImageSource.CAMERA:
            result = await self.picker.capture_photo()
        else:
            result = await self.picker.pick_from_library()
        if result.canceled or not result.assets:
            return None
        return result.assets[0]

    async def process(self, asset: PickedAsset) -> ImageResource:
        """Stages 3–5 for an already acquired asset."""
        file_name = asset.file_name or file_name_from_uri(asset.uri)
        size_kb = await self._size_kb(asset.uri)
        payload = await self.encode(asset)

        url = await self.host.upload(payload)
        logger.info(f"Ingested {file_name} ({size_kb} KB)")
        return ImageResource(uri=asset.uri, url=url, file_name=file_name, size_kb=size_kb)

    async def _size_kb(self, uri: str) -> float:
        try:
            size = await self.files.get_size(uri)
        except OSError as e:
            logger.warning(f"Could not stat {uri}, reporting size 0: {e}")
            return 0
        return bytes_to_kb(size)

    async def encode(self, asset: PickedAsset) -> str:
        """Base64 content for the asset, preferring what the picker attached."""
        if asset.base64:
            inline = strip_data_uri_prefix(asset.base64)
            if inline:
                return inline

        try:
            payload = await self.files.read_base64(asset.uri)
        except OSError as e:
            raise EncodingFailed(asset.uri, str(e)) from e

        if not payload:
            raise EncodingFailed(asset.uri)
        return payload
