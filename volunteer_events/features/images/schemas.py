"""
Images feature: picker results and the uploaded-image descriptor.
"""

from enum import Enum

from pydantic import BaseModel


class ImageSource(str, Enum):
    LIBRARY = "library"
    CAMERA = "camera"


class PickedAsset(BaseModel):
    """One asset handed back by the photo picker or camera."""
    uri: str
    file_name: str | None = None
    base64: str | None = None     # only when the picker was asked for inline data


class PickerResult(BaseModel):
    canceled: bool = False
    assets: list[PickedAsset] = []


class ImageResource(BaseModel):
    """An image ready to be attached to an event draft."""
    uri: str                      # local, for preview
    url: str                      # remote, stored on the event
    file_name: str
    size_kb: float
