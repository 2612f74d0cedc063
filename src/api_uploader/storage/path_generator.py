import secrets
from enum import Enum


ASSET_NAME_BYTES = 32


class AspectRatio(str, Enum):
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"
    OTHER = "other"


def extension_for(media_type: str) -> str:
    """`video/mp4` -> `mp4`"""
    _, _, subtype = media_type.partition("/")
    if not subtype:
        raise ValueError(f"Media type has no subtype: {media_type!r}")
    return subtype


def generate_asset_name(media_type: str) -> str:
    """
    Random, URL-safe file name for a validated upload.

    The name never comes from the client's filename or the file contents, so two
    uploads of identical bytes land under different names.
    """
    token = secrets.token_urlsafe(ASSET_NAME_BYTES)
    return f"{token}.{extension_for(media_type)}"


def generate_video_object_key(aspect_ratio: AspectRatio, asset_name: str) -> str:
    return f"{AspectRatio(aspect_ratio).value}/{asset_name}"
