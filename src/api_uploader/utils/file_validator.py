"""
Validation of multipart file parts before anything touches disk or storage.

Each upload endpoint has an `UploadPolicy` naming the form field it reads, the
largest file it accepts and the media types it allows. `validate_upload` checks
a parsed form against a policy and either returns the file part or raises a
`BadRequestError` subclass naming the constraint that failed.

The body size is gated before the form is parsed: `check_content_length`
rejects a declared length past the policy, and `limit_request_body` cuts off a
body that grows past it while streaming. Parsing never reads much past the
limit, so an oversized file is not spooled to disk in full.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from starlette.datastructures import FormData, Headers, UploadFile
from starlette.requests import Request
from starlette.types import Message

from api_uploader.config.base_config import BaseConfig
from api_uploader.exceptions.exceptions import (
    BadRequestError,
    FileTooLargeError,
    MissingFileError,
    UnsupportedFileTypeError,
)

logger = logging.getLogger(__name__)


VIDEO_MEDIA_TYPES = frozenset({"video/mp4"})
THUMBNAIL_MEDIA_TYPES = frozenset({"image/jpeg", "image/png"})

# Room for the multipart boundary, part headers and any small fields
MULTIPART_OVERHEAD_BYTES = 64 * 1024


@dataclass(frozen=True)
class UploadPolicy:
    field_name: str
    label: str
    max_bytes: int
    allowed_media_types: frozenset


def video_policy(config: BaseConfig) -> UploadPolicy:
    return UploadPolicy(
        field_name="video",
        label="Video",
        max_bytes=config.MAX_VIDEO_UPLOAD_BYTES,
        allowed_media_types=VIDEO_MEDIA_TYPES,
    )


def thumbnail_policy(config: BaseConfig) -> UploadPolicy:
    return UploadPolicy(
        field_name="thumbnail",
        label="Thumbnail",
        max_bytes=config.MAX_THUMBNAIL_UPLOAD_BYTES,
        allowed_media_types=THUMBNAIL_MEDIA_TYPES,
    )


def format_file_size(size_bytes: int) -> str:
    size = float(size_bytes)
    for unit in ("B", "KB", "MB", "GB"):
        if size < 1024 or unit == "GB":
            return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
        size /= 1024
    return f"{size_bytes} B"


def normalize_media_type(content_type: Optional[str]) -> str:
    """`Video/MP4; codecs=avc1` -> `video/mp4`"""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def get_upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    # Size wasn't recorded while parsing, measure the spooled file
    position = upload.file.tell()
    upload.file.seek(0, os.SEEK_END)
    size = upload.file.tell()
    upload.file.seek(position)
    return size


def validate_upload(form: FormData, policy: UploadPolicy) -> UploadFile:
    upload = form.get(policy.field_name)
    if not isinstance(upload, UploadFile):
        raise MissingFileError(f"Invalid {policy.label.lower()} file")

    size = get_upload_size(upload)
    if size > policy.max_bytes:
        logger.warning(
            f"{policy.label} file too large. Max size: {format_file_size(policy.max_bytes)}, "
            f"actual size: {format_file_size(size)}"
        )
        raise FileTooLargeError(f"{policy.label} file too large")

    media_type = normalize_media_type(upload.content_type)
    if media_type not in policy.allowed_media_types:
        raise UnsupportedFileTypeError(f"Invalid {policy.label.lower()} file type")

    return upload


def body_limit(policy: UploadPolicy) -> int:
    return policy.max_bytes + MULTIPART_OVERHEAD_BYTES


def _too_large(policy: UploadPolicy, size: int) -> FileTooLargeError:
    logger.warning(
        f"{policy.label} upload body too large. Max size: {format_file_size(policy.max_bytes)}, "
        f"received at least: {format_file_size(size)}"
    )
    return FileTooLargeError(f"{policy.label} file too large")


def check_content_length(headers: Headers, policy: UploadPolicy) -> None:
    declared = headers.get("content-length")
    if declared is None:
        return
    try:
        length = int(declared)
    except ValueError:
        raise BadRequestError("Invalid Content-Length header")
    if length > body_limit(policy):
        raise _too_large(policy, length)


def limit_request_body(request: Request, policy: UploadPolicy) -> Request:
    """
    Wrap `request` so reading its body raises `FileTooLargeError` as soon as
    more than `body_limit(policy)` bytes have arrived. Covers chunked uploads
    that carry no Content-Length.
    """
    limit = body_limit(policy)
    received = 0

    async def receive() -> Message:
        nonlocal received
        message = await request.receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > limit:
                raise _too_large(policy, received)
        return message

    return Request(request.scope, receive)
