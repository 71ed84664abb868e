"""
Decoding of submitted recipe photos.

Photos arrive as base64 data URLs, bare base64 strings or raw bytes. They
are decoded and their format is detected from the file signature, all in
parallel; one unreadable photo fails the whole batch.
"""
from __future__ import annotations

import base64
import binascii
import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from ..exceptions import ImagePreparationError

_LOGGER = logging.getLogger(__name__)

# File signatures of the image formats Gemini accepts
_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


@dataclass(frozen=True)
class PreparedImage:
    data: bytes
    mime_type: str


def sniff_mime_type(data: bytes) -> str | None:
    """Detect the image format from the leading bytes."""
    for signature, mime_type in _SIGNATURES:
        if data.startswith(signature):
            return mime_type
    if data[:4] == b"RIFF" and data[8:12] == b"WEBP":
        return "image/webp"
    if data[4:8] == b"ftyp" and data[8:12] in (b"heic", b"heix", b"mif1", b"msf1"):
        return "image/heic"
    return None


def prepare_image(index: int, image: str | bytes) -> PreparedImage:
    """Decode one photo.

    Args:
        index: Position of the photo in the submission
        image: Data URL, base64 string or raw bytes

    Returns:
        The decoded image with its MIME type

    Raises:
        ImagePreparationError: If the photo cannot be decoded or is not a
            supported image format
    """
    if isinstance(image, str):
        payload = image.strip()
        if payload.startswith("data:"):
            header, separator, payload = payload.partition(",")
            if not separator or ";base64" not in header:
                raise ImagePreparationError(index, "not a base64 data URL")
        payload = "".join(payload.split())
        try:
            data = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImagePreparationError(index, f"invalid base64 data ({e})") from e
    elif isinstance(image, (bytes, bytearray)):
        data = bytes(image)
    else:
        raise ImagePreparationError(
            index, f"unsupported value of type {type(image).__name__}")

    if not data:
        raise ImagePreparationError(index, "image is empty")

    mime_type = sniff_mime_type(data)
    if mime_type is None:
        raise ImagePreparationError(index, "unsupported image format")

    return PreparedImage(data=data, mime_type=mime_type)


def prepare_images(images: Sequence[str | bytes], max_workers: int = 4) -> list[PreparedImage]:
    """Decode all photos concurrently, keeping their order.

    Raises:
        ImagePreparationError: For the first photo (in submission order)
            that cannot be decoded
    """
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        futures = [
            executor.submit(prepare_image, index, image)
            for index, image in enumerate(images)
        ]
        prepared = [future.result() for future in futures]

    _LOGGER.debug("Prepared %d image(s): %s", len(prepared),
                  ", ".join(image.mime_type for image in prepared))
    return prepared
