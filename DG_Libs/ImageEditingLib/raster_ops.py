"""
Low-level raster buffer operations for Dual Grid Studio.

Every surface and layer buffer is a square RGBA Pillow image. Operations that
take a target buffer mutate it in place, because collaborators hold references
to the live surfaces and must see the new pixels without re-binding.

Functions:
    create_blank_raster: Allocate a transparent buffer
    clear_raster: Blank a buffer in place
    copy_raster_into: Buffer-to-buffer pixel copy
    raster_has_content: Check a buffer for any non-transparent pixel
    rasters_equal: Pixel-exact comparison of two buffers
    encode_raster_payload: Serialize a buffer to a PNG data URL
    decode_raster_payload: Decode a PNG data URL into a new buffer
"""

import base64
import binascii
import io
from typing import Optional

import numpy as np
from PIL import Image, UnidentifiedImageError

from DG_Libs.ImageEditingLib.image_models import Raster
from DG_Libs.errors import PayloadDecodeError
from DG_Libs.constants import (
    RASTER_MODE,
    TRANSPARENT_PIXEL,
    PAYLOAD_FORMAT,
    PAYLOAD_PREFIX,
)


def create_blank_raster(size: int) -> Raster:
    """
    Allocate a fully transparent square buffer.

    Args:
        size: Width and height in pixels

    Returns:
        New RGBA image filled with transparent pixels
    """
    return Image.new(RASTER_MODE, (size, size), TRANSPARENT_PIXEL)


def clear_raster(raster: Raster) -> None:
    raster.paste(TRANSPARENT_PIXEL, (0, 0, raster.width, raster.height))


def copy_raster_into(source: Raster, target: Raster) -> None:
    """
    Replace the pixels of target with those of source.

    The copy is a straight replacement, not a composite: transparent source
    pixels clear the target. Sources of a different size are anchored at the
    origin and clipped or padded with transparency.

    Args:
        source: Buffer to read from (never modified)
        target: Buffer to overwrite in place
    """
    pixels = source if source.mode == RASTER_MODE else source.convert(RASTER_MODE)
    if pixels.size != target.size:
        pixels = pixels.crop((0, 0, target.width, target.height))

    target.paste(pixels, (0, 0))


def raster_has_content(raster: Optional[Raster]) -> bool:
    """Return True if any pixel of the buffer has non-zero alpha."""
    if raster is None:
        return False

    alpha = np.asarray(raster.convert(RASTER_MODE))[..., 3]
    return bool(alpha.any())


def rasters_equal(first: Raster, second: Raster) -> bool:
    if first.size != second.size:
        return False

    return bool(np.array_equal(
        np.asarray(first.convert(RASTER_MODE)),
        np.asarray(second.convert(RASTER_MODE)),
    ))


def encode_raster_payload(raster: Raster) -> str:
    """
    Serialize a buffer into a self-contained PNG data URL.

    The returned string shares no memory with the buffer, so later drawing on
    the buffer never changes the payload.

    Args:
        raster: Buffer to encode

    Returns:
        String of the form 'data:image/png;base64,...'
    """
    stream = io.BytesIO()
    raster.convert(RASTER_MODE).save(stream, format=PAYLOAD_FORMAT)
    return PAYLOAD_PREFIX + base64.b64encode(stream.getvalue()).decode("ascii")


def decode_raster_payload(payload: str, size: int) -> Raster:
    """
    Decode a PNG data URL into a freshly allocated buffer.

    Args:
        payload: Data URL produced by encode_raster_payload
        size: Width and height of the buffer to allocate

    Returns:
        New RGBA buffer of the requested size holding the decoded pixels

    Raises:
        PayloadDecodeError: If the payload is not a decodable image data URL
    """
    if not isinstance(payload, str) or not payload.startswith("data:"):
        raise PayloadDecodeError(f"Payload is not a data URL: {str(payload)[:32]!r}")

    header, separator, encoded = payload.partition(",")
    if not separator or not header.endswith(";base64"):
        raise PayloadDecodeError(f"Payload is not base64 encoded: {header[:32]!r}")

    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise PayloadDecodeError(f"Invalid base64 payload: {e}") from e

    try:
        with Image.open(io.BytesIO(data)) as decoded:
            decoded.load()
            pixels = decoded.convert(RASTER_MODE)
    except Image.DecompressionBombError as e:
        raise PayloadDecodeError(f"Image payload too large: {e}") from e
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise PayloadDecodeError(f"Undecodable image payload: {e}") from e

    raster = create_blank_raster(size)
    copy_raster_into(pixels, raster)
    return raster
