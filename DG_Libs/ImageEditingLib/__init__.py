"""
ImageEditingLib - Raster buffer primitives

This module provides the pixel buffer helpers shared by the tile state
records and the editing context.
"""

from DG_Libs.ImageEditingLib.image_models import RgbaColor, Raster, is_hex_color, hex_to_rgba
from DG_Libs.ImageEditingLib.raster_ops import (
    create_blank_raster,
    clear_raster,
    copy_raster_into,
    raster_has_content,
    rasters_equal,
    encode_raster_payload,
    decode_raster_payload,
)

__all__ = [
    "RgbaColor",
    "Raster",
    "is_hex_color",
    "hex_to_rgba",
    "create_blank_raster",
    "clear_raster",
    "copy_raster_into",
    "raster_has_content",
    "rasters_equal",
    "encode_raster_payload",
    "decode_raster_payload",
]
