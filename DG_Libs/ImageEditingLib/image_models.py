"""
Image data models for Dual Grid Studio.

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
    Raster: A Pillow image used as a pixel buffer
"""

import re
from typing import Tuple

from PIL import Image

RgbaColor = Tuple[int, int, int, int]
Raster = Image.Image

HEX_COLOR_PATTERN = re.compile(r"^#[0-9a-fA-F]{6}$")


def is_hex_color(value: str) -> bool:
    """Check for a '#rrggbb' color string."""
    return isinstance(value, str) and bool(HEX_COLOR_PATTERN.match(value))


def hex_to_rgba(value: str, alpha: int = 255) -> RgbaColor:
    """
    Convert a '#rrggbb' color string to an RGBA tuple.

    Raises:
        ValueError: If value is not a 6-digit hex color
    """
    if not is_hex_color(value):
        raise ValueError(f"Expected '#rrggbb' color, got {value!r}")

    return (int(value[1:3], 16), int(value[3:5], 16), int(value[5:7], 16), alpha)
