"""
Pytest configuration and shared fixtures for Dual Grid Studio tests.

This module provides shared test fixtures and configuration
used across multiple test modules.
"""

import base64
import struct
import zlib

import pytest
from PIL import ImageDraw

from DG_Libs.DualGridLib.selection_orchestrator import SelectionOrchestrator
from DG_Libs.EditingContextLib.collaborators import CollaboratorRegistry
from DG_Libs.EditingContextLib.editing_context import EditingContext
from DG_Libs.TileStateLib.tile_registry import TileStateRegistry
from DG_Libs.constants import PAYLOAD_PREFIX

TEST_CANVAS_SIZE = 32


def draw_square(raster, origin=(0, 0), size=10, color=(255, 0, 0, 255)):
    """Fill a size x size square on a raster in place."""
    x, y = origin
    ImageDraw.Draw(raster).rectangle([x, y, x + size - 1, y + size - 1], fill=color)


def _png_chunk(kind, data):
    crc = zlib.crc32(kind + data) & 0xFFFFFFFF
    return struct.pack(">I", len(data)) + kind + data + struct.pack(">I", crc)


def oversized_png_payload(width=20000, height=20000):
    """
    Build a PNG data URL whose header claims a huge image.

    Pillow refuses to open it with DecompressionBombError.
    """
    header = struct.pack(">IIBBBBB", width, height, 8, 6, 0, 0, 0)
    png = (
        b"\x89PNG\r\n\x1a\n"
        + _png_chunk(b"IHDR", header)
        + _png_chunk(b"IDAT", zlib.compress(b"\x00"))
        + _png_chunk(b"IEND", b"")
    )
    return PAYLOAD_PREFIX + base64.b64encode(png).decode("ascii")


@pytest.fixture
def canvas_size():
    """Small canvas keeps PNG encoding in the tests fast."""
    return TEST_CANVAS_SIZE


@pytest.fixture
def context(canvas_size):
    return EditingContext.create(canvas_size)


@pytest.fixture
def registry(canvas_size):
    """
    Provide an initialized tile registry.

    Returns:
        TileStateRegistry with sixteen default records
    """
    tile_registry = TileStateRegistry(canvas_size=canvas_size)
    tile_registry.initialize()
    return tile_registry


@pytest.fixture
def collaborators():
    return CollaboratorRegistry()


@pytest.fixture
def orchestrator(context, registry, collaborators):
    """Orchestrator with no active tile and a default layout."""
    return SelectionOrchestrator(context, registry, collaborators=collaborators)


@pytest.fixture
def sample_rgba_colors():
    """
    Provide a list of sample RGBA color tuples for testing.

    Returns:
        List of (R, G, B, A) tuples with common test colors
    """
    return [
        (255, 0, 0, 255),    # Red
        (0, 255, 0, 255),    # Green
        (0, 0, 255, 255),    # Blue
        (255, 255, 255, 255),  # White
        (0, 0, 0, 255),      # Black
        (128, 128, 128, 128),  # Half-transparent gray
    ]
