"""
Tests for the tile state registry.

Tests cover:
- Initialization of sixteen default records
- Index validation
- Copy-on-read isolation
- Explicit save methods and reset
"""

import unittest

from DG_Libs.EditingContextLib.editing_context import EditingContext, ToolState
from DG_Libs.ImageEditingLib.raster_ops import create_blank_raster, raster_has_content
from DG_Libs.TileStateLib.tile_registry import TileStateRegistry
from DG_Libs.errors import TileNotFoundError
from DG_Libs.constants import MAIN_SURFACE_KEY, DEFAULT_LAYER_NAME

SIZE = 16


class TestRegistryInitialization(unittest.TestCase):

    def test_uninitialized(self):
        registry = TileStateRegistry(canvas_size=SIZE)

        self.assertFalse(registry.is_initialized)
        self.assertEqual(len(registry), 0)
        self.assertIsNone(registry.get(0))

    def test_initialize_creates_defaults(self):
        registry = TileStateRegistry(canvas_size=SIZE)
        registry.initialize()

        self.assertEqual(len(registry), 16)
        self.assertEqual(registry.indices(), list(range(16)))
        for record in registry.get_all():
            self.assertFalse(record.saved)
            self.assertFalse(record.raster.has_content())
            self.assertEqual(len(record.layers), 1)
            self.assertEqual(record.layers[0].name, DEFAULT_LAYER_NAME)
            self.assertEqual(record.tool_overlay.current_tool, "pencil")
            self.assertFalse(any(record.tool_overlay.overlay_map.values()))

    def test_tile_count_bounds(self):
        with self.assertRaises(ValueError):
            TileStateRegistry(canvas_size=SIZE, tile_count=0)
        with self.assertRaises(ValueError):
            TileStateRegistry(canvas_size=SIZE, tile_count=17)


class TestRegistryAccess(unittest.TestCase):

    def setUp(self):
        self.registry = TileStateRegistry(canvas_size=SIZE)
        self.registry.initialize()
        self.context = EditingContext.create(SIZE)

    def test_invalid_indices(self):
        for index in (-1, 16, 2.0, "3", None, True):
            self.assertFalse(self.registry.is_valid_index(index))
            self.assertIsNone(self.registry.get(index))

    def test_require_raises(self):
        with self.assertRaises(TileNotFoundError) as caught:
            self.registry.require(16)

        self.assertIsInstance(caught.exception, KeyError)
        self.assertEqual(caught.exception.tile_index, 16)
        self.assertIn("0-15", str(caught.exception))

    def test_save_on_invalid_index_raises(self):
        with self.assertRaises(TileNotFoundError):
            self.registry.save_raster(20, self.context.surfaces)

    def test_get_returns_copy(self):
        record = self.registry.get(3)
        record.raster.load(MAIN_SURFACE_KEY, self._filled())
        record.saved = True

        stored = self.registry.get(3)

        self.assertFalse(stored.raster.has_content())
        self.assertFalse(stored.saved)

    def test_save_raster(self):
        self.context.surfaces.main.putpixel((1, 1), (255, 0, 0, 255))

        copied = self.registry.save_raster(2, self.context.surfaces)
        self.context.surfaces.clear_all()

        self.assertEqual(copied, 9)
        self.assertTrue(self.registry.get(2).raster.has_content(MAIN_SURFACE_KEY))
        self.assertFalse(self.registry.get(3).raster.has_content())

    def test_save_layers(self):
        count = self.registry.save_layers(5, self.context.layers)

        descriptors = self.registry.get_layer_descriptors(5)
        self.assertEqual(count, 1)
        self.assertEqual(len(descriptors), 1)
        self.assertIsNotNone(descriptors[0].pixel_payload)
        self.assertTrue(self.registry.get(5).saved)
        self.assertIsNone(self.registry.get_layer_descriptors(99))

    def test_save_tool_overlay(self):
        tool_state = ToolState(current_tool="eraser", brush_size=4)

        self.registry.save_tool_overlay(7, tool_state, {"top-right": True})
        tool_state.brush_size = 9

        snapshot = self.registry.get_tool_overlay(7)
        self.assertEqual(snapshot.current_tool, "eraser")
        self.assertEqual(snapshot.brush_size, 4)
        self.assertTrue(snapshot.overlay_map["top-right"])

    def test_save_frame(self):
        frame = self._filled()

        self.assertFalse(self.registry.has_frame(0))
        self.registry.save_frame(0, frame)
        frame.putpixel((0, 0), (0, 0, 0, 0))

        self.assertTrue(self.registry.has_frame(0))
        self.assertEqual(self.registry.get(0).frame.getpixel((0, 0)), (1, 2, 3, 255))

    def test_reset(self):
        self.registry.save_raster(1, self._drawn_surfaces())
        self.registry.save_frame(1, self._filled())

        self.registry.reset(1)

        record = self.registry.get(1)
        self.assertFalse(record.raster.has_content())
        self.assertFalse(record.has_frame)
        self.assertEqual(len(self.registry), 16)

    def test_record_to_dict(self):
        data = self.registry.get(0).to_dict()
        self.assertEqual(data["index"], 0)
        self.assertEqual(len(data["layers"]), 1)
        self.assertFalse(data["saved"])
        self.assertFalse(data["has_frame"])
        self.assertNotIn("surfaces", data)

        with_surfaces = self.registry.get(0).to_dict(include_surfaces=True)
        self.assertEqual(set(with_surfaces["surfaces"]), set(self.registry.get(0).raster.keys()))

    def _drawn_surfaces(self):
        self.context.surfaces.main.putpixel((0, 0), (9, 9, 9, 255))
        return self.context.surfaces

    @staticmethod
    def _filled():
        raster = create_blank_raster(SIZE)
        raster.paste((1, 2, 3, 255), (0, 0, SIZE, SIZE))
        return raster


if __name__ == "__main__":
    unittest.main()
