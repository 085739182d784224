"""
Tests for growing the dual grid with new tiles.

Tests cover:
- Slot allocation (first tile without a frame, then the first unlisted index)
- Saving the outgoing tile (once) before the new one is selected
- Capacity refusal without any state change
"""

import asyncio

from conftest import draw_square
from DG_Libs.DualGridLib.dual_grid_layout import DualGridLayout, default_tile_descriptor
from DG_Libs.DualGridLib.selection_orchestrator import SelectionOrchestrator
from DG_Libs.EditingContextLib.editing_context import LiveLayer
from DG_Libs.ImageEditingLib.raster_ops import create_blank_raster, raster_has_content
from DG_Libs.TileStateLib import layer_ledger
from DG_Libs.TileStateLib.layer_ledger import next_layer_id
from DG_Libs.constants import EVENT_NOTIFY, NOTIFY_ERROR, NOTIFY_SUCCESS


def add_tile(orchestrator):
    return asyncio.run(orchestrator.add_tile())


def select(orchestrator, tile_index):
    return asyncio.run(orchestrator.select_tile(tile_index))


class TestAddTile:

    def test_first_tile_goes_to_first_empty_slot(self, orchestrator, collaborators):
        notifications = []
        collaborators.register(EVENT_NOTIFY, lambda level, message: notifications.append((level, message)))

        new_index = add_tile(orchestrator)

        assert new_index == 0
        assert orchestrator.active_index == 0
        assert orchestrator.registry.has_frame(0)
        assert notifications == [(NOTIFY_SUCCESS, "Created new tile instance at position 0")]

    def test_tiles_fill_in_order(self, orchestrator):
        assert [add_tile(orchestrator) for _ in range(3)] == [0, 1, 2]
        assert orchestrator.active_index == 2

    def test_skips_tiles_already_shown(self, orchestrator):
        select(orchestrator, 0)
        select(orchestrator, 1)

        assert add_tile(orchestrator) == 2

    def test_outgoing_tile_is_saved(self, orchestrator, context):
        select(orchestrator, 5)
        draw_square(context.surfaces.main)

        new_index = add_tile(orchestrator)

        assert new_index == 0
        assert not raster_has_content(context.surfaces.main)
        select(orchestrator, 5)
        assert context.surfaces.main.getpixel((0, 0)) == (255, 0, 0, 255)

    def test_outgoing_layers_encoded_once(self, orchestrator, context, monkeypatch):
        select(orchestrator, 5)
        context.layers.append(
            LiveLayer(id=next_layer_id(), name="Layer 2", raster=create_blank_raster(context.canvas_size))
        )
        encoded = []
        real_encode = layer_ledger.encode_raster_payload

        def counting_encode(raster):
            encoded.append(raster)
            return real_encode(raster)

        monkeypatch.setattr(layer_ledger, "encode_raster_payload", counting_encode)

        assert add_tile(orchestrator) == 0
        assert len(encoded) == 2
        assert len(orchestrator.registry.get_layer_descriptors(5)) == 2

    def test_new_tile_is_blank(self, orchestrator, context):
        new_index = add_tile(orchestrator)

        assert new_index == 0
        assert len(context.layers) == 1
        assert not raster_has_content(context.surfaces.main)
        assert context.tool_state.current_tool == "pencil"

    def test_unlisted_index_extends_layout(self, context, registry):
        layout = DualGridLayout(tiles=[default_tile_descriptor(0), default_tile_descriptor(1)])
        orchestrator = SelectionOrchestrator(context, registry, layout=layout)
        select(orchestrator, 0)
        select(orchestrator, 1)

        new_index = add_tile(orchestrator)

        assert new_index == 2
        assert layout.indices() == [0, 1, 2]
        assert orchestrator.get_selected_tile_descriptor().name == "tile_2"


class TestTileCapacity:

    def test_full_grid_refuses_new_tile(self, orchestrator, context, collaborators):
        for tile_index in range(16):
            select(orchestrator, tile_index)
        draw_square(context.surfaces.main)
        notifications = []
        collaborators.register(EVENT_NOTIFY, lambda level, message: notifications.append((level, message)))

        new_index = add_tile(orchestrator)

        assert new_index is None
        assert len(orchestrator.get_all_records()) == 16
        assert orchestrator.active_index == 15
        assert orchestrator.is_idle
        assert context.surfaces.main.getpixel((0, 0)) == (255, 0, 0, 255)
        assert notifications == [(NOTIFY_ERROR, "Maximum 16 tiles reached. Cannot create more.")]

    def test_add_until_full(self, orchestrator):
        created = [add_tile(orchestrator) for _ in range(16)]

        assert created == list(range(16))
        assert add_tile(orchestrator) is None
