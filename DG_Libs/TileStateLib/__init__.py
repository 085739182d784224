"""
TileStateLib - Per-tile state snapshots

This module stores each tile's surfaces, layers and tool settings so that the
one shared editing context can act as sixteen independent documents.
"""

from DG_Libs.TileStateLib.surface_mapping import (
    position_to_surface,
    surface_to_position,
    preview_surface_key,
    surface_grid_cell,
    default_overlay_map,
    normalize_overlay_map,
    overlay_surface_states,
)
from DG_Libs.TileStateLib.raster_snapshot import RasterSnapshot
from DG_Libs.TileStateLib.layer_ledger import (
    LayerDescriptor,
    next_layer_id,
    default_layer_descriptor,
    describe_live_layer,
    describe_live_layers,
    save_layers,
    restore_layer_descriptors,
    restore_layers,
)
from DG_Libs.TileStateLib.tool_overlay import ToolOverlaySnapshot
from DG_Libs.TileStateLib.tile_state import TileStateRecord
from DG_Libs.TileStateLib.tile_registry import TileStateRegistry

__all__ = [
    "position_to_surface",
    "surface_to_position",
    "preview_surface_key",
    "surface_grid_cell",
    "default_overlay_map",
    "normalize_overlay_map",
    "overlay_surface_states",
    "RasterSnapshot",
    "LayerDescriptor",
    "next_layer_id",
    "default_layer_descriptor",
    "describe_live_layer",
    "describe_live_layers",
    "save_layers",
    "restore_layer_descriptors",
    "restore_layers",
    "ToolOverlaySnapshot",
    "TileStateRecord",
    "TileStateRegistry",
]
