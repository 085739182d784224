"""
DualGridLib - Dual grid layout and tile selection

This module loads the dual grid layout document and drives the
save/clear/restore/sync protocol that switches the editor between tiles.
"""

from DG_Libs.DualGridLib.dual_grid_layout import (
    TileDescriptor,
    DualGridLayout,
    tile_position_label,
    default_tile_descriptor,
    default_dual_grid_layout,
    load_dual_grid_layout,
    save_dual_grid_layout,
)
from DG_Libs.DualGridLib.selection_orchestrator import SwitchPhase, SelectionOrchestrator

__all__ = [
    "TileDescriptor",
    "DualGridLayout",
    "tile_position_label",
    "default_tile_descriptor",
    "default_dual_grid_layout",
    "load_dual_grid_layout",
    "save_dual_grid_layout",
    "SwitchPhase",
    "SelectionOrchestrator",
]
