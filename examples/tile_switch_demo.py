"""
Tile switching demonstration.

Draws on two tiles of the dual grid, switches between them, and shows that
each tile keeps its own pixels, layers and tool settings. Run this script
from the repository root:

    python examples/tile_switch_demo.py
"""

import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import asyncio
import logging

from PIL import ImageDraw

from DG_Libs.config import EngineConfig
from DG_Libs.DualGridLib.selection_orchestrator import SelectionOrchestrator
from DG_Libs.EditingContextLib.collaborators import CollaboratorRegistry
from DG_Libs.EditingContextLib.editing_context import LiveLayer
from DG_Libs.ImageEditingLib.raster_ops import create_blank_raster, raster_has_content
from DG_Libs.TileStateLib.layer_ledger import next_layer_id
from DG_Libs.constants import (
    EVENT_PHASE_CHANGED,
    EVENT_NOTIFY,
    TOOL_ERASER,
)

DATA_DIR = Path(__file__).parent.parent / "data"


def print_phase(phase):
    print(f"  phase -> {phase.value}")


def print_notification(level, message):
    print(f"  [{level}] {message}")


def describe_active_tile(orchestrator):
    context = orchestrator.context
    descriptor = orchestrator.get_selected_tile_descriptor()
    filled = [position for position, value in context.overlay_map.items() if value]
    print(f"Tile {orchestrator.active_index} ({descriptor.name if descriptor else '?'})")
    print(f"  layers: {[layer.name for layer in context.layers]}")
    print(f"  tool: {context.tool_state.current_tool}, color {context.tool_state.current_color}")
    print(f"  main surface has content: {raster_has_content(context.surfaces.main)}")
    print(f"  overlay edges: {', '.join(filled) or 'none'}")


async def run_demo():
    collaborators = CollaboratorRegistry()
    collaborators.register(EVENT_PHASE_CHANGED, print_phase)
    collaborators.register(EVENT_NOTIFY, print_notification)

    config = EngineConfig(canvas_size=128, dual_grid_data_path="4x4_dual_grid.json")
    orchestrator = SelectionOrchestrator.from_config(config, base_dir=DATA_DIR, collaborators=collaborators)
    context = orchestrator.context

    print("Selecting tile 3")
    await orchestrator.select_tile(3)
    ImageDraw.Draw(context.surfaces.main).rectangle([0, 0, 9, 9], fill=(255, 0, 0, 255))
    second_layer = LiveLayer(id=next_layer_id(), name="Outline", raster=create_blank_raster(128))
    ImageDraw.Draw(second_layer.raster).line([0, 0, 127, 127], fill=(0, 0, 0, 255))
    context.layers.append(second_layer)
    context.tool_state.current_tool = TOOL_ERASER
    describe_active_tile(orchestrator)

    print("\nSelecting tile 7")
    await orchestrator.select_tile(7)
    describe_active_tile(orchestrator)

    print("\nSelecting tile 3 again")
    await orchestrator.select_tile(3)
    describe_active_tile(orchestrator)

    print("\nSelecting tile 42")
    await orchestrator.select_tile(42)
    describe_active_tile(orchestrator)

    print("\nAdding a tile")
    new_index = await orchestrator.add_tile()
    print(f"  new tile index: {new_index}")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    asyncio.run(run_demo())


if __name__ == "__main__":
    main()
