"""
Tile selection orchestrator.

Turns the single shared editing context into sixteen independent tile
documents. Selecting a tile runs a fixed protocol:

    IDLE -> SAVING -> CLEARING -> RESTORING -> SYNCING -> IDLE

1. SAVING: the outgoing tile's surfaces, layers and tool/overlay state are
   copied into its record.
2. CLEARING: every shared surface is blanked before anything of the incoming
   tile is shown.
3. RESTORING: the incoming tile's layers are decoded (the only suspension
   point) and, once every decode has settled, the layers, surfaces, tool
   settings and overlay map are written into the context.
   If the restore is interrupted, the outgoing tile is put back.
4. SYNCING: collaborators (tool panel, overlay renderer, layer panel,
   previews, grid thumbnail) are notified.

Switches are serialized: a selection requested while another is in flight
waits for it to finish, so two restores never write into the same buffers.

Classes:
    SwitchPhase: State machine phases
    SelectionOrchestrator: The tile switching entry point

Example:
    >>> orchestrator = SelectionOrchestrator(context, registry)
    >>> asyncio.run(orchestrator.select_tile(3))
    True
"""

import asyncio
import logging
from concurrent.futures import Executor
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional

from DG_Libs.config import EngineConfig
from DG_Libs.EditingContextLib.collaborators import CollaboratorRegistry
from DG_Libs.EditingContextLib.editing_context import EditingContext
from DG_Libs.ImageEditingLib.raster_ops import decode_raster_payload
from DG_Libs.TileStateLib.layer_ledger import (
    PayloadDecoder,
    restore_layers,
)
from DG_Libs.TileStateLib.surface_mapping import normalize_overlay_map, overlay_surface_states
from DG_Libs.TileStateLib.tile_registry import TileStateRegistry
from DG_Libs.TileStateLib.tile_state import TileStateRecord
from DG_Libs.DualGridLib.dual_grid_layout import (
    DualGridLayout,
    TileDescriptor,
    default_dual_grid_layout,
    default_tile_descriptor,
    load_dual_grid_layout,
)
from DG_Libs.errors import TileCapacityError, TileNotFoundError
from DG_Libs.constants import (
    DEFAULT_DECODE_TIMEOUT,
    MAIN_SURFACE_KEY,
    EVENT_PHASE_CHANGED,
    EVENT_SELECTION_CHANGED,
    EVENT_LOADING,
    EVENT_LAYERS_CHANGED,
    EVENT_PREVIEWS_CHANGED,
    EVENT_TOOL_CHANGED,
    EVENT_OVERLAY_CHANGED,
    EVENT_FRAME_CAPTURED,
    EVENT_NOTIFY,
    NOTIFY_SUCCESS,
    NOTIFY_WARNING,
    NOTIFY_ERROR,
)

logger = logging.getLogger(__name__)


class SwitchPhase(Enum):
    IDLE = "idle"
    SAVING = "saving"
    CLEARING = "clearing"
    RESTORING = "restoring"
    SYNCING = "syncing"


class SelectionOrchestrator:
    """
    Sole writer of the shared editing context during tile switches.

    Attributes:
        context: The shared editing context
        registry: Stored state of every tile
        layout: Dual grid layout (tile names and seed overlay maps)
        collaborators: Optional UI listeners
        active_index: Currently materialized tile, None before the first selection
        phase: Current state machine phase
    """

    def __init__(
        self,
        context: EditingContext,
        registry: TileStateRegistry,
        layout: Optional[DualGridLayout] = None,
        collaborators: Optional[CollaboratorRegistry] = None,
        decode_timeout: Optional[float] = DEFAULT_DECODE_TIMEOUT,
        decoder: PayloadDecoder = decode_raster_payload,
        executor: Optional[Executor] = None,
    ):
        if context.canvas_size != registry.canvas_size:
            raise ValueError(
                f"Context canvas size {context.canvas_size} does not match "
                f"registry canvas size {registry.canvas_size}"
            )

        if not registry.is_initialized:
            registry.initialize()

        self.context = context
        self.registry = registry
        self.layout = layout if layout is not None else default_dual_grid_layout(registry.tile_count)
        self.collaborators = collaborators if collaborators is not None else CollaboratorRegistry()
        self.decode_timeout = decode_timeout
        self.decoder = decoder
        self.executor = executor

        self.active_index: Optional[int] = None
        self.phase = SwitchPhase.IDLE
        self._switch_lock: Optional[asyncio.Lock] = None
        self._switch_lock_loop: Optional[asyncio.AbstractEventLoop] = None

    @classmethod
    def from_config(
        cls,
        config: EngineConfig,
        base_dir: Optional[Path] = None,
        collaborators: Optional[CollaboratorRegistry] = None,
    ) -> "SelectionOrchestrator":
        """
        Build a context, registry, layout and orchestrator from engine settings.

        Args:
            config: Engine configuration
            base_dir: Directory the layout path is resolved against
            collaborators: Optional UI listeners

        Returns:
            Orchestrator with an initialized registry and no active tile
        """
        registry = TileStateRegistry(canvas_size=config.canvas_size, tile_count=config.tile_count)
        registry.initialize()

        if config.dual_grid_data_path:
            layout_path = Path(config.dual_grid_data_path)
            if base_dir is not None and not layout_path.is_absolute():
                layout_path = base_dir / layout_path
            layout = load_dual_grid_layout(layout_path, tile_count=config.tile_count)
        else:
            layout = default_dual_grid_layout(config.tile_count)

        return cls(
            context=EditingContext.create(config.canvas_size),
            registry=registry,
            layout=layout,
            collaborators=collaborators,
            decode_timeout=config.decode_timeout,
        )

    @property
    def is_idle(self) -> bool:
        return self.phase is SwitchPhase.IDLE

    def _set_phase(self, phase: SwitchPhase) -> None:
        self.phase = phase
        self.collaborators.emit(EVENT_PHASE_CHANGED, phase)

    def _get_switch_lock(self) -> asyncio.Lock:
        loop = asyncio.get_running_loop()
        if self._switch_lock is None or self._switch_lock_loop is not loop:
            self._switch_lock = asyncio.Lock()
            self._switch_lock_loop = loop
        return self._switch_lock

    def _notify(self, level: str, message: str) -> None:
        self.collaborators.emit(EVENT_NOTIFY, level, message)

    # ------------------------------------------------------------------
    # Read-only accessors
    # ------------------------------------------------------------------

    def get_active_record(self) -> Optional[TileStateRecord]:
        """Deep copy of the active tile's stored record, None if no tile is active."""
        if self.active_index is None:
            return None
        return self.registry.get(self.active_index)

    def get_all_records(self) -> List[TileStateRecord]:
        return self.registry.get_all()

    def get_selected_tile_descriptor(self) -> Optional[TileDescriptor]:
        if self.active_index is None:
            return None
        return self.layout.find(self.active_index)

    def get_layout(self) -> DualGridLayout:
        return self.layout

    # ------------------------------------------------------------------
    # Save
    # ------------------------------------------------------------------

    def save_current_tile_state(self) -> bool:
        """
        Persist the active tile's live state into its record.

        Returns:
            True if a tile was active and saved, False if no tile is active
        """
        if self.active_index is None:
            return False

        tile_index = self.active_index
        self.registry.save_raster(tile_index, self.context.surfaces)
        layer_count = self.registry.save_layers(tile_index, self.context.layers)
        self.registry.save_tool_overlay(tile_index, self.context.tool_state, self.context.overlay_map)

        logger.debug(f"Saved canvas state for tile {tile_index} with {layer_count} layers")
        return True

    # ------------------------------------------------------------------
    # Select
    # ------------------------------------------------------------------

    async def select_tile(self, tile_index: int) -> bool:
        """
        Make a tile the active document.

        Args:
            tile_index: Tile to select

        Returns:
            True if the switch completed, False if the index was refused (the
            previously active tile then stays active and untouched)
        """
        async with self._get_switch_lock():
            return await self._select_tile(tile_index)

    async def _select_tile(self, tile_index: int) -> bool:
        if not self.registry.is_valid_index(tile_index):
            error = TileNotFoundError(tile_index, self.registry.tile_count)
            logger.warning(f"{error}; keeping tile {self.active_index} selected")
            self._notify(NOTIFY_WARNING, f"Tile {tile_index} does not exist")
            return False

        previous_index = self.active_index
        self.collaborators.emit(EVENT_LOADING, True)
        try:
            self._set_phase(SwitchPhase.SAVING)
            self.save_current_tile_state()
            record = self.registry.require(tile_index)

            self.active_index = tile_index
            self.collaborators.emit(EVENT_SELECTION_CHANGED, previous_index, tile_index)

            self._set_phase(SwitchPhase.CLEARING)
            self.context.surfaces.clear_all()

            self._set_phase(SwitchPhase.RESTORING)
            try:
                await self._restore_tile_state(record)
            except BaseException:
                self._rollback_selection(previous_index, tile_index)
                raise

            self._set_phase(SwitchPhase.SYNCING)
            self._sync_collaborators()
            self._capture_frame(tile_index)
        finally:
            self._set_phase(SwitchPhase.IDLE)
            self.collaborators.emit(EVENT_LOADING, False)

        logger.info(f"Selected tile {tile_index} (previous: {previous_index})")
        return True

    async def _restore_tile_state(self, record: TileStateRecord) -> None:
        """
        Materialize a record into the context.

        The context is only written after every layer decode has settled, so
        no half-restored layer sequence is ever visible.
        """
        live_layers = await restore_layers(
            record,
            decode_timeout=self.decode_timeout,
            decoder=self.decoder,
            executor=self.executor,
        )

        self.context.layers.replace(live_layers)
        record.raster.apply_to(self.context.surfaces)
        record.tool_overlay.apply_to(self.context.tool_state)
        self.context.overlay_map = self._overlay_map_for(record)

        logger.debug(f"Restored canvas state for tile {record.index}")

    def _rollback_selection(self, previous_index: Optional[int], failed_index: int) -> None:
        """
        Put the outgoing tile back after its replacement failed to restore.

        The live layers and tool state are only replaced once every decode has
        settled, so they still belong to the outgoing tile; its surfaces were
        cleared and are copied back from the record saved moments ago.
        """
        self.active_index = previous_index
        if previous_index is not None:
            self.registry.require(previous_index).raster.apply_to(self.context.surfaces)

        self.collaborators.emit(EVENT_SELECTION_CHANGED, failed_index, previous_index)
        logger.error(f"Restoring tile {failed_index} failed; tile {previous_index} stays selected")

    def _overlay_map_for(self, record: TileStateRecord) -> Dict[str, bool]:
        """Stored overlay map of a saved tile, else the layout's seed map."""
        if record.saved:
            return dict(record.tool_overlay.overlay_map)

        descriptor = self.layout.find(record.index)
        if descriptor is None:
            return dict(record.tool_overlay.overlay_map)
        return normalize_overlay_map(descriptor.maps)

    def _sync_collaborators(self) -> None:
        self.collaborators.emit(EVENT_TOOL_CHANGED, self.context.tool_state.copy())

        for surface_key, filled in overlay_surface_states(self.context.overlay_map):
            self.collaborators.emit(EVENT_OVERLAY_CHANGED, surface_key, filled)

        self.collaborators.emit(EVENT_LAYERS_CHANGED, self.context.layers)
        self.collaborators.emit(EVENT_PREVIEWS_CHANGED, self.context.surfaces)

    def _capture_frame(self, tile_index: int) -> None:
        """Store the main surface as the tile's thumbnail frame."""
        main_surface = self.context.surfaces.get(MAIN_SURFACE_KEY)
        if main_surface is None:
            logger.debug(f"No main surface attached, skipping frame capture for tile {tile_index}")
            return

        self.registry.save_frame(tile_index, main_surface)
        self.collaborators.emit(EVENT_FRAME_CAPTURED, tile_index, main_surface.copy())

    # ------------------------------------------------------------------
    # Growth
    # ------------------------------------------------------------------

    def _allocate_tile_slot(self) -> int:
        """
        Find the index a new tile goes to.

        The first listed tile without a captured frame is reused; otherwise the
        next index after the listed tiles is taken.

        Raises:
            TileCapacityError: If every slot up to the registry capacity is in use
        """
        for tile_index in sorted(self.layout.indices()):
            if self.registry.is_valid_index(tile_index) and not self.registry.has_frame(tile_index):
                return tile_index

        for tile_index in self.registry.indices():
            if self.layout.find(tile_index) is None:
                return tile_index

        raise TileCapacityError(self.registry.tile_count)

    async def add_tile(self) -> Optional[int]:
        """
        Create a new blank tile and select it.

        The outgoing tile is saved by the switch to the new tile.

        Returns:
            Index of the new active tile, or None if the dual grid is full
        """
        async with self._get_switch_lock():
            try:
                tile_index = self._allocate_tile_slot()
            except TileCapacityError as e:
                logger.warning(str(e))
                self._notify(NOTIFY_ERROR, str(e))
                return None

            self.registry.reset(tile_index)
            self.layout.put(default_tile_descriptor(tile_index))

            await self._select_tile(tile_index)

        logger.info(f"Created new tile instance at index {tile_index}")
        self._notify(NOTIFY_SUCCESS, f"Created new tile instance at position {tile_index}")
        return tile_index
