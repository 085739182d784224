"""
Tile state registry.

Owns one TileStateRecord per tile for the whole session. Records are created
by initialize() and are never created or deleted afterwards. Reads hand out
deep copies and writes go through explicit save methods, so no caller ever
holds a mutable reference to a stored record.

Classes:
    TileStateRegistry: Mapping of tile index -> TileStateRecord

Example:
    >>> registry = TileStateRegistry(canvas_size=64)
    >>> registry.initialize()
    >>> registry.save_raster(3, context.surfaces)
    >>> registry.get(3).raster.has_content("editor-canvas")
    True
    >>> registry.get(16) is None
    True
"""

import logging
from typing import Dict, Iterable, List, Optional

from DG_Libs.EditingContextLib.editing_context import LiveLayer, SurfaceSet, ToolState
from DG_Libs.ImageEditingLib.image_models import Raster
from DG_Libs.TileStateLib.layer_ledger import LayerDescriptor, save_layers
from DG_Libs.TileStateLib.tile_state import TileStateRecord
from DG_Libs.TileStateLib.tool_overlay import ToolOverlaySnapshot
from DG_Libs.errors import TileNotFoundError
from DG_Libs.constants import DEFAULT_CANVAS_SIZE, MAX_TILE_COUNT

logger = logging.getLogger(__name__)


class TileStateRegistry:
    """
    Lifecycle owner of every tile's stored state.

    Attributes:
        canvas_size: Size of every buffer in every record
        tile_count: Number of records created by initialize()
    """

    def __init__(self, canvas_size: int = DEFAULT_CANVAS_SIZE, tile_count: int = MAX_TILE_COUNT):
        if not (1 <= tile_count <= MAX_TILE_COUNT):
            raise ValueError(f"tile_count must be 1-{MAX_TILE_COUNT}, got {tile_count}")

        self.canvas_size = int(canvas_size)
        self.tile_count = int(tile_count)
        self._records: Dict[int, TileStateRecord] = {}

    def initialize(self) -> None:
        """Create a fresh default record for every tile index."""
        self._records = {
            index: TileStateRecord.create_default(index, self.canvas_size)
            for index in range(self.tile_count)
        }
        logger.info(f"Initialized tile state storage for {self.tile_count} tiles")

    @property
    def is_initialized(self) -> bool:
        return bool(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, tile_index: object) -> bool:
        return self.is_valid_index(tile_index)

    def indices(self) -> List[int]:
        return sorted(self._records)

    def is_valid_index(self, tile_index: object) -> bool:
        if isinstance(tile_index, bool) or not isinstance(tile_index, int):
            return False
        return tile_index in self._records

    def _record(self, tile_index: int) -> TileStateRecord:
        if not self.is_valid_index(tile_index):
            raise TileNotFoundError(tile_index, self.tile_count)
        return self._records[tile_index]

    def get(self, tile_index: int) -> Optional[TileStateRecord]:
        """
        Get a deep copy of a tile's record.

        Args:
            tile_index: Tile index

        Returns:
            Copy of the record, or None for an unknown index
        """
        if not self.is_valid_index(tile_index):
            return None
        return self._records[tile_index].copy()

    def require(self, tile_index: int) -> TileStateRecord:
        """
        Get a deep copy of a tile's record.

        Raises:
            TileNotFoundError: If the index has no record
        """
        return self._record(tile_index).copy()

    def get_all(self) -> List[TileStateRecord]:
        return [self._records[index].copy() for index in self.indices()]

    def save_raster(self, tile_index: int, surfaces: SurfaceSet) -> int:
        """
        Copy live surface pixels into a tile's raster snapshot.

        Returns:
            Number of surfaces copied
        """
        return self._record(tile_index).raster.capture(surfaces)

    def save_layers(self, tile_index: int, live_layers: Iterable[LiveLayer]) -> int:
        """
        Serialize live layers into a tile's layer ledger.

        Returns:
            Number of layers saved
        """
        return save_layers(self._record(tile_index), live_layers)

    def save_tool_overlay(self, tile_index: int, tool_state: ToolState, overlay_map: Dict[str, bool]) -> None:
        self._record(tile_index).tool_overlay = ToolOverlaySnapshot.capture(tool_state, overlay_map)

    def save_frame(self, tile_index: int, frame: Raster) -> None:
        """Store a copy of a captured frame as the tile's thumbnail source."""
        self._record(tile_index).frame = frame.copy()

    def get_layer_descriptors(self, tile_index: int) -> Optional[List[LayerDescriptor]]:
        if not self.is_valid_index(tile_index):
            return None
        return [descriptor.copy() for descriptor in self._records[tile_index].layers]

    def get_tool_overlay(self, tile_index: int) -> Optional[ToolOverlaySnapshot]:
        if not self.is_valid_index(tile_index):
            return None
        return self._records[tile_index].tool_overlay.copy()

    def has_frame(self, tile_index: int) -> bool:
        return self.is_valid_index(tile_index) and self._records[tile_index].has_frame

    def reset(self, tile_index: int) -> None:
        """Replace a tile's stored state with a fresh default record."""
        self._record(tile_index)
        self._records[tile_index] = TileStateRecord.create_default(tile_index, self.canvas_size)
        logger.debug(f"Reset tile state for tile {tile_index}")
