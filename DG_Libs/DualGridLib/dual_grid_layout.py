"""
Dual grid layout document.

The layout describes the tiles of the 4x4 dual grid: their names, grid
positions, neighbor flags and the eight-position overlay map used to preview
edge blending. It is a static JSON document; when it cannot be read a default
layout of sixteen blank tiles is synthesized.

The document schema:
- tilemap_type: "4x4_dual_grid"
- total_tiles: 16
- tiles: list of {index, position, name, overlaps, neighbors, maps}

Classes:
    TileDescriptor: One tile entry
    DualGridLayout: The tile entries plus document metadata

Functions:
    default_tile_descriptor: Blank entry for a tile index
    default_dual_grid_layout: Layout of blank entries
    load_dual_grid_layout: Load and normalize a layout document
    save_dual_grid_layout: Write a layout document
"""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from DG_Libs.TileStateLib.surface_mapping import default_overlay_map, normalize_overlay_map
from DG_Libs.constants import (
    DEFAULT_TILEMAP_TYPE,
    GRID_SIZE,
    MAX_TILE_COUNT,
    NEIGHBOR_POSITIONS,
    FIELD_TILEMAP_TYPE,
    FIELD_TOTAL_TILES,
    FIELD_TILES,
    FIELD_INDEX,
    FIELD_POSITION,
    FIELD_NAME,
    FIELD_OVERLAPS,
    FIELD_NEIGHBORS,
    FIELD_MAPS,
)

logger = logging.getLogger(__name__)


def tile_position_label(tile_index: int) -> str:
    """Grid position label for a tile index, e.g. 'row_1_col_2'."""
    return f"row_{tile_index // GRID_SIZE}_col_{tile_index % GRID_SIZE}"


def tile_name(tile_index: int) -> str:
    return f"tile_{tile_index}"


def _default_neighbors() -> Dict[str, bool]:
    return {position: False for position in NEIGHBOR_POSITIONS}


def _normalize_neighbors(data: Any) -> Dict[str, bool]:
    neighbors = _default_neighbors()
    if isinstance(data, dict):
        for position in NEIGHBOR_POSITIONS:
            if position in data:
                neighbors[position] = bool(data[position])
    return neighbors


@dataclass
class TileDescriptor:
    """Static description of one dual grid tile.

    Attributes:
        index: Tile index (0-15)
        name: Display name
        position: Grid position label
        overlaps: Overlap metadata, passed through untouched
        neighbors: Corner neighbor flags
        maps: Eight-position overlay map
    """
    index: int
    name: str
    position: str
    overlaps: List[Any] = field(default_factory=list)
    neighbors: Dict[str, bool] = field(default_factory=_default_neighbors)
    maps: Dict[str, bool] = field(default_factory=default_overlay_map)

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_INDEX: self.index,
            FIELD_POSITION: self.position,
            FIELD_NAME: self.name,
            FIELD_OVERLAPS: list(self.overlaps),
            FIELD_NEIGHBORS: dict(self.neighbors),
            FIELD_MAPS: dict(self.maps),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TileDescriptor":
        """
        Create from a document entry, filling missing fields with defaults.

        Raises:
            ValueError: If the entry has no valid tile index
        """
        raw_index = data.get(FIELD_INDEX)
        if isinstance(raw_index, bool):
            raise ValueError(f"Invalid tile index: {raw_index!r}")
        try:
            tile_index = int(raw_index)
        except (TypeError, ValueError):
            raise ValueError(f"Invalid tile index: {raw_index!r}") from None

        if not (0 <= tile_index < MAX_TILE_COUNT):
            raise ValueError(f"Tile index out of range: {tile_index}")

        overlaps = data.get(FIELD_OVERLAPS)
        return cls(
            index=tile_index,
            name=str(data.get(FIELD_NAME) or tile_name(tile_index)),
            position=str(data.get(FIELD_POSITION) or tile_position_label(tile_index)),
            overlaps=list(overlaps) if isinstance(overlaps, list) else [],
            neighbors=_normalize_neighbors(data.get(FIELD_NEIGHBORS)),
            maps=normalize_overlay_map(data.get(FIELD_MAPS)),
        )


def default_tile_descriptor(tile_index: int) -> TileDescriptor:
    return TileDescriptor(
        index=tile_index,
        name=tile_name(tile_index),
        position=tile_position_label(tile_index),
    )


class DualGridLayout:
    """
    Tile entries of a dual grid document.

    Entries are kept in document order; lookups go by tile index.
    """

    def __init__(
        self,
        tiles: Optional[List[TileDescriptor]] = None,
        tilemap_type: str = DEFAULT_TILEMAP_TYPE,
        total_tiles: int = MAX_TILE_COUNT,
    ):
        self.tiles: List[TileDescriptor] = list(tiles or [])
        self.tilemap_type = tilemap_type
        self.total_tiles = total_tiles

    @property
    def tile_count(self) -> int:
        return len(self.tiles)

    def find(self, tile_index: int) -> Optional[TileDescriptor]:
        for descriptor in self.tiles:
            if descriptor.index == tile_index:
                return descriptor
        return None

    def indices(self) -> List[int]:
        return [descriptor.index for descriptor in self.tiles]

    def put(self, descriptor: TileDescriptor) -> None:
        """Replace the entry with the same index, or append a new one."""
        for position, existing in enumerate(self.tiles):
            if existing.index == descriptor.index:
                self.tiles[position] = descriptor
                return
        self.tiles.append(descriptor)

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_TILEMAP_TYPE: self.tilemap_type,
            FIELD_TOTAL_TILES: self.total_tiles,
            FIELD_TILES: [descriptor.to_dict() for descriptor in self.tiles],
        }


def default_dual_grid_layout(tile_count: int = MAX_TILE_COUNT) -> DualGridLayout:
    return DualGridLayout(
        tiles=[default_tile_descriptor(index) for index in range(tile_count)],
        total_tiles=tile_count,
    )


def load_dual_grid_layout(layout_path: Path, tile_count: int = MAX_TILE_COUNT) -> DualGridLayout:
    """
    Load a dual grid layout document.

    Invalid tile entries and duplicate indices are skipped. A document that
    cannot be read, or that has no usable tiles, is replaced by the default
    layout.

    Args:
        layout_path: Path to the JSON document
        tile_count: Tile count of the default layout used as a fallback

    Returns:
        The loaded or synthesized layout
    """
    try:
        payload = json.loads(layout_path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError) as e:
        logger.error(f"Error loading dual grid data from {layout_path}: {e}")
        return default_dual_grid_layout(tile_count)

    if not isinstance(payload, dict) or not isinstance(payload.get(FIELD_TILES), list):
        logger.error(f"Dual grid data in {layout_path} has no tile list, using default layout")
        return default_dual_grid_layout(tile_count)

    tiles: List[TileDescriptor] = []
    seen_indices = set()
    for entry in payload[FIELD_TILES]:
        if not isinstance(entry, dict):
            continue
        try:
            descriptor = TileDescriptor.from_dict(entry)
        except ValueError as e:
            logger.warning(f"Skipping dual grid tile entry: {e}")
            continue
        if descriptor.index in seen_indices:
            logger.warning(f"Skipping duplicate dual grid tile index {descriptor.index}")
            continue
        seen_indices.add(descriptor.index)
        tiles.append(descriptor)

    if not tiles:
        logger.error(f"Dual grid data in {layout_path} has no valid tiles, using default layout")
        return default_dual_grid_layout(tile_count)

    total_tiles = payload.get(FIELD_TOTAL_TILES, len(tiles))
    try:
        total_tiles = int(total_tiles)
    except (TypeError, ValueError):
        total_tiles = len(tiles)

    layout = DualGridLayout(
        tiles=tiles,
        tilemap_type=str(payload.get(FIELD_TILEMAP_TYPE) or DEFAULT_TILEMAP_TYPE),
        total_tiles=total_tiles,
    )
    logger.info(f"Dual grid data loaded: {layout.tile_count} tiles from {layout_path}")
    return layout


def save_dual_grid_layout(layout_path: Path, layout: DualGridLayout) -> None:
    layout_path.write_text(json.dumps(layout.to_dict(), indent=2), encoding="utf-8")
