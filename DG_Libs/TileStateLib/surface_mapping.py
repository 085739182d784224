"""
Lookups between dual grid overlay positions and surface keys.

The 3x3 preview grid surrounds the main editor: each of the eight overlay
positions names one neighbor cell, and the centre cell is the editor itself.
"""

from typing import Any, Dict, List, Optional, Tuple

from DG_Libs.constants import (
    MAIN_SURFACE_KEY,
    OVERLAY_POSITIONS,
    POSITION_TO_SURFACE,
    PREVIEW_SURFACE_PREFIX,
)

SURFACE_TO_POSITION = {surface: position for position, surface in POSITION_TO_SURFACE.items()}


def position_to_surface(position: str) -> str:
    """
    Get the preview surface key for an overlay position.

    Raises:
        ValueError: If position is not one of the eight overlay positions
    """
    try:
        return POSITION_TO_SURFACE[position]
    except KeyError:
        raise ValueError(f"Unknown overlay position: {position!r}") from None


def surface_to_position(surface_key: str) -> Optional[str]:
    """Get the overlay position for a surface key, None for the main editor."""
    return SURFACE_TO_POSITION.get(surface_key)


def preview_surface_key(row: int, col: int) -> str:
    if not (0 <= row <= 2 and 0 <= col <= 2):
        raise ValueError(f"Preview cell out of range: ({row}, {col})")
    if (row, col) == (1, 1):
        return MAIN_SURFACE_KEY
    return f"{PREVIEW_SURFACE_PREFIX}-{row}-{col}"


def surface_grid_cell(surface_key: str) -> Tuple[int, int]:
    """
    Get the (row, col) cell of a surface in the 3x3 preview grid.

    Raises:
        ValueError: If the key is not a known surface
    """
    if surface_key == MAIN_SURFACE_KEY:
        return (1, 1)

    parts = surface_key.split("-")
    if len(parts) != 3 or parts[0] != PREVIEW_SURFACE_PREFIX or surface_key not in SURFACE_TO_POSITION:
        raise ValueError(f"Unknown surface key: {surface_key!r}")

    return (int(parts[1]), int(parts[2]))


def default_overlay_map() -> Dict[str, bool]:
    """Overlay map with every edge position unfilled."""
    return {position: False for position in OVERLAY_POSITIONS}


def normalize_overlay_map(data: Any) -> Dict[str, bool]:
    """
    Coerce arbitrary map data into a complete eight-position overlay map.

    Missing positions become False and unknown keys are dropped.
    """
    overlay_map = default_overlay_map()
    if not isinstance(data, dict):
        return overlay_map

    for position in OVERLAY_POSITIONS:
        if position in data:
            overlay_map[position] = bool(data[position])

    return overlay_map


def overlay_surface_states(overlay_map: Dict[str, bool]) -> List[Tuple[str, bool]]:
    """
    Expand an overlay map into (surface_key, filled) pairs in position order.

    Example:
        >>> overlay_surface_states({"top-left": True})[0]
        ('preview-0-0', True)
    """
    normalized = normalize_overlay_map(overlay_map)
    return [(POSITION_TO_SURFACE[position], normalized[position]) for position in OVERLAY_POSITIONS]
