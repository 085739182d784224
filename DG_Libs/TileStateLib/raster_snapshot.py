"""
Per-tile raster snapshot store.

Holds one owned buffer for every named surface. Buffers are only ever filled
by copying pixels in or out, never by binding a live surface, so a snapshot
cannot change when the user keeps drawing after it was taken.
"""

from typing import Dict, Iterable, List, Optional

from DG_Libs.EditingContextLib.editing_context import SurfaceSet
from DG_Libs.ImageEditingLib.image_models import Raster
from DG_Libs.ImageEditingLib.raster_ops import (
    create_blank_raster,
    clear_raster,
    copy_raster_into,
    raster_has_content,
)
from DG_Libs.constants import DEFAULT_CANVAS_SIZE, SURFACE_KEYS


class RasterSnapshot:
    """
    Owned copies of every named surface for one tile.

    Every key in SURFACE_KEYS is present for the lifetime of the snapshot.

    Example:
        >>> snapshot = RasterSnapshot(canvas_size=64)
        >>> copied = snapshot.capture(context.surfaces)
        >>> snapshot.apply_to(context.surfaces)
        9
    """

    def __init__(self, canvas_size: int = DEFAULT_CANVAS_SIZE, keys: Iterable[str] = SURFACE_KEYS):
        self.canvas_size = int(canvas_size)
        self._buffers: Dict[str, Raster] = {key: create_blank_raster(self.canvas_size) for key in keys}

    def __contains__(self, key: str) -> bool:
        return key in self._buffers

    def __len__(self) -> int:
        return len(self._buffers)

    def keys(self) -> List[str]:
        return list(self._buffers)

    def capture(self, surfaces: SurfaceSet) -> int:
        """
        Copy live surface pixels into the snapshot buffers.

        Detached surfaces are skipped and keep their previous snapshot content.

        Args:
            surfaces: Live surface set to read from

        Returns:
            Number of surfaces copied
        """
        copied = 0
        for key, buffer in self._buffers.items():
            source = surfaces.get(key)
            if source is None:
                continue
            copy_raster_into(source, buffer)
            copied += 1
        return copied

    def apply_to(self, surfaces: SurfaceSet) -> int:
        """
        Copy snapshot pixels onto the live surfaces.

        Args:
            surfaces: Live surface set to overwrite in place

        Returns:
            Number of surfaces written
        """
        written = 0
        for key, buffer in self._buffers.items():
            target = surfaces.get(key)
            if target is None:
                continue
            copy_raster_into(buffer, target)
            written += 1
        return written

    def load(self, key: str, raster: Raster) -> None:
        """Copy a single buffer into the snapshot."""
        if key not in self._buffers:
            raise KeyError(f"Unknown surface key: {key}")
        copy_raster_into(raster, self._buffers[key])

    def get_copy(self, key: str) -> Raster:
        return self._buffers[key].copy()

    def clear(self) -> None:
        for buffer in self._buffers.values():
            clear_raster(buffer)

    def has_content(self, key: Optional[str] = None) -> bool:
        """Check one surface, or any surface when key is None, for drawn pixels."""
        if key is not None:
            return raster_has_content(self._buffers[key])
        return any(raster_has_content(buffer) for buffer in self._buffers.values())

    def copy(self) -> "RasterSnapshot":
        duplicate = RasterSnapshot(self.canvas_size, keys=())
        duplicate._buffers = {key: buffer.copy() for key, buffer in self._buffers.items()}
        return duplicate
