"""
Tile state record: the unit of save and restore for one tile.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from DG_Libs.ImageEditingLib.image_models import Raster
from DG_Libs.ImageEditingLib.raster_ops import encode_raster_payload
from DG_Libs.TileStateLib.layer_ledger import LayerDescriptor, default_layer_descriptor
from DG_Libs.TileStateLib.raster_snapshot import RasterSnapshot
from DG_Libs.TileStateLib.tool_overlay import ToolOverlaySnapshot
from DG_Libs.constants import DEFAULT_CANVAS_SIZE


@dataclass
class TileStateRecord:
    """Everything needed to materialize one tile into the editing context.

    Attributes:
        index: Tile index (0-15)
        raster: Owned copies of every named surface
        layers: Layer ledger in stack order
        tool_overlay: Tool settings and overlay map
        saved: False until the tile's live state has been saved once
        frame: Main surface captured after the tile was last shown, used as the
               tile thumbnail; None marks an empty slot
    """
    index: int
    raster: RasterSnapshot
    layers: Tuple[LayerDescriptor, ...] = field(default_factory=tuple)
    tool_overlay: ToolOverlaySnapshot = field(default_factory=ToolOverlaySnapshot)
    saved: bool = False
    frame: Optional[Raster] = None

    @classmethod
    def create_default(cls, index: int, canvas_size: int = DEFAULT_CANVAS_SIZE) -> "TileStateRecord":
        """
        Build a fresh record: blank surfaces, one empty "Layer 1", default tool
        settings and an all-false overlay map.
        """
        return cls(
            index=index,
            raster=RasterSnapshot(canvas_size),
            layers=(default_layer_descriptor(),),
            tool_overlay=ToolOverlaySnapshot(),
        )

    @property
    def canvas_size(self) -> int:
        return self.raster.canvas_size

    @property
    def has_frame(self) -> bool:
        return self.frame is not None

    def copy(self) -> "TileStateRecord":
        """Deep copy sharing no buffer or container with this record."""
        return TileStateRecord(
            index=self.index,
            raster=self.raster.copy(),
            layers=tuple(descriptor.copy() for descriptor in self.layers),
            tool_overlay=self.tool_overlay.copy(),
            saved=self.saved,
            frame=self.frame.copy() if self.frame is not None else None,
        )

    def to_dict(self, include_surfaces: bool = False) -> Dict[str, Any]:
        """
        Convert to a JSON-compatible dictionary for inspection or export.

        Args:
            include_surfaces: Also encode every surface snapshot as a data URL
        """
        data: Dict[str, Any] = {
            "index": self.index,
            "layers": [descriptor.to_dict() for descriptor in self.layers],
            "tool_overlay": self.tool_overlay.to_dict(),
            "saved": self.saved,
            "has_frame": self.has_frame,
        }
        if include_surfaces:
            data["surfaces"] = {
                key: encode_raster_payload(self.raster.get_copy(key))
                for key in self.raster.keys()
            }
        return data
