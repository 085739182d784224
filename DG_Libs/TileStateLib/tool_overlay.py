"""
Per-tile tool and overlay snapshot.

Classes:
    ToolOverlaySnapshot: Last-used tool settings plus the dual grid edge map
"""

from dataclasses import dataclass, field
from typing import Any, Dict

from DG_Libs.EditingContextLib.editing_context import ToolState
from DG_Libs.TileStateLib.surface_mapping import default_overlay_map, normalize_overlay_map
from DG_Libs.constants import (
    DEFAULT_TOOL,
    DEFAULT_COLOR,
    DEFAULT_BRUSH_SIZE,
    DEFAULT_OPACITY,
    FIELD_CURRENT_TOOL,
    FIELD_CURRENT_COLOR,
    FIELD_BRUSH_SIZE,
    FIELD_OPACITY,
    FIELD_OVERLAY_MAP,
)


@dataclass
class ToolOverlaySnapshot:
    """Tool settings and overlay map stored for one tile.

    Attributes:
        current_tool: Tool name (see TOOL_NAMES)
        current_color: '#rrggbb' drawing color
        brush_size: Brush size (>= 0)
        opacity: Drawing opacity (0.0-1.0)
        overlay_map: Eight overlay positions -> filled flag
    """
    current_tool: str = DEFAULT_TOOL
    current_color: str = DEFAULT_COLOR
    brush_size: int = DEFAULT_BRUSH_SIZE
    opacity: float = DEFAULT_OPACITY
    overlay_map: Dict[str, bool] = field(default_factory=default_overlay_map)

    def __post_init__(self):
        # ToolState validates tool, color, brush size and opacity
        self.to_tool_state()
        self.overlay_map = normalize_overlay_map(self.overlay_map)

    @classmethod
    def capture(cls, tool_state: ToolState, overlay_map: Dict[str, bool]) -> "ToolOverlaySnapshot":
        """Snapshot live tool settings and a live overlay map by value."""
        return cls(
            current_tool=tool_state.current_tool,
            current_color=tool_state.current_color,
            brush_size=int(tool_state.brush_size),
            opacity=float(tool_state.opacity),
            overlay_map=dict(overlay_map),
        )

    def to_tool_state(self) -> ToolState:
        return ToolState(
            current_tool=self.current_tool,
            current_color=self.current_color,
            brush_size=self.brush_size,
            opacity=self.opacity,
        )

    def apply_to(self, tool_state: ToolState) -> None:
        """Write the stored settings onto a live tool state in place."""
        tool_state.current_tool = self.current_tool
        tool_state.current_color = self.current_color
        tool_state.brush_size = self.brush_size
        tool_state.opacity = self.opacity

    def copy(self) -> "ToolOverlaySnapshot":
        return ToolOverlaySnapshot(
            current_tool=self.current_tool,
            current_color=self.current_color,
            brush_size=self.brush_size,
            opacity=self.opacity,
            overlay_map=dict(self.overlay_map),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_CURRENT_TOOL: self.current_tool,
            FIELD_CURRENT_COLOR: self.current_color,
            FIELD_BRUSH_SIZE: self.brush_size,
            FIELD_OPACITY: self.opacity,
            FIELD_OVERLAY_MAP: dict(self.overlay_map),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ToolOverlaySnapshot":
        return cls(
            current_tool=data.get(FIELD_CURRENT_TOOL, DEFAULT_TOOL),
            current_color=data.get(FIELD_CURRENT_COLOR, DEFAULT_COLOR),
            brush_size=int(data.get(FIELD_BRUSH_SIZE, DEFAULT_BRUSH_SIZE)),
            opacity=float(data.get(FIELD_OPACITY, DEFAULT_OPACITY)),
            overlay_map=data.get(FIELD_OVERLAY_MAP, {}),
        )
