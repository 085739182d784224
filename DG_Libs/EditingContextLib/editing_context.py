"""
Shared editing context for Dual Grid Studio.

There is exactly one live set of surfaces, one live layer stack and one live
tool state. Every tile is edited through these same objects; the selection
orchestrator swaps tile content in and out of them.

Classes:
    LiveLayer: A layer with an owned, drawable raster buffer
    SurfaceSet: Named live surfaces (3x3 preview grid, editor in the centre)
    LayerStack: Ordered live layers plus the active layer index
    ToolState: Current tool, color, brush size and opacity
    EditingContext: The bundle handed to the orchestrator and its collaborators
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from DG_Libs.ImageEditingLib.image_models import Raster, is_hex_color
from DG_Libs.ImageEditingLib.raster_ops import create_blank_raster, clear_raster
from DG_Libs.constants import (
    DEFAULT_CANVAS_SIZE,
    DEFAULT_LAYER_NAME,
    DEFAULT_TOOL,
    DEFAULT_COLOR,
    DEFAULT_BRUSH_SIZE,
    DEFAULT_OPACITY,
    MAIN_SURFACE_KEY,
    OVERLAY_POSITIONS,
    SURFACE_KEYS,
    TOOL_NAMES,
)


@dataclass
class LiveLayer:
    """A layer currently materialized in the editing context.

    Attributes:
        id: Opaque monotonic identity
        name: Display name
        raster: Owned pixel buffer the drawing tools paint on
        visible: Whether the layer is rendered
        opacity: Layer opacity (0.0-1.0)
    """
    id: int
    name: str
    raster: Raster
    visible: bool = True
    opacity: float = 1.0

    def __post_init__(self):
        if not (0.0 <= self.opacity <= 1.0):
            raise ValueError(f"opacity must be 0.0-1.0, got {self.opacity}")


class SurfaceSet:
    """
    Named live raster surfaces.

    Surfaces are sized to the configured canvas size. A surface may be
    detached (for example while a GUI is rebuilding it); operations skip
    detached keys instead of failing.

    Example:
        >>> surfaces = SurfaceSet(canvas_size=64)
        >>> surfaces.main.size
        (64, 64)
        >>> surfaces.get("preview-0-0") is surfaces["preview-0-0"]
        True
    """

    def __init__(self, canvas_size: int = DEFAULT_CANVAS_SIZE, keys: Iterable[str] = SURFACE_KEYS):
        self.canvas_size = int(canvas_size)
        self._surfaces: Dict[str, Optional[Raster]] = {
            key: create_blank_raster(self.canvas_size) for key in keys
        }

    def __getitem__(self, key: str) -> Raster:
        surface = self._surfaces[key]
        if surface is None:
            raise KeyError(f"Surface '{key}' is detached")
        return surface

    def __contains__(self, key: str) -> bool:
        return self._surfaces.get(key) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self._surfaces)

    def __len__(self) -> int:
        return len(self._surfaces)

    def get(self, key: str) -> Optional[Raster]:
        return self._surfaces.get(key)

    def keys(self) -> List[str]:
        return list(self._surfaces)

    def items(self) -> List[Tuple[str, Raster]]:
        """Attached surfaces as (key, raster) pairs."""
        return [(key, surface) for key, surface in self._surfaces.items() if surface is not None]

    @property
    def main(self) -> Raster:
        return self[MAIN_SURFACE_KEY]

    def attach(self, key: str, raster: Raster) -> None:
        """
        Bind an externally owned buffer as the live surface for key.

        Raises:
            ValueError: If the buffer does not match the canvas size
        """
        if raster.size != (self.canvas_size, self.canvas_size):
            raise ValueError(
                f"Surface '{key}' must be {self.canvas_size}x{self.canvas_size}, "
                f"got {raster.size[0]}x{raster.size[1]}"
            )
        self._surfaces[key] = raster

    def detach(self, key: str) -> Optional[Raster]:
        surface = self._surfaces.get(key)
        if key in self._surfaces:
            self._surfaces[key] = None
        return surface

    def clear_all(self) -> None:
        for _, surface in self.items():
            clear_raster(surface)


class LayerStack:
    """Ordered sequence of live layers with an active layer index."""

    def __init__(self, layers: Optional[Iterable[LiveLayer]] = None):
        self._layers: List[LiveLayer] = list(layers or [])
        self.active_index = 0

    def __iter__(self) -> Iterator[LiveLayer]:
        return iter(list(self._layers))

    def __len__(self) -> int:
        return len(self._layers)

    def __getitem__(self, index: int) -> LiveLayer:
        return self._layers[index]

    @property
    def active_layer(self) -> Optional[LiveLayer]:
        if not self._layers:
            return None
        return self._layers[self.active_index]

    def replace(self, layers: Iterable[LiveLayer]) -> None:
        """Swap in a new layer sequence wholesale and keep the active index valid."""
        self._layers = list(layers)
        self.clamp_active_index()

    def append(self, layer: LiveLayer) -> None:
        self._layers.append(layer)

    def find(self, layer_id: int) -> Optional[LiveLayer]:
        for layer in self._layers:
            if layer.id == layer_id:
                return layer
        return None

    def clamp_active_index(self) -> None:
        if self.active_index >= len(self._layers):
            self.active_index = max(0, len(self._layers) - 1)
        elif self.active_index < 0:
            self.active_index = 0


@dataclass
class ToolState:
    """Live tool settings shown in the tool panel."""
    current_tool: str = DEFAULT_TOOL
    current_color: str = DEFAULT_COLOR
    brush_size: int = DEFAULT_BRUSH_SIZE
    opacity: float = DEFAULT_OPACITY

    def __post_init__(self):
        if self.current_tool not in TOOL_NAMES:
            raise ValueError(f"Unknown tool: {self.current_tool}")

        if not is_hex_color(self.current_color):
            raise ValueError(f"current_color must be '#rrggbb', got {self.current_color!r}")

        if self.brush_size < 0:
            raise ValueError(f"brush_size must be >= 0, got {self.brush_size}")

        if not (0.0 <= self.opacity <= 1.0):
            raise ValueError(f"opacity must be 0.0-1.0, got {self.opacity}")

    def copy(self) -> "ToolState":
        return replace(self)


def _empty_overlay_map() -> Dict[str, bool]:
    return {position: False for position in OVERLAY_POSITIONS}


@dataclass
class EditingContext:
    """The single live editing state shared by every tile.

    Attributes:
        surfaces: Named live surfaces
        layers: Live layer stack
        tool_state: Live tool settings
        overlay_map: Live dual grid edge map (position -> filled)
    """
    surfaces: SurfaceSet
    layers: LayerStack
    tool_state: ToolState = field(default_factory=ToolState)
    overlay_map: Dict[str, bool] = field(default_factory=_empty_overlay_map)

    @property
    def canvas_size(self) -> int:
        return self.surfaces.canvas_size

    @classmethod
    def create(cls, canvas_size: int = DEFAULT_CANVAS_SIZE, first_layer_id: int = 0) -> "EditingContext":
        """
        Create a context with blank surfaces and a single empty layer.

        Args:
            canvas_size: Width and height of every buffer
            first_layer_id: Identity given to the initial layer

        Returns:
            New EditingContext
        """
        first_layer = LiveLayer(
            id=first_layer_id,
            name=DEFAULT_LAYER_NAME,
            raster=create_blank_raster(canvas_size),
        )
        return cls(
            surfaces=SurfaceSet(canvas_size),
            layers=LayerStack([first_layer]),
        )
