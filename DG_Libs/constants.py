"""
Constants and configuration values for Dual Grid Studio.

This module centralizes all constant values, magic numbers, and
configuration settings used throughout the application.
"""

# Canvas constants
DEFAULT_CANVAS_SIZE = 512
RASTER_MODE = "RGBA"
TRANSPARENT_PIXEL = (0, 0, 0, 0)

# Dual grid constants
GRID_SIZE = 4
MAX_TILE_COUNT = GRID_SIZE * GRID_SIZE
DEFAULT_TILEMAP_TYPE = "4x4_dual_grid"
DUAL_GRID_DATA_FILE = "4x4_dual_grid.json"

# Surface keys (3x3 neighbor preview grid, main editor in the centre cell)
MAIN_SURFACE_KEY = "editor-canvas"
PREVIEW_SURFACE_PREFIX = "preview"
SURFACE_KEYS = (
    "preview-0-0", "preview-0-1", "preview-0-2",
    "preview-1-0", MAIN_SURFACE_KEY, "preview-1-2",
    "preview-2-0", "preview-2-1", "preview-2-2",
)

# Overlay map positions
POSITION_TOP_LEFT = "top-left"
POSITION_TOP_CENTER = "top-center"
POSITION_TOP_RIGHT = "top-right"
POSITION_MIDDLE_LEFT = "middle-left"
POSITION_MIDDLE_RIGHT = "middle-right"
POSITION_BOTTOM_LEFT = "bottom-left"
POSITION_BOTTOM_CENTER = "bottom-center"
POSITION_BOTTOM_RIGHT = "bottom-right"

OVERLAY_POSITIONS = (
    POSITION_TOP_LEFT,
    POSITION_TOP_CENTER,
    POSITION_TOP_RIGHT,
    POSITION_MIDDLE_LEFT,
    POSITION_MIDDLE_RIGHT,
    POSITION_BOTTOM_LEFT,
    POSITION_BOTTOM_CENTER,
    POSITION_BOTTOM_RIGHT,
)

# Corner neighbors used by the dual grid document
NEIGHBOR_POSITIONS = (
    POSITION_TOP_LEFT,
    POSITION_TOP_RIGHT,
    POSITION_BOTTOM_LEFT,
    POSITION_BOTTOM_RIGHT,
)

POSITION_TO_SURFACE = {
    POSITION_TOP_LEFT: "preview-0-0",
    POSITION_TOP_CENTER: "preview-0-1",
    POSITION_TOP_RIGHT: "preview-0-2",
    POSITION_MIDDLE_LEFT: "preview-1-0",
    POSITION_MIDDLE_RIGHT: "preview-1-2",
    POSITION_BOTTOM_LEFT: "preview-2-0",
    POSITION_BOTTOM_CENTER: "preview-2-1",
    POSITION_BOTTOM_RIGHT: "preview-2-2",
}

# Tools
TOOL_PENCIL = "pencil"
TOOL_ERASER = "eraser"
TOOL_FILL = "fill"
TOOL_PICKER = "picker"
TOOL_LINE = "line"
TOOL_RECTANGLE = "rectangle"
TOOL_NAMES = {TOOL_PENCIL, TOOL_ERASER, TOOL_FILL, TOOL_PICKER, TOOL_LINE, TOOL_RECTANGLE}

DEFAULT_TOOL = TOOL_PENCIL
DEFAULT_COLOR = "#282828"
DEFAULT_BRUSH_SIZE = 0
DEFAULT_OPACITY = 1.0

# Layers
DEFAULT_LAYER_NAME = "Layer 1"

# Layer payload encoding
PAYLOAD_FORMAT = "PNG"
PAYLOAD_MIME_TYPE = "image/png"
PAYLOAD_PREFIX = f"data:{PAYLOAD_MIME_TYPE};base64,"
DEFAULT_DECODE_TIMEOUT = 5.0

# Dual grid document field names
FIELD_TILEMAP_TYPE = "tilemap_type"
FIELD_TOTAL_TILES = "total_tiles"
FIELD_TILES = "tiles"
FIELD_INDEX = "index"
FIELD_POSITION = "position"
FIELD_NAME = "name"
FIELD_OVERLAPS = "overlaps"
FIELD_NEIGHBORS = "neighbors"
FIELD_MAPS = "maps"

# Layer descriptor field names
FIELD_LAYER_ID = "id"
FIELD_LAYER_NAME = "name"
FIELD_LAYER_VISIBLE = "visible"
FIELD_LAYER_OPACITY = "opacity"
FIELD_LAYER_PAYLOAD = "pixel_payload"

# Engine config field names
FIELD_CANVAS_SIZE = "canvas_size"
FIELD_TILE_COUNT = "tile_count"
FIELD_DECODE_TIMEOUT = "decode_timeout"
FIELD_DUAL_GRID_DATA_PATH = "dual_grid_data_path"

# Collaborator events
EVENT_PHASE_CHANGED = "phase_changed"
EVENT_SELECTION_CHANGED = "selection_changed"
EVENT_LOADING = "loading"
EVENT_LAYERS_CHANGED = "layers_changed"
EVENT_PREVIEWS_CHANGED = "previews_changed"
EVENT_TOOL_CHANGED = "tool_changed"
EVENT_OVERLAY_CHANGED = "overlay_changed"
EVENT_FRAME_CAPTURED = "frame_captured"
EVENT_NOTIFY = "notify"

COLLABORATOR_EVENTS = {
    EVENT_PHASE_CHANGED,
    EVENT_SELECTION_CHANGED,
    EVENT_LOADING,
    EVENT_LAYERS_CHANGED,
    EVENT_PREVIEWS_CHANGED,
    EVENT_TOOL_CHANGED,
    EVENT_OVERLAY_CHANGED,
    EVENT_FRAME_CAPTURED,
    EVENT_NOTIFY,
}

# Notification levels
NOTIFY_SUCCESS = "success"
NOTIFY_WARNING = "warning"
NOTIFY_ERROR = "error"

# Tool/overlay snapshot field names
FIELD_CURRENT_TOOL = "current_tool"
FIELD_CURRENT_COLOR = "current_color"
FIELD_BRUSH_SIZE = "brush_size"
FIELD_OPACITY = "opacity"
FIELD_OVERLAY_MAP = "overlay_map"
