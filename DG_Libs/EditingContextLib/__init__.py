"""
EditingContextLib - The shared live editing state

This module holds the single set of live surfaces, layers and tool settings
that every tile is edited through, plus the registry of optional UI
collaborators notified when that state changes.
"""

from DG_Libs.EditingContextLib.editing_context import (
    LiveLayer,
    SurfaceSet,
    LayerStack,
    ToolState,
    EditingContext,
)
from DG_Libs.EditingContextLib.collaborators import CollaboratorRegistry

__all__ = [
    "LiveLayer",
    "SurfaceSet",
    "LayerStack",
    "ToolState",
    "EditingContext",
    "CollaboratorRegistry",
]
