"""
DG_Libs - Dual Grid Studio Library Modules

This package contains core functionality for the Dual Grid Studio tile editor,
organized into specialized sub-packages:

- TileStateLib: Per-tile state records, layer ledger and the tile registry
- EditingContextLib: The shared editing context and optional UI collaborators
- DualGridLib: Dual grid layout loading and the tile selection orchestrator
"""

__version__ = "0.1.0"
