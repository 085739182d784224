"""
Tests for overlay position and surface key lookups.
"""

import pytest

from DG_Libs.TileStateLib.surface_mapping import (
    default_overlay_map,
    normalize_overlay_map,
    overlay_surface_states,
    position_to_surface,
    preview_surface_key,
    surface_grid_cell,
    surface_to_position,
)
from DG_Libs.constants import MAIN_SURFACE_KEY, OVERLAY_POSITIONS


class TestPositionLookups:

    def test_position_round_trip(self):
        for position in OVERLAY_POSITIONS:
            assert surface_to_position(position_to_surface(position)) == position

    def test_unknown_position(self):
        with pytest.raises(ValueError):
            position_to_surface("centre")

    def test_main_surface_has_no_position(self):
        assert surface_to_position(MAIN_SURFACE_KEY) is None

    def test_preview_surface_key(self):
        assert preview_surface_key(0, 2) == "preview-0-2"
        assert preview_surface_key(1, 1) == MAIN_SURFACE_KEY

        with pytest.raises(ValueError):
            preview_surface_key(3, 0)

    def test_surface_grid_cell(self):
        assert surface_grid_cell("preview-2-1") == (2, 1)
        assert surface_grid_cell(MAIN_SURFACE_KEY) == (1, 1)

        with pytest.raises(ValueError):
            surface_grid_cell("preview-1-1")


class TestOverlayMaps:

    def test_default_map(self):
        overlay_map = default_overlay_map()

        assert set(overlay_map) == set(OVERLAY_POSITIONS)
        assert not any(overlay_map.values())

    def test_normalize_fills_missing_and_drops_unknown(self):
        overlay_map = normalize_overlay_map({"top-left": 1, "middle": True})

        assert overlay_map["top-left"] is True
        assert "middle" not in overlay_map
        assert overlay_map["bottom-right"] is False

    def test_normalize_non_dict(self):
        assert normalize_overlay_map(None) == default_overlay_map()
        assert normalize_overlay_map(["top-left"]) == default_overlay_map()

    def test_overlay_surface_states(self):
        states = overlay_surface_states({"top-left": True, "bottom-right": True})

        assert len(states) == 8
        assert states[0] == ("preview-0-0", True)
        assert states[-1] == ("preview-2-2", True)
        assert ("preview-0-1", False) in states
