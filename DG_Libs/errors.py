"""
Exception types for Dual Grid Studio.

Classes:
    TileNotFoundError: Tile index outside the valid domain or record absent
    PayloadDecodeError: A serialized layer payload could not be decoded
    TileCapacityError: No free tile slot is left in the dual grid
"""


class TileNotFoundError(KeyError):
    """Raised when a tile index has no record."""

    def __init__(self, tile_index, tile_count=None):
        self.tile_index = tile_index
        self.tile_count = tile_count
        if tile_count is None:
            message = f"No tile state for index {tile_index!r}"
        else:
            message = f"No tile state for index {tile_index!r} (valid: 0-{tile_count - 1})"
        super().__init__(message)

    def __str__(self) -> str:
        return str(self.args[0])


class PayloadDecodeError(ValueError):
    """Raised when a layer payload is not a decodable image."""


class TileCapacityError(RuntimeError):
    """Raised when every tile slot of the dual grid is in use."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"Maximum {capacity} tiles reached. Cannot create more.")
