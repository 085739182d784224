"""
Engine configuration for Dual Grid Studio.

Runtime-tunable settings are stored as a small JSON document. Loading is
forgiving: an unreadable file yields the defaults and each field is validated
on its own, so one bad value never discards the rest.

Classes:
    EngineConfig: Canvas size, tile count, decode timeout and layout path

Functions:
    load_engine_config: Load configuration from a JSON file
    save_engine_config: Save configuration to a JSON file
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from DG_Libs.constants import (
    DEFAULT_CANVAS_SIZE,
    DEFAULT_DECODE_TIMEOUT,
    DUAL_GRID_DATA_FILE,
    MAX_TILE_COUNT,
    FIELD_CANVAS_SIZE,
    FIELD_TILE_COUNT,
    FIELD_DECODE_TIMEOUT,
    FIELD_DUAL_GRID_DATA_PATH,
)

logger = logging.getLogger(__name__)


@dataclass
class EngineConfig:
    """Settings shared by the tile registry and the selection orchestrator.

    Attributes:
        canvas_size: Width and height of every surface and layer buffer
        tile_count: Number of tiles in the dual grid (at most 16)
        decode_timeout: Seconds a single layer decode may take, None for no limit
        dual_grid_data_path: Location of the dual grid layout document
    """
    canvas_size: int = DEFAULT_CANVAS_SIZE
    tile_count: int = MAX_TILE_COUNT
    decode_timeout: Optional[float] = DEFAULT_DECODE_TIMEOUT
    dual_grid_data_path: Optional[str] = DUAL_GRID_DATA_FILE

    def __post_init__(self):
        if self.canvas_size < 1:
            raise ValueError(f"canvas_size must be positive, got {self.canvas_size}")

        if not (1 <= self.tile_count <= MAX_TILE_COUNT):
            raise ValueError(f"tile_count must be 1-{MAX_TILE_COUNT}, got {self.tile_count}")

        if self.decode_timeout is not None and self.decode_timeout <= 0:
            raise ValueError(f"decode_timeout must be positive or None, got {self.decode_timeout}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_CANVAS_SIZE: self.canvas_size,
            FIELD_TILE_COUNT: self.tile_count,
            FIELD_DECODE_TIMEOUT: self.decode_timeout,
            FIELD_DUAL_GRID_DATA_PATH: self.dual_grid_data_path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EngineConfig":
        """
        Create a config from a dictionary, keeping defaults for invalid fields.

        Args:
            data: Parsed JSON mapping

        Returns:
            EngineConfig with every valid field applied
        """
        config = cls()

        canvas_size = data.get(FIELD_CANVAS_SIZE)
        if canvas_size is not None:
            try:
                config.canvas_size = max(1, int(canvas_size))
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid {FIELD_CANVAS_SIZE}: {canvas_size!r}")

        tile_count = data.get(FIELD_TILE_COUNT)
        if tile_count is not None:
            try:
                config.tile_count = min(MAX_TILE_COUNT, max(1, int(tile_count)))
            except (TypeError, ValueError):
                logger.warning(f"Ignoring invalid {FIELD_TILE_COUNT}: {tile_count!r}")

        if FIELD_DECODE_TIMEOUT in data:
            timeout = data.get(FIELD_DECODE_TIMEOUT)
            if timeout is None:
                config.decode_timeout = None
            else:
                try:
                    timeout_value = float(timeout)
                    if timeout_value > 0:
                        config.decode_timeout = timeout_value
                    else:
                        logger.warning(f"Ignoring non-positive {FIELD_DECODE_TIMEOUT}: {timeout!r}")
                except (TypeError, ValueError):
                    logger.warning(f"Ignoring invalid {FIELD_DECODE_TIMEOUT}: {timeout!r}")

        data_path = data.get(FIELD_DUAL_GRID_DATA_PATH)
        if isinstance(data_path, str) and data_path.strip():
            config.dual_grid_data_path = data_path.strip()

        return config


def load_engine_config(config_path: Path) -> EngineConfig:
    """
    Load engine configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        The loaded configuration, or defaults if the file cannot be read
    """
    try:
        payload = json.loads(config_path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError) as e:
        logger.debug(f"Using default engine config ({config_path}): {e}")
        return EngineConfig()

    if not isinstance(payload, dict):
        logger.warning(f"Engine config {config_path} is not a JSON object, using defaults")
        return EngineConfig()

    return EngineConfig.from_dict(payload)


def save_engine_config(config_path: Path, config: EngineConfig) -> None:
    config_path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
