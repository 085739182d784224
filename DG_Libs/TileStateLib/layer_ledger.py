"""
Layer ledger: per-tile layer descriptors and their save/restore.

A descriptor is a value. Saving encodes each live layer buffer into a
standalone PNG data URL and builds brand-new descriptor objects, so nothing in
a ledger can alias a live buffer or another tile's ledger.

Restoring is asynchronous. Every payload is decoded on a worker thread and the
restore resolves only after all decodes have settled (decoded, failed or timed
out). A failed layer comes back blank instead of aborting the restore.

A timed-out decode is abandoned, not stopped: the worker thread keeps running
until the decoder returns. A decoder that never returns holds one executor
thread for good, and shutting down that executor (including the default one
at the end of asyncio.run) waits for it. Pass a dedicated executor to keep
such stalls away from the loop's default pool.

Example:
    >>> descriptors = describe_live_layers(context.layers)
    >>> live_layers = asyncio.run(restore_layer_descriptors(descriptors, 512))
    >>> len(live_layers) == len(descriptors)
    True
"""

import asyncio
import logging
import time
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, TYPE_CHECKING

from DG_Libs.EditingContextLib.editing_context import LiveLayer
from DG_Libs.ImageEditingLib.image_models import Raster
from DG_Libs.ImageEditingLib.raster_ops import (
    create_blank_raster,
    copy_raster_into,
    encode_raster_payload,
    decode_raster_payload,
)
from DG_Libs.errors import PayloadDecodeError
from DG_Libs.constants import (
    DEFAULT_DECODE_TIMEOUT,
    DEFAULT_LAYER_NAME,
    FIELD_LAYER_ID,
    FIELD_LAYER_NAME,
    FIELD_LAYER_VISIBLE,
    FIELD_LAYER_OPACITY,
    FIELD_LAYER_PAYLOAD,
)

if TYPE_CHECKING:
    from DG_Libs.TileStateLib.tile_state import TileStateRecord

logger = logging.getLogger(__name__)

PayloadDecoder = Callable[[str, int], Raster]

_last_layer_id = 0


def next_layer_id() -> int:
    """
    Allocate a layer identity from the millisecond clock.

    Identities strictly increase even when two layers are created within the
    same millisecond.
    """
    global _last_layer_id
    candidate = int(time.time() * 1000)
    _last_layer_id = max(candidate, _last_layer_id + 1)
    return _last_layer_id


@dataclass(frozen=True)
class LayerDescriptor:
    """Serialized description of one layer.

    Attributes:
        id: Opaque monotonic identity
        name: Display name
        visible: Whether the layer is rendered
        opacity: Layer opacity (0.0-1.0)
        pixel_payload: PNG data URL, or None for a layer with no content yet
    """
    id: int
    name: str
    visible: bool = True
    opacity: float = 1.0
    pixel_payload: Optional[str] = None

    def __post_init__(self):
        """Validate descriptor fields."""
        if not isinstance(self.name, str):
            raise ValueError(f"name must be a string, got {type(self.name)}")

        if not (0.0 <= self.opacity <= 1.0):
            raise ValueError(f"opacity must be 0.0-1.0, got {self.opacity}")

        if self.pixel_payload is not None and not isinstance(self.pixel_payload, str):
            raise ValueError(f"pixel_payload must be a string or None, got {type(self.pixel_payload)}")

    @property
    def has_content(self) -> bool:
        return self.pixel_payload is not None

    def copy(self) -> "LayerDescriptor":
        return LayerDescriptor(
            id=self.id,
            name=self.name,
            visible=self.visible,
            opacity=self.opacity,
            pixel_payload=self.pixel_payload,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            FIELD_LAYER_ID: self.id,
            FIELD_LAYER_NAME: self.name,
            FIELD_LAYER_VISIBLE: self.visible,
            FIELD_LAYER_OPACITY: self.opacity,
            FIELD_LAYER_PAYLOAD: self.pixel_payload,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LayerDescriptor":
        """Create from dictionary, ignoring unknown keys."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)


def default_layer_descriptor(layer_id: Optional[int] = None) -> LayerDescriptor:
    """The single empty layer every fresh tile starts with."""
    return LayerDescriptor(
        id=next_layer_id() if layer_id is None else layer_id,
        name=DEFAULT_LAYER_NAME,
        visible=True,
        opacity=1.0,
        pixel_payload=None,
    )


def describe_live_layer(layer: LiveLayer) -> LayerDescriptor:
    """
    Serialize one live layer into a new descriptor.

    Args:
        layer: Live layer whose buffer is encoded

    Returns:
        Descriptor holding copied scalar fields and an encoded payload
    """
    payload = encode_raster_payload(layer.raster) if layer.raster is not None else None
    return LayerDescriptor(
        id=layer.id,
        name=str(layer.name),
        visible=bool(layer.visible),
        opacity=float(layer.opacity),
        pixel_payload=payload,
    )


def describe_live_layers(live_layers: Iterable[LiveLayer]) -> List[LayerDescriptor]:
    return [describe_live_layer(layer) for layer in live_layers]


def save_layers(record: "TileStateRecord", live_layers: Iterable[LiveLayer]) -> int:
    """
    Replace a record's ledger with descriptors of the given live layers.

    The previous ledger is discarded wholesale, never edited in place.

    Args:
        record: Tile record to update
        live_layers: Live layers to serialize, in stack order

    Returns:
        Number of layers saved
    """
    descriptors = tuple(describe_live_layers(live_layers))
    record.layers = descriptors
    record.saved = True
    logger.debug(f"Saved {len(descriptors)} layers for tile {record.index}")
    return len(descriptors)


async def _decode_layer_raster(
    descriptor: LayerDescriptor,
    canvas_size: int,
    decode_timeout: Optional[float],
    decoder: PayloadDecoder,
    executor: Optional[Executor],
) -> Raster:
    """
    Decode one descriptor payload into a fresh buffer, blank on any failure.
    """
    if descriptor.pixel_payload is None:
        return create_blank_raster(canvas_size)

    loop = asyncio.get_running_loop()
    decode_future = loop.run_in_executor(executor, decoder, descriptor.pixel_payload, canvas_size)

    try:
        if decode_timeout is None:
            decoded = await decode_future
        else:
            decoded = await asyncio.wait_for(decode_future, timeout=decode_timeout)
    except asyncio.TimeoutError:
        logger.warning(
            f"Layer '{descriptor.name}' ({descriptor.id}) did not decode within "
            f"{decode_timeout}s, restoring it blank"
        )
        return create_blank_raster(canvas_size)
    except (PayloadDecodeError, OSError) as e:
        logger.error(f"Failed to load layer image for '{descriptor.name}' ({descriptor.id}): {e}")
        return create_blank_raster(canvas_size)
    except Exception:
        logger.exception(f"Decoder failed for layer '{descriptor.name}' ({descriptor.id}), restoring it blank")
        return create_blank_raster(canvas_size)

    if decoded.size == (canvas_size, canvas_size):
        return decoded

    raster = create_blank_raster(canvas_size)
    copy_raster_into(decoded, raster)
    return raster


async def restore_layer_descriptors(
    descriptors: Sequence[LayerDescriptor],
    canvas_size: int,
    decode_timeout: Optional[float] = DEFAULT_DECODE_TIMEOUT,
    decoder: PayloadDecoder = decode_raster_payload,
    executor: Optional[Executor] = None,
) -> List[LiveLayer]:
    """
    Rebuild live layers from descriptors.

    All decodes run concurrently and are joined before returning; the result
    keeps descriptor order.

    Args:
        descriptors: Layer descriptors in stack order
        canvas_size: Size of every allocated buffer
        decode_timeout: Seconds allowed per decode, None for no limit
        decoder: Callable (payload, size) -> raster, run on the executor
        executor: Executor for decodes (default: the loop's thread pool)

    Returns:
        New live layers, one per descriptor
    """
    rasters = await asyncio.gather(*(
        _decode_layer_raster(descriptor, canvas_size, decode_timeout, decoder, executor)
        for descriptor in descriptors
    ))

    return [
        LiveLayer(
            id=descriptor.id,
            name=descriptor.name,
            raster=raster,
            visible=descriptor.visible,
            opacity=descriptor.opacity,
        )
        for descriptor, raster in zip(descriptors, rasters)
    ]


async def restore_layers(
    record: "TileStateRecord",
    decode_timeout: Optional[float] = DEFAULT_DECODE_TIMEOUT,
    decoder: PayloadDecoder = decode_raster_payload,
    executor: Optional[Executor] = None,
) -> List[LiveLayer]:
    """
    Rebuild the live layers of a tile record.

    A record that has never been saved, or whose ledger is empty, yields a
    newly synthesized default layer.

    Args:
        record: Tile record to restore from
        decode_timeout: Seconds allowed per decode, None for no limit
        decoder: Payload decoder
        executor: Executor for decodes

    Returns:
        New live layers sized to the record's canvas size
    """
    if record.saved and record.layers:
        descriptors = list(record.layers)
    else:
        descriptors = [default_layer_descriptor()]
        logger.debug(f"Created default layer for fresh tile {record.index}")
    layers = await restore_layer_descriptors(
        descriptors,
        record.raster.canvas_size,
        decode_timeout=decode_timeout,
        decoder=decoder,
        executor=executor,
    )
    logger.debug(f"Restored {len(layers)} layers for tile {record.index}")
    return layers
