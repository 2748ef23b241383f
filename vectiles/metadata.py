"""Feature metadata encoding and the feature record."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Tuple

from .fixed import FixedGeometry, FixedNull

INVALID_FEATURE_ID = (1 << 64) - 1
INVALID_LAYER_ID = (1 << 64) - 1
INVALID_ZOOM_LEVEL = 0x3F
INVALID_BOX_HINT = (1 << 63) - 1


class MetadataValueType(IntEnum):
    BOOL_FALSE = 0
    BOOL_TRUE = 1
    STRING = 2
    NUMERIC = 3
    INTEGER = 4


def encode_bool(value: bool) -> bytes:
    """Encode a boolean metadata value."""
    kind = MetadataValueType.BOOL_TRUE if value else MetadataValueType.BOOL_FALSE
    return bytes([kind])


def encode_string(value: str | bytes) -> bytes:
    """Encode a string metadata value."""
    if isinstance(value, str):
        value = value.encode("utf-8")
    return bytes([MetadataValueType.STRING]) + value


def encode_numeric(value: float) -> bytes:
    """Encode a floating point metadata value."""
    return bytes([MetadataValueType.NUMERIC]) + struct.pack("<d", value)


def encode_integer(value: int) -> bytes:
    """Encode a signed 64-bit integer metadata value."""
    return bytes([MetadataValueType.INTEGER]) + struct.pack("<q", value)


@dataclass(order=True, frozen=True)
class Metadata:
    """A key with an encoded value; ordered by key, then value."""

    key: str = ""
    value: bytes = b""


@dataclass
class Feature:
    """A feature as stored in the tile database."""

    id: int = INVALID_FEATURE_ID
    layer: int = INVALID_LAYER_ID
    zoom_levels: Tuple[int, int] = (0, 0)
    meta: List[Metadata] = field(default_factory=list)
    geometry: FixedGeometry = field(default_factory=FixedNull)


class FeatureTag(IntEnum):
    PACKED_SINT64_HEADER = 1
    REQUIRED_UINT64_ID = 2
    PACKED_UINT64_META_PAIRS = 3
    REPEATED_STRING_KEYS = 4
    REPEATED_STRING_VALUES = 5
    REPEATED_STRING_SIMPLIFY_MASKS = 6
    REQUIRED_FIXED_GEOMETRY_GEOMETRY = 7
    OTHER = 999