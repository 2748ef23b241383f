"""Encoding fixed geometries as Mapbox vector tile feature geometry."""

from __future__ import annotations

from enum import IntEnum
from typing import Iterable, List

from .fixed import (
    DeltaEncoder,
    FixedGeometry,
    FixedNull,
    FixedPoint,
    FixedPolygon,
    FixedPolyline,
    Point,
)
from .tile_spec import TileSpec

_UINT32_MASK = 0xFFFFFFFF
_UINT64_MASK = 0xFFFFFFFFFFFFFFFF

_WIRE_VARINT = 0
_WIRE_LENGTH_DELIMITED = 2


class Command(IntEnum):
    MOVE_TO = 1
    LINE_TO = 2
    CLOSE_PATH = 7


class GeomType(IntEnum):
    UNKNOWN = 0
    POINT = 1
    LINESTRING = 2
    POLYGON = 3


class _FeatureField(IntEnum):
    ID = 1
    TAGS = 2
    TYPE = 3
    GEOMETRY = 4


def _varint(value: int) -> bytes:
    value &= _UINT64_MASK
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


class PbfWriter:
    """Appends protocol buffer fields to a byte buffer."""

    def __init__(self) -> None:
        self._buf = bytearray()

    def _key(self, tag: int, wire_type: int) -> None:
        self._buf += _varint((int(tag) << 3) | wire_type)

    def add_varint(self, tag: int, value: int) -> None:
        """Add a varint field; negative values are written as 64-bit two's complement."""
        self._key(tag, _WIRE_VARINT)
        self._buf += _varint(int(value))

    def add_packed_uint32(self, tag: int, values: Iterable[int]) -> None:
        """Add a packed repeated uint32 field; nothing is written for no values."""
        payload = bytearray()
        for value in values:
            value = int(value)
            if not 0 <= value <= _UINT32_MASK:
                raise ValueError(f"value out of uint32 range: {value}")
            payload += _varint(value)
        if not payload:
            return
        self.add_bytes(tag, bytes(payload))

    def add_bytes(self, tag: int, data: bytes) -> None:
        """Add a length-delimited field."""
        self._key(tag, _WIRE_LENGTH_DELIMITED)
        self._buf += _varint(len(data))
        self._buf += data

    def getvalue(self) -> bytes:
        return bytes(self._buf)


def encode_command(cmd: Command, count: int) -> int:
    """Combine a command id and its repeat count into one command integer."""
    return ((int(cmd) & 0x7) | (count << 3)) & _UINT32_MASK


def encode_zigzag32(value: int) -> int:
    """Zigzag-encode a value taken as a 32-bit signed integer."""
    n = ((value + (1 << 31)) & _UINT32_MASK) - (1 << 31)
    return ((n << 1) ^ (n >> 31)) & _UINT32_MASK


def _encode_path(
    out: List[int],
    x_enc: DeltaEncoder,
    y_enc: DeltaEncoder,
    points: List[Point],
    close_path: bool,
) -> None:
    if len(points) <= 1:
        raise ValueError("encode_path: container polyline")

    out.append(encode_command(Command.MOVE_TO, 1))
    out.append(encode_zigzag32(x_enc.encode(points[0][0])))
    out.append(encode_zigzag32(y_enc.encode(points[0][1])))

    limit = len(points) - 2 if close_path else len(points) - 1
    out.append(encode_command(Command.LINE_TO, limit))
    for x, y in points[1 : limit + 1]:
        dx = x_enc.encode(x)
        dy = y_enc.encode(y)
        if dx == 0 and dy == 0:
            raise ValueError("encode_path: both deltas are zero")
        out.append(encode_zigzag32(dx))
        out.append(encode_zigzag32(dy))

    if close_path:
        out.append(encode_command(Command.CLOSE_PATH, 1))


def encode_geometry(geometry: FixedGeometry, spec: TileSpec) -> bytes:
    """Return the type and geometry fields of a vector tile feature.

    Coordinates are taken relative to the tile's pixel bounds; an empty
    geometry yields no fields.
    """
    if isinstance(geometry, FixedNull):
        return b""

    x_enc = DeltaEncoder(spec.px_bounds[0])
    y_enc = DeltaEncoder(spec.px_bounds[1])
    commands: List[int] = []
    writer = PbfWriter()

    if isinstance(geometry, FixedPoint):
        writer.add_varint(_FeatureField.TYPE, GeomType.POINT)
        commands.append(encode_command(Command.MOVE_TO, len(geometry.points)))
        for x, y in geometry.points:
            commands.append(encode_zigzag32(x_enc.encode(x)))
            commands.append(encode_zigzag32(y_enc.encode(y)))
    elif isinstance(geometry, FixedPolyline):
        writer.add_varint(_FeatureField.TYPE, GeomType.LINESTRING)
        for line in geometry.lines:
            _encode_path(commands, x_enc, y_enc, line, close_path=False)
    elif isinstance(geometry, FixedPolygon):
        writer.add_varint(_FeatureField.TYPE, GeomType.POLYGON)
        if not geometry.polygons:
            raise ValueError("multi_polygon empty")
        for polygon in geometry.polygons:
            _encode_path(commands, x_enc, y_enc, polygon.outer, close_path=True)
            for inner in polygon.inners:
                _encode_path(commands, x_enc, y_enc, inner, close_path=True)
    else:
        raise TypeError(f"encode_geometry: unsupported geometry {type(geometry).__name__}")

    writer.add_packed_uint32(_FeatureField.GEOMETRY, commands)
    return writer.getvalue()