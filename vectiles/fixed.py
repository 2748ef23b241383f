"""Fixed-point web-mercator geometry, delta coding, area and zoom shifting."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List, Tuple, Union

from .util import transform_erase

MAX_ZOOM_LEVEL = 20
TILE_SIZE = 4096

FIXED_DEFAULT_ZOOM_LEVEL = 20
FIXED_COORD_MIN = 0
FIXED_COORD_MAX = (TILE_SIZE << MAX_ZOOM_LEVEL) - 1
FIXED_COORD_MAGIC_OFFSET = FIXED_COORD_MAX // 2

_INT64_MAX = (1 << 63) - 1
INVALID_XY = (_INT64_MAX, _INT64_MAX)

_MAX_LATITUDE = 85.0511287798066

Point = Tuple[int, int]
Ring = List[Point]


@dataclass(frozen=True)
class FixedNull:
    """The empty geometry."""


@dataclass
class FixedPoint:
    """A multi point."""

    points: List[Point] = field(default_factory=list)


@dataclass
class FixedPolyline:
    """A multi line string; every line is a list of points."""

    lines: List[List[Point]] = field(default_factory=list)


@dataclass
class SimplePolygon:
    """A polygon with one outer ring and any number of holes."""

    outer: Ring = field(default_factory=list)
    inners: List[Ring] = field(default_factory=list)


@dataclass
class FixedPolygon:
    """A multi polygon."""

    polygons: List[SimplePolygon] = field(default_factory=list)


FixedGeometry = Union[FixedNull, FixedPoint, FixedPolyline, FixedPolygon]


class DeltaEncoder:
    """Turns a sequence of coordinates into differences to the previous one."""

    def __init__(self, init: int) -> None:
        self.curr = init

    def reset(self, value: int) -> None:
        self.curr = value

    def encode(self, value: int) -> int:
        delta = value - self.curr
        self.curr = value
        return delta


class DeltaDecoder:
    """Accumulates differences back into absolute coordinates."""

    def __init__(self, init: int) -> None:
        self.curr = init

    def reset(self, value: int) -> None:
        self.curr = value

    def decode(self, delta: int) -> int:
        self.curr += delta
        return self.curr


def _map_size(z: int) -> int:
    return TILE_SIZE << z


def latlng_to_fixed(lat: float, lng: float) -> Point:
    """Project a WGS84 position to fixed pixel coordinates on the default zoom level."""
    size = _map_size(FIXED_DEFAULT_ZOOM_LEVEL)
    lat = max(-_MAX_LATITUDE, min(_MAX_LATITUDE, lat))
    rad = math.radians(lat)
    merc_y = math.log(math.tan(math.pi / 4 + rad / 2))
    px = (lng + 180.0) / 360.0 * size
    py = (1.0 - merc_y / math.pi) / 2.0 * size
    return (min(int(px), FIXED_COORD_MAX), min(int(py), FIXED_COORD_MAX))


def fixed_to_latlng(x: int, y: int) -> Tuple[float, float]:
    """Return (lat, lng) of a fixed pixel position on the default zoom level."""
    size = _map_size(FIXED_DEFAULT_ZOOM_LEVEL)
    lng = x / size * 360.0 - 180.0
    lat = math.degrees(math.atan(math.sinh(math.pi * (1.0 - 2.0 * y / size))))
    return (lat, lng)


def _ring_double_area(ring: Ring) -> int:
    if not ring:
        return 0
    closed = ring[1:] + ring[:1]
    return sum(a[0] * b[1] - b[0] * a[1] for a, b in zip(ring, closed))


def _halve_towards_zero(value: int) -> int:
    q = abs(value) // 2
    return q if value >= 0 else -q


def _simple_polygon_double_area(polygon: SimplePolygon) -> int:
    return _ring_double_area(polygon.outer) + sum(
        _ring_double_area(inner) for inner in polygon.inners
    )


def area(geometry) -> int:
    """Signed area; clockwise outer rings count positive, holes negative."""
    if isinstance(geometry, FixedPolygon):
        total = sum(_simple_polygon_double_area(p) for p in geometry.polygons)
    elif isinstance(geometry, SimplePolygon):
        total = _simple_polygon_double_area(geometry)
    elif isinstance(geometry, (FixedNull, FixedPoint, FixedPolyline, tuple)):
        return 0
    else:
        raise TypeError(f"area: unsupported geometry {type(geometry).__name__}")
    return _halve_towards_zero(-total)


def _shift_container(points: List[Point], delta_z: int) -> List[Point]:
    items = list(points)
    transform_erase(items, lambda p: (p[0] >> delta_z, p[1] >> delta_z))
    return items


def shift(geometry: FixedGeometry, z: int) -> FixedGeometry:
    """Move a geometry from the default zoom level down to zoom ``z``.

    Consecutive points that collapse onto each other are merged; parts that
    become degenerate are dropped, and an emptied geometry becomes FixedNull.
    """
    if not 0 <= z <= MAX_ZOOM_LEVEL:
        raise ValueError(f"invalid zoom level {z}")
    delta_z = MAX_ZOOM_LEVEL - z

    if isinstance(geometry, FixedNull):
        return FixedNull()

    if isinstance(geometry, FixedPoint):
        points = _shift_container(geometry.points, delta_z)
        return FixedPoint(points) if points else FixedNull()

    if isinstance(geometry, FixedPolyline):
        lines = [_shift_container(line, delta_z) for line in geometry.lines]
        lines = [line for line in lines if len(line) >= 2]
        return FixedPolyline(lines) if lines else FixedNull()

    if isinstance(geometry, FixedPolygon):
        polygons = []
        for polygon in geometry.polygons:
            outer = _shift_container(polygon.outer, delta_z)
            inners = [_shift_container(ring, delta_z) for ring in polygon.inners]
            inners = [ring for ring in inners if len(ring) >= 3]
            if len(outer) >= 3:
                polygons.append(SimplePolygon(outer, inners))
        return FixedPolygon(polygons) if polygons else FixedNull()

    raise TypeError(f"shift: unsupported geometry {type(geometry).__name__}")