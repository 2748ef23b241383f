"""Reading polygon shapefiles, optionally from inside a zip archive."""

from __future__ import annotations

import struct
import zipfile
from typing import Iterator

from .fixed import SimplePolygon, latlng_to_fixed
from .util import t_log

_MAGIC = 9994
_VERSION = 1000
_SHAPE_POLYGON = 5
_HEADER_SIZE = 100


def _unpack(fmt: str, buf: bytes, pos: int):
    size = struct.calcsize(fmt)
    if pos < 0 or pos + size > len(buf):
        raise ValueError(f"shp: read beyond end of buffer at {pos}")
    return struct.unpack_from(fmt, buf, pos)[0]


def read_int_big(buf: bytes, pos: int) -> int:
    """Read a big-endian signed 32-bit integer."""
    return _unpack(">i", buf, pos)


def read_int_little(buf: bytes, pos: int) -> int:
    """Read a little-endian signed 32-bit integer."""
    return _unpack("<i", buf, pos)


def read_double_little(buf: bytes, pos: int) -> float:
    """Read a little-endian IEEE double."""
    return _unpack("<d", buf, pos)


def read_shapefile(buf: bytes) -> Iterator[SimplePolygon]:
    """Yield every polygon record of a .shp file as a fixed-coordinate polygon.

    The first non-empty part becomes the outer ring, every later part a hole.
    """
    if read_int_big(buf, 0) != _MAGIC:
        raise ValueError("shp: invalid magic number")
    if read_int_little(buf, 28) != _VERSION:
        raise ValueError("shp: invalid file version")
    if read_int_little(buf, 32) != _SHAPE_POLYGON:
        raise ValueError("shp: only polygons supported (main)")

    index = 0
    rh_offset = _HEADER_SIZE
    while rh_offset < len(buf):
        index += 1
        if read_int_big(buf, rh_offset) != index:
            raise ValueError("shp: unexpected index")

        rc_offset = rh_offset + 8
        if read_int_little(buf, rc_offset) != _SHAPE_POLYGON:
            raise ValueError("shp: only polygons supported")

        num_parts = read_int_little(buf, rc_offset + 36)
        num_points = read_int_little(buf, rc_offset + 40)
        if num_parts <= 0:
            raise ValueError("shp: need at least one part")
        if num_points <= 0:
            raise ValueError("shp: need at least one point")

        parts_offset = rc_offset + 44
        pts_offset = parts_offset + 4 * num_parts
        starts = [read_int_little(buf, parts_offset + 4 * i) for i in range(num_parts)]
        bounds = zip(starts, starts[1:] + [num_points])

        polygon = SimplePolygon()
        for lower, upper in bounds:
            if polygon.outer:
                ring = []
                polygon.inners.append(ring)
            else:
                ring = polygon.outer
            for i in range(upper - lower):
                pt_offset = pts_offset + 16 * i
                lng = read_double_little(buf, pt_offset)
                lat = read_double_little(buf, pt_offset + 8)
                ring.append(latlng_to_fixed(lat, lng))

        if not polygon.outer:
            raise ValueError("shp: read polygon is empty?!")
        yield polygon

        rh_offset += 8 + read_int_big(buf, rh_offset + 4) * 2
        if rh_offset > len(buf):
            raise ValueError("shp: offset limit violation")


def load_buffer(fname: str) -> bytes:
    """Return the contents of the first .shp member of a zip archive."""
    try:
        archive = zipfile.ZipFile(fname)
    except zipfile.BadZipFile as exc:
        raise ValueError("shp: invalid zip") from exc
    with archive:
        for info in archive.infolist():
            if len(info.filename) < 4 or not info.filename.endswith(".shp"):
                continue
            try:
                return archive.read(info)
            except (zipfile.BadZipFile, OSError) as exc:
                raise ValueError("shp: error extracting .shp file") from exc
    raise ValueError("shp: .zip file contains no .shp file")


def load_shapefile(fname: str) -> Iterator[SimplePolygon]:
    """Yield the polygons of the shapefile inside the zip archive ``fname``."""
    t_log("[load_shapefile] load buffer")
    buf = load_buffer(fname)
    t_log("[load_shapefile] read shapefile")
    yield from read_shapefile(buf)
    t_log("[load_shapefile] done.")