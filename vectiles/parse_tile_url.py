"""Decoding request targets and parsing ``/z/x/y.mvt`` tile URLs."""

from __future__ import annotations

import re
from typing import Optional

from .tile_spec import Tile

_HEX_PREFIX = re.compile(rb"[0-9A-Fa-f]+")


def url_decode(target: str) -> str:
    """Decode percent escapes and '+' in a request target."""
    raw = target.encode("utf-8", errors="surrogateescape")
    out = bytearray()
    i = 0
    while i < len(raw):
        c = raw[i]
        if c == ord("%"):
            if i + 3 > len(raw):
                raise ValueError("invalid url")
            digits = _HEX_PREFIX.match(raw[i + 1 : i + 3])
            if digits is None:
                raise ValueError("invalid url")
            out.append(int(digits.group(0), 16))
            i += 3
        elif c == ord("+"):
            out.append(ord(" "))
            i += 1
        else:
            out.append(c)
            i += 1
    return out.decode("utf-8", errors="surrogateescape")


def parse_tile_url(url: str) -> Optional[Tile]:
    """Return the tile of a URL ending in ``z/x/y.mvt``, or None for other URLs.

    Raises ValueError when the URL ends in ``.mvt`` but the last three path
    parts are not decimal numbers.
    """
    if not url.endswith(".mvt"):
        return None
    parts = url[: -len(".mvt")].split("/")
    if len(parts) < 3:
        raise ValueError(f"invalid url {url}")
    z_str, x_str, y_str = parts[-3:]
    for part in (z_str, x_str, y_str):
        if not part or not all(ch in "0123456789" for ch in part):
            raise ValueError(f"invalid url {url}")
    return Tile(x=int(x_str), y=int(y_str), z=int(z_str))