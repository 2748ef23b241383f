"""Building blocks for vector map tiles: fixed-point geometry, tile bounds,
vector tile geometry encoding, shapefile reading and a node coordinate index."""

__version__ = "0.1.0"