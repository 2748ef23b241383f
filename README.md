# vectiles

Pure-Python building blocks for producing vector map tiles.

## Modules

- `vectiles.fixed`: fixed-point Web Mercator geometry on zoom level 20
  (`FixedNull`, `FixedPoint`, `FixedPolyline`, `SimplePolygon`,
  `FixedPolygon`). It also has delta coding (`DeltaEncoder`, `DeltaDecoder`)
  and coordinate conversion (`latlng_to_fixed`, `fixed_to_latlng`). `area`
  gives the signed area of a polygon. `shift` moves a geometry down to a
  tile's zoom level, merges points that collapse onto each other and drops
  parts that become degenerate.
- `vectiles.tile_spec`: `Tile` (x, y, z) and `TileSpec`. `TileSpec` gives the
  tile's `px_bounds` on its own zoom level, and its `insert_bounds` and
  `draw_bounds` (with overdraw) on zoom level 20. An invalid tile raises
  `ValueError`.
- `vectiles.parse_tile_url`:
  - `url_decode` decodes percent escapes and `+` in a request target.
  - `parse_tile_url` turns a path ending in `z/x/y.mvt` into a `Tile`. It
    returns `None` for other paths and raises `ValueError` for malformed tile
    paths.
- `vectiles.mvt`: Mapbox Vector Tile geometry encoding.
  - `encode_geometry` returns the encoded type and geometry fields of a
    feature as bytes.
  - Also `encode_command`, `encode_zigzag32`, the `Command` and `GeomType`
    enums, and `PbfWriter`, a small protobuf field writer.
- `vectiles.metadata`: typed metadata values (`encode_bool`,
  `encode_string`, `encode_numeric`, `encode_integer`), `Metadata`, the
  `Feature` record and the `FeatureTag` field numbers.
- `vectiles.shapefile`: polygon shapefiles.
  - `read_shapefile` yields `SimplePolygon`s from the bytes of a `.shp` file.
  - `load_shapefile` does the same for the first `.shp` member of a zip
    archive.
  - Also the reading helpers `load_buffer`, `read_int_big`,
    `read_int_little` and `read_double_little`.
- `vectiles.hybrid_node_idx`: a compact, span-compressed index from node ids
  to coordinates.
  - `HybridNodeIdxBuilder` writes nodes in increasing order of absolute id.
  - `HybridNodeIdx.get_coords` looks up one node.
  - `HybridNodeIdx.get_coords_many` looks up many nodes in one pass and
    returns a dict of the nodes it found.
- `vectiles.util`: `compress_deflate` (zlib at best compression),
  `RegexMatcher`, `ScopedTimer`, `t_log`, `stou`, `transform_erase` and the
  number formatters `format_num`, `format_ns` and `format_bytes`.

## Installation

```
pip install .
```

## Examples

Parse a tile request and compute its bounds:

```python
from vectiles.parse_tile_url import parse_tile_url
from vectiles.tile_spec import TileSpec

tile = parse_tile_url("/10/533/346.mvt")
spec = TileSpec(tile)
print(spec.draw_bounds)
```

Encode a geometry for that tile:

```python
from vectiles.fixed import FixedPoint, latlng_to_fixed, shift
from vectiles.mvt import encode_geometry

point = FixedPoint([latlng_to_fixed(49.87, 8.65)])
geometry = shift(point, spec.tile.z)
encoded = encode_geometry(geometry, spec)  # bytes: type and geometry fields
```

Index node coordinates and look them up:

```python
from vectiles.hybrid_node_idx import HybridNodeIdxBuilder

builder = HybridNodeIdxBuilder()
builder.push(1, (100, 200))
builder.push(2, (105, 190))
builder.finish()

index = builder.nodes
print(index.get_coords(2))             # (105, 190)
print(index.get_coords_many([1, 2]))   # {1: (100, 200), 2: (105, 190)}
```

Read polygons from a zipped shapefile:

```python
from vectiles.shapefile import load_shapefile

for polygon in load_shapefile("coastlines.zip"):
    print(len(polygon.outer), len(polygon.inners))
```

## What it does not do

The package provides building blocks only. It does not do any of the
following:

- serve tiles over HTTP;
- store features or tiles in a database;
- read OpenStreetMap files;
- assemble complete tiles with layers and metadata tables.

`encode_geometry` produces only the geometry part of a feature.

## Running the tests

```
pip install .[test]
pytest
```