import pytest

from vectiles.fixed import FIXED_COORD_MAX
from vectiles.tile_spec import OVERDRAW, Tile, TileSpec


def test_root_tile_bounds():
    spec = TileSpec(Tile(0, 0, 0))
    assert spec.px_bounds == (0, 0, 4096, 4096)
    assert spec.insert_bounds == (0, 0, FIXED_COORD_MAX + 1, FIXED_COORD_MAX + 1)
    assert spec.draw_bounds == (
        -OVERDRAW,
        -OVERDRAW,
        FIXED_COORD_MAX + 1 + OVERDRAW,
        FIXED_COORD_MAX + 1 + OVERDRAW,
    )


def test_max_zoom_insert_equals_px():
    spec = TileSpec(Tile(3, 5, 20))
    assert spec.insert_bounds == spec.px_bounds


def test_children_partition_parent():
    parent = TileSpec(Tile(1, 1, 1))
    children = [TileSpec(Tile(2 + dx, 2 + dy, 2)) for dx in (0, 1) for dy in (0, 1)]
    assert min(c.insert_bounds[0] for c in children) == parent.insert_bounds[0]
    assert max(c.insert_bounds[2] for c in children) == parent.insert_bounds[2]
    assert min(c.insert_bounds[1] for c in children) == parent.insert_bounds[1]
    assert max(c.insert_bounds[3] for c in children) == parent.insert_bounds[3]


def test_invalid_zoom():
    with pytest.raises(ValueError):
        TileSpec(Tile(0, 0, 21))


def test_tile_does_not_exist():
    with pytest.raises(ValueError, match="tile does not exist"):
        TileSpec(Tile(4, 0, 2))