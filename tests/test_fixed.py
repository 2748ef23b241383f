import pytest

from vectiles.fixed import (
    FIXED_COORD_MAX,
    DeltaDecoder,
    DeltaEncoder,
    FixedNull,
    FixedPoint,
    FixedPolygon,
    FixedPolyline,
    SimplePolygon,
    area,
    fixed_to_latlng,
    latlng_to_fixed,
    shift,
)


def test_delta_round_trip():
    values = [100, 50, 50, 1_000_000, -3, 0]
    enc = DeltaEncoder(7)
    deltas = [enc.encode(v) for v in values]
    dec = DeltaDecoder(7)
    assert [dec.decode(d) for d in deltas] == values
    assert enc.curr == values[-1]


def test_delta_reset():
    enc = DeltaEncoder(0)
    enc.encode(10)
    enc.reset(3)
    assert enc.encode(3) == 0
    dec = DeltaDecoder(0)
    dec.reset(5)
    assert dec.decode(0) == 5


def test_latlng_round_trip():
    for lat, lng in [(49.87, 8.65), (-33.9, 151.2), (0.5, -0.5)]:
        x, y = latlng_to_fixed(lat, lng)
        lat2, lng2 = fixed_to_latlng(x, y)
        assert lat2 == pytest.approx(lat, abs=1e-5)
        assert lng2 == pytest.approx(lng, abs=1e-5)


def test_latlng_clamped_to_max():
    x, y = latlng_to_fixed(-90.0, 180.0)
    assert x == FIXED_COORD_MAX
    assert y <= FIXED_COORD_MAX


def test_latlng_orientation():
    x1, y1 = latlng_to_fixed(10.0, 10.0)
    x2, y2 = latlng_to_fixed(20.0, 20.0)
    assert x2 > x1
    assert y2 < y1


def test_area_clockwise_square():
    ring = [(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)]
    polygon = FixedPolygon([SimplePolygon(ring)])
    assert area(polygon) == 100


def test_area_hole_reduces():
    outer = [(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)]
    hole = [(2, 2), (4, 2), (4, 4), (2, 4), (2, 2)]
    full = area(FixedPolygon([SimplePolygon(outer)]))
    holed = area(FixedPolygon([SimplePolygon(outer, [hole])]))
    assert 0 < holed < full


def test_area_reversed_ring_is_negative():
    ring = [(0, 0), (0, 10), (10, 10), (10, 0), (0, 0)]
    assert area(SimplePolygon(list(reversed(ring)))) == -area(SimplePolygon(ring))


def test_area_of_non_polygons_is_zero():
    assert area(FixedNull()) == 0
    assert area(FixedPoint([(1, 2)])) == 0
    assert area(FixedPolyline([[(0, 0), (5, 5)]])) == 0


def test_shift_identity_at_max_zoom():
    line = FixedPolyline([[(1, 2), (3, 4)]])
    assert shift(line, 20) == line


def test_shift_point():
    assert shift(FixedPoint([(4096, 8192)]), 8) == FixedPoint([(1, 2)])


def test_shift_merges_duplicates_and_drops_degenerate():
    line = FixedPolyline([[(0, 0), (1, 1)], [(0, 0), (1 << 12, 0)]])
    result = shift(line, 8)
    assert isinstance(result, FixedPolyline)
    assert len(result.lines) == 1
    assert len(result.lines[0]) == 2


def test_shift_to_null():
    assert shift(FixedPolyline([[(0, 0), (1, 1)]]), 0) == FixedNull()
    assert shift(FixedNull(), 5) == FixedNull()
    tiny = FixedPolygon([SimplePolygon([(0, 0), (0, 1), (1, 1), (0, 0)])])
    assert shift(tiny, 0) == FixedNull()


def test_shift_invalid_zoom():
    with pytest.raises(ValueError):
        shift(FixedPoint([(1, 1)]), 21)