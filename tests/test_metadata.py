import struct

from vectiles.fixed import FixedNull
from vectiles.metadata import (
    INVALID_FEATURE_ID,
    Feature,
    FeatureTag,
    Metadata,
    MetadataValueType,
    encode_bool,
    encode_integer,
    encode_numeric,
    encode_string,
)


def test_encode_bool():
    assert encode_bool(True) == bytes([MetadataValueType.BOOL_TRUE])
    assert encode_bool(False) == bytes([MetadataValueType.BOOL_FALSE])


def test_encode_string():
    assert encode_string("abc") == b"\x02abc"
    assert encode_string(b"xy") == b"\x02xy"


def test_encode_numeric_round_trip():
    data = encode_numeric(3.25)
    assert data[0] == MetadataValueType.NUMERIC
    assert len(data) == 9
    assert struct.unpack("<d", data[1:])[0] == 3.25


def test_encode_integer_round_trip():
    data = encode_integer(-42)
    assert data[0] == MetadataValueType.INTEGER
    assert struct.unpack("<q", data[1:])[0] == -42


def test_metadata_ordering_and_equality():
    items = [Metadata("b", b"x"), Metadata("a", b"z"), Metadata("a", b"y")]
    assert sorted(items) == [Metadata("a", b"y"), Metadata("a", b"z"), Metadata("b", b"x")]
    assert Metadata("k", b"v") == Metadata("k", b"v")


def test_feature_defaults():
    f = Feature()
    assert f.id == INVALID_FEATURE_ID
    assert f.meta == []
    assert f.geometry == FixedNull()


def test_feature_tag_values():
    assert FeatureTag(7) is FeatureTag.REQUIRED_FIXED_GEOMETRY_GEOMETRY
    assert FeatureTag.OTHER == 999