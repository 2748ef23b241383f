import re
import zlib

import pytest

from vectiles.util import (
    RegexMatcher,
    ScopedTimer,
    compress_deflate,
    format_bytes,
    format_ns,
    format_num,
    stou,
    t_log,
    transform_erase,
)


def test_compress_deflate_round_trip():
    data = b"hello tiles " * 100
    packed = compress_deflate(data)
    assert zlib.decompress(packed) == data
    assert len(packed) < len(data)


def test_compress_deflate_accepts_text():
    assert zlib.decompress(compress_deflate("abc")) == b"abc"


def test_regex_matcher_groups():
    matcher = RegexMatcher(r"^\/glyphs/(.+)$")
    assert matcher.match("/glyphs/font/0-255.pbf") == [
        "/glyphs/font/0-255.pbf",
        "font/0-255.pbf",
    ]


def test_regex_matcher_requires_full_match():
    matcher = RegexMatcher(r"ab")
    assert matcher.match("abc") is None
    assert matcher.match("ab") == ["ab"]


def test_regex_matcher_unmatched_group_is_empty():
    matcher = RegexMatcher(r"(a)|(b)")
    assert matcher.match("b") == ["b", "", "b"]


def test_stou_parses_digits():
    assert stou("123") == 123
    assert stou("12ab") == 12
    assert stou("4294967295") == 4294967295


@pytest.mark.parametrize("text", ["abc", "", "-1", "4294967296"])
def test_stou_rejects(text):
    with pytest.raises(ValueError):
        stou(text)


def test_transform_erase_dedupes_consecutive():
    items = [1, 2, 3, 8, 9, 1]
    transform_erase(items, lambda v: v // 2)
    assert items == [0, 1, 4, 0]


def test_transform_erase_empty():
    items = []
    transform_erase(items, lambda v: v)
    assert items == []


def test_format_num_small_is_plain():
    assert format_num(5) == "     5 "


@pytest.mark.parametrize(
    "value,suffix", [(1500, "K"), (2_500_000, "M"), (3_000_000_000, "G")]
)
def test_format_num_suffixes(value, suffix):
    text = format_num(value)
    assert text.endswith(suffix)
    assert len(text) == 7


@pytest.mark.parametrize(
    "value,suffix",
    [(500, "ns"), (5_000, "µs"), (5_000_000, "ms"), (5_000_000_000, "s ")],
)
def test_format_ns_suffixes(value, suffix):
    text = format_ns(value)
    assert text.endswith(suffix)
    assert len(text) == 9


def test_format_bytes_small():
    assert format_bytes(512) == " 512.00B "


@pytest.mark.parametrize(
    "value,suffix", [(2048, "KB"), (3 * 1024 * 1024, "MB"), (5 * 1024**3, "GB")]
)
def test_format_bytes_suffixes(value, suffix):
    text = format_bytes(value)
    assert text.endswith(suffix)
    assert len(text) == 9


def test_t_log_writes_timestamped_line(capsys):
    t_log("hello {} {}", 3, "x")
    err = capsys.readouterr().err
    match = re.fullmatch(r"(\d{4}-\d\d-\d\dT\d\d:\d\d:\d\dZ) \| (.*)\n", err)
    assert match is not None
    assert match.group(2) == "hello 3 x"
    assert len(match.group(1)) == 20


def test_scoped_timer_logs_start_and_done(capsys):
    with ScopedTimer("work") as timer:
        assert timer.label == "work"
    err = capsys.readouterr().err
    lines = err.splitlines()
    assert lines[0] == "|> start: work"
    assert re.fullmatch(r"\|> done: work \(.*(ms|s)\)", lines[1])