"""Compact node-id to coordinate index built from id-sorted node streams.

The data buffer is a sequence of spans covering consecutive node ids:

* a coordinate span starts with the varint ``(n << 1) | 0`` and holds
  ``n + 1`` nodes: the first node's x and y as little-endian uint32, then
  zigzag varint deltas for the x and y of every following node;
* an empty span is the varint ``(n << 1) | 1`` and stands for ``n`` ids
  that have no node;
* an empty span with ``n == 0`` marks the end of the data.

The index holds sorted ``(node id, offset)`` pairs pointing at span headers.
"""

from __future__ import annotations

from bisect import bisect_left
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Tuple

from .fixed import DeltaDecoder, DeltaEncoder, Point
from .util import t_log

_UINT32_MAX = 0xFFFFFFFF
_UINT64_MASK = 0xFFFFFFFFFFFFFFFF
_INT64_MIN = -(1 << 63)

_COORDINATE_PRECISION = 10_000_000
_COORDS_PER_INDEX = 1024
_REINIT_DISTANCE = 1024
_STAT_SPAN_CUM_SIZE_LIMITS = (1, 64, 100, 1000, 10000)


def _decode_varint(data: bytes | bytearray, pos: int) -> Tuple[int, int]:
    value = 0
    shift = 0
    while True:
        if pos >= len(data):
            raise ValueError("hybrid_node_idx: truncated varint")
        byte = data[pos]
        pos += 1
        value |= (byte & 0x7F) << shift
        if byte < 0x80:
            return value, pos
        shift += 7
        if shift >= 70:
            raise ValueError("hybrid_node_idx: varint too long")


def _skip_varint(data: bytes | bytearray, pos: int) -> int:
    return _decode_varint(data, pos)[1]


def _encode_varint(value: int) -> bytes:
    value &= _UINT64_MASK
    out = bytearray()
    while value >= 0x80:
        out.append((value & 0x7F) | 0x80)
        value >>= 7
    out.append(value)
    return bytes(out)


def _encode_zigzag64(value: int) -> int:
    return ((value << 1) ^ (value >> 63)) & _UINT64_MASK


def _decode_zigzag64(value: int) -> int:
    return (value >> 1) ^ -(value & 1)


def _varint_size(value: int) -> int:
    return len(_encode_varint(value))


def _read_fixed(data: bytes | bytearray, pos: int) -> Tuple[int, int]:
    if pos + 4 > len(data):
        raise ValueError("hybrid_node_idx: truncated fixed value")
    return int.from_bytes(data[pos : pos + 4], "little"), pos + 4


class _State(Enum):
    FROM_INDEX = auto()
    AT_SPAN_START = auto()
    IN_SPAN = auto()


class HybridNodeIdx:
    """Lookup of node coordinates by node id; the sign of an id is ignored."""

    X_OFFSET = 180 * _COORDINATE_PRECISION
    Y_OFFSET = 90 * _COORDINATE_PRECISION

    def __init__(self) -> None:
        self.idx: List[Tuple[int, int]] = []
        self.dat = bytearray()

    def _index_position(self, abs_id: int) -> int:
        return bisect_left(self.idx, abs_id, key=lambda entry: entry[0])

    def get_coords(self, node_id: int) -> Optional[Point]:
        """Return the coordinates of one node, or None if it is not stored."""
        idx, dat = self.idx, self.dat
        if not idx:
            return None
        abs_id = abs(node_id)
        i = self._index_position(abs_id)
        if i == 0 and idx[0][0] != abs_id:
            return None
        if i == len(idx) or idx[i][0] != abs_id:
            i -= 1

        curr_id, pos = idx[i]
        while curr_id <= abs_id and pos != len(dat):
            header, pos = _decode_varint(dat, pos)
            span_size = header >> 1
            if header & 0x1:
                if span_size == 0:
                    break
                curr_id += span_size
                continue

            x0, pos = _read_fixed(dat, pos)
            y0, pos = _read_fixed(dat, pos)
            x_dec = DeltaDecoder(x0)
            y_dec = DeltaDecoder(y0)
            if curr_id == abs_id:
                return (x_dec.curr, y_dec.curr)
            curr_id += 1

            for _ in range(span_size):
                raw_x, pos = _decode_varint(dat, pos)
                raw_y, pos = _decode_varint(dat, pos)
                x = x_dec.decode(_decode_zigzag64(raw_x))
                y = y_dec.decode(_decode_zigzag64(raw_y))
                if curr_id == abs_id:
                    return (x, y)
                curr_id += 1
        return None

    def get_coords_many(self, node_ids: Iterable[int]) -> Dict[int, Point]:
        """Look up many nodes in one sorted pass.

        Returns a mapping from each requested id that was found to its
        coordinates; ids that are not stored are absent from the result.
        """
        idx, dat = self.idx, self.dat
        result: Dict[int, Point] = {}
        if not idx:
            return result

        queries = sorted(node_ids, key=abs)
        count = len(queries)
        q = 0
        while q < count and abs(queries[q]) < idx[0][0]:
            q += 1

        state = _State.FROM_INDEX
        curr_id = _INT64_MIN
        pos = 0
        span_size = 0
        span_pos = 0
        x_dec = DeltaDecoder(0)
        y_dec = DeltaDecoder(0)

        while q < count:
            query_id = abs(queries[q])

            if state is _State.FROM_INDEX:
                i = self._index_position(query_id)
                if i == 0 and idx[0][0] != query_id:
                    raise RuntimeError("missing (cannot happen)")
                if i == len(idx) or idx[i][0] != query_id:
                    i -= 1
                curr_id, pos = idx[i]
                state = _State.AT_SPAN_START

            elif state is _State.AT_SPAN_START:
                header, pos = _decode_varint(dat, pos)
                span_size = header >> 1
                if header & 0x1:
                    if span_size == 0:
                        return result
                    curr_id += span_size
                    continue
                span_size += 1
                span_pos = 0

                if query_id < curr_id:
                    while q < count and abs(queries[q]) < curr_id:
                        q += 1
                    x0, pos = _read_fixed(dat, pos)
                    y0, pos = _read_fixed(dat, pos)
                    x_dec.reset(x0)
                    y_dec.reset(y0)
                    state = _State.IN_SPAN
                    continue

                if query_id < curr_id + span_size:
                    x0, pos = _read_fixed(dat, pos)
                    y0, pos = _read_fixed(dat, pos)
                    x_dec.reset(x0)
                    y_dec.reset(y0)
                    state = _State.IN_SPAN
                    continue

                pos += 8
                for _ in range(span_size - 1):
                    pos = _skip_varint(dat, pos)
                    pos = _skip_varint(dat, pos)
                curr_id += span_size

            else:
                if query_id < curr_id + (span_size - span_pos):
                    while curr_id != query_id:
                        if pos == len(dat):
                            raise RuntimeError("hit end(dat)")
                        if span_pos >= span_size:
                            raise RuntimeError("hit end of span")
                        raw_x, pos = _decode_varint(dat, pos)
                        raw_y, pos = _decode_varint(dat, pos)
                        x_dec.decode(_decode_zigzag64(raw_x))
                        y_dec.decode(_decode_zigzag64(raw_y))
                        curr_id += 1
                        span_pos += 1
                    while q < count and abs(queries[q]) == query_id:
                        result[queries[q]] = (x_dec.curr, y_dec.curr)
                        q += 1
                    continue

                if query_id > curr_id + _REINIT_DISTANCE:
                    state = _State.FROM_INDEX
                    continue

                span_pos += 1
                while span_pos < span_size:
                    pos = _skip_varint(dat, pos)
                    pos = _skip_varint(dat, pos)
                    curr_id += 1
                    span_pos += 1
                curr_id += 1
                state = _State.AT_SPAN_START

        return result


class HybridNodeIdxBuilder:
    """Writes nodes, sorted by absolute id, into a HybridNodeIdx."""

    def __init__(self, nodes: Optional[HybridNodeIdx] = None) -> None:
        self.nodes = nodes if nodes is not None else HybridNodeIdx()
        self._last_id = _INT64_MIN
        self._last_pos: Point = (0, 0)
        self._span: List[Point] = []
        self._coords_written = 0

        self._stat_nodes = 0
        self._stat_spans = 0
        self._stat_coord_chars = [0] * 10
        self._stat_span_cum_sizes = [0] * len(_STAT_SPAN_CUM_SIZE_LIMITS)

    def push(self, node_id: int, pos: Point) -> None:
        """Add a node; ids must arrive in increasing order of absolute value."""
        x, y = pos
        if not (0 <= x <= _UINT32_MAX and 0 <= y <= _UINT32_MAX):
            raise ValueError(
                f"pos ({x}, {y}) not within bounds (0 / {_UINT32_MAX})"
            )

        abs_id = abs(node_id)
        if abs_id == self._last_id:
            if (x, y) != self._last_pos:
                raise ValueError(
                    "input: duplicate absolute node id with mismatching "
                    f"coordinates {abs_id}"
                )
            return

        if abs_id <= self._last_id:
            raise ValueError(
                f"input: node ids are not sorted! {abs_id} <= {self._last_id}"
            )
        self._stat_nodes += 1

        if self._last_id + 1 != abs_id and self._span:
            self._push_coord_span()
            self._push_empty_span(abs_id)

        self._last_id = abs_id
        self._last_pos = (x, y)
        self._span.append((x, y))

    def finish(self) -> None:
        """Write the pending span and the end marker."""
        self._push_coord_span()
        self._push_empty_span(self._last_id + 1)

    def _push_coord_span(self) -> None:
        span = self._span
        if not span:
            return

        dat = self.nodes.dat
        if not self.nodes.idx or self._coords_written > _COORDS_PER_INDEX:
            start_id = self._last_id - len(span) + 1
            self.nodes.idx.append((start_id, len(dat)))
            self._coords_written = 0

        x_enc = DeltaEncoder(0)
        y_enc = DeltaEncoder(0)
        i = 0
        while i < len(span):
            x_enc.reset(span[i][0])
            y_enc.reset(span[i][1])

            j = i + 1
            while j < len(span):
                sx = _varint_size(_encode_zigzag64(x_enc.encode(span[j][0])))
                sy = _varint_size(_encode_zigzag64(y_enc.encode(span[j][1])))
                if sx + sy > 2 * 4 + 1:
                    break
                self._stat_coord_chars[sx if sx < 10 else 0] += 1
                self._stat_coord_chars[sy if sy < 10 else 0] += 1
                j += 1

            span_size = j - i
            dat += _encode_varint((span_size - 1) << 1)
            dat += span[i][0].to_bytes(4, "little")
            dat += span[i][1].to_bytes(4, "little")

            x_enc.reset(span[i][0])
            y_enc.reset(span[i][1])
            for x, y in span[i + 1 : j]:
                dat += _encode_varint(_encode_zigzag64(x_enc.encode(x)))
                dat += _encode_varint(_encode_zigzag64(y_enc.encode(y)))
            i = j

            self._stat_spans += 1
            for k, limit in enumerate(_STAT_SPAN_CUM_SIZE_LIMITS):
                if span_size <= limit:
                    self._stat_span_cum_sizes[k] += 1

        self._coords_written += len(span)
        span.clear()

    def _push_empty_span(self, next_id: int) -> None:
        self.nodes.dat += _encode_varint(((next_id - self._last_id - 1) << 1) | 0x1)

    def dump_stats(self) -> None:
        """Log sizes and span statistics."""
        t_log("index size: {} entries", len(self.nodes.idx))
        t_log("data size: {} bytes", len(self.nodes.dat))
        t_log("builder: nodes {}", self._stat_nodes)
        t_log("builder: spans {}", self._stat_spans)
        for chars, amount in enumerate(self._stat_coord_chars):
            t_log("builder: coord chars {} {}", chars, amount)
        for limit, amount in zip(_STAT_SPAN_CUM_SIZE_LIMITS, self._stat_span_cum_sizes):
            t_log("builder: cum spans <= {:>5} {:>12}", limit, amount)

    def stat_spans(self) -> int:
        """Number of coordinate spans written so far."""
        return self._stat_spans