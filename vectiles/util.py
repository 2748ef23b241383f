"""Small helpers: compression, regex matching, timing, logging and number formatting."""

from __future__ import annotations

import re
import sys
import time
import zlib
from datetime import datetime, timezone
from typing import Callable, List, Optional, TypeVar

T = TypeVar("T")

_UINT32_MAX = 0xFFFFFFFF


def t_log(fmt: str, *args: object) -> None:
    """Write a UTC-timestamped log line to stderr."""
    stamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")
    sys.stderr.write(f"{stamp} | {fmt.format(*args)}\n")
    sys.stderr.flush()


def compress_deflate(data: bytes | str) -> bytes:
    """Compress with zlib at the best compression level."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    try:
        return zlib.compress(data, zlib.Z_BEST_COMPRESSION)
    except zlib.error as exc:
        raise RuntimeError("compress_deflate failed") from exc


class RegexMatcher:
    """Matches a whole string against a pattern and returns all groups."""

    def __init__(self, pattern: str) -> None:
        self._regex = re.compile(pattern)

    def match(self, target: str) -> Optional[List[str]]:
        """Return the full match followed by every group, or None.

        Groups that took no part in the match come back as empty strings.
        """
        found = self._regex.fullmatch(target)
        if found is None:
            return None
        return [found.group(0)] + [g if g is not None else "" for g in found.groups()]


class ScopedTimer:
    """Context manager that logs the start and duration of a block to stderr."""

    def __init__(self, label: str) -> None:
        self.label = label
        self._start = 0.0

    def __enter__(self) -> "ScopedTimer":
        sys.stderr.write(f"|> start: {self.label}\n")
        self._start = time.monotonic()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        dur = (time.monotonic() - self._start) * 1000.0
        if dur < 1000:
            text = f"{dur:6.4g}ms"
        else:
            text = f"{dur / 1000:6.4g}s"
        sys.stderr.write(f"|> done: {self.label} ({text})\n")
        sys.stderr.flush()


def transform_erase(items: List[T], fn: Callable[[T], T]) -> None:
    """Replace each element by ``fn(element)`` and drop consecutive duplicates, in place."""
    result: List[T] = []
    for item in items:
        value = fn(item)
        if not result or not (result[-1] == value):
            result.append(value)
    items[:] = result


def stou(text: str) -> int:
    """Parse the leading decimal digits of ``text`` as an unsigned 32-bit integer."""
    digits = re.match(r"[0-9]+", text)
    if digits is None:
        raise ValueError(f"cannot convert to uint32_t: {text}")
    value = int(digits.group(0))
    if value > _UINT32_MAX:
        raise ValueError(f"cannot convert to uint32_t: {text}")
    return value


def _shortest(n: float) -> str:
    if n == int(n) and abs(n) < 1e16:
        return str(int(n))
    return repr(n)


def format_num(n: float) -> str:
    """Format a count with K/M/G suffixes."""
    n = float(n)
    if n < 1e3:
        return f"{_shortest(n):>6} "
    if n / 1e3 < 1e3:
        return f"{n / 1e3:>6.1f}K"
    if n / 1e6 < 1e3:
        return f"{n / 1e6:>6.1f}M"
    return f"{n / 1e9:>6.1f}G"


def format_ns(n: float) -> str:
    """Format a duration given in nanoseconds."""
    ns = float(n)
    if ns < 1e3:
        return f"{ns:>7.3f}ns"
    if ns / 1e3 < 1e3:
        return f"{ns / 1e3:>7.3f}µs"
    if ns / 1e6 < 1e3:
        return f"{ns / 1e6:>7.3f}ms"
    return f"{ns / 1e9:>7.3f}s "


def format_bytes(n: float) -> str:
    """Format a byte count with binary KB/MB/GB suffixes."""
    b = float(n)
    if b < 1024:
        return f"{b:>7.2f}B "
    if b / 1024 < 1024:
        return f"{b / 1024:>7.2f}KB"
    if b / (1024 * 1024) < 1024:
        return f"{b / (1024 * 1024):>7.2f}MB"
    return f"{b / (1024 * 1024 * 1024):>7.2f}GB"