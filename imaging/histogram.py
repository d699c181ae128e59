"""Normalised luminance histogram of an image."""

from __future__ import annotations

import struct
from collections import Counter

from imaging.scanner import ImageLike, Scanner

_F32 = struct.Struct("f")


def _f32(v: float) -> float:
    """Round v to single precision."""
    return _F32.unpack(_F32.pack(v))[0]


_RED = [_f32(_f32(0.299) * c) for c in range(256)]
_GREEN = [_f32(_f32(0.587) * c) for c in range(256)]
_BLUE = [_f32(_f32(0.114) * c) for c in range(256)]


def _luminance(r: int, g: int, b: int) -> int:
    y = _f32(_f32(_RED[r] + _GREEN[g]) + _BLUE[b])
    return int(_f32(y + 0.5))


def histogram(img: ImageLike) -> list[float]:
    """Return 256 probabilities: entry i is the share of pixels with luminance i."""
    src = Scanner(img)
    if src.w == 0 or src.h == 0:
        return [0.0] * 256
    pix = src.scan(0, 0, src.w, src.h)
    counts = Counter(_luminance(r, g, b) for r, g, b in zip(pix[0::4], pix[1::4], pix[2::4]))
    total = float(src.w * src.h)
    return [counts.get(i, 0) / total for i in range(256)]