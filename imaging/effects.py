"""Gaussian blur and unsharp-mask sharpening."""

from __future__ import annotations

import math
from collections.abc import Sequence

from imaging.nrgba import NRGBA
from imaging.scanner import ImageLike, Scanner
from imaging.tools import clone
from imaging.utils import clamp


def _gaussian(x: float, sigma: float) -> float:
    return math.exp(-(x * x) / (2 * sigma * sigma)) / (sigma * math.sqrt(2 * math.pi))


def _blur_line(line: bytes, kernel: Sequence[float]) -> bytearray:
    """Blur one row or column of RGBA pixels with a symmetric kernel."""
    radius = len(kernel) - 1
    n = len(line) // 4
    out = bytearray(len(line))
    for x in range(n):
        r = g = b = a = wsum = 0.0
        for ix in range(max(x - radius, 0), min(x + radius, n - 1) + 1):
            i = ix * 4
            weight = kernel[abs(x - ix)]
            wsum += weight
            wa = line[i + 3] * weight
            r += line[i] * wa
            g += line[i + 1] * wa
            b += line[i + 2] * wa
            a += wa
        if a != 0:
            inv = 1 / a
            out[x * 4 : x * 4 + 4] = bytes(
                (clamp(r * inv), clamp(g * inv), clamp(b * inv), clamp(a / wsum))
            )
    return out


def _blur_horizontal(img: ImageLike, kernel: Sequence[float]) -> NRGBA:
    src = Scanner(img)
    rows = (_blur_line(src.scan(0, y, src.w, y + 1), kernel) for y in range(src.h))
    return NRGBA(src.w, src.h, b"".join(rows))


def _blur_vertical(img: ImageLike, kernel: Sequence[float]) -> NRGBA:
    src = Scanner(img)
    stride = src.w * 4
    pix = bytearray(stride * src.h)
    for x in range(src.w):
        column = _blur_line(src.scan(x, 0, x + 1, src.h), kernel)
        for channel in range(4):
            pix[x * 4 + channel :: stride] = column[channel::4]
    return NRGBA(src.w, src.h, pix)


def blur(img: ImageLike, sigma: float) -> NRGBA:
    """Return a Gaussian-blurred copy; a sigma <= 0 returns an unchanged copy."""
    if sigma <= 0:
        return clone(img)
    radius = math.ceil(sigma * 3.0)
    kernel = [_gaussian(i, sigma) for i in range(radius + 1)]
    return _blur_vertical(_blur_horizontal(img, kernel), kernel)


def sharpen(img: ImageLike, sigma: float) -> NRGBA:
    """Return a sharpened copy; a sigma <= 0 returns an unchanged copy."""
    if sigma <= 0:
        return clone(img)
    src = Scanner(img)
    original = src.scan(0, 0, src.w, src.h)
    blurred = blur(img, sigma).pix
    pix = bytes(min(max(2 * s - b, 0), 255) for s, b in zip(original, blurred))
    return NRGBA(src.w, src.h, pix)