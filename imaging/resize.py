"""Resizing images with resampling filters, plus fit, fill and thumbnail helpers."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from imaging.nrgba import NRGBA
from imaging.scanner import ImageLike, Scanner
from imaging.tools import Anchor, clone, crop_anchor
from imaging.utils import clamp

Weights = list[list[tuple[int, float]]]


@dataclass(frozen=True)
class ResampleFilter:
    """A resampling filter: a kernel function and the radius it covers.

    A filter with support <= 0 selects nearest-neighbour resampling and
    needs no kernel.
    """

    support: float
    kernel: Callable[[float], float] | None = None


def _bcspline(x: float, b: float, c: float) -> float:
    x = abs(x)
    if x < 1.0:
        return ((12 - 9 * b - 6 * c) * x**3 + (-18 + 12 * b + 6 * c) * x**2 + (6 - 2 * b)) / 6
    if x < 2.0:
        return (
            (-b - 6 * c) * x**3 + (6 * b + 30 * c) * x**2 + (-12 * b - 48 * c) * x + (8 * b + 24 * c)
        ) / 6
    return 0.0


def _sinc(x: float) -> float:
    if x == 0:
        return 1.0
    return math.sin(math.pi * x) / (math.pi * x)


def _limited(support: float, fn: Callable[[float], float]) -> Callable[[float], float]:
    """Wrap fn so that it is evaluated on |x| and is zero from support on."""

    def kernel(x: float) -> float:
        x = abs(x)
        return fn(x) if x < support else 0.0

    return kernel


def _box(x: float) -> float:
    return 1.0 if abs(x) <= 0.5 else 0.0


NEAREST_NEIGHBOR = ResampleFilter(0.0)
BOX = ResampleFilter(0.5, _box)
LINEAR = ResampleFilter(1.0, _limited(1.0, lambda x: 1.0 - x))
HERMITE = ResampleFilter(1.0, _limited(1.0, lambda x: _bcspline(x, 0.0, 0.0)))
MITCHELL_NETRAVALI = ResampleFilter(
    2.0, _limited(2.0, lambda x: _bcspline(x, 1.0 / 3.0, 1.0 / 3.0))
)
CATMULL_ROM = ResampleFilter(2.0, _limited(2.0, lambda x: _bcspline(x, 0.0, 0.5)))
BSPLINE = ResampleFilter(2.0, _limited(2.0, lambda x: _bcspline(x, 1.0, 0.0)))
GAUSSIAN = ResampleFilter(2.0, _limited(2.0, lambda x: math.exp(-2 * x * x)))
BARTLETT = ResampleFilter(3.0, _limited(3.0, lambda x: _sinc(x) * (3.0 - x) / 3.0))
LANCZOS = ResampleFilter(3.0, _limited(3.0, lambda x: _sinc(x) * _sinc(x / 3.0)))
HANN = ResampleFilter(
    3.0, _limited(3.0, lambda x: _sinc(x) * (0.5 + 0.5 * math.cos(math.pi * x / 3.0)))
)
HAMMING = ResampleFilter(
    3.0, _limited(3.0, lambda x: _sinc(x) * (0.54 + 0.46 * math.cos(math.pi * x / 3.0)))
)
BLACKMAN = ResampleFilter(
    3.0,
    _limited(
        3.0,
        lambda x: _sinc(x)
        * (
            0.42
            - 0.5 * math.cos(math.pi * x / 3.0 + math.pi)
            + 0.08 * math.cos(2.0 * math.pi * x / 3.0)
        ),
    ),
)
WELCH = ResampleFilter(3.0, _limited(3.0, lambda x: _sinc(x) * (1.0 - (x * x / 9.0))))
COSINE = ResampleFilter(
    3.0, _limited(3.0, lambda x: _sinc(x) * math.cos((math.pi / 2.0) * (x / 3.0)))
)


def _precompute_weights(dst_size: int, src_size: int, filter: ResampleFilter) -> Weights:
    """For every destination index, the normalised (source index, weight) pairs."""
    assert filter.kernel is not None
    du = src_size / dst_size
    scale = max(du, 1.0)
    ru = math.ceil(scale * filter.support)

    out: Weights = []
    for v in range(dst_size):
        fu = (v + 0.5) * du - 0.5
        begin = max(math.ceil(fu - ru), 0)
        end = min(math.floor(fu + ru), src_size - 1)
        pairs = []
        for u in range(begin, end + 1):
            w = filter.kernel((u - fu) / scale)
            if w != 0:
                pairs.append((u, w))
        total = sum(w for _, w in pairs)
        if total != 0:
            pairs = [(u, w / total) for u, w in pairs]
        out.append(pairs)
    return out


def _resample_line(line: bytes, weights: Weights) -> bytearray:
    """Resample one row or column of RGBA pixels with alpha-weighted sums."""
    out = bytearray(len(weights) * 4)
    for j, pairs in enumerate(weights):
        r = g = b = a = 0.0
        for index, weight in pairs:
            i = index * 4
            aw = line[i + 3] * weight
            r += line[i] * aw
            g += line[i + 1] * aw
            b += line[i + 2] * aw
            a += aw
        if a != 0:
            inv = 1 / a
            out[j * 4 : j * 4 + 4] = bytes((clamp(r * inv), clamp(g * inv), clamp(b * inv), clamp(a)))
    return out


def _resize_horizontal(img: ImageLike, width: int, filter: ResampleFilter) -> NRGBA:
    src = Scanner(img)
    weights = _precompute_weights(width, src.w, filter)
    rows = (_resample_line(src.scan(0, y, src.w, y + 1), weights) for y in range(src.h))
    return NRGBA(width, src.h, b"".join(rows))


def _resize_vertical(img: ImageLike, height: int, filter: ResampleFilter) -> NRGBA:
    src = Scanner(img)
    weights = _precompute_weights(height, src.h, filter)
    stride = src.w * 4
    pix = bytearray(stride * height)
    for x in range(src.w):
        column = _resample_line(src.scan(x, 0, x + 1, src.h), weights)
        for channel in range(4):
            pix[x * 4 + channel :: stride] = column[channel::4]
    return NRGBA(src.w, height, pix)


def _resize_nearest(img: ImageLike, width: int, height: int) -> NRGBA:
    src = Scanner(img)
    pix = src.scan(0, 0, src.w, src.h)
    dx = src.w / width
    dy = src.h / height
    columns: Sequence[int] = [int((x + 0.5) * dx) * 4 for x in range(width)]
    out = bytearray()
    for y in range(height):
        row_start = int((y + 0.5) * dy) * src.w * 4
        for sx in columns:
            i = row_start + sx
            out += pix[i : i + 4]
    return NRGBA(width, height, out)


def _scale(img: ImageLike, src_w: int, src_h: int, dst_w: int, dst_h: int,
           filter: ResampleFilter) -> NRGBA:
    if filter.support <= 0:
        return _resize_nearest(img, dst_w, dst_h)
    if src_w != dst_w and src_h != dst_h:
        return _resize_vertical(_resize_horizontal(img, dst_w, filter), dst_h, filter)
    if src_w != dst_w:
        return _resize_horizontal(img, dst_w, filter)
    return _resize_vertical(img, dst_h, filter)


def _aspect_size(target: int, num: int, den: int) -> int:
    return int(max(1.0, math.floor(target * num / den + 0.5)))


def resize(img: ImageLike, width: int, height: int, filter: ResampleFilter) -> NRGBA:
    """Resize the image to width x height.

    If one of width or height is 0 the aspect ratio is preserved.
    """
    dst_w, dst_h = width, height
    if dst_w < 0 or dst_h < 0 or (dst_w == 0 and dst_h == 0):
        return NRGBA(0, 0)

    src = Scanner(img)
    src_w, src_h = src.w, src.h
    if src_w <= 0 or src_h <= 0:
        return NRGBA(0, 0)

    if dst_w == 0:
        dst_w = _aspect_size(dst_h, src_w, src_h)
    if dst_h == 0:
        dst_h = _aspect_size(dst_w, src_h, src_w)

    if src_w == dst_w and src_h == dst_h:
        return clone(img)
    return _scale(img, src_w, src_h, dst_w, dst_h, filter)


def compress(img: ImageLike, max_size: int, filter: ResampleFilter) -> NRGBA:
    """Scale the image down so that its longer side is max_size pixels.

    Images already within max_size on both sides are copied unchanged.
    """
    if max_size <= 0:
        return NRGBA(0, 0)

    src = Scanner(img)
    src_w, src_h = src.w, src.h
    if src_w <= 0 or src_h <= 0:
        return NRGBA(0, 0)
    if src_w <= max_size and src_h <= max_size:
        return clone(img)

    if src_w > src_h:
        dst_w = max_size
        dst_h = _aspect_size(dst_w, src_h, src_w)
    else:
        dst_h = max_size
        dst_w = _aspect_size(dst_h, src_w, src_h)
    return _scale(img, src_w, src_h, dst_w, dst_h, filter)


def fit(img: ImageLike, width: int, height: int, filter: ResampleFilter) -> NRGBA:
    """Scale the image down to fit within width x height, keeping its aspect ratio."""
    if width <= 0 or height <= 0:
        return NRGBA(0, 0)

    src = Scanner(img)
    src_w, src_h = src.w, src.h
    if src_w <= 0 or src_h <= 0:
        return NRGBA(0, 0)
    if src_w <= width and src_h <= height:
        return clone(img)

    src_ratio = src_w / src_h
    max_ratio = width / height
    if src_ratio > max_ratio:
        new_w = width
        new_h = int(new_w / src_ratio)
    else:
        new_h = height
        new_w = int(new_h * src_ratio)
    return resize(img, new_w, new_h, filter)


def _crop_and_resize(img: ImageLike, src_w: int, src_h: int, width: int, height: int,
                     anchor: Anchor, filter: ResampleFilter) -> NRGBA:
    if src_w / src_h < width / height:
        crop_h = src_w * height / width
        tmp = crop_anchor(img, src_w, int(max(1.0, crop_h) + 0.5), anchor)
    else:
        crop_w = src_h * width / height
        tmp = crop_anchor(img, int(max(1.0, crop_w) + 0.5), src_h, anchor)
    return resize(tmp, width, height, filter)


def _resize_and_crop(img: ImageLike, src_w: int, src_h: int, width: int, height: int,
                     anchor: Anchor, filter: ResampleFilter) -> NRGBA:
    if src_w / src_h < width / height:
        tmp = resize(img, width, 0, filter)
    else:
        tmp = resize(img, 0, height, filter)
    return crop_anchor(tmp, width, height, anchor)


def fill(img: ImageLike, width: int, height: int, anchor: Anchor,
         filter: ResampleFilter) -> NRGBA:
    """Scale and crop the image to exactly width x height without stretching."""
    if width <= 0 or height <= 0:
        return NRGBA(0, 0)

    src = Scanner(img)
    src_w, src_h = src.w, src.h
    if src_w <= 0 or src_h <= 0:
        return NRGBA(0, 0)
    if src_w == width and src_h == height:
        return clone(img)

    if src_w >= 100 and src_h >= 100:
        return _crop_and_resize(img, src_w, src_h, width, height, anchor, filter)
    return _resize_and_crop(img, src_w, src_h, width, height, anchor, filter)


def thumbnail(img: ImageLike, width: int, height: int, filter: ResampleFilter) -> NRGBA:
    """Scale and crop the image around its centre to width x height."""
    return fill(img, width, height, Anchor.CENTER, filter)