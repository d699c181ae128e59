"""Colour adjustments: grayscale, inversion, hue, saturation, contrast and more."""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

from imaging.nrgba import NRGBA, _as_nrgba_color
from imaging.scanner import ImageLike, Scanner
from imaging.tools import clone
from imaging.utils import clamp, hsl_to_rgb, rgb_to_hsl

Color = tuple[int, int, int, int]


def _read(img: ImageLike) -> tuple[int, int, bytearray]:
    src = Scanner(img)
    return src.w, src.h, bytearray(src.scan(0, 0, src.w, src.h))


def grayscale(img: ImageLike) -> NRGBA:
    """Return a grayscale version of the image."""
    w, h, pix = _read(img)
    gray = bytes(
        int(0.299 * r + 0.587 * g + 0.114 * b + 0.5)
        for r, g, b in zip(pix[0::4], pix[1::4], pix[2::4])
    )
    pix[0::4] = gray
    pix[1::4] = gray
    pix[2::4] = gray
    return NRGBA(w, h, pix)


_INVERT_TABLE = bytes(255 - i for i in range(256))


def invert(img: ImageLike) -> NRGBA:
    """Return the negative of the image; alpha is kept."""
    return _adjust_lut(img, _INVERT_TABLE)


def _adjust_lut(img: ImageLike, lut: Sequence[int]) -> NRGBA:
    """Map the R, G and B channels of every pixel through a 256-entry table."""
    table = bytes(lut)
    w, h, pix = _read(img)
    for channel in range(3):
        pix[channel::4] = pix[channel::4].translate(table)
    return NRGBA(w, h, pix)


def adjust_func(img: ImageLike, fn: Callable[[Color], Sequence[int]]) -> NRGBA:
    """Apply fn to every (r, g, b, a) pixel and return the resulting image."""
    w, h, pix = _read(img)
    out = bytearray()
    for px in zip(pix[0::4], pix[1::4], pix[2::4], pix[3::4]):
        out += bytes(_as_nrgba_color(fn(px)))
    return NRGBA(w, h, out)


def adjust_saturation(img: ImageLike, percentage: float) -> NRGBA:
    """Change saturation by percentage in -100..100; -100 gives grayscale."""
    if percentage == 0:
        return clone(img)
    percentage = min(max(percentage, -100.0), 100.0)
    multiplier = 1 + percentage / 100

    def change(c: Color) -> Color:
        h, s, l = rgb_to_hsl(c[0], c[1], c[2])
        s = min(s * multiplier, 1.0)
        r, g, b = hsl_to_rgb(h, s, l)
        return r, g, b, c[3]

    return adjust_func(img, change)


def adjust_hue(img: ImageLike, shift: float) -> NRGBA:
    """Rotate the hue of every pixel by shift degrees."""
    if math.fmod(shift, 360) == 0:
        return clone(img)
    summand = shift / 360

    def change(c: Color) -> Color:
        h, s, l = rgb_to_hsl(c[0], c[1], c[2])
        h = math.fmod(h + summand, 1)
        if h < 0:
            h += 1
        r, g, b = hsl_to_rgb(h, s, l)
        return r, g, b, c[3]

    return adjust_func(img, change)


def adjust_contrast(img: ImageLike, percentage: float) -> NRGBA:
    """Change contrast by percentage in -100..100; -100 gives solid gray."""
    if percentage == 0:
        return clone(img)
    percentage = min(max(percentage, -100.0), 100.0)
    v = (100.0 + percentage) / 100.0

    def level(i: int) -> int:
        x = i / 255.0 - 0.5
        if 0 <= v <= 1:
            return clamp((0.5 + x * v) * 255.0)
        if 1 < v < 2:
            return clamp((0.5 + x * (1 / (2.0 - v))) * 255.0)
        return int(i / 255.0 + 0.5) * 255

    return _adjust_lut(img, [level(i) for i in range(256)])


def adjust_brightness(img: ImageLike, percentage: float) -> NRGBA:
    """Change brightness by percentage in -100..100 (black to white)."""
    if percentage == 0:
        return clone(img)
    percentage = min(max(percentage, -100.0), 100.0)
    shift = 255.0 * percentage / 100.0
    return _adjust_lut(img, [clamp(i + shift) for i in range(256)])


def adjust_gamma(img: ImageLike, gamma: float) -> NRGBA:
    """Gamma-correct the image; gamma below 1 darkens, above 1 lightens."""
    if gamma == 1:
        return clone(img)
    e = 1.0 / max(gamma, 0.0001)
    return _adjust_lut(img, [clamp(math.pow(i / 255.0, e) * 255.0) for i in range(256)])


def _sigmoid(a: float, b: float, x: float) -> float:
    return 1 / (1 + math.exp(b * (a - x)))


def adjust_sigmoid(img: ImageLike, midpoint: float, factor: float) -> NRGBA:
    """Change contrast with a sigmoidal curve.

    midpoint lies in 0..1 (typically 0.5); a positive factor raises the
    contrast and a negative one lowers it.
    """
    if factor == 0:
        return clone(img)

    a = min(max(midpoint, 0.0), 1.0)
    b = abs(factor)
    sig0 = _sigmoid(a, b, 0)
    sig1 = _sigmoid(a, b, 1)
    e = 1.0e-6

    def increase(i: int) -> int:
        x = i / 255.0
        f = (_sigmoid(a, b, x) - sig0) / (sig1 - sig0)
        return clamp(f * 255.0)

    def decrease(i: int) -> int:
        x = i / 255.0
        arg = min(max((sig1 - sig0) * x + sig0, e), 1.0 - e)
        f = a - math.log(1.0 / arg - 1.0) / b
        return clamp(f * 255.0)

    level = increase if factor > 0 else decrease
    return _adjust_lut(img, [level(i) for i in range(256)])