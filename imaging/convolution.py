"""Convolution of images with 3x3 and 5x5 kernels."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from imaging.nrgba import NRGBA
from imaging.scanner import ImageLike
from imaging.tools import to_nrgba
from imaging.utils import clamp


@dataclass(frozen=True)
class ConvolveOptions:
    """Convolution parameters.

    normalize scales the kernel before use, abs takes the absolute value of
    each channel after convolution, and bias is added to each channel.
    """

    normalize: bool = False
    abs: bool = False
    bias: int = 0


def convolve_3x3(
    img: ImageLike, kernel: Sequence[float], options: ConvolveOptions | None = None
) -> NRGBA:
    """Convolve the image with a 3x3 kernel given as 9 row-major values."""
    return _convolve(img, _checked(kernel, 9), options)


def convolve_5x5(
    img: ImageLike, kernel: Sequence[float], options: ConvolveOptions | None = None
) -> NRGBA:
    """Convolve the image with a 5x5 kernel given as 25 row-major values."""
    return _convolve(img, _checked(kernel, 25), options)


def _checked(kernel: Sequence[float], size: int) -> list[float]:
    values = [float(k) for k in kernel]
    if len(values) != size:
        raise ValueError(f"kernel must have {size} values, got {len(values)}")
    return values


def _normalized(kernel: list[float]) -> list[float]:
    total = sum(kernel)
    positive = sum(k for k in kernel if k > 0)
    if total != 0:
        return [k / total for k in kernel]
    if positive != 0:
        return [k / positive for k in kernel]
    return kernel


def _convolve(img: ImageLike, kernel: list[float], options: ConvolveOptions | None) -> NRGBA:
    src = to_nrgba(img)
    w, h = src.width, src.height
    if w < 1 or h < 1:
        return NRGBA(w, h)

    if options is None:
        options = ConvolveOptions()
    if options.normalize:
        kernel = _normalized(kernel)

    m = 1 if len(kernel) == 9 else 2
    offsets = [(dx, dy) for dy in range(-m, m + 1) for dx in range(-m, m + 1)]
    coefs = [(dx, dy, k) for (dx, dy), k in zip(offsets, kernel) if k != 0]

    pix = src.pix
    stride = src.stride
    out = bytearray(len(pix))
    for y in range(h):
        for x in range(w):
            r = g = b = 0.0
            for dx, dy, k in coefs:
                ix = min(max(x + dx, 0), w - 1)
                iy = min(max(y + dy, 0), h - 1)
                off = iy * stride + ix * 4
                r += pix[off] * k
                g += pix[off + 1] * k
                b += pix[off + 2] * k

            if options.abs:
                r, g, b = abs(r), abs(g), abs(b)
            if options.bias:
                r += options.bias
                g += options.bias
                b += options.bias

            off = y * stride + x * 4
            out[off : off + 4] = bytes((clamp(r), clamp(g), clamp(b), pix[off + 3]))
    return NRGBA(w, h, out)