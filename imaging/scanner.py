"""Reading rectangular regions of any supported image as NRGBA bytes."""

from __future__ import annotations

import sys
from functools import cached_property
from typing import Union

from PIL import Image

from imaging.nrgba import NRGBA

ImageLike = Union[NRGBA, Image.Image]


def _ycbcr_channel(v: int) -> int:
    if v < 0:
        return 0
    if v > 0xFFFFFF:
        return 255
    return v >> 16


def _from_ycbcr(data: bytes) -> bytearray:
    out = bytearray()
    for y, cb, cr in zip(data[0::3], data[1::3], data[2::3]):
        yy = y * 0x10101
        cb -= 128
        cr -= 128
        out += bytes(
            (
                _ycbcr_channel(yy + 91881 * cr),
                _ycbcr_channel(yy - 22554 * cb - 46802 * cr),
                _ycbcr_channel(yy + 116130 * cb),
                255,
            )
        )
    return out


def _from_premultiplied(data: bytes) -> bytearray:
    out = bytearray()
    for r, g, b, a in zip(data[0::4], data[1::4], data[2::4], data[3::4]):
        if a == 0:
            out += b"\x00\x00\x00\x00"
        elif a == 255:
            out += bytes((r, g, b, a))
        else:
            out += bytes(((r * 255 // a) & 0xFF, (g * 255 // a) & 0xFF, (b * 255 // a) & 0xFF, a))
    return out


def _from_gray(gray: bytes) -> bytearray:
    n = len(gray)
    out = bytearray(n * 4)
    out[0::4] = gray
    out[1::4] = gray
    out[2::4] = gray
    out[3::4] = b"\xff" * n
    return out


def _gray16_high_bytes(img: Image.Image) -> bytes:
    data = img.tobytes()
    mode = img.mode
    if mode == "I;16N":
        mode = "I;16" if sys.byteorder == "little" else "I;16B"
    return data[0::2] if mode == "I;16B" else data[1::2]


def _pil_to_nrgba_bytes(img: Image.Image) -> bytearray:
    mode = img.mode
    if mode == "RGBA":
        return bytearray(img.tobytes())
    if mode == "RGBa":
        return _from_premultiplied(img.tobytes())
    if mode == "L":
        return _from_gray(img.tobytes())
    if mode in ("I;16", "I;16L", "I;16B", "I;16N"):
        return _from_gray(_gray16_high_bytes(img))
    if mode == "YCbCr":
        return _from_ycbcr(img.tobytes())
    return bytearray(img.convert("RGBA").tobytes())


class Scanner:
    """Reads regions of an image as non-premultiplied RGBA bytes."""

    def __init__(self, img: ImageLike) -> None:
        if isinstance(img, NRGBA):
            self.w, self.h = img.width, img.height
        elif isinstance(img, Image.Image):
            self.w, self.h = img.size
        else:
            raise TypeError(f"unsupported image type: {type(img).__name__}")
        self.image = img

    @cached_property
    def _pix(self) -> bytearray:
        if isinstance(self.image, NRGBA):
            return self.image.pix
        return _pil_to_nrgba_bytes(self.image)

    def scan(self, x1: int, y1: int, x2: int, y2: int) -> bytes:
        """Return the region [x1, x2) x [y1, y2) as row-major RGBA bytes."""
        if not (0 <= x1 <= x2 <= self.w and 0 <= y1 <= y2 <= self.h):
            raise ValueError(
                f"region ({x1}, {y1}, {x2}, {y2}) is outside a {self.w}x{self.h} image"
            )
        pix = self._pix
        stride = self.w * 4
        if x1 == 0 and x2 == self.w:
            return bytes(pix[y1 * stride : y2 * stride])
        return b"".join(
            pix[y * stride + x1 * 4 : y * stride + x2 * 4] for y in range(y1, y2)
        )