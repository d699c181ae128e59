"""Reading and writing image files, with optional EXIF auto-orientation."""

from __future__ import annotations

import io
import os
import struct
from collections.abc import Callable
from enum import IntEnum
from typing import BinaryIO

from PIL import Image

from imaging.nrgba import NRGBA
from imaging.scanner import ImageLike
from imaging.tools import to_nrgba
from imaging.transform import (
    flip_h,
    flip_v,
    rotate90,
    rotate180,
    rotate270,
    transpose,
    transverse,
)


class Format(IntEnum):
    """Image file format."""

    JPEG = 0
    PNG = 1
    GIF = 2
    TIFF = 3
    BMP = 4

    def __str__(self) -> str:
        return self.name


class UnsupportedFormatError(ValueError):
    """The given image format is not supported."""

    def __init__(self, message: str = "unsupported image format") -> None:
        super().__init__(message)


_FORMAT_EXTS = {
    "jpg": Format.JPEG,
    "jpeg": Format.JPEG,
    "png": Format.PNG,
    "gif": Format.GIF,
    "tif": Format.TIFF,
    "tiff": Format.TIFF,
    "bmp": Format.BMP,
}


def format_from_extension(ext: str) -> Format:
    """Parse a format from an extension such as "jpg", ".png" or "TIFF"."""
    key = ext[1:] if ext.startswith(".") else ext
    try:
        return _FORMAT_EXTS[key.lower()]
    except KeyError:
        raise UnsupportedFormatError(f"unsupported image format: {ext!r}") from None


def _extension(filename: str) -> str:
    dot = filename.rfind(".")
    sep = max(filename.rfind("/"), filename.rfind(os.sep))
    return filename[dot:] if dot > sep else ""


def format_from_filename(filename: str) -> Format:
    """Parse a format from the extension of a file name."""
    return format_from_extension(_extension(filename))


class _Orientation(IntEnum):
    UNSPECIFIED = 0
    NORMAL = 1
    FLIP_H = 2
    ROTATE_180 = 3
    FLIP_V = 4
    TRANSPOSE = 5
    ROTATE_270 = 6
    TRANSVERSE = 7
    ROTATE_90 = 8


_MARKER_SOI = 0xFFD8
_MARKER_APP1 = 0xFFE1
_EXIF_HEADER = 0x45786966
_BYTE_ORDER_BE = 0x4D4D
_BYTE_ORDER_LE = 0x4949
_ORIENTATION_TAG = 0x0112


class _Truncated(Exception):
    pass


def _read_exact(r: BinaryIO, n: int) -> bytes:
    chunks = []
    remaining = n
    while remaining > 0:
        chunk = r.read(remaining)
        if not chunk:
            raise _Truncated
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _unpack(r: BinaryIO, fmt: str) -> int:
    s = struct.Struct(fmt)
    return s.unpack(_read_exact(r, s.size))[0]


def _find_orientation(r: BinaryIO) -> int:
    if _unpack(r, ">H") != _MARKER_SOI:
        return _Orientation.UNSPECIFIED

    while True:
        marker = _unpack(r, ">H")
        size = _unpack(r, ">H")
        if marker >> 8 != 0xFF:
            return _Orientation.UNSPECIFIED
        if marker == _MARKER_APP1:
            break
        if size < 2:
            return _Orientation.UNSPECIFIED
        _read_exact(r, size - 2)

    if _unpack(r, ">I") != _EXIF_HEADER:
        return _Orientation.UNSPECIFIED
    _read_exact(r, 2)

    byte_order_tag = _unpack(r, ">H")
    if byte_order_tag == _BYTE_ORDER_BE:
        order = ">"
    elif byte_order_tag == _BYTE_ORDER_LE:
        order = "<"
    else:
        return _Orientation.UNSPECIFIED
    _read_exact(r, 2)

    offset = _unpack(r, order + "I")
    if offset < 8:
        return _Orientation.UNSPECIFIED
    _read_exact(r, offset - 8)

    num_tags = _unpack(r, order + "H")
    for _ in range(num_tags):
        tag = _unpack(r, order + "H")
        if tag != _ORIENTATION_TAG:
            _read_exact(r, 10)
            continue
        _read_exact(r, 6)
        value = _unpack(r, order + "H")
        if not 1 <= value <= 8:
            return _Orientation.UNSPECIFIED
        return value
    return _Orientation.UNSPECIFIED


def read_orientation(r: BinaryIO) -> int:
    """Read the EXIF orientation flag (1..8) from JPEG data.

    Returns 0 if the data is not JPEG, has no EXIF block or orientation tag,
    or is malformed or truncated.
    """
    try:
        return int(_find_orientation(r))
    except _Truncated:
        return int(_Orientation.UNSPECIFIED)


_ORIENTATION_FIXES: dict[int, Callable[[ImageLike], NRGBA]] = {
    _Orientation.FLIP_H: flip_h,
    _Orientation.FLIP_V: flip_v,
    _Orientation.ROTATE_90: rotate90,
    _Orientation.ROTATE_180: rotate180,
    _Orientation.ROTATE_270: rotate270,
    _Orientation.TRANSPOSE: transpose,
    _Orientation.TRANSVERSE: transverse,
}


def fix_orientation(img: ImageLike, orientation: int) -> ImageLike:
    """Apply the transform that the EXIF orientation flag calls for."""
    fix = _ORIENTATION_FIXES.get(orientation)
    return img if fix is None else fix(img)


def _load(r: BinaryIO) -> Image.Image:
    img = Image.open(r)
    img.load()
    return img


def decode(r: BinaryIO, *, auto_orientation: bool = False) -> ImageLike:
    """Decode an image from a binary stream.

    With auto_orientation the image is transformed according to its EXIF
    orientation tag, if present.
    """
    if not auto_orientation:
        return _load(r)
    data = r.read()
    orientation = read_orientation(io.BytesIO(data))
    return fix_orientation(_load(io.BytesIO(data)), orientation)


def open_image(filename: str | os.PathLike[str], *, auto_orientation: bool = False) -> ImageLike:
    """Load an image from a file."""
    with open(filename, "rb") as f:
        return decode(f, auto_orientation=auto_orientation)


def _encode_jpeg(w: BinaryIO, img: ImageLike, quality: int) -> None:
    nrgba = to_nrgba(img)
    pil = nrgba.to_pil()
    if nrgba.opaque():
        rgb = pil.convert("RGB")
    else:
        black = Image.new("RGBA", pil.size, (0, 0, 0, 255))
        rgb = Image.alpha_composite(black, pil).convert("RGB")
    rgb.save(w, "JPEG", quality=min(max(quality, 1), 100))


def _encode_gif(w: BinaryIO, img: ImageLike, num_colors: int) -> None:
    if not 1 <= num_colors <= 256:
        num_colors = 256
    if isinstance(img, Image.Image) and img.mode == "P":
        palette_size = len(img.getpalette() or []) // 3
        if palette_size <= num_colors:
            img.save(w, "GIF")
            return
    to_nrgba(img).to_pil().quantize(colors=num_colors).save(w, "GIF")


def _encode_bmp(w: BinaryIO, img: ImageLike) -> None:
    nrgba = to_nrgba(img)
    pil = nrgba.to_pil()
    (pil.convert("RGB") if nrgba.opaque() else pil).save(w, "BMP")


def encode(
    w: BinaryIO,
    img: ImageLike,
    format: Format,
    *,
    jpeg_quality: int = 95,
    gif_num_colors: int = 256,
    png_compression_level: int = 6,
) -> None:
    """Write the image to a binary stream in the given format.

    jpeg_quality ranges 1..100, gif_num_colors 1..256 and
    png_compression_level is a zlib level 0..9.
    """
    try:
        fmt = Format(format)
    except ValueError:
        raise UnsupportedFormatError(f"unsupported image format: {format!r}") from None

    if fmt is Format.JPEG:
        _encode_jpeg(w, img, jpeg_quality)
    elif fmt is Format.PNG:
        to_nrgba(img).to_pil().save(w, "PNG", compress_level=png_compression_level)
    elif fmt is Format.GIF:
        _encode_gif(w, img, gif_num_colors)
    elif fmt is Format.TIFF:
        to_nrgba(img).to_pil().save(w, "TIFF", compression="tiff_adobe_deflate")
    else:
        _encode_bmp(w, img)


def save(
    img: ImageLike,
    filename: str | os.PathLike[str],
    *,
    jpeg_quality: int = 95,
    gif_num_colors: int = 256,
    png_compression_level: int = 6,
) -> None:
    """Save the image to a file whose extension selects the format."""
    fmt = format_from_filename(os.fspath(filename))
    with open(filename, "wb") as f:
        encode(
            f,
            img,
            fmt,
            jpeg_quality=jpeg_quality,
            gif_num_colors=gif_num_colors,
            png_compression_level=png_compression_level,
        )