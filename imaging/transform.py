"""Flipping, transposing and rotating images."""

from __future__ import annotations

import math
from collections.abc import Sequence

from imaging.nrgba import NRGBA, _as_nrgba_color
from imaging.scanner import ImageLike, Scanner
from imaging.tools import clone, to_nrgba
from imaging.utils import clamp, reverse_pixels


def flip_h(img: ImageLike) -> NRGBA:
    """Flip the image horizontally (left to right)."""
    src = Scanner(img)
    rows = (reverse_pixels(src.scan(0, y, src.w, y + 1)) for y in range(src.h))
    return NRGBA(src.w, src.h, b"".join(rows))


def flip_v(img: ImageLike) -> NRGBA:
    """Flip the image vertically (top to bottom)."""
    src = Scanner(img)
    rows = (src.scan(0, y, src.w, y + 1) for y in reversed(range(src.h)))
    return NRGBA(src.w, src.h, b"".join(rows))


def _from_columns(src: Scanner, columns: Sequence[int], mirrored: bool) -> NRGBA:
    """Build an image whose rows are the given source columns, top to bottom."""
    rows = []
    for x in columns:
        column = src.scan(x, 0, x + 1, src.h)
        rows.append(reverse_pixels(column) if mirrored else column)
    return NRGBA(src.h, src.w, b"".join(rows))


def transpose(img: ImageLike) -> NRGBA:
    """Flip the image horizontally and rotate it 90 degrees counter-clockwise."""
    src = Scanner(img)
    return _from_columns(src, range(src.w), mirrored=False)


def transverse(img: ImageLike) -> NRGBA:
    """Flip the image vertically and rotate it 90 degrees counter-clockwise."""
    src = Scanner(img)
    return _from_columns(src, range(src.w - 1, -1, -1), mirrored=True)


def rotate90(img: ImageLike) -> NRGBA:
    """Rotate the image 90 degrees counter-clockwise."""
    src = Scanner(img)
    return _from_columns(src, range(src.w - 1, -1, -1), mirrored=False)


def rotate180(img: ImageLike) -> NRGBA:
    """Rotate the image 180 degrees."""
    src = Scanner(img)
    rows = (reverse_pixels(src.scan(0, y, src.w, y + 1)) for y in reversed(range(src.h)))
    return NRGBA(src.w, src.h, b"".join(rows))


def rotate270(img: ImageLike) -> NRGBA:
    """Rotate the image 270 degrees counter-clockwise."""
    src = Scanner(img)
    return _from_columns(src, range(src.w), mirrored=True)


def _normalize_angle(angle: float) -> float:
    return angle - math.floor(angle / 360) * 360


def _rotate_point(x: float, y: float, sin: float, cos: float) -> tuple[float, float]:
    return x * cos - y * sin, x * sin + y * cos


def _rotated_size(w: int, h: int, angle: float) -> tuple[int, int]:
    if w <= 0 or h <= 0:
        return 0, 0
    rad = math.pi * angle / 180
    sin, cos = math.sin(rad), math.cos(rad)
    corners = [
        (0.0, 0.0),
        _rotate_point(w - 1, 0, sin, cos),
        _rotate_point(w - 1, h - 1, sin, cos),
        _rotate_point(0, h - 1, sin, cos),
    ]
    xs = [p[0] for p in corners]
    ys = [p[1] for p in corners]

    new_w = max(xs) - min(xs) + 1
    if new_w - math.floor(new_w) > 0.1:
        new_w += 1
    new_h = max(ys) - min(ys) + 1
    if new_h - math.floor(new_h) > 0.1:
        new_h += 1
    return int(new_w), int(new_h)


def _interpolate(src: NRGBA, xf: float, yf: float, bg: tuple[int, int, int, int]) -> bytes | None:
    """Bilinearly sample src at (xf, yf); None leaves the pixel transparent."""
    x0 = math.floor(xf)
    y0 = math.floor(yf)
    if not (-1 <= x0 < src.width and -1 <= y0 < src.height):
        return bytes(bg)

    xq = xf - x0
    yq = yf - y0
    samples = (
        (x0, y0, (1 - xq) * (1 - yq)),
        (x0 + 1, y0, xq * (1 - yq)),
        (x0, y0 + 1, (1 - xq) * yq),
        (x0 + 1, y0 + 1, xq * yq),
    )

    r = g = b = a = 0.0
    for px, py, weight in samples:
        if 0 <= px < src.width and 0 <= py < src.height:
            i = py * src.stride + px * 4
            sr, sg, sb, sa = src.pix[i : i + 4]
        else:
            sr, sg, sb, sa = bg
        wa = sa * weight
        r += sr * wa
        g += sg * wa
        b += sb * wa
        a += wa

    if a == 0:
        return None
    inv = 1 / a
    return bytes((clamp(r * inv), clamp(g * inv), clamp(b * inv), clamp(a)))


def _render(
    src: NRGBA,
    dst_w: int,
    dst_h: int,
    dst_off: tuple[float, float],
    src_off: tuple[float, float],
    angle: float,
    bg: tuple[int, int, int, int],
) -> NRGBA:
    rad = math.pi * angle / 180
    sin, cos = math.sin(rad), math.cos(rad)
    dst = NRGBA(dst_w, dst_h)
    for y in range(dst_h):
        for x in range(dst_w):
            xf, yf = _rotate_point(x - dst_off[0], y - dst_off[1], sin, cos)
            px = _interpolate(src, xf + src_off[0], yf + src_off[1], bg)
            if px is not None:
                i = y * dst.stride + x * 4
                dst.pix[i : i + 4] = px
    return dst


def rotate(img: ImageLike, angle: float, bg_color: Sequence[int]) -> NRGBA:
    """Rotate the image counter-clockwise by angle degrees.

    bg_color fills the area not covered by the rotated image.
    """
    angle = _normalize_angle(angle)
    if angle == 0:
        return clone(img)
    if angle == 90:
        return rotate90(img)
    if angle == 180:
        return rotate180(img)
    if angle == 270:
        return rotate270(img)

    src = to_nrgba(img)
    dst_w, dst_h = _rotated_size(src.width, src.height, angle)
    if dst_w <= 0 or dst_h <= 0:
        return NRGBA(max(dst_w, 0), max(dst_h, 0))

    src_off = (src.width / 2 - 0.5, src.height / 2 - 0.5)
    dst_off = (dst_w / 2 - 0.5, dst_h / 2 - 0.5)
    return _render(src, dst_w, dst_h, dst_off, src_off, angle, _as_nrgba_color(bg_color))


def rotate_move(
    img: ImageLike,
    src_x_off: float,
    src_y_off: float,
    angle: float,
    move_x: float,
    move_y: float,
    dst_w: int,
    dst_h: int,
    bg_color: Sequence[int],
) -> NRGBA:
    """Rotate the image about (src_x_off, src_y_off), then shift it.

    The result is dst_w x dst_h; the rotated image is moved right by move_x
    and down by move_y, and bg_color fills the uncovered area.
    """
    angle = _normalize_angle(angle)
    src = to_nrgba(img)
    if dst_w <= 0 or dst_h <= 0:
        return NRGBA(abs(dst_w), abs(dst_h))

    dst_off = (src_x_off + move_x, src_y_off + move_y)
    return _render(
        src, dst_w, dst_h, dst_off, (src_x_off, src_y_off), angle, _as_nrgba_color(bg_color)
    )