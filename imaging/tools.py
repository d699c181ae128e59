"""Creating, copying, cropping, pasting and overlaying images."""

from __future__ import annotations

from collections.abc import Sequence
from enum import IntEnum
from itertools import count

from imaging.nrgba import NRGBA, _as_nrgba_color
from imaging.scanner import ImageLike, Scanner

Rect = tuple[int, int, int, int]
Point = tuple[int, int]

_EMPTY_RECT: Rect = (0, 0, 0, 0)


class Anchor(IntEnum):
    """Anchor point for image alignment."""

    CENTER = 0
    TOP_LEFT = 1
    TOP = 2
    TOP_RIGHT = 3
    LEFT = 4
    RIGHT = 5
    BOTTOM_LEFT = 6
    BOTTOM = 7
    BOTTOM_RIGHT = 8


def _half(n: int) -> int:
    """Integer half, truncated toward zero."""
    return n // 2 if n >= 0 else -((-n) // 2)


def _is_empty(r: Rect) -> bool:
    return r[0] >= r[2] or r[1] >= r[3]


def _intersect(a: Rect, b: Rect) -> Rect:
    r = (max(a[0], b[0]), max(a[1], b[1]), min(a[2], b[2]), min(a[3], b[3]))
    return _EMPTY_RECT if _is_empty(r) else r


def _anchor_point(bw: int, bh: int, w: int, h: int, anchor: Anchor) -> Point:
    cx = _half(bw - w)
    cy = _half(bh - h)
    points = {
        Anchor.TOP_LEFT: (0, 0),
        Anchor.TOP: (cx, 0),
        Anchor.TOP_RIGHT: (bw - w, 0),
        Anchor.LEFT: (0, cy),
        Anchor.RIGHT: (bw - w, cy),
        Anchor.BOTTOM_LEFT: (0, bh - h),
        Anchor.BOTTOM: (cx, bh - h),
        Anchor.BOTTOM_RIGHT: (bw - w, bh - h),
    }
    return points.get(anchor, (cx, cy))


def new(width: int, height: int, fill_color: Sequence[int]) -> NRGBA:
    """Create a width x height image filled with fill_color."""
    if width <= 0 or height <= 0:
        return NRGBA(0, 0)
    color = _as_nrgba_color(fill_color)
    return NRGBA(width, height, bytes(color) * (width * height))


def clone(img: ImageLike) -> NRGBA:
    """Return an NRGBA copy of the image."""
    src = Scanner(img)
    return NRGBA(src.w, src.h, src.scan(0, 0, src.w, src.h))


def to_nrgba(img: ImageLike) -> NRGBA:
    """Return img itself if it is already NRGBA, otherwise a converted copy."""
    if isinstance(img, NRGBA):
        return img
    return clone(img)


def crop(img: ImageLike, rect: Rect) -> NRGBA:
    """Cut out the region rect = (x0, y0, x1, y1) of the image."""
    src = Scanner(img)
    bounds = (0, 0, src.w, src.h)
    r = _intersect(tuple(rect), bounds)  # type: ignore[arg-type]
    if _is_empty(r):
        return NRGBA(0, 0)
    if r == bounds:
        return clone(img)
    x0, y0, x1, y1 = r
    return NRGBA(x1 - x0, y1 - y0, src.scan(x0, y0, x1, y1))


def crop_anchor(img: ImageLike, width: int, height: int, anchor: Anchor) -> NRGBA:
    """Cut out a width x height region placed at the given anchor point."""
    src = Scanner(img)
    x, y = _anchor_point(src.w, src.h, width, height, anchor)
    region = _intersect((0, 0, src.w, src.h), (x, y, x + width, y + height))
    return crop(img, region)


def crop_center(img: ImageLike, width: int, height: int) -> NRGBA:
    """Cut out a width x height region from the centre of the image."""
    return crop_anchor(img, width, height, Anchor.CENTER)


def paste(background: ImageLike, img: ImageLike, pos: Point) -> NRGBA:
    """Paste img over background with its top-left corner at pos."""
    dst = clone(background)
    src = Scanner(img)
    px, py = pos
    paste_rect = (px, py, px + src.w, py + src.h)
    inter = _intersect(paste_rect, (0, 0, dst.width, dst.height))
    if _is_empty(inter):
        return dst
    if inter == (0, 0, dst.width, dst.height):
        return clone(img)

    x0, y0, x1, y1 = inter
    for y in range(y0, y1):
        start = y * dst.stride + x0 * 4
        dst.pix[start : start + (x1 - x0) * 4] = src.scan(x0 - px, y - py, x1 - px, y - py + 1)
    return dst


def _center_offset(background: ImageLike, img: ImageLike) -> Point:
    bg = Scanner(background)
    fg = Scanner(img)
    return bg.w // 2 - fg.w // 2, bg.h // 2 - fg.h // 2


def paste_center(background: ImageLike, img: ImageLike) -> NRGBA:
    """Paste img at the centre of background."""
    return paste(background, img, _center_offset(background, img))


def _blend(dst_px: Sequence[int], src_px: Sequence[int], opacity: float) -> bytes:
    r1, g1, b1, a1 = dst_px
    r2, g2, b2, a2 = src_px
    coef2 = opacity * a2 / 255
    coef1 = (1 - coef2) * a1 / 255
    alpha = int(min(a1 + a2 * opacity * (255 - a1) / 255, 255))
    total = coef1 + coef2
    if total == 0:
        return bytes((0, 0, 0, alpha))
    coef1 /= total
    coef2 /= total
    return bytes(
        (
            int(r1 * coef1 + r2 * coef2),
            int(g1 * coef1 + g2 * coef2),
            int(b1 * coef1 + b2 * coef2),
            alpha,
        )
    )


def overlay(background: ImageLike, img: ImageLike, pos: Point, opacity: float) -> NRGBA:
    """Draw img over background at pos with the given opacity (0.0 to 1.0)."""
    opacity = min(max(opacity, 0.0), 1.0)
    dst = clone(background)
    src = Scanner(img)
    px, py = pos
    paste_rect = (px, py, px + src.w, py + src.h)
    inter = _intersect(paste_rect, (0, 0, dst.width, dst.height))
    if _is_empty(inter):
        return dst

    x0, y0, x1, y1 = inter
    pix = dst.pix
    for y in range(y0, y1):
        line = src.scan(x0 - px, y - py, x1 - px, y - py + 1)
        pixels = zip(line[0::4], line[1::4], line[2::4], line[3::4])
        for i, src_px in zip(count(y * dst.stride + x0 * 4, 4), pixels):
            pix[i : i + 4] = _blend(pix[i : i + 4], src_px, opacity)
    return dst


def overlay_center(background: ImageLike, img: ImageLike, opacity: float) -> NRGBA:
    """Overlay img at the centre of background with the given opacity."""
    return overlay(background, img, _center_offset(background, img), opacity)