import pytest
from PIL import Image

from imaging.nrgba import NRGBA
from imaging.tools import (
    Anchor,
    clone,
    crop,
    crop_anchor,
    crop_center,
    new,
    overlay,
    overlay_center,
    paste,
    paste_center,
    to_nrgba,
)


def gradient(w, h):
    img = NRGBA(w, h)
    for y in range(h):
        for x in range(w):
            img.set_pixel(x, y, (x * 20 % 256, y * 20 % 256, (x * 7 + y * 3) % 256, 255))
    return img


def test_new_fills_every_pixel():
    img = new(3, 2, (10, 20, 30, 40))
    assert img.size == (3, 2)
    assert {img.pixel_at(x, y) for x in range(3) for y in range(2)} == {(10, 20, 30, 40)}


def test_new_with_rgb_is_opaque():
    assert new(1, 1, (1, 2, 3)).opaque()


def test_new_non_positive_size_is_empty():
    assert new(0, 5, (1, 2, 3)).size == (0, 0)
    assert new(4, -1, (1, 2, 3)).size == (0, 0)


def test_clone_is_independent_copy():
    src = gradient(3, 3)
    copy = clone(src)
    assert copy == src
    copy.set_pixel(0, 0, (1, 1, 1, 1))
    assert src.pixel_at(0, 0) == gradient(3, 3).pixel_at(0, 0)


def test_clone_of_pil_image():
    src = gradient(4, 2)
    assert clone(src.to_pil()) == src


def test_to_nrgba_returns_same_object():
    src = gradient(2, 2)
    assert to_nrgba(src) is src
    assert to_nrgba(src.to_pil()) == src


def test_crop_region():
    src = gradient(6, 5)
    out = crop(src, (1, 2, 4, 5))
    assert out.size == (3, 3)
    for y in range(3):
        for x in range(3):
            assert out.pixel_at(x, y) == src.pixel_at(x + 1, y + 2)


def test_crop_clipped_to_bounds():
    src = gradient(4, 4)
    assert crop(src, (2, 2, 10, 10)) == crop(src, (2, 2, 4, 4))
    assert crop(src, (-3, -3, 10, 10)) == src


def test_crop_outside_is_empty():
    assert crop(gradient(4, 4), (5, 5, 8, 8)).size == (0, 0)


def test_crop_anchor_corners():
    src = gradient(7, 5)
    assert crop_anchor(src, 3, 2, Anchor.TOP_LEFT) == crop(src, (0, 0, 3, 2))
    assert crop_anchor(src, 3, 2, Anchor.BOTTOM_RIGHT) == crop(src, (4, 3, 7, 5))
    assert crop_anchor(src, 3, 2, Anchor.TOP_RIGHT) == crop(src, (4, 0, 7, 2))
    assert crop_anchor(src, 3, 2, Anchor.BOTTOM_LEFT) == crop(src, (0, 3, 3, 5))


def test_crop_center():
    src = gradient(6, 6)
    assert crop_center(src, 2, 2) == crop(src, (2, 2, 4, 4))
    assert crop_center(src, 2, 2) == crop_anchor(src, 2, 2, Anchor.CENTER)


def test_crop_center_larger_than_image_returns_whole():
    src = gradient(3, 3)
    assert crop_center(src, 10, 10) == src


@pytest.mark.parametrize("anchor", list(Anchor))
def test_crop_anchor_sizes(anchor):
    out = crop_anchor(gradient(9, 8), 4, 3, anchor)
    assert out.size == (4, 3)


def test_paste_inside():
    bg = new(4, 4, (0, 0, 0, 255))
    fg = new(2, 2, (9, 8, 7, 255))
    out = paste(bg, fg, (1, 2))
    for y in range(4):
        for x in range(4):
            expected = fg.pixel_at(0, 0) if 1 <= x < 3 and 2 <= y < 4 else bg.pixel_at(0, 0)
            assert out.pixel_at(x, y) == expected


def test_paste_partially_outside():
    bg = new(3, 3, (0, 0, 0, 255))
    fg = gradient(2, 2)
    out = paste(bg, fg, (-1, -1))
    assert out.pixel_at(0, 0) == fg.pixel_at(1, 1)
    assert out.pixel_at(1, 1) == bg.pixel_at(1, 1)


def test_paste_outside_leaves_background():
    bg = gradient(3, 3)
    assert paste(bg, new(2, 2, (1, 2, 3)), (10, 10)) == bg


def test_paste_covering_returns_image():
    fg = gradient(3, 3)
    assert paste(new(3, 3, (5, 5, 5)), fg, (0, 0)) == fg


def test_paste_center():
    bg = new(4, 4, (0, 0, 0, 255))
    fg = new(2, 2, (9, 8, 7, 255))
    assert paste_center(bg, fg) == paste(bg, fg, (1, 1))


def test_paste_accepts_pil_images():
    bg = new(4, 4, (0, 0, 0, 255))
    fg = gradient(2, 2)
    assert paste(bg.to_pil(), fg.to_pil(), (1, 1)) == paste(bg, fg, (1, 1))


def test_overlay_full_opacity_opaque_source():
    bg = new(4, 4, (0, 0, 0, 255))
    fg = new(2, 2, (200, 100, 50, 255))
    out = overlay(bg, fg, (1, 1), 1.0)
    assert out.pixel_at(1, 1) == fg.pixel_at(0, 0)
    assert out.pixel_at(0, 0) == bg.pixel_at(0, 0)


def test_overlay_zero_opacity_keeps_background():
    bg = gradient(3, 3)
    assert overlay(bg, new(3, 3, (200, 100, 50)), (0, 0), 0.0) == bg


def test_overlay_opacity_is_clamped():
    bg = gradient(3, 3)
    fg = new(2, 2, (200, 100, 50))
    assert overlay(bg, fg, (0, 0), 5.0) == overlay(bg, fg, (0, 0), 1.0)
    assert overlay(bg, fg, (0, 0), -2.0) == bg


def test_overlay_half_opacity_between_layers():
    bg = new(1, 1, (0, 0, 0, 255))
    fg = new(1, 1, (200, 100, 50, 255))
    r, g, b, a = overlay(bg, fg, (0, 0), 0.5).pixel_at(0, 0)
    assert 0 < r < 200 and 0 < g < 100 and 0 < b < 50
    assert a == 255


def test_overlay_transparent_on_transparent():
    bg = new(2, 2, (10, 20, 30, 0))
    fg = new(2, 2, (40, 50, 60, 0))
    out = overlay(bg, fg, (0, 0), 1.0)
    assert set(out.pix) == {0}


def test_overlay_center():
    bg = gradient(5, 5)
    fg = new(3, 3, (1, 2, 3))
    assert overlay_center(bg, fg, 0.7) == overlay(bg, fg, (1, 1), 0.7)


def test_overlay_outside_returns_copy():
    bg = gradient(2, 2)
    out = overlay(bg, Image.new("RGBA", (2, 2), (9, 9, 9, 255)), (5, 5), 1.0)
    assert out == bg
    assert out is not bg