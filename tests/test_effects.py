from PIL import Image

from imaging.effects import blur, sharpen
from imaging.nrgba import NRGBA
from imaging.tools import new


def _spot(size=5, color=(255, 255, 255, 255)):
    img = new(size, size, (0, 0, 0, 255))
    img.set_pixel(size // 2, size // 2, color)
    return img


def test_blur_non_positive_sigma_copies():
    img = _spot()
    for sigma in (0, -1.5):
        out = blur(img, sigma)
        assert out.pix == img.pix
        assert out is not img


def test_blur_keeps_size():
    img = new(7, 3, (10, 20, 30, 255))
    out = blur(img, 1.2)
    assert out.size == (7, 3)


def test_blur_uniform_image_is_unchanged():
    img = new(6, 4, (40, 90, 160, 255))
    out = blur(img, 2.0)
    assert out.pix == img.pix


def test_blur_transparent_image_stays_zero():
    img = NRGBA(4, 4)
    out = blur(img, 1.0)
    assert out.pix == bytearray(4 * 4 * 4)


def test_blur_spreads_bright_spot_symmetrically():
    img = _spot()
    out = blur(img, 1.0)
    center = out.pixel_at(2, 2)
    assert center[0] < 255
    assert out.pixel_at(1, 2)[0] > 0
    assert out.pixel_at(1, 2) == out.pixel_at(3, 2)
    assert out.pixel_at(2, 1) == out.pixel_at(2, 3)
    assert out.pixel_at(1, 2)[0] < center[0]


def test_blur_accepts_pillow_image():
    img = _spot()
    assert blur(img.to_pil(), 0.8).pix == blur(img, 0.8).pix


def test_sharpen_non_positive_sigma_copies():
    img = _spot()
    assert sharpen(img, 0).pix == img.pix


def test_sharpen_uniform_image_is_unchanged():
    img = new(5, 5, (100, 100, 100, 255))
    assert sharpen(img, 1.5).pix == img.pix


def test_sharpen_increases_edge_contrast():
    img = new(6, 1, (50, 50, 50, 255))
    for x in range(3, 6):
        img.set_pixel(x, 0, (200, 200, 200, 255))
    out = sharpen(img, 1.0)
    assert out.pixel_at(2, 0)[0] < 50
    assert out.pixel_at(3, 0)[0] > 200
    assert out.pixel_at(2, 0)[3] == 255


def test_sharpen_pillow_matches_nrgba():
    img = _spot(color=(200, 100, 50, 255))
    pil = Image.frombytes("RGBA", img.size, bytes(img.pix))
    assert sharpen(pil, 1.0).pix == sharpen(img, 1.0).pix