import pytest

from imaging.histogram import histogram
from imaging.nrgba import NRGBA
from imaging.tools import new


def test_empty_image_gives_zeros():
    result = histogram(NRGBA(0, 0))
    assert result == [0.0] * 256


def test_gray_image_single_bin():
    result = histogram(new(4, 3, (128, 128, 128, 255)))
    assert len(result) == 256
    assert result[128] == 1.0
    assert sum(result) == 1.0


def test_black_and_white_halves():
    img = new(2, 2, (0, 0, 0, 255))
    img.set_pixel(1, 0, (255, 255, 255, 255))
    img.set_pixel(1, 1, (255, 255, 255, 255))
    result = histogram(img)
    assert result[0] == 0.5
    assert result[255] == 0.5


def test_pure_red_luminance():
    result = histogram(new(2, 2, (255, 0, 0, 255)))
    assert result[76] == 1.0


def test_probabilities_sum_to_one():
    img = NRGBA(5, 4)
    for y in range(4):
        for x in range(5):
            img.set_pixel(x, y, (x * 50, y * 60, (x + y) * 20, 255))
    result = histogram(img)
    assert sum(result) == pytest.approx(1.0)
    assert all(0.0 <= p <= 1.0 for p in result)


def test_alpha_is_ignored():
    opaque = new(3, 3, (200, 200, 200, 255))
    translucent = new(3, 3, (200, 200, 200, 10))
    assert histogram(translucent) == histogram(opaque)


def test_pillow_input_matches_nrgba():
    img = new(3, 2, (10, 200, 30, 255))
    img.set_pixel(0, 0, (90, 90, 90, 255))
    assert histogram(img.to_pil()) == histogram(img)