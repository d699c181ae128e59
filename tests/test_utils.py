import threading

import pytest

from imaging.utils import (
    clamp,
    hsl_to_rgb,
    parallel,
    reverse_pixels,
    rgb_to_hsl,
    set_max_procs,
)


@pytest.fixture(autouse=True)
def _reset_procs():
    yield
    set_max_procs(0)


def test_parallel_visits_every_index_once():
    seen = []
    lock = threading.Lock()

    def work(items):
        for i in items:
            with lock:
                seen.append(i)

    result = parallel(3, 40, work)
    assert result is None
    assert sorted(seen) == list(range(3, 40))
    assert len(seen) == len(set(seen))


def test_parallel_respects_limit():
    calls = []

    def work(items):
        calls.append(list(items))

    set_max_procs(1)
    result = parallel(0, 10, work)
    assert result is None
    assert len(calls) == 1
    assert calls[0] == list(range(10))


def test_parallel_empty_range_never_calls():
    calls = []
    parallel(5, 5, calls.append)
    parallel(5, 2, calls.append)
    assert calls == []


def test_parallel_propagates_errors():
    def work(items):
        for _ in items:
            raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        parallel(0, 8, work)


def test_clamp_limits():
    assert clamp(-5.0) == 0
    assert clamp(300.0) == 255
    assert clamp(float("inf")) == 255
    assert clamp(float("-inf")) == 0


def test_clamp_rounds_to_nearest():
    assert clamp(100.2) == 100
    assert clamp(100.5) == 101
    assert clamp(254.6) == 255


def test_reverse_pixels_swaps_order():
    pix = bytes([1, 2, 3, 4, 5, 6, 7, 8, 9, 10, 11, 12])
    assert reverse_pixels(pix) == bytes([9, 10, 11, 12, 5, 6, 7, 8, 1, 2, 3, 4])


def test_reverse_pixels_twice_is_identity():
    pix = bytes(range(40))
    assert reverse_pixels(reverse_pixels(pix)) == pix


def test_reverse_single_pixel_unchanged():
    assert reverse_pixels(bytes([1, 2, 3, 4])) == bytes([1, 2, 3, 4])


def test_rgb_to_hsl_pure_red():
    assert rgb_to_hsl(255, 0, 0) == (0.0, 1.0, 0.5)
    assert hsl_to_rgb(0.0, 1.0, 0.5) == (255, 0, 0)


def test_gray_has_no_saturation():
    h, s, l = rgb_to_hsl(77, 77, 77)
    assert (h, s) == (0.0, 0.0)
    assert hsl_to_rgb(h, s, l) == (77, 77, 77)


def test_hsl_round_trip():
    for r in range(0, 256, 51):
        for g in range(0, 256, 51):
            for b in range(0, 256, 51):
                assert hsl_to_rgb(*rgb_to_hsl(r, g, b)) == (r, g, b)


def test_hsl_components_in_unit_range():
    for color in [(12, 200, 90), (250, 3, 140), (0, 0, 255), (30, 30, 31)]:
        h, s, l = rgb_to_hsl(*color)
        assert 0.0 <= h < 1.0
        assert 0.0 <= s <= 1.0
        assert 0.0 <= l <= 1.0