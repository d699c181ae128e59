"""Shared helpers: work distribution, rounding and colour-space conversion."""

from __future__ import annotations

import os
import queue
from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor

_max_procs = 0


def set_max_procs(value: int) -> None:
    """Limit the number of concurrent workers; a value <= 0 clears the limit."""
    global _max_procs
    _max_procs = int(value)


def parallel(start: int, stop: int, fn: Callable[[Iterator[int]], None]) -> None:
    """Feed the integers start..stop-1 to fn, split between worker threads.

    Each worker calls fn once with an iterator that yields indices not yet
    taken by any other worker.
    """
    count = stop - start
    if count < 1:
        return

    procs = os.cpu_count() or 1
    limit = _max_procs
    if 0 < limit < procs:
        procs = limit
    procs = min(procs, count)

    work: queue.SimpleQueue[int] = queue.SimpleQueue()
    for i in range(start, stop):
        work.put(i)

    def items() -> Iterator[int]:
        while True:
            try:
                yield work.get_nowait()
            except queue.Empty:
                return

    if procs == 1:
        fn(items())
        return

    with ThreadPoolExecutor(max_workers=procs) as executor:
        futures = [executor.submit(fn, items()) for _ in range(procs)]
    for future in futures:
        future.result()


def clamp(x: float) -> int:
    """Round x to the nearest integer and clamp it to 0..255."""
    v = x + 0.5
    if v != v:
        return 0
    if v >= 256:
        return 255
    if v < 1:
        return 0
    return int(v)


def reverse_pixels(pix: bytes) -> bytes:
    """Return the 4-byte pixels of a row in reverse order."""
    chunks = [bytes(pix[i : i + 4]) for i in range(0, len(pix), 4)]
    return b"".join(reversed(chunks))


def rgb_to_hsl(r: int, g: int, b: int) -> tuple[float, float, float]:
    """Convert 8-bit RGB to hue, saturation and lightness in 0..1."""
    rr, gg, bb = r / 255, g / 255, b / 255
    mx = max(rr, gg, bb)
    mn = min(rr, gg, bb)
    lightness = (mx + mn) / 2
    if mx == mn:
        return 0.0, 0.0, lightness

    d = mx - mn
    if lightness > 0.5:
        saturation = d / (2 - mx - mn)
    else:
        saturation = d / (mx + mn)

    if mx == rr:
        hue = (gg - bb) / d
        if g < b:
            hue += 6
    elif mx == gg:
        hue = (bb - rr) / d + 2
    else:
        hue = (rr - gg) / d + 4
    return hue / 6, saturation, lightness


def hsl_to_rgb(h: float, s: float, l: float) -> tuple[int, int, int]:
    """Convert hue, saturation and lightness in 0..1 to 8-bit RGB."""
    if s == 0:
        v = clamp(l * 255)
        return v, v, v

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q
    r = _hue_to_rgb(p, q, h + 1 / 3.0)
    g = _hue_to_rgb(p, q, h)
    b = _hue_to_rgb(p, q, h - 1 / 3.0)
    return clamp(r * 255), clamp(g * 255), clamp(b * 255)


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6.0:
        return p + (q - p) * 6 * t
    if t < 1 / 2.0:
        return q
    if t < 2 / 3.0:
        return p + (q - p) * (2 / 3.0 - t) * 6
    return p