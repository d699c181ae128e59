"""In-memory 32-bit RGBA image with non-premultiplied alpha.

Every processing function in the package accepts either an :class:`NRGBA`
image or a Pillow image and returns a new :class:`NRGBA` image.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from PIL import Image

Color = tuple[int, int, int, int]


def _as_nrgba_color(color: Sequence[int]) -> Color:
    """Normalise an (r, g, b) or (r, g, b, a) sequence to a 4-tuple of bytes."""
    values = tuple(int(v) for v in color)
    if len(values) == 3:
        values = (*values, 255)
    if len(values) != 4:
        raise ValueError(f"color must have 3 or 4 components, got {len(values)}")
    if any(not 0 <= v <= 255 for v in values):
        raise ValueError(f"color components must be in 0..255: {values}")
    return values  # type: ignore[return-value]


@dataclass
class NRGBA:
    """A width x height image stored as row-major R, G, B, A bytes."""

    width: int
    height: int
    pix: bytearray = field(default=None, repr=False)  # type: ignore[assignment]

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("image dimensions must not be negative")
        expected = self.width * self.height * 4
        if self.pix is None:
            self.pix = bytearray(expected)
        else:
            self.pix = bytearray(self.pix)
            if len(self.pix) != expected:
                raise ValueError(
                    f"pixel buffer has {len(self.pix)} bytes, expected {expected}"
                )

    @property
    def stride(self) -> int:
        """Number of bytes in one row."""
        return self.width * 4

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    def _offset(self, x: int, y: int) -> int:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) is outside a {self.width}x{self.height} image")
        return y * self.stride + x * 4

    def pixel_at(self, x: int, y: int) -> Color:
        """Return the (r, g, b, a) colour of a pixel."""
        i = self._offset(x, y)
        r, g, b, a = self.pix[i : i + 4]
        return r, g, b, a

    def set_pixel(self, x: int, y: int, color: Sequence[int]) -> None:
        """Set a pixel to an (r, g, b) or (r, g, b, a) colour."""
        i = self._offset(x, y)
        self.pix[i : i + 4] = bytes(_as_nrgba_color(color))

    def row(self, y: int) -> bytes:
        """Return the bytes of one row."""
        if not 0 <= y < self.height:
            raise IndexError(f"row {y} is outside an image of height {self.height}")
        start = y * self.stride
        return bytes(self.pix[start : start + self.stride])

    def opaque(self) -> bool:
        """True if every pixel is fully opaque."""
        return all(a == 255 for a in self.pix[3::4])

    def to_pil(self) -> Image.Image:
        """Return the image as a Pillow image in RGBA mode."""
        if self.width == 0 or self.height == 0:
            return Image.new("RGBA", (self.width, self.height))
        return Image.frombytes("RGBA", (self.width, self.height), bytes(self.pix))