"""Basic image processing: resize, rotate, crop, colour adjustments, effects and file I/O."""

__version__ = "1.0.0"