# imaging

Basic image processing in pure Python: resizing, rotating, cropping, flipping,
colour adjustments, blurring, sharpening, convolution and histograms.

The processing functions take an image and return a new
`imaging.nrgba.NRGBA` image (8-bit RGBA with non-premultiplied alpha).
Inputs may be `NRGBA` images or Pillow images; files are read and written
through Pillow.

## Installation

```
pip install .
```

## Usage

```python
from imaging.fileio import open_image, save
from imaging.resize import resize, fit, thumbnail, LANCZOS, CATMULL_ROM
from imaging.adjust import adjust_brightness, adjust_contrast, grayscale
from imaging.effects import blur, sharpen
from imaging.transform import rotate90, flip_h

# Load an image, applying the EXIF orientation tag if there is one.
img = open_image("photo.jpg", auto_orientation=True)

# Scale to 800 pixels wide, keeping the aspect ratio.
small = resize(img, 800, 0, LANCZOS)

# Fit inside a 300x300 box, or crop-fill a 100x100 thumbnail.
boxed = fit(img, 300, 300, LANCZOS)
thumb = thumbnail(img, 100, 100, CATMULL_ROM)

# Colour adjustments and effects.
result = adjust_contrast(adjust_brightness(small, 10), 20)
result = sharpen(blur(result, 1.5), 0.5)
result = flip_h(rotate90(grayscale(result)))

# The format is taken from the extension.
save(result, "out.jpg", jpeg_quality=80)
```

`open_image` and `decode` return the decoded Pillow image, or an `NRGBA`
image when auto-orientation had to transform it; either can be passed to
every function in the package.

### The NRGBA image

```python
from imaging.nrgba import NRGBA

img = NRGBA(2, 1)                    # transparent black
img.set_pixel(0, 0, (255, 0, 0))     # alpha defaults to 255
img.pixel_at(0, 0)                   # (255, 0, 0, 255)
img.opaque()                         # False: pixel (1, 0) is transparent
pil_image = img.to_pil()             # Pillow image in RGBA mode
```

### Resampling filters

`imaging.resize` provides `NEAREST_NEIGHBOR`, `BOX`, `LINEAR`, `HERMITE`,
`MITCHELL_NETRAVALI`, `CATMULL_ROM`, `BSPLINE`, `GAUSSIAN`, `BARTLETT`,
`LANCZOS`, `HANN`, `HAMMING`, `BLACKMAN`, `WELCH` and `COSINE`. A custom
`ResampleFilter(support, kernel)` may be used as well; a support of 0 or less
selects nearest-neighbour resampling. Besides `resize`, `fit`, `fill` and
`thumbnail`, `compress(img, max_size, filter)` scales an image down so that
its longer side is `max_size` pixels.

### Cropping, pasting and overlays

```python
from imaging.tools import new, crop_anchor, paste_center, overlay, Anchor

background = new(400, 300, (255, 255, 255, 255))
piece = crop_anchor(img, 200, 200, Anchor.TOP_LEFT)
combined = paste_center(background, piece)
blended = overlay(background, piece, (50, 50), 0.5)
```

Rectangles are `(x0, y0, x1, y1)` tuples and positions are `(x, y)` tuples.

### Rotation

`rotate(img, angle, bg_color)` rotates counter-clockwise by any angle in
degrees, filling uncovered areas with `bg_color`. `rotate_move` rotates
around a chosen point, shifts the result and renders it into a canvas of a
given size.

### Convolution and histograms

```python
from imaging.convolution import convolve_3x3, ConvolveOptions
from imaging.histogram import histogram

edges = convolve_3x3(
    img,
    [-1, -1, -1, -1, 8, -1, -1, -1, -1],
    ConvolveOptions(abs=True),
)
hist = histogram(img)  # 256 luminance probabilities summing to 1
```

### Formats

`save` and `encode` support JPEG, PNG, GIF, TIFF and BMP (`imaging.fileio.Format`),
with the keyword options `jpeg_quality` (default 95), `gif_num_colors`
(default 256) and `png_compression_level` (default 6). An unknown extension
raises `imaging.fileio.UnsupportedFormatError`.

## What it does not do

This is a library only: it installs no command-line tool. GIF encoding uses
Pillow's own quantizer; there is no option to choose a different quantizer or
dithering method.

## Running the tests

```
pip install .[test]
pytest
```