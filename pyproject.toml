[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "imaging"
version = "1.0.0"
description = "Basic image processing: resize, rotate, crop, colour adjustments, blur, convolution and histograms."
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = ["image", "resize", "rotate", "crop", "blur", "thumbnail", "exif"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Scientific/Engineering :: Image Processing",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["imaging"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
