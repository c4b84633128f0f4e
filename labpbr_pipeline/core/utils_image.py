"""Pixel buffer helpers bridging raw RGBA data, numpy and Pillow."""
from __future__ import annotations

from typing import Union

import numpy as np
from PIL import Image

PixelBuffer = Union[np.ndarray, bytes, bytearray, memoryview]


def is_power_of_two(value: int) -> bool:
    """Return ``True`` when *value* is a positive power of two."""

    return value > 0 and (value & (value - 1)) == 0


def as_pixel_array(pixels: PixelBuffer, width: int, height: int) -> np.ndarray:
    """Return *pixels* as a ``(height, width, 4)`` ``uint8`` array.

    Accepts an already shaped array or any flat row-major RGBA buffer of
    ``width * height * 4`` bytes. Values outside 0-255, non-integer data and
    size mismatches are rejected with :class:`ValueError`.
    """

    if width < 0 or height < 0:
        raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")
    expected = width * height * 4

    if isinstance(pixels, (bytes, bytearray, memoryview)):
        array = np.frombuffer(pixels, dtype=np.uint8)
    else:
        array = np.asarray(pixels)
        if array.dtype != np.uint8:
            if array.dtype.kind not in "iu":
                raise ValueError(f"Pixel data must be integer bytes, got dtype {array.dtype}")
            if array.size and (array.min() < 0 or array.max() > 255):
                raise ValueError("Pixel data contains values outside 0-255")
            array = array.astype(np.uint8)

    if array.ndim == 3 and array.shape != (height, width, 4):
        raise ValueError(f"Pixel array shaped {array.shape} does not match {width}x{height} RGBA")
    if array.size != expected:
        raise ValueError(
            f"Pixel buffer holds {array.size} values, expected {expected} for {width}x{height} RGBA"
        )
    return array.reshape(height, width, 4)


def from_image(image: Image.Image) -> np.ndarray:
    """Convert any PIL image into an RGBA ``uint8`` array."""

    return np.asarray(image.convert("RGBA"), dtype=np.uint8)


def to_image(pixels: np.ndarray) -> Image.Image:
    """Wrap a ``(height, width, 4)`` ``uint8`` array into an RGBA PIL image."""

    array = np.ascontiguousarray(pixels, dtype=np.uint8)
    if array.ndim != 3 or array.shape[2] != 4:
        raise ValueError(f"Expected an RGBA array shaped (h, w, 4), got {array.shape}")
    return Image.fromarray(array)
