"""Per-pixel decoding of LabPBR specular data and channel previews."""
from __future__ import annotations

from typing import Dict

import numpy as np

from ...core.utils_image import PixelBuffer, as_pixel_array
from ...core.utils_range import require_byte
from .channels import (
    F0_MAX,
    POROSITY_MAX,
    BlueClass,
    F0Reflectance,
    GreenClass,
    MetalCode,
    Porosity,
    SpecularChannels,
    SubsurfaceScattering,
    emission_percent,
    smoothness_percent,
)

CHANNEL_NAMES = ("red", "green", "blue", "alpha")


def classify_green(g: int) -> GreenClass:
    """Classify a green byte: ``g <= 229`` is F0, ``g >= 230`` is a metal code."""

    value = require_byte(g, "green")
    if value <= F0_MAX:
        return F0Reflectance(value)
    return MetalCode(value)


def classify_blue(b: int) -> BlueClass:
    """Classify a blue byte: ``b <= 64`` is porosity, ``b >= 65`` is SSS."""

    value = require_byte(b, "blue")
    if value <= POROSITY_MAX:
        return Porosity(value)
    return SubsurfaceScattering(value)


def decode_emission(a: int) -> float:
    """Emission percentage of an alpha byte (255 means disabled, i.e. 0%)."""

    return emission_percent(require_byte(a, "alpha"))


def decode_smoothness(r: int) -> float:
    return smoothness_percent(require_byte(r, "red"))


def decode_f0(encoded: int) -> float:
    """F0 percentage of a dielectric green byte."""

    return F0Reflectance(encoded).percent


def decode_pixel(r: int, g: int, b: int, a: int) -> SpecularChannels:
    """Decode one RGBA pixel into its :class:`SpecularChannels` view."""

    return SpecularChannels(
        smoothness=require_byte(r, "red"),
        reflectance=classify_green(g),
        blue=classify_blue(b),
        emission=require_byte(a, "alpha"),
    )


def channel_previews(pixels: PixelBuffer, width: int, height: int) -> Dict[str, np.ndarray]:
    """Return one opaque grayscale RGBA image per channel.

    Each preview replicates the channel value into R, G and B and forces
    alpha to 255 so that the alpha channel itself stays visible.
    """

    array = as_pixel_array(pixels, width, height)
    previews: Dict[str, np.ndarray] = {}
    for index, name in enumerate(CHANNEL_NAMES):
        channel = array[..., index]
        opaque = np.full(channel.shape, 255, dtype=np.uint8)
        previews[name] = np.dstack([channel, channel, channel, opaque])
    return previews


__all__ = [
    "CHANNEL_NAMES",
    "channel_previews",
    "classify_blue",
    "classify_green",
    "decode_emission",
    "decode_f0",
    "decode_pixel",
    "decode_smoothness",
]
