"""Encoding of physical material values into LabPBR specular bytes.

Every encoder validates its input and only produces bytes inside the
sub-range its channel reserves for that quantity. Rounding is half-up.
"""
from __future__ import annotations

import math
import numbers
from typing import Union

import numpy as np

from ...core.utils_range import clamp, require_byte, require_percent, round_half_up
from .channels import (
    EMISSION_DISABLED,
    EMISSION_MAX,
    F0_MAX,
    POROSITY_MAX,
    SSS_MIN,
    SSS_SPAN,
    F0Reflectance,
    Metal,
    MetalCode,
    Pixel,
    Porosity,
    SpecularChannels,
    SubsurfaceScattering,
    f0_percent_from_ior,
)

F0_ENCODE_SCALE = 2.55


def encode_f0_percent(pct: float) -> int:
    """Encode a dielectric F0 percentage into G (0-229).

    The format stops at 229 (about 89.8%), so 90-100% clamps to 229.
    Dielectrics never get close to that range.
    """

    value = round_half_up(require_percent(pct, "F0 percentage") * F0_ENCODE_SCALE)
    return int(clamp(value, 0, F0_MAX))


def encode_ior(ior: float) -> int:
    """Encode a dielectric index of refraction into G via its F0."""

    if isinstance(ior, bool) or not isinstance(ior, numbers.Real) or math.isnan(ior) or ior < 1.0:
        raise ValueError(f"IOR must be a number >= 1.0, got {ior!r}")
    return encode_f0_percent(f0_percent_from_ior(ior))


def encode_metal(metal: Union[Metal, str, int]) -> int:
    """Return the green code (230-237) of a predefined metal."""

    if isinstance(metal, str):
        return int(Metal.from_name(metal))
    try:
        return int(Metal(metal))
    except ValueError as exc:
        raise ValueError(f"{metal!r} is not a predefined metal code (230-237)") from exc


def encode_porosity(pct: float) -> int:
    """Encode porosity (0-100%) into B (0-64)."""

    return round_half_up(require_percent(pct, "porosity") / 100.0 * POROSITY_MAX)


def encode_sss(pct: float) -> int:
    """Encode subsurface scattering (0-100%) into B (65-255)."""

    return SSS_MIN + round_half_up(require_percent(pct, "subsurface scattering") / 100.0 * SSS_SPAN)


def encode_emission(pct: float = 0.0, *, disabled: bool = False) -> int:
    """Encode emission into A.

    0% maps to 0 and 100% to 254. The sentinel 255 is only returned when
    *disabled* is requested explicitly.
    """

    if disabled:
        return EMISSION_DISABLED
    return round_half_up(require_percent(pct, "emission") / 100.0 * EMISSION_MAX)


def encode_smoothness(pct: float) -> int:
    """Encode smoothness (0-100%) into R (0-255)."""

    return round_half_up(require_percent(pct, "smoothness") / 100.0 * 255.0)


def encode_roughness(roughness: float) -> int:
    """Encode perceptual roughness (0-1) as smoothness, ``1 - sqrt(roughness)``."""

    if (
        isinstance(roughness, bool)
        or not isinstance(roughness, numbers.Real)
        or math.isnan(roughness)
        or not 0.0 <= roughness <= 1.0
    ):
        raise ValueError(f"Roughness must be within 0-1, got {roughness!r}")
    return round_half_up((1.0 - math.sqrt(roughness)) * 255.0)


def encode_pixel(channels: SpecularChannels) -> Pixel:
    """Inverse of :func:`decode_pixel`."""

    reflectance = channels.reflectance
    if isinstance(reflectance, F0Reflectance):
        green = reflectance.encoded
    elif isinstance(reflectance, MetalCode):
        green = reflectance.code
    else:
        raise ValueError(f"Unsupported reflectance variant {reflectance!r}")

    blue = channels.blue
    if not isinstance(blue, (Porosity, SubsurfaceScattering)):
        raise ValueError(f"Unsupported blue variant {blue!r}")

    return (
        require_byte(channels.smoothness, "smoothness"),
        green,
        blue.encoded,
        require_byte(channels.emission, "emission"),
    )


def _plane(values, name: str) -> np.ndarray:
    array = np.asarray(values)
    if array.dtype.kind not in "iu":
        raise ValueError(f"{name} plane must hold integer bytes, got dtype {array.dtype}")
    if array.size and (array.min() < 0 or array.max() > 255):
        raise ValueError(f"{name} plane contains values outside 0-255")
    return array.astype(np.uint8)


def encode_buffer(red, green, blue, alpha) -> np.ndarray:
    """Interleave four byte planes into a ``(height, width, 4)`` RGBA buffer.

    Scalars broadcast against the other planes; at least one plane must be
    two dimensional.
    """

    planes = np.broadcast_arrays(
        _plane(red, "red"),
        _plane(green, "green"),
        _plane(blue, "blue"),
        _plane(alpha, "alpha"),
    )
    if planes[0].ndim != 2:
        raise ValueError(f"Channel planes must be two dimensional, got shape {planes[0].shape}")
    return np.ascontiguousarray(np.stack(planes, axis=-1), dtype=np.uint8)


def fill_buffer(pixel: Pixel, width: int, height: int) -> np.ndarray:
    """Return a ``(height, width, 4)`` buffer filled with *pixel*."""

    if width < 0 or height < 0:
        raise ValueError(f"Image dimensions must be non-negative, got {width}x{height}")
    if len(pixel) != 4:
        raise ValueError(f"Pixel must have four channels, got {pixel!r}")
    values = [require_byte(value, channel) for value, channel in zip(pixel, ("red", "green", "blue", "alpha"))]
    buffer = np.empty((height, width, 4), dtype=np.uint8)
    buffer[...] = values
    return buffer


__all__ = [
    "F0_ENCODE_SCALE",
    "encode_buffer",
    "encode_emission",
    "encode_f0_percent",
    "encode_ior",
    "encode_metal",
    "encode_pixel",
    "encode_porosity",
    "encode_roughness",
    "encode_smoothness",
    "encode_sss",
    "fill_buffer",
]
