"""LabPBR 1.3 specular channel layout and the decoded channel types.

Channel layout of a specular texture::

    R  smoothness, linear 0-255
    G  0-229 F0 reflectance (linear) | 230-255 metal code
    B  0-64 porosity (linear)        | 65-255 subsurface scattering (linear)
    A  0-254 emission (linear)       | 255 emission disabled

The green and blue ranges are each split into two contiguous sub-ranges with
no gap, so every byte value belongs to exactly one variant.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Tuple, Union

from ...core.utils_range import require_byte

F0_MAX = 229
METAL_MIN = 230
STANDARD_METAL_MAX = 237
POROSITY_MAX = 64
SSS_MIN = 65
SSS_SPAN = 255 - SSS_MIN
EMISSION_MAX = 254
EMISSION_DISABLED = 255

Pixel = Tuple[int, int, int, int]


class Metal(IntEnum):
    """Predefined metals keyed by their green-channel code."""

    IRON = 230
    GOLD = 231
    ALUMINUM = 232
    CHROME = 233
    COPPER = 234
    LEAD = 235
    PLATINUM = 236
    SILVER = 237

    @property
    def label(self) -> str:
        return self.name.capitalize()

    @classmethod
    def from_name(cls, name: str) -> "Metal":
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown metal {name!r}; expected one of {[m.label for m in cls]}") from exc


def f0_percent_from_ior(ior: float) -> float:
    """Normal-incidence reflectance in percent for a dielectric of index *ior*."""

    if ior <= 0:
        raise ValueError(f"IOR must be positive, got {ior}")
    r = (ior - 1.0) / (ior + 1.0)
    return r * r * 100.0


def ior_from_f0_percent(f0_percent: float) -> float:
    """Inverse of :func:`f0_percent_from_ior` (returns the IOR >= 1 branch)."""

    if f0_percent < 0.0 or f0_percent >= 100.0:
        raise ValueError(f"F0 percentage must be within [0, 100), got {f0_percent}")
    r = math.sqrt(f0_percent / 100.0)
    return (1.0 + r) / (1.0 - r)


def smoothness_percent(value: int) -> float:
    return value / 255.0 * 100.0


def emission_percent(value: int) -> float:
    # 255 is the "disabled" sentinel, so 0 and 255 both mean no emission.
    if value == EMISSION_DISABLED:
        return 0.0
    return value / EMISSION_MAX * 100.0


def _checked(value: int, low: int, high: int, label: str) -> int:
    byte = require_byte(value, label)
    if byte < low or byte > high:
        raise ValueError(f"{label} must be within {low}-{high}, got {byte}")
    return byte


@dataclass(frozen=True)
class F0Reflectance:
    """Dielectric reflectance stored linearly in G (0-229)."""

    encoded: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "encoded", _checked(self.encoded, 0, F0_MAX, "F0 value"))

    @property
    def percent(self) -> float:
        """F0 in percent; 229 is about 89.8%, not 100%."""

        return self.encoded / 255.0 * 100.0

    @property
    def ior(self) -> float:
        return ior_from_f0_percent(self.percent)


@dataclass(frozen=True)
class MetalCode:
    """Metal identity stored in G (230-255).

    Codes above 237 are reserved and kept as plain integers.
    """

    code: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "code", _checked(self.code, METAL_MIN, 255, "metal code"))

    @property
    def metal(self) -> Optional[Metal]:
        if self.code > STANDARD_METAL_MAX:
            return None
        return Metal(self.code)

    @property
    def label(self) -> Optional[str]:
        metal = self.metal
        return metal.label if metal is not None else None

    @property
    def is_reserved(self) -> bool:
        return self.code > STANDARD_METAL_MAX

    @property
    def uses_albedo_f0(self) -> bool:
        """Code 255 asks shaders to take F0 from the albedo texture."""

        return self.code == 255


@dataclass(frozen=True)
class Porosity:
    """Porosity stored linearly in B (0-64)."""

    encoded: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "encoded", _checked(self.encoded, 0, POROSITY_MAX, "porosity value"))

    @property
    def percent(self) -> float:
        return self.encoded / POROSITY_MAX * 100.0


@dataclass(frozen=True)
class SubsurfaceScattering:
    """Subsurface scattering amount stored linearly in B (65-255)."""

    encoded: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "encoded", _checked(self.encoded, SSS_MIN, 255, "subsurface value"))

    @property
    def percent(self) -> float:
        return (self.encoded - SSS_MIN) / SSS_SPAN * 100.0


GreenClass = Union[F0Reflectance, MetalCode]
BlueClass = Union[Porosity, SubsurfaceScattering]


@dataclass(frozen=True)
class SpecularChannels:
    """Lossless decoded view of one specular pixel."""

    smoothness: int
    reflectance: GreenClass
    blue: BlueClass
    emission: int

    @property
    def smoothness_pct(self) -> float:
        return smoothness_percent(self.smoothness)

    @property
    def perceptual_roughness(self) -> float:
        return (1.0 - self.smoothness / 255.0) ** 2

    @property
    def emission_pct(self) -> float:
        return emission_percent(self.emission)

    @property
    def emission_disabled(self) -> bool:
        return self.emission == EMISSION_DISABLED

    @property
    def is_metal(self) -> bool:
        return isinstance(self.reflectance, MetalCode)


__all__ = [
    "BlueClass",
    "EMISSION_DISABLED",
    "EMISSION_MAX",
    "F0Reflectance",
    "F0_MAX",
    "GreenClass",
    "METAL_MIN",
    "Metal",
    "MetalCode",
    "POROSITY_MAX",
    "Pixel",
    "Porosity",
    "SSS_MIN",
    "SSS_SPAN",
    "STANDARD_METAL_MAX",
    "SpecularChannels",
    "SubsurfaceScattering",
    "emission_percent",
    "f0_percent_from_ior",
    "ior_from_f0_percent",
    "smoothness_percent",
]
