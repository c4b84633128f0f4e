"""Nearest-material lookup against the reference catalog."""
from __future__ import annotations

import math
import numbers
from dataclasses import dataclass
from typing import Dict, Optional

from ...core.utils_range import require_byte
from .catalog import CatalogMaterial, iter_materials, materials_in
from .channels import F0_MAX, METAL_MIN, STANDARD_METAL_MAX


@dataclass(frozen=True)
class MaterialMatch:
    material: CatalogMaterial
    difference: float

    @property
    def reflectance(self) -> Optional[float]:
        return self.material.reflectance

    def as_dict(self) -> Dict[str, object]:
        material = self.material
        return {
            "name": material.name,
            "category": material.category,
            "f0": material.f0,
            "reflectance": self.reflectance,
            "ior": material.ior,
            "rgb_f0": list(material.rgb_f0) if material.rgb_f0 is not None else None,
            "difference": self.difference,
            "notes": material.notes,
        }


def match_f0(encoded: float) -> MaterialMatch:
    """Return the catalog entry whose encoded F0 is closest to *encoded*.

    *encoded* may be fractional (for example an image mean). The search runs
    over every category in catalog order and the first entry reaching the
    minimum difference wins.
    """

    if isinstance(encoded, bool) or not isinstance(encoded, numbers.Real) or math.isnan(encoded):
        raise ValueError(f"Encoded F0 must be a number, got {encoded!r}")
    if encoded < 0 or encoded > F0_MAX:
        raise ValueError(f"Encoded F0 must be within 0-{F0_MAX}, got {encoded}")

    candidates = iter_materials()
    best = next(candidates)
    best_difference = abs(encoded - best.f0)
    for candidate in candidates:
        difference = abs(encoded - candidate.f0)
        if difference < best_difference:
            best = candidate
            best_difference = difference
    return MaterialMatch(material=best, difference=best_difference)


def match_metal(code: int) -> Optional[CatalogMaterial]:
    """Return the catalog metal for a green code, ``None`` for reserved codes."""

    value = require_byte(code, "metal code")
    if value < METAL_MIN:
        raise ValueError(f"Metal codes start at {METAL_MIN}, got {value}")
    if value > STANDARD_METAL_MAX:
        return None
    for material in materials_in("metals"):
        if material.f0 == value:
            return material
    return None


__all__ = ["MaterialMatch", "match_f0", "match_metal"]
