"""Reference catalog of real-world materials and their LabPBR green values.

Dielectric entries are derived from their index of refraction
(``F0% = ((n - 1) / (n + 1))^2 * 100``) and encoded with the regular F0
encoder. Metal entries carry their predefined green code and an approximate
sRGB F0 tint. The table is built once at import and exposed read-only.
"""
from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple

from .channels import Metal, f0_percent_from_ior
from .encoding import encode_f0_percent


@dataclass(frozen=True)
class CatalogMaterial:
    name: str
    category: str
    f0: int
    f0_percent: Optional[float] = None
    ior: Optional[float] = None
    notes: Optional[str] = None
    rgb_f0: Optional[Tuple[int, int, int]] = None

    @property
    def is_metal(self) -> bool:
        return self.category == "metals"

    @property
    def reflectance(self) -> Optional[float]:
        """F0 percentage, derived from the IOR when not stored."""

        if self.f0_percent is not None:
            return self.f0_percent
        if self.ior is not None:
            return f0_percent_from_ior(self.ior)
        return None


def _dielectric(category: str, name: str, ior: float, notes: Optional[str] = None) -> CatalogMaterial:
    f0_percent = f0_percent_from_ior(ior)
    return CatalogMaterial(
        name=name,
        category=category,
        f0=encode_f0_percent(f0_percent),
        f0_percent=f0_percent,
        ior=ior,
        notes=notes,
    )


def _metal(metal: Metal, rgb_f0: Tuple[int, int, int], notes: str) -> CatalogMaterial:
    return CatalogMaterial(name=metal.label, category="metals", f0=int(metal), notes=notes, rgb_f0=rgb_f0)


_TABLE = {
    "liquids": (
        _dielectric("liquids", "Water (20°C)", 1.333, "Clear fresh water"),
        _dielectric("liquids", "Ice (−10°C)", 1.31),
        _dielectric("liquids", "Milk (turbid)", 1.35, "Scattering dominates; F0 driven by base fluid"),
        _dielectric("liquids", "Ethanol (alcohol)", 1.361),
        _dielectric("liquids", "Vegetable oil", 1.47),
        _dielectric("liquids", "Glycerin (~75% sugar-like)", 1.473),
        _dielectric("liquids", "Sucrose solution (~50%)", 1.42, "Representative for syrups"),
    ),
    "surfaces": (
        _dielectric("surfaces", "PTFE (Teflon)", 1.35),
        _dielectric("surfaces", "Human skin (epidermis)", 1.50, "Topcoat only; SSS dominates appearance"),
        _dielectric("surfaces", "Rubber", 1.52),
        _dielectric("surfaces", "Cellulose (paper/wood fibers)", 1.47),
        _dielectric("surfaces", "Polystyrene", 1.59),
        _dielectric("surfaces", "Nylon", 1.53),
        _dielectric("surfaces", "Ceramic glaze (gloss)", 1.52),
        _dielectric("surfaces", "Asphalt (binder)", 1.52, "Macro-rough; low spec visually"),
    ),
    "plastics": (
        _dielectric("plastics", "PMMA (Acrylic/Plexiglas)", 1.49),
        _dielectric("plastics", "Polycarbonate (PC)", 1.585),
        _dielectric("plastics", "PVC", 1.54),
        _dielectric("plastics", "ABS", 1.54),
    ),
    "gems": (
        _dielectric("gems", "Quartz (SiO₂)", 1.544),
        _dielectric("gems", "Halite (rock salt)", 1.544),
        _dielectric("gems", "Amethyst (quartz)", 1.544),
        _dielectric("gems", "Amber", 1.55),
        _dielectric("gems", "Jadeite", 1.66),
        _dielectric("gems", "Emerald (beryl)", 1.58),
        _dielectric("gems", "Sapphire (corundum)", 1.76),
        _dielectric("gems", "Ruby (corundum)", 1.76),
        _dielectric("gems", "Topaz", 1.62),
        _dielectric("gems", "Cubic zirconia", 2.15),
        _dielectric("gems", "Diamond", 2.417),
    ),
    "transparents": (
        _dielectric("transparents", "Fused silica", 1.458),
        _dielectric("transparents", "Borosilicate (Pyrex)", 1.47),
        _dielectric("transparents", "Soda-lime glass", 1.52),
        _dielectric("transparents", "Flint glass (dense)", 1.62),
        _dielectric("transparents", "Crystal (lead glass)", 1.70),
    ),
    "human": (
        _dielectric("human", "Tears/Saliva (aqueous)", 1.336),
        _dielectric("human", "Cornea", 1.376),
        _dielectric("human", "Eye lens", 1.406),
        _dielectric("human", "Tooth dentin", 1.54),
        _dielectric("human", "Tooth enamel", 1.62),
        _dielectric("human", "Hair (surface)", 1.55),
    ),
    "building": (
        _dielectric("building", "Concrete (binder)", 1.52, "Macro-rough, porous"),
        _dielectric("building", "Granite (polished)", 1.60),
        _dielectric("building", "Marble (polished)", 1.49),
        _dielectric("building", "Porcelain tile (glaze)", 1.52),
    ),
    "woods": (
        _dielectric("woods", "Bare wood (cellulose)", 1.47, "Finish changes gloss only"),
        _dielectric("woods", "Varnished wood", 1.52),
        _dielectric("woods", "Oiled wood", 1.47),
    ),
    "paints": (
        _dielectric("paints", "Matte paint (binder)", 1.52, "Microfacet roughness high"),
        _dielectric("paints", "Gloss clearcoat", 1.52),
    ),
    "metals": (
        _metal(Metal.IRON, (196, 199, 199), "Gray, slightly bluish"),
        _metal(Metal.GOLD, (255, 215, 0), "Rich yellow tone"),
        _metal(Metal.ALUMINUM, (224, 223, 219), "Light gray, near-white"),
        _metal(Metal.CHROME, (236, 236, 236), "Neutral reflective silver"),
        _metal(Metal.COPPER, (184, 115, 51), "Warm reddish-brown"),
        _metal(Metal.LEAD, (140, 140, 140), "Dull gray, low reflectance"),
        _metal(Metal.PLATINUM, (229, 228, 226), "Pale silvery-white"),
        _metal(Metal.SILVER, (245, 245, 245), "Bright, nearly white metal"),
    ),
}

MATERIAL_CATALOG: Mapping[str, Tuple[CatalogMaterial, ...]] = MappingProxyType(_TABLE)
CATEGORIES: Tuple[str, ...] = tuple(MATERIAL_CATALOG)
_FLATTENED: Tuple[CatalogMaterial, ...] = tuple(entry for entries in MATERIAL_CATALOG.values() for entry in entries)


def iter_materials() -> Iterator[CatalogMaterial]:
    """Iterate over every entry in catalog order, categories merged."""

    return iter(_FLATTENED)


def materials_in(category: str) -> Tuple[CatalogMaterial, ...]:
    try:
        return MATERIAL_CATALOG[category]
    except KeyError as exc:
        raise ValueError(f"Unknown catalog category {category!r}; expected one of {CATEGORIES}") from exc


__all__ = ["CATEGORIES", "CatalogMaterial", "MATERIAL_CATALOG", "iter_materials", "materials_in"]
