"""Tests for the reference catalog and nearest-material lookup."""
from __future__ import annotations

import pytest

from labpbr_pipeline.modules.labpbr.catalog import CATEGORIES, MATERIAL_CATALOG, iter_materials, materials_in
from labpbr_pipeline.modules.labpbr.channels import F0_MAX, f0_percent_from_ior, ior_from_f0_percent
from labpbr_pipeline.modules.labpbr.matching import match_f0, match_metal


def test_catalog_categories_keep_their_order() -> None:
    assert CATEGORIES[0] == "liquids"
    assert CATEGORIES[-1] == "metals"
    assert next(iter_materials()).name.startswith("Water")


def test_catalog_is_read_only() -> None:
    with pytest.raises(TypeError):
        MATERIAL_CATALOG["custom"] = ()  # type: ignore[index]
    material = next(iter_materials())
    with pytest.raises(AttributeError):
        material.f0 = 0  # type: ignore[misc]


def test_dielectric_entries_stay_in_f0_range() -> None:
    for material in iter_materials():
        if material.is_metal:
            assert 230 <= material.f0 <= 237
            assert material.rgb_f0 is not None
        else:
            assert 0 <= material.f0 <= F0_MAX
            assert material.ior is not None
            assert material.reflectance == pytest.approx(f0_percent_from_ior(material.ior))


def test_diamond_reference_value() -> None:
    diamond = next(material for material in materials_in("gems") if material.name == "Diamond")
    assert diamond.f0 == 44
    assert diamond.reflectance == pytest.approx(17.2, abs=0.05)


def test_match_f0_exact_hit_is_deterministic() -> None:
    first = match_f0(9)
    second = match_f0(9)
    assert first == second
    assert first.material.name == "Vegetable oil"
    assert first.difference == 0


def test_match_f0_prefers_first_entry_on_ties() -> None:
    match = match_f0(0.0)
    assert match.material.name.startswith("Water")
    assert match.difference == 5


def test_match_f0_accepts_fractional_means() -> None:
    match = match_f0(43.6)
    assert match.material.name == "Diamond"
    assert match.difference == pytest.approx(0.4)


def test_match_f0_searches_metal_entries_too() -> None:
    match = match_f0(F0_MAX)
    assert match.material.is_metal
    assert match.material.name == "Iron"
    assert match.difference == 1


@pytest.mark.parametrize("value", [-1, 230, float("nan"), "9", True])
def test_match_f0_rejects_invalid_input(value) -> None:
    with pytest.raises(ValueError):
        match_f0(value)


def test_match_metal() -> None:
    assert match_metal(234).name == "Copper"
    assert match_metal(230).rgb_f0 == (196, 199, 199)
    assert match_metal(240) is None
    assert match_metal(255) is None
    with pytest.raises(ValueError):
        match_metal(229)


def test_match_as_dict_is_serializable() -> None:
    payload = match_f0(44).as_dict()
    assert payload["name"] == "Diamond"
    assert payload["category"] == "gems"
    assert payload["rgb_f0"] is None


def test_unknown_category_is_rejected() -> None:
    with pytest.raises(ValueError):
        materials_in("alloys")


def test_ior_helpers_are_inverse() -> None:
    assert f0_percent_from_ior(1.5) == pytest.approx(4.0)
    assert ior_from_f0_percent(4.0) == pytest.approx(1.5)
    with pytest.raises(ValueError):
        f0_percent_from_ior(0)
