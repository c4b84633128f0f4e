"""Tests for whole-image specular analysis."""
from __future__ import annotations

import json
import logging

import pytest

pytest.importorskip("numpy")
pytest.importorskip("PIL")

import numpy as np
from PIL import Image

from labpbr_pipeline.modules.labpbr.analysis import ChannelTally, analyze_image, decode_image
from labpbr_pipeline.modules.labpbr.encoding import fill_buffer


def _image(pixels) -> np.ndarray:
    return np.asarray(pixels, dtype=np.uint8)


def test_all_black_texture() -> None:
    result = decode_image(fill_buffer((0, 0, 0, 0), 2, 2), 2, 2)

    assert result.pixel_count == 4
    assert result.avg_red_pct == 0
    assert result.green_f0_coverage_pct == 100
    assert result.green_metal_coverage_pct == 0
    assert result.avg_f0_encoded == 0
    assert result.porosity_coverage_pct == 100
    assert result.avg_porosity_pct == 0
    assert result.avg_emission_pct == 0
    assert result.avg_sss_pct is None
    assert result.top_metal_code is None
    assert result.top_metal_name is None
    assert result.closest_material.material.name.startswith("Water")
    assert result.red_distribution == {0: 4}
    assert result.warnings == ()


def test_mixed_texture_reports_coverage_and_warnings() -> None:
    pixels = _image(
        [
            [(255, 10, 0, 0), (128, 234, 0, 0)],
            [(0, 234, 100, 0), (0, 240, 0, 0)],
        ]
    )
    result = decode_image(pixels, 2, 2)

    assert result.green_f0_coverage_pct == pytest.approx(25.0)
    assert result.green_metal_coverage_pct == pytest.approx(75.0)
    assert result.avg_f0_encoded == pytest.approx(10.0)
    assert result.top_metal_code == 234
    assert result.top_metal_name == "Copper"
    assert result.porosity_coverage_pct == pytest.approx(75.0)
    assert result.sss_coverage_pct == pytest.approx(25.0)
    assert result.avg_sss_pct == pytest.approx(35 / 190 * 100)
    assert result.red_distribution == {0: 2, 128: 1, 255: 1}
    assert result.warnings == (
        "Texture mixes dielectric F0 and metal codes; ensure masks are intentional.",
        "Blue channel mixes porosity and SSS; verify masks are separated.",
    )


def test_reserved_metal_codes_raise_a_warning() -> None:
    result = decode_image(fill_buffer((0, 240, 0, 0), 2, 2), 2, 2)

    assert result.top_metal_code == 240
    assert result.top_metal_name is None
    assert result.avg_f0_encoded is None
    assert result.closest_material is None
    assert "Green channel uses metal codes outside the standard 230–237 range." in result.warnings


def test_high_alpha_warning_excludes_the_sentinel() -> None:
    bright = decode_image(fill_buffer((0, 0, 0, 252), 1, 1), 1, 1)
    disabled = decode_image(fill_buffer((0, 0, 0, 255), 1, 1), 1, 1)

    assert "High alpha values imply strong emission; verify emission intent." in bright.warnings
    assert disabled.warnings == ()
    assert disabled.avg_emission_pct == 0


def test_top_metal_ties_resolve_to_lowest_code() -> None:
    pixels = _image([[(0, 234, 0, 0), (0, 231, 0, 0)], [(0, 234, 0, 0), (0, 231, 0, 0)]])
    result = decode_image(pixels, 2, 2)
    assert result.top_metal_code == 231
    assert result.top_metal_name == "Gold"


def test_emission_is_averaged_per_pixel() -> None:
    pixels = _image([[(0, 0, 0, 254), (0, 0, 0, 255)]])
    result = decode_image(pixels, 2, 1)
    assert result.avg_alpha == pytest.approx(254.5)
    assert result.avg_emission_pct == pytest.approx(50.0)


def test_parallel_and_serial_reports_match() -> None:
    rng = np.random.default_rng(7)
    pixels = rng.integers(0, 256, size=(17, 9, 4), dtype=np.uint8)

    serial = decode_image(pixels, 9, 17, workers=1)
    parallel = decode_image(pixels, 9, 17, workers=4, rows_per_partition=1)

    assert serial.as_dict() == parallel.as_dict()


def test_tally_merge_is_exact() -> None:
    rng = np.random.default_rng(3)
    pixels = rng.integers(0, 256, size=(6, 5, 4), dtype=np.uint8)
    whole = ChannelTally.from_pixels(pixels)
    merged = ChannelTally.from_pixels(pixels[:2]).merge(ChannelTally.from_pixels(pixels[2:]))

    for channel in ("red", "green", "blue", "alpha"):
        np.testing.assert_array_equal(getattr(whole, channel), getattr(merged, channel))
    assert merged.pixel_count == 30


def test_empty_texture() -> None:
    result = decode_image(b"", 0, 0)

    assert result.pixel_count == 0
    assert result.avg_red is None
    assert result.avg_emission_pct is None
    assert result.green_f0_coverage_pct == 0
    assert result.closest_material is None
    assert result.warnings == ("Texture has no pixel data.",)


def test_flat_byte_buffers_are_accepted() -> None:
    result = decode_image(bytes([51, 9, 0, 0] * 4), 2, 2)
    assert result.avg_red_pct == pytest.approx(20.0)
    assert result.closest_material.material.name == "Vegetable oil"


def test_buffer_size_mismatch_is_rejected() -> None:
    with pytest.raises(ValueError):
        decode_image(bytes(15), 2, 2)


def test_report_is_json_serialisable() -> None:
    pixels = _image([[(200, 44, 120, 30), (10, 236, 5, 255)]])
    payload = decode_image(pixels, 2, 1).as_dict()

    decoded = json.loads(json.dumps(payload))
    assert decoded["red_distribution"] == {"10": 1, "200": 1}
    assert decoded["closest_material"]["name"] == "Diamond"
    assert decoded["top_metal_name"] == "Platinum"


def test_analyze_image_converts_pil_modes() -> None:
    image = Image.new("RGB", (4, 2), (51, 9, 0))
    result = analyze_image(image)

    assert (result.width, result.height) == (4, 2)
    assert result.avg_alpha == 255
    assert result.avg_emission_pct == 0
    assert result.warnings == ()


def test_warnings_are_logged(caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="labpbr_pipeline.labpbr.analysis"):
        decode_image(b"", 0, 0)
    assert "Texture has no pixel data." in caplog.text
