"""Tests for encoding physical values into LabPBR bytes."""
from __future__ import annotations

import pytest

np = pytest.importorskip("numpy")

from labpbr_pipeline.modules.labpbr.channels import Metal
from labpbr_pipeline.modules.labpbr.decoding import classify_blue, decode_emission, decode_f0, decode_pixel
from labpbr_pipeline.modules.labpbr.encoding import (
    encode_buffer,
    encode_emission,
    encode_f0_percent,
    encode_ior,
    encode_metal,
    encode_pixel,
    encode_porosity,
    encode_roughness,
    encode_smoothness,
    encode_sss,
    fill_buffer,
)

QUANTIZATION_STEP = 100 / 255


@pytest.mark.parametrize("pct", [0, 25, 50, 75])
def test_f0_round_trip_within_one_step(pct) -> None:
    assert abs(decode_f0(encode_f0_percent(pct)) - pct) <= QUANTIZATION_STEP


def test_f0_above_representable_range_clamps_to_229() -> None:
    assert encode_f0_percent(89.8) == 229
    assert encode_f0_percent(95) == 229
    assert encode_f0_percent(100) == 229


def test_f0_uses_round_half_up() -> None:
    assert encode_f0_percent(25) == 64  # 63.75
    assert encode_f0_percent(2) == 5  # 5.1


def test_ior_encoding_matches_fresnel() -> None:
    assert encode_ior(1.5) == 10  # 4% -> 10.2
    assert encode_ior(1.0) == 0
    with pytest.raises(ValueError):
        encode_ior(0.5)


def test_metal_encoding_accepts_enum_name_and_code() -> None:
    assert encode_metal(Metal.IRON) == 230
    assert encode_metal("copper") == 234
    assert encode_metal(" Silver ") == 237
    assert encode_metal(236) == 236
    with pytest.raises(ValueError):
        encode_metal("unobtainium")
    with pytest.raises(ValueError):
        encode_metal(240)


def test_porosity_and_sss_stay_in_their_sub_ranges() -> None:
    assert encode_porosity(0) == 0
    assert encode_porosity(50) == 32
    assert encode_porosity(100) == 64
    assert encode_sss(0) == 65
    assert encode_sss(50) == 160
    assert encode_sss(100) == 255
    for pct in (0, 33.3, 66.6, 100):
        assert classify_blue(encode_porosity(pct)).percent == pytest.approx(pct, abs=100 / 64)
        assert classify_blue(encode_sss(pct)).percent == pytest.approx(pct, abs=100 / 190)


def test_emission_zero_is_not_the_sentinel() -> None:
    assert encode_emission(0) == 0
    assert encode_emission() == 0
    assert encode_emission(100) == 254
    assert encode_emission(0, disabled=True) == 255
    assert decode_emission(encode_emission(50)) == pytest.approx(50, abs=100 / 254)


def test_smoothness_and_roughness() -> None:
    assert encode_smoothness(100) == 255
    assert encode_smoothness(0) == 0
    assert encode_roughness(0.0) == 255
    assert encode_roughness(1.0) == 0
    assert decode_pixel(encode_roughness(0.25), 0, 0, 0).perceptual_roughness == pytest.approx(0.25, abs=0.01)


@pytest.mark.parametrize("pct", [-0.1, 100.1, float("nan"), "50", None])
def test_percentages_outside_range_are_rejected(pct) -> None:
    for encoder in (encode_f0_percent, encode_porosity, encode_sss, encode_emission, encode_smoothness):
        with pytest.raises(ValueError):
            encoder(pct)


def test_encode_pixel_inverts_decode_pixel() -> None:
    for pixel in [(0, 0, 0, 0), (255, 229, 64, 254), (128, 230, 65, 255), (3, 250, 200, 17)]:
        assert encode_pixel(decode_pixel(*pixel)) == pixel


def test_encode_buffer_interleaves_planes() -> None:
    red = np.full((2, 3), 200, dtype=np.uint8)
    green = np.arange(6, dtype=np.int64).reshape(2, 3)
    buffer = encode_buffer(red, green, 65, 255)

    assert buffer.shape == (2, 3, 4)
    assert buffer.dtype == np.uint8
    np.testing.assert_array_equal(buffer[..., 1], green)
    assert (buffer[..., 2] == 65).all()
    assert (buffer[..., 3] == 255).all()


def test_encode_buffer_rejects_out_of_spec_planes() -> None:
    with pytest.raises(ValueError):
        encode_buffer(np.full((2, 2), 256), 0, 0, 0)
    with pytest.raises(ValueError):
        encode_buffer(np.full((2, 2), 0.5), 0, 0, 0)
    with pytest.raises(ValueError):
        encode_buffer(1, 2, 3, 4)


def test_fill_buffer() -> None:
    buffer = fill_buffer((10, 234, 0, 0), 4, 2)
    assert buffer.shape == (2, 4, 4)
    assert (buffer[..., 1] == 234).all()
    with pytest.raises(ValueError):
        fill_buffer((10, 234, 0), 4, 2)
    with pytest.raises(ValueError):
        fill_buffer((10, 234, 0, 300), 4, 2)
