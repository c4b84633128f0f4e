"""Whole-image analysis of LabPBR specular textures."""
from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from functools import reduce
from typing import Dict, List, Optional, Tuple

import numpy as np
from PIL import Image

from ...core.config import ROWS_PER_PARTITION
from ...core.utils_image import PixelBuffer, as_pixel_array, from_image
from ...core.utils_parallel import partition_rows, run_parallel
from ...core.utils_range import to_percent
from .channels import MetalCode, Porosity
from .decoding import classify_blue, classify_green, decode_emission
from .matching import MaterialMatch, match_f0
from .parameters import LABPBR_PARAMETERS

LOGGER = logging.getLogger("labpbr_pipeline.labpbr.analysis")

_BYTE_VALUES = np.arange(256, dtype=np.float64)

# Lookup tables derived from the scalar decoders, indexed by byte value.
_GREEN_IS_METAL = np.array([isinstance(classify_green(v), MetalCode) for v in range(256)])
_BLUE_IS_POROSITY = np.array([isinstance(classify_blue(v), Porosity) for v in range(256)])
_BLUE_PERCENT = np.array([classify_blue(v).percent for v in range(256)], dtype=np.float64)
_EMISSION_PERCENT = np.array([decode_emission(v) for v in range(256)], dtype=np.float64)


@dataclass
class ChannelTally:
    """Per-channel 256-bin histograms of a group of pixels.

    Tallies of disjoint pixel groups combine with :meth:`merge`, which makes
    the reduction of a partitioned image exact and order independent.
    """

    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray
    alpha: np.ndarray

    @classmethod
    def empty(cls) -> "ChannelTally":
        return cls(*(np.zeros(256, dtype=np.int64) for _ in range(4)))

    @classmethod
    def from_pixels(cls, pixels: np.ndarray) -> "ChannelTally":
        flat = pixels.reshape(-1, 4)
        return cls(*(np.bincount(flat[:, index], minlength=256).astype(np.int64) for index in range(4)))

    def merge(self, other: "ChannelTally") -> "ChannelTally":
        return ChannelTally(
            red=self.red + other.red,
            green=self.green + other.green,
            blue=self.blue + other.blue,
            alpha=self.alpha + other.alpha,
        )

    @property
    def pixel_count(self) -> int:
        return int(self.red.sum())


@dataclass(frozen=True)
class AnalysisResult:
    """Aggregate report for one specular texture.

    Averages over an empty population are ``None``.
    """

    width: int
    height: int
    pixel_count: int
    avg_red: Optional[float]
    avg_red_pct: Optional[float]
    avg_green: Optional[float]
    avg_blue: Optional[float]
    avg_alpha: Optional[float]
    avg_emission_pct: Optional[float]
    green_f0_coverage_pct: float
    green_metal_coverage_pct: float
    avg_f0_encoded: Optional[float]
    avg_f0_percent: Optional[float]
    top_metal_code: Optional[int]
    top_metal_name: Optional[str]
    porosity_coverage_pct: float
    sss_coverage_pct: float
    avg_porosity_pct: Optional[float]
    avg_sss_pct: Optional[float]
    closest_material: Optional[MaterialMatch]
    red_distribution: Dict[int, int]
    warnings: Tuple[str, ...]

    def as_dict(self) -> Dict[str, object]:
        """Return a JSON serialisable dictionary."""

        data = {field.name: getattr(self, field.name) for field in fields(self)}
        data["closest_material"] = self.closest_material.as_dict() if self.closest_material is not None else None
        data["red_distribution"] = {str(value): count for value, count in self.red_distribution.items()}
        data["warnings"] = list(self.warnings)
        return data


def _weighted_mean(histogram: np.ndarray, weights: np.ndarray) -> Optional[float]:
    count = int(histogram.sum())
    if count == 0:
        return None
    return float((histogram * weights).sum() / count)


def _collect_warnings(
    pixel_count: int,
    f0_coverage: float,
    metal_coverage: float,
    top_metal_code: Optional[int],
    avg_alpha: Optional[float],
    porosity_coverage: float,
    sss_coverage: float,
) -> List[str]:
    warnings: List[str] = []
    if pixel_count == 0:
        warnings.append("Texture has no pixel data.")
    if f0_coverage > 0 and metal_coverage > 0:
        warnings.append("Texture mixes dielectric F0 and metal codes; ensure masks are intentional.")
    if top_metal_code is not None and MetalCode(top_metal_code).is_reserved:
        warnings.append("Green channel uses metal codes outside the standard 230–237 range.")
    if avg_alpha is not None and LABPBR_PARAMETERS["HIGH_ALPHA_MEAN"] <= avg_alpha < 255:
        warnings.append("High alpha values imply strong emission; verify emission intent.")
    if porosity_coverage > 0 and sss_coverage > 0:
        warnings.append("Blue channel mixes porosity and SSS; verify masks are separated.")
    return warnings


def summarize(tally: ChannelTally, width: int, height: int) -> AnalysisResult:
    """Derive the :class:`AnalysisResult` of an accumulated tally."""

    pixel_count = tally.pixel_count

    f0_histogram = np.where(_GREEN_IS_METAL, 0, tally.green)
    metal_histogram = np.where(_GREEN_IS_METAL, tally.green, 0)
    f0_count = int(f0_histogram.sum())
    metal_count = int(metal_histogram.sum())

    porosity_histogram = np.where(_BLUE_IS_POROSITY, tally.blue, 0)
    sss_histogram = np.where(_BLUE_IS_POROSITY, 0, tally.blue)

    avg_red = _weighted_mean(tally.red, _BYTE_VALUES)
    avg_alpha = _weighted_mean(tally.alpha, _BYTE_VALUES)
    avg_f0_encoded = _weighted_mean(f0_histogram, _BYTE_VALUES)

    top_metal_code: Optional[int] = None
    top_metal_name: Optional[str] = None
    if metal_count:
        # argmax returns the first maximum, so ties resolve to the lowest code.
        top_metal_code = int(np.argmax(metal_histogram))
        top_metal_name = MetalCode(top_metal_code).label

    f0_coverage = to_percent(f0_count, pixel_count)
    metal_coverage = to_percent(metal_count, pixel_count)
    porosity_coverage = to_percent(int(porosity_histogram.sum()), pixel_count)
    sss_coverage = to_percent(int(sss_histogram.sum()), pixel_count)

    closest = match_f0(avg_f0_encoded) if avg_f0_encoded is not None else None

    warnings = _collect_warnings(
        pixel_count,
        f0_coverage,
        metal_coverage,
        top_metal_code,
        avg_alpha,
        porosity_coverage,
        sss_coverage,
    )

    return AnalysisResult(
        width=width,
        height=height,
        pixel_count=pixel_count,
        avg_red=avg_red,
        avg_red_pct=to_percent(avg_red, 255) if avg_red is not None else None,
        avg_green=_weighted_mean(tally.green, _BYTE_VALUES),
        avg_blue=_weighted_mean(tally.blue, _BYTE_VALUES),
        avg_alpha=avg_alpha,
        avg_emission_pct=_weighted_mean(tally.alpha, _EMISSION_PERCENT),
        green_f0_coverage_pct=f0_coverage,
        green_metal_coverage_pct=metal_coverage,
        avg_f0_encoded=avg_f0_encoded,
        avg_f0_percent=to_percent(avg_f0_encoded, 255) if avg_f0_encoded is not None else None,
        top_metal_code=top_metal_code,
        top_metal_name=top_metal_name,
        porosity_coverage_pct=porosity_coverage,
        sss_coverage_pct=sss_coverage,
        avg_porosity_pct=_weighted_mean(porosity_histogram, _BLUE_PERCENT),
        avg_sss_pct=_weighted_mean(sss_histogram, _BLUE_PERCENT),
        closest_material=closest,
        red_distribution={value: int(count) for value, count in enumerate(tally.red) if count},
        warnings=tuple(warnings),
    )


def decode_image(
    pixels: PixelBuffer,
    width: int,
    height: int,
    *,
    workers: Optional[int] = None,
    rows_per_partition: Optional[int] = None,
) -> AnalysisResult:
    """Analyse a row-major RGBA buffer.

    Rows are split into partitions that are tallied independently (on a
    thread pool when there is more than one) and reduced into one report.
    """

    array = as_pixel_array(pixels, width, height)
    partitions = partition_rows(height, rows_per_partition or ROWS_PER_PARTITION)

    def _tally(rows: Tuple[int, int]) -> ChannelTally:
        start, stop = rows
        return ChannelTally.from_pixels(array[start:stop])

    tallies = run_parallel(_tally, partitions, max_workers=workers)
    tally = reduce(ChannelTally.merge, tallies, ChannelTally.empty())
    result = summarize(tally, width, height)

    LOGGER.debug(
        "Analysed %dx%d specular texture in %d partitions: F0 %.1f%%, metal %.1f%%",
        width,
        height,
        len(partitions),
        result.green_f0_coverage_pct,
        result.green_metal_coverage_pct,
    )
    for warning in result.warnings:
        LOGGER.warning(warning)
    return result


def analyze_image(image: Image.Image, **kwargs) -> AnalysisResult:
    """Analyse a PIL image; any mode is converted to RGBA first."""

    pixels = from_image(image)
    height, width = pixels.shape[:2]
    return decode_image(pixels, width, height, **kwargs)


__all__ = ["AnalysisResult", "ChannelTally", "analyze_image", "decode_image", "summarize"]
