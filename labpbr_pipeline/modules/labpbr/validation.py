"""LabPBR 1.3 validation for specular and normal textures."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import numpy as np
from PIL import UnidentifiedImageError

from ...core.utils_image import PixelBuffer, as_pixel_array, is_power_of_two
from ...core.utils_io import load_rgba
from .channels import EMISSION_DISABLED, METAL_MIN, STANDARD_METAL_MAX
from .parameters import LABPBR_PARAMETERS

LOGGER = logging.getLogger("labpbr_pipeline.labpbr.validation")

LEVELS = ("error", "warning", "info")


@dataclass(frozen=True)
class ValidationIssue:
    level: str
    message: str
    suggestion: Optional[str] = None
    channel: Optional[str] = None
    value: Optional[int] = None
    count: int = 1

    def __post_init__(self) -> None:
        if self.level not in LEVELS:
            raise ValueError(f"Unknown issue level {self.level!r}")

    def as_dict(self) -> Dict[str, object]:
        return {
            "level": self.level,
            "message": self.message,
            "suggestion": self.suggestion,
            "channel": self.channel,
            "value": self.value,
            "count": self.count,
        }


@dataclass
class ValidationResult:
    issues: List[ValidationIssue] = field(default_factory=list)
    version: str = LABPBR_PARAMETERS["VERSION"]

    @property
    def is_valid(self) -> bool:
        return not any(issue.level == "error" for issue in self.issues)

    def by_level(self, level: str) -> List[ValidationIssue]:
        return [issue for issue in self.issues if issue.level == level]

    def as_dict(self) -> Dict[str, object]:
        return {
            "is_valid": self.is_valid,
            "version": self.version,
            "issues": [issue.as_dict() for issue in self.issues],
        }


def _first(values: np.ndarray) -> int:
    return int(values.reshape(-1)[0])


def _check_container(issues: List[ValidationIssue], width: int, height: int, image_format: Optional[str]) -> None:
    preferred = LABPBR_PARAMETERS["PREFERRED_FORMAT"]
    if image_format is not None and image_format.upper() != preferred:
        issues.append(
            ValidationIssue(
                "warning",
                f"Texture should be in {preferred} format for best compatibility",
                suggestion=f"Convert to {preferred} format",
            )
        )
    if not (is_power_of_two(width) and is_power_of_two(height)):
        issues.append(
            ValidationIssue(
                "warning",
                "Texture dimensions should be power of 2 for optimal performance",
                suggestion="Consider resizing to nearest power of 2 dimensions",
            )
        )


def validate_specular(
    pixels: PixelBuffer,
    width: int,
    height: int,
    *,
    image_format: Optional[str] = None,
) -> ValidationResult:
    """Check a specular texture against the LabPBR 1.3 channel rules."""

    array = as_pixel_array(pixels, width, height)
    result = ValidationResult()
    issues = result.issues
    if array.size == 0:
        issues.append(ValidationIssue("error", "Texture has no pixel data", suggestion="Check if the file is a valid image"))
        return result

    _check_container(issues, width, height, image_format)

    green = array[..., 1]
    blue = array[..., 2]
    alpha = array[..., 3]

    metal_blue = blue[(green >= METAL_MIN) & (blue != 0)]
    if metal_blue.size:
        issues.append(
            ValidationIssue(
                "warning",
                "Blue channel should be 0 for metals in LabPBR v1.3",
                suggestion="Set blue channel to 0 for metal materials",
                channel="blue",
                value=_first(metal_blue),
                count=int(metal_blue.size),
            )
        )

    reserved = green[(green > STANDARD_METAL_MAX) & (green < 255)]
    if reserved.size:
        issues.append(
            ValidationIssue(
                "info",
                "Green channel uses reserved metal codes (238-254)",
                suggestion="Use 230-237 for predefined metals or 255 to take F0 from albedo",
                channel="green",
                value=_first(reserved),
                count=int(reserved.size),
            )
        )

    disabled = int(np.count_nonzero(alpha == EMISSION_DISABLED))
    if disabled:
        issues.append(
            ValidationIssue(
                "info",
                "Alpha value 255 disables emission",
                suggestion="Use emission values 0-254, where 254 is 100% emissive",
                channel="alpha",
                value=EMISSION_DISABLED,
                count=disabled,
            )
        )

    LOGGER.debug("Specular validation produced %d issues", len(issues))
    return result


def validate_normal(
    pixels: PixelBuffer,
    width: int,
    height: int,
    *,
    image_format: Optional[str] = None,
) -> ValidationResult:
    """Check a DirectX normal texture (XY normal, AO in blue, height in alpha)."""

    array = as_pixel_array(pixels, width, height)
    result = ValidationResult()
    issues = result.issues
    if array.size == 0:
        issues.append(ValidationIssue("error", "Texture has no pixel data", suggestion="Check if the file is a valid image"))
        return result

    _check_container(issues, width, height, image_format)

    xy = array[..., :2].astype(np.float64) / 255.0 * 2.0 - 1.0
    # Z is reconstructed, so only XY outside the unit disc can break the length.
    xy_length = np.sqrt((xy ** 2).sum(axis=-1))
    tolerance = LABPBR_PARAMETERS["NORMAL_LENGTH_TOLERANCE"]
    invalid = int(np.count_nonzero(xy_length > 1.0 + tolerance))
    if invalid:
        issues.append(
            ValidationIssue(
                "warning",
                "Normal vectors may not be properly normalized",
                suggestion="Ensure normal map is generated correctly",
                count=invalid,
            )
        )

    blue = array[..., 2]
    if blue.size > 1 and np.all(blue == blue.flat[0]):
        issues.append(
            ValidationIssue(
                "info",
                "Blue channel appears to be unused",
                suggestion="Consider storing ambient occlusion in the blue channel",
                channel="blue",
                value=int(blue.flat[0]),
            )
        )

    min_height = LABPBR_PARAMETERS["NORMAL_MIN_HEIGHT"]
    low_height = int(np.count_nonzero(array[..., 3] < min_height))
    if low_height:
        issues.append(
            ValidationIssue(
                "warning",
                "Height map contains value 0 which may cause POM issues",
                suggestion=f"Use minimum value of {min_height} instead of 0 for height maps",
                channel="alpha",
                value=0,
                count=low_height,
            )
        )

    LOGGER.debug("Normal validation produced %d issues", len(issues))
    return result


_VALIDATORS = {
    "specular": validate_specular,
    "normal": validate_normal,
}


def validate_texture_file(path: Union[Path, str], *, kind: str = "specular") -> ValidationResult:
    """Load *path* with Pillow and validate it as a *kind* texture.

    Unreadable files produce a single ``error`` issue instead of raising.
    """

    try:
        validator = _VALIDATORS[kind]
    except KeyError as exc:
        raise ValueError(f"Unknown texture kind {kind!r}; expected one of {sorted(_VALIDATORS)}") from exc

    try:
        pixels, image_format = load_rgba(path)
    except (OSError, UnidentifiedImageError) as exc:
        LOGGER.warning("Failed to load %s: %s", path, exc)
        result = ValidationResult()
        result.issues.append(
            ValidationIssue(
                "error",
                f"Failed to validate texture: {exc}",
                suggestion="Check if the file is a valid image",
            )
        )
        return result

    height, width = pixels.shape[:2]
    return validator(pixels, width, height, image_format=image_format)


__all__ = [
    "LEVELS",
    "ValidationIssue",
    "ValidationResult",
    "validate_normal",
    "validate_specular",
    "validate_texture_file",
]
