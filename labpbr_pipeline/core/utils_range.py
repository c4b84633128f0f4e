"""Range helpers shared by the LabPBR encoder and decoder."""
from __future__ import annotations

import math
import numbers


def clamp(value: float, min_value: float, max_value: float) -> float:
    """Clamp *value* between *min_value* and *max_value*."""

    return max(min_value, min(max_value, value))


def round_half_up(value: float) -> int:
    """Round *value* to the nearest integer, halves away from zero for positives."""

    return int(math.floor(value + 0.5))


def to_percent(value: float, maximum: float) -> float:
    """Express *value* as a percentage of *maximum* (0 when *maximum* is 0)."""

    if maximum == 0:
        return 0.0
    return value / maximum * 100.0


def require_byte(value: int, name: str = "value") -> int:
    """Return *value* as ``int`` when it is a valid 8-bit channel value."""

    if isinstance(value, bool):
        raise ValueError(f"{name} must be an integer channel value, got {value!r}")
    if isinstance(value, numbers.Integral):
        integer = int(value)
    elif isinstance(value, numbers.Real) and float(value).is_integer():
        integer = int(value)
    else:
        raise ValueError(f"{name} must be an integer channel value, got {value!r}")
    if integer < 0 or integer > 255:
        raise ValueError(f"{name} must be within 0-255, got {integer}")
    return integer


def require_percent(value: float, name: str = "percentage") -> float:
    """Return *value* as ``float`` when it lies within [0, 100]."""

    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ValueError(f"{name} must be a number, got {value!r}")
    number = float(value)
    if math.isnan(number) or number < 0.0 or number > 100.0:
        raise ValueError(f"{name} must be within 0-100, got {value!r}")
    return number
