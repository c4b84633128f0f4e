"""Thresholds used by the LabPBR analyzer and validator."""
from __future__ import annotations

LABPBR_PARAMETERS = {
    "VERSION": "1.3",
    # Analyzer warnings
    "HIGH_ALPHA_MEAN": 250.0,
    # Validator
    "PREFERRED_FORMAT": "PNG",
    "NORMAL_LENGTH_TOLERANCE": 0.1,
    "NORMAL_MIN_HEIGHT": 1,
}

__all__ = ["LABPBR_PARAMETERS"]
