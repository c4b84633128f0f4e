"""LabPBR 1.3 specular channel codec, analyzer and validator."""
from __future__ import annotations

from .analysis import AnalysisResult, ChannelTally, analyze_image, decode_image
from .catalog import MATERIAL_CATALOG, CatalogMaterial, iter_materials
from .channels import (
    F0Reflectance,
    Metal,
    MetalCode,
    Porosity,
    SpecularChannels,
    SubsurfaceScattering,
    f0_percent_from_ior,
    ior_from_f0_percent,
)
from .decoding import channel_previews, classify_blue, classify_green, decode_emission, decode_f0, decode_pixel
from .encoding import (
    encode_buffer,
    encode_emission,
    encode_f0_percent,
    encode_metal,
    encode_pixel,
    encode_porosity,
    encode_sss,
)
from .matching import MaterialMatch, match_f0, match_metal
from .validation import ValidationIssue, ValidationResult, validate_specular, validate_texture_file

__all__ = [
    "AnalysisResult",
    "CatalogMaterial",
    "ChannelTally",
    "F0Reflectance",
    "MATERIAL_CATALOG",
    "MaterialMatch",
    "Metal",
    "MetalCode",
    "Porosity",
    "SpecularChannels",
    "SubsurfaceScattering",
    "ValidationIssue",
    "ValidationResult",
    "analyze_image",
    "channel_previews",
    "classify_blue",
    "classify_green",
    "decode_emission",
    "decode_f0",
    "decode_image",
    "decode_pixel",
    "encode_buffer",
    "encode_emission",
    "encode_f0_percent",
    "encode_metal",
    "encode_pixel",
    "encode_porosity",
    "encode_sss",
    "f0_percent_from_ior",
    "ior_from_f0_percent",
    "iter_materials",
    "match_f0",
    "match_metal",
    "validate_specular",
    "validate_texture_file",
]
