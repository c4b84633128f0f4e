"""Configuration module for the LabPBR specular codec."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Mapping, MutableMapping, Optional


BASE_DIR = Path(__file__).resolve().parent.parent

PATH_PREVIEWS = BASE_DIR / "previews"

ROWS_PER_PARTITION = 256
THREADS = 4


LABPBR_CODEC_CONFIG: Dict[str, object] = {
    "preview_channels": ["red", "green", "blue", "alpha"],
    "validate_after_encode": True,
}


@dataclass
class CodecConfig:
    """Runtime configuration for analysis, validation and encoding runs."""

    previews_path: Path = PATH_PREVIEWS
    threads: int = THREADS
    rows_per_partition: int = ROWS_PER_PARTITION
    write_previews: bool = False
    log_file: Path = BASE_DIR / "labpbr.log"
    codec: Dict[str, object] = field(default_factory=lambda: dict(LABPBR_CODEC_CONFIG))

    def as_dict(self) -> Dict[str, object]:
        """Return the configuration as a plain dictionary."""

        return {
            "PATH_PREVIEWS": self.previews_path,
            "THREADS": self.threads,
            "ROWS_PER_PARTITION": self.rows_per_partition,
            "WRITE_PREVIEWS": self.write_previews,
            "LOG_FILE": self.log_file,
            "CODEC": self.codec,
        }


def build_config(overrides: Optional[Mapping[str, object]] = None) -> Dict[str, object]:
    """Create a configuration dictionary with optional overrides.

    Unknown keys are ignored so callers can pass a superset of options.
    """

    config = CodecConfig()
    if overrides:
        mutable: MutableMapping[str, object] = config.as_dict()
        for key, value in overrides.items():
            if key in mutable:
                mutable[key] = value
        return dict(mutable)
    return config.as_dict()
