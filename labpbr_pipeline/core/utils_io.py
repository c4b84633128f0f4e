"""I/O helpers for loading textures and persisting codec output."""
from __future__ import annotations

import json
import os
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

import numpy as np
from PIL import Image

from .utils_image import from_image, to_image


_LOCK_REGISTRY: Dict[Path, threading.Lock] = {}
_LOCK_REGISTRY_GUARD = threading.Lock()


def ensure_dir(path: Path) -> Path:
    """Ensure that *path* exists and return it."""

    path.mkdir(parents=True, exist_ok=True)
    return path


def _acquire_file_lock(target: Path) -> threading.Lock:
    """Return the process-wide lock guarding *target*, already acquired."""

    with _LOCK_REGISTRY_GUARD:
        lock = _LOCK_REGISTRY.get(target)
        if lock is None:
            lock = threading.Lock()
            _LOCK_REGISTRY[target] = lock
    lock.acquire()
    return lock


@contextmanager
def file_lock(path: Path) -> Iterator[None]:
    """Context manager providing a lightweight file lock."""

    temp_lock = path.with_suffix(path.suffix + ".lock")
    lock = _acquire_file_lock(temp_lock)
    try:
        while True:
            try:
                fd = os.open(temp_lock, os.O_CREAT | os.O_EXCL | os.O_WRONLY)
                os.close(fd)
                break
            except FileExistsError:
                time.sleep(0.05)
        yield
    finally:
        try:
            os.remove(temp_lock)
        except FileNotFoundError:
            pass
        lock.release()


def load_rgba(path: Union[Path, str]) -> Tuple[np.ndarray, Optional[str]]:
    """Load *path* as an RGBA array and return it with the detected format.

    Images without alpha get A=255, the LabPBR "emission disabled" value.
    """

    with Image.open(path) as image:
        image_format = image.format
        pixels = from_image(image)
    return pixels, image_format


def atomic_save(pixels: np.ndarray, path: Union[Path, str]) -> Path:
    """Persist an RGBA array as PNG through a temporary file."""

    destination = Path(path)
    ensure_dir(destination.resolve().parent)
    temp_path = destination.with_name(f".{destination.name}.tmp")
    with file_lock(destination):
        to_image(pixels).save(temp_path, format="PNG")
        os.replace(temp_path, destination)
    return destination


def save_previews(
    previews: Mapping[str, np.ndarray],
    directory: Path,
    stem: str,
    channels: Optional[Iterable[str]] = None,
) -> List[Path]:
    """Write the selected channel previews as ``<stem>_<channel>.png``."""

    ensure_dir(directory)
    selected = list(channels) if channels is not None else list(previews)
    written = []
    for channel in selected:
        if channel not in previews:
            raise ValueError(f"Unknown preview channel {channel!r}")
        written.append(atomic_save(previews[channel], directory / f"{stem}_{channel}.png"))
    return written


def write_json_report(report: Mapping[str, object], path: Union[Path, str]) -> Path:
    """Write *report* as indented UTF-8 JSON."""

    destination = Path(path)
    ensure_dir(destination.resolve().parent)
    with file_lock(destination):
        with open(destination, "w", encoding="utf-8") as handle:
            json.dump(report, handle, indent=2, ensure_ascii=False)
    return destination
