"""Parallel execution helpers for per-partition image work."""
from __future__ import annotations

import concurrent.futures
import logging
from typing import Callable, List, Optional, Sequence, Tuple, TypeVar


LOGGER = logging.getLogger("labpbr_pipeline.parallel")

T = TypeVar("T")
R = TypeVar("R")


def create_thread_pool(max_workers: Optional[int] = None) -> concurrent.futures.ThreadPoolExecutor:
    """Create a thread pool executor with sane defaults."""

    return concurrent.futures.ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="labpbr")


def partition_rows(height: int, rows_per_partition: int) -> List[Tuple[int, int]]:
    """Split ``range(height)`` into ``(start, stop)`` row slices."""

    if rows_per_partition < 1:
        raise ValueError(f"rows_per_partition must be positive, got {rows_per_partition}")
    return [(start, min(start + rows_per_partition, height)) for start in range(0, height, rows_per_partition)]


def run_parallel(function: Callable[[T], R], items: Sequence[T], *, max_workers: Optional[int] = None) -> List[R]:
    """Run *function* for each element in *items* concurrently.

    Results keep the order of *items*. A failing worker re-raises its
    exception in the caller once the pool has shut down.
    """

    if max_workers is not None and max_workers < 1:
        raise ValueError(f"max_workers must be positive, got {max_workers}")
    if not items:
        return []
    if max_workers == 1 or len(items) == 1:
        return [function(item) for item in items]
    LOGGER.debug("Dispatching %d partitions to up to %s workers", len(items), max_workers)
    with create_thread_pool(max_workers=max_workers) as executor:
        return list(executor.map(function, items))
