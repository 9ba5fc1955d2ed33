"""Timed memory-operation probes.

Each probe takes a buffer size in bytes and an iteration count and returns
the wall-clock seconds spent. Reads are threaded through an accumulator
that is consumed after the loop, so none of the touched memory can be
treated as unobservable.
"""

import logging
from typing import Callable, Dict

import numpy as np

from ..utils.timer import Timer

logger = logging.getLogger(__name__)

PAGE_STRIDE = 4096
FILL_BYTE = 0xAA

# Accumulators can never reach these; hitting one means the arithmetic broke.
LOW_SENTINEL = -(2 ** 53 - 1)
HIGH_SENTINEL = 2 ** 53 - 1


def _check_args(size_bytes: int, iterations: int) -> None:
    if not isinstance(size_bytes, int) or size_bytes <= 0:
        raise ValueError(f"size_bytes must be a positive integer, got {size_bytes!r}")
    if not isinstance(iterations, int) or iterations <= 0:
        raise ValueError(f"iterations must be a positive integer, got {iterations!r}")


def _consume(accumulator: int, sentinel: int, probe: str) -> None:
    if accumulator == sentinel:
        logger.warning(f"{probe}: accumulator sentinel {accumulator}")


def measure_allocation(size_bytes: int, iterations: int) -> float:
    """Allocate a zeroed buffer per iteration and write its first byte."""
    _check_args(size_bytes, iterations)
    with Timer() as timer:
        for iteration in range(iterations):
            buffer = np.zeros(size_bytes, dtype=np.uint8)
            buffer[0] = (int(buffer[0]) + iteration) & 0xFF
            del buffer
    return timer.elapsed_seconds()


def measure_allocate_and_free(size_bytes: int, iterations: int) -> float:
    """Allocate a buffer per iteration, read its last byte, then release it."""
    _check_args(size_bytes, iterations)
    with Timer() as timer:
        accumulator = 0
        for _ in range(iterations):
            buffer = np.zeros(size_bytes, dtype=np.uint8)
            accumulator += int(buffer[size_bytes - 1])
            del buffer
        _consume(accumulator, LOW_SENTINEL, "allocate-and-free")
    return timer.elapsed_seconds()


def measure_writes(size_bytes: int, iterations: int) -> float:
    """Fill one preallocated buffer with an iteration-derived byte."""
    _check_args(size_bytes, iterations)
    buffer = np.zeros(size_bytes, dtype=np.uint8)
    with Timer() as timer:
        for iteration in range(iterations):
            buffer.fill(iteration & 0xFF)
    return timer.elapsed_seconds()


def measure_reads(size_bytes: int, iterations: int) -> float:
    """Touch one byte per 4 KiB page of a prefilled buffer."""
    _check_args(size_bytes, iterations)
    buffer = np.full(size_bytes, FILL_BYTE, dtype=np.uint8)
    pages = buffer[::PAGE_STRIDE]
    accumulator = 0
    with Timer() as timer:
        for _ in range(iterations):
            accumulator += int(pages.sum(dtype=np.uint64))
        _consume(accumulator, HIGH_SENTINEL, "reads")
    return timer.elapsed_seconds()


PROBES: Dict[str, Callable[[int, int], float]] = {
    "allocation_seconds": measure_allocation,
    "allocate_and_free_seconds": measure_allocate_and_free,
    "writes_seconds": measure_writes,
    "reads_seconds": measure_reads,
}
