"""Per-process resource usage snapshots and page-fault deltas."""

import logging
from dataclasses import dataclass
from typing import Optional

import psutil

from .errors import SnapshotUnavailable

try:
    import resource
except ImportError:  # Windows has no getrusage
    resource = None

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceSnapshot:
    """Point-in-time page-fault counters; None means the host lacks the counter."""
    minor_page_faults: Optional[int] = None
    major_page_faults: Optional[int] = None


@dataclass(frozen=True)
class PageFaultDelta:
    """Page faults attributed to one unit of work."""
    minor: Optional[int] = None
    major: Optional[int] = None


def _read_rusage() -> ResourceSnapshot:
    if resource is None:
        raise SnapshotUnavailable("getrusage is not available")
    usage = resource.getrusage(resource.RUSAGE_SELF)
    return ResourceSnapshot(
        minor_page_faults=usage.ru_minflt,
        major_page_faults=usage.ru_majflt,
    )


def _read_psutil() -> ResourceSnapshot:
    try:
        memory = psutil.Process().memory_info()
    except psutil.Error as e:
        raise SnapshotUnavailable(str(e)) from e
    # Only Windows reports a fault counter here, and it does not split minor/major
    faults = getattr(memory, 'num_page_faults', None)
    if faults is None:
        raise SnapshotUnavailable("psutil exposes no page-fault counter on this platform")
    return ResourceSnapshot(minor_page_faults=faults, major_page_faults=None)


class ResourceSampler:
    """Captures snapshots and reduces pairs of them to scenario-local deltas."""

    def __init__(self, readers=None):
        self.readers = list(readers) if readers is not None else [_read_rusage, _read_psutil]

    def capture(self) -> Optional[ResourceSnapshot]:
        """Capture a snapshot, or None if no reader works on this host."""
        for reader in self.readers:
            try:
                return reader()
            except SnapshotUnavailable as e:
                logger.debug(f"Resource reader {getattr(reader, '__name__', reader)} unavailable: {e}")
        return None

    @staticmethod
    def delta(before: Optional[ResourceSnapshot], after: Optional[ResourceSnapshot]) -> PageFaultDelta:
        """Non-negative counter differences; unavailable snapshots give None, never zero."""
        if before is None or after is None:
            return PageFaultDelta()
        return PageFaultDelta(
            minor=_floored_difference(before.minor_page_faults, after.minor_page_faults),
            major=_floored_difference(before.major_page_faults, after.major_page_faults),
        )


def _floored_difference(before: Optional[int], after: Optional[int]) -> Optional[int]:
    if before is None or after is None:
        return None
    return max(0, after - before)
