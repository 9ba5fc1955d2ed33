"""Exception taxonomy for the memory benchmark harness."""

from pathlib import Path
from typing import Iterable, Union


class MembenchError(Exception):
    """Base class for errors that abort a benchmark or comparison run."""
    pass


class ConfigError(MembenchError):
    """Malformed scenario source."""
    pass


class NoScenariosConfigured(MembenchError):
    """The scenario source is empty and no ad-hoc sizes were given."""

    def __init__(self, message: str = "No scenarios configured"):
        super().__init__(message)


class UnknownScenario(MembenchError):
    """One or more requested scenario ids are absent from the source."""

    def __init__(self, missing: Iterable[str]):
        self.missing = list(missing)
        super().__init__(f"Unknown scenario(s): {', '.join(self.missing)}")


class SnapshotUnavailable(MembenchError):
    """The host exposes no per-process resource accounting."""
    pass


class ArtifactLoadFailure(MembenchError):
    """A persisted result file is missing, unreadable or corrupt."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to load results from {self.path}: {reason}")


class MismatchedRunLength(MembenchError):
    """Two result sequences cannot be paired positionally."""

    def __init__(self, length_a: int, length_b: int):
        self.length_a = length_a
        self.length_b = length_b
        super().__init__(
            f"Result sets have different lengths ({length_a} vs {length_b}); "
            f"both runs must resolve the same scenarios in the same order"
        )
