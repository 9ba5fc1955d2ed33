"""Core components of the memory benchmark harness."""

from .config import BenchmarkConfig, ConfigLoader, Scenario
from .errors import (
    ArtifactLoadFailure,
    ConfigError,
    MembenchError,
    MismatchedRunLength,
    NoScenariosConfigured,
    SnapshotUnavailable,
    UnknownScenario,
)
from .scenarios import ScenarioResolver
from .resources import ResourceSampler, ResourceSnapshot
from .runner import ScenarioRunner
from .results import MetricSet, ResultRecord, ResultStore
from .comparison import ComparisonEngine, ComparisonReport

__all__ = [
    "BenchmarkConfig",
    "ConfigLoader",
    "Scenario",
    "ArtifactLoadFailure",
    "ConfigError",
    "MembenchError",
    "MismatchedRunLength",
    "NoScenariosConfigured",
    "SnapshotUnavailable",
    "UnknownScenario",
    "ScenarioResolver",
    "ResourceSampler",
    "ResourceSnapshot",
    "ScenarioRunner",
    "MetricSet",
    "ResultRecord",
    "ResultStore",
    "ComparisonEngine",
    "ComparisonReport",
]
