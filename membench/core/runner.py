"""Sequential execution of memory scenarios."""

import platform
from typing import Callable, Dict, Iterable, List, Optional

from .config import Scenario
from .probes import PROBES
from .resources import ResourceSampler
from .results import MetricSet, ResultRecord, utc_timestamp
from ..utils.logging import LoggerMixin


class ScenarioRunner(LoggerMixin):
    """Runs the probe battery for one scenario at a time.

    Probes run strictly in order inside one resource-usage window; the
    counters are process-wide, so only the before/after delta is reported.
    """

    def __init__(
        self,
        sampler: Optional[ResourceSampler] = None,
        probes: Optional[Dict[str, Callable[[int, int], float]]] = None,
        runtime_label: Optional[str] = None,
        runtime_version: Optional[str] = None,
    ):
        super().__init__()
        self.sampler = sampler or ResourceSampler()
        self.probes = probes if probes is not None else PROBES
        self.runtime_label = runtime_label or platform.python_implementation()
        self.runtime_version = runtime_version or platform.python_version()

    def run(self, scenario: Scenario) -> ResultRecord:
        """Measure one scenario."""
        size_bytes = scenario.size_bytes
        self.logger.info(
            f"Running scenario {scenario.id} ({scenario.size_mb} MB x {scenario.iterations} iterations)"
        )

        before = self.sampler.capture()
        timings = {
            name: probe(size_bytes, scenario.iterations)
            for name, probe in self.probes.items()
        }
        after = self.sampler.capture()
        faults = self.sampler.delta(before, after)

        metrics = MetricSet(
            **timings,
            page_faults_minor=faults.minor,
            page_faults_major=faults.major,
        )
        record = ResultRecord(
            scenario_id=scenario.id,
            size_mb=scenario.size_mb,
            iterations=scenario.iterations,
            metrics=metrics,
            timestamp=utc_timestamp(),
            runtime_label=self.runtime_label,
            runtime_version=self.runtime_version,
        )
        self.logger.debug(f"Scenario {scenario.id} metrics: {metrics.model_dump()}")
        return record

    def run_all(self, scenarios: Iterable[Scenario]) -> List[ResultRecord]:
        """Measure scenarios one after another, preserving their order."""
        return [self.run(scenario) for scenario in scenarios]
