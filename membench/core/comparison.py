"""Comparison of two independently produced result sets.

Records are paired by position, so both runs must have resolved the same
scenarios in the same order. Timed metrics get a ratio and a speedup
description; page faults are reported raw because counts from different
runtimes are not comparable.

Equal values are described as the first side being 1.00x faster, and the
summary tally gives equal means to the second side. Both are kept as-is
for compatibility with earlier reports.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

import pandas as pd

from .errors import MismatchedRunLength
from .results import ResultRecord
from ..utils.logging import LoggerMixin

TIMED_METRICS: Dict[str, str] = {
    "allocation_seconds": "Allocation",
    "allocate_and_free_seconds": "Allocate + free",
    "writes_seconds": "Writes",
    "reads_seconds": "Reads",
}

NOT_DETERMINABLE = "n/a"


def speedup_ratio(value_a: Optional[float], value_b: Optional[float]) -> Optional[float]:
    """A/B, or None when either side is zero or missing."""
    if not value_a or not value_b:
        return None
    return value_a / value_b


def describe_speedup(ratio: Optional[float], label_a: str = "A", label_b: str = "B") -> str:
    """Human readable speedup; a ratio of exactly 1 credits the first side."""
    if ratio is None:
        return NOT_DETERMINABLE
    if ratio > 1:
        return f"{label_b} is {ratio:.2f}x faster"
    return f"{label_a} is {1 / ratio:.2f}x faster"


@dataclass
class MetricComparison:
    """One timed metric on both sides."""
    metric: str
    value_a: Optional[float]
    value_b: Optional[float]
    ratio: Optional[float]
    description: str

    @property
    def label(self) -> str:
        return TIMED_METRICS.get(self.metric, self.metric)


@dataclass
class PageFaultComparison:
    """Raw page-fault counts on both sides."""
    minor_a: Optional[int] = None
    minor_b: Optional[int] = None
    major_a: Optional[int] = None
    major_b: Optional[int] = None


@dataclass
class ComparisonRow:
    """Comparison of one positional pair of results."""
    scenario_id: str
    size_mb: float
    iterations: int
    metrics: Dict[str, MetricComparison] = field(default_factory=dict)
    page_faults: PageFaultComparison = field(default_factory=PageFaultComparison)


@dataclass
class ComparisonSummary:
    """Aggregate view over all pairs, computed from per-side means."""
    label_a: str
    label_b: str
    mean_a: Dict[str, Optional[float]] = field(default_factory=dict)
    mean_b: Dict[str, Optional[float]] = field(default_factory=dict)
    metrics: Dict[str, MetricComparison] = field(default_factory=dict)
    winners: Dict[str, str] = field(default_factory=dict)
    wins_a: int = 0
    wins_b: int = 0

    @property
    def leader(self) -> Optional[str]:
        """Label of the side with more wins, or None on a draw."""
        if self.wins_a > self.wins_b:
            return self.label_a
        if self.wins_b > self.wins_a:
            return self.label_b
        return None


@dataclass
class ComparisonReport:
    """Everything a report needs: per-scenario rows and the summary."""
    label_a: str
    label_b: str
    version_a: Optional[str]
    version_b: Optional[str]
    rows: List[ComparisonRow]
    summary: ComparisonSummary

    def to_frame(self) -> pd.DataFrame:
        """Flatten into one row per scenario and metric."""
        data = []
        for row in self.rows:
            for comparison in row.metrics.values():
                data.append({
                    'scenario_id': row.scenario_id,
                    'size_mb': row.size_mb,
                    'iterations': row.iterations,
                    'metric': comparison.metric,
                    self.label_a: comparison.value_a,
                    self.label_b: comparison.value_b,
                    'ratio': comparison.ratio,
                    'comparison': comparison.description,
                })
            faults = row.page_faults
            for metric, value_a, value_b in (
                ('page_faults_minor', faults.minor_a, faults.minor_b),
                ('page_faults_major', faults.major_a, faults.major_b),
            ):
                data.append({
                    'scenario_id': row.scenario_id,
                    'size_mb': row.size_mb,
                    'iterations': row.iterations,
                    'metric': metric,
                    self.label_a: value_a,
                    self.label_b: value_b,
                    'ratio': None,
                    'comparison': '',
                })
        return pd.DataFrame(data)


class ComparisonEngine(LoggerMixin):
    """Pairs two result sequences and computes ratios, means and a win tally."""

    def __init__(self, label_a: str = "A", label_b: str = "B", truncate: bool = False):
        super().__init__()
        if label_a == label_b:
            label_a, label_b = f"{label_a} (1)", f"{label_b} (2)"
        self.label_a = label_a
        self.label_b = label_b
        self.truncate = truncate

    def _pair(self, results_a: Sequence[ResultRecord], results_b: Sequence[ResultRecord]):
        if len(results_a) != len(results_b):
            if not self.truncate:
                raise MismatchedRunLength(len(results_a), len(results_b))
            self.logger.warning(
                f"Result sets differ in length ({len(results_a)} vs {len(results_b)}); "
                f"comparing the first {min(len(results_a), len(results_b))} pair(s)"
            )
        pairs = list(zip(results_a, results_b))
        for record_a, record_b in pairs:
            if record_a.scenario_id != record_b.scenario_id:
                self.logger.warning(
                    f"Pairing '{record_a.scenario_id}' with '{record_b.scenario_id}' by position"
                )
        return pairs

    def compare_metric(self, metric: str, value_a: Optional[float], value_b: Optional[float]) -> MetricComparison:
        ratio = speedup_ratio(value_a, value_b)
        return MetricComparison(
            metric=metric,
            value_a=value_a,
            value_b=value_b,
            ratio=ratio,
            description=describe_speedup(ratio, self.label_a, self.label_b),
        )

    def compare_pair(self, record_a: ResultRecord, record_b: ResultRecord) -> ComparisonRow:
        """Compare one scenario across both sides."""
        row = ComparisonRow(
            scenario_id=record_a.scenario_id,
            size_mb=record_a.size_mb,
            iterations=record_a.iterations,
        )
        for metric in TIMED_METRICS:
            row.metrics[metric] = self.compare_metric(
                metric,
                getattr(record_a.metrics, metric),
                getattr(record_b.metrics, metric),
            )
        row.page_faults = PageFaultComparison(
            minor_a=record_a.metrics.page_faults_minor,
            minor_b=record_b.metrics.page_faults_minor,
            major_a=record_a.metrics.page_faults_major,
            major_b=record_b.metrics.page_faults_major,
        )
        return row

    def summarize(self, pairs) -> ComparisonSummary:
        """Compare per-side means; the mean of per-scenario ratios is never used."""
        summary = ComparisonSummary(label_a=self.label_a, label_b=self.label_b)
        count = len(pairs)

        for metric in TIMED_METRICS:
            if count == 0:
                summary.mean_a[metric] = summary.mean_b[metric] = None
                continue

            # Null timings count as zero, matching the reports of the other suites
            mean_a = sum(getattr(a.metrics, metric) or 0 for a, _ in pairs) / count
            mean_b = sum(getattr(b.metrics, metric) or 0 for _, b in pairs) / count
            summary.mean_a[metric] = mean_a
            summary.mean_b[metric] = mean_b
            summary.metrics[metric] = self.compare_metric(metric, mean_a, mean_b)

            if mean_a < mean_b:
                summary.wins_a += 1
                summary.winners[metric] = self.label_a
            else:
                summary.wins_b += 1
                summary.winners[metric] = self.label_b

        return summary

    def compare(self, results_a: Sequence[ResultRecord], results_b: Sequence[ResultRecord]) -> ComparisonReport:
        """Compare two complete result sequences.

        Raises:
            MismatchedRunLength: Lengths differ and truncation is off
        """
        pairs = self._pair(results_a, results_b)
        rows = [self.compare_pair(a, b) for a, b in pairs]
        summary = self.summarize(pairs)

        self.logger.info(
            f"Compared {len(rows)} scenario(s): {self.label_a} {summary.wins_a} x {summary.wins_b} {self.label_b}"
        )
        return ComparisonReport(
            label_a=self.label_a,
            label_b=self.label_b,
            version_a=results_a[0].runtime_version if results_a else None,
            version_b=results_b[0].runtime_version if results_b else None,
            rows=rows,
            summary=summary,
        )
