"""Result records and their persistence."""

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import pandas as pd
from pydantic import BaseModel, Field, ValidationError, model_validator

from .config import DEFAULT_REPORTS_DIR
from .errors import ArtifactLoadFailure
from ..utils.logging import LoggerMixin

# Runtime identity fields written by the Node.js and Java suites
LEGACY_VERSION_FIELDS = {
    'nodeVersion': 'node',
    'javaVersion': 'java',
}


def utc_timestamp(moment: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a Z suffix."""
    moment = moment or datetime.now(timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class MetricSet(BaseModel):
    """Timings and page-fault deltas for one scenario."""

    # Timings are required but may be null in artifacts from other suites
    allocation_seconds: Optional[float] = Field(alias="allocationSeconds", ge=0)
    allocate_and_free_seconds: Optional[float] = Field(alias="allocateAndFreeSeconds", ge=0)
    writes_seconds: Optional[float] = Field(alias="writesSeconds", ge=0)
    reads_seconds: Optional[float] = Field(alias="readsSeconds", ge=0)
    page_faults_minor: Optional[int] = Field(alias="pageFaultsMinor", default=None, ge=0)
    page_faults_major: Optional[int] = Field(alias="pageFaultsMajor", default=None, ge=0)

    class Config:
        populate_by_name = True
        frozen = True


class ResultRecord(BaseModel):
    """Outcome of one scenario on one runtime."""

    scenario_id: str = Field(alias="scenarioId")
    size_mb: Union[int, float] = Field(alias="sizeMb")
    iterations: int
    metrics: MetricSet
    timestamp: str
    runtime_label: str = Field(alias="runtimeLabel", default="unknown")
    runtime_version: str = Field(alias="runtimeVersion", default="unknown")

    class Config:
        populate_by_name = True
        frozen = True

    @model_validator(mode='before')
    @classmethod
    def map_legacy_runtime(cls, data: Any) -> Any:
        """Accept the runtime identity fields of the Node.js and Java suites."""
        if not isinstance(data, dict) or 'runtimeLabel' in data or 'runtime_label' in data:
            return data
        for field_name, label in LEGACY_VERSION_FIELDS.items():
            if field_name in data:
                data = dict(data)
                version = data.pop(field_name)
                data['runtimeLabel'] = label
                data.setdefault('runtimeVersion', str(version) if version is not None else 'unknown')
                break
        return data

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a camelCase dictionary for serialization."""
        return self.model_dump(by_alias=True, mode='json')


class ResultStore(LoggerMixin):
    """Persists ordered result sequences as JSON artifacts under a reports directory."""

    def __init__(self, reports_dir: Union[str, Path] = DEFAULT_REPORTS_DIR):
        super().__init__()
        self.reports_dir = Path(reports_dir)

    def resolve_output(self, output: Optional[str] = None) -> Path:
        """Destination for a new artifact.

        Absolute paths are used as given, relative names land in the reports
        directory, and no name means a timestamp-derived file name.
        """
        if not output:
            stamp = utc_timestamp().replace(':', '-').replace('.', '-')
            return self.reports_dir / f"{stamp}-memory-test.json"
        path = Path(output)
        return path if path.is_absolute() else self.reports_dir / path

    def resolve_input(self, path: Union[str, Path]) -> Path:
        """Locate an existing artifact, falling back to the reports directory."""
        path = Path(path)
        if path.exists() or path.is_absolute():
            return path
        return self.reports_dir / path

    def save(self, records: Sequence[ResultRecord], output: Optional[str] = None) -> Path:
        """Write records, in order, as one JSON array."""
        file_path = self.resolve_output(output)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            json.dump([record.to_dict() for record in records], f, indent=2)

        self.logger.info(f"Saved {len(records)} result(s) to: {file_path}")
        return file_path

    def load(self, path: Union[str, Path]) -> List[ResultRecord]:
        """Read a whole artifact.

        Raises:
            ArtifactLoadFailure: The file is missing, unreadable or malformed
        """
        file_path = self.resolve_input(path)
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except OSError as e:
            raise ArtifactLoadFailure(file_path, e.strerror or str(e)) from e
        except json.JSONDecodeError as e:
            raise ArtifactLoadFailure(file_path, f"invalid JSON: {e}") from e

        if not isinstance(data, list):
            raise ArtifactLoadFailure(file_path, "expected a JSON array of results")

        records = []
        for index, entry in enumerate(data):
            try:
                records.append(ResultRecord.model_validate(entry))
            except ValidationError as e:
                raise ArtifactLoadFailure(file_path, f"invalid result #{index}: {e}") from e

        self.logger.info(f"Loaded {len(records)} result(s) from: {file_path}")
        return records

    def export_csv(self, records: Sequence[ResultRecord], file_path: Union[str, Path]) -> Path:
        """Export records as a flat CSV, one row per scenario."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        rows = []
        for record in records:
            row = {
                'scenario_id': record.scenario_id,
                'size_mb': record.size_mb,
                'iterations': record.iterations,
                'runtime_label': record.runtime_label,
                'runtime_version': record.runtime_version,
                'timestamp': record.timestamp,
            }
            row.update(record.metrics.model_dump())
            rows.append(row)

        pd.DataFrame(rows).to_csv(file_path, index=False)

        self.logger.info(f"Exported results to CSV: {file_path}")
        return file_path
