"""Configuration management for the memory benchmark harness."""

import logging
import os
import yaml
from typing import Any, Dict, List, Optional, Sequence, Union
from pathlib import Path
from pydantic import BaseModel, Field, ValidationError, field_validator

from .errors import ConfigError

logger = logging.getLogger(__name__)

BYTES_PER_MB = 1024 * 1024
DEFAULT_ITERATIONS = 50
DEFAULT_SCENARIOS_FILE = "config/memory-scenarios.yaml"
DEFAULT_REPORTS_DIR = "reports/memory"


def bytes_from_mb(size_mb: Union[int, float]) -> int:
    """Convert a size in megabytes to a whole number of bytes."""
    return int(size_mb * BYTES_PER_MB)


class Scenario(BaseModel):
    """A single memory scenario: buffer size and iteration count."""

    id: str = Field(..., min_length=1, description="Scenario id, unique within a run")
    size_mb: Union[int, float] = Field(alias="sizeMb", description="Buffer size in MB")
    iterations: int = Field(..., ge=1, description="Iterations per probe")

    class Config:
        populate_by_name = True
        frozen = True

    @field_validator('size_mb')
    @classmethod
    def check_size(cls, v):
        if isinstance(v, bool) or v <= 0:
            raise ValueError("sizeMb must be a positive number")
        return v

    @property
    def size_bytes(self) -> int:
        """Buffer size in bytes."""
        return bytes_from_mb(self.size_mb)


class BenchmarkConfig(BaseModel):
    """Main benchmark configuration."""

    # Scenario source
    scenarios_file: str = Field(default=DEFAULT_SCENARIOS_FILE, description="Scenario file path")
    default_iterations: int = Field(default=DEFAULT_ITERATIONS, ge=1,
                                    description="Iterations for ad-hoc scenarios")

    # Results settings
    reports_dir: str = Field(default=DEFAULT_REPORTS_DIR, description="Reports directory")

    # Logging settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Log file path")

    class Config:
        populate_by_name = True


class ConfigLoader:
    """Configuration loader utility."""

    @staticmethod
    def load_scenarios(file_path: Union[str, Path]) -> List[Scenario]:
        """Load scenarios from a YAML or JSON file.

        The document is either a list of scenarios or a mapping holding
        one under ``scenarios``. A missing file yields an empty list.
        """
        file_path = Path(file_path)
        if not file_path.exists():
            logger.warning(f"Could not load {file_path}: file not found")
            return []

        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Could not parse {file_path}: {e}") from e

        if data is None:
            return []
        if isinstance(data, dict):
            data = data.get('scenarios') or []
        if not isinstance(data, list):
            raise ConfigError(f"{file_path}: expected a list of scenarios")

        return ConfigLoader.parse_scenarios(data, source=str(file_path))

    @staticmethod
    def parse_scenarios(entries: Sequence[Dict[str, Any]], source: str = "<memory>") -> List[Scenario]:
        """Validate raw scenario entries, rejecting duplicate ids."""
        scenarios: List[Scenario] = []
        seen = set()
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ConfigError(f"{source}: scenario #{index} is not a mapping")
            try:
                scenario = Scenario(**entry)
            except ValidationError as e:
                raise ConfigError(f"{source}: invalid scenario #{index}: {e}") from e
            if scenario.id in seen:
                raise ConfigError(f"{source}: duplicate scenario id '{scenario.id}'")
            seen.add(scenario.id)
            scenarios.append(scenario)
        return scenarios

    @staticmethod
    def save_scenarios(scenarios: Sequence[Scenario], file_path: Union[str, Path]) -> None:
        """Save scenarios to a YAML file (camelCase keys)."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)
        data = {'scenarios': [s.model_dump(by_alias=True) for s in scenarios]}
        with open(file_path, 'w', encoding='utf-8') as f:
            yaml.dump(data, f, default_flow_style=False, indent=2, sort_keys=False)


def load_env_config() -> BenchmarkConfig:
    """Load configuration from environment variables."""
    return BenchmarkConfig(
        scenarios_file=os.getenv('MEMBENCH_SCENARIOS_FILE', DEFAULT_SCENARIOS_FILE),
        default_iterations=int(os.getenv('MEMBENCH_DEFAULT_ITERATIONS', DEFAULT_ITERATIONS)),
        reports_dir=os.getenv('MEMBENCH_REPORTS_DIR', DEFAULT_REPORTS_DIR),
        log_level=os.getenv('MEMBENCH_LOG_LEVEL', 'INFO'),
        log_file=os.getenv('MEMBENCH_LOG_FILE'),
    )


def merge_configs(base: BenchmarkConfig, override: Dict[str, Any]) -> BenchmarkConfig:
    """Merge explicit overrides into a configuration, skipping unset values."""
    merged = base.model_dump()
    merged.update({k: v for k, v in override.items() if v is not None})
    return BenchmarkConfig(**merged)
