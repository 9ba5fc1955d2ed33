"""Test configuration management."""

import pytest
import tempfile
import yaml
from pathlib import Path

from membench.core.config import (
    Scenario,
    BenchmarkConfig,
    ConfigLoader,
    bytes_from_mb,
    load_env_config,
    merge_configs,
)
from membench.core.errors import ConfigError


class TestScenario:
    """Test scenario model."""

    def test_scenario_from_camel_case(self):
        """Test scenario built from camelCase keys."""
        scenario = Scenario(**{"id": "small", "sizeMb": 16, "iterations": 100})

        assert scenario.id == "small"
        assert scenario.size_mb == 16
        assert scenario.iterations == 100
        assert scenario.size_bytes == 16 * 1024 * 1024

    def test_scenario_from_snake_case(self):
        """Test scenario built from field names."""
        scenario = Scenario(id="half", size_mb=0.5, iterations=3)

        assert scenario.size_mb == 0.5
        assert scenario.size_bytes == 512 * 1024

    def test_scenario_validation(self):
        """Test scenario validation."""
        with pytest.raises(ValueError):
            Scenario(id="zero", sizeMb=0, iterations=1)

        with pytest.raises(ValueError):
            Scenario(id="negative", sizeMb=-4, iterations=1)

        with pytest.raises(ValueError):
            Scenario(id="no-iterations", sizeMb=4, iterations=0)

        with pytest.raises(ValueError):
            Scenario(id="", sizeMb=4, iterations=1)

    def test_scenario_is_immutable(self):
        """Test resolved scenarios cannot be mutated."""
        scenario = Scenario(id="small", sizeMb=16, iterations=100)

        with pytest.raises(Exception):
            scenario.iterations = 5

    def test_bytes_from_mb(self):
        assert bytes_from_mb(1) == 1048576
        assert bytes_from_mb(1.5) == 1572864


class TestConfigLoader:
    """Test configuration loader."""

    def test_load_scenario_list(self, tmp_path):
        """Test loading a top-level list of scenarios."""
        path = tmp_path / "scenarios.yaml"
        path.write_text(yaml.dump([
            {"id": "a", "sizeMb": 1, "iterations": 2},
            {"id": "b", "sizeMb": 4, "iterations": 8},
        ]))

        scenarios = ConfigLoader.load_scenarios(path)
        assert [s.id for s in scenarios] == ["a", "b"]
        assert scenarios[1].size_mb == 4

    def test_load_scenario_mapping_json(self, tmp_path):
        """Test loading a JSON document with a scenarios key."""
        path = tmp_path / "scenarios.json"
        path.write_text('{"scenarios": [{"id": "a", "sizeMb": 2, "iterations": 5}]}')

        scenarios = ConfigLoader.load_scenarios(path)
        assert len(scenarios) == 1
        assert scenarios[0].iterations == 5

    def test_missing_file_is_empty(self, tmp_path):
        """Test a missing scenario file yields no scenarios."""
        assert ConfigLoader.load_scenarios(tmp_path / "absent.yaml") == []

    def test_empty_file_is_empty(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")

        assert ConfigLoader.load_scenarios(path) == []

    def test_invalid_entry(self, tmp_path):
        """Test invalid scenario entries are rejected."""
        path = tmp_path / "bad.yaml"
        path.write_text(yaml.dump([{"id": "a", "sizeMb": "lots", "iterations": 1}]))

        with pytest.raises(ConfigError):
            ConfigLoader.load_scenarios(path)

    def test_duplicate_ids(self, tmp_path):
        """Test duplicate scenario ids are rejected."""
        path = tmp_path / "dup.yaml"
        path.write_text(yaml.dump([
            {"id": "a", "sizeMb": 1, "iterations": 1},
            {"id": "a", "sizeMb": 2, "iterations": 1},
        ]))

        with pytest.raises(ConfigError, match="duplicate"):
            ConfigLoader.load_scenarios(path)

    def test_not_a_list(self, tmp_path):
        path = tmp_path / "scalar.yaml"
        path.write_text("just a string\n")

        with pytest.raises(ConfigError):
            ConfigLoader.load_scenarios(path)

    def test_save_scenarios(self):
        """Test saving scenarios to file."""
        scenarios = [
            Scenario(id="a", sizeMb=1, iterations=2),
            Scenario(id="b", sizeMb=0.5, iterations=3),
        ]

        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            temp_path = f.name

        try:
            ConfigLoader.save_scenarios(scenarios, temp_path)

            with open(temp_path, 'r', encoding='utf-8') as f:
                raw = yaml.safe_load(f)
            assert raw["scenarios"][0] == {"id": "a", "sizeMb": 1, "iterations": 2}

            loaded = ConfigLoader.load_scenarios(temp_path)
            assert loaded == scenarios
        finally:
            Path(temp_path).unlink()

    def test_bundled_scenarios_are_valid(self):
        """Test the shipped scenario file loads."""
        path = Path(__file__).resolve().parent.parent / "config" / "memory-scenarios.yaml"

        scenarios = ConfigLoader.load_scenarios(path)
        assert scenarios
        assert len({s.id for s in scenarios}) == len(scenarios)


class TestBenchmarkConfig:
    """Test benchmark configuration."""

    def test_benchmark_config_defaults(self):
        """Test benchmark configuration defaults."""
        config = BenchmarkConfig()

        assert config.scenarios_file == "config/memory-scenarios.yaml"
        assert config.reports_dir == "reports/memory"
        assert config.default_iterations == 50
        assert config.log_level == "INFO"
        assert config.log_file is None

    def test_env_config(self, monkeypatch):
        """Test configuration from environment variables."""
        monkeypatch.setenv("MEMBENCH_REPORTS_DIR", "/tmp/reports")
        monkeypatch.setenv("MEMBENCH_DEFAULT_ITERATIONS", "7")
        monkeypatch.setenv("MEMBENCH_LOG_LEVEL", "DEBUG")

        config = load_env_config()
        assert config.reports_dir == "/tmp/reports"
        assert config.default_iterations == 7
        assert config.log_level == "DEBUG"

    def test_merge_skips_unset_values(self):
        """Test None overrides keep the base value."""
        base = BenchmarkConfig(reports_dir="base")

        merged = merge_configs(base, {"reports_dir": None, "log_level": "WARNING"})
        assert merged.reports_dir == "base"
        assert merged.log_level == "WARNING"
