"""Scenario resolution from configuration and command line overrides."""

import logging
import math
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError

from .config import DEFAULT_ITERATIONS, Scenario
from .errors import ConfigError, NoScenariosConfigured, UnknownScenario

logger = logging.getLogger(__name__)


def _split_csv(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(',') if item.strip()]


def _parse_size(token: str) -> Optional[Union[int, float]]:
    """Parse one size token, returning None for anything unusable."""
    try:
        size = float(token)
    except ValueError:
        return None
    if not math.isfinite(size) or size <= 0:
        return None
    return int(size) if size.is_integer() else size


def parse_sizes(sizes: str) -> List[Union[int, float]]:
    """Parse a comma-separated size list, dropping non-numeric and zero entries."""
    parsed = []
    for token in _split_csv(sizes):
        size = _parse_size(token)
        if size is None:
            logger.debug(f"Ignoring size entry '{token}'")
            continue
        parsed.append(size)
    return parsed


def ad_hoc_scenario(size_mb: Union[int, float], iterations: int) -> Scenario:
    """Build a scenario straight from a requested size."""
    scenario_id = f"ad-hoc-{size_mb}mb"
    try:
        return Scenario(id=scenario_id, size_mb=size_mb, iterations=iterations)
    except ValidationError as e:
        raise ConfigError(f"Invalid ad-hoc scenario '{scenario_id}': {e}") from e


class ScenarioResolver:
    """Turns configured scenarios plus overrides into the ordered run list.

    Precedence: explicit sizes (ad-hoc mode), then an explicit id filter,
    then the full configured list.
    """

    def __init__(self, default_iterations: int = DEFAULT_ITERATIONS):
        self.default_iterations = default_iterations

    def resolve(
        self,
        config: Sequence[Scenario],
        sizes: Optional[str] = None,
        iterations: Optional[int] = None,
        scenarios: Optional[str] = None,
    ) -> List[Scenario]:
        """Resolve the scenarios to run.

        Args:
            config: Scenarios from the scenario source, in file order
            sizes: Comma-separated sizes in MB; triggers ad-hoc mode
            iterations: Iteration count for ad-hoc scenarios
            scenarios: Comma-separated scenario ids to select

        Returns:
            Non-empty list of scenarios

        Raises:
            ConfigError: Ad-hoc iterations are not a positive integer
            NoScenariosConfigured: Nothing to run
            UnknownScenario: Some requested ids are not configured
        """
        if sizes:
            count = iterations if iterations is not None else self.default_iterations
            if isinstance(count, bool) or not isinstance(count, int) or count < 1:
                raise ConfigError(f"iterations must be a positive integer, got {count!r}")
            resolved = [ad_hoc_scenario(size, count) for size in parse_sizes(sizes)]
            if not resolved:
                raise NoScenariosConfigured(f"No usable sizes in '{sizes}'")
            return resolved

        if not config:
            raise NoScenariosConfigured()

        requested = _split_csv(scenarios)
        if not requested:
            return list(config)

        wanted = set(requested)
        selected = [scenario for scenario in config if scenario.id in wanted]
        found = {scenario.id for scenario in selected}
        missing = list(dict.fromkeys(i for i in requested if i not in found))
        if missing:
            raise UnknownScenario(missing)

        return selected
