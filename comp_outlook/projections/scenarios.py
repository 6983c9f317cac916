# comp_outlook/projections/scenarios.py
"""
Scenario normalization: turn loosely-typed raise/growth inputs into a fully
populated, in-range ``Scenario``. Never raises on malformed input.
"""

import logging
from dataclasses import dataclass
from typing import Any, List, Mapping, Optional

from comp_outlook.config.loaders import get_engine_config
from comp_outlook.config.models import EngineConfig
from comp_outlook.schema.columns import (
    SCENARIO_CONSERVATIVE,
    SCENARIO_EXPECTED,
    SCENARIO_OPTIMISTIC,
)
from comp_outlook.utils.numeric import safe_pct

logger = logging.getLogger(__name__)

# Raw input keys
RAISE_SCENARIOS = "raiseScenarios"
CONSERVATIVE_PCT = "conservativePct"
EXPECTED_PCT = "expectedPct"
OPTIMISTIC_PCT = "optimisticPct"
BONUS_GROWTH_PCT = "bonusGrowthPct"
EQUITY_GROWTH_PCT = "equityGrowthPct"
BENEFITS_GROWTH_PCT = "benefitsGrowthPct"

RAISE_KEYS = (CONSERVATIVE_PCT, EXPECTED_PCT, OPTIMISTIC_PCT)
GROWTH_KEYS = (BONUS_GROWTH_PCT, EQUITY_GROWTH_PCT, BENEFITS_GROWTH_PCT)


@dataclass(frozen=True)
class Scenario:
    conservative_pct: float
    expected_pct: float
    optimistic_pct: float
    bonus_growth_pct: float
    equity_growth_pct: float
    benefits_growth_pct: float

    def to_inputs(self) -> dict:
        """Render back to the raw input shape accepted by ``normalize_scenario_inputs``."""
        return {
            RAISE_SCENARIOS: {
                CONSERVATIVE_PCT: self.conservative_pct,
                EXPECTED_PCT: self.expected_pct,
                OPTIMISTIC_PCT: self.optimistic_pct,
            },
            BONUS_GROWTH_PCT: self.bonus_growth_pct,
            EQUITY_GROWTH_PCT: self.equity_growth_pct,
            BENEFITS_GROWTH_PCT: self.benefits_growth_pct,
        }


@dataclass(frozen=True)
class ScenarioDefinition:
    key: str
    label: str
    raise_pct: float


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def normalize_scenario_inputs(
    inputs: Optional[Mapping] = None,
    config: Optional[EngineConfig] = None,
) -> Scenario:
    """
    Resolve every scenario percentage to ``clamp(value ?? default ?? 0, lo, hi)``.

    Raises use the [raise_min_pct, raise_max_pct] range (default [0, 20]) with
    defaults 2/3/5; bonus, equity and benefits growth use
    [growth_min_pct, growth_max_pct] (default [0, 25]) and default to 0.
    """
    rules = (config or get_engine_config()).scenarios
    d = rules.defaults
    inputs = _mapping(inputs)
    rs = _mapping(inputs.get(RAISE_SCENARIOS))

    def raise_pct(value: Any, default: float) -> float:
        return safe_pct(value, default, rules.raise_min_pct, rules.raise_max_pct)

    def growth_pct(value: Any, default: float) -> float:
        return safe_pct(value, default, rules.growth_min_pct, rules.growth_max_pct)

    return Scenario(
        conservative_pct=raise_pct(rs.get(CONSERVATIVE_PCT), d.conservative_pct),
        expected_pct=raise_pct(rs.get(EXPECTED_PCT), d.expected_pct),
        optimistic_pct=raise_pct(rs.get(OPTIMISTIC_PCT), d.optimistic_pct),
        # Held flat (0%) unless set explicitly.
        bonus_growth_pct=growth_pct(inputs.get(BONUS_GROWTH_PCT), d.bonus_growth_pct),
        equity_growth_pct=growth_pct(inputs.get(EQUITY_GROWTH_PCT), d.equity_growth_pct),
        benefits_growth_pct=growth_pct(inputs.get(BENEFITS_GROWTH_PCT), d.benefits_growth_pct),
    )


def scenario_definitions(scenario: Scenario) -> List[ScenarioDefinition]:
    """The three named raise profiles, in display order."""
    return [
        ScenarioDefinition(SCENARIO_CONSERVATIVE, "Conservative", scenario.conservative_pct),
        ScenarioDefinition(SCENARIO_EXPECTED, "Expected", scenario.expected_pct),
        ScenarioDefinition(SCENARIO_OPTIMISTIC, "Optimistic", scenario.optimistic_pct),
    ]
