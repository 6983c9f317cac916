from .loaders import get_engine_config, load_engine_config, load_yaml_config
from .models import (
    ANY_BENCHMARK_KEY,
    Benchmark,
    ComparisonDefaults,
    EngineConfig,
    EnrichmentSettings,
    MilestoneRules,
    RecommendationThresholds,
    ScenarioDefaults,
    ScenarioRules,
)

__all__ = [
    "ANY_BENCHMARK_KEY",
    "Benchmark",
    "ComparisonDefaults",
    "EngineConfig",
    "EnrichmentSettings",
    "MilestoneRules",
    "RecommendationThresholds",
    "ScenarioDefaults",
    "ScenarioRules",
    "get_engine_config",
    "load_engine_config",
    "load_yaml_config",
]
