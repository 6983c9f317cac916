# comp_outlook/config/models.py
"""
Pydantic models for validating the structure and types of the engine
configuration loaded from YAML (see ``default_config.yaml``).
"""

import logging
import os
from typing import Dict, Optional

from pydantic import BaseModel, Field, model_validator

logger = logging.getLogger(__name__)


class ScenarioDefaults(BaseModel):
    """Fallback percentages used when neither the user nor the AI supplies one."""

    conservative_pct: float = 2.0
    expected_pct: float = 3.0
    optimistic_pct: float = 5.0
    bonus_growth_pct: float = 0.0
    equity_growth_pct: float = 0.0
    benefits_growth_pct: float = 0.0


class ScenarioRules(BaseModel):
    raise_min_pct: float = Field(0.0, description="Lower bound for annual raise percentages")
    raise_max_pct: float = Field(20.0, description="Upper bound for annual raise percentages")
    growth_min_pct: float = Field(0.0, description="Lower bound for bonus/equity/benefits growth")
    growth_max_pct: float = Field(25.0, description="Upper bound for bonus/equity/benefits growth")
    defaults: ScenarioDefaults = Field(default_factory=ScenarioDefaults)

    @model_validator(mode='after')
    def check_bounds(self) -> 'ScenarioRules':
        if self.raise_min_pct > self.raise_max_pct:
            raise ValueError("raise_min_pct cannot be greater than raise_max_pct")
        if self.growth_min_pct > self.growth_max_pct:
            raise ValueError("growth_min_pct cannot be greater than growth_max_pct")
        return self


class MilestoneRules(BaseModel):
    min_year: int = Field(1, ge=0)
    max_year: int = Field(10, ge=1)
    bump_max_pct: float = Field(30.0, ge=0.0)
    max_combined: int = Field(20, ge=0, description="Cap on user + AI milestones after merging")

    @model_validator(mode='after')
    def check_year_range(self) -> 'MilestoneRules':
        if self.min_year > self.max_year:
            raise ValueError("milestone min_year cannot be greater than max_year")
        return self


class Benchmark(BaseModel):
    median: float = Field(..., ge=0.0)
    top: float = Field(..., ge=0.0)


class RecommendationThresholds(BaseModel):
    low_avg_salary: float = 70000.0
    low_success_rate_pct: float = 30.0
    excellent_strength_pct: float = 75.0
    moderate_strength_pct: float = 13.0
    strong_growth_pct: float = 20.0

    @model_validator(mode='after')
    def check_strength_bands(self) -> 'RecommendationThresholds':
        if self.moderate_strength_pct > self.excellent_strength_pct:
            raise ValueError("moderate_strength_pct cannot exceed excellent_strength_pct")
        return self


class EnrichmentSettings(BaseModel):
    """Settings for the OpenAI-compatible chat completion service."""

    enabled: bool = True
    model: str = "gpt-4o-mini"
    base_url: Optional[str] = None
    api_key_env: str = "COMP_OUTLOOK_API_KEY"
    temperature: float = Field(0.4, ge=0.0, le=2.0)
    top_p: float = Field(0.9, gt=0.0, le=1.0)
    max_tokens: int = Field(1200, gt=0)
    timeout_seconds: Optional[float] = Field(None, gt=0.0)

    @property
    def api_key(self) -> str:
        return os.environ.get(self.api_key_env, "")


class ComparisonDefaults(BaseModel):
    """Defaults for the side-by-side offer comparison."""

    baseline_col_index: float = Field(100.0, gt=0.0, description="Cost-of-living index of the reference location")
    financial_weight: float = Field(0.65, ge=0.0, le=1.0, description="Share of the overall score that is financial")
    default_rating: float = Field(3.0, ge=1.0, le=5.0, description="Rating used for unrated non-financial factors")


ANY_BENCHMARK_KEY = "Any|Any"


class EngineConfig(BaseModel):
    """The root model for the engine configuration file."""

    scenarios: ScenarioRules = Field(default_factory=ScenarioRules)
    milestones: MilestoneRules = Field(default_factory=MilestoneRules)
    benchmarks: Dict[str, Benchmark] = Field(
        default_factory=lambda: {ANY_BENCHMARK_KEY: Benchmark(median=85000, top=130000)}
    )
    recommendations: RecommendationThresholds = Field(default_factory=RecommendationThresholds)
    enrichment: EnrichmentSettings = Field(default_factory=EnrichmentSettings)
    comparison: ComparisonDefaults = Field(default_factory=ComparisonDefaults)

    @model_validator(mode='after')
    def check_catch_all_benchmark(self) -> 'EngineConfig':
        if ANY_BENCHMARK_KEY not in self.benchmarks:
            raise ValueError(f"benchmarks must define the '{ANY_BENCHMARK_KEY}' catch-all entry")
        return self
