# comp_outlook/projections/__init__.py
"""
Career projection pipeline: scenario and milestone normalization, timeline
simulation, the deterministic orchestrator and the AI enrichment adapter.
"""

from .client import EnrichmentClient
from .enrichment import EnrichedProjection, FallbackProjection, enrich, generate_career_projection
from .milestones import Milestone, normalize_milestones
from .orchestrator import ProjectionResult, build_career_projection
from .scenarios import Scenario, normalize_scenario_inputs
from .timeline import Timeline, build_timeline

__all__ = [
    "EnrichedProjection",
    "EnrichmentClient",
    "FallbackProjection",
    "Milestone",
    "ProjectionResult",
    "Scenario",
    "Timeline",
    "build_career_projection",
    "build_timeline",
    "enrich",
    "generate_career_projection",
    "normalize_milestones",
    "normalize_scenario_inputs",
]
