"""
comp_outlook - compensation projection and salary analytics engine.

Two independent pipelines share the numeric primitives in ``utils.numeric``:

- ``projections``: multi-year compensation timelines per job and scenario,
  optionally enriched with AI-suggested assumptions.
- ``analytics``: salary summary, negotiation effectiveness, market positioning
  and recommendations computed from historical job records.
"""

from comp_outlook.analytics.report import build_salary_analytics
from comp_outlook.projections.enrichment import generate_career_projection
from comp_outlook.projections.orchestrator import build_career_projection

__version__ = "0.1.0"

__all__ = [
    "build_career_projection",
    "build_salary_analytics",
    "generate_career_projection",
]
