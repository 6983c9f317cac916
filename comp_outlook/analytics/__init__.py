# comp_outlook/analytics/__init__.py
"""
Salary analytics over historical job records, and side-by-side offer comparison.
"""

from .career import build_career_progression
from .market import position_jobs
from .negotiation import NegotiationStats, analyze_negotiations
from .offers import (
    OfferComparison,
    build_comparison,
    compute_col_adjusted_total,
    compute_non_financial_score,
    compute_total_comp,
)
from .recommendations import build_recommendations
from .report import AnalyticsReport, build_salary_analytics
from .salary import (
    build_comp_progression,
    build_progression,
    resolve_job_salary,
    summarize_salaries,
    summarize_total_comp,
)

__all__ = [
    "AnalyticsReport",
    "NegotiationStats",
    "OfferComparison",
    "analyze_negotiations",
    "build_career_progression",
    "build_comp_progression",
    "build_comparison",
    "build_progression",
    "build_recommendations",
    "build_salary_analytics",
    "compute_col_adjusted_total",
    "compute_non_financial_score",
    "compute_total_comp",
    "position_jobs",
    "resolve_job_salary",
    "summarize_salaries",
    "summarize_total_comp",
]
