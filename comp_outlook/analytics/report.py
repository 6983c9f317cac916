# comp_outlook/analytics/report.py
"""
Salary analytics report: summary, progression, negotiation effectiveness,
market positioning, recommendations and career progression for one user's jobs.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from comp_outlook.analytics.career import build_career_progression
from comp_outlook.analytics.market import position_jobs
from comp_outlook.analytics.negotiation import NegotiationStats, analyze_negotiations
from comp_outlook.analytics.recommendations import build_recommendations
from comp_outlook.analytics.salary import (
    EMPTY_COMP_SUMMARY,
    EMPTY_SALARY_SUMMARY,
    build_comp_progression,
    build_progression,
    summarize_salaries,
    summarize_total_comp,
)
from comp_outlook.config.loaders import get_engine_config
from comp_outlook.config.models import EngineConfig
from comp_outlook.schema.columns import PROG_SALARY_COLS
from comp_outlook.schema.records import normalize_jobs

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalyticsReport:
    summary: Dict[str, Any] = field(default_factory=lambda: dict(EMPTY_SALARY_SUMMARY))
    progression: List[Dict[str, Any]] = field(default_factory=list)
    negotiation_stats: NegotiationStats = field(default_factory=NegotiationStats)
    market_positioning: List[Dict[str, Any]] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)
    comp_summary: Dict[str, Any] = field(default_factory=lambda: dict(EMPTY_COMP_SUMMARY))
    comp_progression: List[Dict[str, Any]] = field(default_factory=list)
    career_progression: Dict[str, Any] = field(
        default_factory=lambda: {"avgChangePercent": 0, "biggestJump": None}
    )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "progression": self.progression,
            "negotiationStats": self.negotiation_stats.to_dict(),
            "marketPositioning": self.market_positioning,
            "recommendations": self.recommendations,
            "compSummary": self.comp_summary,
            "compProgression": self.comp_progression,
            "careerProgression": self.career_progression,
        }

    def progression_frame(self) -> pd.DataFrame:
        return pd.DataFrame(self.progression, columns=PROG_SALARY_COLS)


def build_salary_analytics(
    jobs: Optional[Iterable[Any]],
    config: Optional[EngineConfig] = None,
) -> AnalyticsReport:
    """
    Compute the full analytics report for ``jobs``.

    No jobs yields the all-zero report with empty lists (no recommendations).
    """
    records = normalize_jobs(jobs)
    if not records:
        logger.info("No jobs to analyze; returning empty salary analytics")
        return AnalyticsReport()

    config = config or get_engine_config()
    summary = summarize_salaries(records)
    progression = build_progression(records)
    stats = analyze_negotiations(records)
    comp_progression = build_comp_progression(records)

    report = AnalyticsReport(
        summary=summary,
        progression=progression,
        negotiation_stats=stats,
        market_positioning=position_jobs(records, config.benchmarks),
        recommendations=build_recommendations(summary, stats, progression, config.recommendations),
        comp_summary=summarize_total_comp(comp_progression),
        comp_progression=comp_progression,
        career_progression=build_career_progression(progression),
    )
    logger.info(
        f"Salary analytics for {len(records)} job(s): avg={summary['avgSalary']}, "
        f"success rate={stats.success_rate}%, {len(report.recommendations)} recommendation(s)"
    )
    return report
