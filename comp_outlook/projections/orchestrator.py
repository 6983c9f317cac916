# comp_outlook/projections/orchestrator.py
"""
Career projection orchestrator: fans timelines out across
jobs x scenarios x horizons and picks a headline summary.

This is the deterministic path. The enrichment adapter calls it with merged
assumptions, and it runs on its own whenever enrichment is unavailable.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd

from comp_outlook.config.loaders import get_engine_config
from comp_outlook.config.models import EngineConfig
from comp_outlook.projections.milestones import Milestone, normalize_milestones
from comp_outlook.projections.scenarios import (
    Scenario,
    normalize_scenario_inputs,
    scenario_definitions,
)
from comp_outlook.projections.timeline import Timeline, build_timeline
from comp_outlook.schema.columns import SCENARIO_EXPECTED, SOURCE_FALLBACK
from comp_outlook.schema.records import CompensationComponents, JobRecord, normalize_jobs
from comp_outlook.utils.numeric import round2, to_num

logger = logging.getLogger(__name__)

FIVE_YEAR = 5
TEN_YEAR = 10

FALLBACK_RATIONALE = (
    "Fallback projection used. Base salary raises follow the selected scenario. "
    "Bonus/equity/benefits are held flat by default unless you provide growth rates or milestones."
)
SUMMARY_TEMPLATE = (
    "Based on the expected raise scenario, the highest projected 5-year ending total "
    "compensation is {label}. Adjust raise assumptions and milestones to explore trade-offs."
)
EMPTY_SUMMARY = "Adjust raise assumptions and milestones to explore trade-offs."


@dataclass(frozen=True)
class Assumptions:
    source: str
    conservative_annual_raise_pct: float
    expected_annual_raise_pct: float
    optimistic_annual_raise_pct: float
    bonus_growth_pct: float
    equity_growth_pct: float
    benefits_growth_pct: float
    rationale: str = ""

    @classmethod
    def from_scenario(cls, scenario: Scenario, source: str, rationale: str) -> "Assumptions":
        return cls(
            source=source,
            conservative_annual_raise_pct=round2(scenario.conservative_pct),
            expected_annual_raise_pct=round2(scenario.expected_pct),
            optimistic_annual_raise_pct=round2(scenario.optimistic_pct),
            bonus_growth_pct=round2(scenario.bonus_growth_pct),
            equity_growth_pct=round2(scenario.equity_growth_pct),
            benefits_growth_pct=round2(scenario.benefits_growth_pct),
            rationale=rationale,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source": self.source,
            "conservativeAnnualRaisePct": self.conservative_annual_raise_pct,
            "expectedAnnualRaisePct": self.expected_annual_raise_pct,
            "optimisticAnnualRaisePct": self.optimistic_annual_raise_pct,
            "bonusGrowthPct": self.bonus_growth_pct,
            "equityGrowthPct": self.equity_growth_pct,
            "benefitsGrowthPct": self.benefits_growth_pct,
            "rationale": self.rationale,
        }


@dataclass(frozen=True)
class ScenarioProjection:
    key: str
    label: str
    annual_raise_pct: float
    bonus_growth_pct: float
    equity_growth_pct: float
    benefits_growth_pct: float
    five_year: Timeline
    ten_year: Timeline

    @property
    def five_year_ending_salary(self) -> int:
        return self.five_year.ending_salary

    @property
    def ten_year_ending_salary(self) -> int:
        return self.ten_year.ending_salary

    @property
    def five_year_ending_total_comp(self) -> int:
        return self.five_year.ending_total_comp

    @property
    def ten_year_ending_total_comp(self) -> int:
        return self.ten_year.ending_total_comp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": self.key,
            "label": self.label,
            "annualRaisePct": self.annual_raise_pct,
            "bonusGrowthPct": self.bonus_growth_pct,
            "equityGrowthPct": self.equity_growth_pct,
            "benefitsGrowthPct": self.benefits_growth_pct,
            "fiveYear": self.five_year.to_dict(),
            "tenYear": self.ten_year.to_dict(),
            "fiveYearEndingSalary": self.five_year_ending_salary,
            "tenYearEndingSalary": self.ten_year_ending_salary,
            "fiveYearEndingTotalComp": self.five_year_ending_total_comp,
            "tenYearEndingTotalComp": self.ten_year_ending_total_comp,
        }


@dataclass(frozen=True)
class JobProjection:
    job_id: str
    company: str
    job_title: str
    location: str
    work_mode: str
    scenarios: tuple

    def scenario(self, key: str) -> Optional[ScenarioProjection]:
        for sc in self.scenarios:
            if sc.key == key:
                return sc
        return None

    @property
    def label(self) -> str:
        return f"{self.company} — {self.job_title}".strip()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jobId": self.job_id,
            "company": self.company,
            "jobTitle": self.job_title,
            "location": self.location,
            "workMode": self.work_mode,
            "scenarios": [sc.to_dict() for sc in self.scenarios],
        }


@dataclass(frozen=True)
class ProjectionResult:
    """Built fresh per call and never mutated after return."""

    assumptions: Assumptions
    milestones: tuple
    jobs: tuple
    analysis_summary: str
    recommendation: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "assumptions": self.assumptions.to_dict(),
            "milestones": [m.to_dict() for m in self.milestones],
            "jobs": [j.to_dict() for j in self.jobs],
            "analysisSummary": self.analysis_summary,
            "recommendation": self.recommendation,
        }

    def to_frame(self) -> pd.DataFrame:
        """Long-format table: one row per job, scenario, horizon and year."""
        frames = []
        for job in self.jobs:
            for sc in job.scenarios:
                for horizon, timeline in ((FIVE_YEAR, sc.five_year), (TEN_YEAR, sc.ten_year)):
                    df = timeline.to_frame()
                    df.insert(0, "horizon", horizon)
                    df.insert(0, "scenario", sc.key)
                    df.insert(0, "company", job.company)
                    df.insert(0, "job_id", job.job_id)
                    frames.append(df)
        if not frames:
            return pd.DataFrame()
        return pd.concat(frames, ignore_index=True)


def resolve_starting_comp(job: JobRecord, override: Any = None) -> CompensationComponents:
    """
    Starting compensation for a job: each field of a
    ``startingCompByJobId[jobId]`` override wins when present, else the job's
    own finalSalary / salaryBonus / salaryEquity / benefitsValue.
    """
    base = job.starting_components()
    override = override if isinstance(override, Mapping) else {}

    def pick(key: str, own: float) -> float:
        value = override.get(key)
        return own if value is None else to_num(value)

    return CompensationComponents(
        salary=pick("salary", base.salary),
        bonus=pick("bonus", base.bonus),
        equity=pick("equity", base.equity),
        benefits=pick("benefits", base.benefits),
    )


def project_job(
    job: JobRecord,
    start: CompensationComponents,
    scenario: Scenario,
    milestones: List[Milestone],
) -> JobProjection:
    projections = []
    for sd in scenario_definitions(scenario):
        common = dict(
            start=start,
            raise_pct=sd.raise_pct,
            bonus_growth_pct=scenario.bonus_growth_pct,
            equity_growth_pct=scenario.equity_growth_pct,
            benefits_growth_pct=scenario.benefits_growth_pct,
            milestones=milestones,
            initial_title=job.job_title,
        )
        projections.append(
            ScenarioProjection(
                key=sd.key,
                label=sd.label,
                annual_raise_pct=sd.raise_pct,
                bonus_growth_pct=scenario.bonus_growth_pct,
                equity_growth_pct=scenario.equity_growth_pct,
                benefits_growth_pct=scenario.benefits_growth_pct,
                five_year=build_timeline(FIVE_YEAR, **common),
                ten_year=build_timeline(TEN_YEAR, **common),
            )
        )
    return JobProjection(
        job_id=job.job_id,
        company=job.company,
        job_title=job.job_title,
        location=job.location,
        work_mode=job.work_mode,
        scenarios=tuple(projections),
    )


def pick_headline_job(jobs: Iterable[JobProjection]) -> Optional[JobProjection]:
    """
    Job with the greatest 5-year ending total comp under the expected scenario
    (the job's first scenario when it has no expected one). Ties keep the
    earlier job.
    """
    best, best_value = None, None
    for job in jobs:
        sc = job.scenario(SCENARIO_EXPECTED) or (job.scenarios[0] if job.scenarios else None)
        value = to_num(sc.five_year_ending_total_comp) if sc is not None else 0.0
        if best is None or value > best_value:
            best, best_value = job, value
    return best


def summarize_projection(jobs: Iterable[JobProjection]) -> str:
    best = pick_headline_job(jobs)
    if best is None:
        return EMPTY_SUMMARY
    return SUMMARY_TEMPLATE.format(label=best.label)


def raw_milestones(inputs: Mapping) -> Any:
    milestones = inputs.get("milestones")
    return milestones if milestones is not None else inputs.get("careerMilestones")


def build_career_projection(
    jobs: Optional[Iterable[Any]],
    inputs: Optional[Mapping] = None,
    source: str = SOURCE_FALLBACK,
    rationale: Optional[str] = None,
    config: Optional[EngineConfig] = None,
) -> ProjectionResult:
    """
    Deterministic career projection for every job.

    Args:
        jobs: raw job documents or JobRecords.
        inputs: raw projection inputs (raiseScenarios, growth percentages,
            milestones / careerMilestones, startingCompByJobId).
        source: provenance recorded in ``assumptions.source``.
        rationale: assumptions rationale; the fallback text when None.
        config: engine configuration; packaged defaults when None.

    Returns:
        A ProjectionResult; identical inputs always yield an equal result.
    """
    config = config or get_engine_config()
    inputs = inputs if isinstance(inputs, Mapping) else {}
    records = normalize_jobs(jobs)

    scenario = normalize_scenario_inputs(inputs, config)
    milestones = normalize_milestones(raw_milestones(inputs), config)
    starting_by_id = inputs.get("startingCompByJobId")
    starting_by_id = starting_by_id if isinstance(starting_by_id, Mapping) else {}

    projected = tuple(
        project_job(job, resolve_starting_comp(job, starting_by_id.get(job.job_id)), scenario, milestones)
        for job in records
    )
    logger.info(
        f"Projected {len(projected)} job(s) x 3 scenarios with {len(milestones)} milestone(s) "
        f"(source={source})"
    )

    return ProjectionResult(
        assumptions=Assumptions.from_scenario(
            scenario, source, FALLBACK_RATIONALE if rationale is None else rationale
        ),
        milestones=tuple(milestones),
        jobs=projected,
        analysis_summary=summarize_projection(projected),
        recommendation=None,
    )
