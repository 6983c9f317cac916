# comp_outlook/analytics/offers.py
"""
Side-by-side comparison of job offers for the current year.

Each offer gets its total compensation (optionally grown by a one-off
per-offer scenario), a cost-of-living adjusted total, a 0-100 non-financial
score from 1-5 ratings, and financial/overall scores ranked across the
compared offers. Negotiation hints are attached per offer.
"""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from comp_outlook.config.loaders import get_engine_config
from comp_outlook.config.models import EngineConfig
from comp_outlook.schema.records import JobRecord, normalize_jobs
from comp_outlook.utils.numeric import (
    DEFAULT_BENEFITS_VALUE,
    as_reported,
    clamp,
    round_half_up,
    to_num,
)

logger = logging.getLogger(__name__)

RATING_MIN = 1
RATING_MAX = 5
DEFAULT_FACTOR_WEIGHT = 1

# (rating key, weight key)
NON_FINANCIAL_FACTORS = (
    ("cultureFit", "cultureFitWeight"),
    ("growth", "growthWeight"),
    ("workLifeBalance", "workLifeBalanceWeight"),
    ("remotePolicy", "remotePolicyWeight"),
)

MATRIX_ROWS = (
    {"label": "Base salary", "key": "salary"},
    {"label": "Bonus", "key": "bonus"},
    {"label": "Equity (annualized)", "key": "equity"},
    {"label": "Total comp", "key": "totalComp"},
    {"label": "COL index", "key": "colIndex"},
    {"label": "COL-adjusted total", "key": "colAdjustedTotal"},
    {"label": "Non-financial score", "key": "nonFinancialScore"},
    {"label": "Financial score", "key": "financialScore"},
    {"label": "Overall score", "key": "overallScore"},
)

BEHIND_TOP_MESSAGE = (
    "You are behind the top offer on COL-adjusted total comp; consider negotiating to close the gap."
)
BASE_SALARY_MESSAGE = "Ask for a base salary increase (target: at least {target})."
BONUS_MESSAGE = "Consider requesting a sign-on bonus or annual bonus component."
EQUITY_MESSAGE = "If equity matters, ask if equity/RSUs are available (or increase grant)."
BENEFITS_MESSAGE = (
    "Benefits are estimated (default {default}/yr if not provided). "
    "Verify health/401k/PTO details before deciding."
)


def _mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _get_or(mapping: Mapping, key: str, default: Any) -> Any:
    value = mapping.get(key)
    return default if value is None else value


def _grow(base: float, pct: Any) -> float:
    return base * (1 + to_num(pct) / 100)


@dataclass(frozen=True)
class TotalComp:
    salary: float
    bonus: float
    equity: float
    benefits: float

    @property
    def total(self) -> float:
        return self.salary + self.bonus + self.equity + self.benefits

    def to_dict(self) -> Dict[str, Any]:
        return {
            "salary": as_reported(self.salary),
            "bonus": as_reported(self.bonus),
            "equity": as_reported(self.equity),
            "benefits": as_reported(self.benefits),
            "total": as_reported(self.total),
        }


def compute_total_comp(job: Any, scenario: Optional[Mapping] = None) -> TotalComp:
    """
    Current-year compensation of one offer, each component grown once by the
    scenario's ``salaryIncreasePct`` / ``bonusIncreasePct`` /
    ``equityIncreasePct`` / ``benefitsIncreasePct``.
    """
    record = JobRecord.from_raw(job)
    scenario = _mapping(scenario)
    benefits = to_num(record.benefits_value)
    return TotalComp(
        salary=_grow(to_num(record.final_salary), scenario.get("salaryIncreasePct")),
        bonus=_grow(to_num(record.salary_bonus), scenario.get("bonusIncreasePct")),
        equity=_grow(to_num(record.salary_equity), scenario.get("equityIncreasePct")),
        benefits=_grow(
            benefits if benefits > 0 else DEFAULT_BENEFITS_VALUE, scenario.get("benefitsIncreasePct")
        ),
    )


def compute_col_adjusted_total(
    total_comp: Any, offer_col_index: Any, baseline_col_index: Any = 100
) -> float:
    """
    ``total * baseline / offer``. A missing or zero offer index means no
    adjustment; a negative one leaves the total as is.
    """
    total = to_num(total_comp)
    baseline = to_num(baseline_col_index) or 100.0
    offer = to_num(offer_col_index) or baseline
    if offer <= 0:
        return total
    return total * (baseline / offer)


def compute_non_financial_score(
    ratings: Optional[Mapping] = None,
    weights: Optional[Mapping] = None,
    default_rating: float = 3,
) -> int:
    """Weighted mean of 1-5 ratings mapped onto 0-100, rounded half up."""
    ratings = _mapping(ratings)
    weights = _mapping(weights)
    weighted = 0.0
    total_weight = 0.0
    for rating_key, weight_key in NON_FINANCIAL_FACTORS:
        weight = to_num(_get_or(weights, weight_key, DEFAULT_FACTOR_WEIGHT))
        rating = clamp(to_num(_get_or(ratings, rating_key, default_rating)), RATING_MIN, RATING_MAX)
        weighted += (rating - RATING_MIN) / (RATING_MAX - RATING_MIN) * 100 * weight
        total_weight += weight
    return round_half_up(weighted / (total_weight or 1))


@dataclass(frozen=True)
class OfferScore:
    job: JobRecord
    comp: TotalComp
    col_index: float
    col_adjusted_total: float
    non_financial_score: int
    financial_score: int = 0
    overall_score: int = 0
    negotiation_recommendations: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "jobId": self.job.job_id,
            "company": self.job.company,
            "jobTitle": self.job.job_title,
            "location": self.job.location,
            "workMode": self.job.work_mode,
            "archived": self.job.archived,
            "archiveReason": self.job.archive_reason,
            "salary": as_reported(self.comp.salary),
            "bonus": as_reported(self.comp.bonus),
            "equity": as_reported(self.comp.equity),
            "benefits": as_reported(self.comp.benefits),
            "totalComp": as_reported(self.comp.total),
            "colIndex": as_reported(self.col_index),
            "colAdjustedTotal": as_reported(self.col_adjusted_total),
            "nonFinancialScore": self.non_financial_score,
            "financialScore": self.financial_score,
            "overallScore": self.overall_score,
            "negotiationRecommendations": list(self.negotiation_recommendations),
        }


@dataclass(frozen=True)
class OfferComparison:
    offers: Tuple[OfferScore, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "offers": [o.to_dict() for o in self.offers],
            "matrixRows": [dict(row) for row in MATRIX_ROWS],
        }

    def to_frame(self) -> pd.DataFrame:
        """The comparison matrix: one row per matrix row, one column per offer."""
        offers = [o.to_dict() for o in self.offers]
        columns = [f"{o['company']} ({o['jobId']})" for o in offers]
        rows = [[o[row["key"]] for o in offers] for row in MATRIX_ROWS]
        return pd.DataFrame(rows, index=[row["label"] for row in MATRIX_ROWS], columns=columns)


def _negotiation_recommendations(
    offer: OfferScore, is_best: bool, best_salary: float
) -> Tuple[str, ...]:
    recs = []
    if not is_best:
        recs.append(BEHIND_TOP_MESSAGE)
    if offer.comp.salary < best_salary:
        recs.append(BASE_SALARY_MESSAGE.format(target=round_half_up(best_salary)))
    if offer.comp.bonus == 0:
        recs.append(BONUS_MESSAGE)
    if offer.comp.equity == 0:
        recs.append(EQUITY_MESSAGE)
    recs.append(BENEFITS_MESSAGE.format(default=as_reported(DEFAULT_BENEFITS_VALUE)))
    return tuple(recs)


def build_comparison(
    jobs: Iterable[Any],
    inputs: Optional[Mapping] = None,
    config: Optional[EngineConfig] = None,
) -> OfferComparison:
    """
    Score offers against each other.

    ``inputs`` may carry ``baselineColIndex``, ``colIndexByJobId``,
    ``scenarioByJobId``, ``ratingsByJobId`` and ``weights``; anything missing
    uses the configured comparison defaults.
    """
    config = config or get_engine_config()
    defaults = config.comparison
    inputs = _mapping(inputs)

    baseline = to_num(_get_or(inputs, "baselineColIndex", defaults.baseline_col_index))
    baseline = baseline or defaults.baseline_col_index
    col_by_id = _mapping(inputs.get("colIndexByJobId"))
    scenario_by_id = _mapping(inputs.get("scenarioByJobId"))
    ratings_by_id = _mapping(inputs.get("ratingsByJobId"))
    weights = _mapping(inputs.get("weights"))
    financial_weight = clamp(to_num(_get_or(weights, "financialWeight", defaults.financial_weight)), 0, 1)

    scored: List[OfferScore] = []
    for job in normalize_jobs(jobs):
        comp = compute_total_comp(job, scenario_by_id.get(job.job_id))
        col_index = to_num(_get_or(col_by_id, job.job_id, baseline)) or baseline
        scored.append(
            OfferScore(
                job=job,
                comp=comp,
                col_index=col_index,
                col_adjusted_total=compute_col_adjusted_total(comp.total, col_index, baseline),
                non_financial_score=compute_non_financial_score(
                    ratings_by_id.get(job.job_id), weights, defaults.default_rating
                ),
            )
        )

    if not scored:
        return OfferComparison()

    adjusted = [o.col_adjusted_total for o in scored]
    low, high = min(adjusted), max(adjusted)
    spread = (high - low) or 1
    # First offer with the highest adjusted total wins ties
    best_index = adjusted.index(high)
    best_salary = max(o.comp.salary for o in scored)

    offers = []
    for i, offer in enumerate(scored):
        financial = round_half_up((offer.col_adjusted_total - low) / spread * 100)
        overall = round_half_up(
            financial * financial_weight + offer.non_financial_score * (1 - financial_weight)
        )
        offer = dataclasses.replace(offer, financial_score=financial, overall_score=overall)
        recs = _negotiation_recommendations(offer, i == best_index, best_salary)
        offers.append(dataclasses.replace(offer, negotiation_recommendations=recs))

    top = scored[best_index].job
    logger.info(f"Compared {len(offers)} offer(s); top COL-adjusted offer: {top.company} ({top.job_id})")
    return OfferComparison(offers=tuple(offers))
