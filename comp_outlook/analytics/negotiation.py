# comp_outlook/analytics/negotiation.py
"""
Negotiation effectiveness: how often negotiations are attempted and won, and
where won negotiations land inside the employer's offered range.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterable

from comp_outlook.schema.columns import OUTCOME_IMPROVED, OUTCOME_NOT_ATTEMPTED
from comp_outlook.schema.records import normalize_jobs
from comp_outlook.utils.numeric import clamp, round_half_up

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NegotiationStats:
    attempts: int = 0
    successes: int = 0
    success_rate: int = 0
    negotiation_strength: int = 0
    # Unrounded strength (0-100), used by the recommendation bands
    strength_pct: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "attempts": self.attempts,
            "successes": self.successes,
            "successRate": self.success_rate,
            "negotiationStrength": self.negotiation_strength,
        }


def analyze_negotiations(jobs: Iterable[Any]) -> NegotiationStats:
    """
    Score every salary history entry across ``jobs``.

    An attempt is any outcome other than "Not attempted"; a success is
    "Improved". Strength averages, over successes on jobs with a valid range
    (both bounds, max > min), the clamped position of the final salary in
    [min, max].
    """
    attempts = successes = 0
    ratios = []
    for job in normalize_jobs(jobs):
        lo, hi = job.salary_min, job.salary_max
        has_range = lo is not None and hi is not None and hi > lo
        for entry in job.salary_history:
            outcome = entry.negotiation_outcome
            if outcome != OUTCOME_NOT_ATTEMPTED:
                attempts += 1
            if outcome != OUTCOME_IMPROVED:
                continue
            successes += 1
            if has_range and entry.final_salary is not None:
                ratios.append(clamp((entry.final_salary - lo) / (hi - lo), 0.0, 1.0))

    success_rate = round_half_up(successes / attempts * 100) if attempts else 0
    strength_pct = sum(ratios) / len(ratios) * 100 if ratios else 0.0
    stats = NegotiationStats(
        attempts=attempts,
        successes=successes,
        success_rate=success_rate,
        negotiation_strength=round_half_up(strength_pct),
        strength_pct=strength_pct,
    )
    logger.debug(
        f"Negotiations: {attempts} attempt(s), {successes} success(es), "
        f"strength {strength_pct:.2f}% over {len(ratios)} ranged success(es)"
    )
    return stats
