# comp_outlook/analytics/recommendations.py
"""
Rule-based recommendations. Rules are evaluated in order and every rule that
fires contributes one message; when none fires a single affirmation is
returned, so the list is never empty.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from comp_outlook.analytics.negotiation import NegotiationStats
from comp_outlook.config.models import RecommendationThresholds
from comp_outlook.schema.columns import PROG_SALARY
from comp_outlook.utils.numeric import round_half_up

logger = logging.getLogger(__name__)

LOW_SALARY_MESSAGE = (
    "Your average salary is below typical industry thresholds. Consider targeting "
    "higher-paying roles or negotiating more aggressively."
)
LOW_SUCCESS_MESSAGE = (
    "Your negotiation success rate is low. Practice negotiation scripts or negotiate more often."
)
EXCELLENT_STRENGTH_MESSAGE = (
    "Your negotiation strength is excellent — improved offers typically land in the top "
    "{strength}% of the employer's salary range."
)
MODERATE_STRENGTH_MESSAGE = (
    "Your negotiation strength is moderate — improvements generally land around "
    "{strength}% of the employer's range."
)
LOW_STRENGTH_MESSAGE = (
    "Your negotiation gains tend to be on the lower end of employer ranges. "
    "Consider enhancing your negotiation approach."
)
STRONG_GROWTH_MESSAGE = "Strong salary progression: {growth}% total growth across your offers."
DEFAULT_MESSAGE = "Your salary profile looks strong. Continue targeting high-compensation roles."


def progression_growth_pct(progression: Sequence[Dict[str, Any]]) -> Optional[int]:
    """
    Rounded percent growth between the first and last progression salaries;
    None with fewer than two points or a non-positive starting salary.
    """
    if len(progression) < 2:
        return None
    start = progression[0].get(PROG_SALARY)
    end = progression[-1].get(PROG_SALARY)
    if start is None or end is None or start <= 0:
        return None
    return round_half_up((end - start) / start * 100)


def build_recommendations(
    summary: Dict[str, Any],
    stats: NegotiationStats,
    progression: Sequence[Dict[str, Any]],
    thresholds: Optional[RecommendationThresholds] = None,
) -> List[str]:
    t = thresholds or RecommendationThresholds()
    recs = []

    if summary.get("avgSalary", 0) < t.low_avg_salary:
        recs.append(LOW_SALARY_MESSAGE)

    if stats.attempts > 0 and stats.success_rate < t.low_success_rate_pct:
        recs.append(LOW_SUCCESS_MESSAGE)

    # Bands use the unrounded strength; the message quotes the rounded one
    if stats.strength_pct >= t.excellent_strength_pct:
        recs.append(EXCELLENT_STRENGTH_MESSAGE.format(strength=stats.negotiation_strength))
    elif stats.strength_pct >= t.moderate_strength_pct:
        recs.append(MODERATE_STRENGTH_MESSAGE.format(strength=stats.negotiation_strength))
    elif stats.attempts > 0:
        recs.append(LOW_STRENGTH_MESSAGE)

    growth = progression_growth_pct(progression)
    if growth is not None and growth > t.strong_growth_pct:
        recs.append(STRONG_GROWTH_MESSAGE.format(growth=growth))

    if not recs:
        recs.append(DEFAULT_MESSAGE)
    logger.debug(f"Built {len(recs)} recommendation(s)")
    return recs
