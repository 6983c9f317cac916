# comp_outlook/analytics/career.py
"""Salary change between consecutive points of a chronological progression."""

from typing import Any, Dict, List, Sequence

from comp_outlook.schema.columns import PROG_SALARY
from comp_outlook.utils.numeric import round_half_up


def salary_changes(progression: Sequence[Dict[str, Any]]) -> List[Dict[str, Any]]:
    changes = []
    for prev, curr in zip(progression, progression[1:]):
        before, after = prev.get(PROG_SALARY), curr.get(PROG_SALARY)
        if before is None or after is None or before <= 0:
            continue
        changes.append(
            {
                "percent": round_half_up((after - before) / before * 100),
                "from": prev,
                "to": curr,
            }
        )
    return changes


def build_career_progression(progression: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """
    ``{avgChangePercent, biggestJump}`` for an already chronological
    progression. The biggest jump is the change with the largest absolute
    percent; the earliest one wins ties.
    """
    changes = salary_changes(progression)
    if not changes:
        return {"avgChangePercent": 0, "biggestJump": None}
    biggest = changes[0]
    for change in changes[1:]:
        if abs(change["percent"]) > abs(biggest["percent"]):
            biggest = change
    avg = sum(c["percent"] for c in changes) / len(changes)
    return {"avgChangePercent": round_half_up(avg), "biggestJump": biggest}
