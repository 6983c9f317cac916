# comp_outlook/projections/timeline.py
"""
Year-by-year simulation of one compensation trajectory.

For each year y = 1..H:
  1. annual growth on salary, bonus, equity and benefits;
  2. every milestone scheduled for y, in list order: present bumps are applied
     and a milestone title replaces the running title;
  3. the year is recorded with each component rounded half-up and
     total_comp = round(salary + bonus + equity + benefits) taken from the
     unrounded running values.

Running values keep full precision; rounding happens only on output, so it
never compounds across years. Year 0 is the starting point, untouched apart
from the benefits floor.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from comp_outlook.projections.milestones import Milestone, milestones_by_year
from comp_outlook.schema.columns import (
    TIMELINE_COLS,
    TL_BENEFITS,
    TL_BONUS,
    TL_EQUITY,
    TL_SALARY,
    TL_TITLE,
    TL_TOTAL_COMP,
    TL_YEAR,
)
from comp_outlook.schema.records import CompensationComponents
from comp_outlook.utils.numeric import round_half_up, to_num

logger = logging.getLogger(__name__)

# Component order inside the running vector
_SALARY, _BONUS, _EQUITY, _BENEFITS = range(4)


@dataclass(frozen=True)
class TimelineSnapshot:
    year: int
    salary: int
    bonus: int
    equity: int
    benefits: int
    total_comp: int
    title: str


@dataclass(frozen=True)
class Timeline:
    """H+1 yearly snapshots; ``snapshots[0]`` is the starting point."""

    snapshots: Tuple[TimelineSnapshot, ...]

    @property
    def horizon(self) -> int:
        return len(self.snapshots) - 1

    @property
    def ending_salary(self) -> int:
        return self.snapshots[-1].salary if self.snapshots else 0

    @property
    def ending_total_comp(self) -> int:
        return self.snapshots[-1].total_comp if self.snapshots else 0

    def series(self, attr: str) -> List:
        return [getattr(s, attr) for s in self.snapshots]

    def to_dict(self) -> Dict[str, List]:
        """Columnar series, the shape charting consumers expect."""
        return {
            "years": self.series("year"),
            "salary": self.series("salary"),
            "bonus": self.series("bonus"),
            "equity": self.series("equity"),
            "benefits": self.series("benefits"),
            "totalComp": self.series("total_comp"),
            "titleByYear": self.series("title"),
        }

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            [
                {
                    TL_YEAR: s.year,
                    TL_SALARY: s.salary,
                    TL_BONUS: s.bonus,
                    TL_EQUITY: s.equity,
                    TL_BENEFITS: s.benefits,
                    TL_TOTAL_COMP: s.total_comp,
                    TL_TITLE: s.title,
                }
                for s in self.snapshots
            ],
            columns=TIMELINE_COLS,
        )


def _bump_factors(milestone: Milestone) -> np.ndarray:
    bumps = (
        milestone.salary_bump_pct,
        milestone.bonus_bump_pct,
        milestone.equity_bump_pct,
        milestone.benefits_bump_pct,
    )
    # An absent bump multiplies by exactly 1.0, which leaves the value unchanged.
    return np.array([1.0 if b is None else 1.0 + b / 100.0 for b in bumps])


def _snapshot(year: int, values: np.ndarray, title: str) -> TimelineSnapshot:
    return TimelineSnapshot(
        year=year,
        salary=round_half_up(values[_SALARY]),
        bonus=round_half_up(values[_BONUS]),
        equity=round_half_up(values[_EQUITY]),
        benefits=round_half_up(values[_BENEFITS]),
        total_comp=round_half_up(
            values[_SALARY] + values[_BONUS] + values[_EQUITY] + values[_BENEFITS]
        ),
        title=title,
    )


def build_timeline(
    years: int,
    start: CompensationComponents,
    raise_pct: float,
    bonus_growth_pct: float = 0.0,
    equity_growth_pct: float = 0.0,
    benefits_growth_pct: float = 0.0,
    milestones: Optional[Sequence[Milestone]] = None,
    initial_title: str = "",
) -> Timeline:
    """
    Simulate ``years`` years of compensation from ``start``.

    Milestones are expected to be normalized already; a milestone whose year
    lies beyond the horizon simply never fires.
    """
    years = max(0, int(years))
    values = np.array(
        [start.salary, start.bonus, start.equity, start.benefits], dtype=float
    )
    growth = 1.0 + np.array(
        [to_num(raise_pct), to_num(bonus_growth_pct), to_num(equity_growth_pct), to_num(benefits_growth_pct)]
    ) / 100.0
    by_year = milestones_by_year(list(milestones or []))
    title = initial_title or ""

    snapshots = [_snapshot(0, values, title)]
    for y in range(1, years + 1):
        # Annual growth applied first
        values = values * growth
        # Then milestone bumps for that year, in list order
        for m in by_year.get(y, []):
            values = values * _bump_factors(m)
            if m.title:
                title = str(m.title)
        snapshots.append(_snapshot(y, values, title))

    logger.debug(
        f"Built {years}-year timeline at {raise_pct}% raise: "
        f"salary {snapshots[0].salary} -> {snapshots[-1].salary}"
    )
    return Timeline(snapshots=tuple(snapshots))
