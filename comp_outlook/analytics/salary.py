# comp_outlook/analytics/salary.py
"""
Salary and total-compensation aggregation over a user's job records.

Per-job salary resolution order:
  1. ``finalSalary`` of the most recent salary history entry, when numeric;
  2. midpoint of ``salaryMin`` / ``salaryMax`` when both are present;
  3. whichever single bound is present;
  4. otherwise the job is excluded (never counted as 0).
"""

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence

import numpy as np
import pandas as pd

from comp_outlook.schema.columns import (
    PROG_COMPANY,
    PROG_DATE,
    PROG_JOB_ID,
    PROG_OUTCOME,
    PROG_SALARY,
    PROG_SORT_KEY,
    PROG_TITLE,
    PROG_TOTAL_COMP,
)
from comp_outlook.schema.records import JobRecord, normalize_jobs
from comp_outlook.utils.numeric import as_reported, round_half_up

logger = logging.getLogger(__name__)

_EPOCH = pd.Timestamp(0, tz="UTC")

EMPTY_SALARY_SUMMARY = {"avgSalary": 0, "medianSalary": 0, "minSalary": 0, "maxSalary": 0}
EMPTY_COMP_SUMMARY = {"avgTotalComp": 0, "medianTotalComp": 0, "minTotalComp": 0, "maxTotalComp": 0}


def resolve_job_salary(job: JobRecord) -> Optional[float]:
    """Best available salary figure for one job, or None to exclude it."""
    latest = job.latest_final_salary
    if latest is not None:
        return latest
    lo, hi = job.salary_min, job.salary_max
    if lo is not None and hi is not None:
        return (lo + hi) / 2
    if lo is not None:
        return lo
    return hi


def _median(sorted_values: Sequence[float]) -> float:
    # Element at index n // 2: the right-of-centre value for even counts.
    return sorted_values[len(sorted_values) // 2]


def _aggregate(values: List[float]) -> Optional[Dict[str, Any]]:
    if not values:
        return None
    ordered = sorted(values)
    return {
        "avg": round_half_up(sum(ordered) / len(ordered)),
        "median": as_reported(_median(ordered)),
        "min": as_reported(ordered[0]),
        "max": as_reported(ordered[-1]),
    }


def summarize_salaries(jobs: Iterable[Any]) -> Dict[str, Any]:
    values = [s for s in (resolve_job_salary(j) for j in normalize_jobs(jobs)) if s is not None]
    agg = _aggregate(values)
    if agg is None:
        return dict(EMPTY_SALARY_SUMMARY)
    logger.debug(f"Salary summary over {len(values)} job(s): avg={agg['avg']}")
    return {
        "avgSalary": agg["avg"],
        "medianSalary": agg["median"],
        "minSalary": agg["min"],
        "maxSalary": agg["max"],
    }


def _epoch_ms_keys(dates: List[Any]) -> pd.Series:
    """
    Milliseconds since the Unix epoch for each date, NaN when unusable.

    Bare numbers are already epoch milliseconds; everything else is parsed
    leniently as a date or timestamp.
    """
    raw = pd.Series(dates, dtype=object)
    is_number = raw.map(
        lambda v: isinstance(v, (int, float, np.integer, np.floating)) and not isinstance(v, bool)
    ).astype(bool)
    keys = pd.to_numeric(raw.where(is_number), errors="coerce").replace([np.inf, -np.inf], np.nan)
    if (~is_number).any():
        parsed = pd.to_datetime(raw[~is_number], errors="coerce", utc=True, format="mixed")
        keys[~is_number] = (parsed - _EPOCH) / pd.Timedelta(milliseconds=1)
    return keys.astype(float)


def chronological(points: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Stable sort of progression points by date.

    Dates are parsed leniently; points with missing or unparseable dates keep
    their relative order and go last. The stored date value is kept as-is.
    """
    if not points:
        return []
    df = pd.DataFrame({PROG_SORT_KEY: _epoch_ms_keys([p.get(PROG_DATE) for p in points])})
    unparsed = int(df[PROG_SORT_KEY].isna().sum())
    if unparsed:
        logger.debug(f"{unparsed} progression point(s) have no parseable date; ordering them last")
    order = df.sort_values(PROG_SORT_KEY, kind="mergesort", na_position="last").index
    return [points[i] for i in order]


def build_progression(jobs: Iterable[Any]) -> List[Dict[str, Any]]:
    """Every salary history entry across all jobs, in chronological order."""
    points = [
        {
            PROG_JOB_ID: job.job_id,
            PROG_DATE: entry.date,
            PROG_SALARY: as_reported(entry.final_salary),
            PROG_COMPANY: job.company,
            PROG_TITLE: job.job_title,
            PROG_OUTCOME: entry.negotiation_outcome,
        }
        for job in normalize_jobs(jobs)
        for entry in job.salary_history
    ]
    return chronological(points)


def build_comp_progression(jobs: Iterable[Any]) -> List[Dict[str, Any]]:
    """Every total compensation history entry across all jobs, in chronological order."""
    points = [
        {
            PROG_JOB_ID: job.job_id,
            PROG_DATE: entry.date,
            PROG_TOTAL_COMP: as_reported(entry.total_comp),
            PROG_COMPANY: job.company,
            PROG_TITLE: job.job_title,
        }
        for job in normalize_jobs(jobs)
        for entry in job.comp_history
    ]
    return chronological(points)


def summarize_total_comp(comp_progression: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """Summary of the numeric ``totalComp`` values of a comp progression."""
    values = [p[PROG_TOTAL_COMP] for p in comp_progression if p.get(PROG_TOTAL_COMP) is not None]
    agg = _aggregate(values)
    if agg is None:
        return dict(EMPTY_COMP_SUMMARY)
    return {
        "avgTotalComp": agg["avg"],
        "medianTotalComp": agg["median"],
        "minTotalComp": agg["min"],
        "maxTotalComp": agg["max"],
    }
