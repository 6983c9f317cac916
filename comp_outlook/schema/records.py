# comp_outlook/schema/records.py
"""
Typed, read-only job records built from loosely-typed store documents.

``JobRecord.from_raw`` is the single raw -> normalized conversion step for job
data. Downstream code never looks at the raw document again, so every field is
either a finite float, None (absent), or a plain string.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from comp_outlook.schema.columns import (
    OUTCOME_NOT_ATTEMPTED,
    RAW_ARCHIVE_REASON,
    RAW_ARCHIVED,
    RAW_BENEFITS_VALUE,
    RAW_COMP_HISTORY,
    RAW_COMPANY,
    RAW_DATE,
    RAW_FINAL_SALARY,
    RAW_ID,
    RAW_JOB_ID,
    RAW_JOB_TITLE,
    RAW_LOCATION,
    RAW_NEGOTIATION_OUTCOME,
    RAW_SALARY_BONUS,
    RAW_SALARY_EQUITY,
    RAW_SALARY_HISTORY,
    RAW_SALARY_MAX,
    RAW_SALARY_MIN,
    RAW_TOTAL_COMP,
    RAW_WORK_MODE,
)
from comp_outlook.utils.numeric import DEFAULT_BENEFITS_VALUE, to_num, to_optional_num

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    return "" if value is None else str(value)


def _as_list(value: Any) -> List[Any]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


@dataclass(frozen=True)
class SalaryHistoryEntry:
    """One recorded final salary. ``date`` keeps the stored value for output."""

    date: Any
    final_salary: Optional[float]
    negotiation_outcome: str = OUTCOME_NOT_ATTEMPTED

    @classmethod
    def from_raw(cls, raw: Any) -> "SalaryHistoryEntry":
        if isinstance(raw, cls):
            return raw
        raw = raw if isinstance(raw, Mapping) else {}
        outcome = raw.get(RAW_NEGOTIATION_OUTCOME)
        return cls(
            date=raw.get(RAW_DATE),
            final_salary=to_optional_num(raw.get(RAW_FINAL_SALARY)),
            negotiation_outcome=str(outcome).strip() if outcome else OUTCOME_NOT_ATTEMPTED,
        )


@dataclass(frozen=True)
class CompHistoryEntry:
    date: Any
    total_comp: Optional[float]

    @classmethod
    def from_raw(cls, raw: Any) -> "CompHistoryEntry":
        if isinstance(raw, cls):
            return raw
        raw = raw if isinstance(raw, Mapping) else {}
        return cls(date=raw.get(RAW_DATE), total_comp=to_optional_num(raw.get(RAW_TOTAL_COMP)))


@dataclass(frozen=True)
class CompensationComponents:
    """Starting compensation; benefits never resolves to 0 or less."""

    salary: float = 0.0
    bonus: float = 0.0
    equity: float = 0.0
    benefits: float = DEFAULT_BENEFITS_VALUE

    def __post_init__(self):
        object.__setattr__(self, "salary", to_num(self.salary))
        object.__setattr__(self, "bonus", to_num(self.bonus))
        object.__setattr__(self, "equity", to_num(self.equity))
        benefits = to_num(self.benefits)
        object.__setattr__(self, "benefits", benefits if benefits > 0 else DEFAULT_BENEFITS_VALUE)

    @property
    def total(self) -> float:
        return self.salary + self.bonus + self.equity + self.benefits

    def to_dict(self) -> dict:
        return {
            "salary": self.salary,
            "bonus": self.bonus,
            "equity": self.equity,
            "benefits": self.benefits,
        }


@dataclass(frozen=True)
class JobRecord:
    """A job/offer as seen by the engine. Treated as read-only input."""

    job_id: str
    company: str = ""
    job_title: str = ""
    location: str = ""
    work_mode: str = ""
    archived: bool = False
    archive_reason: str = ""
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    final_salary: Optional[float] = None
    salary_bonus: Optional[float] = None
    salary_equity: Optional[float] = None
    benefits_value: Optional[float] = None
    salary_history: Tuple[SalaryHistoryEntry, ...] = field(default_factory=tuple)
    comp_history: Tuple[CompHistoryEntry, ...] = field(default_factory=tuple)

    @classmethod
    def from_raw(cls, raw: Any) -> "JobRecord":
        """
        Build a JobRecord from a store document.

        Accepts ``_id``, ``id`` or ``jobId`` as identifier (ObjectIds are
        stringified). Numeric fields accept numbers or numeric strings;
        anything else becomes None. History sequences keep their stored order.
        """
        if isinstance(raw, cls):
            return raw
        if not isinstance(raw, Mapping):
            logger.debug(f"Ignoring non-mapping job document of type {type(raw).__name__}")
            raw = {}

        job_id = raw.get(RAW_ID)
        if job_id is None:
            job_id = raw.get("id", raw.get(RAW_JOB_ID))

        return cls(
            job_id=_text(job_id),
            company=_text(raw.get(RAW_COMPANY)),
            job_title=_text(raw.get(RAW_JOB_TITLE)),
            location=_text(raw.get(RAW_LOCATION)),
            work_mode=_text(raw.get(RAW_WORK_MODE)),
            archived=bool(raw.get(RAW_ARCHIVED)),
            archive_reason=_text(raw.get(RAW_ARCHIVE_REASON)),
            salary_min=to_optional_num(raw.get(RAW_SALARY_MIN)),
            salary_max=to_optional_num(raw.get(RAW_SALARY_MAX)),
            final_salary=to_optional_num(raw.get(RAW_FINAL_SALARY)),
            salary_bonus=to_optional_num(raw.get(RAW_SALARY_BONUS)),
            salary_equity=to_optional_num(raw.get(RAW_SALARY_EQUITY)),
            benefits_value=to_optional_num(raw.get(RAW_BENEFITS_VALUE)),
            salary_history=tuple(
                SalaryHistoryEntry.from_raw(e) for e in _as_list(raw.get(RAW_SALARY_HISTORY))
            ),
            comp_history=tuple(
                CompHistoryEntry.from_raw(e) for e in _as_list(raw.get(RAW_COMP_HISTORY))
            ),
        )

    @property
    def latest_final_salary(self) -> Optional[float]:
        """finalSalary of the most recent (last stored) salary history entry."""
        if not self.salary_history:
            return None
        return self.salary_history[-1].final_salary

    def starting_components(self) -> CompensationComponents:
        return CompensationComponents(
            salary=to_num(self.final_salary),
            bonus=to_num(self.salary_bonus),
            equity=to_num(self.salary_equity),
            benefits=to_num(self.benefits_value),
        )


def normalize_jobs(jobs: Optional[Iterable[Any]]) -> List[JobRecord]:
    """Convert a raw job list (or None) to JobRecords, preserving order."""
    if jobs is None or isinstance(jobs, (str, bytes, Mapping)):
        return []
    return [JobRecord.from_raw(j) for j in jobs]
