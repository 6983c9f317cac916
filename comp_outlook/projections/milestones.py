# comp_outlook/projections/milestones.py
"""
Milestone normalization.

A milestone is a one-time, year-anchored change (promotion, title change)
applied after that year's annual growth. Bump percentages stay ``None`` when
absent so "no bump" and "0% bump" remain distinguishable.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from comp_outlook.config.loaders import get_engine_config
from comp_outlook.config.models import EngineConfig
from comp_outlook.utils.numeric import clamp, round_half_up, safe_pct, to_optional_num

logger = logging.getLogger(__name__)

# Raw key -> field name
_BUMP_KEYS = {
    "salaryBumpPct": "salary_bump_pct",
    "bonusBumpPct": "bonus_bump_pct",
    "equityBumpPct": "equity_bump_pct",
    "benefitsBumpPct": "benefits_bump_pct",
}


@dataclass(frozen=True)
class Milestone:
    year: int
    title: Optional[str] = None
    salary_bump_pct: Optional[float] = None
    bonus_bump_pct: Optional[float] = None
    equity_bump_pct: Optional[float] = None
    benefits_bump_pct: Optional[float] = None
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """camelCase mapping; absent optional fields are omitted."""
        out: Dict[str, Any] = {"year": self.year}
        if self.title is not None:
            out["title"] = self.title
        for raw_key, attr in _BUMP_KEYS.items():
            value = getattr(self, attr)
            if value is not None:
                out[raw_key] = value
        if self.note is not None:
            out["note"] = self.note
        return out


def _get(item: Any, raw_key: str, attr: str) -> Any:
    if isinstance(item, Milestone):
        return getattr(item, attr)
    if isinstance(item, Mapping):
        return item.get(raw_key)
    return None


def _normalize_one(item: Any, config: EngineConfig) -> Optional[Milestone]:
    rules = config.milestones
    year = to_optional_num(_get(item, "year", "year"))
    if year is None:
        return None

    bumps = {}
    for raw_key, attr in _BUMP_KEYS.items():
        value = _get(item, raw_key, attr)
        bumps[attr] = None if value is None else safe_pct(value, 0, 0, rules.bump_max_pct)

    title = _get(item, "title", "title")
    note = _get(item, "note", "note")
    return Milestone(
        year=int(clamp(round_half_up(year), rules.min_year, rules.max_year)),
        title=None if title is None else str(title),
        note=None if note is None else str(note),
        **bumps,
    )


def normalize_milestones(items: Any = None, config: Optional[EngineConfig] = None) -> List[Milestone]:
    """
    Validate, coerce and sort a milestone list.

    Anything that is not a list/tuple yields an empty list. Entries without a
    finite year are dropped; years are rounded and clamped to [1, 10]; present
    bumps are clamped to [0, 30]. The result is stable-sorted by year, so
    milestones sharing a year keep their input order. Idempotent.
    """
    if not isinstance(items, (list, tuple)):
        return []
    config = config or get_engine_config()

    out = []
    for item in items:
        milestone = _normalize_one(item, config)
        if milestone is None:
            logger.debug(f"Dropping milestone without a finite year: {item!r}")
            continue
        out.append(milestone)

    # list.sort is stable
    out.sort(key=lambda m: m.year)
    return out


def milestones_by_year(milestones: List[Milestone]) -> Dict[int, List[Milestone]]:
    """Group milestones by year, keeping list order within each year."""
    grouped: Dict[int, List[Milestone]] = {}
    for m in milestones:
        grouped.setdefault(m.year, []).append(m)
    return grouped
