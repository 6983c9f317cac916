"""
Schema module - column/key constants and typed input records.
"""

from .records import (
    CompensationComponents,
    CompHistoryEntry,
    JobRecord,
    SalaryHistoryEntry,
    normalize_jobs,
)

__all__ = [
    "CompensationComponents",
    "CompHistoryEntry",
    "JobRecord",
    "SalaryHistoryEntry",
    "normalize_jobs",
]
