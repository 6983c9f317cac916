# comp_outlook/utils/numeric.py
"""
Numeric primitives shared by the projection and analytics pipelines.

Record values arrive from a document store as numbers, numeric strings,
Decimal128-like objects or garbage. Everything here coerces instead of
raising, so the core algorithms only ever see finite floats.

Reported integers use half-up rounding (``floor(x + 0.5)``). Python's builtin
``round`` rounds half to even, which would report 62.5 as 62.
"""

import math
from decimal import Decimal, InvalidOperation
from typing import Any, Optional, Union

import numpy as np

# Preset benefits value (USD/year) used when a job has no benefitsValue.
DEFAULT_BENEFITS_VALUE = 15000.0


def to_optional_num(value: Any) -> Optional[float]:
    """
    Coerce a string-or-number to a finite float.

    Returns None for missing, blank, boolean, non-finite or unparseable input.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        n = float(value)
    elif isinstance(value, Decimal):
        n = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if not text:
            return None
        try:
            n = float(Decimal(text))
        except (InvalidOperation, ValueError):
            return None
    return n if math.isfinite(n) else None


def to_num(value: Any) -> float:
    """Like ``to_optional_num`` but unusable input becomes 0.0."""
    n = to_optional_num(value)
    return 0.0 if n is None else n


def clamp(n: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, n))


def safe_pct(value: Any, fallback: Any = 0, lo: float = 0, hi: float = 25) -> float:
    """
    Resolve a percentage: the value if numeric, else the fallback if numeric,
    else 0; the result is clamped into [lo, hi].
    """
    v = to_optional_num(value)
    if v is None:
        v = to_optional_num(fallback)
    if v is None:
        v = 0.0
    return float(clamp(v, lo, hi))


def round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def round2(x: Any) -> float:
    n = to_optional_num(x)
    if n is None:
        return 0.0
    return math.floor(n * 100 + 0.5) / 100


def as_reported(x: Optional[float]) -> Union[int, float, None]:
    """Integral floats as ints, so stored whole numbers serialize without ``.0``."""
    if x is None:
        return None
    n = float(x)
    return int(n) if n.is_integer() else n
