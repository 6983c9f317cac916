from .numeric import (
    DEFAULT_BENEFITS_VALUE,
    as_reported,
    clamp,
    round2,
    round_half_up,
    safe_pct,
    to_num,
    to_optional_num,
)

__all__ = [
    "DEFAULT_BENEFITS_VALUE",
    "as_reported",
    "clamp",
    "round2",
    "round_half_up",
    "safe_pct",
    "to_num",
    "to_optional_num",
]
