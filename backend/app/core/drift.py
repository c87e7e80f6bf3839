"""Drift Detection: find stored values that fall outside the allowed set.

Invariants:
    - find_drift is PURE: input is a value -> row count mapping, no DB access
    - invalid_values is sorted by value for stable output
"""

from dataclasses import dataclass, field
from typing import Mapping, Sequence


@dataclass
class DriftReport:
    total_rows: int
    invalid_rows: int
    invalid_values: dict[str, int] = field(default_factory=dict)
    allowed: list[str] = field(default_factory=list)

    @property
    def is_clean(self) -> bool:
        return self.invalid_rows == 0

    def to_dict(self) -> dict:
        return {
            "total_rows": self.total_rows,
            "invalid_rows": self.invalid_rows,
            "invalid_values": dict(self.invalid_values),
            "allowed": list(self.allowed),
            "is_clean": self.is_clean,
        }


def find_drift(value_counts: Mapping[str, int], allowed: Sequence[str]) -> DriftReport:
    """Summarize rows whose value is not in allowed."""
    invalid = {
        value: count
        for value, count in sorted(value_counts.items())
        if value not in allowed
    }
    return DriftReport(
        total_rows=sum(value_counts.values()),
        invalid_rows=sum(invalid.values()),
        invalid_values=invalid,
        allowed=list(allowed),
    )
