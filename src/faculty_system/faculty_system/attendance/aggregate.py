"""Attendance rollups.

Only ``Present`` counts as present; ``Absent``, ``Late`` and ``Excused`` fold
into the absent bucket. Stats are always derived from ledger statuses, never
incremented on their own.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from ..core.enums import AttendanceStatus


def compute_percentage(part: int, whole: int) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100


def counts_as_present(status: AttendanceStatus) -> bool:
    return status == AttendanceStatus.PRESENT


@dataclass(frozen=True)
class AttendanceStats:
    """Per (student, course) present/absent counters."""

    present: int = 0
    absent: int = 0

    @property
    def total(self) -> int:
        return self.present + self.absent

    @property
    def percentage(self) -> float:
        return compute_percentage(self.present, self.total)

    @classmethod
    def from_statuses(cls, statuses: Iterable[AttendanceStatus]) -> "AttendanceStats":
        present = absent = 0
        for s in statuses:
            if counts_as_present(s):
                present += 1
            else:
                absent += 1
        return cls(present=present, absent=absent)

    def to_dict(self) -> dict:
        return {"present": self.present, "absent": self.absent, "percentage": round(self.percentage, 2)}


def _zero_counts() -> dict[str, int]:
    return {s.value: 0 for s in AttendanceStatus}


@dataclass(frozen=True)
class AttendanceSummary:
    """Status histogram over a set of ledger records."""

    total: int = 0
    counts: dict[str, int] = field(default_factory=_zero_counts)

    @classmethod
    def from_statuses(cls, statuses: Iterable[AttendanceStatus]) -> "AttendanceSummary":
        counts = _zero_counts()
        total = 0
        for s in statuses:
            counts[s.value] += 1
            total += 1
        return cls(total=total, counts=counts)

    @property
    def percentage(self) -> float:
        return round(compute_percentage(self.counts[AttendanceStatus.PRESENT.value], self.total), 2)

    def to_dict(self) -> dict:
        return {"total": self.total, **self.counts, "percentage": self.percentage}
