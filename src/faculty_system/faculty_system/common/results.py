"""Per-entry results for batch operations.

A batch request resolves every entry to either ``Accepted`` or ``Rejected``;
the request itself only fails for request-level problems (authorization,
unknown course, bad date).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Generic, Optional, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Accepted(Generic[T]):
    index: int
    value: T
    ok: bool = field(default=True, init=False)


@dataclass(frozen=True)
class Rejected:
    index: int
    reason: str
    student_id: Any = None
    name: Optional[str] = None
    ok: bool = field(default=False, init=False)

    def to_dict(self) -> dict:
        return {"studentId": self.student_id, "name": self.name, "reason": self.reason}


EntryResult = Union[Accepted[T], Rejected]


def accepted_values(results) -> list:
    return [r.value for r in results if r.ok]


def rejected(results) -> list[Rejected]:
    return [r for r in results if not r.ok]
