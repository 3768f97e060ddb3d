"""Roster resolution for batch requests.

Client-supplied ``(studentId, name)`` pairs are only trusted when they match an
enrolled student exactly (names compared case-insensitively). Every entry is
resolved on its own; a bad row never fails the batch.
"""
from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.results import Accepted, EntryResult, Rejected
from ..common.validators import coerce_id, is_blank
from ..core.constants import REASON_MISSING_FIELD, REASON_NOT_ENROLLED
from .model import RosterStudent

ID_KEYS = ("studentId", "student_id")
NAME_KEYS = ("name", "student_name")


def _first(entry: Mapping[str, Any], keys: Sequence[str]) -> Any:
    for k in keys:
        if k in entry and not is_blank(entry[k]):
            return entry[k]
    return None


def claimed_id(entry: Mapping[str, Any]) -> Any:
    return _first(entry, ID_KEYS) if isinstance(entry, Mapping) else None


def claimed_name(entry: Mapping[str, Any]) -> Optional[str]:
    value = _first(entry, NAME_KEYS) if isinstance(entry, Mapping) else None
    return str(value) if value is not None else None


class RosterResolver:
    def __init__(self, roster: Iterable[RosterStudent]):
        self._by_id = {s.student_id: s for s in roster}

    def is_enrolled(self, student_id: Any) -> bool:
        return coerce_id(student_id) in self._by_id

    def resolve_one(self, index: int, entry: Mapping[str, Any], *, require_name: bool = True) -> EntryResult:
        raw_id = claimed_id(entry)
        name = claimed_name(entry)

        if raw_id is None or (require_name and name is None):
            return Rejected(index=index, reason=REASON_MISSING_FIELD, student_id=raw_id, name=name)

        student = self._by_id.get(coerce_id(raw_id))
        if student is None:
            return Rejected(index=index, reason=REASON_NOT_ENROLLED, student_id=raw_id, name=name)

        if name is not None and student.full_name.strip().lower() != name.strip().lower():
            return Rejected(index=index, reason=REASON_NOT_ENROLLED, student_id=raw_id, name=name)

        return Accepted(index=index, value=student)

    def resolve(self, entries: Sequence[Mapping[str, Any]], *, require_name: bool = True) -> list[EntryResult]:
        return [self.resolve_one(i, e, require_name=require_name) for i, e in enumerate(entries)]
