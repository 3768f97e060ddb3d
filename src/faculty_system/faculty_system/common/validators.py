from __future__ import annotations

from typing import Any, Optional

from ..core.exceptions import ValidationError


def require_non_empty(value: str, field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def coerce_id(value: Any) -> Optional[int]:
    """Best-effort conversion of a client-supplied id (int or numeric string)."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value > 0 else None
    s = str(value).strip()
    # ASCII only: isdigit() also accepts "²", which int() rejects
    if not (s.isascii() and s.isdigit()):
        return None
    return int(s) or None


def require_id_list(value: Any, field_name: str) -> list[int]:
    if not isinstance(value, list):
        raise ValidationError(f"{field_name} must be an array")
    out: list[int] = []
    for item in value:
        v = coerce_id(item)
        if v is None:
            raise ValidationError(f"{field_name} contains an invalid id: {item!r}")
        out.append(v)
    return out


def is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())
