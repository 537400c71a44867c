from __future__ import annotations

import re
from typing import Any, Iterable, Optional

from ..core.constants import MOBILE_MAX_LENGTH
from ..core.exceptions import ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: Optional[str], field_name: str, min_len: int) -> str:
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: Optional[str]) -> str:
    value = require_non_empty(value, "Email")
    if not _EMAIL_RE.match(value):
        raise ValidationError("Email is not valid")
    return value.lower()


def require_mobile(value: Optional[str]) -> str:
    value = require_non_empty(value, "Mobile")
    if len(value) > MOBILE_MAX_LENGTH or not value.isdigit():
        raise ValidationError(f"Mobile must be at most {MOBILE_MAX_LENGTH} digits")
    return value


def require_id(value: Any, field_name: str) -> int:
    try:
        parsed = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} is not valid")
    if parsed <= 0:
        raise ValidationError(f"{field_name} is not valid")
    return parsed


def optional_id(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    return require_id(value, field_name)


def unique_ids(values: Optional[Iterable[Any]], field_name: str) -> list[int]:
    """Coerce to a list of ids, keeping the first occurrence of each."""
    if values is None:
        return []
    if isinstance(values, (str, bytes)):
        raise ValidationError(f"{field_name} must be a list")
    out: list[int] = []
    for v in values:
        i = require_id(v, field_name)
        if i not in out:
            out.append(i)
    return out
