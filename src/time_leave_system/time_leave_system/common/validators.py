from __future__ import annotations

import re
from typing import Optional

from ..core.exceptions import InvalidInputError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if not value or not value.strip():
        raise InvalidInputError(f"{field_name} is required", field=field_name)
    return value.strip()


def require_positive_id(value: object, field_name: str) -> int:
    try:
        ident = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        raise InvalidInputError(f"{field_name} is required", field=field_name)
    if ident <= 0:
        raise InvalidInputError(f"{field_name} is invalid", field=field_name)
    return ident


def require_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "email").lower()
    if not _EMAIL_RE.match(email):
        raise InvalidInputError("email is invalid", field="email")
    return email


def optional_text(value: Optional[str]) -> Optional[str]:
    v = (value or "").strip()
    return v or None
