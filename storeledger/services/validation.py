from __future__ import annotations

import enum
from typing import TypeVar

from storeledger.services.errors import BadRequest

E = TypeVar("E", bound=enum.Enum)


def has_text(value: str | None) -> bool:
    return bool(value and value.strip())


def parse_enum(enum_cls: type[E], value, field: str, default: E | None = None) -> E | None:
    """Accept an enum member or its value (case-insensitive); blank -> default."""
    if isinstance(value, enum_cls):
        return value
    if not has_text(value):
        return default
    try:
        return enum_cls(value.strip().upper())
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise BadRequest(f"Invalid {field} '{value}' (expected one of: {allowed})", field=field) from None
