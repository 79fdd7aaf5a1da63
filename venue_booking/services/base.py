from enum import Enum
from typing import Type, TypeVar

from venue_booking.domain.errors import ValidationError

E = TypeVar("E", bound=Enum)


def parse_status(enum_cls: Type[E], raw) -> E | None:
    """Turn a ``status`` query value into an enum member; empty or ``ALL`` means no filter."""
    if raw is None or isinstance(raw, enum_cls):
        return raw
    value = str(raw).strip().upper()
    if not value or value == "ALL":
        return None
    try:
        return enum_cls(value)
    except ValueError:
        raise ValidationError(f"Unknown status '{raw}'") from None
