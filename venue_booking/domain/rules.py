"""Pure booking rules: date overlap, day counting and pricing."""

from datetime import date


def ranges_overlap(start1: date, end1: date, start2: date, end2: date) -> bool:
    """Inclusive interval overlap: [s1, e1] and [s2, e2] share at least one day."""
    return start1 <= end2 and end1 >= start2


def normalize_range(start: date | None, end: date | None, today: date) -> tuple[date, date]:
    """Default a missing start to today and a missing or earlier end to the start."""
    if start is None:
        start = today
    if end is None or end < start:
        end = start
    return start, end


def inclusive_days(start: date, end: date) -> int:
    return (end - start).days + 1


def booking_amount(price_per_day: float, start: date, end: date) -> float:
    return float(price_per_day) * inclusive_days(start, end)
