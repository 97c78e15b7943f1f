"""Calendar-day clock and date-string helpers."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    def today(self) -> date: ...


class LocalClock:
    """Today's date in the device's local timezone."""

    def today(self) -> date:
        return datetime.now().date()


class FixedClock:
    """A clock pinned to one day; ``advance`` moves it forward."""

    def __init__(self, day: date | str) -> None:
        self.day = parse_day(day) if isinstance(day, str) else day

    def today(self) -> date:
        return self.day

    def advance(self, days: int = 1) -> None:
        self.day += timedelta(days=days)


def day_string(day: date) -> str:
    return day.isoformat()


def parse_day(value: str | None) -> date | None:
    """Parse ``YYYY-MM-DD``, tolerating unpadded month/day (``2025-1-5``)."""
    if not value:
        return None
    try:
        year, month, day = (int(part) for part in value.split("-"))
        return date(year, month, day)
    except ValueError:
        return None


def normalize_day(value: str | None) -> str | None:
    parsed = parse_day(value)
    return None if parsed is None else day_string(parsed)


def is_previous_day(earlier: str | None, today: date) -> bool:
    parsed = parse_day(earlier)
    return parsed is not None and parsed == today - timedelta(days=1)


def is_same_day(value: str | None, today: date) -> bool:
    return parse_day(value) == today
