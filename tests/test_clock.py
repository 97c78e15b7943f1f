"""Tests for calendar-day helpers and daily puzzle selection."""

from datetime import date

from melodyx.catalog import DAILY_MELODIES, daily_melody, daily_seed, puzzle_number, random_melody
from melodyx.clock import FixedClock, is_previous_day, is_same_day, normalize_day, parse_day
from melodyx.models import Melody


def test_parse_day_accepts_padded_and_unpadded():
    assert parse_day("2026-01-05") == date(2026, 1, 5)
    assert parse_day("2026-1-5") == date(2026, 1, 5)
    assert parse_day("") is None
    assert parse_day(None) is None
    assert parse_day("yesterday") is None
    assert parse_day("2026-02-30") is None


def test_normalize_day():
    assert normalize_day("2026-1-5") == "2026-01-05"
    assert normalize_day("garbage") is None


def test_previous_day_across_month_and_year():
    assert is_previous_day("2026-02-28", date(2026, 3, 1))
    assert is_previous_day("2025-12-31", date(2026, 1, 1))
    assert not is_previous_day("2026-10-17", date(2026, 10, 19))
    assert not is_previous_day(None, date(2026, 10, 19))


def test_same_day():
    assert is_same_day("2026-10-19", date(2026, 10, 19))
    assert not is_same_day(None, date(2026, 10, 19))


def test_fixed_clock_advances():
    clock = FixedClock("2026-12-31")
    clock.advance()
    assert clock.today() == date(2027, 1, 1)


def test_daily_melody_is_stable_per_day():
    day = date(2026, 10, 19)
    assert daily_melody(day) == daily_melody(day)
    assert daily_melody(day) in DAILY_MELODIES
    assert daily_seed(day) >= 0


def test_daily_seed_hashes_unpadded_date():
    assert daily_seed(date(2026, 1, 1)) == 1920575926
    assert daily_seed(date(2026, 1, 1)) != daily_seed(date(2026, 1, 2))


def test_puzzle_number_counts_from_epoch():
    assert puzzle_number(date(2025, 1, 1)) == 1
    assert puzzle_number(date(2025, 2, 1)) == 32


def test_random_melody_avoids_excluded():
    pool = (Melody("A", ("A",)), Melody("B", ("B",)))
    assert random_melody(pool, ["A"]).name == "B"
    assert random_melody(pool, ["A", "B"]) in pool
