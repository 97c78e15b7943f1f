"""Tests for the daily puzzle controller: streaks, resume and rollover."""

import asyncio
from datetime import date

from melodyx.clock import FixedClock
from melodyx.config import DAILY_GAME_KEY
from melodyx.models import GameStatus, Melody
from melodyx.modes.daily import DailyMode, apply_result
from melodyx.records import DailyGameState, GameStats
from melodyx.storage import MemoryBackend
from melodyx.store import ProgressStore

TARGET = Melody("Scale", ("C", "D", "E"))
WRONG = ("G", "G", "G")


def make_mode(store=None, clock=None):
    store = store if store is not None else ProgressStore(MemoryBackend())
    clock = clock if clock is not None else FixedClock("2026-10-19")
    return DailyMode(store, clock, pool=(TARGET,), timer=lambda: 0.0), store, clock


async def guess(mode, notes):
    for note in notes:
        mode.add_note(note)
    return await mode.submit_guess()


async def play_to_win(mode, misses=0):
    await mode.ensure_today()
    for _ in range(misses):
        await guess(mode, WRONG)
    await guess(mode, TARGET.notes)


async def play_to_lose(mode):
    await mode.ensure_today()
    for _ in range(6):
        await guess(mode, WRONG)


def test_first_win_starts_streak():
    mode, _, _ = make_mode()

    async def scenario():
        await play_to_win(mode)
        return await mode.get_stats()

    stats = asyncio.run(scenario())
    assert stats.games_played == 1
    assert stats.games_won == 1
    assert stats.current_streak == 1
    assert stats.max_streak == 1
    assert stats.guess_distribution == [1, 0, 0, 0, 0, 0]
    assert stats.last_played_date == "2026-10-19"


def test_consecutive_days_extend_streak():
    mode, _, clock = make_mode()

    async def scenario():
        await play_to_win(mode)
        clock.advance()
        await play_to_win(mode, misses=1)
        return await mode.get_stats()

    stats = asyncio.run(scenario())
    assert stats.current_streak == 2
    assert stats.max_streak == 2
    assert stats.guess_distribution == [1, 1, 0, 0, 0, 0]


def test_missed_day_resets_streak_to_one():
    mode, _, clock = make_mode()

    async def scenario():
        await play_to_win(mode)
        clock.advance()
        await play_to_win(mode)
        clock.advance(2)
        await play_to_win(mode)
        return await mode.get_stats()

    stats = asyncio.run(scenario())
    assert stats.current_streak == 1
    assert stats.max_streak == 2


def test_loss_resets_streak_and_keeps_max():
    mode, _, clock = make_mode()

    async def scenario():
        await play_to_win(mode)
        clock.advance()
        await play_to_lose(mode)
        return await mode.get_stats()

    stats = asyncio.run(scenario())
    assert mode.session.status == GameStatus.LOST
    assert stats.games_played == 2
    assert stats.games_won == 1
    assert stats.current_streak == 0
    assert stats.max_streak == 1
    assert stats.is_consistent()


def test_result_recorded_once_per_day():
    mode, store, _ = make_mode()

    async def scenario():
        await play_to_win(mode)
        # Lose the saved game, replay the same day from scratch
        await store.remove(DAILY_GAME_KEY)
        await mode.load()
        await guess(mode, TARGET.notes)
        return await mode.get_stats()

    stats = asyncio.run(scenario())
    assert stats.games_played == 1
    assert stats.guess_distribution == [1, 0, 0, 0, 0, 0]


def test_finished_game_resumes_finished():
    mode, store, clock = make_mode()
    asyncio.run(play_to_win(mode))

    restarted, _, _ = make_mode(store, clock)

    async def scenario():
        await restarted.load()
        return await guess(restarted, TARGET.notes)

    assert asyncio.run(scenario()) is None
    assert restarted.session.status == GameStatus.WON
    assert asyncio.run(restarted.get_stats()).games_played == 1


def test_in_progress_game_resumes_after_restart():
    mode, store, clock = make_mode()

    async def scenario():
        await mode.load()
        await guess(mode, WRONG)
        await guess(mode, ("C", "E", "D"))

    asyncio.run(scenario())
    restarted, _, _ = make_mode(store, clock)
    session = asyncio.run(restarted.load())
    assert session.guess_count == 2
    assert session.status == GameStatus.PLAYING
    assert [f.note for f in session.guesses[1]] == ["C", "E", "D"]


def test_yesterdays_saved_game_is_not_resumed():
    store = ProgressStore(MemoryBackend())
    mode, _, _ = make_mode(store, FixedClock("2026-10-19"))
    asyncio.run(store.write(DAILY_GAME_KEY, DailyGameState(
        date="2026-10-18", game_status=GameStatus.LOST)))
    session = asyncio.run(mode.load())
    assert session.guess_count == 0
    assert session.status == GameStatus.PLAYING


def test_unpadded_legacy_date_still_resumes():
    store = ProgressStore(MemoryBackend())
    mode, _, _ = make_mode(store, FixedClock("2026-01-05"))

    async def scenario():
        await mode.load()
        await guess(mode, WRONG)
        saved = await store.read(DAILY_GAME_KEY)
        saved.date = "2026-1-5"
        await store.write(DAILY_GAME_KEY, saved)
        return await mode.load()

    assert asyncio.run(scenario()).guess_count == 1


def test_ensure_today_rolls_over_once_per_day():
    mode, _, clock = make_mode()

    async def scenario():
        first = await mode.ensure_today()
        again = await mode.ensure_today()
        clock.advance()
        rolled = await mode.ensure_today()
        return first, again, rolled

    assert asyncio.run(scenario()) == (True, False, True)


def test_hint_use_is_persisted():
    mode, store, clock = make_mode()

    async def scenario():
        await mode.load()
        assert await mode.request_hint() is None
        for _ in range(3):
            await guess(mode, WRONG)
        assert await mode.request_audio_hint()
        return await mode.request_hint()

    assert asyncio.run(scenario()) == 0
    restarted, _, _ = make_mode(store, clock)
    session = asyncio.run(restarted.load())
    assert session.hint_used
    assert session.audio_hint_used


def test_share_text_only_after_game_over():
    mode, _, _ = make_mode(clock=FixedClock(date(2025, 1, 3)))

    async def scenario():
        await mode.load()
        before = mode.share_text()
        await guess(mode, TARGET.notes)
        return before, mode.share_text()

    before, after = asyncio.run(scenario())
    assert before is None
    assert after.startswith("\U0001F3B5 Melodyx #3 1/6")


def test_apply_result_extends_short_distribution():
    stats = GameStats(games_played=1, games_won=1, current_streak=1, max_streak=1,
                      guess_distribution=[1, 0, 0, 0, 0, 0])
    updated = apply_result(stats, won=True, guess_count=8, today_str="2026-10-19",
                           consecutive=True, max_guesses=8)
    assert updated.guess_distribution == [1, 0, 0, 0, 0, 0, 0, 1]
    assert updated.current_streak == 2
    assert updated.is_consistent()


def test_stats_stay_consistent_over_a_season():
    mode, _, clock = make_mode()

    async def scenario():
        for day in range(10):
            if day % 4 == 3:
                await play_to_lose(mode)
            else:
                await play_to_win(mode, misses=day % 3)
            clock.advance()
        return await mode.get_stats()

    stats = asyncio.run(scenario())
    assert stats.games_played == 10
    assert stats.games_won == 8
    assert stats.is_consistent()
    assert stats.current_streak == 2
    assert stats.max_streak == 3
