"""Tests for eco mode points, offsets and milestones."""

import asyncio
import random
from dataclasses import replace

from melodyx.config import ECO_STATE_KEY
from melodyx.economy import RewardLedger
from melodyx.models import GameStatus
from melodyx.modes.eco import EcoMode, carbon_offset_tons, current_milestone, next_milestone
from melodyx.storage import MemoryBackend
from melodyx.store import ProgressStore


def make_mode():
    ledger = RewardLedger()
    store = ProgressStore(MemoryBackend())
    mode = EcoMode(store, ledger, rng=random.Random(7), timer=lambda: 1.0)
    return mode, store, ledger


async def guess(mode, notes):
    for note in notes:
        mode.add_note(note)
    return await mode.submit_guess()


def test_eco_mode_off_by_default():
    mode, _, _ = make_mode()
    assert asyncio.run(mode.load()) is None
    assert not mode.add_note("C")


def test_toggle_draws_a_melody():
    mode, _, _ = make_mode()

    async def scenario():
        enabled = await mode.toggle_eco_mode()
        return enabled, await mode.get_state()

    enabled, state = asyncio.run(scenario())
    assert enabled
    assert state.eco_mode_enabled
    assert state.current_eco_melody == mode.session.melody

    assert asyncio.run(mode.toggle_eco_mode()) is False
    assert mode.session is None


def test_perfect_win_earns_bonus_points():
    mode, _, ledger = make_mode()

    async def scenario():
        await mode.toggle_eco_mode()
        solved = mode.session.melody
        await guess(mode, solved.notes)
        return solved, await mode.get_state()

    solved, state = asyncio.run(scenario())
    assert mode.session.status == GameStatus.WON
    assert state.eco_points == 25
    assert state.solved_eco_melodies == [solved.name]
    assert state.current_eco_melody.name != solved.name
    assert ledger.balance("eco_points") == 25


def test_regular_win_earns_base_points():
    mode, _, ledger = make_mode()

    async def scenario():
        await mode.toggle_eco_mode()
        await guess(mode, ("C#",) * len(mode.session.melody))
        await guess(mode, mode.session.melody.notes)
        return await mode.get_state()

    assert asyncio.run(scenario()).eco_points == 10
    assert ledger.balance("eco_points") == 10


def test_already_solved_melody_earns_nothing():
    mode, store, ledger = make_mode()

    async def scenario():
        await mode.toggle_eco_mode()
        state = await mode.get_state()
        await store.write(ECO_STATE_KEY, replace(
            state, solved_eco_melodies=[state.current_eco_melody.name]))
        return await mode.record_win(is_perfect=True), await mode.get_state()

    points, state = asyncio.run(scenario())
    assert points == 0
    assert state.eco_points == 0
    assert ledger.grants == []


def test_next_puzzle_starts_drawn_melody():
    mode, _, _ = make_mode()

    async def scenario():
        await mode.toggle_eco_mode()
        await guess(mode, mode.session.melody.notes)
        state = await mode.get_state()
        session = await mode.next_puzzle()
        return state.current_eco_melody, session

    drawn, session = asyncio.run(scenario())
    assert session.melody == drawn
    assert session.status == GameStatus.PLAYING


def test_purchase_offset():
    mode, _, _ = make_mode()

    async def scenario():
        await mode.add_eco_points(2500)
        results = (
            await mode.purchase_offset("moon_base", 1),
            await mode.purchase_offset("forest_restore", 0),
            await mode.purchase_offset("forest_restore", 3),
            await mode.purchase_offset("forest_restore", 2),
        )
        return results, await mode.get_state()

    results, state = asyncio.run(scenario())
    assert results == (False, False, False, True)
    assert state.eco_points == 500
    assert state.total_offset_tons == 2
    assert len(state.offsets) == 1
    assert state.offsets[0].points_spent == 2000
    assert state.offsets[0].project_id == "forest_restore"


def test_can_afford_offset():
    mode, _, _ = make_mode()

    async def scenario():
        await mode.add_eco_points(999)
        return await mode.can_afford_offset(1)

    assert not asyncio.run(scenario())


def test_milestones():
    assert current_milestone(50) is None
    assert current_milestone(150).reward == "Eco Seed"
    assert next_milestone(150).points == 500
    assert current_milestone(6000).points == 5000
    assert next_milestone(6000) is None
    assert carbon_offset_tons(2500) == 2.5


def test_win_without_melody_in_play_earns_nothing():
    mode, _, ledger = make_mode()

    async def scenario():
        first = await mode.record_win()
        second = await mode.record_win(is_perfect=True)
        return first, second, await mode.get_state()

    first, second, state = asyncio.run(scenario())
    assert (first, second) == (0, 0)
    assert state.eco_points == 0
    assert state.solved_eco_melodies == []
    assert ledger.grants == []
