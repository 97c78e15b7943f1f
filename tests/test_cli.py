"""Tests for the terminal daily puzzle."""

import asyncio
import threading

from melodyx.__main__ import play_daily
from melodyx.app import App
from melodyx.clock import FixedClock
from melodyx.models import GameStatus
from melodyx.settings import EngineSettings
from melodyx.storage import MemoryBackend


def test_play_daily_reads_input_off_the_event_loop(monkeypatch, capsys):
    app = App(EngineSettings(), MemoryBackend(), FixedClock("2026-10-19"))
    answers = iter(["hint", None])
    threads = []

    def fake_input(prompt=""):
        threads.append(threading.current_thread())
        answer = next(answers)
        return " ".join(app.daily.session.melody.notes) if answer is None else answer

    monkeypatch.setattr("builtins.input", fake_input)

    async def scenario():
        await play_daily(app)
        return await app.daily.get_stats()

    stats = asyncio.run(scenario())
    assert app.daily.session.status == GameStatus.WON
    assert stats.games_won == 1
    assert all(t is not threading.main_thread() for t in threads)
    out = capsys.readouterr().out
    assert "Hints unlock after 3 guesses" in out
    assert "The melody was" in out
