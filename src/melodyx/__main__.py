"""Entry point for `python -m melodyx` or the `melodyx` console script."""

import argparse
import asyncio
import logging
from pathlib import Path

from melodyx.app import App
from melodyx.config import DEFAULT_SETTINGS_PATH
from melodyx.models import Feedback, InvalidNote
from melodyx.settings import load_settings
from melodyx.stats import distribution_bars, summarize

_MARKS = {Feedback.CORRECT: "=", Feedback.PRESENT: "~", Feedback.ABSENT: "x"}


async def play_daily(app: App) -> None:
    session = await app.daily.load()
    print(f"Melodyx #{app.daily.puzzle_number}: {len(session.melody)} notes, "
          f"{session.config.max_guesses} guesses")
    print("Enter notes separated by spaces (e.g. C D# G), 'hint', or 'quit'.")
    for guess in session.guesses:
        print("  " + " ".join(f"{g.note}{_MARKS[g.feedback]}" for g in guess))

    while not session.is_over:
        line = (await asyncio.to_thread(input, "> ")).strip()
        if line == "quit":
            break
        if line == "hint":
            index = await app.daily.request_hint()
            if index is None:
                print(f"Hints unlock after {session.config.hint_threshold} guesses, once.")
            else:
                print(f"Note {index + 1} is {session.hint_note}")
            continue
        while session.remove_note():
            pass
        try:
            for note in line.replace(",", " ").split():
                app.daily.add_note(note.upper())
        except InvalidNote as exc:
            print(exc)
            continue
        result = await app.daily.submit_guess()
        if result is None:
            print(f"A guess needs exactly {len(session.melody)} notes.")
            continue
        print("  " + " ".join(f"{g.note}{_MARKS[g.feedback]}" for g in result))

    if session.is_over:
        print(f"\nThe melody was {session.melody.name}: {' '.join(session.melody.notes)}")
        print(app.daily.share_text())


async def show_stats(app: App) -> None:
    stats = await app.daily.get_stats()
    summary = summarize(stats)
    print(f"Played {summary.games_played}  Win % {summary.win_percentage}  "
          f"Streak {summary.current_streak}  Max {summary.max_streak}")
    for count, wins, length in distribution_bars(stats):
        print(f"{count}: {'#' * length} {wins}")


async def run(command: str, settings_path: Path) -> None:
    settings = load_settings(settings_path)
    logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.WARNING))
    app = App(settings)
    try:
        if command == "stats":
            await show_stats(app)
        else:
            await play_daily(app)
    finally:
        await app.shutdown()


def main() -> None:
    parser = argparse.ArgumentParser(description="Melodyx: guess the melody, one note at a time")
    parser.add_argument("command", nargs="?", default="daily", choices=["daily", "stats"])
    parser.add_argument("--settings", default=str(DEFAULT_SETTINGS_PATH), help="Settings JSON file")
    args = parser.parse_args()
    try:
        asyncio.run(run(args.command, Path(args.settings)))
    except (KeyboardInterrupt, EOFError):
        pass


if __name__ == "__main__":
    main()
