"""Built-in melody content: the daily pool, eco, themed events, zen and tournaments."""

from __future__ import annotations

import random
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import date, datetime

from melodyx.clock import day_string
from melodyx.config import PUZZLE_EPOCH
from melodyx.models import Melody


DAILY_MELODIES: tuple[Melody, ...] = (
    Melody("Happy Birthday", ("G", "G", "A", "G", "C", "B"),
           hint="Everyone sings this once a year", category="Classic", genre="Traditional"),
    Melody("Twinkle Twinkle", ("C", "C", "G", "G", "A", "A", "G"),
           hint="Look up at the night sky", category="Classic", genre="Nursery"),
    Melody("Mary Had a Little Lamb", ("E", "D", "C", "D", "E", "E", "E"),
           hint="A farm animal follows someone to school", category="Classic", genre="Nursery"),
    Melody("Jingle Bells", ("E", "E", "E", "E", "E", "E", "E"),
           hint="Dashing through the snow", category="Holiday", genre="Holiday"),
    Melody("Row Row Row", ("C", "C", "C", "D", "E", "E"),
           hint="Gently down the stream", category="Classic", genre="Nursery"),
    Melody("London Bridge", ("G", "A", "G", "F", "E", "F", "G"),
           hint="It's falling down", category="Classic", genre="Nursery"),
    Melody("Super Mario Bros", ("E", "E", "E", "C", "E", "G"),
           hint="A plumber's adventure begins", category="Video Games", genre="Game"),
    Melody("Tetris Theme", ("E", "B", "C", "D", "C", "B", "A"),
           hint="Blocks falling endlessly", category="Video Games", genre="Game"),
    Melody("Zelda Theme", ("A", "E", "A", "A", "B", "C#"),
           hint="A hero's legendary adventure", category="Video Games", genre="Game"),
    Melody("Pac-Man Start", ("B", "B", "B", "F#", "F#", "B"),
           hint="Wakka wakka wakka", category="Video Games", genre="Game"),
    Melody("Minecraft Theme", ("E", "G", "A", "E", "G", "B"),
           hint="Build and survive", category="Video Games", genre="Game"),
    Melody("Ode to Joy", ("E", "E", "F", "G", "G", "F", "E"),
           hint="Beethoven's famous symphony finale", category="Classical", genre="Classical"),
    Melody("Fur Elise", ("E", "D#", "E", "D#", "E", "B"),
           hint="A famous Beethoven piano piece", category="Classical", genre="Classical"),
)

ECO_MELODIES: tuple[Melody, ...] = (
    Melody("Morning Birds", ("E", "G", "A", "G", "E", "D"),
           hint="Dawn chorus awakens the forest", category="Nature", mood="peaceful"),
    Melody("Ocean Waves", ("C", "E", "G", "E", "C", "G"),
           hint="Gentle tides on a pristine beach", category="Nature", mood="calm"),
    Melody("Wind Through Trees", ("D", "F", "A", "G", "F", "D"),
           hint="Leaves rustling in a gentle breeze", category="Nature", mood="serene"),
)


@dataclass(frozen=True)
class ZenMelody:
    melody: Melody
    breathing_pattern: tuple[int, ...] = ()
    ambient_sound: str = ""


ZEN_MELODIES: tuple[ZenMelody, ...] = (
    ZenMelody(Melody("Ocean Waves", ("C", "E", "G", "C", "G", "E"),
                     hint="The gentle rhythm of the sea", mood="peaceful"), (4, 4, 4, 4), "waves"),
    ZenMelody(Melody("Forest Birds", ("E", "G", "A", "E", "D", "E"),
                     hint="Morning songbirds in the trees", mood="peaceful"), (4, 7, 8), "birds"),
    ZenMelody(Melody("Rain Drops", ("D", "F", "A", "D", "C", "A"),
                     hint="Gentle rain on leaves", mood="peaceful"), (4, 4, 4, 4), "rain"),
    ZenMelody(Melody("Mountain Stream", ("G", "B", "D", "G", "F#", "E"),
                     hint="Water over smooth stones", mood="peaceful"), (4, 7, 8), "stream"),
    ZenMelody(Melody("Wind Chimes", ("A", "C", "E", "A", "G", "E"),
                     hint="A breeze on the porch", mood="peaceful"), (4, 4, 4, 4), "chimes"),
)


@dataclass(frozen=True)
class EcoProject:
    id: str
    name: str
    cost_per_ton: int
    region: str


ECO_PROJECTS: tuple[EcoProject, ...] = (
    EcoProject("forest_restore", "Forest Restoration", 15, "Amazon Basin"),
    EcoProject("ocean_cleanup", "Ocean Conservation", 18, "Pacific Ocean"),
    EcoProject("renewable_energy", "Renewable Energy", 12, "Sub-Saharan Africa"),
)


@dataclass(frozen=True)
class EcoMilestone:
    points: int
    reward: str


ECO_MILESTONES: tuple[EcoMilestone, ...] = (
    EcoMilestone(100, "Eco Seed"),
    EcoMilestone(500, "Green Sprout"),
    EcoMilestone(1000, "Carbon Neutral"),
    EcoMilestone(5000, "Climate Champion"),
)


@dataclass(frozen=True)
class EventReward:
    id: str
    kind: str  # badge, hint, skin or coins
    name: str
    requirement: int  # puzzles completed
    amount: int = 0  # coins granted, for coin rewards


@dataclass(frozen=True)
class ThemedEvent:
    id: str
    name: str
    start_date: str  # ISO, inclusive
    end_date: str  # ISO, inclusive
    songs: tuple[Melody, ...]
    rewards: tuple[EventReward, ...] = field(default_factory=tuple)

    def is_active(self, today: date) -> bool:
        return self.start_date <= day_string(today) <= self.end_date


THEMED_EVENTS: tuple[ThemedEvent, ...] = (
    ThemedEvent(
        "new_year_2025", "New Year Beats", "2025-12-30", "2026-01-07",
        (
            Melody("Auld Lang Syne", ("F", "A#", "A#", "A#", "D", "C", "A#"),
                   hint="Should old acquaintance be forgot...", category="Holiday"),
            Melody("Celebration", ("G", "G", "G", "G", "F", "G", "A"),
                   hint="Kool & The Gang party anthem", category="Pop"),
        ),
        (
            EventReward("ny_badge", "badge", "2026 Pioneer", 1),
            EventReward("ny_skin", "skin", "Fireworks Keyboard", 2),
        ),
    ),
    ThemedEvent(
        "valentines_2026", "Valentine's Melodies", "2026-02-10", "2026-02-16",
        (
            Melody("My Heart Will Go On", ("E", "F#", "G#", "F#", "G#", "A", "G#"),
                   hint="Near, far, wherever you are", category="Pop"),
            Melody("I Will Always Love You", ("A", "B", "C#", "B", "A", "F#"),
                   hint="A bodyguard's ballad", category="Pop"),
        ),
        (
            EventReward("val_badge", "badge", "Love Struck", 1),
            EventReward("val_coins", "coins", "100 Love Coins", 2, 100),
        ),
    ),
    ThemedEvent(
        "halloween_2026", "Spooky Sounds", "2026-10-25", "2026-11-01",
        (
            Melody("Thriller", ("C#", "C#", "C#", "C#", "C#", "D", "C#"),
                   hint="'Cause this is...", category="Pop"),
            Melody("Ghostbusters", ("E", "D#", "E", "B", "A", "G#"),
                   hint="Who you gonna call?", category="Film"),
        ),
        (
            EventReward("hal_badge", "badge", "Ghost Hunter", 1),
            EventReward("hal_coins", "coins", "150 Spooky Coins", 2, 150),
        ),
    ),
    ThemedEvent(
        "christmas_2026", "Holiday Harmonies", "2026-12-20", "2026-12-27",
        (
            Melody("Silent Night", ("G", "A", "G", "E", "G", "A", "G"),
                   hint="All is calm, all is bright", category="Holiday"),
            Melody("Last Christmas", ("D", "D", "E", "D", "C", "B", "A"),
                   hint="I gave you my heart", category="Holiday"),
        ),
        (
            EventReward("xmas_badge", "badge", "Santa's Helper", 1),
            EventReward("xmas_skin", "skin", "Snowflake Keys", 2),
        ),
    ),
)


@dataclass(frozen=True)
class Tournament:
    id: str
    name: str
    start_date: str
    end_date: str
    entry_tokens: int
    max_guesses: int = 6


TOURNAMENTS: tuple[Tournament, ...] = (
    Tournament("duel_royale_jan", "Duel Royale", "2026-01-06", "2026-01-12", 2),
    Tournament("weekly_fever_1", "Weekly Fever Rush", "2026-01-08", "2026-01-14", 0),
    Tournament("fever_championship_2026", "Fever Championship", "2026-01-13", "2026-01-19", 1),
    Tournament("speed_masters_jan", "Speed Masters", "2026-01-20", "2026-01-26", 1, max_guesses=5),
    Tournament("accuracy_elite", "Accuracy Elite", "2026-01-27", "2026-02-02", 1, max_guesses=8),
)


@dataclass(frozen=True)
class WellnessAchievement:
    id: str
    name: str
    kind: str  # puzzles_solved, zen_streak, total_minutes or breathing_sessions
    requirement: int


WELLNESS_ACHIEVEMENTS: tuple[WellnessAchievement, ...] = (
    WellnessAchievement("zen_beginner", "Zen Beginner", "puzzles_solved", 1),
    WellnessAchievement("zen_week", "Zen Week", "zen_streak", 7),
    WellnessAchievement("zen_master", "Zen Master", "zen_streak", 30),
    WellnessAchievement("mindful_hour", "Mindful Hour", "total_minutes", 60),
    WellnessAchievement("deep_breather", "Deep Breather", "breathing_sessions", 10),
    WellnessAchievement("zen_collector", "Zen Collector", "puzzles_solved", 25),
)


def daily_seed(day: date) -> int:
    """Stable 32-bit string hash of the unpadded date, as the live app computes it."""
    key = f"{day.year}-{day.month}-{day.day}"
    h = 0
    for ch in key:
        h = ((h << 5) - h + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def daily_melody(day: date, pool: Sequence[Melody] = DAILY_MELODIES) -> Melody:
    return pool[daily_seed(day) % len(pool)]


def puzzle_number(day: date) -> int:
    return abs((day - PUZZLE_EPOCH).days) + 1


def random_melody(
    pool: Sequence[Melody],
    exclude_names: Sequence[str] = (),
    rng: random.Random | None = None,
) -> Melody:
    """Pick a melody not in ``exclude_names``; falls back to the whole pool."""
    available = [m for m in pool if m.name not in exclude_names]
    return (rng or random).choice(available or list(pool))


def active_event(today: date, events: Sequence[ThemedEvent] = THEMED_EVENTS) -> ThemedEvent | None:
    for event in events:
        if event.is_active(today):
            return event
    return None


def upcoming_events(
    today: date, limit: int = 3, events: Sequence[ThemedEvent] = THEMED_EVENTS
) -> list[ThemedEvent]:
    key = day_string(today)
    return sorted((e for e in events if e.start_date > key), key=lambda e: e.start_date)[:limit]


def find_tournament(tournament_id: str) -> Tournament | None:
    for tournament in TOURNAMENTS:
        if tournament.id == tournament_id:
            return tournament
    return None


def now_iso() -> str:
    return datetime.now().isoformat(timespec="seconds")
