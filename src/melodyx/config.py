"""Global constants and default settings."""

from datetime import date
from pathlib import Path

APP_NAME = "Melodyx"

# The twelve guessable pitch classes, in chromatic order
NOTE_NAMES = ("C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B")

# Guess limits
DEFAULT_MAX_GUESSES = 6
HINT_THRESHOLD = 3  # guesses required before the note hint unlocks
AUDIO_HINT_THRESHOLD = 2

# Daily puzzle numbering starts at 1 on this date
PUZZLE_EPOCH = date(2025, 1, 1)

# Eco rewards
ECO_POINTS_PER_WIN = 10
ECO_POINTS_PER_PERFECT = 25
ECO_POINTS_PER_TON = 1000

# Tournament economy
DEFAULT_TOURNAMENT_TOKENS = 3
DAILY_TOKEN_GRANT = 1

# Wellness
ZEN_DEFAULT_SESSION_MINUTES = 5
BREATHING_SESSION_MINUTES = 2

# Storage keys (one Progress Record per key)
STATS_KEY = "melodyx_stats"
DAILY_GAME_KEY = "melodyx_daily_game"
ECO_STATE_KEY = "melodyx_eco_state"
EVENTS_KEY = "melodyx_events"
TOURNAMENT_STATS_KEY = "melodyx_tournament_stats"
WELLNESS_STATS_KEY = "melodyx_wellness_stats"
ZEN_GAME_KEY = "melodyx_zen_game"

DATA_DIR = Path.home() / ".melodyx"
DEFAULT_DB_PATH = DATA_DIR / "progress.db"
DEFAULT_SETTINGS_PATH = DATA_DIR / "settings.json"
