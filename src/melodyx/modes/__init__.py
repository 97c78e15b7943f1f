"""Mode controllers, one per game mode, all built on PuzzleSession and ProgressStore."""

from melodyx.modes.daily import DailyMode
from melodyx.modes.eco import EcoMode
from melodyx.modes.events import EventsMode
from melodyx.modes.tournament import TournamentMode
from melodyx.modes.wellness import WellnessMode

__all__ = ["DailyMode", "EcoMode", "EventsMode", "TournamentMode", "WellnessMode"]
