"""User settings loaded from ``~/.melodyx/settings.json``."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from melodyx.config import DEFAULT_DB_PATH, DEFAULT_MAX_GUESSES, DEFAULT_SETTINGS_PATH

logger = logging.getLogger(__name__)


@dataclass
class EngineSettings:
    db_path: str = str(DEFAULT_DB_PATH)
    log_level: str = "WARNING"
    max_guesses: dict[str, int] = field(default_factory=dict)  # mode name -> limit
    flush_on_exit: bool = True

    def max_guesses_for(self, mode: str) -> int:
        value = self.max_guesses.get(mode, DEFAULT_MAX_GUESSES)
        if not isinstance(value, int) or value < 1:
            return DEFAULT_MAX_GUESSES
        return value


def load_settings(path: Path = DEFAULT_SETTINGS_PATH) -> EngineSettings:
    """Load settings from disk, returning defaults if absent or unreadable."""
    if not path.exists():
        return EngineSettings()
    try:
        data = json.loads(path.read_text())
        engine = data.get("engine", {})
        defaults = EngineSettings()
        values = {}
        for key, value in engine.items():
            if key not in EngineSettings.__dataclass_fields__:
                continue
            # Keep the default when the stored value has the wrong type
            if not isinstance(value, type(getattr(defaults, key))):
                logger.warning("Ignoring setting %s with unexpected value %r", key, value)
                continue
            values[key] = value
        return EngineSettings(**values)
    except Exception as exc:
        logger.warning("Ignoring unreadable settings file %s: %s", path, exc)
        return EngineSettings()


def save_settings(settings: EngineSettings, path: Path = DEFAULT_SETTINGS_PATH) -> None:
    """Persist settings to disk, keeping any unrelated sections in the file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    data: dict = {}
    if path.exists():
        try:
            data = json.loads(path.read_text())
        except ValueError:
            logger.warning("Overwriting malformed settings file %s", path)
    data["engine"] = asdict(settings)
    path.write_text(json.dumps(data, indent=2))
