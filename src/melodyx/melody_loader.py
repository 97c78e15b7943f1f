"""Load user-supplied melodies from MIDI files."""

from __future__ import annotations

from pathlib import Path

import mido

from melodyx.config import NOTE_NAMES
from melodyx.models import Melody


class MelodyLoadError(Exception):
    """Raised when a melody file cannot be parsed."""


def pitch_class(midi_note: int) -> str:
    return NOTE_NAMES[midi_note % 12]


def load_melody(
    file_path: str | Path,
    max_notes: int | None = None,
    track: int | None = None,
    hint: str = "",
) -> Melody:
    """Read note-on events from a MIDI file as a melody of pitch classes.

    Notes are ordered by onset time; simultaneous onsets keep file order.

    Args:
        file_path: Path to a .mid or .midi file.
        max_notes: Keep only the first ``max_notes`` notes.
        track: Read a single track index instead of all tracks.
        hint: Hint text shown to the player.

    Raises:
        MelodyLoadError: If the file cannot be parsed or has no notes.
    """
    path = Path(file_path)
    if path.suffix.lower() not in (".mid", ".midi"):
        raise MelodyLoadError(f"Unsupported file format: {path.suffix}")
    try:
        mid = mido.MidiFile(str(path))
    except Exception as exc:
        raise MelodyLoadError(f"Failed to load {path.name}: {exc}") from exc

    tracks = mid.tracks if track is None else [mid.tracks[track]]
    onsets: list[tuple[int, int, int]] = []  # (abs_tick, order, midi note)
    order = 0
    for trk in tracks:
        abs_ticks = 0
        for msg in trk:
            abs_ticks += msg.time
            if msg.type == "note_on" and msg.velocity > 0:
                onsets.append((abs_ticks, order, msg.note))
                order += 1

    if not onsets:
        raise MelodyLoadError(f"{path.name} contains no notes")

    onsets.sort()
    notes = [pitch_class(note) for _, _, note in onsets]
    if max_notes is not None:
        notes = notes[:max_notes]
    return Melody(name=path.stem, notes=tuple(notes), hint=hint, category="Custom")


def export_melody(melody: Melody, output_path: Path, octave: int = 4, beat_ticks: int = 480) -> None:
    """Write a melody as a one-note-per-beat MIDI file."""
    mid = mido.MidiFile(ticks_per_beat=beat_ticks)
    trk = mido.MidiTrack()
    mid.tracks.append(trk)
    trk.append(mido.MetaMessage("set_tempo", tempo=mido.bpm2tempo(120)))
    trk.append(mido.MetaMessage("track_name", name=melody.name))
    base = (octave + 1) * 12
    for name in melody.notes:
        pitch = base + NOTE_NAMES.index(name)
        trk.append(mido.Message("note_on", note=pitch, velocity=80, time=0))
        trk.append(mido.Message("note_off", note=pitch, velocity=0, time=beat_ticks))
    mid.save(str(output_path))
