"""Tests for MIDI melody import and export."""

import mido
import pytest

from melodyx.melody_loader import MelodyLoadError, export_melody, load_melody, pitch_class
from melodyx.models import Melody


def test_pitch_class():
    assert pitch_class(60) == "C"
    assert pitch_class(61) == "C#"
    assert pitch_class(71) == "B"
    assert pitch_class(21) == "A"


def test_exported_melody_loads_back(tmp_path):
    path = tmp_path / "fur_elise.mid"
    melody = Melody("Fur Elise", ("E", "D#", "E", "D#", "E", "B"))
    export_melody(melody, path)
    loaded = load_melody(path, hint="Beethoven")
    assert loaded.notes == melody.notes
    assert loaded.name == "fur_elise"
    assert loaded.hint == "Beethoven"
    assert loaded.category == "Custom"


def test_max_notes_truncates(tmp_path):
    path = tmp_path / "scale.mid"
    export_melody(Melody("Scale", ("C", "D", "E", "F", "G")), path)
    assert load_melody(path, max_notes=3).notes == ("C", "D", "E")


def test_notes_ordered_by_onset_across_tracks(tmp_path):
    mid = mido.MidiFile()
    late, early = mido.MidiTrack(), mido.MidiTrack()
    mid.tracks.extend([late, early])
    late.append(mido.Message("note_on", note=67, velocity=64, time=480))
    early.append(mido.Message("note_on", note=60, velocity=64, time=0))
    early.append(mido.Message("note_on", note=64, velocity=0, time=10))  # note off
    path = tmp_path / "two_tracks.mid"
    mid.save(str(path))
    assert load_melody(path).notes == ("C", "G")
    assert load_melody(path, track=0).notes == ("G",)


def test_rejects_other_formats(tmp_path):
    with pytest.raises(MelodyLoadError):
        load_melody(tmp_path / "song.musicxml")


def test_rejects_unreadable_file(tmp_path):
    path = tmp_path / "broken.mid"
    path.write_bytes(b"not midi")
    with pytest.raises(MelodyLoadError):
        load_melody(path)


def test_rejects_file_without_notes(tmp_path):
    mid = mido.MidiFile()
    mid.tracks.append(mido.MidiTrack())
    path = tmp_path / "empty.mid"
    mid.save(str(path))
    with pytest.raises(MelodyLoadError):
        load_melody(path)
