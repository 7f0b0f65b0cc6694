"""Pitch names.

A pitch is the signed number of half steps from A4.  Octaves are counted
from A, so ``"C4"`` is three half steps *above* A4 and ``"G#3"`` is the half
step just below it.  Octave digits run from 0 to 8; a name without a digit
is in octave 4.
"""

from __future__ import annotations

import math

from ..errors import PitchParseError

A4_REFERENCE = 440.0

NOTE_NAMES = ["A", "A♯", "B", "C", "C♯", "D", "D♯", "E", "F", "F♯", "G", "G♯"]

_NOTES = {"A": 0, "B": 2, "C": 3, "D": 5, "E": 7, "F": 8, "G": 10}
_ALTERATIONS = {"♯": 1, "#": 1, "♮": 0, "b": -1, "♭": -1}
_OCTAVES = {str(d): d - 4 for d in range(9)}

PITCH_MIN = -48
PITCH_MAX = 59


def parse_pitch(name: str) -> int:
    """Parse a name such as ``"A"``, ``"C♯5"`` or ``"Bb2"`` into a pitch."""

    text = name.strip()
    if not text:
        raise PitchParseError(name, "empty name")
    letter, rest = text[0].upper(), text[1:]
    if letter not in _NOTES:
        raise PitchParseError(name, f"unknown note letter {text[0]!r}")
    pitch = _NOTES[letter]

    if rest and rest[0] in _ALTERATIONS:
        pitch += _ALTERATIONS[rest[0]]
        rest = rest[1:]
    if rest:
        if len(rest) != 1 or rest not in _OCTAVES:
            raise PitchParseError(name, f"unknown octave {rest!r}")
        pitch += _OCTAVES[rest] * 12
    return pitch


def format_pitch(pitch: int) -> str:
    """Return the sharp-spelled name of ``pitch``, always with an octave digit."""

    if not PITCH_MIN <= pitch <= PITCH_MAX:
        raise ValueError(f"pitch {pitch} outside [{PITCH_MIN}, {PITCH_MAX}]")
    index = pitch + 48
    return f"{NOTE_NAMES[index % 12]}{index // 12}"


def pitch_to_frequency(pitch: float, reference: float = A4_REFERENCE) -> float:
    return reference * 2.0 ** (pitch / 12.0)


def frequency_to_pitch(frequency: float, reference: float = A4_REFERENCE) -> tuple[int, float]:
    """Return the nearest pitch to ``frequency`` and the deviation in cents."""

    if frequency <= 0:
        raise ValueError("frequency must be positive")
    semitones = 12.0 * math.log2(frequency / reference)
    pitch = round(semitones)
    return pitch, (semitones - pitch) * 100.0
