import pytest

from periodscan.core import format_pitch, frequency_to_pitch, parse_pitch, pitch_to_frequency
from periodscan.errors import PitchParseError


def test_parse_and_format_round_trip():
    for pitch in range(-48, 60):
        assert parse_pitch(format_pitch(pitch)) == pitch


@pytest.mark.parametrize(
    "name,pitch",
    [("A", 0), ("A4", 0), ("C4", 3), ("C♯5", 16), ("Bb2", -23), ("G#3", -1), ("D♮", 5), ("e♭1", -30)],
)
def test_parse_examples(name, pitch):
    assert parse_pitch(name) == pitch


@pytest.mark.parametrize("name", ["", "H4", "A9", "A#x", "C##"])
def test_parse_errors(name):
    with pytest.raises(PitchParseError):
        parse_pitch(name)


def test_format_out_of_range():
    assert format_pitch(-48) == "A0"
    assert format_pitch(59) == "G♯8"
    with pytest.raises(ValueError):
        format_pitch(60)


def test_frequency_conversions():
    assert frequency_to_pitch(440.0) == (0, 0.0)
    pitch, cents = frequency_to_pitch(880.0)
    assert pitch == 12
    assert cents == pytest.approx(0.0, abs=1e-9)
    pitch, cents = frequency_to_pitch(440.0 * 2 ** (1.25 / 12))
    assert pitch == 1
    assert cents == pytest.approx(25.0)
    assert pitch_to_frequency(-12) == pytest.approx(220.0)
    assert frequency_to_pitch(415.0, reference=415.0) == (0, 0.0)
    with pytest.raises(ValueError):
        frequency_to_pitch(0.0)
