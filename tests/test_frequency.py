import pytest

from periodscan.core import to_frequency, to_frequency_f, to_phase
from periodscan.errors import ZeroPhaseError


@pytest.mark.parametrize("freq", [32.0, 64.0, 128.0, 512.0])
def test_round_trip_exact_phases(freq):
    rate = 32768
    phase = rate // int(freq)
    assert phase * freq == rate
    assert to_frequency(phase, rate) == pytest.approx(freq)
    assert to_phase(freq, rate) == phase


def test_integer_and_float_entry_points_agree():
    assert to_frequency(700, 32768) == to_frequency_f(700.0, 32768) == 32768 / 700
    assert to_frequency_f(700.5, 32768) == 32768 / 700.5


def test_sample_rate_from_settings(settings):
    assert to_frequency(512, settings=settings) == 64.0
    settings.search.sample_rate = 44100
    assert to_frequency(441, settings=settings) == 100.0


def test_zero_phase():
    with pytest.raises(ZeroPhaseError):
        to_frequency(0, 32768)
    with pytest.raises(ZeroDivisionError):
        to_frequency_f(0.0, 32768)


def test_fractional_phase_rejected_by_integer_entry():
    with pytest.raises(TypeError):
        to_frequency(700.5, 32768)
