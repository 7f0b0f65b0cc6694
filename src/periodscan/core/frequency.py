"""Phase to frequency conversion.

A phase of ``p`` samples at a sample rate ``fs`` corresponds to

.. math::

   f = \\frac{f_s}{p}

Both entry points evaluate that single formula in floating point, so an
integral phase gives the same result through either of them.
"""

from __future__ import annotations

from ..config import Settings
from ..errors import ZeroPhaseError


def _rate(sample_rate: float | None, settings: Settings | None) -> float:
    if sample_rate is None:
        if settings is None:
            settings = Settings()
        sample_rate = settings.search.sample_rate
    return float(sample_rate)


def to_frequency_f(
    phase: float,
    sample_rate: float | None = None,
    *,
    settings: Settings | None = None,
) -> float:
    """Return the frequency in Hz of a possibly fractional ``phase``.

    ``sample_rate`` defaults to ``settings.search.sample_rate``.  A zero
    phase raises :class:`~periodscan.errors.ZeroPhaseError`.
    """

    phase = float(phase)
    if phase == 0.0:
        raise ZeroPhaseError("phase must be non-zero to convert to a frequency")
    return _rate(sample_rate, settings) / phase


def to_frequency(
    phase: int,
    sample_rate: float | None = None,
    *,
    settings: Settings | None = None,
) -> float:
    """Return the frequency in Hz of an integer ``phase``."""

    if int(phase) != phase:
        raise TypeError(f"phase must be integral, got {phase!r}; use to_frequency_f")
    return to_frequency_f(int(phase), sample_rate, settings=settings)


def to_phase(
    frequency: float,
    sample_rate: float | None = None,
    *,
    settings: Settings | None = None,
) -> float:
    """Inverse of :func:`to_frequency_f`: the period in samples of ``frequency``."""

    if frequency == 0:
        raise ZeroDivisionError("frequency must be non-zero")
    return _rate(sample_rate, settings) / float(frequency)
