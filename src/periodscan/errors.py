"""Exception hierarchy for periodscan.

Every failure raised by the library derives from :class:`PeriodScanError`
and also from the closest built-in exception, so callers may catch either.
"""

from __future__ import annotations


class PeriodScanError(Exception):
    """Base class for all periodscan failures."""


class InvalidRangeError(PeriodScanError, ValueError):
    """Raised when a candidate phase range is empty (``start >= end``)."""

    def __init__(self, start: int, end: int):
        self.start = start
        self.end = end
        super().__init__(f"invalid phase range [{start}, {end}): start must be smaller than end")


class OutOfRangeError(PeriodScanError, IndexError):
    """Raised when a window evaluation would read outside the sample buffer."""

    def __init__(self, *, offset: int, phase: int, window: int, length: int):
        self.offset = offset
        self.phase = phase
        self.window = window
        self.length = length
        super().__init__(
            f"window [{offset}, {offset + phase + window}) at offset={offset} phase={phase} "
            f"window={window} exceeds buffer of {length} samples"
        )


class EmptyInputError(PeriodScanError, ValueError):
    """Raised when phase averaging receives no offsets."""


class ZeroPhaseError(PeriodScanError, ZeroDivisionError):
    """Raised when a zero phase is converted to a frequency."""


class SampleSourceError(PeriodScanError, ValueError):
    """Raised when samples cannot be read or fall outside the sample range."""


class PitchParseError(PeriodScanError, ValueError):
    """Raised when a pitch name cannot be parsed."""

    def __init__(self, name: str, reason: str):
        self.name = name
        super().__init__(f"cannot parse pitch {name!r}: {reason}")
