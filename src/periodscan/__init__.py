"""
periodscan - time-domain fundamental period estimation by windowed self-similarity search
"""

from .config import ERROR_MAX, PHASE_MAX, PHASE_MIN, SAMPLE_RATE, Settings, load_settings
from .core import (
    PhaseAverage,
    PhaseScan,
    absolute_error,
    average_phase,
    average_phases,
    error_curve,
    estimate_phase,
    scan_phase,
    to_frequency,
    to_frequency_f,
    window_error,
)
from .diagnostics import EvaluationCounter, LoggingReporter, Reporter, TraceReporter
from .errors import (
    EmptyInputError,
    InvalidRangeError,
    OutOfRangeError,
    PeriodScanError,
    ZeroPhaseError,
)
from .ingest import ArraySource, SampleSource, load_source, tiled_pattern
from .types import SampleBuffer

__version__ = "0.1.0"
__all__ = [
    "SAMPLE_RATE",
    "PHASE_MIN",
    "PHASE_MAX",
    "ERROR_MAX",
    "Settings",
    "load_settings",
    "SampleBuffer",
    "SampleSource",
    "ArraySource",
    "load_source",
    "tiled_pattern",
    "absolute_error",
    "window_error",
    "PhaseScan",
    "scan_phase",
    "estimate_phase",
    "error_curve",
    "PhaseAverage",
    "average_phase",
    "average_phases",
    "to_frequency",
    "to_frequency_f",
    "EvaluationCounter",
    "Reporter",
    "LoggingReporter",
    "TraceReporter",
    "PeriodScanError",
    "InvalidRangeError",
    "OutOfRangeError",
    "EmptyInputError",
    "ZeroPhaseError",
]
