"""Core search algorithms for periodscan."""

from .average import PhaseAverage, average_phase, average_phases
from .frequency import to_frequency, to_frequency_f, to_phase
from .metric import absolute_error, available_metrics, get_metric, register_metric, squared_error
from .notes import format_pitch, frequency_to_pitch, parse_pitch, pitch_to_frequency
from .phase import PhaseScan, error_curve, estimate_phase, scan_phase
from .window import check_window, window_error

__all__ = [
    "absolute_error",
    "squared_error",
    "register_metric",
    "get_metric",
    "available_metrics",
    "check_window",
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
    "to_phase",
    "parse_pitch",
    "format_pitch",
    "frequency_to_pitch",
    "pitch_to_frequency",
]
