"""Plotting helpers for periodscan."""

from .plot_curve import plot_error_curve

__all__ = ["plot_error_curve"]
