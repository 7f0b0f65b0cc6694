"""Candidate phase scan.

The scan walks the candidate phases in increasing order and keeps the
smallest window error seen so far.  That error is passed to every later
window evaluation as its early-exit bound, so the bound only ever tightens
and later candidates are rejected after fewer terms.  The scan must stay
sequential for that reason.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np

from ..config import Settings
from ..diagnostics import EvaluationCounter
from ..types import PhaseRange, as_buffer
from .metric import ErrorMetric, get_metric
from .window import _accumulate, check_window

logger = logging.getLogger(__name__)


@dataclass
class PhaseScan:
    """Result of scanning one candidate range.

    Attributes
    ----------
    phase:
        Candidate with the smallest window error.  The earliest candidate
        wins ties.
    error:
        Window error of ``phase``.  Exact, since the seed evaluation is
        bounded only by ``search.error_max`` and every later winner finished
        below the running minimum.
    evaluations:
        Number of metric evaluations performed by the scan.
    """

    phase: int
    error: int
    evaluations: int


def _resolve(settings: Settings | None, start, end, window, metric):
    if settings is None:
        settings = Settings()
    search = settings.search
    if start is None:
        start = search.phase_min
    if end is None:
        end = search.phase_max
    if window is None:
        window = search.window
    if metric is None:
        metric = search.metric
    fn: ErrorMetric = get_metric(metric) if isinstance(metric, str) else metric
    return settings, start, end, window, fn


def scan_phase(
    buffer: Any,
    offset: int = 0,
    start: int | None = None,
    end: int | None = None,
    *,
    settings: Settings | None = None,
    window: int | None = None,
    metric: str | ErrorMetric | None = None,
    prune: bool | None = None,
    seed_index: str | None = None,
    counter: EvaluationCounter | None = None,
) -> PhaseScan:
    """Scan candidate phases ``[start, end)`` at ``offset`` and return the best.

    Parameters
    ----------
    buffer:
        Samples to analyse.
    offset:
        Buffer index where every compared window begins.
    start, end:
        Candidate range; defaults to ``[phase_min, phase_max)``.
    settings:
        Optional :class:`~periodscan.config.Settings` providing defaults.
    window, metric:
        Overrides for the window width and the error metric.
    prune:
        Pass the running minimum to each evaluation as its early-exit bound.
        Disabling it only costs time; the result is unchanged.
    seed_index:
        ``"start"`` seeds the best candidate with ``start``.  ``"zero"``
        seeds it with ``0`` and returns ``0`` when no later candidate beats
        ``start``, reproducing the historical behaviour.
    counter:
        Optional counter receiving the number of metric evaluations.

    Raises
    ------
    InvalidRangeError
        If ``start >= end``.
    OutOfRangeError
        If the window of any candidate would leave the buffer.  Checked
        before the first sample is read.
    """

    settings, start, end, window, fn = _resolve(settings, start, end, window, metric)
    search = settings.search
    if prune is None:
        prune = search.prune
    if seed_index is None:
        seed_index = search.seed_index
    if seed_index not in ("start", "zero"):
        raise ValueError(f"seed_index must be 'start' or 'zero', got {seed_index!r}")
    candidates = PhaseRange(start, end)

    buf = as_buffer(buffer, sample_bits=settings.source.sample_bits)
    check_window(len(buf), offset, candidates.start, window)
    check_window(len(buf), offset, candidates.last, window)

    data = buf.samples
    no_limit = search.error_max
    block = search.block

    min_error, evaluations = _accumulate(data, offset, start, no_limit, window, fn, block)
    min_index = start if seed_index == "start" else 0
    for i in range(start + 1, end):
        bound = min_error if prune else no_limit
        current, n = _accumulate(data, offset, i, bound, window, fn, block)
        evaluations += n
        if current < min_error:
            min_error = current
            min_index = i

    logger.debug(
        "offset=%d range=[%d, %d) phase=%d min_error=%d evaluations=%d",
        offset,
        start,
        end,
        min_index,
        min_error,
        evaluations,
    )
    if counter is not None:
        counter.add(evaluations)
    return PhaseScan(phase=min_index, error=min_error, evaluations=evaluations)


def estimate_phase(
    buffer: Any,
    offset: int = 0,
    start: int | None = None,
    end: int | None = None,
    **kwargs: Any,
) -> int:
    """Return the phase in ``[start, end)`` with the smallest window error.

    Keyword arguments are forwarded to :func:`scan_phase`.
    """

    return scan_phase(buffer, offset, start, end, **kwargs).phase


def error_curve(
    buffer: Any,
    offset: int = 0,
    start: int | None = None,
    end: int | None = None,
    *,
    settings: Settings | None = None,
    window: int | None = None,
    metric: str | ErrorMetric | None = None,
) -> np.ndarray:
    """Return the exact window error of every candidate in ``[start, end)``.

    Index ``k`` of the result holds the error of phase ``start + k``.
    """

    settings, start, end, window, fn = _resolve(settings, start, end, window, metric)
    candidates = PhaseRange(start, end)
    buf = as_buffer(buffer, sample_bits=settings.source.sample_bits)
    check_window(len(buf), offset, candidates.start, window)
    check_window(len(buf), offset, candidates.last, window)

    block = settings.search.block
    out = np.empty(candidates.width, dtype=np.int64)
    for k, phase in enumerate(range(start, end)):
        out[k], _ = _accumulate(buf.samples, offset, phase, None, window, fn, block)
    return out
