"""Windowed self-similarity error with early termination.

For a buffer ``x``, an offset ``o`` and a candidate phase ``p`` the window
error is

.. math::

   E(o, p) = \\sum_{i=0}^{W-1} d(x_{o+i}, x_{o+i+p})

where ``d`` is the pointwise error metric and ``W`` the window width.  The
sum is accumulated left to right and stops as soon as it reaches the
caller's ``limit``; the value returned in that case is the prefix sum at the
stopping point and is only meaningful as "not better than ``limit``".

Terms are computed ``block`` samples at a time.  The stopping position inside
a block is located on the cumulative sum, which gives exactly the same result
and evaluation count as a scalar loop.
"""

from __future__ import annotations

from typing import Any

import numpy as np

from ..config import Settings
from ..diagnostics import EvaluationCounter
from ..errors import OutOfRangeError
from ..types import SampleBuffer, as_buffer
from .metric import ErrorMetric, get_metric


def check_window(length: int, offset: int, phase: int, window: int) -> None:
    """Raise :class:`OutOfRangeError` unless ``[offset, offset + phase + window)`` fits."""
    if offset < 0 or phase < 0 or offset + phase + window > length:
        raise OutOfRangeError(offset=offset, phase=phase, window=window, length=length)


def _accumulate(
    data: np.ndarray,
    offset: int,
    phase: int,
    limit: int | None,
    window: int,
    metric: ErrorMetric,
    block: int,
) -> tuple[int, int]:
    """Return ``(error, evaluations)`` for one window without bounds checks.

    A ``limit`` of ``None`` sums the whole window.
    """
    total = 0
    lead = offset
    lag = offset + phase
    for start in range(0, window, block):
        stop = min(start + block, window)
        terms = metric(data[lead + start : lead + stop], data[lag + start : lag + stop])
        partial = np.cumsum(terms) + total
        if limit is None:
            total = int(partial[-1])
            continue
        # partial is non-decreasing, so the first prefix reaching limit is a bisection.
        hit = int(np.searchsorted(partial, limit, side="left"))
        if hit < partial.size:
            return int(partial[hit]), start + hit + 1
        total = int(partial[-1])
    return total, window


def window_error(
    buffer: SampleBuffer | Any,
    offset: int,
    phase: int,
    limit: int | None = None,
    *,
    settings: Settings | None = None,
    window: int | None = None,
    metric: str | ErrorMetric | None = None,
    block: int | None = None,
    counter: EvaluationCounter | None = None,
) -> int:
    """Return the window error of ``buffer`` at ``offset`` for ``phase``.

    Parameters
    ----------
    buffer:
        :class:`~periodscan.types.SampleBuffer`, sample source or sequence.
    offset:
        Index of the first sample of the window.
    phase:
        Candidate period length in samples.
    limit:
        Early-exit bound.  ``None`` uses ``settings.search.error_max``,
        which itself defaults to no bound at all.
    settings:
        Optional :class:`~periodscan.config.Settings` providing defaults.
    window, metric, block:
        Overrides for ``settings.search.window``, ``.metric`` and ``.block``.
    counter:
        Optional :class:`~periodscan.diagnostics.EvaluationCounter` that
        receives the number of metric evaluations performed.

    Returns
    -------
    int
        The exact error when it is below ``limit`` or when there is no
        limit; otherwise a value ``>= limit``.

    Raises
    ------
    OutOfRangeError
        If the window would read outside the buffer.
    """

    if settings is None:
        settings = Settings()
    search = settings.search

    if window is None:
        window = search.window
    if limit is None:
        limit = search.error_max
    if metric is None:
        metric = search.metric
    if block is None:
        block = search.block
    fn = get_metric(metric) if isinstance(metric, str) else metric

    buf = as_buffer(buffer, sample_bits=settings.source.sample_bits)
    check_window(len(buf), offset, phase, window)
    error, count = _accumulate(buf.samples, offset, phase, limit, window, fn, block)
    if counter is not None:
        counter.add(count)
    return error
