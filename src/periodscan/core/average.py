"""Multi-offset phase averaging."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, List, Sequence

from ..config import Settings
from ..diagnostics import EvaluationCounter, NullReporter, Reporter
from ..errors import EmptyInputError
from ..types import as_buffer
from .phase import PhaseScan, scan_phase

logger = logging.getLogger(__name__)


@dataclass
class PhaseAverage:
    """Per-offset phases and their average.

    Attributes
    ----------
    offsets:
        Offsets that were scanned, in input order.
    phases:
        Phase found at each offset.
    total:
        Sum of ``phases``.
    phase:
        ``total // len(phases)``, the truncated integer average.
    mean:
        ``total / len(phases)`` as a float.
    evaluations:
        Metric evaluations summed over all scans.
    """

    offsets: List[int]
    phases: List[int]
    total: int
    phase: int
    mean: float
    evaluations: int = 0
    scans: List[PhaseScan] = field(default_factory=list, repr=False)


def average_phases(
    buffer: Any,
    offsets: Sequence[int] | None = None,
    *,
    settings: Settings | None = None,
    workers: int | None = None,
    counter: EvaluationCounter | None = None,
    reporter: Reporter | None = None,
    **scan_kwargs: Any,
) -> PhaseAverage:
    """Estimate the phase at every offset and average the results.

    Parameters
    ----------
    buffer:
        Samples to analyse.  Each offset is scanned over
        ``[phase_min, phase_max)``.
    offsets:
        Buffer offsets; defaults to ``settings.average.offsets``.
    settings:
        Optional :class:`~periodscan.config.Settings` providing defaults.
    workers:
        Number of threads scanning offsets concurrently.  Every scan keeps
        its own pruning bound, so the result does not depend on this value.
    counter:
        Optional counter receiving the total number of metric evaluations.
    reporter:
        Receives ``(offset, phase, running_sum)`` for each offset in input
        order, then the total evaluation count.
    scan_kwargs:
        Forwarded to :func:`~periodscan.core.phase.scan_phase`.

    Raises
    ------
    EmptyInputError
        If ``offsets`` is empty.
    """

    if settings is None:
        settings = Settings()
    if offsets is None:
        offsets = settings.average.offsets
    if workers is None:
        workers = settings.average.workers
    if reporter is None:
        reporter = NullReporter()

    offsets = [int(o) for o in offsets]
    if not offsets:
        raise EmptyInputError("at least one offset is required to average phases")

    buf = as_buffer(buffer, sample_bits=settings.source.sample_bits)
    search = settings.search

    def _scan(offset: int) -> PhaseScan:
        return scan_phase(
            buf, offset, search.phase_min, search.phase_max, settings=settings, **scan_kwargs
        )

    if workers > 1 and len(offsets) > 1:
        with ThreadPoolExecutor(max_workers=min(workers, len(offsets))) as pool:
            scans = list(pool.map(_scan, offsets))
    else:
        scans = [_scan(offset) for offset in offsets]

    phases: List[int] = []
    total = 0
    evaluations = 0
    for offset, scan in zip(offsets, scans):
        phases.append(scan.phase)
        total += scan.phase
        evaluations += scan.evaluations
        reporter.offset_phase(offset, scan.phase, total)

    if counter is not None:
        counter.add(evaluations)
    reporter.evaluations(evaluations)

    result = PhaseAverage(
        offsets=offsets,
        phases=phases,
        total=total,
        phase=total // len(phases),
        mean=total / len(phases),
        evaluations=evaluations,
        scans=scans,
    )
    logger.info("averaged %d offsets: phase=%d mean=%.3f", len(offsets), result.phase, result.mean)
    return result


def average_phase(buffer: Any, offsets: Sequence[int] | None = None, **kwargs: Any) -> int:
    """Return the truncated integer average of the per-offset phases."""

    return average_phases(buffer, offsets, **kwargs).phase
