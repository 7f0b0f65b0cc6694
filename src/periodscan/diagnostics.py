"""Diagnostic counters and reporters.

The search never depends on these objects for its result.  Callers pass an
:class:`EvaluationCounter` to tally inner-loop work and a :class:`Reporter`
to receive per-offset progress.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import List, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@dataclass
class EvaluationCounter:
    """Running count of error metric evaluations."""

    count: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def add(self, n: int) -> None:
        with self._lock:
            self.count += n

    def merge(self, other: "EvaluationCounter") -> None:
        self.add(other.count)


@runtime_checkable
class Reporter(Protocol):
    """Receiver for optional progress values emitted by the search."""

    def offset_phase(self, offset: int, phase: int, total: int) -> None:
        """Called once per offset with its phase and the running phase sum."""

    def evaluations(self, count: int) -> None:
        """Called once with the total number of metric evaluations."""


class NullReporter:
    """Reporter that discards everything."""

    def offset_phase(self, offset: int, phase: int, total: int) -> None:
        pass

    def evaluations(self, count: int) -> None:
        pass


class LoggingReporter:
    """Reporter that writes progress to a :class:`logging.Logger`."""

    def __init__(self, log: logging.Logger | None = None, level: int = logging.INFO):
        self.log = log or logger
        self.level = level

    def offset_phase(self, offset: int, phase: int, total: int) -> None:
        self.log.log(self.level, "offset: %d, phase: %d, sum: %d", offset, phase, total)

    def evaluations(self, count: int) -> None:
        self.log.log(self.level, "window error loops: %d", count)


@dataclass
class TraceReporter:
    """Reporter that records every value it receives."""

    phases: List[tuple[int, int, int]] = field(default_factory=list)
    counts: List[int] = field(default_factory=list)

    def offset_phase(self, offset: int, phase: int, total: int) -> None:
        self.phases.append((offset, phase, total))

    def evaluations(self, count: int) -> None:
        self.counts.append(count)
