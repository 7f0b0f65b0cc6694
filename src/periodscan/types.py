"""Common type helpers for periodscan.

This module defines the lightweight containers exchanged between the
search components: the read-only :class:`SampleBuffer` and the
:class:`PhaseRange` describing a candidate scan.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np

from .errors import InvalidRangeError, SampleSourceError


def sample_limits(sample_bits: int) -> tuple[int, int]:
    """Return the inclusive ``(low, high)`` range of a signed sample."""

    half = 1 << (sample_bits - 1)
    return -half, half - 1


@dataclass(frozen=True)
class PhaseRange:
    """Half-open range ``[start, end)`` of candidate phases."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidRangeError(self.start, self.end)

    @property
    def width(self) -> int:
        """Return the number of candidates covered by the range."""

        return self.end - self.start

    @property
    def last(self) -> int:
        return self.end - 1


class SampleBuffer:
    """Fixed-length, read-only sequence of signed integer samples.

    Parameters
    ----------
    samples:
        One-dimensional sequence of integer amplitudes.  Floating point input
        is accepted only when every value is integral.
    sample_bits:
        Width of a signed sample.  Values outside
        ``[-2**(bits-1), 2**(bits-1) - 1]`` are rejected.

    Notes
    -----
    The data is copied into a non-writeable ``int64`` array, so arithmetic on
    slices never overflows and the buffer can be shared between threads.
    """

    def __init__(self, samples: Sequence[int] | np.ndarray, *, sample_bits: int = 8):
        arr = np.asarray(samples)
        if arr.ndim != 1:
            raise SampleSourceError(f"samples must be one-dimensional, got shape {arr.shape}")
        if arr.size and not np.issubdtype(arr.dtype, np.integer):
            if not np.issubdtype(arr.dtype, np.number) or not np.all(np.mod(arr, 1) == 0):
                raise SampleSourceError("samples must be integers")
        data = np.array(arr, dtype=np.int64)
        low, high = sample_limits(sample_bits)
        if data.size and (data.min() < low or data.max() > high):
            raise SampleSourceError(
                f"samples must lie in [{low}, {high}] for {sample_bits}-bit audio, "
                f"got [{data.min()}, {data.max()}]"
            )
        data.setflags(write=False)
        self._data = data
        self.sample_bits = sample_bits

    @property
    def samples(self) -> np.ndarray:
        """Read-only view of the underlying samples."""

        return self._data

    def __len__(self) -> int:
        return int(self._data.size)

    def __getitem__(self, index: Any) -> Any:
        return self._data[index]

    def __repr__(self) -> str:
        return f"SampleBuffer(len={len(self)}, sample_bits={self.sample_bits})"


def as_buffer(data: Any, *, sample_bits: int = 8) -> SampleBuffer:
    """Coerce ``data`` into a :class:`SampleBuffer`.

    ``data`` may already be a buffer, an object exposing ``read()`` such as a
    :class:`~periodscan.ingest.SampleSource`, or any one-dimensional sequence.
    """

    if isinstance(data, SampleBuffer):
        return data
    if hasattr(data, "read"):
        bits = getattr(data, "sample_bits", sample_bits)
        return SampleBuffer(data.read(), sample_bits=bits)
    return SampleBuffer(data, sample_bits=sample_bits)
