# src/periodscan/ingest/sources.py
"""Sample sources.

A sample source exposes a fixed-length sequence of signed integer samples
through ``read()``.  Files are loaded eagerly:

- ``.npy`` / ``.npz``: a one- or two-dimensional integer array (``.npz``
  uses the ``samples`` entry, or the first array if that is missing);
- ``.csv`` / ``.txt``: one sample per row, optionally several columns;
- ``.wav``: 8-bit unsigned or 16-bit signed PCM.  8-bit data is re-centred
  to the signed range.

Two-dimensional data is reduced to the column selected by ``channel``.
"""

from __future__ import annotations

import wave
import zipfile
from pathlib import Path
from typing import Any, Optional, Protocol, runtime_checkable

import numpy as np

from ..config import Settings
from ..errors import SampleSourceError
from ..types import sample_limits


@runtime_checkable
class SampleSource(Protocol):
    """Fixed-length, read-only sequence of signed samples."""

    sample_bits: int

    def read(self) -> np.ndarray:
        """Return the samples as a one-dimensional integer array."""

    def __len__(self) -> int:
        ...


class ArraySource:
    """In-memory sample source."""

    def __init__(
        self,
        samples: Any,
        *,
        sample_bits: int = 8,
        sample_rate: Optional[int] = None,
        name: str = "<array>",
    ):
        arr = np.asarray(samples)
        if arr.ndim != 1:
            raise SampleSourceError(f"{name}: samples must be one-dimensional, got shape {arr.shape}")
        self._samples = arr
        self.sample_bits = sample_bits
        self.sample_rate = sample_rate
        self.name = name

    def read(self) -> np.ndarray:
        return self._samples

    def __len__(self) -> int:
        return int(self._samples.size)

    def __repr__(self) -> str:
        return f"ArraySource({self.name!r}, len={len(self)}, sample_bits={self.sample_bits})"


def _select_channel(data: np.ndarray, channel: int, path: Path) -> np.ndarray:
    if data.ndim == 1:
        return data
    if data.ndim != 2:
        raise SampleSourceError(f"{path}: expected 1-D or 2-D samples, got shape {data.shape}")
    if channel >= data.shape[1]:
        raise SampleSourceError(f"{path}: channel {channel} not present ({data.shape[1]} channels)")
    return data[:, channel]


def _read_wav(path: Path, channel: int) -> tuple[np.ndarray, int, int]:
    with wave.open(str(path), "rb") as fh:
        width = fh.getsampwidth()
        channels = fh.getnchannels()
        rate = fh.getframerate()
        raw = fh.readframes(fh.getnframes())
    if width == 1:
        data = np.frombuffer(raw, dtype=np.uint8).astype(np.int64) - 128
    elif width == 2:
        data = np.frombuffer(raw, dtype="<i2").astype(np.int64)
    else:
        raise SampleSourceError(f"{path}: unsupported sample width of {width} bytes")
    data = data.reshape(-1, channels)
    return _select_channel(data, channel, path), width * 8, rate


def _read_numpy(path: Path, suffix: str) -> tuple[np.ndarray, Optional[int]]:
    if suffix == ".npy":
        return np.load(path), None
    with np.load(path) as archive:
        if not archive.files:
            raise SampleSourceError(f"{path}: archive holds no arrays")
        key = "samples" if "samples" in archive.files else archive.files[0]
        rate = int(archive["sample_rate"]) if "sample_rate" in archive.files else None
        return np.asarray(archive[key]), rate


def load_source(
    path: str | Path,
    *,
    sample_bits: int | None = None,
    channel: int | None = None,
    settings: Settings | None = None,
) -> ArraySource:
    """Load samples from ``path`` into an :class:`ArraySource`.

    ``sample_bits`` and ``channel`` default to ``settings.source``.  WAV files
    carry their own sample width, which takes precedence.
    """

    if settings is None:
        settings = Settings()
    if sample_bits is None:
        sample_bits = settings.source.sample_bits
    if channel is None:
        channel = settings.source.channel

    path = Path(path)
    if not path.exists():
        raise SampleSourceError(f"{path}: file not found")
    suffix = path.suffix.lower()
    rate: Optional[int] = None

    if suffix == ".wav":
        data, sample_bits, rate = _read_wav(path, channel)
    elif suffix in {".npy", ".npz"}:
        try:
            data, rate = _read_numpy(path, suffix)
        except SampleSourceError:
            raise
        except (OSError, ValueError, EOFError, zipfile.BadZipFile) as exc:
            raise SampleSourceError(f"{path}: {exc}") from exc
        data = _select_channel(data, channel, path)
    elif suffix in {".csv", ".txt"}:
        delimiter = "," if suffix == ".csv" else None
        try:
            data = np.loadtxt(path, delimiter=delimiter, ndmin=1)
        except ValueError as exc:
            raise SampleSourceError(f"{path}: {exc}") from exc
        data = _select_channel(data, channel, path)
    else:
        raise SampleSourceError(f"{path}: unsupported sample file type {suffix!r}")

    low, high = sample_limits(sample_bits)
    if data.size and (data.min() < low or data.max() > high):
        raise SampleSourceError(f"{path}: samples exceed the {sample_bits}-bit range [{low}, {high}]")
    return ArraySource(data, sample_bits=sample_bits, sample_rate=rate, name=str(path))


def tiled_pattern(
    period: int,
    length: int,
    *,
    amplitude: int = 100,
    seed: int = 0,
) -> np.ndarray:
    """Return ``length`` samples repeating a random pattern of ``period`` samples.

    The pattern is drawn uniformly from ``[-amplitude, amplitude]``, so the
    result is exactly periodic with period ``period`` and, with overwhelming
    probability, with no shorter period.
    """

    if period <= 0:
        raise ValueError("period must be positive")
    if length < 0:
        raise ValueError("length must not be negative")
    rng = np.random.default_rng(seed)
    pattern = rng.integers(-amplitude, amplitude + 1, size=period)
    return np.resize(pattern, length).astype(np.int64)


def save_samples(path: str | Path, samples: Any, *, sample_rate: Optional[int] = None) -> Path:
    """Write ``samples`` to ``.npy``, ``.npz`` or ``.csv``."""

    path = Path(path)
    arr = np.asarray(samples, dtype=np.int64)
    suffix = path.suffix.lower()
    if suffix == ".npy":
        np.save(path, arr)
    elif suffix == ".npz":
        extra = {} if sample_rate is None else {"sample_rate": np.int64(sample_rate)}
        np.savez(path, samples=arr, **extra)
    elif suffix == ".csv":
        np.savetxt(path, arr, delimiter=",", fmt="%d")
    else:
        raise SampleSourceError(f"{path}: unsupported sample file type {suffix!r}")
    return path
