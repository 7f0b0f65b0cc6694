"""Pointwise error metrics and their registry."""

from __future__ import annotations

from typing import Callable, Dict, List

import numpy as np

ErrorMetric = Callable[[np.ndarray, np.ndarray], np.ndarray]

_registry: Dict[str, ErrorMetric] = {}


def register_metric(name: str, metric: ErrorMetric) -> None:
    """Register ``metric`` under ``name`` in the global registry."""
    if not callable(metric):
        raise TypeError("metric must be callable")
    _registry[name] = metric


def get_metric(name: str) -> ErrorMetric:
    """Retrieve a metric by ``name``."""
    try:
        return _registry[name]
    except KeyError:
        raise KeyError(f"unknown error metric {name!r}; available: {available_metrics()}") from None


def available_metrics() -> List[str]:
    """Return the list of registered metric names."""
    return list(_registry)


def absolute_error(a, b):
    """Return ``|a - b|``.

    Inputs are promoted to ``int64`` before subtracting so signed samples
    never wrap around.  Scalars give a Python ``int``; arrays give an array.
    """
    d = np.abs(np.asarray(a, dtype=np.int64) - np.asarray(b, dtype=np.int64))
    return int(d) if d.ndim == 0 else d


def squared_error(a, b):
    """Return ``(a - b) ** 2`` with the same promotion as :func:`absolute_error`."""
    d = np.asarray(a, dtype=np.int64) - np.asarray(b, dtype=np.int64)
    sq = d * d
    return int(sq) if sq.ndim == 0 else sq


register_metric("absolute", absolute_error)
register_metric("squared", squared_error)
