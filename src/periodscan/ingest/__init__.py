"""Sample sources for periodscan."""

from .sources import ArraySource, SampleSource, load_source, save_samples, tiled_pattern

__all__ = [
    "SampleSource",
    "ArraySource",
    "load_source",
    "save_samples",
    "tiled_pattern",
]
