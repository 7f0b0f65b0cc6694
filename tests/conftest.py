import os

import numpy as np
import pytest

from periodscan.config import PHASE_MAX, PHASE_MIN, Settings
from periodscan.ingest import tiled_pattern

WINDOW = PHASE_MAX - PHASE_MIN


@pytest.fixture
def settings(monkeypatch):
    for key in list(os.environ):
        if key.startswith("PERIODSCAN_"):
            monkeypatch.delenv(key)
    return Settings()


@pytest.fixture
def tiled():
    """Random 700-sample pattern repeated long enough for offsets up to 300."""
    return tiled_pattern(700, 300 + PHASE_MAX + WINDOW, amplitude=100, seed=0)


@pytest.fixture
def noise():
    rng = np.random.default_rng(1234)
    return rng.integers(-128, 128, size=2400)
