import numpy as np
import pytest

from periodscan.core import absolute_error, available_metrics, get_metric, register_metric, squared_error
from periodscan.core import metric


def test_absolute_error_symmetric_over_int8():
    a = np.arange(-128, 128)[:, None]
    b = np.arange(-128, 128)[None, :]
    ab = absolute_error(a, b)
    ba = absolute_error(b, a)
    np.testing.assert_array_equal(ab, ba)
    np.testing.assert_array_equal(ab, np.abs(a.astype(np.int64) - b))
    assert np.all(np.diag(ab) == 0)
    assert ab.min() >= 0


def test_absolute_error_no_wraparound_for_int8_input():
    a = np.array([-128, -100], dtype=np.int8)
    b = np.array([127, 100], dtype=np.int8)
    np.testing.assert_array_equal(absolute_error(a, b), [255, 200])


def test_scalar_results_are_ints():
    assert absolute_error(-100, 100) == 200
    assert isinstance(absolute_error(3, 3), int)
    assert squared_error(3, -2) == 25


def test_registry(monkeypatch):
    assert get_metric("absolute") is absolute_error
    assert get_metric("squared") is squared_error
    assert {"absolute", "squared"} <= set(available_metrics())

    monkeypatch.setattr(metric, "_registry", dict(metric._registry))
    register_metric("half", lambda a, b: absolute_error(a, b) // 2)
    assert get_metric("half")(10, 0) == 5

    with pytest.raises(KeyError):
        get_metric("nope")
    with pytest.raises(TypeError):
        register_metric("bad", 3)


def test_registered_metrics_do_not_leak():
    assert "half" not in available_metrics()
