import logging

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pytest  # noqa: E402

from periodscan.config import Settings  # noqa: E402
from periodscan.diagnostics import EvaluationCounter, LoggingReporter, NullReporter, Reporter, TraceReporter  # noqa: E402
from periodscan.utils.logging import configure_logging, get_logger  # noqa: E402
from periodscan.viz import plot_error_curve  # noqa: E402


def test_logging():
    logger = get_logger("test")
    logger2 = get_logger("test")
    assert logger is logger2
    assert len(logger.handlers) == 1
    logger.debug("debug message")


def test_configure_logging_levels():
    settings = Settings()
    settings.logging.level = "WARNING"
    assert configure_logging(settings).level == logging.WARNING
    assert configure_logging(settings, verbose=1).level == logging.INFO
    assert configure_logging(settings, verbose=5).level == logging.DEBUG
    settings.logging.level = "LOUD"
    with pytest.raises(ValueError):
        configure_logging(settings)


def test_counter_merge():
    a = EvaluationCounter()
    b = EvaluationCounter(5)
    a.add(3)
    a.merge(b)
    assert a.count == 8


def test_reporters(caplog):
    for reporter in (NullReporter(), TraceReporter(), LoggingReporter()):
        assert isinstance(reporter, Reporter)

    reporter = LoggingReporter(logging.getLogger("periodscan.test"))
    with caplog.at_level(logging.INFO, logger="periodscan.test"):
        reporter.offset_phase(100, 700, 1400)
        reporter.evaluations(42)
    assert "offset: 100, phase: 700, sum: 1400" in caplog.text
    assert "window error loops: 42" in caplog.text


def test_plot_error_curve(tmp_path):
    out = tmp_path / "curve.png"
    fig = plot_error_curve([5, 3, 0, 4], 10, best=12, save=out)
    assert out.exists()
    ax = fig.axes[0]
    assert list(ax.lines[0].get_xdata()) == [10, 11, 12, 13]
    plt.close(fig)
