"""Plot the window error of every candidate phase."""

from __future__ import annotations

from pathlib import Path
from typing import Sequence

import matplotlib.pyplot as plt
import numpy as np

# Base style configuration for error curve plots.  Overridden per call via
# ``style`` in :func:`plot_error_curve`.
BASE_STYLE = {
    "figure.figsize": (10, 4),
    "axes.grid": True,
    "grid.linestyle": "--",
    "grid.alpha": 0.5,
    "lines.linewidth": 1.2,
}


def plot_error_curve(
    errors: Sequence[int] | np.ndarray,
    start: int,
    *,
    best: int | None = None,
    title: str = "Window error",
    save: str | Path | None = None,
    show: bool = False,
    style: dict | None = None,
) -> plt.Figure:
    """Plot ``errors`` against phase ``start + k`` and mark ``best``.

    The figure is written to ``save`` when given and shown only when
    ``show`` is set.
    """

    rc = BASE_STYLE.copy()
    if style:
        rc.update(style)

    errors = np.asarray(errors)
    phases = np.arange(start, start + errors.size)
    with plt.rc_context(rc):
        fig, ax = plt.subplots()
        ax.plot(phases, errors, label="error")
        if best is not None:
            ax.axvline(best, color="tab:red", linestyle=":", label=f"phase {best}")
        ax.set_title(title)
        ax.set_xlabel("Phase (samples)")
        ax.set_ylabel("Error")
        ax.legend()
        if save:
            fig.savefig(save, bbox_inches="tight")
        if show:
            plt.show()
    return fig
