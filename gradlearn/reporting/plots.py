"""Cost-curve figure for a finished training run.

Batch gradient descent records one cost per iteration, stochastic gradient
descent one mean minibatch cost per epoch, so the x-axis unit follows the
optimiser that produced the history.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from ..optim.grad_desc import StochasticGD

logger = logging.getLogger(__name__)

PLOT_FILENAME = "loss.png"


def step_unit(optimizer) -> str:
    """``"Epoch"`` for :class:`StochasticGD`, ``"Iteration"`` otherwise."""

    return "Epoch" if isinstance(optimizer, StochasticGD) else "Iteration"


class PlotAdapter:
    """Buffer ``cost`` records and render them to ``loss.png`` on close."""

    def __init__(
        self,
        run_dir: str | Path,
        enable_plots: bool = False,
        x_label: str = "Iteration",
        title: str = "Training cost",
    ):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self.x_label = x_label
        self.title = title
        self._costs: List[Tuple[int, float]] = []

    @classmethod
    def for_optimizer(cls, run_dir: str | Path, optimizer, enable_plots: bool = False):
        name = type(optimizer).__name__
        lr = getattr(optimizer, "learning_rate", None)
        title = f"{name} cost (lr={lr})" if lr is not None else f"{name} cost"
        return cls(run_dir, enable_plots=enable_plots, x_label=step_unit(optimizer), title=title)

    def on_step(self, step: int, metrics) -> None:
        if self.enable_plots:
            self._costs.append((step, float(metrics["cost"])))

    def close(self) -> Path | None:
        """Write the figure and return its path; ``None`` when disabled or empty."""

        if not self.enable_plots or not self._costs:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        steps = [step for step, _ in self._costs]
        costs = [cost for _, cost in self._costs]
        fig, ax = plt.subplots()
        ax.plot(steps, costs, marker="." if len(costs) <= 50 else None)
        # Cross entropy and squared error are positive; log scale shows the tail.
        if all(cost > 0 for cost in costs):
            ax.set_yscale("log")
        ax.annotate(
            f"{costs[-1]:.4g}",
            xy=(steps[-1], costs[-1]),
            xytext=(-30, 10),
            textcoords="offset points",
        )
        ax.set_xlabel(self.x_label)
        ax.set_ylabel("Cost")
        ax.set_title(self.title)
        self.run_dir.mkdir(parents=True, exist_ok=True)
        plot_path = self.run_dir / PLOT_FILENAME
        fig.savefig(plot_path)
        plt.close(fig)
        logger.debug("wrote %d-%s cost curve to %s", len(costs), self.x_label.lower(), plot_path)
        return plot_path


__all__ = ["PLOT_FILENAME", "PlotAdapter", "step_unit"]
