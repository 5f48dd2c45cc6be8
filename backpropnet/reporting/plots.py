"""Optional cost/accuracy figure for a training run (matplotlib, ``Agg``)."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List


class PlotAdapter:
    """Trainer callback that records the mini-batch cost and test accuracy.

    Nothing is recorded while disabled. :meth:`close` renders ``cost.png`` in
    ``run_dir``: the per-batch quadratic cost, plus a second panel with the
    accuracy after each pass when the run was scored.
    """

    filename = "cost.png"

    def __init__(self, run_dir: str | Path, enable_plots: bool = False):
        self.enable_plots = enable_plots
        self.run_dir = Path(run_dir)
        self._cost: Dict[int, float] = {}
        self._accuracy: Dict[int, float] = {}
        if enable_plots:
            self.run_dir.mkdir(parents=True, exist_ok=True)

    def on_step(self, step: int, metrics) -> None:
        if self.enable_plots:
            self._cost[step] = float(metrics.get("loss", 0.0))

    def on_epoch(self, epoch: int, metrics) -> None:
        if self.enable_plots and "accuracy" in metrics:
            self._accuracy[epoch] = float(metrics["accuracy"])

    def close(self) -> str | None:
        if not (self.enable_plots and self._cost):
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt

        panels = 2 if self._accuracy else 1
        fig, axes = plt.subplots(panels, 1, squeeze=False, figsize=(6, 3 * panels))
        cost_ax = axes[0][0]
        cost_ax.plot(list(self._cost), list(self._cost.values()), linewidth=0.8)
        cost_ax.set_xlabel("Mini-batch")
        cost_ax.set_ylabel("Quadratic cost")
        if self._accuracy:
            acc_ax = axes[1][0]
            epochs: List[int] = list(self._accuracy)
            acc_ax.plot(epochs, list(self._accuracy.values()), marker="o")
            acc_ax.set_xlabel("Pass")
            acc_ax.set_ylabel("Test accuracy")
            acc_ax.set_ylim(0.0, 1.05)
        fig.tight_layout()
        target = self.run_dir / self.filename
        fig.savefig(target)
        plt.close(fig)
        return str(target)
