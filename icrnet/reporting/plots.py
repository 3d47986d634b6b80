"""Training-curve figure written next to the metrics files."""

from __future__ import annotations

from pathlib import Path
from typing import List, Mapping, Optional


class PlotAdapter:
    """Step callback that charts windowed error and running accuracy.

    Nothing is recorded unless ``enable_plots`` is set, so the adapter can sit
    in the callback list of every run.  :meth:`close` renders the figure with
    the Agg backend and returns its path.
    """

    def __init__(
        self,
        run_dir: str | Path,
        enable_plots: bool = False,
        *,
        filename: str = "error.png",
        title: str = "Training error",
    ):
        self.enable_plots = enable_plots
        self.path = Path(run_dir) / filename
        self.title = title
        self.samples: List[int] = []
        self.losses: List[float] = []
        self.accuracies: List[Optional[float]] = []

    def on_step(self, step: int, metrics: Mapping[str, float]) -> None:
        if not self.enable_plots:
            return
        self.samples.append(int(step))
        self.losses.append(float(metrics.get("loss", 0.0)))
        accuracy = metrics.get("accuracy")
        self.accuracies.append(None if accuracy is None else float(accuracy))

    def close(self) -> Path | None:
        if not self.enable_plots or not self.samples:
            return None
        import matplotlib

        matplotlib.use("Agg", force=True)
        import matplotlib.pyplot as plt  # imported lazily for headless safety

        fig, error_ax = plt.subplots(figsize=(7, 4))
        lines = error_ax.plot(self.samples, self.losses, color="tab:red", label="squared error")
        error_ax.set_xlabel("Samples seen")
        error_ax.set_ylabel("Squared error (window mean)")

        tracked = [(s, a) for s, a in zip(self.samples, self.accuracies) if a is not None]
        if tracked:
            acc_ax = error_ax.twinx()
            steps, accuracies = zip(*tracked)
            lines += acc_ax.plot(steps, accuracies, color="tab:blue", label="running accuracy")
            acc_ax.set_ylabel("Running accuracy")
            acc_ax.set_ylim(0.0, 1.0)

        error_ax.legend(lines, [line.get_label() for line in lines], loc="center right")
        error_ax.set_title(self.title)
        fig.tight_layout()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(self.path)
        plt.close(fig)
        return self.path

    __call__ = on_step
