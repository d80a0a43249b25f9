"""Headless loss-chart export."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


def export_loss_chart(
    loss_history: Sequence[float],
    path: str | Path,
    *,
    title: str = "Training Loss",
) -> Path:
    """Render ``loss_history`` against epoch and save it to ``path``."""

    if not loss_history:
        raise ValueError("loss history is empty; nothing to plot")
    import matplotlib

    matplotlib.use("Agg", force=True)
    import matplotlib.pyplot as plt  # imported lazily for headless safety

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig, ax = plt.subplots()
    ax.plot(range(len(loss_history)), list(loss_history))
    ax.set_xlabel("Epoch")
    ax.set_ylabel("Loss")
    ax.set_title(title)
    fig.savefig(path)
    plt.close(fig)
    logger.info("loss chart written to %s", path)
    return path


__all__ = ["export_loss_chart"]
