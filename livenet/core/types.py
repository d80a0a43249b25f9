"""Core typing contracts for LiveNet."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Dict, List, Tuple

import numpy as np

Array = np.ndarray


@dataclass(frozen=True)
class Dataset:
    """Immutable ``(X, y)`` pair produced by a loader.

    ``X`` is ``n x f`` and ``y`` is ``n x 1`` with labels in ``{0.0, 1.0}``.
    Both arrays are stored as read-only float64 copies.
    """

    X: Array
    y: Array

    def __post_init__(self) -> None:
        X = np.array(self.X, dtype=np.float64)
        y = np.array(self.y, dtype=np.float64)
        if y.ndim == 1:
            y = y.reshape(-1, 1)
        if X.ndim == 1:
            X = X.reshape(-1, 1)
        X.setflags(write=False)
        y.setflags(write=False)
        object.__setattr__(self, "X", X)
        object.__setattr__(self, "y", y)

    @property
    def n_samples(self) -> int:
        return int(self.X.shape[0])

    @property
    def n_features(self) -> int:
        return int(self.X.shape[1]) if self.X.ndim == 2 else 0

    def __len__(self) -> int:
        return self.n_samples


@dataclass(frozen=True)
class NetworkConfig:
    """Hyper-parameters read by the trainer at the start of a run."""

    epochs: int = 1000
    hidden_size: int = 16
    learning_rate: float = 0.01

    def replace(self, **changes: object) -> "NetworkConfig":
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


@dataclass(frozen=True)
class EpochMetrics:
    """Per-epoch snapshot; ``accuracy`` may be the unknown sentinel."""

    epoch: int
    loss: float
    accuracy: float

    def as_dict(self) -> Dict[str, float]:
        return {"epoch": self.epoch, "loss": self.loss, "accuracy": self.accuracy}


Gradients = Dict[str, Array]


@dataclass(frozen=True)
class PassResult:
    """Outcome of one full-batch forward/backward pass."""

    loss: float
    predictions: Array
    grads: Gradients


@dataclass(frozen=True)
class RunResult:
    """Summary returned by :meth:`livenet.training.trainer.Trainer.start`."""

    epochs_completed: int
    final_loss: float
    final_accuracy: float
    stopped_early: bool = False
    loss_history: Tuple[float, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, object]:
        return {
            "epochs_completed": self.epochs_completed,
            "final_loss": self.final_loss,
            "final_accuracy": self.final_accuracy,
            "stopped_early": self.stopped_early,
        }


Shape = Tuple[int, int]
ShapeMap = Dict[str, Shape]

__all__: List[str] = [
    "Array",
    "Dataset",
    "NetworkConfig",
    "EpochMetrics",
    "Gradients",
    "PassResult",
    "RunResult",
    "Shape",
    "ShapeMap",
]
