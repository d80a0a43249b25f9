"""Exception taxonomy for LiveNet."""

from __future__ import annotations


class LiveNetError(Exception):
    """Base class for every error raised by the engine."""


class DataLoadError(LiveNetError):
    """The dataset is missing, empty or malformed."""


class ShapeMismatch(LiveNetError, ValueError):
    """Matrix operands do not have compatible shapes."""


class InvalidConfiguration(LiveNetError, ValueError):
    """A training configuration was rejected before training began."""


class NumericDivergence(LiveNetError, ArithmeticError):
    """The loss became non-finite during a run."""

    def __init__(self, epoch: int, loss: float) -> None:
        super().__init__(f"loss diverged to {loss!r} at epoch {epoch}")
        self.epoch = epoch
        self.loss = loss


__all__ = [
    "LiveNetError",
    "DataLoadError",
    "ShapeMismatch",
    "InvalidConfiguration",
    "NumericDivergence",
]
