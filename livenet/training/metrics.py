"""Accuracy helpers for the trainer and the progress viewer."""

from __future__ import annotations

import math

import numpy as np

from ..core.types import Array

ACCURACY_UNKNOWN = -1.0
MATCH_TOLERANCE = 1e-6


def accuracy(y_pred: Array, y_true: Array, threshold: float = 0.5) -> float:
    """Percentage of thresholded predictions matching ``y_true``."""

    if y_true.size == 0:
        return 0.0
    labels = (y_pred >= threshold).astype(np.float64)
    hits = np.abs(labels - y_true) < MATCH_TOLERANCE
    return float(np.mean(hits) * 100.0)


def is_unknown(value: float) -> bool:
    return value < 0.0


def estimate_accuracy(loss: float) -> float:
    """Rough, display-only accuracy derived from the loss.

    ``exp(-loss)`` is the geometric-mean probability assigned to the true
    labels; it is mapped onto ``[0, 100]``. This is not a measured value and
    must never be published as one.
    """

    if not math.isfinite(loss) or loss < 0.0:
        return 0.0
    return float(min(100.0, max(0.0, math.exp(-loss) * 100.0)))


__all__ = [
    "ACCURACY_UNKNOWN",
    "MATCH_TOLERANCE",
    "accuracy",
    "is_unknown",
    "estimate_accuracy",
]
