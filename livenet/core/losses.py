"""Binary cross-entropy with clipped probabilities."""

from __future__ import annotations

import numpy as np

from .types import Array

CLIP_EPS = 1e-7


def clip_probabilities(p: Array, eps: float = CLIP_EPS) -> Array:
    return np.clip(p, eps, 1.0 - eps)


def binary_cross_entropy(y_pred: Array, y_true: Array, eps: float = CLIP_EPS) -> float:
    """Mean BCE; predictions are clipped to ``[eps, 1 - eps]`` first."""

    p = clip_probabilities(y_pred, eps)
    y = y_true.astype(np.float64)
    return float(-np.mean(y * np.log(p) + (1.0 - y) * np.log(1.0 - p)))


__all__ = ["CLIP_EPS", "clip_probabilities", "binary_cross_entropy"]
