"""Activation utilities for LiveNet."""

from __future__ import annotations

import numpy as np

from .types import Array


def relu(x: Array) -> Array:
    """Return the ReLU activation."""

    return np.maximum(x, 0.0)


def relu_deriv(x: Array) -> Array:
    """Sub-gradient of ReLU; zero at the origin."""

    return (x > 0).astype(np.float64)


def sigmoid(x: Array) -> Array:
    # Split by sign so ``exp`` never overflows for large |x|.
    x = np.asarray(x, dtype=np.float64)
    out = np.empty_like(x)
    pos = x >= 0
    out[pos] = 1.0 / (1.0 + np.exp(-x[pos]))
    exp_x = np.exp(x[~pos])
    out[~pos] = exp_x / (1.0 + exp_x)
    return out
