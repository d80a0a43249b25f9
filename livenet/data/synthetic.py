"""Small synthetic datasets for demos and tests."""

from __future__ import annotations

import numpy as np

from ..core.types import Dataset


def make_xor() -> Dataset:
    """The four XOR points with their labels."""

    X = np.array([[0, 0], [0, 1], [1, 0], [1, 1]], dtype=np.float64)
    y = np.array([[0], [1], [1], [0]], dtype=np.float64)
    return Dataset(X=X, y=y)


def make_blobs(n: int = 200, n_features: int = 2, seed: int = 0, spread: float = 1.0) -> Dataset:
    """Two Gaussian clusters, shuffled, labelled 0 and 1."""

    rng = np.random.default_rng(seed)
    m0 = np.full(n_features, -1.0)
    m1 = np.full(n_features, 1.0)
    X0 = rng.normal(m0, spread, size=(n // 2, n_features))
    X1 = rng.normal(m1, spread, size=(n - n // 2, n_features))
    X = np.vstack([X0, X1])
    y = np.concatenate([np.zeros(X0.shape[0]), np.ones(X1.shape[0])]).reshape(-1, 1)
    idx = rng.permutation(n)
    return Dataset(X=X[idx], y=y[idx])


__all__ = ["make_xor", "make_blobs"]
