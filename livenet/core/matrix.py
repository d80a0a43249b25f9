"""Dense float64 matrix primitives used by the forward/backward pass.

Every function returns a fresh array; inputs are never mutated or aliased.
"""

from __future__ import annotations

from typing import Callable

import numpy as np

from .errors import ShapeMismatch
from .types import Array


def as_matrix(values) -> Array:
    """Return ``values`` as a new 2-D float64 array."""

    matrix = np.array(values, dtype=np.float64)
    if matrix.ndim == 0:
        return matrix.reshape(1, 1)
    if matrix.ndim == 1:
        return matrix.reshape(1, -1)
    if matrix.ndim != 2:
        raise ShapeMismatch(f"expected a 2-D matrix, got {matrix.ndim} dimensions")
    return matrix


def dot(a: Array, b: Array) -> Array:
    if a.shape[1] != b.shape[0]:
        raise ShapeMismatch(f"cannot multiply {a.shape} by {b.shape}")
    return a @ b


def transpose(a: Array) -> Array:
    return a.T.copy()


def apply(fn: Callable[[Array], Array], a: Array) -> Array:
    """Map ``fn`` elementwise; ``fn`` must be a vectorised NumPy callable."""

    return np.asarray(fn(a), dtype=np.float64).copy()


def _check_row(a: Array, row: Array) -> None:
    if row.ndim != 2 or row.shape[0] != 1 or row.shape[1] != a.shape[1]:
        raise ShapeMismatch(f"cannot broadcast row {row.shape} over {a.shape}")


def add_row(a: Array, row: Array) -> Array:
    _check_row(a, row)
    return a + row


def sub_row(a: Array, row: Array) -> Array:
    _check_row(a, row)
    return a - row


def sum_axis0(a: Array) -> Array:
    """Column sums as a ``1 x k`` row."""

    return a.sum(axis=0, keepdims=True)


def mean(a: Array) -> float:
    return float(np.mean(a))


__all__ = [
    "as_matrix",
    "dot",
    "transpose",
    "apply",
    "add_row",
    "sub_row",
    "sum_axis0",
    "mean",
]
