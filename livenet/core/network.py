"""Two-layer network parameters and the full-batch forward/backward pass."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

import numpy as np

from . import matrix as mx
from .activations import relu, relu_deriv, sigmoid
from .errors import ShapeMismatch
from .losses import binary_cross_entropy
from .types import Array, Gradients, PassResult, ShapeMap

PARAM_NAMES = ("W1", "b1", "W2", "b2")
INIT_SCALE = 0.05


@dataclass
class NetworkParameters:
    """Weights ``W1 (f x h)``, ``W2 (h x 1)`` and biases ``b1 (1 x h)``, ``b2 (1 x 1)``."""

    W1: Array
    b1: Array
    W2: Array
    b2: Array

    def __post_init__(self) -> None:
        f, h = self.W1.shape
        expected = {"W1": (f, h), "b1": (1, h), "W2": (h, 1), "b2": (1, 1)}
        actual = self.shapes()
        if actual != expected:
            raise ShapeMismatch(f"inconsistent parameter shapes: {actual}")

    @classmethod
    def initialise(
        cls,
        n_features: int,
        hidden_size: int,
        rng: np.random.Generator,
        scale: float = INIT_SCALE,
    ) -> "NetworkParameters":
        """Scaled standard-normal weights and zero biases.

        The small ``scale`` keeps initial predictions near 0.5.
        """

        return cls(
            W1=rng.standard_normal((n_features, hidden_size)) * scale,
            b1=np.zeros((1, hidden_size)),
            W2=rng.standard_normal((hidden_size, 1)) * scale,
            b2=np.zeros((1, 1)),
        )

    @property
    def n_features(self) -> int:
        return int(self.W1.shape[0])

    @property
    def hidden_size(self) -> int:
        return int(self.W1.shape[1])

    def shapes(self) -> ShapeMap:
        return {name: tuple(getattr(self, name).shape) for name in PARAM_NAMES}

    def apply_gradients(self, grads: Mapping[str, Array], learning_rate: float) -> None:
        """Plain gradient descent step, in place."""

        for name in PARAM_NAMES:
            param = getattr(self, name)
            grad = grads[name]
            if grad.shape != param.shape:
                raise ShapeMismatch(f"gradient {name} has shape {grad.shape}, expected {param.shape}")
            param -= learning_rate * grad

    def copy(self) -> "NetworkParameters":
        return NetworkParameters(*(getattr(self, name).copy() for name in PARAM_NAMES))


@dataclass(frozen=True)
class ForwardCache:
    """Intermediate activations kept for the backward pass."""

    Z1: Array
    A1: Array
    Z2: Array
    Y_pred: Array


def forward(X: Array, params: NetworkParameters) -> ForwardCache:
    Z1 = mx.add_row(mx.dot(X, params.W1), params.b1)
    A1 = mx.apply(relu, Z1)
    Z2 = mx.add_row(mx.dot(A1, params.W2), params.b2)
    Y_pred = mx.apply(sigmoid, Z2)
    return ForwardCache(Z1=Z1, A1=A1, Z2=Z2, Y_pred=Y_pred)


def backward(X: Array, y_true: Array, params: NetworkParameters, cache: ForwardCache) -> Gradients:
    n = X.shape[0]
    dZ2 = cache.Y_pred - y_true
    dW2 = mx.dot(mx.transpose(cache.A1), dZ2) / n
    db2 = mx.sum_axis0(dZ2) / n
    dA1 = mx.dot(dZ2, mx.transpose(params.W2))
    dZ1 = dA1 * mx.apply(relu_deriv, cache.Z1)
    dW1 = mx.dot(mx.transpose(X), dZ1) / n
    db1 = mx.sum_axis0(dZ1) / n
    return {"W1": dW1, "b1": db1, "W2": dW2, "b2": db2}


def forward_backward(X: Array, y_true: Array, params: NetworkParameters) -> PassResult:
    """Loss, predictions and gradients for one full-batch step."""

    if y_true.shape != (X.shape[0], 1):
        raise ShapeMismatch(f"labels {y_true.shape} do not match {X.shape[0]} samples")
    cache = forward(X, params)
    loss = binary_cross_entropy(cache.Y_pred, y_true)
    grads = backward(X, y_true, params, cache)
    return PassResult(loss=loss, predictions=cache.Y_pred, grads=grads)


def predict(X: Array, params: NetworkParameters, threshold: float = 0.5) -> Array:
    return (forward(X, params).Y_pred >= threshold).astype(np.float64)


__all__ = [
    "PARAM_NAMES",
    "INIT_SCALE",
    "NetworkParameters",
    "ForwardCache",
    "forward",
    "backward",
    "forward_backward",
    "predict",
]
