"""Core numerical primitives for LiveNet."""

from . import activations, errors, matrix, network, types

__all__ = ["activations", "errors", "matrix", "network", "types"]
