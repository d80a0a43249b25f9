"""Training loop, progress state and metrics."""

from .metrics import ACCURACY_UNKNOWN, accuracy, estimate_accuracy, is_unknown
from .progress import ControlState, InvalidTransition, ProgressSnapshot, TrainingProgress
from .trainer import Trainer

__all__ = [
    "ACCURACY_UNKNOWN",
    "accuracy",
    "estimate_accuracy",
    "is_unknown",
    "ControlState",
    "InvalidTransition",
    "ProgressSnapshot",
    "TrainingProgress",
    "Trainer",
]
