"""LiveNet public API."""

from .config import clamp_config, load_config, load_preset, presets
from .core import activations, matrix, types  # noqa: F401
from .core.errors import (
    DataLoadError,
    InvalidConfiguration,
    LiveNetError,
    NumericDivergence,
    ShapeMismatch,
)
from .core.network import NetworkParameters, forward_backward
from .core.types import Dataset, EpochMetrics, NetworkConfig, RunResult
from .data import load_csv_dataset, make_blobs, make_xor
from .reporting import CsvSink, JsonlSink, export_loss_chart
from .training import ControlState, ProgressSnapshot, Trainer, TrainingProgress
from .viewer import TrainingSession, render_status

__all__ = [
    "activations",
    "matrix",
    "types",
    "DataLoadError",
    "InvalidConfiguration",
    "LiveNetError",
    "NumericDivergence",
    "ShapeMismatch",
    "NetworkParameters",
    "forward_backward",
    "Dataset",
    "EpochMetrics",
    "NetworkConfig",
    "RunResult",
    "load_csv_dataset",
    "make_blobs",
    "make_xor",
    "CsvSink",
    "JsonlSink",
    "export_loss_chart",
    "ControlState",
    "ProgressSnapshot",
    "Trainer",
    "TrainingProgress",
    "TrainingSession",
    "render_status",
    "clamp_config",
    "load_config",
    "load_preset",
    "presets",
]
