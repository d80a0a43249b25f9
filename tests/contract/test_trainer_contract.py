import math

import numpy as np
import pytest

from livenet.core.errors import InvalidConfiguration, NumericDivergence
from livenet.core.types import Dataset, NetworkConfig
from livenet.data import make_blobs, make_xor
from livenet.training.metrics import ACCURACY_UNKNOWN
from livenet.training.progress import ControlState, TrainingProgress
from livenet.training.trainer import Trainer


class _Capture:
    def __init__(self, progress: TrainingProgress | None = None) -> None:
        self.history = []
        self.progress = progress
        self.published_at_epoch = []

    def on_epoch(self, epoch, metrics):
        self.history.append((epoch, dict(metrics)))
        if self.progress is not None:
            self.published_at_epoch.append(self.progress.snapshot().epochs_published)


def test_xor_scenario_publishes_every_epoch():
    trainer = Trainer(yield_seconds=0.0, seed=0)
    config = NetworkConfig(epochs=500, hidden_size=8, learning_rate=0.1)
    result = trainer.start(config, make_xor())

    snap = trainer.progress.snapshot()
    assert result.epochs_completed == 500
    assert snap.epochs_published == 500
    assert len(snap.accuracy_history) == 500
    assert snap.state is ControlState.COMPLETED and snap.succeeded

    assert snap.accuracy_history[499] != ACCURACY_UNKNOWN
    assert 0.0 <= snap.accuracy_history[499] <= 100.0
    assert snap.accuracy_history[0] != ACCURACY_UNKNOWN
    assert snap.accuracy_history[100] != ACCURACY_UNKNOWN
    assert snap.accuracy_history[1] == ACCURACY_UNKNOWN
    assert snap.accuracy_history[250] == ACCURACY_UNKNOWN
    assert 0.0 <= snap.accuracy <= 100.0

    assert all(math.isfinite(v) and v >= 0.0 for v in snap.loss_history)
    assert abs(snap.loss_history[0] - math.log(2.0)) < 0.05
    assert result.loss_history == snap.loss_history


def test_log_interval_controls_accuracy_cadence():
    trainer = Trainer(yield_seconds=0.0, seed=1, log_interval=10)
    trainer.start(NetworkConfig(epochs=25, hidden_size=4, learning_rate=0.1), make_xor())
    history = trainer.progress.snapshot().accuracy_history
    measured = [i for i, acc in enumerate(history) if acc != ACCURACY_UNKNOWN]
    assert measured == [0, 10, 20, 24]


@pytest.mark.parametrize(
    "config",
    [
        NetworkConfig(epochs=0, hidden_size=8, learning_rate=0.1),
        NetworkConfig(epochs=-5, hidden_size=8, learning_rate=0.1),
        NetworkConfig(epochs=10, hidden_size=0, learning_rate=0.1),
    ],
)
def test_invalid_configuration_leaves_state_idle(config):
    trainer = Trainer(yield_seconds=0.0)
    with pytest.raises(InvalidConfiguration):
        trainer.start(config, make_xor())
    snap = trainer.progress.snapshot()
    assert snap.state is ControlState.IDLE
    assert snap.loss_history == ()
    assert trainer.parameters is None


def test_empty_dataset_is_rejected():
    trainer = Trainer(yield_seconds=0.0)
    empty = Dataset(X=np.zeros((0, 2)), y=np.zeros((0, 1)))
    with pytest.raises(InvalidConfiguration):
        trainer.start(NetworkConfig(epochs=10), empty)
    assert trainer.progress.state is ControlState.IDLE


def test_restart_resets_histories_before_first_publish():
    progress = TrainingProgress()
    capture = _Capture(progress)
    trainer = Trainer(progress, yield_seconds=0.0, seed=2, callbacks=[capture])
    trainer.start(NetworkConfig(epochs=30, hidden_size=4, learning_rate=0.05), make_xor())
    assert progress.snapshot().epochs_published == 30

    capture.published_at_epoch.clear()
    trainer.start(NetworkConfig(epochs=12, hidden_size=4, learning_rate=0.05), make_xor())
    assert capture.published_at_epoch[0] == 1
    assert capture.published_at_epoch == list(range(1, 13))
    assert progress.snapshot().epochs_published == 12


def test_callbacks_only_receive_measured_accuracy():
    capture = _Capture()
    trainer = Trainer(yield_seconds=0.0, seed=3, log_interval=5, callbacks=[capture])
    trainer.start(NetworkConfig(epochs=7, hidden_size=4, learning_rate=0.1), make_xor())
    with_accuracy = [epoch for epoch, metrics in capture.history if "accuracy" in metrics]
    assert with_accuracy == [0, 5, 6]
    assert all("loss" in metrics for _, metrics in capture.history)


def test_training_reduces_loss_on_separable_data():
    trainer = Trainer(yield_seconds=0.0, seed=4)
    result = trainer.start(
        NetworkConfig(epochs=1000, hidden_size=8, learning_rate=0.1),
        make_blobs(n=100, n_features=2, seed=0, spread=0.5),
    )
    assert result.final_loss < result.loss_history[0]
    assert result.final_accuracy > 75.0
    assert not result.stopped_early


def test_divergence_finishes_with_error_marker():
    X = np.array([[np.nan, 0.0], [1.0, 1.0]])
    y = np.array([[0.0], [1.0]])
    trainer = Trainer(yield_seconds=0.0, seed=0)
    with pytest.raises(NumericDivergence):
        trainer.start(NetworkConfig(epochs=10, hidden_size=4, learning_rate=0.1), Dataset(X, y))
    snap = trainer.progress.snapshot()
    assert snap.state is ControlState.COMPLETED
    assert snap.failed
    assert "diverged" in snap.error
    assert snap.loss_history == ()

    result = trainer.start(NetworkConfig(epochs=5, hidden_size=4, learning_rate=0.1), make_xor())
    assert result.epochs_completed == 5
    assert trainer.progress.snapshot().succeeded


def test_config_is_locked_outside_idle():
    trainer = Trainer(yield_seconds=0.0)
    updated = trainer.update_config(epochs=20, learning_rate=0.05)
    assert updated.epochs == 20 and trainer.config.learning_rate == 0.05
    trainer.start(None, make_xor())
    assert trainer.progress.snapshot().epochs_published == 20
    with pytest.raises(InvalidConfiguration):
        trainer.update_config(epochs=5)
    trainer.progress.reset()
    trainer.update_config(epochs=5)


@pytest.mark.parametrize("seed", range(10))
def test_initial_predictions_sit_near_one_half(seed):
    trainer = Trainer(yield_seconds=0.0, seed=seed)
    result = trainer.start(NetworkConfig(epochs=1, hidden_size=8, learning_rate=0.1), make_xor())
    assert abs(result.loss_history[0] - math.log(2.0)) < 0.05
