import time

import pytest

from livenet.core.errors import InvalidConfiguration, NumericDivergence
from livenet.core.types import Dataset, NetworkConfig
from livenet.data import make_blobs, make_xor
from livenet.training.progress import ControlState, InvalidTransition
from livenet.training.trainer import Trainer
from livenet.viewer import TrainingSession, render_status


def _wait_for_epochs(session, count, timeout=10.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if session.read_progress().epochs_published >= count:
            return
        time.sleep(0.005)
    pytest.fail(f"fewer than {count} epochs published within {timeout}s")


def _slow_session():
    # Each epoch sleeps 10 ms after publishing.
    return TrainingSession(Trainer(yield_seconds=0.01, seed=0))


def test_confirmed_stop_completes_within_one_epoch():
    session = _slow_session()
    config = NetworkConfig(epochs=100_000, hidden_size=16, learning_rate=0.01)
    session.request_start(config, make_blobs(n=2000, n_features=8, seed=0))
    _wait_for_epochs(session, 3)

    session.request_stop()
    assert session.read_progress().state is ControlState.STOP_CONFIRM_PENDING
    session.confirm_stop()
    published = session.read_progress().epochs_published
    stopped_at = time.monotonic()

    assert session.wait(timeout=5.0)
    elapsed = time.monotonic() - stopped_at
    snap = session.read_progress()
    assert snap.state is ControlState.COMPLETED
    assert snap.succeeded
    assert snap.epochs_published <= published + 1
    assert elapsed < 2.0
    assert session.result.stopped_early
    assert session.result.epochs_completed == snap.epochs_published
    assert len(snap.loss_history) == len(snap.accuracy_history)


def test_cancelled_stop_keeps_training():
    session = _slow_session()
    session.request_start(NetworkConfig(epochs=40, hidden_size=4, learning_rate=0.1), make_xor())
    _wait_for_epochs(session, 2)
    session.request_stop()
    session.cancel_stop()
    assert session.wait(timeout=10.0)
    snap = session.read_progress()
    assert snap.epochs_published == 40
    assert not session.result.stopped_early


def test_start_is_rejected_while_running_and_allowed_after_completion():
    session = _slow_session()
    session.request_start(NetworkConfig(epochs=100_000, hidden_size=4, learning_rate=0.1), make_xor())
    _wait_for_epochs(session, 1)
    with pytest.raises(RuntimeError):
        session.request_start(NetworkConfig(epochs=5), make_xor())
    session.request_stop()
    session.confirm_stop()
    assert session.wait(timeout=5.0)

    session.request_start(NetworkConfig(epochs=5, hidden_size=4, learning_rate=0.1), make_xor())
    assert session.wait(timeout=10.0)
    snap = session.read_progress()
    assert snap.epochs_published == 5
    assert snap.succeeded


def test_invalid_start_raises_before_any_thread():
    session = TrainingSession(Trainer(yield_seconds=0.0))
    with pytest.raises(InvalidConfiguration):
        session.request_start(NetworkConfig(epochs=0), make_xor())
    assert not session.running
    assert session.read_progress().state is ControlState.IDLE


def test_stop_after_completion_is_an_invalid_transition():
    session = TrainingSession(Trainer(yield_seconds=0.0))
    session.request_start(NetworkConfig(epochs=3, hidden_size=4, learning_rate=0.1), make_xor())
    assert session.wait(timeout=10.0)
    with pytest.raises(InvalidTransition):
        session.request_stop()


def test_worker_failure_is_reported_not_swallowed():
    import numpy as np

    bad = Dataset(X=np.array([[np.nan], [1.0]]), y=np.array([[0.0], [1.0]]))
    session = TrainingSession(Trainer(yield_seconds=0.0))
    session.request_start(NetworkConfig(epochs=5, hidden_size=2, learning_rate=0.1), bad)
    assert session.wait(timeout=10.0)
    assert isinstance(session.error, NumericDivergence)
    assert session.result is None
    snap = session.read_progress()
    assert snap.failed
    assert render_status(snap).startswith("FAILED")


def test_render_status_marks_estimates():
    session = TrainingSession(Trainer(yield_seconds=0.0, log_interval=1000))
    assert "waiting" in render_status(session.read_progress())
    session.request_start(NetworkConfig(epochs=3, hidden_size=4, learning_rate=0.1), make_xor())
    assert session.wait(timeout=10.0)
    line = render_status(session.read_progress(), total_epochs=3)
    assert "epoch 3/3" in line
    assert "completed" in line
    assert "~" not in line


def test_stop_immediately_after_start_is_honoured():
    session = _slow_session()
    session.request_start(NetworkConfig(epochs=100_000, hidden_size=4, learning_rate=0.1), make_xor())
    assert session.read_progress().state is ControlState.RUNNING
    session.request_stop()
    session.confirm_stop()
    assert session.wait(timeout=5.0)
    snap = session.read_progress()
    assert snap.state is ControlState.COMPLETED
    assert snap.succeeded
    assert snap.epochs_published == 1
    assert session.result.stopped_early
