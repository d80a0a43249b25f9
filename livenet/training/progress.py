"""Lock-gated progress record shared by the trainer and a viewer.

One writer (the training thread) and any number of readers (viewers) touch
``TrainingProgress`` only through its methods, each of which holds a single
``threading.Lock`` for the duration of a copy or append.
"""

from __future__ import annotations

import enum
import threading
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..core.types import EpochMetrics
from .metrics import ACCURACY_UNKNOWN, estimate_accuracy, is_unknown


class ControlState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOP_CONFIRM_PENDING = "stop_confirm_pending"
    STOP_REQUESTED = "stop_requested"
    COMPLETED = "completed"


_TRANSITIONS = {
    "begin": ({ControlState.IDLE, ControlState.COMPLETED}, ControlState.RUNNING),
    "request_stop": ({ControlState.RUNNING}, ControlState.STOP_CONFIRM_PENDING),
    "cancel_stop": ({ControlState.STOP_CONFIRM_PENDING}, ControlState.RUNNING),
    "confirm_stop": ({ControlState.STOP_CONFIRM_PENDING}, ControlState.STOP_REQUESTED),
    "finish": (
        {
            ControlState.RUNNING,
            ControlState.STOP_CONFIRM_PENDING,
            ControlState.STOP_REQUESTED,
        },
        ControlState.COMPLETED,
    ),
    "reset": ({ControlState.IDLE, ControlState.COMPLETED}, ControlState.IDLE),
}

_ACTIVE = {
    ControlState.RUNNING,
    ControlState.STOP_CONFIRM_PENDING,
    ControlState.STOP_REQUESTED,
}


class InvalidTransition(ValueError):
    """An intent is not legal in the current control state."""

    def __init__(self, intent: str, state: ControlState) -> None:
        super().__init__(f"cannot {intent.replace('_', ' ')} while {state.value}")
        self.intent = intent
        self.state = state


@dataclass(frozen=True)
class ProgressSnapshot:
    """Immutable copy of the progress record taken under the lock."""

    epoch: int
    loss: float
    accuracy: float
    loss_history: Tuple[float, ...]
    accuracy_history: Tuple[float, ...]
    state: ControlState
    completed: bool = False
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.completed and self.error is not None

    @property
    def succeeded(self) -> bool:
        return self.completed and self.error is None

    @property
    def epochs_published(self) -> int:
        return len(self.loss_history)

    @property
    def accuracy_is_estimate(self) -> bool:
        return is_unknown(self.accuracy)

    @property
    def display_accuracy(self) -> float:
        """Measured accuracy when known, otherwise a loss-derived estimate."""

        if self.accuracy_is_estimate:
            return estimate_accuracy(self.loss) if self.loss_history else 0.0
        return self.accuracy


class TrainingProgress:
    """Shared training progress plus the control state machine."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._state = ControlState.IDLE
        self._epoch = -1
        self._loss = float("nan")
        self._accuracy = ACCURACY_UNKNOWN
        self._loss_history: List[float] = []
        self._accuracy_history: List[float] = []
        self._completed = False
        self._error: Optional[str] = None

    # ------------------------------------------------------------------
    # Internal helpers; callers must hold ``self._lock``

    def _transition(self, intent: str) -> None:
        allowed, target = _TRANSITIONS[intent]
        if self._state not in allowed:
            raise InvalidTransition(intent, self._state)
        self._state = target

    def _clear(self) -> None:
        self._epoch = -1
        self._loss = float("nan")
        self._accuracy = ACCURACY_UNKNOWN
        self._loss_history = []
        self._accuracy_history = []
        self._completed = False
        self._error = None

    # ------------------------------------------------------------------
    # Writer side

    def begin_run(self) -> None:
        """Enter ``RUNNING`` with empty histories."""

        with self._lock:
            self._transition("begin")
            self._clear()

    def publish(self, metrics: EpochMetrics) -> None:
        with self._lock:
            if self._state not in _ACTIVE:
                raise InvalidTransition("publish", self._state)
            self._epoch = metrics.epoch
            self._loss = metrics.loss
            self._accuracy = metrics.accuracy
            self._loss_history.append(metrics.loss)
            self._accuracy_history.append(metrics.accuracy)

    def finish(self, metrics: Optional[EpochMetrics] = None, error: Optional[str] = None) -> None:
        """Move to ``COMPLETED``; ``metrics`` overrides the headline values only."""

        with self._lock:
            self._transition("finish")
            if metrics is not None:
                self._epoch = metrics.epoch
                self._loss = metrics.loss
                self._accuracy = metrics.accuracy
            self._completed = True
            self._error = error

    # ------------------------------------------------------------------
    # Reader / viewer side

    def request_stop(self) -> None:
        with self._lock:
            self._transition("request_stop")

    def cancel_stop(self) -> None:
        with self._lock:
            self._transition("cancel_stop")

    def confirm_stop(self) -> None:
        with self._lock:
            self._transition("confirm_stop")

    def reset(self) -> None:
        with self._lock:
            self._transition("reset")
            self._clear()

    def stop_requested(self) -> bool:
        with self._lock:
            return self._state is ControlState.STOP_REQUESTED

    @property
    def state(self) -> ControlState:
        with self._lock:
            return self._state

    def snapshot(self) -> ProgressSnapshot:
        with self._lock:
            return ProgressSnapshot(
                epoch=self._epoch,
                loss=self._loss,
                accuracy=self._accuracy,
                loss_history=tuple(self._loss_history),
                accuracy_history=tuple(self._accuracy_history),
                state=self._state,
                completed=self._completed,
                error=self._error,
            )


__all__ = ["ControlState", "InvalidTransition", "ProgressSnapshot", "TrainingProgress"]
