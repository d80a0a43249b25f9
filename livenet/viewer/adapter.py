"""Presentation-side handle on a trainer running in a worker thread."""

from __future__ import annotations

import logging
import threading
from typing import Optional

from ..core.network import NetworkParameters
from ..core.types import Dataset, NetworkConfig, RunResult
from ..training.progress import ProgressSnapshot, TrainingProgress
from ..training.trainer import Trainer

logger = logging.getLogger(__name__)


class TrainingSession:
    """Start, poll and stop a :class:`Trainer` from a viewer loop.

    ``request_start`` returns immediately; the viewer then calls
    :meth:`read_progress` once per frame. Stopping is a two-step intent:
    :meth:`request_stop` asks, :meth:`confirm_stop` or :meth:`cancel_stop`
    answers.
    """

    def __init__(self, trainer: Trainer | None = None) -> None:
        self.trainer = trainer or Trainer()
        self._thread: Optional[threading.Thread] = None
        self._result: Optional[RunResult] = None
        self._error: Optional[BaseException] = None

    @property
    def progress(self) -> TrainingProgress:
        return self.trainer.progress

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def result(self) -> Optional[RunResult]:
        return self._result

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def request_start(self, config: NetworkConfig, dataset: Dataset) -> None:
        """Enter ``RUNNING`` on the caller's thread, then train on a daemon thread."""

        if self.running:
            raise RuntimeError("a training run is already in progress")
        config, params = self.trainer.begin(config, dataset)
        self._result = None
        self._error = None
        self._thread = threading.Thread(
            target=self._worker,
            args=(config, dataset, params),
            name="livenet-trainer",
            daemon=True,
        )
        self._thread.start()

    def _worker(self, config: NetworkConfig, dataset: Dataset, params: NetworkParameters) -> None:
        try:
            self._result = self.trainer.run(config, dataset, params)
        except Exception as exc:  # reported through progress and ``error``
            logger.exception("training thread failed")
            self._error = exc

    def request_stop(self) -> None:
        self.progress.request_stop()

    def confirm_stop(self) -> None:
        self.progress.confirm_stop()

    def cancel_stop(self) -> None:
        self.progress.cancel_stop()

    def read_progress(self) -> ProgressSnapshot:
        return self.progress.snapshot()

    def wait(self, timeout: float | None = None) -> bool:
        """Join the worker; return ``True`` when it has finished."""

        if self._thread is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()


__all__ = ["TrainingSession"]
