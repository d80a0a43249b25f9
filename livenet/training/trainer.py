"""Full-batch training loop with cooperative cancellation."""

from __future__ import annotations

import logging
import math
import time
from typing import Dict, Sequence

import numpy as np

from ..core.errors import InvalidConfiguration, NumericDivergence
from ..core.network import NetworkParameters, forward_backward
from ..core.types import Array, Dataset, EpochMetrics, NetworkConfig, RunResult
from .metrics import ACCURACY_UNKNOWN, accuracy, is_unknown
from .progress import ControlState, TrainingProgress

logger = logging.getLogger(__name__)

DEFAULT_LOG_INTERVAL = 100


def validate(config: NetworkConfig, dataset: Dataset) -> None:
    """Raise :class:`InvalidConfiguration` when a run must not begin."""

    if int(config.epochs) < 1:
        raise InvalidConfiguration(f"epochs must be >= 1, got {config.epochs}")
    if int(config.hidden_size) < 1:
        raise InvalidConfiguration(f"hidden_size must be >= 1, got {config.hidden_size}")
    if not math.isfinite(float(config.learning_rate)):
        raise InvalidConfiguration(f"learning_rate must be finite, got {config.learning_rate}")
    if dataset.n_samples == 0 or dataset.n_features == 0:
        raise InvalidConfiguration("dataset is empty")
    if dataset.X.ndim != 2 or dataset.y.shape != (dataset.n_samples, 1):
        raise InvalidConfiguration(
            f"features {dataset.X.shape} and labels {dataset.y.shape} disagree"
        )


class Trainer:
    """Drive epochs, publish per-epoch metrics and honour stop requests."""

    def __init__(
        self,
        progress: TrainingProgress | None = None,
        *,
        config: NetworkConfig | None = None,
        log_interval: int = DEFAULT_LOG_INTERVAL,
        yield_seconds: float = 0.001,
        seed: int | None = None,
        callbacks: Sequence[object] | None = None,
    ) -> None:
        if log_interval < 1:
            raise InvalidConfiguration(f"log_interval must be >= 1, got {log_interval}")
        self.progress = progress or TrainingProgress()
        self.log_interval = int(log_interval)
        self.yield_seconds = float(yield_seconds)
        self.seed = seed
        self.callbacks = list(callbacks or [])
        self._config = config or NetworkConfig()
        self._params: NetworkParameters | None = None

    @property
    def config(self) -> NetworkConfig:
        return self._config

    def update_config(self, **changes: object) -> NetworkConfig:
        """Change hyper-parameters; only legal while the session is idle."""

        state = self.progress.state
        if state is not ControlState.IDLE:
            raise InvalidConfiguration(f"configuration is locked while {state.value}")
        self._config = self._config.replace(**changes)
        return self._config

    @property
    def parameters(self) -> NetworkParameters | None:
        return self._params

    def start(self, config: NetworkConfig | None, dataset: Dataset) -> RunResult:
        """Train to completion or until a confirmed stop is observed.

        Blocks the calling thread. A non-finite loss finishes the run with an
        error marker and re-raises :class:`NumericDivergence`.
        """

        config, params = self.begin(config, dataset)
        return self.run(config, dataset, params)

    def begin(
        self, config: NetworkConfig | None, dataset: Dataset
    ) -> tuple[NetworkConfig, NetworkParameters]:
        """Validate, initialise parameters and enter ``RUNNING``.

        Viewers call this on their own thread and hand :meth:`run` to a
        worker, so stop intents are legal as soon as ``begin`` returns.
        """

        config = config or self._config
        validate(config, dataset)

        rng = np.random.default_rng(self.seed)
        params = NetworkParameters.initialise(dataset.n_features, int(config.hidden_size), rng)
        self.progress.begin_run()
        self._config = config
        self._params = params
        logger.info(
            "training started: %d samples, %d features, epochs=%d hidden=%d lr=%g",
            dataset.n_samples,
            dataset.n_features,
            config.epochs,
            config.hidden_size,
            config.learning_rate,
        )
        return config, params

    def run(self, config: NetworkConfig, dataset: Dataset, params: NetworkParameters) -> RunResult:
        """Execute the epoch loop of a run entered with :meth:`begin`."""

        try:
            return self._run(config, dataset, params)
        except Exception as exc:
            if self.progress.state is not ControlState.COMPLETED:
                self.progress.finish(error=str(exc))
            logger.error("training aborted: %s", exc)
            raise

    # ------------------------------------------------------------------
    # Internal helpers

    def _run(self, config: NetworkConfig, dataset: Dataset, params: NetworkParameters) -> RunResult:
        X, y = dataset.X, dataset.y
        lr = float(config.learning_rate)
        last_epoch = int(config.epochs) - 1
        losses: list[float] = []
        predictions: Array
        stopped_early = False

        for epoch in range(int(config.epochs)):
            result = forward_backward(X, y, params)
            if not math.isfinite(result.loss):
                raise NumericDivergence(epoch, result.loss)
            params.apply_gradients(result.grads, lr)
            predictions = result.predictions
            losses.append(result.loss)

            if epoch % self.log_interval == 0 or epoch == last_epoch:
                acc = accuracy(predictions, y)
            else:
                acc = ACCURACY_UNKNOWN
            metrics = EpochMetrics(epoch=epoch, loss=result.loss, accuracy=acc)
            self.progress.publish(metrics)
            self._emit_epoch(metrics)
            if not is_unknown(acc):
                logger.info("epoch %d loss=%.6f accuracy=%.2f%%", epoch, result.loss, acc)

            if self.yield_seconds > 0:
                time.sleep(self.yield_seconds)
            if self.progress.stop_requested():
                stopped_early = epoch != last_epoch
                logger.info("stop observed after epoch %d", epoch)
                break

        final = EpochMetrics(
            epoch=len(losses) - 1,
            loss=losses[-1],
            accuracy=accuracy(predictions, y),
        )
        self.progress.finish(final)
        logger.info(
            "training completed after %d epochs: loss=%.6f accuracy=%.2f%%",
            len(losses),
            final.loss,
            final.accuracy,
        )
        return RunResult(
            epochs_completed=len(losses),
            final_loss=final.loss,
            final_accuracy=final.accuracy,
            stopped_early=stopped_early,
            loss_history=tuple(losses),
        )

    def _emit_epoch(self, metrics: EpochMetrics) -> None:
        payload: Dict[str, float] = {"loss": metrics.loss}
        if not is_unknown(metrics.accuracy):
            payload["accuracy"] = metrics.accuracy
        for callback in self.callbacks:
            if hasattr(callback, "on_epoch"):
                callback.on_epoch(metrics.epoch, payload)  # type: ignore[attr-defined]
            elif callable(callback):
                callback(metrics.epoch, payload)


__all__ = ["DEFAULT_LOG_INTERVAL", "Trainer", "validate"]
