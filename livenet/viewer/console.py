"""Plain-text rendering of a progress snapshot."""

from __future__ import annotations

from ..training.progress import ControlState, ProgressSnapshot

_STATE_LABELS = {
    ControlState.IDLE: "idle",
    ControlState.RUNNING: "running",
    ControlState.STOP_CONFIRM_PENDING: "stop? (confirm or cancel)",
    ControlState.STOP_REQUESTED: "stopping",
    ControlState.COMPLETED: "completed",
}


def render_status(snapshot: ProgressSnapshot, total_epochs: int | None = None) -> str:
    if snapshot.failed:
        return f"FAILED after {snapshot.epochs_published} epochs: {snapshot.error}"
    if not snapshot.loss_history:
        return f"[{_STATE_LABELS[snapshot.state]}] waiting for first epoch"
    epoch = f"{snapshot.epoch + 1}"
    if total_epochs:
        epoch = f"{epoch}/{total_epochs}"
    marker = "~" if snapshot.accuracy_is_estimate else ""
    return (
        f"[{_STATE_LABELS[snapshot.state]}] epoch {epoch} "
        f"loss {snapshot.loss:.6f} accuracy {marker}{snapshot.display_accuracy:.2f}%"
    )


__all__ = ["render_status"]
