"""Epoch metric sinks usable as trainer callbacks."""

from __future__ import annotations

import csv
import json
from pathlib import Path
from typing import Mapping

FIELDS = ("epoch", "loss", "accuracy")


class JsonlSink:
    """Append-only JSONL writer for metrics."""

    def __init__(self, path: str | Path, *, run_id: str | None = None) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")
        self.run_id = run_id

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        record: dict = {"epoch": int(epoch)}
        if self.run_id is not None:
            record["run_id"] = self.run_id
        record.update({k: float(v) for k, v in metrics.items() if isinstance(v, (int, float))})
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(record) + "\n")

    __call__ = on_epoch


class CsvSink:
    """Write metrics to CSV with a fixed ``epoch,loss,accuracy`` schema.

    Epochs without a measured accuracy leave the column blank.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text("")

    def on_epoch(self, epoch: int, metrics: Mapping[str, float]) -> None:
        row = {"epoch": int(epoch), "loss": "", "accuracy": ""}
        row.update({k: float(v) for k, v in metrics.items() if k in FIELDS and k != "epoch"})
        with self.path.open("a", encoding="utf-8", newline="") as handle:
            writer = csv.DictWriter(handle, fieldnames=FIELDS)
            if handle.tell() == 0:
                writer.writeheader()
            writer.writerow(row)

    __call__ = on_epoch


__all__ = ["JsonlSink", "CsvSink"]
