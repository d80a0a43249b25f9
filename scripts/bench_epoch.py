"""Measure the wall-clock cost of one training epoch.

A confirmed stop takes effect at the next epoch boundary, so the per-epoch
cost is the stop latency a viewer should expect.
"""

from __future__ import annotations

import argparse
import csv
import json
import sys
import time
from pathlib import Path
from statistics import mean, pstdev


def _fmt_mu_sigma(vals):
    mu = mean(vals)
    sd = pstdev(vals) if len(vals) > 1 else 0.0
    return f"{mu * 1e3:.3f} ± {sd * 1e3:.3f}"


def main():
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))

    from livenet.core.types import NetworkConfig
    from livenet.data import make_blobs
    from livenet.training.trainer import Trainer

    ap = argparse.ArgumentParser(description=__doc__)
    ap.add_argument("--samples", nargs="+", type=int, default=[256, 4096])
    ap.add_argument("--hidden", nargs="+", type=int, default=[8, 64])
    ap.add_argument("--features", type=int, default=8)
    ap.add_argument("--epochs", type=int, default=50)
    ap.add_argument("--seed", type=int, default=0)
    ap.add_argument("--out", type=str, default=".artifacts/bench")
    args = ap.parse_args()

    out = Path(args.out)
    out.mkdir(parents=True, exist_ok=True)
    runs = []
    for n in args.samples:
        dataset = make_blobs(n=n, n_features=args.features, seed=args.seed)
        for hidden in args.hidden:
            stamps = []

            def _stamp(epoch, metrics):
                stamps.append(time.perf_counter())

            trainer = Trainer(yield_seconds=0.0, seed=args.seed, callbacks=[_stamp])
            started = time.perf_counter()
            result = trainer.start(
                NetworkConfig(epochs=args.epochs, hidden_size=hidden, learning_rate=0.01),
                dataset,
            )
            costs = [b - a for a, b in zip([started] + stamps[:-1], stamps)]
            runs.append(
                {
                    "samples": n,
                    "hidden": hidden,
                    "epochs": result.epochs_completed,
                    "epoch_seconds": costs,
                    "final_loss": result.final_loss,
                }
            )
    (out / "results.jsonl").write_text(
        "\n".join(json.dumps(x) for x in runs), encoding="utf-8"
    )

    csv_path = out / "bench_epoch.csv"
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["samples", "hidden", "epochs", "epoch_ms_mu", "epoch_ms_sd", "final_loss"])
        for r in runs:
            costs = r["epoch_seconds"]
            w.writerow(
                [
                    r["samples"],
                    r["hidden"],
                    r["epochs"],
                    f"{mean(costs) * 1e3:.4f}",
                    f"{(pstdev(costs) if len(costs) > 1 else 0.0) * 1e3:.4f}",
                    f"{r['final_loss']:.4f}",
                ]
            )

    md_path = out / "bench_epoch.md"
    lines = ["### Per-epoch cost (full batch, CPU)", ""]
    lines.append(f"- Features: `{args.features}`; Epochs: `{args.epochs}`; Seed: `{args.seed}`")
    lines.append("")
    lines.append("| Samples | Hidden | Epoch ms (μ±σ) | Final Loss |")
    lines.append("|---:|---:|---:|---:|")
    for r in runs:
        lines.append(
            f"| {r['samples']} | {r['hidden']} | {_fmt_mu_sigma(r['epoch_seconds'])} | "
            f"{r['final_loss']:.4f} |"
        )
    md_path.write_text("\n".join(lines), encoding="utf-8")
    print("Wrote:", csv_path, md_path)


if __name__ == "__main__":
    main()
