"""Command line entry point: train a LiveNet model and watch it live."""

from __future__ import annotations

import argparse
import json
import logging
import sys
import time
from pathlib import Path
from typing import Iterable

from livenet import config as cfg
from livenet.core.errors import DataLoadError, InvalidConfiguration
from livenet.core.types import NetworkConfig
from livenet.data import load_csv_dataset, make_xor
from livenet.reporting import CsvSink, JsonlSink, export_loss_chart
from livenet.training.progress import ControlState, InvalidTransition
from livenet.training.trainer import DEFAULT_LOG_INTERVAL, Trainer
from livenet.viewer import TrainingSession, render_status

logger = logging.getLogger("livenet.cli")


def parse_args(argv: Iterable[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--preset",
        choices=sorted(cfg.presets().keys()),
        default="default",
        help="Preset configuration to start from",
    )
    parser.add_argument("--config", type=Path, help="Optional JSON/YAML config override")
    parser.add_argument("--csv-path", type=Path, help="CSV dataset; omit for the XOR demo")
    parser.add_argument("--target-col", help="Label column (defaults to the last column)")
    parser.add_argument("--epochs", type=int, help="Override the number of epochs")
    parser.add_argument("--hidden-size", type=int, help="Override the hidden layer width")
    parser.add_argument("--learning-rate", type=float, help="Override the learning rate")
    parser.add_argument(
        "--log-interval",
        type=int,
        default=DEFAULT_LOG_INTERVAL,
        help="Epochs between measured accuracy values",
    )
    parser.add_argument("--seed", type=int, help="Seed for weight initialisation")
    parser.add_argument(
        "--clamp",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Clamp settings into their recommended ranges",
    )
    parser.add_argument("--metrics-jsonl", type=Path, help="Write epoch metrics as JSONL")
    parser.add_argument("--metrics-csv", type=Path, help="Write epoch metrics as CSV")
    parser.add_argument("--plot", type=Path, help="Export the loss chart to this image")
    parser.add_argument(
        "--poll-interval",
        type=float,
        default=0.1,
        help="Seconds between progress renders",
    )
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")
    parser.add_argument(
        "--list-presets", action="store_true", help="List available presets and exit"
    )
    return parser.parse_args(argv)


def resolve_config(args: argparse.Namespace) -> NetworkConfig:
    config = cfg.load_preset(args.preset)
    if args.config:
        config = cfg.load_config(args.config, base=config)
    overrides = {
        "epochs": args.epochs,
        "hidden_size": args.hidden_size,
        "learning_rate": args.learning_rate,
    }
    config = config.replace(**{k: v for k, v in overrides.items() if v is not None})
    if args.clamp:
        config = cfg.clamp_config(config)
    return config


def _stop(session: TrainingSession) -> None:
    # A run may complete between the interrupt and the intent.
    try:
        if session.progress.state is ControlState.RUNNING:
            session.request_stop()
        session.confirm_stop()
    except InvalidTransition as exc:
        logger.info("stop ignored: %s", exc)


def watch(session: TrainingSession, total_epochs: int, poll_interval: float) -> None:
    """Render progress until the worker finishes; Ctrl-C stops the run."""

    last_line = ""
    while True:
        try:
            finished = session.wait(poll_interval)
        except KeyboardInterrupt:
            print("\nstop requested; finishing current epoch", file=sys.stderr)
            _stop(session)
            continue
        line = render_status(session.read_progress(), total_epochs)
        if line != last_line:
            print(line, flush=True)
            last_line = line
        if finished:
            return


def main(argv: Iterable[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.list_presets:
        for name in sorted(cfg.presets().keys()):
            print(name)
        raise SystemExit(0)

    try:
        config = resolve_config(args)
        dataset = (
            load_csv_dataset(args.csv_path, args.target_col) if args.csv_path else make_xor()
        )
    except (DataLoadError, InvalidConfiguration) as exc:
        raise SystemExit(f"error: {exc}") from None

    callbacks = []
    if args.metrics_jsonl:
        callbacks.append(JsonlSink(args.metrics_jsonl))
    if args.metrics_csv:
        callbacks.append(CsvSink(args.metrics_csv))

    try:
        trainer = Trainer(log_interval=args.log_interval, seed=args.seed, callbacks=callbacks)
        session = TrainingSession(trainer)
        session.request_start(config, dataset)
    except InvalidConfiguration as exc:
        raise SystemExit(f"error: {exc}") from None

    started = time.perf_counter()
    watch(session, config.epochs, args.poll_interval)
    snapshot = session.read_progress()

    if snapshot.failed:
        raise SystemExit(1)

    if args.plot:
        try:
            export_loss_chart(snapshot.loss_history, args.plot)
        except (OSError, ValueError) as exc:
            logger.warning("could not export loss chart: %s", exc)

    result = session.result
    payload = result.to_dict() if result is not None else {}
    payload["config"] = config.to_dict()
    payload["seconds"] = round(time.perf_counter() - started, 3)
    if args.plot:
        payload["plot"] = str(args.plot)
    print(json.dumps(payload, sort_keys=True))


if __name__ == "__main__":
    main()
