"""Named presets and file-based configuration for training runs."""

from __future__ import annotations

import json
import logging
from dataclasses import fields
from pathlib import Path
from typing import Dict, Mapping

import yaml

from .core.errors import InvalidConfiguration
from .core.types import NetworkConfig

logger = logging.getLogger(__name__)

_PRESETS: Dict[str, Mapping[str, object]] = {
    "default": {"epochs": 1000, "hidden_size": 16, "learning_rate": 0.01},
    "xor-demo": {"epochs": 500, "hidden_size": 8, "learning_rate": 0.1},
    "quick": {"epochs": 100, "hidden_size": 4, "learning_rate": 0.05},
}

# Recommended operating ranges; callers clamp before ``Trainer.start``.
EPOCH_RANGE = (100, 5000)
HIDDEN_RANGE = (4, 128)
LEARNING_RATE_RANGE = (0.0001, 0.1)


def presets() -> Mapping[str, Mapping[str, object]]:
    return dict(_PRESETS)


def load_preset(name: str) -> NetworkConfig:
    try:
        return from_mapping(_PRESETS[name])
    except KeyError as exc:
        available = ", ".join(sorted(_PRESETS))
        raise InvalidConfiguration(f"Unknown preset {name!r}. Available presets: {available}") from exc


def from_mapping(values: Mapping[str, object], base: NetworkConfig | None = None) -> NetworkConfig:
    """Build a config from ``values``, falling back to ``base`` for missing keys."""

    known = {f.name for f in fields(NetworkConfig)}
    unknown = sorted(set(values) - set(known))
    if unknown:
        raise InvalidConfiguration(f"Unknown configuration keys: {', '.join(unknown)}")
    base = base or NetworkConfig()
    try:
        return base.replace(
            epochs=int(values.get("epochs", base.epochs)),
            hidden_size=int(values.get("hidden_size", base.hidden_size)),
            learning_rate=float(values.get("learning_rate", base.learning_rate)),
        )
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"Invalid configuration value: {exc}") from exc


def load_config(path: str | Path, base: NetworkConfig | None = None) -> NetworkConfig:
    """Read a JSON or YAML file and merge it over ``base``."""

    path = Path(path)
    text = path.read_text()
    if path.suffix in {".yml", ".yaml"}:
        payload = yaml.safe_load(text)
    else:
        payload = json.loads(text)
    if payload is None:
        payload = {}
    if not isinstance(payload, Mapping):
        raise InvalidConfiguration(f"{path} must contain a mapping of settings")
    return from_mapping(payload, base)


def _clamp(value, bounds):
    low, high = bounds
    return min(max(value, low), high)


def clamp_config(config: NetworkConfig) -> NetworkConfig:
    """Clamp every field into its recommended range."""

    clamped = config.replace(
        epochs=int(_clamp(config.epochs, EPOCH_RANGE)),
        hidden_size=int(_clamp(config.hidden_size, HIDDEN_RANGE)),
        learning_rate=float(_clamp(config.learning_rate, LEARNING_RATE_RANGE)),
    )
    if clamped != config:
        logger.warning("configuration clamped from %s to %s", config.to_dict(), clamped.to_dict())
    return clamped


__all__ = [
    "EPOCH_RANGE",
    "HIDDEN_RANGE",
    "LEARNING_RATE_RANGE",
    "presets",
    "load_preset",
    "from_mapping",
    "load_config",
    "clamp_config",
]
